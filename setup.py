from setuptools import setup


setup(
    name="sheet-typer",
    version="0.1.0",
    description="Infer column names and datatypes (text, European and US numbers) of delimited text files",
    packages=["sheet_typer"],
    python_requires=">=3.9",
    install_requires=[
        "pandas",
        "chardet",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "sheet-typer=sheet_typer.cli:main",
        ]
    },
)
