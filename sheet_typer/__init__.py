"""Column type inference for delimited text files."""

__version__ = "0.1.0"
