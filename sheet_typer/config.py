"""Profile configuration dataclass"""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

from sheet_typer.engine import DEFAULT_PLACEHOLDER_PREFIX

DEFAULT_CONFIG_PATH = "sheet-typer.json"


@dataclass
class ProfileConfig:
    """Settings for loading and typing one delimited file"""
    header_included: bool = False           # treat row 0 as column names
    delimiter: Optional[str] = None         # None = sniff
    encoding: Optional[str] = None          # None = detect with chardet
    placeholder_prefix: str = DEFAULT_PLACEHOLDER_PREFIX  # "Column" -> "Column 1"

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_dict(cls, data: dict) -> 'ProfileConfig':
        unknown = sorted(set(data) - set(cls.__dataclass_fields__))
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        config = cls(
            header_included=bool(data.get('header_included', False)),
            delimiter=data.get('delimiter'),
            encoding=data.get('encoding'),
            placeholder_prefix=data.get('placeholder_prefix', DEFAULT_PLACEHOLDER_PREFIX),
        )
        if config.delimiter is not None and len(config.delimiter) != 1:
            raise ValueError(f"delimiter must be a single character, got {config.delimiter!r}")
        return config

    @classmethod
    def from_json(cls, json_str: str) -> 'ProfileConfig':
        data = json.loads(json_str)
        if not isinstance(data, dict):
            raise ValueError("Config root must be a JSON object.")
        return cls.from_dict(data)


def load_config(path: "str | Path | None") -> ProfileConfig:
    """Read a config file; no path means defaults."""
    if path is None:
        return ProfileConfig()
    path = Path(path)
    try:
        return ProfileConfig.from_json(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Could not read config {path}: {exc}") from exc


def write_starter_config(path: "str | Path") -> Path:
    path = Path(path)
    if path.exists():
        raise FileExistsError(f"Refusing to overwrite existing config: {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(ProfileConfig().to_json() + "\n", encoding="utf-8")
    return path
