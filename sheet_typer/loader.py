"""
loader.py: delimited text tokenizer adapter for sheet-typer

Turns a .csv/.tsv/.txt file into a Dataset plus row-level errors. Quoting,
escaping and delimiter sniffing are left to the standard csv module; this
module only decodes bytes, picks the reader settings and records which rows
came out malformed.

Public API:
    loaded = load_rows("path/to/file.csv")
    state  = engine.load(loaded.dataset, loaded.had_errors)
"""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import chardet

from sheet_typer.errors import LoadError
from sheet_typer.models import Dataset

logger = logging.getLogger(__name__)

CANDIDATE_DELIMITERS = ",;\t|"
DEFAULT_DELIMITER = ","
SNIFF_SAMPLE_LINES = 25


@dataclass(frozen=True)
class RowError:
    line: int
    code: str
    message: str

    def to_dict(self) -> dict:
        return {"line": self.line, "code": self.code, "message": self.message}


@dataclass
class LoadedRows:
    dataset: Dataset
    errors: list[RowError] = field(default_factory=list)
    encoding: str = "utf-8"
    delimiter: str = DEFAULT_DELIMITER
    warnings: list[str] = field(default_factory=list)

    @property
    def had_errors(self) -> bool:
        return bool(self.errors)


# ══════════════════════════════════════════════════════════════════════════════
# ENCODING DETECTION
# ══════════════════════════════════════════════════════════════════════════════

def _detect_encoding_info(raw: bytes) -> dict:
    """Detect encoding from raw bytes with chardet."""
    result = chardet.detect(raw)
    detected = result.get("encoding") or "unknown"
    confidence = round(result.get("confidence") or 0.0, 2)
    is_utf8 = detected.upper().replace("-", "") in ("UTF8", "ASCII", "UTF8SIG")
    return {"detected": detected, "confidence": confidence, "is_utf8": is_utf8}


def _read_text_safely(raw: bytes, preferred_encoding: str) -> tuple[str, int]:
    """
    Decode raw bytes line-by-line.

    Strategy per line:
      1. Try UTF-8
      2. Try preferred_encoding (chardet result)
      3. Try latin-1

    Returns the text and the number of lines that were not valid UTF-8.
    Embedded null bytes are stripped.
    """
    decoded_lines: list[str] = []
    fallback_lines = 0
    for raw_line in raw.split(b"\n"):
        decoded: str | None = None
        for enc in ("utf-8", preferred_encoding, "latin-1"):
            if not enc or enc == "unknown":
                continue
            try:
                decoded = raw_line.decode(enc)
                if enc != "utf-8":
                    fallback_lines += 1
                break
            except (LookupError, UnicodeDecodeError):
                continue
        if decoded is None:
            decoded = raw_line.decode("cp1252", errors="replace")
            fallback_lines += 1
        decoded_lines.append(decoded.replace("\x00", ""))
    return "\n".join(decoded_lines).lstrip("\ufeff"), fallback_lines


# ══════════════════════════════════════════════════════════════════════════════
# READER SETTINGS
# ══════════════════════════════════════════════════════════════════════════════

def _sniff_delimiter(text: str) -> str:
    sample_lines = [line for line in text.splitlines() if line.strip()][:SNIFF_SAMPLE_LINES]
    if not sample_lines:
        return DEFAULT_DELIMITER
    try:
        return csv.Sniffer().sniff("\n".join(sample_lines), delimiters=CANDIDATE_DELIMITERS).delimiter
    except csv.Error:
        return DEFAULT_DELIMITER


def _is_blank(row: list[str]) -> bool:
    return not any(cell.strip() for cell in row)


# ══════════════════════════════════════════════════════════════════════════════
# TOKENIZING
# ══════════════════════════════════════════════════════════════════════════════

def tokenize_text(text: str, delimiter: str) -> tuple[list[list[str]], list[RowError]]:
    """Split text into rows, skipping whitespace-only rows.

    Rows whose width differs from the first row are kept and reported; a
    quoting error stops reading since the reader cannot resynchronise.
    """
    rows: list[list[str]] = []
    errors: list[RowError] = []
    reader = csv.reader(io.StringIO(text), delimiter=delimiter, strict=True)
    expected: Optional[int] = None
    try:
        for row in reader:
            if _is_blank(row):
                continue
            if expected is None:
                expected = len(row)
            elif len(row) != expected:
                code = "TooFewFields" if len(row) < expected else "TooManyFields"
                errors.append(
                    RowError(
                        line=reader.line_num,
                        code=code,
                        message=f"Expected {expected} fields but parsed {len(row)}",
                    )
                )
            rows.append(row)
    except csv.Error as exc:
        errors.append(RowError(line=reader.line_num, code="InvalidQuotes", message=str(exc)))
    return rows, errors


# ══════════════════════════════════════════════════════════════════════════════
# PUBLIC API
# ══════════════════════════════════════════════════════════════════════════════

def load_rows(
    path: "str | Path",
    delimiter: Optional[str] = None,
    encoding: Optional[str] = None,
) -> LoadedRows:
    """
    Read a delimited text file into tokenized rows.

    Args:
        path:      Path to the file (str or Path).
        delimiter: Field separator. None = sniff from the first lines.
        encoding:  Text encoding. None = detect with chardet.

    Raises:
        FileNotFoundError  if the file does not exist.
        LoadError          if the file is empty or cannot be decoded.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    raw = path.read_bytes()
    if not raw.strip():
        raise LoadError(f"File is empty: {path}")

    warnings: list[str] = []
    if encoding:
        try:
            text = raw.decode(encoding).lstrip("\ufeff")
        except (LookupError, UnicodeDecodeError) as exc:
            raise LoadError(f"Could not decode {path.name} as {encoding}: {exc}") from exc
        used_encoding = encoding
    else:
        enc_info = _detect_encoding_info(raw)
        used_encoding = enc_info["detected"] if enc_info["detected"] != "unknown" else "utf-8"
        text, fallback_lines = _read_text_safely(raw, used_encoding)
        logger.debug("Detected encoding %s (confidence %s)", used_encoding, enc_info["confidence"])
        if not enc_info["is_utf8"]:
            warnings.append(f"Non-UTF-8 encoding detected: {used_encoding}")
        if fallback_lines:
            warnings.append(f"{fallback_lines} lines decoded with a fallback encoding")

    if path.suffix.lower() == ".tsv" and delimiter is None:
        delimiter = "\t"
    used_delimiter = delimiter or _sniff_delimiter(text)
    logger.debug("Tokenizing %s with delimiter %r", path.name, used_delimiter)

    rows, errors = tokenize_text(text, used_delimiter)
    if errors:
        warnings.append(f"{len(errors)} malformed rows; column types will not be inferred")

    return LoadedRows(
        dataset=Dataset.from_rows(rows),
        errors=errors,
        encoding=used_encoding,
        delimiter=used_delimiter,
        warnings=warnings,
    )
