import tempfile
import unittest
from pathlib import Path

from sheet_typer.engine import apply_header_toggle, load
from sheet_typer.errors import LoadError
from sheet_typer.loader import load_rows, tokenize_text
from sheet_typer.models import DataType


def write_file(directory: str, name: str, payload, encoding: str = "utf-8") -> Path:
    path = Path(directory) / name
    if isinstance(payload, bytes):
        path.write_bytes(payload)
    else:
        path.write_text(payload, encoding=encoding)
    return path


class LoaderTests(unittest.TestCase):
    def test_comma_file_loads_clean_rows(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_file(tmpdir, "people.csv", 'Name,Age\nAna,23\nBea,"31,5"\n')
            loaded = load_rows(path)

        self.assertEqual(loaded.delimiter, ",")
        self.assertFalse(loaded.had_errors)
        self.assertEqual(loaded.dataset.rows, (("Name", "Age"), ("Ana", "23"), ("Bea", "31,5")))

        state = apply_header_toggle(load(loaded.dataset, loaded.had_errors), True)
        self.assertEqual([column.datatype for column in state.columns], [DataType.TEXT, DataType.NUMBER_EU])

    def test_semicolon_file_is_sniffed(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_file(tmpdir, "eu.csv", "Name;Amount\nAna;1.234,5\nBea;10,0\nCris;-3\n")
            loaded = load_rows(path)

        self.assertEqual(loaded.delimiter, ";")
        self.assertEqual(loaded.dataset.width, 2)
        self.assertEqual(loaded.dataset.rows[1], ("Ana", "1.234,5"))

    def test_explicit_delimiter_wins(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_file(tmpdir, "pipes.txt", "a|b\n1|2\n")
            loaded = load_rows(path, delimiter="|")

        self.assertEqual(loaded.dataset.rows, (("a", "b"), ("1", "2")))

    def test_tsv_defaults_to_tab(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_file(tmpdir, "data.tsv", "a\tb,c\n1\t2,5\n")
            loaded = load_rows(path)

        self.assertEqual(loaded.delimiter, "\t")
        self.assertEqual(loaded.dataset.rows[1], ("1", "2,5"))

    def test_single_column_falls_back_to_comma(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_file(tmpdir, "notes.csv", "notes\nhello world\n")
            loaded = load_rows(path)

        self.assertEqual(loaded.delimiter, ",")
        self.assertEqual(loaded.dataset.rows, (("notes",), ("hello world",)))

    def test_whitespace_only_rows_are_skipped(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_file(tmpdir, "gaps.csv", "a,b\n\n1,2\n   \n , \n3,4\n")
            loaded = load_rows(path, delimiter=",")

        self.assertFalse(loaded.had_errors)
        self.assertEqual(loaded.dataset.rows, (("a", "b"), ("1", "2"), ("3", "4")))

    def test_field_count_mismatches_are_reported(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_file(tmpdir, "ragged.csv", "a,b\n1\n2,3,4\n5,6\n")
            loaded = load_rows(path, delimiter=",")

        self.assertTrue(loaded.had_errors)
        self.assertEqual([error.code for error in loaded.errors], ["TooFewFields", "TooManyFields"])
        self.assertEqual([error.line for error in loaded.errors], [2, 3])
        self.assertEqual(len(loaded.dataset), 4)

        state = apply_header_toggle(load(loaded.dataset, loaded.had_errors), True)
        self.assertIsNone(state.columns)

    def test_explicit_latin1_encoding(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_file(tmpdir, "latin.csv", "Cidade;Preço\nSão Paulo;1.234,5\n".encode("latin-1"))
            loaded = load_rows(path, delimiter=";", encoding="latin-1")

        self.assertEqual(loaded.encoding, "latin-1")
        self.assertEqual(loaded.dataset.rows, (("Cidade", "Preço"), ("São Paulo", "1.234,5")))

    def test_non_utf8_file_is_decoded_with_warning(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_file(tmpdir, "latin.csv", "Cidade;Preço\nSão Paulo;1.234,5\n".encode("latin-1"))
            loaded = load_rows(path, delimiter=";")

        self.assertEqual(len(loaded.dataset), 2)
        self.assertEqual(loaded.dataset.rows[0][0], "Cidade")
        self.assertEqual(loaded.dataset.rows[1][1], "1.234,5")
        self.assertTrue(any(warning.startswith("Non-UTF-8 encoding detected") for warning in loaded.warnings))

    def test_fallback_warning_counts_lines(self):
        payload = "Cidade;Preço\nSão Paulo;1.234,5\nRio;3,0\nBrasília;2,0\nRecife;4,0\n".encode("latin-1")
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_file(tmpdir, "latin.csv", payload)
            loaded = load_rows(path, delimiter=";")

        self.assertIn("3 lines decoded with a fallback encoding", loaded.warnings)

    def test_utf8_bom_is_stripped(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_file(tmpdir, "bom.csv", "\ufeffa,b\n1,2\n")
            loaded = load_rows(path, delimiter=",")

        self.assertEqual(loaded.dataset.rows[0], ("a", "b"))

    def test_explicit_encoding_failure_raises_load_error(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_file(tmpdir, "bad.csv", b"a,b\n\xff\xfe,1\n")
            with self.assertRaisesRegex(LoadError, "Could not decode"):
                load_rows(path, encoding="utf-8")

    def test_empty_file_raises_load_error(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_file(tmpdir, "empty.csv", "\n  \n")
            with self.assertRaisesRegex(LoadError, "File is empty"):
                load_rows(path)

    def test_missing_file_raises(self):
        with self.assertRaises(FileNotFoundError):
            load_rows("/nonexistent/sheet-typer/missing.csv")


class TokenizeTextTests(unittest.TestCase):
    def test_quoted_delimiters_stay_in_cell(self):
        rows, errors = tokenize_text('x,y\n"1,5","a ""quoted"" word"\n', ",")

        self.assertEqual(errors, [])
        self.assertEqual(rows, [["x", "y"], ["1,5", 'a "quoted" word']])

    def test_bad_quoting_is_reported(self):
        rows, errors = tokenize_text('x,y\n1,"unterminated\n', ",")

        self.assertEqual([error.code for error in errors], ["InvalidQuotes"])
        self.assertEqual(rows, [["x", "y"]])


if __name__ == "__main__":
    unittest.main()
