import math
import unittest

import pandas as pd

from sheet_typer.engine import TableState, apply_header_toggle, load
from sheet_typer.frame import column_series, to_dataframe
from sheet_typer.models import DataType, Dataset


class TypedFrameTests(unittest.TestCase):
    def test_header_dataset_converts_numeric_columns(self):
        dataset = Dataset.from_rows(
            [
                ["Name", "Age", "Income"],
                ["Ana", "23", "1,234.5"],
                ["Bea", "31,5", "10.0"],
            ]
        )
        frame = to_dataframe(apply_header_toggle(load(dataset), True))

        self.assertEqual(list(frame.columns), ["Name", "Age", "Income"])
        self.assertEqual(frame["Name"].tolist(), ["Ana", "Bea"])
        self.assertEqual(frame["Age"].tolist(), [23.0, 31.5])
        self.assertEqual(frame["Income"].tolist(), [1234.5, 10.0])
        self.assertEqual(frame["Age"].dtype, "float64")
        self.assertEqual(frame["Name"].dtype, object)

    def test_placeholder_names_without_header(self):
        frame = to_dataframe(load(Dataset.from_rows([["1", "x"], ["2", "y"]])))

        self.assertEqual(list(frame.columns), ["Column 1", "Column 2"])
        self.assertEqual(frame.shape, (2, 2))

    def test_duplicate_header_names_keep_positions(self):
        dataset = Dataset.from_rows([["v", "v"], ["1", "a"]])
        frame = to_dataframe(apply_header_toggle(load(dataset), True))

        self.assertEqual(list(frame.columns), ["v", "v"])
        self.assertEqual(frame.iloc[0, 0], 1.0)
        self.assertEqual(frame.iloc[0, 1], "a")

    def test_rejected_state_cannot_build_frame(self):
        with self.assertRaises(ValueError):
            to_dataframe(load(Dataset.from_rows([["a"]]), had_errors=True))
        with self.assertRaises(ValueError):
            to_dataframe(TableState())

    def test_unparseable_cells_become_nan(self):
        series = column_series(["1,5", "oops"], DataType.NUMBER_EU)

        self.assertEqual(series.iloc[0], 1.5)
        self.assertTrue(math.isnan(series.iloc[1]))

    def test_date_columns_stay_raw(self):
        series = column_series(["2024-01-31"], DataType.DATE_YYYY_MM_DD)

        self.assertEqual(series.tolist(), ["2024-01-31"])

    def test_empty_rows_give_empty_frame(self):
        frame = to_dataframe(apply_header_toggle(load(Dataset.from_rows([["a", "b"]])), True))

        self.assertEqual(list(frame.columns), ["a", "b"])
        self.assertTrue(frame.empty)
        pd.testing.assert_index_equal(frame.index, pd.RangeIndex(0))


if __name__ == "__main__":
    unittest.main()
