"""
--------------------------------------------------------------------------------
<cycmeco project>
src/cycmeco/tests/test_residual.py

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import logging

import pandas as pd
import pytest

from cycmeco.processors.residual import append_unclassified


def _abund() -> pd.DataFrame:
    return pd.DataFrame({"S1": [500, 300], "S2": [450, 500]}, index=["amoA", "nosZ"])


def test_unclassified_row_is_total_minus_column_sum() -> None:
    out = append_unclassified(_abund(), 1000)
    assert list(out.index) == ["amoA", "nosZ", "unclassified"]
    assert out.loc["unclassified"].tolist() == pytest.approx([200, 50])
    # original rows untouched; every column now sums to the total
    pd.testing.assert_frame_equal(out.loc[["amoA", "nosZ"]], _abund(), check_dtype=False)
    assert out.sum(axis=0).tolist() == pytest.approx([1000, 1000])


def test_negative_residual_passed_through_with_warning(caplog) -> None:
    with caplog.at_level(logging.WARNING):
        out = append_unclassified(_abund(), 900)
    assert out.loc["unclassified", "S2"] == -50
    assert out.loc["unclassified", "S1"] == 100
    assert "negative" in caplog.text


def test_input_not_mutated() -> None:
    df = _abund()
    append_unclassified(df, 1000)
    assert "unclassified" not in df.index
