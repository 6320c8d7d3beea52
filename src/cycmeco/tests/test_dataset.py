"""
--------------------------------------------------------------------------------
<cycmeco project>
src/cycmeco/tests/test_dataset.py

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from cycmeco.core.dataset import Dataset
from cycmeco.core.errors import DatasetError


def _tables():
    otu = pd.DataFrame(
        {"S1": [5, 0, 1, 2], "S2": [3, 0, 0, 1], "S3": [0, 0, 0, 0]},
        index=["amoA", "nosZ", "mystery", "unclassified"],
    )
    tax = pd.DataFrame(
        {"Pathway": ["Nitrification", "Denitrification", "unclassified"], "Gene": ["amoA", "nosZ", "unclassified"]},
        index=["amoA", "nosZ", "unclassified"],
    )
    meta = pd.DataFrame({"Group": ["CK", "T", "T"]}, index=["S1", "S3", "S9"])
    return otu, tax, meta


def test_construct_keeps_tables_and_copies() -> None:
    otu, tax, _ = _tables()
    ds = Dataset(otu, tax)
    assert ds.sample_table is None
    assert ds.sample_ids == ["S1", "S2", "S3"]
    assert ds.feature_ids == ["amoA", "nosZ", "mystery", "unclassified"]
    otu.loc["amoA", "S1"] = 99
    assert ds.otu_table.loc["amoA", "S1"] == 5
    assert ds.sample_sums().tolist() == [8, 4, 0]


def test_constructor_rejects_bad_tables() -> None:
    otu, tax, _ = _tables()
    with pytest.raises(DatasetError, match="non-numeric"):
        Dataset(otu.assign(S4=["a", "b", "c", "d"]), tax)
    with pytest.raises(DatasetError, match="tax_table"):
        Dataset(otu, pd.concat([tax, tax]))
    with pytest.raises(DatasetError):
        Dataset(otu, tax, sample_table=[1, 2, 3])


def test_tidy_restricts_to_shared_samples_and_annotated_features() -> None:
    otu, tax, meta = _tables()
    ds = Dataset(otu, tax, meta).tidy()
    # S2 has no metadata; S3 is all zero; nosZ is zero; mystery has no annotation
    assert ds.sample_ids == ["S1"]
    assert ds.feature_ids == ["amoA", "unclassified"]
    assert list(ds.tax_table.index) == ["amoA", "unclassified"]
    assert list(ds.sample_table.index) == ["S1"]


def test_auto_tidy_and_empty_result() -> None:
    otu, tax, _ = _tables()
    ds = Dataset(otu, tax, auto_tidy=True)
    assert ds.sample_ids == ["S1", "S2"]
    with pytest.raises(DatasetError, match="No features"):
        Dataset(otu, tax.iloc[0:0], auto_tidy=True)


def test_save_tables(tmp_path: Path) -> None:
    otu, tax, meta = _tables()
    written = Dataset(otu, tax).save_tables(tmp_path / "out")
    assert set(written) == {"feature_table", "tax_table"}
    back = pd.read_csv(written["feature_table"], sep="\t", index_col=0)
    assert back.loc["unclassified"].tolist() == [2, 1, 0]

    written = Dataset(otu, tax, meta).save_tables(tmp_path / "out2")
    assert written["sample_table"].name == "sample_table.tsv"
