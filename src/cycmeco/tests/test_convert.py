"""
--------------------------------------------------------------------------------
<cycmeco project>
src/cycmeco/tests/test_convert.py

End-to-end conversions from files and DataFrames.
--------------------------------------------------------------------------------
"""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from cycmeco import Ontology, convert, ncyc2meco
from cycmeco.core.config_model import DatasetOptions
from cycmeco.core.errors import (
    ConfigError,
    CycMecoError,
    HeaderFormatError,
    MalformedTableError,
    SampleMismatchError,
    UnrecognizedFeatureSetError,
)

NCYC_TABLE = "# total reads: 1000\nGene\tS1\tS2\namoA\t500\t450\nnosZ\t300\t500\n"
PCYC_TABLE = "#Total sequences 2000\nGene\tP1\tP2\nphoD\t100\t0\npstS\t900\t1500\n"


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_scenario_ncyc_unclassified_residual(tmp_path: Path) -> None:
    ds = convert(_write(tmp_path / "ncyc.tsv", NCYC_TABLE))
    assert ds.reference.ontology is Ontology.NCYC
    assert ds.otu_table.loc["unclassified"].tolist() == pytest.approx([200, 50])
    assert ds.sample_sums().tolist() == pytest.approx([1000, 1000])
    assert ds.sample_table is None
    assert list(ds.tax_table.index) == ["amoA", "nosZ", "unclassified"]
    assert ds.tax_table.loc["unclassified"].tolist() == ["unclassified", "unclassified"]
    assert ds.tax_table.loc["nosZ", "Pathway"] == "Denitrification"


def test_scenario_pcyc_detected(tmp_path: Path) -> None:
    ds = ncyc2meco(_write(tmp_path / "pcyc.tsv", PCYC_TABLE))
    assert ds.reference.ontology is Ontology.PCYC
    assert ds.otu_table.loc["unclassified"].tolist() == pytest.approx([1000, 500])


def test_unknown_features(tmp_path: Path) -> None:
    path = _write(tmp_path / "otu.tsv", "# total 10\nOTU\tS1\nOTU_1\t3\n")
    with pytest.raises(UnrecognizedFeatureSetError):
        convert(path)


def test_missing_header_count(tmp_path: Path) -> None:
    path = _write(tmp_path / "t.tsv", "# no count\nGene\tS1\namoA\t3\n")
    with pytest.raises(HeaderFormatError):
        convert(path)
    # an explicit total bypasses the header line
    ds = convert(path, total_reads=5)
    assert ds.otu_table.loc["unclassified", "S1"] == 2


def test_missing_feature_file(tmp_path: Path) -> None:
    with pytest.raises(MalformedTableError, match="not found"):
        convert(tmp_path / "absent.tsv")


def test_unreadable_feature_files_stay_in_error_taxonomy(tmp_path: Path) -> None:
    binary = tmp_path / "t.tsv"
    binary.write_bytes(b"# total reads: 10\nGene\tS1\namoA\t5\xff\n")
    with pytest.raises(CycMecoError):
        convert(binary)

    workbook = tmp_path / "t.xlsx"
    pd.DataFrame({"S1": [5]}, index=["amoA"]).to_excel(workbook)
    with pytest.raises(MalformedTableError, match="workbook"):
        convert(workbook)


def test_match_and_sample_tables(tmp_path: Path) -> None:
    feature = _write(tmp_path / "ncyc.tsv", NCYC_TABLE)
    match = _write(tmp_path / "match.tsv", "S1\tCK1\nS2\tT1\n")
    meta = _write(tmp_path / "meta.tsv", "SampleID\tGroup\nCK1\tCK\nT1\tT\nT2\tT\n")
    ds = convert(feature, sample_table=meta, match_table=match)
    assert ds.sample_ids == ["CK1", "T1"]
    assert ds.otu_table.loc["unclassified", "T1"] == pytest.approx(50)
    assert list(ds.sample_table.index) == ["CK1", "T1", "T2"]

    tidy = convert(feature, sample_table=meta, match_table=match, options={"auto_tidy": True})
    assert list(tidy.sample_table.index) == ["CK1", "T1"]


def test_metadata_without_overlap_rejected(tmp_path: Path) -> None:
    feature = _write(tmp_path / "ncyc.tsv", NCYC_TABLE)
    meta = pd.DataFrame({"Group": ["CK"]}, index=["CK1"])
    with pytest.raises(SampleMismatchError):
        convert(feature, sample_table=meta)


def test_dataframe_input_requires_total_reads() -> None:
    df = pd.DataFrame({"S1": [500, 300], "S2": [450, 500]}, index=["amoA", "nosZ"])
    with pytest.raises(HeaderFormatError, match="total_reads"):
        convert(df)
    ds = convert(df, total_reads=1000)
    assert ds.otu_table.loc["unclassified"].tolist() == pytest.approx([200, 50])
    with pytest.raises(HeaderFormatError, match="non-negative"):
        convert(df, total_reads=-1)


def test_unknown_options_rejected(tmp_path: Path) -> None:
    feature = _write(tmp_path / "ncyc.tsv", NCYC_TABLE)
    with pytest.raises(ConfigError, match="phylo_tree"):
        convert(feature, options={"phylo_tree": "tree.nwk"})
    with pytest.raises(ConfigError):
        convert(feature, options=["auto_tidy"])
    ds = convert(feature, options=DatasetOptions(auto_tidy=True))
    assert ds.sample_ids == ["S1", "S2"]
