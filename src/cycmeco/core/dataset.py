"""
--------------------------------------------------------------------------------
<cycmeco project>
src/cycmeco/core/dataset.py

Dataset: feature abundance table (features × samples), feature annotation
table (features × hierarchy levels) and optional sample metadata
(samples × attributes), kept together for downstream community analysis.

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional

import pandas as pd

from cycmeco.core.errors import DatasetError
from cycmeco.ontology.reference import Reference

LOG = logging.getLogger(__name__)


def _require_unique(index: pd.Index, what: str) -> None:
    dups = index[index.duplicated()].unique().tolist()
    if dups:
        raise DatasetError(f"{what} must be unique; duplicated: {dups[:20]}")


class Dataset:
    def __init__(
        self,
        otu_table: pd.DataFrame,
        tax_table: pd.DataFrame,
        sample_table: Optional[pd.DataFrame] = None,
        *,
        reference: Optional[Reference] = None,
        auto_tidy: bool = False,
    ) -> None:
        if not isinstance(otu_table, pd.DataFrame) or not isinstance(tax_table, pd.DataFrame):
            raise DatasetError("otu_table and tax_table must be pandas DataFrames")
        if sample_table is not None and not isinstance(sample_table, pd.DataFrame):
            raise DatasetError("sample_table must be a pandas DataFrame or None")

        non_numeric = [c for c in otu_table.columns if not pd.api.types.is_numeric_dtype(otu_table[c])]
        if non_numeric:
            raise DatasetError(f"otu_table has non-numeric sample column(s): {non_numeric[:20]}")
        _require_unique(otu_table.index, "otu_table feature ids")
        _require_unique(otu_table.columns, "otu_table sample ids")
        _require_unique(tax_table.index, "tax_table feature ids")
        if sample_table is not None:
            _require_unique(sample_table.index, "sample_table sample ids")

        self.otu_table = otu_table.copy()
        self.tax_table = tax_table.copy()
        self.sample_table = None if sample_table is None else sample_table.copy()
        self.reference = reference

        if auto_tidy:
            self.tidy()

    def __repr__(self) -> str:
        onto = self.reference.ontology.value if self.reference else "?"
        meta = "none" if self.sample_table is None else f"{self.sample_table.shape[1]} column(s)"
        return (
            f"Dataset(ontology={onto}, features={self.otu_table.shape[0]}, "
            f"samples={self.otu_table.shape[1]}, sample metadata={meta})"
        )

    @property
    def feature_ids(self) -> list[str]:
        return [str(i) for i in self.otu_table.index]

    @property
    def sample_ids(self) -> list[str]:
        return [str(c) for c in self.otu_table.columns]

    def sample_sums(self) -> pd.Series:
        return self.otu_table.sum(axis=0)

    def tidy(self) -> "Dataset":
        """
        Restrict all tables to shared samples and annotated features, then drop
        features and samples whose abundances are all zero.
        """
        otu = self.otu_table
        samples = list(otu.columns)
        if self.sample_table is not None:
            keep = set(self.sample_table.index)
            samples = [s for s in samples if s in keep]
        annotated = set(self.tax_table.index)
        features = [f for f in otu.index if f in annotated]
        otu = otu.loc[features, samples]

        otu = otu.loc[(otu != 0).any(axis=1), (otu != 0).any(axis=0)]
        if otu.empty:
            raise DatasetError("No features or samples remain after tidying")

        dropped_f = self.otu_table.shape[0] - otu.shape[0]
        dropped_s = self.otu_table.shape[1] - otu.shape[1]
        self.otu_table = otu
        self.tax_table = self.tax_table.loc[otu.index]
        if self.sample_table is not None:
            self.sample_table = self.sample_table.loc[otu.columns]
        LOG.info("tidy • dropped features=%d • dropped samples=%d • remaining=%s", dropped_f, dropped_s, otu.shape)
        return self

    def save_tables(self, out_dir: str | Path) -> Dict[str, Path]:
        """Write the tables as TSV files under `out_dir`; returns label -> path."""
        out = Path(out_dir)
        out.mkdir(parents=True, exist_ok=True)
        tables = {"feature_table": self.otu_table, "tax_table": self.tax_table}
        if self.sample_table is not None:
            tables["sample_table"] = self.sample_table
        written: Dict[str, Path] = {}
        for label, df in tables.items():
            path = out / f"{label}.tsv"
            df.to_csv(path, sep="\t")
            written[label] = path
        LOG.info("saved • %s", ", ".join(str(p) for p in written.values()))
        return written
