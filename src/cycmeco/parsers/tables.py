"""
--------------------------------------------------------------------------------
<cycmeco project>
src/cycmeco/parsers/tables.py

Read a delimited text file, an Excel workbook or an in-memory DataFrame into a
DataFrame. Shared by the sample metadata and match table loaders.

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

import pandas as pd

TableSource = Union[str, Path, pd.DataFrame]

EXCEL_SUFFIXES = {".xls", ".xlsx"}


def delimiter_for(path: str | Path) -> str:
    """Comma for .csv, tab for everything else (.tsv, .txt, NCyc/PCyc outputs)."""
    return "," if Path(path).suffix.lower() == ".csv" else "\t"


def read_table(
    source: TableSource,
    *,
    header: bool = True,
    index_col: int | None = 0,
) -> pd.DataFrame:
    """
    Load `source` into a DataFrame.

    Accepted inputs:
      1) .csv (comma) or .tsv/.txt (tab) text file.
      2) .xlsx/.xls workbook (first sheet).
      3) an existing DataFrame, returned as a copy (index_col is ignored).

    Raises FileNotFoundError for a missing path and ValueError when pandas cannot
    parse the file; callers wrap these into the stage error.
    """
    if isinstance(source, pd.DataFrame):
        return source.copy()

    p = Path(source)
    if not p.exists():
        raise FileNotFoundError(f"Input file not found: {p}")

    hdr = 0 if header else None
    if p.suffix.lower() in EXCEL_SUFFIXES:
        df = pd.read_excel(p, header=hdr, index_col=index_col)
    else:
        df = pd.read_csv(p, sep=delimiter_for(p), header=hdr, index_col=index_col)

    if index_col is not None:
        df.index = df.index.map(lambda v: str(v).strip())
    return df
