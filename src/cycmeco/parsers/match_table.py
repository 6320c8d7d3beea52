"""
--------------------------------------------------------------------------------
<cycmeco project>
src/cycmeco/parsers/match_table.py

Load the two-column, header-less table mapping raw sample names (as written by
the annotation pipeline) to canonical sample names (as used in the metadata).

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import pandas as pd

from cycmeco.core.errors import MatchTableFormatError
from cycmeco.parsers.tables import TableSource, read_table

RAW_COL = "raw_id"
NEW_COL = "canonical_id"


def parse_match_table(source: TableSource) -> pd.DataFrame:
    """Return a two-column DataFrame (`raw_id`, `canonical_id`) of strings."""
    try:
        df = read_table(source, header=False, index_col=None)
    except (OSError, ValueError) as e:
        raise MatchTableFormatError(f"Cannot read match table: {e}") from e

    if df.shape[1] != 2:
        raise MatchTableFormatError(
            f"Match table must have exactly two columns (raw id, new id) and no header; found {df.shape[1]}"
        )
    if df.isna().any().any():
        raise MatchTableFormatError("Match table contains empty cells")

    df = df.astype(str).apply(lambda s: s.str.strip())
    df.columns = [RAW_COL, NEW_COL]
    df = df.reset_index(drop=True)

    dups = df.loc[df[RAW_COL].duplicated(), RAW_COL].unique().tolist()
    if dups:
        raise MatchTableFormatError(f"Match table lists raw sample id(s) more than once: {dups[:20]}")
    return df
