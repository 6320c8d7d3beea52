"""
--------------------------------------------------------------------------------
<cycmeco project>
src/cycmeco/parsers/feature_table.py

Parse NCycDB / PCycDB abundance tables.

File layout:
    # <free text> <total reads>        <- header-count line (first line)
    # ...                              <- further comment lines, ignored
    <id>    <sample_1>  <sample_2> ... <- column header
    amoA    12          40
    ...

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import io
import logging
import re
from pathlib import Path

import numpy as np
import pandas as pd

from cycmeco.core.errors import HeaderFormatError, MalformedTableError
from cycmeco.parsers.tables import delimiter_for

LOG = logging.getLogger(__name__)

COMMENT = "#"
UNCLASSIFIED = "unclassified"

_DIGITS = re.compile(r"\d+")


def _preview(items, n: int = 20) -> str:
    items = list(items)
    return f"{items[:n]}{'…' if len(items) > n else ''}"


def parse_header_count(line: str) -> int:
    """Return the last run of digits in `line` as the total read count."""
    runs = _DIGITS.findall(line)
    if not runs:
        raise HeaderFormatError(f"No read count found in header line: {line.strip()!r}")
    return int(runs[-1])


def read_header_count(path: str | Path) -> int:
    p = Path(path)
    try:
        with p.open(encoding="utf-8-sig") as fh:
            first = fh.readline()
    except (OSError, UnicodeDecodeError) as e:
        raise MalformedTableError(f"Cannot read feature table {p}: {e}") from e
    if not first.startswith(COMMENT):
        raise HeaderFormatError(
            f"First line of {p.name} must be a '{COMMENT}' comment carrying the total read count; "
            f"got {first.strip()!r}"
        )
    count = parse_header_count(first)
    LOG.debug("header count • %s • total reads=%d", p.name, count)
    return count


def coerce_abundance(df: pd.DataFrame, *, where: str = "feature table") -> pd.DataFrame:
    """
    Validate a features × samples table and return it with numeric cells.

    Feature and sample ids become stripped strings. Fails on duplicated ids,
    empty tables, missing or non-numeric or negative cells, and on a feature
    already named 'unclassified'.
    """
    if df.shape[0] == 0 or df.shape[1] == 0:
        raise MalformedTableError(f"[{where}] table is empty (features={df.shape[0]}, samples={df.shape[1]})")

    out = df.copy()
    if out.index.isna().any():
        raise MalformedTableError(f"[{where}] feature identifier column contains empty values")
    out.index = out.index.map(lambda v: str(v).strip())
    out.columns = [str(c).strip() for c in out.columns]

    dup_rows = out.index[out.index.duplicated()].unique().tolist()
    if dup_rows:
        raise MalformedTableError(f"[{where}] duplicate feature identifiers: {_preview(dup_rows)}")
    dup_cols = out.columns[out.columns.duplicated()].unique().tolist()
    if dup_cols:
        raise MalformedTableError(f"[{where}] duplicate sample identifiers: {_preview(dup_cols)}")
    if UNCLASSIFIED in out.index:
        raise MalformedTableError(f"[{where}] feature '{UNCLASSIFIED}' is reserved for the residual row")

    numeric = out.apply(pd.to_numeric, errors="coerce")
    bad = numeric.isna()
    if bad.any().any():
        rows, cols = np.nonzero(bad.to_numpy())
        cells = [f"{out.index[r]}/{out.columns[c]}" for r, c in zip(rows, cols)]
        raise MalformedTableError(f"[{where}] missing or non-numeric abundance values at: {_preview(cells, 10)}")
    if (numeric < 0).any().any():
        neg = [c for c in numeric.columns if (numeric[c] < 0).any()]
        raise MalformedTableError(f"[{where}] negative abundance values in sample(s): {_preview(neg)}")
    return numeric


def parse_feature_table(path: str | Path) -> pd.DataFrame:
    """
    Load an abundance table: comment lines dropped, first column used as the
    feature index, remaining columns as samples.
    """
    p = Path(path)
    sep = delimiter_for(p)
    try:
        with p.open(encoding="utf-8-sig") as fh:
            lines = [ln for ln in fh if not ln.startswith(COMMENT) and ln.strip()]
    except (OSError, UnicodeDecodeError) as e:
        raise MalformedTableError(f"Cannot read feature table {p}: {e}") from e
    if not lines:
        raise MalformedTableError(f"Feature table {p} has no header or data rows")

    header = [h.strip() for h in lines[0].rstrip("\r\n").split(sep)][1:]
    dup = sorted({h for h in header if header.count(h) > 1})
    if dup:
        raise MalformedTableError(f"[{p.name}] duplicate sample identifiers: {_preview(dup)}")

    try:
        raw = pd.read_csv(io.StringIO("".join(lines)), sep=sep, index_col=0)
    except ValueError as e:
        raise MalformedTableError(f"Cannot parse feature table {p}: {e}") from e

    abund = coerce_abundance(raw, where=p.name)
    LOG.info("feature table • %s • features=%d • samples=%d", p.name, abund.shape[0], abund.shape[1])
    return abund
