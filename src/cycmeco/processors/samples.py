"""
--------------------------------------------------------------------------------
<cycmeco project>
src/cycmeco/processors/samples.py

Reconcile sample identifiers between the abundance matrix, the match table and
the sample metadata.

  - rename_samples: raw -> canonical column labels. Columns without a match
    table entry are kept under their raw name and reported as a warning.
  - validate_sample_overlap: metadata rows must share at least one id with the
    abundance columns; extra rows on either side are tolerated.

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import logging

import pandas as pd

from cycmeco.core.errors import MatchTableFormatError, SampleMismatchError
from cycmeco.parsers.match_table import NEW_COL, RAW_COL

LOG = logging.getLogger(__name__)


def _preview(items, n: int = 20) -> str:
    items = list(items)
    return ", ".join(map(str, items[:n])) + (" …" if len(items) > n else "")


def rename_samples(abund: pd.DataFrame, match: pd.DataFrame) -> pd.DataFrame:
    """Relabel the columns of `abund` using a (raw_id, canonical_id) table."""
    mapping = dict(zip(match[RAW_COL], match[NEW_COL]))
    columns = [str(c) for c in abund.columns]

    absent = [raw for raw in mapping if raw not in columns]
    if absent:
        LOG.warning("match table • %d raw id(s) not found in abundance table, ignored: %s", len(absent), _preview(absent))
    unmatched = [c for c in columns if c not in mapping]
    if unmatched:
        LOG.warning("match table • %d sample(s) without an entry kept as-is: %s", len(unmatched), _preview(unmatched))

    renamed = pd.Index([mapping.get(c, c) for c in columns])
    clashes = renamed[renamed.duplicated()].unique().tolist()
    if clashes:
        raise MatchTableFormatError(f"Renaming would produce duplicate sample ids: {_preview(clashes)}")

    out = abund.copy()
    out.columns = renamed
    LOG.info("match table • renamed %d of %d sample(s)", len(columns) - len(unmatched), len(columns))
    return out


def validate_sample_overlap(
    meta: pd.DataFrame,
    sample_ids: list[str] | pd.Index,
    *,
    canonical_ids: list[str] | None = None,
) -> pd.DataFrame:
    """
    Assert the metadata index overlaps `sample_ids` and return `meta` unchanged.

    `canonical_ids` (the new names from a match table) are checked for presence
    in the metadata; any missing are reported as a warning only.
    """
    meta_ids = set(map(str, meta.index))
    ids = [str(s) for s in sample_ids]
    shared = [s for s in ids if s in meta_ids]
    if not shared:
        raise SampleMismatchError(
            "Sample metadata shares no sample id with the abundance table. "
            f"abundance: [{_preview(ids, 10)}] • metadata: [{_preview(sorted(meta_ids), 10)}]"
        )

    if canonical_ids is not None:
        missing = [c for c in canonical_ids if c not in meta_ids]
        if missing:
            LOG.warning("match table • %d new id(s) absent from sample metadata: %s", len(missing), _preview(missing))

    no_meta = [s for s in ids if s not in meta_ids]
    if no_meta:
        LOG.warning("sample metadata • %d sample(s) without metadata: %s", len(no_meta), _preview(no_meta))
    extra = len(meta_ids) - len(shared)
    LOG.info("sample metadata • shared=%d • abundance-only=%d • metadata-only=%d", len(shared), len(no_meta), extra)
    return meta
