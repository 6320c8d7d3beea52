"""
--------------------------------------------------------------------------------
<cycmeco project>
src/cycmeco/processors/residual.py

Append the 'unclassified' residual row: total reads minus the annotated
abundance of each sample.

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import logging

import pandas as pd

from cycmeco.parsers.feature_table import UNCLASSIFIED

LOG = logging.getLogger(__name__)


def unclassified_residual(abund: pd.DataFrame, total_reads: float) -> pd.Series:
    """total_reads − column sum, per sample. Negative values are kept."""
    return (total_reads - abund.sum(axis=0)).rename(UNCLASSIFIED)


def append_unclassified(abund: pd.DataFrame, total_reads: float) -> pd.DataFrame:
    """
    Return a copy of `abund` with an extra 'unclassified' row.

    A negative residual means the declared total is smaller than the annotated
    abundance. It is passed through unchanged and logged as a warning.
    """
    residual = unclassified_residual(abund, total_reads)
    negative = residual[residual < 0]
    if not negative.empty:
        LOG.warning(
            "unclassified residual is negative for %d sample(s) (total reads=%s): %s",
            len(negative),
            total_reads,
            ", ".join(f"{k}={v:g}" for k, v in negative.head(10).items()),
        )
    out = pd.concat([abund, residual.to_frame().T], axis=0)
    LOG.info("residual • total reads=%s • unclassified range=[%g, %g]", total_reads, residual.min(), residual.max())
    return out
