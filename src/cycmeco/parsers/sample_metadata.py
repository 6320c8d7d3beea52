"""
--------------------------------------------------------------------------------
<cycmeco project>
src/cycmeco/parsers/sample_metadata.py

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import logging

import pandas as pd

from cycmeco.core.errors import MalformedTableError
from cycmeco.parsers.tables import TableSource, read_table

LOG = logging.getLogger(__name__)


def parse_sample_metadata(source: TableSource) -> pd.DataFrame:
    """
    Load a sample metadata table keyed by its first column (or by the index of
    an in-memory DataFrame). Accepts CSV/TSV, Excel or a DataFrame. Attribute
    columns are not coerced.
    """
    try:
        meta = read_table(source)
    except (OSError, ValueError) as e:
        raise MalformedTableError(f"Cannot read sample metadata: {e}") from e

    meta.index = meta.index.map(str)
    if meta.index.duplicated().any():
        dups = meta.index[meta.index.duplicated()].unique().tolist()
        raise MalformedTableError(
            f"Sample metadata has duplicate sample ids: {dups[:20]}{'…' if len(dups) > 20 else ''}"
        )
    LOG.info("sample metadata • samples=%d • columns=%d", meta.shape[0], meta.shape[1])
    return meta
