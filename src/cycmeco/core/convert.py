"""
--------------------------------------------------------------------------------
<cycmeco project>
src/cycmeco/core/convert.py

NCycDB / PCycDB abundance table → Dataset.

Pipeline:
    1) feature table → numeric features × samples matrix
    2) header comment → total reads
    3) append 'unclassified' = total reads − annotated abundance
    4) optional match table → canonical sample names
    5) optional sample metadata → overlap check
    6) detect the reference ontology from the feature ids
    7) assemble the Dataset

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import pandas as pd

from cycmeco.core.config_model import ConversionSpec, DatasetOptions
from cycmeco.core.dataset import Dataset
from cycmeco.core.errors import HeaderFormatError, MalformedTableError
from cycmeco.ontology.reference import Detection, detect_ontology, load_reference
from cycmeco.parsers.feature_table import (
    UNCLASSIFIED,
    coerce_abundance,
    parse_feature_table,
    read_header_count,
)
from cycmeco.parsers.match_table import NEW_COL, RAW_COL, parse_match_table
from cycmeco.parsers.sample_metadata import parse_sample_metadata
from cycmeco.parsers.tables import EXCEL_SUFFIXES, TableSource
from cycmeco.processors.residual import append_unclassified
from cycmeco.processors.samples import rename_samples, validate_sample_overlap

LOG = logging.getLogger(__name__)

OptionsLike = Union[DatasetOptions, Mapping[str, Any], None]


def annotation_table(detection: Detection) -> pd.DataFrame:
    """Reference rows for the matched features plus an 'unclassified' row."""
    ref = load_reference(detection.ontology)
    tax = ref.loc[list(detection.matched)]
    residual = pd.DataFrame([[UNCLASSIFIED] * len(tax.columns)], index=[UNCLASSIFIED], columns=tax.columns)
    return pd.concat([tax, residual], axis=0)


def assemble_dataset(
    abund: pd.DataFrame,
    detection: Detection,
    sample_table: Optional[pd.DataFrame] = None,
    options: OptionsLike = None,
) -> Dataset:
    opts = DatasetOptions.coerce(options)
    dataset = Dataset(
        otu_table=abund,
        tax_table=annotation_table(detection),
        sample_table=sample_table,
        reference=detection.reference,
        **opts.model_dump(),
    )
    LOG.info("%r", dataset)
    return dataset


def _load_abundance(feature_table: TableSource, total_reads: Optional[int]) -> tuple[pd.DataFrame, int]:
    if isinstance(feature_table, pd.DataFrame):
        abund = coerce_abundance(feature_table)
        if total_reads is None:
            raise HeaderFormatError("total_reads is required when the feature table is given as a DataFrame")
        return abund, total_reads

    p = Path(feature_table)
    if not p.is_file():
        raise MalformedTableError(f"Feature table not found: {p}")
    if p.suffix.lower() in EXCEL_SUFFIXES:
        raise MalformedTableError(f"Feature table must be a delimited text file (tsv/txt/csv), not a workbook: {p.name}")
    abund = parse_feature_table(p)
    if total_reads is None:
        total_reads = read_header_count(p)
    else:
        LOG.info("header count • %s • overridden with total reads=%d", p.name, total_reads)
    return abund, total_reads


def convert(
    feature_table: TableSource,
    sample_table: Optional[TableSource] = None,
    match_table: Optional[TableSource] = None,
    *,
    total_reads: Optional[int] = None,
    options: OptionsLike = None,
) -> Dataset:
    """
    Convert an NCycDB or PCycDB abundance table into a Dataset.

    feature_table: pipeline output file (first line is a comment ending with the
        total read count) or a features × samples DataFrame with `total_reads`.
    sample_table: sample metadata (csv/tsv/xlsx path or DataFrame), rows keyed
        by sample id.
    match_table: two-column header-less table, raw sample id → new sample id.
    options: DatasetOptions or a mapping of the same keys (e.g. auto_tidy).
    """
    opts = DatasetOptions.coerce(options)
    abund, total = _load_abundance(feature_table, total_reads)
    if total < 0:
        raise HeaderFormatError(f"total reads must be non-negative, got {total}")
    feature_names = list(abund.index)

    abund = append_unclassified(abund, total)

    canonical = None
    if match_table is not None:
        match = parse_match_table(match_table)
        present = match[RAW_COL].isin(abund.columns)
        canonical = match.loc[present, NEW_COL].tolist()
        abund = rename_samples(abund, match)

    meta = None
    if sample_table is not None:
        meta = parse_sample_metadata(sample_table)
        validate_sample_overlap(meta, abund.columns, canonical_ids=canonical)

    detection = detect_ontology(feature_names)
    return assemble_dataset(abund, detection, meta, opts)


ncyc2meco = convert


def convert_spec(spec: ConversionSpec) -> Dataset:
    return convert(
        spec.feature_table,
        sample_table=spec.sample_table,
        match_table=spec.match_table,
        total_reads=spec.total_reads,
        options=spec.options,
    )
