"""
--------------------------------------------------------------------------------
<cycmeco project>
src/cycmeco/ontology/reference.py

Bundled gene -> pathway reference tables (NCycDB, PCycDB) and detection of the
ontology an abundance table was annotated against.

Detection walks REFERENCES in order and selects the first reference whose ids
intersect the input feature ids. The two id spaces are disjoint, so the order
only fixes which one is tested first.

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from importlib import resources
from typing import Iterable, Tuple

import pandas as pd

from cycmeco.core.errors import UnrecognizedFeatureSetError

LOG = logging.getLogger(__name__)

LEVELS: Tuple[str, ...] = ("Pathway", "Gene")


class Ontology(str, Enum):
    NCYC = "NCycDB"
    PCYC = "PCycDB"


@dataclass(frozen=True)
class Reference:
    ontology: Ontology
    resource: str       # file name under cycmeco/ontology/data
    split_by: str       # separator of multi-pathway entries in the Pathway level
    levels: Tuple[str, ...] = LEVELS


REFERENCES: Tuple[Reference, ...] = (
    Reference(Ontology.NCYC, "ncyc_map.tsv", split_by="&"),
    Reference(Ontology.PCYC, "pcyc_map.tsv", split_by="&&"),
)


@dataclass(frozen=True)
class Detection:
    reference: Reference
    matched: Tuple[str, ...]

    @property
    def ontology(self) -> Ontology:
        return self.reference.ontology


def get_reference(ontology: Ontology | str) -> Reference:
    key = Ontology(ontology)
    for ref in REFERENCES:
        if ref.ontology is key:
            return ref
    raise KeyError(key)


@lru_cache(maxsize=None)
def _load(resource: str) -> pd.DataFrame:
    src = resources.files("cycmeco.ontology").joinpath("data").joinpath(resource)
    with src.open("r", encoding="utf-8") as fh:
        df = pd.read_csv(fh, sep="\t", index_col=0, dtype=str)
    df.index = df.index.map(str)
    df.index.name = None
    return df


def load_reference(ontology: Ontology | str) -> pd.DataFrame:
    """Return a copy of the reference table for `ontology` (rows = feature ids)."""
    ref = get_reference(ontology)
    return _load(ref.resource)[list(ref.levels)].copy()


def reference_ids(ontology: Ontology | str) -> frozenset[str]:
    return frozenset(_load(get_reference(ontology).resource).index)


def detect_ontology(feature_ids: Iterable[str]) -> Detection:
    """
    Select the reference whose ids intersect `feature_ids`.

    Raises UnrecognizedFeatureSetError when neither NCycDB nor PCycDB ids match.
    """
    ids = [str(f) for f in feature_ids]
    for ref in REFERENCES:
        known = reference_ids(ref.ontology)
        matched = tuple(f for f in ids if f in known)
        if matched:
            LOG.info(
                "ontology • %s • matched %d of %d feature(s)", ref.ontology.value, len(matched), len(ids)
            )
            unknown = len(ids) - len(matched)
            if unknown:
                LOG.warning("ontology • %d feature(s) not present in %s", unknown, ref.ontology.value)
            return Detection(reference=ref, matched=matched)

    names = ", ".join(r.ontology.value for r in REFERENCES)
    raise UnrecognizedFeatureSetError(
        f"Unknown input feature type: no feature id matches any known gene-function ontology ({names}). "
        f"First ids: {ids[:10]}"
    )
