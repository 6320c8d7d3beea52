"""
--------------------------------------------------------------------------------
<cycmeco project>
src/cycmeco/__init__.py

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from cycmeco.core.config_model import ConversionSpec, DatasetOptions
from cycmeco.core.convert import convert, convert_spec, ncyc2meco
from cycmeco.core.dataset import Dataset
from cycmeco.ontology.reference import Ontology, detect_ontology, load_reference

__all__ = [
    "ConversionSpec",
    "Dataset",
    "DatasetOptions",
    "Ontology",
    "convert",
    "convert_spec",
    "detect_ontology",
    "load_reference",
    "ncyc2meco",
]
