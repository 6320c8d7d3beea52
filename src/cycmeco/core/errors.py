"""
--------------------------------------------------------------------------------
<cycmeco project>
src/cycmeco/core/errors.py

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations


class CycMecoError(Exception): ...


class ConfigError(CycMecoError): ...


class MalformedTableError(CycMecoError): ...


class HeaderFormatError(CycMecoError): ...


class MatchTableFormatError(CycMecoError): ...


class SampleMismatchError(CycMecoError): ...


class UnrecognizedFeatureSetError(CycMecoError): ...


class DatasetError(CycMecoError): ...
