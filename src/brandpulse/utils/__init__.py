"""Utility modules for BrandPulse."""

from .data_prep import export_to_json, to_jsonable

__all__ = [
    "export_to_json",
    "to_jsonable",
]
