"""
Administrative entity handling

- AdminClassifier: provinces / communes from OSM relations and capital nodes
- CommuneLocator: commune lookup by coordinate
- Name helpers: accent stripping and province prefix removal
"""

from .classifier import AdminClassifier, ClassifiedEntity
from .locator import CommuneLocator
from .names import short_admin_name, strip_accents

__all__ = [
    "AdminClassifier",
    "ClassifiedEntity",
    "CommuneLocator",
    "short_admin_name",
    "strip_accents",
]
