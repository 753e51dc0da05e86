"""Post-build validation of docset references."""

from .references import MissingReference, MissingReferenceError, ReferenceValidator

__all__ = [
    "MissingReference",
    "MissingReferenceError",
    "ReferenceValidator",
]
