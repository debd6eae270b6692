from __future__ import annotations


class InvalidGeometryError(ValueError):
    """The clip geometry does not describe a ring of at least three points."""
