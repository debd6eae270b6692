from typing import Sequence

from .advice import GeometryAdvice, describe_geometry
from .cropping import CropResult, crop, crop_dxf_text, entity_visible
from .entity import Entity, EntityAccumulator
from .errors import InvalidGeometryError
from .records import Record
from .wkt import parse_polygon, parse_wkt_polygon

__all__ = [
    "crop",
    "crop_dxf_text",
    "entity_visible",
    "CropResult",
    "Entity",
    "EntityAccumulator",
    "Record",
    "parse_polygon",
    "parse_wkt_polygon",
    "describe_geometry",
    "GeometryAdvice",
    "InvalidGeometryError",
]


def main(argv: Sequence[str] | None = None) -> int:
    from dxfcrop.cli import main as cli_main

    return cli_main(argv)
