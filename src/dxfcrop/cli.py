from __future__ import annotations

import argparse
import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Sequence

from .advice import describe_geometry
from .cropping import crop, count_entities, crop_text, read_document
from .errors import InvalidGeometryError
from .wkt import format_wkt_polygon, require_polygon

_BINARY_SUFFIXES = (".dwg",)


def _package_version() -> str:
    try:
        return version("dxfcrop")
    except PackageNotFoundError:
        return "0.0.0"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dxfcrop",
        description="Crop the ENTITIES section of DXF files to a WKT polygon.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_package_version()}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log per-entity decisions to stderr.",
    )
    subparsers = parser.add_subparsers(dest="command")

    crop_parser = subparsers.add_parser("crop", help="Remove entities that miss the clip polygon.")
    crop_parser.add_argument("input_path", help="Path to DXF file.")
    crop_parser.add_argument(
        "output_path",
        nargs="?",
        default=None,
        help="Path to output DXF file (default: cropped_<name> next to the input).",
    )
    _add_wkt_arguments(crop_parser, required=True)
    crop_parser.add_argument(
        "--verify",
        action="store_true",
        help="Re-load the written file with ezdxf and fail if it cannot be read.",
    )

    inspect_parser = subparsers.add_parser("inspect", help="Count entities by type.")
    inspect_parser.add_argument("path", help="Path to DXF file.")
    _add_wkt_arguments(inspect_parser, required=False)

    check_parser = subparsers.add_parser("check-wkt", help="Describe a WKT clip geometry.")
    check_parser.add_argument("wkt", help='WKT text, e.g. "POLYGON ((0 0, 10 0, 10 10, 0 10))".')
    return parser


def _add_wkt_arguments(parser: argparse.ArgumentParser, *, required: bool) -> None:
    group = parser.add_mutually_exclusive_group(required=required)
    group.add_argument("--wkt", default=None, help="Clip polygon as WKT text.")
    group.add_argument("--wkt-file", default=None, help="Path to a file holding the WKT clip polygon.")


def _resolve_wkt(wkt: str | None, wkt_file: str | None) -> str | None:
    if wkt_file is not None:
        return Path(wkt_file).read_text(encoding="utf-8")
    return wkt


def _check_input(path: Path) -> str | None:
    if not path.exists():
        return f"file not found: {path}"
    if path.suffix.lower() in _BINARY_SUFFIXES:
        return f"binary {path.suffix.upper().lstrip('.')} input is not supported; export the drawing as DXF first"
    return None


def _run_crop(
    input_path: str,
    output_path: str | None,
    *,
    wkt: str | None = None,
    wkt_file: str | None = None,
    verify: bool = False,
) -> int:
    dxf_path = Path(input_path)
    problem = _check_input(dxf_path)
    if problem is not None:
        print(f"error: {problem}", file=sys.stderr)
        return 2

    try:
        clip = _resolve_wkt(wkt, wkt_file) or ""
        result = crop(dxf_path, output_path, clip, verify=verify)
    except InvalidGeometryError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except Exception as exc:
        print(f"error: failed to crop DXF: {exc}", file=sys.stderr)
        return 2

    print(f"input: {result.source_path}")
    print(f"output: {result.output_path}")
    print(f"total_entities: {result.total_entities}")
    print(f"kept_entities: {result.kept_entities}")
    print(f"removed_entities: {result.removed_entities}")
    for dxftype, count in result.removed_by_type.items():
        print(f"removed[{dxftype}]: {count}")
    if result.verified:
        print("verified: ok")
    return 0


def _run_inspect(path: str, *, wkt: str | None = None, wkt_file: str | None = None) -> int:
    dxf_path = Path(path)
    problem = _check_input(dxf_path)
    if problem is not None:
        print(f"error: {problem}", file=sys.stderr)
        return 2

    try:
        text = read_document(dxf_path)
        clip = _resolve_wkt(wkt, wkt_file)
        polygon = require_polygon(clip) if clip is not None else None
    except InvalidGeometryError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except Exception as exc:
        print(f"error: failed to read DXF: {exc}", file=sys.stderr)
        return 2

    counts = count_entities(text)
    print(f"file: {dxf_path}")
    print(f"total_entities: {sum(counts.values())}")
    for dxftype, count in sorted(counts.items()):
        print(f"{dxftype}: {count}")

    if polygon is None:
        return 0

    stats = crop_text(text, polygon).stats
    print(f"clip: {format_wkt_polygon(polygon)}")
    print(f"kept_entities: {stats.kept_entities}")
    print(f"removed_entities: {stats.removed_entities}")
    for dxftype, count in sorted(stats.removed_by_type.items()):
        print(f"removed[{dxftype}]: {count}")
    return 0


def _run_check_wkt(wkt: str) -> int:
    advice = describe_geometry(wkt)
    print(f"valid: {'yes' if advice.is_valid else 'no'}")
    print(f"type: {advice.geometry_type}")
    print(f"description: {advice.description}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.command == "crop":
        return _run_crop(
            args.input_path,
            args.output_path,
            wkt=args.wkt,
            wkt_file=args.wkt_file,
            verify=bool(args.verify),
        )
    if args.command == "inspect":
        return _run_inspect(args.path, wkt=args.wkt, wkt_file=args.wkt_file)
    if args.command == "check-wkt":
        return _run_check_wkt(args.wkt)

    parser.print_help()
    return 0
