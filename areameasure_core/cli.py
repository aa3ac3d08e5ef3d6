"""Command line interface for AreaMeasure workflows."""
from __future__ import annotations

import argparse
import json
import logging
from typing import Iterable, List, Tuple

from .calibration import CalibrationSnapshot
from .figures import Figure
from .labels import MessageCatalog
from .replay import load_script, run_script
from .ruler import choose
from .settings import load_settings
from .shapes import Correctness, Dimensionality, Shape, ShapeKind, coerce_kind

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _parse_points(text: str) -> List[Tuple[float, float]]:
    pts: List[Tuple[float, float]] = []
    for token in text.replace(";", " ").split():
        parts = token.split(",")
        if len(parts) != 2:
            raise ValueError(f"Point '{token}' must look like x,y")
        pts.append((float(parts[0]), float(parts[1])))
    if not pts:
        raise ValueError("At least one point is required.")
    return pts


def _cmd_replay(args: argparse.Namespace) -> None:
    settings = load_settings(args.settings)
    script = load_script(args.script)
    _session, report = run_script(script, settings)
    if args.json:
        print(report.model_dump_json(indent=2))
        return
    for line in report.lines():
        print(line)


def _cmd_measure(args: argparse.Namespace) -> None:
    kind = coerce_kind(args.kind)
    shape = Shape(kind)
    points = _parse_points(args.points)
    for point in points:
        if shape.finished:
            raise ValueError(f"A {kind.value} takes exactly 2 points, got {len(points)}.")
        shape.add_point(point)
    shape.finish()
    settings = load_settings(args.settings)
    messages = MessageCatalog.for_settings(settings)
    valid = shape.correctness() is Correctness.VALID
    result = {
        "kind": kind.value,
        "vertices": len(shape.vertices()),
        "valid": valid,
        "length_px": shape.length(),
    }
    if shape.dimensionality() is Dimensionality.SHAPE_2D:
        result["area_px"] = shape.area()
    if args.mpp is not None:
        if args.mpp <= 0.0:
            raise ValueError("--mpp must be positive")
        snap = CalibrationSnapshot(args.mpp)
        result["length"] = snap.real_length(shape.length())
        if shape.dimensionality() is Dimensionality.SHAPE_2D:
            result["area"] = snap.real_area(shape.area())
        text = Figure(shape).size_text(snap, messages, eps=settings.size_epsilon)
        if text:
            result["text"] = text
    if args.json:
        print(json.dumps(result, indent=2))
        return
    for key, value in result.items():
        print(f"{key}: {value}")
    if not valid:
        print(messages.self_intersection_warning())


def _cmd_ruler(args: argparse.Namespace) -> None:
    settings = load_settings(args.settings)
    picked = choose(
        args.mpp,
        args.max if args.max is not None else settings.ruler.max_pixels,
        args.min if args.min is not None else settings.ruler.min_pixels,
        max_exponent=settings.ruler.max_exponent,
        min_exponent=settings.ruler.min_exponent,
    )
    if picked is None:
        print("No scale bar fits the pixel budget.")
        return
    meters, pixels = picked
    text = MessageCatalog.for_settings(settings).ruler_text(meters)
    print(f"{text} = {pixels:.2f} px")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="areameasure",
        description="AreaMeasure command line interface",
    )
    parser.add_argument("--log-level", default="WARNING", choices=LOG_LEVELS, help="Logging verbosity")
    parser.add_argument("--settings", help="JSON settings file (defaults to $AREAMEASURE_SETTINGS)")
    sub = parser.add_subparsers(dest="command", required=True)

    replay = sub.add_parser("replay", help="Replay a recorded input script and report the measurements")
    replay.add_argument("script", help="Path to the JSON input script")
    replay.add_argument("--json", action="store_true", help="Print the report as JSON")
    replay.set_defaults(func=_cmd_replay)

    measure = sub.add_parser("measure", help="Measure a single shape given by its vertices")
    measure.add_argument(
        "--kind",
        default=ShapeKind.POLYGON.value,
        choices=[k.value for k in ShapeKind],
        help="Shape kind",
    )
    measure.add_argument("--points", required=True, help='Vertices in original pixels, e.g. "0,0 10,0 10,5"')
    measure.add_argument("--mpp", type=float, help="Meters per original pixel for real-world sizes")
    measure.add_argument("--json", action="store_true", help="Print the result as JSON")
    measure.set_defaults(func=_cmd_measure)

    ruler = sub.add_parser("ruler", help="Pick the scale bar for a calibration factor")
    ruler.add_argument("--mpp", type=float, required=True, help="Meters per on-screen pixel")
    ruler.add_argument("--max", type=float, help="Scale bar must be shorter than this many pixels")
    ruler.add_argument("--min", type=float, help="Scale bar is hidden when shorter than this")
    ruler.set_defaults(func=_cmd_ruler)

    return parser


def main(argv: Iterable[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")
    try:
        args.func(args)
    except Exception as exc:  # pragma: no cover - CLI guard
        parser.error(str(exc))
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
