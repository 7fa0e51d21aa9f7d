"""Command line interface for shape builder workflows."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Iterable, List, Sequence

from .errors import DocumentError
from .path_data import Point, circle_path
from .session import Mode
from .settings import ShapeBuilderSettings
from .store import CanvasStore
from .tools import ShapeBuilderTool

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S")
    )
    root = logging.getLogger()
    root.setLevel(level)
    if not root.handlers:
        root.addHandler(handler)


def _read_document(path: Path) -> CanvasStore:
    with path.open("r", encoding="utf-8") as handle:
        try:
            data = json.load(handle)
        except json.JSONDecodeError as exc:
            raise DocumentError(f"{path} is not valid JSON: {exc}") from exc
    if isinstance(data, list):
        data = {"elements": data}
    if not isinstance(data, dict):
        raise DocumentError("Document must be an object with an 'elements' list")
    return CanvasStore.from_dict(data)


def _write_json(payload: Any, output: str | None) -> None:
    text = json.dumps(payload, indent=2)
    if output is None:
        print(text)
        return
    out_path = Path(output)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(text + "\n", encoding="utf-8")
    print(f"Wrote {out_path}")


def _region_summary(tool: ShapeBuilderTool) -> List[Dict[str, Any]]:
    return [region.to_dict() for region in tool.session.regions]


def run_gesture(store: CanvasStore, mode: Mode, points: Sequence[Point], settings: ShapeBuilderSettings | None = None) -> ShapeBuilderTool:
    """Replay a press-drag-release over ``points`` with the shape builder."""
    if not points:
        raise ValueError("At least one --point is required")
    if not ShapeBuilderTool.is_available(store):
        raise ValueError("Select at least two path elements")
    tool = ShapeBuilderTool(store, settings)
    tool.set_mode(mode)
    tool.activate()
    if not tool.session.regions:
        raise ValueError("Selected paths do not overlap; nothing to build")
    tool.pointer_down(points[0])
    for point in points[1:]:
        tool.pointer_move(point)
    tool.pointer_up(points[-1])
    return tool


def _cmd_regions(args: argparse.Namespace) -> None:
    store = _read_document(Path(args.document))
    tool = ShapeBuilderTool(store, ShapeBuilderSettings.from_env())
    tool.compute_regions()
    _write_json(_region_summary(tool), args.output)


def _cmd_commit(args: argparse.Namespace) -> None:
    store = _read_document(Path(args.document))
    points = [(float(x), float(y)) for x, y in args.point or []]
    tool = run_gesture(store, Mode(args.command), points, ShapeBuilderSettings.from_env())
    if store.active_tool == tool.name:
        print("No region under the gesture; document unchanged.", file=sys.stderr)
    else:
        logger.info("%s committed, new element %s", args.command, tool.last_result)
    _write_json(store.to_dict(), args.output)


def _cmd_demo(args: argparse.Namespace) -> None:
    store = CanvasStore()
    radius = args.radius
    left = store.add_element(circle_path(0.0, 0.0, radius, fill_color="#3366ff"))
    right = store.add_element(circle_path(radius, 0.0, radius))
    store.set_selection([left, right])
    tool = ShapeBuilderTool(store)
    tool.compute_regions()
    print(f"Two circles (r={radius:g}) -> {len(tool.session.regions)} regions")
    for region in tool.session.regions:
        box = region.bounds
        print(
            f"  - {region.id}: sources={len(region.source_element_ids)} "
            f"bounds=({box.x:.2f}, {box.y:.2f}, {box.width:.2f} x {box.height:.2f})"
        )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shapebuilder",
        description="Split overlapping paths into regions and merge or subtract them",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    regions = sub.add_parser("regions", help="Print the regions formed by the selected paths")
    regions.add_argument("document", help="JSON document with 'elements' and optional 'selectedIds'")
    regions.add_argument("--output", help="Write JSON here instead of stdout")
    regions.set_defaults(func=_cmd_regions)

    for name, help_text in (
        (Mode.MERGE.value, "Merge the regions crossed by the gesture points"),
        (Mode.SUBTRACT.value, "Subtract the regions crossed by the gesture points"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("document", help="JSON document with 'elements' and optional 'selectedIds'")
        cmd.add_argument(
            "--point",
            nargs=2,
            type=float,
            action="append",
            metavar=("X", "Y"),
            help="Gesture sample in canvas coordinates (repeat for a drag)",
        )
        cmd.add_argument("--output", help="Write the resulting document here instead of stdout")
        cmd.set_defaults(func=_cmd_commit)

    demo = sub.add_parser("demo", help="Decompose two overlapping circles")
    demo.add_argument("--radius", type=float, default=50.0, help="Circle radius")
    demo.set_defaults(func=_cmd_demo)

    return parser


def main(argv: Iterable[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)
    try:
        args.func(args)
    except (OSError, ValueError, KeyError) as exc:
        parser.error(str(exc))
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
