"""
Command line entry point for Template Forge.

Commands:
    count     Validate a request and print the number of combinations
    generate  Enumerate, assemble and write combinations (JSON, PDF, SVG, PNG)
    slots     Regenerate grid or flex slots in a spec file
    layout    Stack a module's elements and write the result

Usage:
    template-forge count --library lib/ --layout L1 --module m1 m2
    template-forge generate --library lib/ --layout L1 --module m1 m2 --topic "Cafe" --out out/ --pdf

Exit codes: 0 on success, 1 when the request fails validation, 2 on
usage or I/O errors.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from template_forge.core.models import FlexDirection, SpecKind
from template_forge.core.schemas import ValidationError
from template_forge.core.utils import load_spec_json, save_json, save_spec_json
from template_forge.engine.config import EngineConfig
from template_forge.engine.controller import GenerationRequest, GenerationResult, TemplateAssembler
from template_forge.engine.layout import (
    FlexSlotParams,
    GridSlotParams,
    apply_flex_slots,
    apply_grid_slots,
    layout_module,
)
from template_forge.engine.library import LibraryError, SpecLibrary
from template_forge.engine.output import render_module_svg, render_svg, render_to_pdf, save_png
from template_forge.engine.textfill import TextClientError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_ERROR = 2

COMBINATIONS_FILE = "combinations.json"
PDF_FILE = "templates.pdf"


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def _cmd_count(args: argparse.Namespace, config: EngineConfig) -> int:
    library = SpecLibrary.from_directory(Path(args.library))
    assembler = TemplateAssembler(library, config=config)
    counted = assembler.validate_and_count(args.layout, args.module)
    if not counted.ok:
        print(counted.issue.message, file=sys.stderr)
        return EXIT_INVALID
    print(counted.count)
    return EXIT_OK


def _write_outputs(result: GenerationResult, args: argparse.Namespace) -> None:
    out_dir = Path(args.out)
    save_json([c.to_dict() for c in result.combinations], out_dir / COMBINATIONS_FILE)

    specs = [c.spec for c in result.combinations]
    if args.pdf:
        render_to_pdf(specs, out_dir / PDF_FILE)
    if args.svg:
        svg_dir = out_dir / "svg"
        svg_dir.mkdir(parents=True, exist_ok=True)
        for combo in result.combinations:
            (svg_dir / f"template_{combo.idx:03d}.svg").write_text(render_svg(combo.spec), encoding="utf-8")
    if args.png:
        for combo in result.combinations:
            save_png(combo.spec, out_dir / "png" / f"template_{combo.idx:03d}.png")


def _cmd_generate(args: argparse.Namespace, config: EngineConfig) -> int:
    if args.cap is not None:
        config = replace(config, generation_cap=args.cap)

    library = SpecLibrary.from_directory(Path(args.library))
    request = GenerationRequest(
        layout_ids=tuple(args.layout),
        module_ids=tuple(args.module),
        topic=args.topic,
        text_fill=True if args.text_fill else None,
    )
    with TemplateAssembler(library, config=config) as assembler:
        result = assembler.generate(request)

    if not result.ok:
        print(result.issue.message, file=sys.stderr)
        return EXIT_INVALID

    _write_outputs(result, args)

    for warning in result.warnings:
        print(f"warning: {warning}", file=sys.stderr)
    if result.notice:
        print(f"notice: {result.notice}", file=sys.stderr)
    print(f"{len(result.combinations)} of {result.count} combination(s) written to {args.out}")
    return EXIT_OK


def _cmd_slots(args: argparse.Namespace, config: EngineConfig) -> int:
    spec = load_spec_json(Path(args.spec), kind=SpecKind(args.kind) if args.kind else None)
    if args.mode == "grid":
        params = GridSlotParams(
            padding=args.padding,
            gap=args.gap,
            cols=args.cols,
            rows=args.rows,
            slot_key_base=args.key_base,
        )
        updated = apply_grid_slots(spec, params)
    else:
        params = FlexSlotParams(
            padding=args.padding,
            gap=args.gap,
            count=args.count,
            per_line=args.per_line,
            cross_size=args.cross_size,
            direction=FlexDirection.parse(args.direction),
            wrap=not args.no_wrap,
            slot_key_base=args.key_base,
        )
        updated = apply_flex_slots(spec, params)

    out = Path(args.out or args.spec)
    save_spec_json(updated, out)
    print(f"{len(updated.slots)} slot(s) written to {out}")
    return EXIT_OK


def _cmd_layout(args: argparse.Namespace, config: EngineConfig) -> int:
    spec = load_spec_json(Path(args.spec), kind=SpecKind.MODULE)
    stacked = layout_module(spec, padding=config.stack_padding, gap=config.stack_gap)

    out = Path(args.out or args.spec)
    save_spec_json(stacked, out)
    if args.svg:
        svg_path = Path(args.svg)
        svg_path.parent.mkdir(parents=True, exist_ok=True)
        svg_path.write_text(render_module_svg(stacked), encoding="utf-8")
    print(f"{len(stacked.elements)} element(s) written to {out}")
    return EXIT_OK


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

def _add_request_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--library", required=True, help="Directory of layout/module JSON rows")
    parser.add_argument("--layout", nargs="+", required=True, help="Layout ids, in order")
    parser.add_argument("--module", nargs="+", default=[], help="Module ids for the pool")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="template-forge",
        description="Compose printable templates from layouts and modules.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--env-file", help="Path to a .env file (default: search from cwd)")
    sub = parser.add_subparsers(dest="command", required=True)

    count = sub.add_parser("count", help="Count combinations for a request")
    _add_request_args(count)
    count.set_defaults(func=_cmd_count)

    gen = sub.add_parser("generate", help="Generate and write combinations")
    _add_request_args(gen)
    gen.add_argument("--topic", help="Topic for placeholders and generated text")
    gen.add_argument("--text-fill", action="store_true", help="Request AI text for every slot")
    gen.add_argument("--cap", type=int, help="Maximum combinations to produce")
    gen.add_argument("--out", required=True, help="Output directory")
    gen.add_argument("--pdf", action="store_true", help=f"Also write {PDF_FILE}")
    gen.add_argument("--svg", action="store_true", help="Also write one SVG per combination")
    gen.add_argument("--png", action="store_true", help="Also write one PNG thumbnail per combination")
    gen.set_defaults(func=_cmd_generate)

    slots = sub.add_parser("slots", help="Regenerate slots in a spec file")
    slots.add_argument("--spec", required=True, help="Spec JSON file")
    slots.add_argument("--kind", choices=[k.value for k in SpecKind], help="Override the spec kind")
    slots.add_argument("--mode", choices=["grid", "flex"], default="grid")
    slots.add_argument("--padding", type=float, default=24)
    slots.add_argument("--gap", type=float, default=16)
    slots.add_argument("--cols", type=int, default=2)
    slots.add_argument("--rows", type=int, default=2)
    slots.add_argument("--count", type=int, default=6)
    slots.add_argument("--per-line", type=int, default=3)
    slots.add_argument("--cross-size", type=float, default=160)
    slots.add_argument("--direction", choices=[d.value for d in FlexDirection], default="row")
    slots.add_argument("--no-wrap", action="store_true", help="Keep every flex slot on one line")
    slots.add_argument("--key-base", default="slot", help="Slot key prefix")
    slots.add_argument("--out", help="Output file (default: overwrite --spec)")
    slots.set_defaults(func=_cmd_slots)

    layout = sub.add_parser("layout", help="Stack a module's elements")
    layout.add_argument("--spec", required=True, help="Module spec JSON file")
    layout.add_argument("--out", help="Output file (default: overwrite --spec)")
    layout.add_argument("--svg", help="Also write a module preview SVG here")
    layout.set_defaults(func=_cmd_layout)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = EngineConfig.from_env(args.env_file)
        return args.func(args, config)
    except (LibraryError, ValidationError, TextClientError, FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        return EXIT_ERROR
    except OSError as e:
        logger.error(f"I/O error: {e}")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
