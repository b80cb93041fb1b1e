#!/usr/bin/env python3
"""
RibForge: Command-line driver
=============================

Usage:
    python main.py --summary                      Show configuration summary
    python main.py --write-spec wing.json         Dump the default spec as JSON
    python main.py --spec wing.json --out output  Generate ribs, nest and export
    python main.py --out output --dxf --kerf      Same, with DXF and kerf offsets

The core library is pure; this script is the only place that touches files.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from config import config  # noqa: E402
from ribforge import (  # noqa: E402
    SheetSpec,
    SpecValidationError,
    WingSpec,
    generate_wing,
    layout_manifest,
    layout_to_sheet_svgs,
    pack_parts,
    wing_plan_svg,
    wing_ribs_svg,
    wing_to_parts,
)


def load_spec(path: Optional[Path]) -> WingSpec:
    if path is None:
        return WingSpec.default()
    return WingSpec.from_json(path.read_text())


def export_all(spec: WingSpec, sheet: SheetSpec, out_dir: Path, dxf: bool, kerf: bool, spars: bool) -> int:
    """Run the whole pipeline and write every artifact. Returns a process exit code."""
    try:
        wing = generate_wing(spec)
    except SpecValidationError as e:
        print(f"  [!] Invalid wing spec: {e}")
        return 2

    out_dir.mkdir(parents=True, exist_ok=True)
    kerf_width = spec.kerf if kerf else 0.0

    layout = pack_parts(wing_to_parts(wing, include_spars=spars), sheet)
    for i, svg in enumerate(layout_to_sheet_svgs(layout, sheet, kerf=kerf_width, units=spec.units)):
        (out_dir / f"wing_sheet_{i + 1}.svg").write_text(svg, encoding="utf-8")

    (out_dir / "wing_plan.svg").write_text(wing_plan_svg(wing), encoding="utf-8")
    (out_dir / "wing_ribs.svg").write_text(wing_ribs_svg(wing, include_spars=spars), encoding="utf-8")
    (out_dir / "nest_manifest.csv").write_text(layout_manifest(layout), encoding="utf-8")

    if dxf:
        from ribforge.dxf_export import layout_to_dxf

        for i, doc in enumerate(layout_to_dxf(layout, sheet, kerf=kerf_width, unit=spec.units)):
            doc.saveas(out_dir / f"wing_sheet_{i + 1}.dxf")

    print(f"  {len(wing.ribs)} ribs on {len(layout.sheets)} sheet(s) written to {out_dir}")
    for warning in layout.warnings:
        print(f"  [!] {warning}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="RibForge laser-cut rib generator")
    parser.add_argument("--spec", type=Path, help="Wing spec JSON (defaults to the configured wing)")
    parser.add_argument("--out", type=Path, help="Output directory for SVG/DXF sheets")
    parser.add_argument("--sheet", nargs=2, type=float, metavar=("W", "H"), help="Sheet size")
    parser.add_argument("--margin", type=float, default=config.sheet.margin)
    parser.add_argument("--spacing", type=float, default=config.sheet.spacing)
    parser.add_argument("--dxf", action="store_true", help="Also write DXF sheets")
    parser.add_argument("--kerf", action="store_true", help="Apply kerf compensation to cut paths")
    parser.add_argument("--spars", action="store_true", help="Nest spar strips as cut parts")
    parser.add_argument("--write-spec", type=Path, help="Write the wing spec as JSON and exit")
    parser.add_argument("--summary", action="store_true", help="Show configuration summary")
    parser.add_argument("-v", "--verbose", action="store_true")

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if len(sys.argv) == 1:
        parser.print_help()
        return 0

    print(f"RibForge v{config.version}")

    if args.summary:
        print(config.summary())

    try:
        spec = load_spec(args.spec)
    except ValueError as e:
        # SpecValidationError for missing keys, JSONDecodeError for bad JSON
        print(f"  [!] Invalid wing spec {args.spec}: {e}")
        return 2

    if args.write_spec:
        args.write_spec.write_text(spec.to_json(), encoding="utf-8")
        print(f"  Spec written to {args.write_spec}")
        return 0

    if args.out:
        width, height = args.sheet if args.sheet else (config.sheet.width, config.sheet.height)
        sheet = SheetSpec(width=width, height=height, margin=args.margin, spacing=args.spacing)
        return export_all(spec, sheet, args.out, args.dxf, args.kerf, args.spars)

    return 0


if __name__ == "__main__":
    sys.exit(main())
