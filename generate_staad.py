#!/usr/bin/env python
"""
Generate STAAD plate model from a plan with pedestals.

Usage:
    python generate_staad.py [output.STD] [x,z[,length,width] ...]

Plan size, mesh, pedestal height, plate thickness and orientation come from
the bundled config defaults.

Example:
    python generate_staad.py footing.STD 3,2 1.5,1,0.6,0.4
"""

import sys
from datetime import date
from pathlib import Path
from pydantic import ValidationError

from staadmesh.core.config import get_default_config
from staadmesh.core.models import Pedestal, PlanSnapshot
from staadmesh.generation.staad_generator import StaadGenerator
from staadmesh.pipeline import compute_model


def parse_pedestal(pedestal_id: int, arg: str, config) -> Pedestal:
    """Parse 'x,z' or 'x,z,length,width' into a Pedestal."""
    parts = [float(p) for p in arg.split(",")]
    if len(parts) == 2:
        parts += [
            config.get_pedestal_default("length", 0.5),
            config.get_pedestal_default("width", 0.3),
        ]
    if len(parts) != 4:
        raise ValueError(f"Expected x,z or x,z,length,width, got '{arg}'")

    x, z, length, width = parts
    return Pedestal(id=pedestal_id, x=x, z=z, length=length, width=width)


def main():
    config = get_default_config()
    args = sys.argv[1:]

    # Determine output file
    if args and "," not in args[0]:
        output_file = args.pop(0)
    else:
        output_file = config.get_export_setting("file_name", "Plate Geometry.STD")

    try:
        pedestals = [
            parse_pedestal(i, arg, config) for i, arg in enumerate(args, start=1)
        ]
        snapshot = PlanSnapshot.from_config(config, pedestals=pedestals)
    except (ValueError, ValidationError) as e:
        print(f"Error: invalid input: {e}")
        print()
        print("Usage: python generate_staad.py [output.STD] [x,z[,length,width] ...]")
        sys.exit(1)

    print("=" * 60)
    print("staadmesh - Plan to STAAD Generator")
    print("=" * 60)
    print(f"Plan:   {snapshot.length} x {snapshot.width} m, mesh {snapshot.mesh} m")
    print(f"Output: {output_file}")
    print()

    # Step 1: Build model
    print("[1/2] Building plate model...")
    model = compute_model(snapshot)
    print(f"      [OK] Grid: {len(model.grid.x_lines)}x{len(model.grid.z_lines)} lines")
    print(f"      [OK] {model.summary()}")
    print(f"      [OK] Moment group: {len(model.groups.moment)} plates")
    print(f"      [OK] 1-way shear group: {len(model.groups.one_way_shear)} plates")
    print(f"      [OK] 2-way shear group: {len(model.groups.two_way_shear)} plates")
    skipped = len(snapshot.pedestals) - len(model.members)
    if snapshot.pedestal_height > 0 and skipped:
        print(f"      [!!] {skipped} pedestal(s) not on a grid node, no member")
    print()

    # Step 2: Write STAAD file
    print("[2/2] Writing STAAD file...")
    generator = StaadGenerator(config=config)
    generator.generate_from_model(model, export_date=date.today())
    generator.write(output_file)
    print("      [OK] Wrote STAAD file")
    print()

    file_size = Path(output_file).stat().st_size / 1024
    print(f"File size: {file_size:.1f} KB")


if __name__ == "__main__":
    main()
