#!/usr/bin/env python3
"""Generate the interactive time-slider visualization from a garden config.

Run this script after editing config/default_garden.json to update the
visualization.

Usage:
    python generate_visualization.py              # Month from the config
    python generate_visualization.py 5.7          # Late June (near the solstice)
    python generate_visualization.py 11.7         # Late December
"""

import sys
from pathlib import Path

from garden_shade_simulator.core.models import GardenConfig
from garden_shade_simulator.core.sun_position import get_daylight_hours, get_month_name
from garden_shade_simulator.visualization.interactive import create_time_slider_visualization


def main():
    config_path = Path("config/default_garden.json")
    output_path = Path("examples/interactive_garden.html")

    config = GardenConfig.from_json_file(config_path)

    if len(sys.argv) > 1:
        try:
            month = float(sys.argv[1])
        except ValueError:
            print(f"Invalid month: {sys.argv[1]}")
            print("Use a continuous month from 0 (January) to 11.99 (December)")
            sys.exit(1)
    else:
        month = config.sun.month

    latitude = config.sun.latitude

    print("=" * 60)
    print("Garden Shade Visualization Generator")
    print("=" * 60)
    print(f"\nLatitude: {latitude:.2f}°")
    print(f"Month: {get_month_name(month)} ({month:.2f})")
    print(f"Daylight: {get_daylight_hours(latitude, month):.1f} hours")
    print(f"Beds: {len(config.beds)}, fences: {len(config.fences)}, plants: {len(config.plants)}")

    print("\nGenerating visualization...")
    create_time_slider_visualization(
        config=config,
        latitude=latitude,
        month=month,
        output_path=str(output_path),
    )

    print(f"\n{'=' * 60}")
    print(f"Saved to: {output_path.absolute()}")
    print("Open this file in your browser")
    print("=" * 60)


if __name__ == "__main__":
    main()
