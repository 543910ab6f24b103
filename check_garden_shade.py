#!/usr/bin/env python3
"""Command-line tool for checking which plants in a garden are shaded.

Usage:
    # Use the sun settings stored in the config:
    python check_garden_shade.py --config config/default_garden.json

    # Override the sun settings:
    python check_garden_shade.py --config config/default_garden.json \
        --latitude 40 --month 6 --time 0.5

    # Machine-readable output:
    python check_garden_shade.py --json

    # Sweep the whole day:
    python check_garden_shade.py --day

Returns:
    Prints the shaded plant IDs (one per line), or a JSON report.
    Exit code 1 on configuration errors.
"""

import argparse
import json
import logging
import sys

from garden_shade_simulator.core.models import GardenConfig
from garden_shade_simulator.core.shade_detection import get_detailed_shade_info
from garden_shade_simulator.core.structures import plants_for_shadow, structures_for_config
from garden_shade_simulator.core.sun_position import (
    calculate_sun_position,
    format_time_of_day,
    get_daylight_hours,
    get_sun_description,
)
from garden_shade_simulator.simulator.time_range import simulate_day

DEFAULT_CONFIG_PATH = "config/default_garden.json"


def main():
    parser = argparse.ArgumentParser(description="Report which garden plants are shaded")
    parser.add_argument("--config", type=str, default=DEFAULT_CONFIG_PATH, help="Path to garden config")
    parser.add_argument("--latitude", type=float, help="Latitude in degrees")
    parser.add_argument("--month", type=float, help="Continuous month (0-11.99)")
    parser.add_argument("--time", type=float, help="Time of day (0 = sunrise, 1 = sunset)")
    parser.add_argument("--day", action="store_true", help="Sweep the whole day instead")
    parser.add_argument("--json", action="store_true", help="Output JSON format")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        config = GardenConfig.from_json_file(args.config)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    latitude = config.sun.latitude if args.latitude is None else args.latitude
    month = config.sun.month if args.month is None else args.month
    time_of_day = config.sun.time_of_day if args.time is None else args.time

    if args.day:
        result = simulate_day(config, latitude=latitude, month=month, keep_details=False)
        if args.json:
            print(json.dumps(result.to_dict(), indent=2))
            return
        print(f"Daylight: {result.daylight_hours:.1f} h")
        for interval in result.intervals:
            print(
                f"{interval.plant_id}: shaded "
                f"{format_time_of_day(interval.start_time_of_day)} - "
                f"{format_time_of_day(interval.end_time_of_day)}"
            )
        return

    sun = calculate_sun_position(latitude, month, time_of_day)
    details = get_detailed_shade_info(
        plants_for_shadow(config),
        sun,
        structures_for_config(config),
        config.settings,
    )

    if args.json:
        details["daylight_hours"] = round(get_daylight_hours(latitude, month), 2)
        print(json.dumps(details, indent=2))
        return

    print(get_sun_description(sun), file=sys.stderr)
    for plant in details["plants"]:
        if plant["is_shaded"]:
            print(plant["plant_id"])


if __name__ == "__main__":
    main()
