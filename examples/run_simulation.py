#!/usr/bin/env python3
"""Example script demonstrating the garden shade simulator.

This script shows how to:
1. Load a garden configuration
2. Compute the sun position and shadows for one moment
3. Detect shaded plants
4. Sweep a whole day
5. Generate a visualization

Usage:
    python examples/run_simulation.py
"""

from pathlib import Path

from garden_shade_simulator.core.models import GardenConfig
from garden_shade_simulator.core.shade_detection import get_detailed_shade_info
from garden_shade_simulator.core.shadows import (
    calculate_all_shadows,
    calculate_structure_shadows,
    get_shadow_opacity,
)
from garden_shade_simulator.core.structures import plants_for_shadow, structures_for_config
from garden_shade_simulator.core.sun_position import (
    calculate_sun_position,
    format_time_of_day,
    get_daylight_hours,
    get_month_name,
    get_sun_description,
)
from garden_shade_simulator.simulator.time_range import simulate_day
from garden_shade_simulator.visualization.scene_builder import visualize_shade_test


def main():
    """Run example simulation."""
    project_root = Path(__file__).parent.parent
    config_path = project_root / "config" / "default_garden.json"

    print("=" * 60)
    print("Garden Shade Simulator - Example")
    print("=" * 60)

    # Load configuration
    print("\n1. Loading configuration...")
    config = GardenConfig.from_json_file(config_path)
    print(f"   - Loaded {len(config.beds)} beds, {len(config.fences)} fences")
    print(f"   - {len(config.plants)} plants")

    latitude = config.sun.latitude
    month = config.sun.month
    time_of_day = config.sun.time_of_day

    # Sun position
    print("\n2. Computing sun position...")
    sun = calculate_sun_position(latitude, month, time_of_day)
    print(f"   - {get_month_name(month)} at latitude {latitude:.1f}°, {format_time_of_day(time_of_day)}")
    print(f"   - Daylight hours: {get_daylight_hours(latitude, month):.1f}")
    print(f"   - {get_sun_description(sun)} (azimuth={sun.azimuth:.1f}°)")
    print(f"   - Shadow opacity: {get_shadow_opacity(sun.altitude, config.settings):.2f}")

    plants = plants_for_shadow(config)
    structures = structures_for_config(config)

    plant_shadows = calculate_all_shadows(plants, sun, config.settings)
    structure_shadows = calculate_structure_shadows(structures, sun, config.settings)
    print(f"   - Plant shadows: {len(plant_shadows)}")
    print(f"   - Structure shadow quadrilaterals: {len(structure_shadows)}")

    # Shade detection
    print("\n3. Detecting shaded plants...")
    details = get_detailed_shade_info(plants, sun, structures, config.settings)
    if details["reason"]:
        print(f"   - No shade detection: {details['reason']}")
    for plant in details["plants"]:
        if plant["is_shaded"]:
            print(f"   - {plant['plant_id']} shaded by {plant['cause_type']} {plant['cause_id']}")
    print(f"   - {details['n_shaded']} of {details['n_plants']} plants shaded")

    # Day sweep
    print("\n4. Sweeping the whole day...")
    result = simulate_day(config)
    print(f"   - Samples: {result.total_samples}")
    for plant in plants:
        print(f"   - {plant.id}: ~{result.shaded_hours(plant.id):.1f} h of shade")

    # Visualization
    print("\n5. Creating visualization...")
    fig = visualize_shade_test(config, latitude, month, time_of_day)
    output_path = project_root / "examples" / "garden.html"
    fig.write_html(str(output_path))
    print(f"   - Saved visualization to: {output_path}")

    print("\n" + "=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
