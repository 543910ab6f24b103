"""Sun position calculation from latitude, season and time of day.

The model works from a continuous month (0-11.99) rather than a calendar
date, and from a fractional time of day (0 = sunrise, 1 = sunset) rather than
a clock time. Declination uses the standard seasonal approximation and the
sunrise/sunset hour angle comes from the sunrise equation on flat terrain
(no refraction).
"""

import math

from .models import SunPosition

MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

COMPASS_DIRECTIONS = ["N", "NE", "E", "SE", "S", "SW", "W", "NW"]

DAYS_PER_YEAR = 365.25
MAX_DECLINATION = 23.45
MAX_MONTH = 11.99

POLAR_DAY = "polar_day"
POLAR_NIGHT = "polar_night"
NORMAL = "normal"


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def day_of_year_from_month(month: float) -> float:
    """Map a continuous month (0 = start of January) onto a day-of-year proxy."""
    return month / 12.0 * DAYS_PER_YEAR


def solar_declination(month: float) -> float:
    """Solar declination in degrees for a continuous month.

    Uses ``23.45 * sin(360/365 * (day - 81))``; day 81 is the March equinox.
    """
    day = day_of_year_from_month(month)
    return MAX_DECLINATION * math.sin(math.radians(360.0 / 365.0 * (day - 81.0)))


def half_day_angle(latitude: float, declination: float) -> tuple[float, str]:
    """Hour angle of sunset (omega0) in degrees, plus the polar state.

    Solves ``cos(omega0) = -tan(lat) * tan(decl)``. Arguments outside [-1, 1]
    mean the sun never sets (polar day, omega0 = 180) or never rises
    (polar night, omega0 = 0).

    Args:
        latitude: Latitude in degrees.
        declination: Solar declination in degrees.

    Returns:
        Tuple of (omega0_deg, state) where state is "normal", "polar_day"
        or "polar_night".
    """
    cos_omega0 = -math.tan(math.radians(latitude)) * math.tan(math.radians(declination))

    if cos_omega0 <= -1.0:
        return 180.0, POLAR_DAY
    if cos_omega0 >= 1.0:
        return 0.0, POLAR_NIGHT
    return math.degrees(math.acos(cos_omega0)), NORMAL


def calculate_sun_position(latitude: float, month: float, time_of_day: float) -> SunPosition:
    """Calculate sun position for a latitude, continuous month and time of day.

    Args:
        latitude: Latitude in degrees (-90 to 90, positive = North).
        month: Continuous month (0 to 11.99) for smooth seasonal interpolation.
        time_of_day: Fraction of the daylight period (0 = sunrise, 1 = sunset).

    Returns:
        SunPosition with altitude and compass azimuth in degrees.
    """
    latitude = _clamp(latitude, -90.0, 90.0)
    month = _clamp(month, 0.0, MAX_MONTH)
    time_of_day = _clamp(time_of_day, 0.0, 1.0)

    decl = solar_declination(month)
    omega0, state = half_day_angle(latitude, decl)

    # 0 -> sunrise (-omega0), 0.5 -> solar noon, 1 -> sunset (+omega0).
    # In polar night omega0 is 0 and the sun sits at its (negative) noon altitude.
    hour_angle = -omega0 + 2.0 * omega0 * time_of_day

    lat_rad = math.radians(latitude)
    decl_rad = math.radians(decl)
    ha_rad = math.radians(hour_angle)

    sin_alt = (
        math.sin(lat_rad) * math.sin(decl_rad)
        + math.cos(lat_rad) * math.cos(decl_rad) * math.cos(ha_rad)
    )
    altitude = math.degrees(math.asin(_clamp(sin_alt, -1.0, 1.0)))

    # Azimuth measured from South, positive toward West
    azimuth_from_south = math.degrees(
        math.atan2(
            math.sin(ha_rad),
            math.cos(ha_rad) * math.sin(lat_rad) - math.tan(decl_rad) * math.cos(lat_rad),
        )
    )
    azimuth = (azimuth_from_south + 180.0) % 360.0
    if azimuth >= 360.0:
        azimuth = 0.0

    return SunPosition(
        altitude=altitude,
        azimuth=azimuth,
        is_night=state == POLAR_NIGHT or altitude <= 0.0,
    )


def get_daylight_hours(latitude: float, month: float) -> float:
    """Hours of daylight for a latitude and continuous month.

    Derived from the same omega0 as ``calculate_sun_position`` so the
    displayed day length always matches the simulated sun arc.
    """
    latitude = _clamp(latitude, -90.0, 90.0)
    month = _clamp(month, 0.0, MAX_MONTH)
    omega0, _ = half_day_angle(latitude, solar_declination(month))
    return 2.0 * omega0 / 15.0


def get_month_name(month: float) -> str:
    """Get the name of a month from its (continuous) index."""
    return MONTH_NAMES[int(math.floor(month)) % 12]


def format_time_of_day(time_of_day: float) -> str:
    """Format time of day (0-1) as a clock string.

    Daylight is shown as a nominal 6 AM to 6 PM span for display purposes.
    """
    total_minutes = int(round((6 + _clamp(time_of_day, 0.0, 1.0) * 12) * 60))
    hour, minutes = divmod(total_minutes, 60)

    period = "PM" if hour >= 12 else "AM"
    display_hour = hour - 12 if hour > 12 else hour
    return f"{display_hour}:{minutes:02d} {period}"


def get_compass_direction(azimuth: float) -> str:
    """Convert an azimuth to an 8-point compass direction."""
    index = int(round(azimuth / 45.0)) % 8
    return COMPASS_DIRECTIONS[index]


def get_sun_description(sun: SunPosition) -> str:
    """Short human-readable description of the sun position."""
    if sun.is_night:
        return "Sun below horizon"

    direction = get_compass_direction(sun.azimuth)
    altitude = round(sun.altitude)

    if sun.altitude > 60:
        return f"High sun ({altitude}°) in {direction}"
    elif sun.altitude > 30:
        return f"Sun at {altitude}° in {direction}"
    return f"Low sun ({altitude}°) in {direction}"
