"""
Local time and sun ephemeris for the gateway 'ip_api' request.

The gateway asks for its timezone, UTC offset, DST flag and today's
sunrise/sunset: these are computed from a statically configured
latitude/longitude and the configured (or host) timezone.
Sun events follow the NOAA general solar position approximation which
is accurate to about a minute, more than enough for a 'HH:MM' display.
"""

from datetime import UTC, date, datetime, timedelta
import math
from typing import TYPE_CHECKING, NamedTuple
from zoneinfo import ZoneInfo

from . import const as ec

if TYPE_CHECKING:
    from datetime import tzinfo

# sun center 50' below the horizon: refraction + apparent radius
SUN_ZENITH = math.radians(90.833)

TIME_FORMAT = "%H:%M"
# displayed when the sun doesn't rise (polar night) or set (midnight sun)
POLAR_NIGHT = ("00:00", "00:00")
MIDNIGHT_SUN = ("00:00", "23:59")


class LocalTimeInfo(NamedTuple):
    timezone: str
    utc_offset: int
    """seconds east of UTC"""
    dst: bool
    sunrise: str
    sunset: str

    def as_payload(self):
        # utc_offset and dst are sent as numeric strings
        return {
            ec.KEY_TIMEZONE: self.timezone,
            ec.KEY_UTC_OFFSET: str(self.utc_offset),
            ec.KEY_DST: "1" if self.dst else "0",
            ec.KEY_DATE_SUNRISE: self.sunrise,
            ec.KEY_DATE_SUNSET: self.sunset,
        }


def get_tzinfo(timezone: str | None, /) -> "tzinfo":
    """IANA zoneinfo key or None for the host local timezone."""
    if timezone:
        return ZoneInfo(timezone)
    return datetime.now().astimezone().tzinfo  # type: ignore


def sun_events_utc(
    day: date, latitude: float, longitude: float, /
) -> tuple[datetime, datetime] | bool:
    """
    Returns (sunrise, sunset) as UTC datetimes for the given day.
    When the sun never crosses the horizon returns False (polar night)
    or True (midnight sun).
    """
    gamma = 2 * math.pi / 365 * (day.timetuple().tm_yday - 1)
    eqtime = 229.18 * (
        0.000075
        + 0.001868 * math.cos(gamma)
        - 0.032077 * math.sin(gamma)
        - 0.014615 * math.cos(2 * gamma)
        - 0.040849 * math.sin(2 * gamma)
    )
    decl = (
        0.006918
        - 0.399912 * math.cos(gamma)
        + 0.070257 * math.sin(gamma)
        - 0.006758 * math.cos(2 * gamma)
        + 0.000907 * math.sin(2 * gamma)
        - 0.002697 * math.cos(3 * gamma)
        + 0.00148 * math.sin(3 * gamma)
    )
    lat = math.radians(latitude)
    cos_ha = math.cos(SUN_ZENITH) / (math.cos(lat) * math.cos(decl)) - math.tan(
        lat
    ) * math.tan(decl)
    if cos_ha > 1:
        return False
    if cos_ha < -1:
        return True
    ha = math.degrees(math.acos(cos_ha))
    midnight = datetime(day.year, day.month, day.day, tzinfo=UTC)
    sunrise = midnight + timedelta(minutes=720 - 4 * (longitude + ha) - eqtime)
    sunset = midnight + timedelta(minutes=720 - 4 * (longitude - ha) - eqtime)
    return sunrise, sunset


def get_local_time_info(
    latitude: float,
    longitude: float,
    timezone: str | None = None,
    now: datetime | None = None,
    /,
) -> LocalTimeInfo:
    tz = get_tzinfo(timezone)
    now = (now or datetime.now(UTC)).astimezone(tz)
    utc_offset = now.utcoffset() or timedelta()
    dst = now.dst() or timedelta()
    events = sun_events_utc(now.date(), latitude, longitude)
    if events is False:
        sunrise, sunset = POLAR_NIGHT
    elif events is True:
        sunrise, sunset = MIDNIGHT_SUN
    else:
        sunrise, sunset = (
            event.astimezone(tz).strftime(TIME_FORMAT) for event in events
        )
    return LocalTimeInfo(
        timezone or str(now.tzname()),
        int(utc_offset.total_seconds()),
        bool(dst),
        sunrise,
        sunset,
    )
