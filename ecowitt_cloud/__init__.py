"""
    ecowitt_cloud: a local replacement for the Ecowitt cloud services
    polled by the weather gateways (GW1000/GW1100/GW2000 and friends).
    When the gateway DNS requests for the vendor hosts (ota.ecowitt.net,
    rtpdate.ecowitt.net, ..) are redirected to this server, the gateway:
    - checks for firmware updates against a local 'firmware-info' catalog
    - receives timezone and sunrise/sunset for the configured location
    - can keep posting its 'ecowitt.net' reports without reaching the internet
    The firmware check is the only endpoint carrying real logic (see service.py):
    the others are fixed shaped stubs (see responders.py).
"""

from dataclasses import dataclass

from aiohttp import web

from . import const as ec
from .helpers import LOGGER, set_logging_level
from .responders import (
    make_initialization_handler,
    make_ip_api_handler,
    make_report_handler,
    make_version_info_handler,
)
from .service import FirmwareService


@dataclass
class ApplicationConfig:
    catalog: str = ec.CONF_CATALOG_DEFAULT
    """path to the firmware-info catalog"""
    latitude: float = 0.0
    longitude: float = 0.0
    timezone: str | None = None
    """IANA timezone key (None to use the host local timezone)"""


def build_application(config: ApplicationConfig) -> web.Application:
    app = web.Application()
    service = FirmwareService(config.catalog)
    version_info_handler = make_version_info_handler(service)
    ip_api_handler = make_ip_api_handler(
        config.latitude, config.longitude, config.timezone
    )
    report_handler = make_report_handler()
    router = app.router
    # the gateway is not consistent about trailing slashes
    for path in (ec.PATH_OTA_VERSION_INFO, ec.PATH_OTA_VERSION_INFO + "/"):
        router.add_get(path, version_info_handler)
    router.add_get(ec.PATH_INITIALIZATION, make_initialization_handler())
    for path in (ec.PATH_IP_API, ec.PATH_IP_API.rstrip("/")):
        router.add_post(path, ip_api_handler)
    for path in (ec.PATH_REPORT, ec.PATH_REPORT.rstrip("/")):
        router.add_post(path, report_handler)
    return app


def run(argv):
    """
    self running python app entry point
    command line invocation:
    'python -m aiohttp.web -H 0.0.0.0 -P 80 ecowitt_cloud:run -lat45.46 -lon9.19 firmware-info'
    options:
    -catalog<path> (or the bare path)
    -lat<latitude> -lon<longitude>
    -timezone<IANA key>
    -loglevel<critical|warning|info|debug|verbose>
    """
    config = ApplicationConfig()
    for arg in argv:
        arg: str
        if arg.startswith("-catalog"):
            config.catalog = arg[8:].strip()
        elif arg.startswith("-lat"):
            config.latitude = float(arg[4:])
        elif arg.startswith("-lon"):
            config.longitude = float(arg[4:])
        elif arg.startswith("-timezone"):
            config.timezone = arg[9:].strip() or None
        elif arg.startswith("-loglevel"):
            set_logging_level(arg[9:].strip())
        else:
            config.catalog = arg

    LOGGER.info(
        "Serving catalog '%s' (lat:%s lon:%s tz:%s)",
        config.catalog,
        config.latitude,
        config.longitude,
        config.timezone or "local",
    )
    return build_application(config)
