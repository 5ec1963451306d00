"""
aiohttp request handlers for the endpoints polled by the gateways.

Beside the firmware version check (see service.FirmwareService) the
gateway talks to a few other endpoints which only need a fixed shaped
reply: these are implemented here as simple stubs which log what they
receive.
"""

from typing import TYPE_CHECKING

from aiohttp import web

from . import const as ec
from .helpers import LOGGER
from .protocol import json_dumps_php
from .suninfo import get_local_time_info

if TYPE_CHECKING:
    from typing import Awaitable, Callable, Mapping

    from .service import FirmwareService

    Handler = Callable[[web.Request], Awaitable[web.Response]]


def log_request(request: web.Request, params: "Mapping[str, str]", /):
    LOGGER.debug(
        "running %s - method[%s], host[%s], http_host[%s]",
        request.path,
        request.method,
        request.remote,
        request.host or "<notset>",
    )
    for key, value in params.items():
        LOGGER.debug(' var[%s] = "%s"', key, value)


async def _get_params(request: web.Request, /) -> "Mapping[str, str]":
    """query parameters merged with the (eventual) urlencoded form body"""
    params = dict(request.query)
    if request.can_read_body:
        params.update(await request.post())  # type: ignore
    return params


def make_version_info_handler(service: "FirmwareService", /) -> "Handler":
    async def _callback(request: web.Request) -> web.Response:
        params = request.query
        log_request(request, params)
        # the vendor always replies 200, errors are in the envelope
        return web.Response(
            text=service.handle_text(params), content_type="application/json"
        )

    return _callback


def make_initialization_handler() -> "Handler":
    async def _callback(request: web.Request) -> web.Response:
        log_request(request, request.query)
        return web.Response(status=200)

    return _callback


def make_report_handler() -> "Handler":
    async def _callback(request: web.Request) -> web.Response:
        log_request(request, await _get_params(request))
        # the gateway wants a 202 here
        return web.Response(status=202, text=ec.REPORT_RESPONSE)

    return _callback


def make_ip_api_handler(
    latitude: float, longitude: float, timezone: str | None = None, /
) -> "Handler":
    async def _callback(request: web.Request) -> web.Response:
        log_request(request, await _get_params(request))
        info = get_local_time_info(latitude, longitude, timezone)
        LOGGER.debug(
            "tzoffset[%d] dst[%d] name[%s] sunrise[%s] sunset[%s]",
            info.utc_offset,
            info.dst,
            info.timezone,
            info.sunrise,
            info.sunset,
        )
        return web.Response(
            status=202,
            text=json_dumps_php(info.as_payload()) + "\n",
            content_type="application/json",
        )

    return _callback

