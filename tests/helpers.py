import asyncio
from typing import TYPE_CHECKING

from ecowitt_cloud import const as ec
from ecowitt_cloud.gateway import build_command_packet

from . import const as tc

if TYPE_CHECKING:
    from pathlib import Path


def write_catalog(path: "Path", text: str = tc.MOCK_CATALOG):
    path.write_text(text, encoding="utf-8")
    return path


def build_query(
    device_id: str | None = tc.MOCK_DEVICE_ID,
    model: str | None = tc.MOCK_MODEL_RAW,
    version: str | None = "V1.0.0",
):
    """Builds the ota query parameters the way the gateway sends them."""
    query = {
        ec.PARAM_ID: device_id,
        ec.PARAM_MODEL: model,
        ec.PARAM_VERSION: version,
        ec.PARAM_TIME: str(tc.MOCK_EPOCH),
        ec.PARAM_USER: "1",
        ec.PARAM_SIGN: "0123456789ABCDEF0123456789ABCDEF",
    }
    return {key: value for key, value in query.items() if value is not None}


class GatewayEmulator:
    """
    Minimal tcp server answering the local api like a real gateway would.
    'replies' maps a command to the raw packet sent back (a properly framed
    reply is built for the known commands when not overridden).
    """

    def __init__(self, replies: dict[int, bytes] | None = None):
        firmware = tc.MOCK_GATEWAY_FIRMWARE.encode("ascii")
        self.replies = {
            ec.CMD_READ_STATION_MAC: build_command_packet(
                ec.CMD_READ_STATION_MAC, tc.MOCK_GATEWAY_MAC
            ),
            ec.CMD_READ_FIRMWARE_VERSION: build_command_packet(
                ec.CMD_READ_FIRMWARE_VERSION, bytes((len(firmware),)) + firmware
            ),
        }
        if replies:
            self.replies.update(replies)
        self.requests: list[bytes] = []
        self.server: asyncio.Server | None = None

    @property
    def port(self) -> int:
        return self.server.sockets[0].getsockname()[1]  # type: ignore

    async def __aenter__(self):
        self.server = await asyncio.start_server(self._handle, "127.0.0.1", 0)
        return self

    async def __aexit__(self, *args):
        self.server.close()  # type: ignore
        await self.server.wait_closed()  # type: ignore

    async def _handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        try:
            head = await reader.readexactly(4)
            request = head + await reader.readexactly(head[3] - 2)
            self.requests.append(request)
            writer.write(self.replies[request[2]])
            await writer.drain()
        finally:
            writer.close()
