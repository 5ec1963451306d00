"""
Async client for the gateway local binary api (the so called 'telnet'
interface listening on tcp port 45000).

Every command/reply is framed as:

    FF FF <cmd> <size> <data...> <checksum>

where 'size' counts cmd, size, data and checksum bytes and 'checksum'
is the 8 bit sum of every byte from cmd to the last data byte.
Only the read-only queries are implemented: they're useful to check
which firmware a gateway is actually running against the catalog
(see async_main, installed as the 'ecowitt-gateway' command).
"""

import asyncio
import sys
from typing import TYPE_CHECKING, NamedTuple

from . import const as ec
from .helpers import Loggable
from .service import FirmwareService

if TYPE_CHECKING:
    from typing import Unpack


class GatewayProtocolError(Exception):
    """the gateway reply is not a valid packet for the issued command"""

    def __init__(self, cmd: int, reason: str):
        self.cmd = cmd
        super().__init__(f"{reason} (cmd:0x{cmd:02X})")


def checksum(data: bytes, /) -> int:
    return sum(data) & 0xFF


def build_command_packet(cmd: int, data: bytes = b"", /) -> bytes:
    body = bytes((cmd, len(data) + 3)) + data
    return ec.GATEWAY_HEADER + body + bytes((checksum(body),))


def parse_reply_packet(cmd: int, packet: bytes, /) -> bytes:
    """Validates the reply framing and returns the data bytes."""
    if packet[:2] != ec.GATEWAY_HEADER:
        raise GatewayProtocolError(cmd, f"bad header {packet[:2].hex()}")
    if len(packet) < 5:
        raise GatewayProtocolError(cmd, f"packet too short ({len(packet)} bytes)")
    if packet[3] != len(packet) - 2:
        raise GatewayProtocolError(
            cmd, f"size mismatch (declared:{packet[3]} received:{len(packet) - 2})"
        )
    if (computed := checksum(packet[2:-1])) != packet[-1]:
        raise GatewayProtocolError(
            cmd, f"checksum mismatch (sent:{packet[-1]} computed:{computed})"
        )
    if packet[2] != cmd:
        raise GatewayProtocolError(cmd, f"reply to command 0x{packet[2]:02X}")
    return packet[4:-1]


class GatewayApiClient(Loggable):
    """
    Issues a single command per connection: the gateway firmware is
    not reliable when commands are pipelined on the same socket.
    """

    DEFAULT_TIMEOUT = 5

    __slots__ = (
        "host",
        "port",
        "timeout",
    )

    def __init__(
        self,
        host: str,
        port: int = ec.GATEWAY_PORT,
        timeout: float = DEFAULT_TIMEOUT,
        **kwargs: "Unpack[Loggable.Args]",
    ):
        self.host = host
        self.port = port
        self.timeout = timeout
        super().__init__(f"{host}:{port}", **kwargs)

    async def async_request(self, cmd: int, data: bytes = b"", /) -> bytes:
        """Sends the command and returns the (validated) reply data."""
        request = build_command_packet(cmd, data)
        self.log(self.VERBOSE, "request: %s", request.hex(" "))
        async with asyncio.timeout(self.timeout):
            reader, writer = await asyncio.open_connection(self.host, self.port)
            try:
                writer.write(request)
                await writer.drain()
                # header + cmd + size
                head = await reader.readexactly(4)
                reply = head + await reader.readexactly(max(head[3] - 2, 0))
            except asyncio.IncompleteReadError as error:
                raise GatewayProtocolError(
                    cmd, f"connection closed after {len(error.partial)} bytes"
                ) from error
            finally:
                writer.close()
                await writer.wait_closed()
        self.log(self.VERBOSE, "reply: %s", reply.hex(" "))
        return parse_reply_packet(cmd, reply)

    async def async_read_station_mac(self) -> str:
        data = await self.async_request(ec.CMD_READ_STATION_MAC)
        if len(data) < 6:
            raise GatewayProtocolError(
                ec.CMD_READ_STATION_MAC, f"mac address too short ({len(data)} bytes)"
            )
        return data[:6].hex(":")

    async def async_read_firmware_version(self) -> str:
        data = await self.async_request(ec.CMD_READ_FIRMWARE_VERSION)
        if not data or len(data) < data[0] + 1:
            raise GatewayProtocolError(
                ec.CMD_READ_FIRMWARE_VERSION, "truncated version string"
            )
        version = data[1 : data[0] + 1].decode("ascii", errors="replace")
        self.log(self.DEBUG, "firmware version: %s", version)
        return version


class GatewayInfo(NamedTuple):
    mac: str
    firmware: str
    """firmware string as reported by the gateway (i.e. 'GW2000B_V3.1.2')"""
    model: str
    version: str


def split_firmware(firmware: str, /) -> tuple[str, str]:
    """'GW2000B_V3.1.2' -> ('GW2000B', 'V3.1.2')"""
    model, _, version = firmware.rpartition("_")
    return model, version


async def async_query_gateway(
    host: str,
    port: int = ec.GATEWAY_PORT,
    timeout: float = GatewayApiClient.DEFAULT_TIMEOUT,
) -> GatewayInfo:
    client = GatewayApiClient(host, port, timeout)
    mac = await client.async_read_station_mac()
    firmware = await client.async_read_firmware_version()
    return GatewayInfo(mac, firmware, *split_firmware(firmware))


async def async_main(argv) -> int:
    """
    Queries a gateway and shows what the catalog would offer it, the same
    request the gateway itself sends on its periodic version check.
    command line invocation:
    'python -m ecowitt_cloud.gateway [-port45000] [-timeout5] [-catalogfirmware-info] host'
    """
    host = None
    port = ec.GATEWAY_PORT
    timeout = GatewayApiClient.DEFAULT_TIMEOUT
    catalog = ec.CONF_CATALOG_DEFAULT
    for arg in argv:
        arg: str
        if arg.startswith("-port"):
            port = int(arg[5:])
        elif arg.startswith("-timeout"):
            timeout = float(arg[8:])
        elif arg.startswith("-catalog"):
            catalog = arg[8:].strip()
        else:
            host = arg

    if not host:
        print("usage: ecowitt-gateway [-port<n>] [-timeout<s>] [-catalog<path>] host")
        return 2

    try:
        info = await async_query_gateway(host, port, timeout)
    except (OSError, GatewayProtocolError) as error:
        print(f"Failed to query gateway {host}:{port}: {error}")
        return 1
    print(f"MAC Address [{info.mac}]")
    print(f"Firmware Version [{info.firmware}]")

    envelope = FirmwareService(catalog).handle(
        {
            ec.PARAM_ID: info.mac,
            ec.PARAM_MODEL: info.model,
            ec.PARAM_VERSION: info.version,
        }
    )
    print(f"Catalog reply [{envelope.code}] {envelope.msg}")
    if data := envelope[ec.KEY_DATA]:
        print(f"Offered firmware [{data[ec.KEY_NAME]}] {data[ec.KEY_ATTACH1FILE]}")
    return 0


def main(argv=None) -> int:
    return asyncio.run(async_main(sys.argv[1:] if argv is None else argv))


if __name__ == "__main__":
    sys.exit(main())
