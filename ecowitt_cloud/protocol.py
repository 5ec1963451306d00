"""
A collection of typing definitions, exceptions and message helpers
for the Ecowitt cloud protocol as seen by the weather gateways.

The device side is rather picky about the response layout:
- the http status is always 200, errors are carried in 'code'/'msg'
- 'data' is an empty json array (not an object) on errors
- changelogs in 'content' are stored pre-escaped in the catalog (they carry
the 2 characters sequences '\\r' and '\\n') and must reach the device
verbatim so that its own json decoder turns them into line breaks
"""

import json
import re
from time import time
from typing import TYPE_CHECKING, NamedTuple
from zlib import crc32

from . import const as ec

if TYPE_CHECKING:
    from typing import Any, Mapping

    from .catalog import FirmwareRecord


#
# Custom Exceptions
#
class EcowittCloudError(Exception):
    """
    Root of our error taxonomy. Every error maps to a (code, msg)
    pair of the vendor protocol so that it can be rendered in the
    response envelope.
    """

    code: int = ec.CODE_ERROR
    msg: str = ec.MSG_CONFIGURATION_ERROR

    def __init__(self, reason: object | None = None):
        self.reason = reason
        super().__init__(reason)


class CatalogError(EcowittCloudError):
    """the firmware catalog is unusable"""


class CatalogSourceError(CatalogError):
    """the catalog file cannot be read"""

    def __init__(self, path, error: OSError):
        self.path = path
        super().__init__(f"cannot read firmware catalog '{path}' ({error})")


class CatalogParseError(CatalogError):
    """
    signal a syntax/sequencing error in the catalog:
    - lineno is the 1-based physical line number
    - keyword is the offending keyword (if any)
    """

    def __init__(self, lineno: int, keyword: str | None, reason: str):
        self.lineno = lineno
        self.keyword = keyword
        super().__init__(f"{reason} at line {lineno}")


class MalformedLineError(CatalogParseError):
    def __init__(self, lineno: int, keyword: str):
        super().__init__(lineno, keyword, f'keyword "{keyword}" has no value')


class UnknownKeywordError(CatalogParseError):
    def __init__(self, lineno: int, keyword: str):
        super().__init__(lineno, keyword, f'unknown keyword "{keyword}"')


class OutOfSequenceError(CatalogParseError):
    def __init__(self, lineno: int, keyword: str, expected: str):
        self.expected = expected
        super().__init__(
            lineno, keyword, f'keyword "{keyword}" must follow {expected}'
        )


class MissingFileError(CatalogParseError):
    def __init__(self, lineno: int, version: str):
        self.version = version
        super().__init__(
            lineno,
            ec.CATALOG_FIRMWARE,
            f'firmware "{version}" is not followed by a "{ec.CATALOG_FILE1}" entry',
        )


class FieldError(EcowittCloudError):
    """a request parameter is missing or invalid"""

    code = ec.CODE_FIELD_ERROR

    def __init__(self, name: str, msg: str):
        self.name = name
        self.msg = msg
        super().__init__(msg)


class MissingFieldError(FieldError):
    def __init__(self, name: str):
        super().__init__(name, ec.MSG_FIELD_REQUIRE.format(name))


class ResolveError(EcowittCloudError):
    """the requested model/device cannot be resolved to a firmware"""

    def __init__(self, model: str, reason: str):
        self.model = model
        super().__init__(reason)


class UnknownModelError(ResolveError):
    code = ec.CODE_INVALID_MODEL
    msg = ec.MSG_INVALID_MODEL

    def __init__(self, model: str):
        super().__init__(model, f'unsupported model "{model}"')


class DanglingOverrideError(ResolveError):
    def __init__(self, model: str, version: str, override: str):
        self.version = version
        self.override = override
        super().__init__(
            model,
            f'"{override}" wants version "{version}" which is not listed for model "{model}"',
        )


class NoFirmwareAvailableError(ResolveError):
    def __init__(self, model: str):
        super().__init__(model, f'no firmware listed for model "{model}"')


#
# Request validation
#
class DeviceRequest(NamedTuple):
    device_id: str
    """lower-cased device id (the gateway MAC address)"""
    model: str
    """model as sent by the device (still carrying the hw revision suffix)"""
    version: str
    """firmware version currently installed on the device"""


def validate_request(params: "Mapping[str, str]", /) -> DeviceRequest:
    """
    Checks the mandatory fields in the vendor's order: only the first
    missing one is reported. Empty values count as missing.
    """
    for name in ec.PARAMS_REQUIRED:
        if not params.get(name):
            raise MissingFieldError(name)
    return DeviceRequest(
        params[ec.PARAM_ID].lower(),
        params[ec.PARAM_MODEL],
        params[ec.PARAM_VERSION],
    )


#
# Response building
#
def firmware_record_id(model: str, version: str, /) -> int:
    """Stable identifier for a (model, version) firmware record."""
    return crc32(f"{model}/{version.upper()}".encode("utf-8")) & 0x7FFFFFFF


def build_firmware_data(
    record: "FirmwareRecord", urlbase: str, record_id: int, /
) -> dict:
    return {
        ec.KEY_ID: record_id,
        ec.KEY_NAME: record.version,
        ec.KEY_CONTENT: record.changelog,
        ec.KEY_ATTACH1FILE: f"{urlbase}/{record.file1}",
        ec.KEY_ATTACH2FILE: f"{urlbase}/{record.file2}" if record.file2 else "",
        ec.KEY_QUERYINTVAL: ec.QUERY_INTERVAL,
    }


def is_up_to_date(current_version: str, desired_version: str, /) -> bool:
    return current_version.lower() == desired_version.lower()


# json_encode (php) flavor: ascii only output
ENVELOPE_ENCODER = json.JSONEncoder(
    ensure_ascii=True, check_circular=False, separators=(",", ":")
)

# Matches every escape sequence produced by the encoder so that scanning is
# aligned on escape boundaries: an encoded literal backslash ('\\') directly
# followed by 'r' or 'n' is a pre-escaped line break from the catalog.
RE_ENCODED_ESCAPE = re.compile(
    r"(?P<linebreak>\\\\(?=[rn]))|\\u[0-9a-fA-F]{4}|\\."
)


def _unescape_line_breaks(match: re.Match):
    return "\\" if match.group("linebreak") else match.group(0)


class EcowittEnvelope(dict):
    """
    The fixed shape response wrapper:
    {"code": int, "msg": str, "time": int, "data": {...} | []}
    """

    if TYPE_CHECKING:
        code: int
        msg: str

    __slots__ = (
        "code",
        "msg",
        "_json_str",
    )

    def __init__(
        self,
        code: int,
        msg: str,
        data: "Mapping[str, Any] | None" = None,
        epoch: int | None = None,
        /,
    ):
        self.code = code
        self.msg = msg
        self._json_str = None
        super().__init__(
            {
                ec.KEY_CODE: code,
                ec.KEY_MSG: msg,
                ec.KEY_TIME: int(time()) if epoch is None else epoch,
                # on failure the vendor always sends an empty array
                ec.KEY_DATA: dict(data) if data else [],
            }
        )

    def json(self):
        if not self._json_str:
            self._json_str = json_dumps_php(self)
        return self._json_str


def build_envelope(
    code: int,
    msg: str,
    data: "Mapping[str, Any] | None" = None,
    *,
    epoch: int | None = None,
) -> EcowittEnvelope:
    return EcowittEnvelope(code, msg, data, epoch)


def build_error_envelope(error: EcowittCloudError, /) -> EcowittEnvelope:
    return EcowittEnvelope(error.code, error.msg)


def json_dumps_php(obj, /) -> str:
    """
    Serializes the way the vendor php backend does:
    compact separators, non-ascii as \\uXXXX, forward slashes escaped
    and pre-escaped '\\r'/'\\n' sequences passed through verbatim.
    """
    text = ENVELOPE_ENCODER.encode(obj).replace("/", "\\/")
    return RE_ENCODED_ESCAPE.sub(_unescape_line_breaks, text)


def envelope_dumps(envelope: "Mapping[str, Any]", /) -> str:
    """The wire representation of the envelope (newline terminated)."""
    if isinstance(envelope, EcowittEnvelope):
        return envelope.json() + "\n"
    return json_dumps_php(envelope) + "\n"


