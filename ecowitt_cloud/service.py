"""
    Firmware service:

    Answers the gateway periodic 'version info' poll. Every request goes
    through the same steps: the request parameters are validated, the
    catalog is (re)loaded from disk, the desired firmware is resolved
    and the vendor envelope is built. Any failure along the way is
    rendered with its own (code, msg) pair.
    The catalog is never cached: editing the file takes effect on the
    next poll and a broken file always fails closed.
"""

from typing import TYPE_CHECKING

from . import const as ec
from .catalog import load_catalog
from .helpers import Loggable
from .protocol import (
    CatalogError,
    EcowittCloudError,
    FieldError,
    UnknownModelError,
    build_envelope,
    build_error_envelope,
    build_firmware_data,
    envelope_dumps,
    firmware_record_id,
    is_up_to_date,
    validate_request,
)
from .resolver import normalize_model, resolve
from .version import VersionError

if TYPE_CHECKING:
    from typing import Mapping, Unpack

    from .protocol import EcowittEnvelope


class FirmwareService(Loggable):

    # repeated configuration errors are logged at most once every..
    ERROR_LOG_TIMEOUT = 300

    __slots__ = ("catalog_path",)

    def __init__(self, catalog_path, **kwargs: "Unpack[Loggable.Args]"):
        self.catalog_path = catalog_path
        super().__init__(str(catalog_path), **kwargs)

    def handle(self, params: "Mapping[str, str]", /) -> "EcowittEnvelope":
        """
        main request entry point: 'params' are the (url-decoded) query parameters
        sent by the device. Never raises for protocol level errors.
        """
        try:
            request = validate_request(params)
            catalog = load_catalog(self.catalog_path)
            record = resolve(catalog, request.model, request.device_id)
        except CatalogError as error:
            self.log(
                self.CRITICAL,
                "Firmware catalog rejected: %s",
                str(error),
                timeout=self.ERROR_LOG_TIMEOUT,
            )
            return build_error_envelope(error)
        except FieldError as error:
            self.log(self.WARNING, "Bad request (%s): %s", error.name, error.msg)
            return build_error_envelope(error)
        except UnknownModelError as error:
            self.log(self.WARNING, "Unsupported model '%s'", error.model)
            return build_error_envelope(error)
        except EcowittCloudError as error:
            # DanglingOverride/NoFirmwareAvailable: operator misconfigurations
            self.log_exception(
                self.CRITICAL,
                error,
                "resolving model '%s'",
                getattr(error, "model", None),
                timeout=self.ERROR_LOG_TIMEOUT,
            )
            return build_error_envelope(error)
        except VersionError as error:
            self.log_exception(
                self.CRITICAL,
                error,
                "comparing catalog versions",
                timeout=self.ERROR_LOG_TIMEOUT,
            )
            return build_envelope(ec.CODE_ERROR, ec.MSG_CONFIGURATION_ERROR)

        model = normalize_model(request.model)
        if is_up_to_date(request.version, record.version):
            code, msg = ec.CODE_ERROR, ec.MSG_UP_TO_DATE
        else:
            code, msg = ec.CODE_SUCCESS, ec.MSG_SUCCESS
        self.log(
            self.INFO,
            "model(%s) device(%s) desired version(%s) current(%s)",
            model,
            request.device_id,
            record.version,
            request.version,
        )
        return build_envelope(
            code,
            msg,
            build_firmware_data(
                record, catalog.urlbase, firmware_record_id(model, record.version)
            ),
        )

    def handle_text(self, params: "Mapping[str, str]", /) -> str:
        response = envelope_dumps(self.handle(params))
        self.log(self.DEBUG, "response is [%s]", response.rstrip())
        return response
