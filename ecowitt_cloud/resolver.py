"""
Resolution of the firmware a device should be running.
"""

from typing import TYPE_CHECKING

from . import const as ec
from .protocol import (
    DanglingOverrideError,
    NoFirmwareAvailableError,
    UnknownModelError,
)
from .version import max_version

if TYPE_CHECKING:
    from .catalog import Catalog, FirmwareRecord, ModelEntry


def normalize_model(raw_model: str, /) -> str:
    """
    Devices report the model with a trailing hardware revision letter
    ('GW2000B') while the catalog lists the base model ('GW2000').
    """
    if len(raw_model) <= 1:
        raise UnknownModelError(raw_model)
    return raw_model[:-1]


def select_version(model_entry: "ModelEntry", device_id: str, /) -> tuple[str, str]:
    """
    Returns (version, origin) where origin tells which rule matched:
    the device id, 'default' or '' when the catalog maximum was used.
    """
    overrides = model_entry.overrides
    if device_id in overrides:
        return overrides[device_id], device_id
    if ec.CATALOG_WANT_DEFAULT in overrides:
        return overrides[ec.CATALOG_WANT_DEFAULT], ec.CATALOG_WANT_DEFAULT
    if not (version := max_version(model_entry.firmware)):
        raise NoFirmwareAvailableError(model_entry.name)
    return version, ""


def resolve(catalog: "Catalog", raw_model: str, device_id: str, /) -> "FirmwareRecord":
    model = normalize_model(raw_model)
    try:
        model_entry = catalog.models[model]
    except KeyError:
        raise UnknownModelError(model)
    version, origin = select_version(model_entry, device_id.lower())
    try:
        return model_entry.firmware[version]
    except KeyError:
        raise DanglingOverrideError(model, version, origin)
