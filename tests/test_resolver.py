"""Test the firmware resolution rules"""

import pytest

from ecowitt_cloud.catalog import parse_catalog
from ecowitt_cloud.protocol import (
    DanglingOverrideError,
    NoFirmwareAvailableError,
    UnknownModelError,
)
from ecowitt_cloud.resolver import normalize_model, resolve, select_version

from . import const as tc


def _parse(text: str):
    return parse_catalog(text.splitlines(keepends=True))


def test_normalize_model():
    assert normalize_model("GW2000B") == "GW2000"
    assert normalize_model("GW1100A") == "GW1100"
    assert normalize_model("XY") == "X"
    for model in ("", "G"):
        with pytest.raises(UnknownModelError):
            normalize_model(model)


def test_resolve_max_version():
    catalog = _parse(tc.MOCK_CATALOG)
    record = resolve(catalog, tc.MOCK_MODEL_RAW, tc.MOCK_DEVICE_ID)
    assert record.version == "V2.3.2"
    assert select_version(catalog.models[tc.MOCK_MODEL], "") == ("V2.3.2", "")


def test_resolve_override_precedence():
    catalog = _parse(tc.MOCK_CATALOG)
    assert resolve(catalog, "WH2650A", tc.MOCK_DEVICE_ID_PINNED).version == "V1.0.0"
    # device ids are matched case-insensitively
    assert (
        resolve(catalog, "WH2650A", tc.MOCK_DEVICE_ID_PINNED.upper()).version
        == "V1.0.0"
    )
    assert resolve(catalog, "WH2650A", tc.MOCK_DEVICE_ID).version == "V2.0.0"
    assert select_version(catalog.models["WH2650"], tc.MOCK_DEVICE_ID_PINNED) == (
        "V1.0.0",
        tc.MOCK_DEVICE_ID_PINNED,
    )


def test_resolve_errors():
    catalog = _parse(tc.MOCK_CATALOG)
    with pytest.raises(UnknownModelError) as excinfo:
        # 'GW2000' normalizes to 'GW200'
        resolve(catalog, tc.MOCK_MODEL, tc.MOCK_DEVICE_ID)
    assert excinfo.value.model == "GW200"

    with pytest.raises(DanglingOverrideError) as excinfo:
        resolve(_parse(tc.MOCK_CATALOG_DANGLING), tc.MOCK_MODEL_RAW, tc.MOCK_DEVICE_ID)
    assert excinfo.value.version == "V9.9.9"
    assert excinfo.value.override == "default"

    with pytest.raises(NoFirmwareAvailableError):
        resolve(
            _parse(tc.MOCK_CATALOG_EMPTY_MODEL), tc.MOCK_MODEL_RAW, tc.MOCK_DEVICE_ID
        )
