"""Global fixtures for ecowitt_cloud tests."""

import pytest

from ecowitt_cloud import ApplicationConfig, build_application
from ecowitt_cloud.service import FirmwareService

from . import const as tc, helpers


@pytest.fixture(name="catalog_path")
def catalog_path_fixture(tmp_path):
    """The default test catalog written to a temporary file."""
    return helpers.write_catalog(tmp_path / "firmware-info")


@pytest.fixture(name="service")
def service_fixture(catalog_path):
    return FirmwareService(catalog_path)


@pytest.fixture(name="app_config")
def app_config_fixture(catalog_path):
    return ApplicationConfig(
        catalog=str(catalog_path),
        latitude=tc.MOCK_LATITUDE,
        longitude=tc.MOCK_LONGITUDE,
        timezone=tc.MOCK_TIMEZONE,
    )


@pytest.fixture(name="client")
async def client_fixture(aiohttp_client, app_config):
    return await aiohttp_client(build_application(app_config))
