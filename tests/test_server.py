"""Test the aiohttp application endpoints"""

from typing import TYPE_CHECKING

from ecowitt_cloud import ApplicationConfig, build_application, const as ec, run
from ecowitt_cloud.helpers import LOGGER

from . import const as tc, helpers

if TYPE_CHECKING:
    from aiohttp.test_utils import TestClient


async def test_version_info(client: "TestClient"):
    response = await client.get(ec.PATH_OTA_VERSION_INFO, params=helpers.build_query())
    assert response.status == 200
    assert response.content_type == "application/json"
    text = await response.text()
    assert text.endswith("\n")
    assert r"Fixed a bug\r\nFixed another" in text
    payload = await response.json()
    assert payload[ec.KEY_CODE] == ec.CODE_SUCCESS
    assert payload[ec.KEY_DATA][ec.KEY_NAME] == "V2.3.2"


async def test_version_info_errors(client: "TestClient"):
    # the vendor protocol always replies 200
    response = await client.get(ec.PATH_OTA_VERSION_INFO + "/")
    assert response.status == 200
    payload = await response.json()
    assert payload[ec.KEY_CODE] == ec.CODE_FIELD_ERROR
    assert payload[ec.KEY_MSG] == "id require"

    response = await client.get(
        ec.PATH_OTA_VERSION_INFO, params=helpers.build_query(model="XX1000A")
    )
    assert response.status == 200
    payload = await response.json()
    assert payload[ec.KEY_CODE] == ec.CODE_INVALID_MODEL


async def test_version_info_broken_catalog(aiohttp_client, app_config, catalog_path):
    helpers.write_catalog(catalog_path, tc.MOCK_CATALOG_OUT_OF_SEQUENCE)
    client = await aiohttp_client(build_application(app_config))
    response = await client.get(ec.PATH_OTA_VERSION_INFO, params=helpers.build_query())
    assert response.status == 200
    payload = await response.json()
    assert payload[ec.KEY_CODE] == ec.CODE_ERROR
    assert payload[ec.KEY_MSG] == ec.MSG_CONFIGURATION_ERROR
    assert payload[ec.KEY_DATA] == []


async def test_initialization(client: "TestClient"):
    response = await client.get(ec.PATH_INITIALIZATION, params={"id": "x"})
    assert response.status == 200
    assert await response.text() == ""


async def test_report(client: "TestClient"):
    for path in (ec.PATH_REPORT, ec.PATH_REPORT.rstrip("/")):
        response = await client.post(
            path, data={"PASSKEY": "0123", "tempf": "68.0", "humidity": "50"}
        )
        assert response.status == 202
        assert await response.text() == "ok\r\n"


async def test_ip_api(client: "TestClient"):
    response = await client.post(ec.PATH_IP_API, data={"mac": tc.MOCK_DEVICE_ID})
    assert response.status == 202
    payload = await response.json()
    assert payload[ec.KEY_TIMEZONE] == tc.MOCK_TIMEZONE
    assert payload[ec.KEY_UTC_OFFSET] in ("3600", "7200")
    assert payload[ec.KEY_DST] in ("0", "1")
    for key in (ec.KEY_DATE_SUNRISE, ec.KEY_DATE_SUNSET):
        hours, minutes = payload[key].split(":")
        assert len(hours) == 2 and len(minutes) == 2


async def test_method_not_allowed(client: "TestClient"):
    response = await client.post(ec.PATH_OTA_VERSION_INFO)
    assert response.status == 405


def test_run(catalog_path):
    level = LOGGER.level
    app = run(
        [
            f"-catalog{catalog_path}",
            f"-lat{tc.MOCK_LATITUDE}",
            f"-lon{tc.MOCK_LONGITUDE}",
            f"-timezone{tc.MOCK_TIMEZONE}",
            "-loglevelinfo",
        ]
    )
    resources = {route.resource.canonical for route in app.router.routes()}  # type: ignore
    assert ec.PATH_OTA_VERSION_INFO in resources
    assert ec.PATH_IP_API in resources
    assert ec.PATH_REPORT in resources
    assert ec.PATH_INITIALIZATION in resources
    # a bare argument is the catalog path
    assert isinstance(run([str(catalog_path)]), type(app))
    LOGGER.setLevel(level)


def test_application_config_defaults():
    config = ApplicationConfig()
    assert config.catalog == ec.CONF_CATALOG_DEFAULT
    assert config.timezone is None
