"""
    static constants symbols for the Ecowitt cloud protocol symbols/semantics
"""

import logging
import re
from typing import Final

#
# http routes polled by the gateways
#
PATH_OTA_VERSION_INFO: Final = "/api/ota/v1/version/info"
PATH_INITIALIZATION: Final = "/api/index/initialization"
PATH_IP_API: Final = "/data/ip_api/"
PATH_REPORT: Final = "/data/report/"

#
# request parameters (GET query) for the ota version check
#
PARAM_ID: Final = "id"
PARAM_MODEL: Final = "model"
PARAM_VERSION: Final = "version"
PARAM_TIME: Final = "time"
PARAM_USER: Final = "user"
PARAM_SIGN: Final = "sign"
# fixed order in which mandatory fields are checked
PARAMS_REQUIRED: Final = (PARAM_ID, PARAM_MODEL, PARAM_VERSION)

#
# misc keys for json payloads
#
KEY_CODE: Final = "code"
KEY_MSG: Final = "msg"
KEY_TIME: Final = "time"
KEY_DATA: Final = "data"
KEY_ID: Final = "id"
KEY_NAME: Final = "name"
KEY_CONTENT: Final = "content"
KEY_ATTACH1FILE: Final = "attach1file"
KEY_ATTACH2FILE: Final = "attach2file"
KEY_QUERYINTVAL: Final = "queryintval"
KEY_TIMEZONE: Final = "timezone"
KEY_UTC_OFFSET: Final = "utc_offset"
KEY_DST: Final = "dst"
KEY_DATE_SUNRISE: Final = "date_sunrise"
KEY_DATE_SUNSET: Final = "date_sunset"

#
# response codes and messages as observed on the vendor cloud
#
CODE_SUCCESS: Final = 0
CODE_ERROR: Final = -1
CODE_FIELD_ERROR: Final = 41000
CODE_INVALID_MODEL: Final = 40013

MSG_SUCCESS: Final = "Success"
MSG_UP_TO_DATE: Final = "The firmware is up to date"
MSG_CONFIGURATION_ERROR: Final = "internal configuration error"
MSG_FIELD_REQUIRE: Final = "{} require"
MSG_INVALID_MODEL: Final = "invalid model"

# the device re-polls the version check after this many seconds
QUERY_INTERVAL: Final = 86400

REPORT_RESPONSE: Final = "ok\r\n"

#
# firmware catalog ('firmware-info') grammar
#
CATALOG_MODEL: Final = "model"
CATALOG_FIRMWARE: Final = "firmware"
CATALOG_FILE1: Final = "file1"
CATALOG_FILE2: Final = "file2"
CATALOG_WANT_DEFAULT: Final = "default"

RE_CATALOG_COMMENT = re.compile(r"(?<!\\)#.*$")
RE_CATALOG_WANT_FOR = re.compile(r"^(?P<version>.*?)\s+for\s+(?P<device>\S.*)$")
"""re pattern splitting 'want V2.1.8 for dc:da:0c:fa:c5:e0'"""

#
# gateway local binary api (the 'telnet' interface)
#
GATEWAY_PORT: Final = 45000
GATEWAY_HEADER: Final = b"\xff\xff"
CMD_READ_STATION_MAC: Final = 0x26
CMD_READ_FIRMWARE_VERSION: Final = 0x50

#########################
# configuration defaults
#########################
CONF_CATALOG_DEFAULT: Final = "firmware-info"
CONF_LOGGING_VERBOSE: Final = 5
CONF_LOGGING_DEBUG: Final = logging.DEBUG
CONF_LOGGING_INFO: Final = logging.INFO
CONF_LOGGING_WARNING: Final = logging.WARNING
CONF_LOGGING_CRITICAL: Final = logging.CRITICAL
CONF_LOGGING_LEVEL_OPTIONS: Final = {
    logging.NOTSET: "default",
    CONF_LOGGING_CRITICAL: "critical",
    CONF_LOGGING_WARNING: "warning",
    CONF_LOGGING_INFO: "info",
    CONF_LOGGING_DEBUG: "debug",
    CONF_LOGGING_VERBOSE: "verbose",
}
