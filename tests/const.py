"""Constants for ecowitt_cloud tests."""

MOCK_URLBASE = "http://ota.example.net/firmware"
MOCK_DEVICE_ID = "DC:DA:0C:FA:C5:E0"
MOCK_DEVICE_ID_PINNED = "aa:bb:cc:dd:ee:ff"
MOCK_MODEL = "GW2000"
MOCK_MODEL_RAW = "GW2000B"
MOCK_CHANGELOG = r"Fixed a bug\r\nFixed another"
MOCK_EPOCH = 1700000000

# GW2000 with no overrides (max version wins)
# WH2650 with a default and a pinned device
MOCK_CATALOG = rf"""
# test catalog
urlbase  {MOCK_URLBASE}

model    GW2000
firmware V1.0.0
file1    gw2000_v1.0.0_user1.bin
file2    gw2000_v1.0.0_user2.bin
firmware V2.3.2
file1    gw2000_v2.3.2_user1.bin
file2    gw2000_v2.3.2_user2.bin
log      {MOCK_CHANGELOG}
firmware V2.1.8
file1    gw2000_v2.1.8_user1.bin
log      Channel \#3 fix

MODEL    WH2650
Firmware V1.0.0
File     wh2650_v1.0.0.bin
firmware V2.0.0
file1    wh2650_v2.0.0.bin
want     V2.0.0                          # default
want     V1.0.0 for {MOCK_DEVICE_ID_PINNED}
"""

MOCK_CATALOG_OUT_OF_SEQUENCE = """
model    GW2000
file1    gw2000_v1.0.0_user1.bin
"""

MOCK_CATALOG_DANGLING = """
model    GW2000
firmware V1.0.0
file1    gw2000_v1.0.0_user1.bin
want     V9.9.9
"""

MOCK_CATALOG_EMPTY_MODEL = """
model    GW2000
"""

MOCK_CATALOG_TEXTUAL_VERSION = """
model    GW2000
firmware V1.0.0
file1    gw2000_v1.0.0_user1.bin
firmware V1.1.0beta
file1    gw2000_v1.1.0beta_user1.bin
"""

MOCK_LATITUDE = 45.4642
MOCK_LONGITUDE = 9.19
MOCK_TIMEZONE = "Europe/Rome"

MOCK_GATEWAY_MAC = bytes((0x48, 0x3F, 0xDA, 0x54, 0x21, 0x0C))
MOCK_GATEWAY_MAC_STR = "48:3f:da:54:21:0c"
MOCK_GATEWAY_FIRMWARE = "GW2000B_V3.1.2"
