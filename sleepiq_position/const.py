"""Constants for the SleepIQ bed position tool."""

from typing import Final

PROGRAM_NAME: Final = "sleepiq-position"

# Configuration keys (as they appear in the YAML file)
CONF_USERNAME: Final = "SleepIQUsername"
CONF_PASSWORD: Final = "SleepIQPassword"
CONF_POLL_INTERVAL: Final = "BedStatusPollInterval"
CONF_POLL_MAX: Final = "BedStatusPollMax"

CONFIG_KEYS: Final = (CONF_USERNAME, CONF_PASSWORD, CONF_POLL_INTERVAL, CONF_POLL_MAX)

DEFAULT_CONFIG_PATH: Final = "config.yaml"

# SleepIQ cloud API
API_BASE_URL: Final = "https://prod-api.sleepiq.sleepnumber.com/rest"
API_LOGIN_PATH: Final = "/login"
API_BEDS_PATH: Final = "/bed"
API_PRESET_PATH: Final = "/bed/{bed_id}/foundation/preset"
API_FOUNDATION_STATUS_PATH: Final = "/bed/{bed_id}/foundation/status"
API_SESSION_KEY_PARAM: Final = "_k"

# Foundation status field reporting movement
FOUNDATION_IS_MOVING: Final = "fsIsMoving"

# Preset speed sent with every preset command (0 = fastest)
PRESET_SPEED: Final = 0

REQUEST_TIMEOUT: Final = 15.0  # seconds per HTTP request

# Exit codes
EXIT_SUCCESS: Final = 0
EXIT_FAILURE: Final = 1
