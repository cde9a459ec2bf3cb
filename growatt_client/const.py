"""Define constants for the Growatt web API client."""

from datetime import timedelta
import re

DEFAULT_URL = "https://server.growatt.com"
ALTERNATE_URL = "https://openapi.growatt.com"

SERVER_URLS = [
    DEFAULT_URL,
    ALTERNATE_URL,
    "https://server-us.growatt.com",
    "http://server.smten.com",
]

DEFAULT_SESSION_DURATION = timedelta(minutes=30)
DEFAULT_TIMEOUT = 30

# Environment variables consumed by GrowattConfig.from_env
ENV_USERNAME = "GROWATT_USERNAME"
ENV_PASSWORD = "GROWATT_PASSWORD"
ENV_BASE_URL = "GROWATT_BASE_URL"
ENV_SESSION_DURATION = "GROWATT_SESSION_DURATION"

CONF_USERNAME = "username"
CONF_PASSWORD = "password"
CONF_BASE_URL = "base_url"
CONF_SESSION_DURATION = "session_duration"
CONF_TIMEOUT = "timeout"

# Login handshake
LOGIN_PATH = "login"
LOGOUT_PATH = "logout"
LOGIN_RESULT_SUCCESS = 1
SESSION_COOKIE = "JSESSIONID"

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded; charset=UTF-8"

LOGOUT_HEADERS = {
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,"
        "image/webp,image/apng,*/*;q=0.8,application/signed-exchange;v=b3;q=0.7"
    ),
    "Accept-Language": "en-US,en;q=0.9",
    "Upgrade-Insecure-Requests": "1",
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/135.0.0.0 Safari/537.36"
    ),
    "Sec-Fetch-Site": "same-origin",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-User": "?1",
    "Sec-Fetch-Dest": "document",
}

AJAX_HEADERS = {
    "Content-Type": FORM_CONTENT_TYPE,
    "X-Requested-With": "XMLHttpRequest",
    "Accept": "application/json, text/javascript, */*; q=0.01",
}

# The server answers HTTP 200 even when the session is gone. It either serves
# the login page (after redirecting to /login) or embeds a message in the JSON
# envelope, so expiry is detected from the content.
NOT_LOGGED_IN_KEYS = ("msg", "message", "error")
NOT_LOGGED_IN_PATTERN = re.compile(
    r"not\s*log(?:ged)?\s*in|please\s*log\s*in|log\s*in\s*(?:first|again)"
    r"|login\s*(?:timeout|expired)|session\s*(?:timeout|expired|invalid)",
    re.IGNORECASE,
)
LOGIN_PAGE_MARKERS = ("<html", "<!doctype html")

# Data endpoints
PLANT_LIST_PATH = "index/getPlantListTitle"
PLANT_DATA_PATH = "panel/getPlantData"
WEATHER_PATH = "device/getEnvList"
DEVICES_BY_PLANT_PATH = "panel/getDevicesByPlant"
DEVICE_LIST_PATH = "device/getMAXList"
DEVICES_BY_PLANT_LIST_PATH = "panel/getDevicesByPlantList"
MIX_TOTAL_PATH = "panel/mix/getMIXTotalData"
MIX_STATUS_PATH = "panel/mix/getMIXStatusData"
MIX_SETTING_PATH = "tcpSet.do"
ENERGY_DAY_CHART_PATH = "panel/mix/getMIXEnergyDayChart"
ENERGY_MONTH_CHART_PATH = "panel/mix/getMIXEnergyMonthChart"
ENERGY_YEAR_CHART_PATH = "panel/mix/getMIXEnergyYearChart"
ENERGY_TOTAL_CHART_PATH = "panel/mix/getMIXEnergyTotalChart"
BATTERY_CHART_PATH = "panel/mix/getMIXBatChart"
FAULT_LOG_PATH = "log/getNewPlantFaultLog"

DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
