"""Tests for the Growatt web API client."""

import json
from typing import Any

import requests

_MISSING = object()

LOGIN_SUCCESS = {"result": 1, "msg": "", "back": {"success": True}}
LOGIN_DECLINED = {"result": 0, "msg": "502"}
SESSION_ID = "SESSION123"

TEST_URL = "https://server.growatt.com/panel/getPlantData"


def make_response(
    json_body: Any = _MISSING,
    *,
    status: int = 200,
    text: str | None = None,
    url: str = TEST_URL,
    content_type: str = "application/json;charset=UTF-8",
) -> requests.Response:
    """Build a real requests.Response carrying the given body."""
    response = requests.Response()
    response.status_code = status
    response.url = url
    response.encoding = "utf-8"
    response.headers["Content-Type"] = content_type
    if json_body is not _MISSING:
        response._content = json.dumps(json_body).encode("utf-8")
    else:
        response._content = (text or "").encode("utf-8")
    return response
