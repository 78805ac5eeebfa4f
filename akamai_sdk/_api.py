"""Session and the SolarSystems generation API (sensor, pixel, dynamic script)."""

import base64
import datetime
import json
import logging
import threading
from dataclasses import dataclass, field
from typing import Any

import rnet.blocking
from rnet import Method

from akamai_sdk import __version__
from akamai_sdk._errors import ApiOperationError, ApiRequestFailed
from akamai_sdk._http import DoHttpReq, GetCookie
from akamai_sdk._version import Version

logger = logging.getLogger("akamai_sdk")

DEFAULT_API_URL = "https://akamai.publicapis.solarsystems.software/v1"
DEFAULT_CONNECT_TIMEOUT = datetime.timedelta(seconds=10)
DEFAULT_TIMEOUT = datetime.timedelta(seconds=30)

_API_USER_AGENT = f"akamai-sdk-py/{__version__}"


def _default_client() -> rnet.blocking.Client:
    return rnet.blocking.Client(
        connect_timeout=DEFAULT_CONNECT_TIMEOUT,
        timeout=DEFAULT_TIMEOUT,
    )


def get_message_from_error_response(body: bytes) -> str:
    """Get the ``message`` field from an API error body, or "" if absent."""
    try:
        data = json.loads(body)
    except (ValueError, TypeError):
        return ""
    if not isinstance(data, dict):
        return ""
    message = data.get("message", "")
    return message if isinstance(message, str) else ""


# ---------------------------------------------------------------------------
# Request/response schemas
# ---------------------------------------------------------------------------


def _require_str(data: dict, key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string, got {type(value).__name__}")
    return value


def _optional_str(data: dict, key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string, got {type(value).__name__}")
    return value


@dataclass
class GenerateRequest:
    """Sensor data generation request.

    ``bm_sz`` is only needed for version 2.0. ``script_values`` is empty
    unless the script is a dynamic 2.0 script (see
    Session.get_dynamic_script_values).
    """

    user_agent: str
    version: Version
    page_url: str
    abck: str
    bm_sz: str = ""
    script_values: str = ""

    def to_dict(self) -> dict[str, Any]:
        data = {
            "userAgent": self.user_agent,
            "version": self.version.value,
            "pageUrl": self.page_url,
            "_abck": self.abck,
        }
        if self.bm_sz:
            data["bm_sz"] = self.bm_sz
        if self.script_values:
            data["scriptValues"] = self.script_values
        return data


@dataclass
class GenerateResponse:
    payload: str

    @classmethod
    def from_dict(cls, data: dict) -> "GenerateResponse":
        return cls(payload=_require_str(data, "payload"))


@dataclass
class PixelSolveRequest:
    user_agent: str
    html_var: int
    script_var: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "userAgent": self.user_agent,
            "htmlVar": self.html_var,
            "scriptVar": self.script_var,
        }


@dataclass
class PixelSolveResponse:
    payload: str

    @classmethod
    def from_dict(cls, data: dict) -> "PixelSolveResponse":
        return cls(payload=_require_str(data, "payload"))


@dataclass
class DynamicScriptResponse:
    success: bool
    message: str = ""
    script_values: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "DynamicScriptResponse":
        return cls(
            success=bool(data.get("success", False)),
            message=_optional_str(data, "message"),
            script_values=_optional_str(data, "scriptValues"),
        )


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Session:
    """Authenticated handle on the generation API.

    Holds no per-site state: reuse one Session across tasks and threads.
    ``client`` is only used for API calls, never for the target site.
    """

    api_key: str
    client: Any = field(default_factory=_default_client, repr=False)
    api_url: str = DEFAULT_API_URL

    def _post(
        self,
        path: str,
        body: bytes,
        expected_status: int,
    ) -> tuple[int, bytes]:
        url = f"{self.api_url}{path}"
        headers = {
            "User-Agent": _API_USER_AGENT,
            "x-api-key": self.api_key,
            "Content-Type": "application/json",
        }
        logger.debug("POST %s", url)
        try:
            resp = self.client.request(
                Method.POST, url, headers=headers, body=body
            )
            status = resp.status.as_int()
            content = resp.bytes()
        except Exception as e:
            raise ApiRequestFailed(url, e) from e

        logger.debug("API %s -> HTTP %d", path, status)
        if status != expected_status:
            raise ApiOperationError(
                status, get_message_from_error_response(content)
            )
        return status, content

    def _decode(self, path: str, content: bytes) -> dict:
        try:
            data = json.loads(content)
        except ValueError as e:
            raise ApiRequestFailed(f"{self.api_url}{path}", e) from e
        if not isinstance(data, dict):
            raise ApiRequestFailed(
                f"{self.api_url}{path}",
                TypeError(f"expected JSON object, got {type(data).__name__}"),
            )
        return data

    def generate_sensor_data(self, req: GenerateRequest) -> GenerateResponse:
        """Generate sensor data to post to the web SDK endpoint.

        Prefer Session.generate, which also handles the stop signal.

        When posting the result yourself, do NOT JSON-encode it: the web SDK
        sends the payload as unescaped JSON, so the body must be built as
        ``'{"sensor_data":"' + payload + '"}'``.
        """
        path = "/sensor/generate"
        _, content = self._post(
            path, json.dumps(req.to_dict()).encode("utf-8"), 201
        )
        data = self._decode(path, content)
        try:
            return GenerateResponse.from_dict(data)
        except (KeyError, TypeError) as e:
            raise ApiRequestFailed(f"{self.api_url}{path}", e) from e

    def generate_pixel_payload(
        self, req: PixelSolveRequest
    ) -> PixelSolveResponse:
        """Generate the payload that solves the pixel challenge.

        Post it to the URL from get_pixel_challenge_script_url with
        ``Content-Type: application/x-www-form-urlencoded``, otherwise the
        challenge is treated as invalid.
        """
        path = "/pixel/generate"
        _, content = self._post(
            path, json.dumps(req.to_dict()).encode("utf-8"), 201
        )
        data = self._decode(path, content)
        try:
            return PixelSolveResponse.from_dict(data)
        except (KeyError, TypeError) as e:
            raise ApiRequestFailed(f"{self.api_url}{path}", e) from e

    def get_dynamic_script_values(self, src: bytes) -> DynamicScriptResponse:
        """Get the per-load values a dynamic 2.0 script needs.

        Check is_script_static first: submitting a static script is not an
        error but yields ``success=False``.
        """
        path = "/script"
        _, content = self._post(path, base64.b64encode(src), 200)
        data = self._decode(path, content)
        try:
            return DynamicScriptResponse.from_dict(data)
        except TypeError as e:
            raise ApiRequestFailed(f"{self.api_url}{path}", e) from e

    def generate(
        self,
        user_agent: str,
        page_url: str,
        do_http_req: DoHttpReq,
        get_cookie: GetCookie,
        max_tries: int,
        cancel: threading.Event | None = None,
    ) -> None:
        """Generate cookies for ``page_url``. See akamai_sdk.generate."""
        from akamai_sdk._generate import generate

        generate(
            self,
            user_agent,
            page_url,
            do_http_req,
            get_cookie,
            max_tries,
            cancel=cancel,
        )
