"""akamai_sdk -- Akamai Bot Manager cookie generation via the SolarSystems API."""

import logging
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("akamai-sdk-py")
except PackageNotFoundError:
    __version__ = "0.0.0"

from akamai_sdk._api import (
    DEFAULT_API_URL,
    DynamicScriptResponse,
    GenerateRequest,
    GenerateResponse,
    PixelSolveRequest,
    PixelSolveResponse,
    Session,
    get_message_from_error_response,
)
from akamai_sdk._errors import (
    AkamaiError,
    ApiOperationError,
    ApiRequestFailed,
    BadStatusCode,
    ErrorKind,
    GenerationError,
    HexDecodeError,
    HttpOpError,
    InvalidPageURL,
    PixelHtmlVarNotFound,
    PixelScriptVarNotFound,
    RequestCancelled,
    VariableNotFound,
)
from akamai_sdk._generate import generate
from akamai_sdk._hexstring import from_hex_string
from akamai_sdk._http import DoHttpReq, GetCookie, HttpReqOp
from akamai_sdk._markup import (
    get_pixel_challenge_html_var,
    get_pixel_challenge_script_url,
    get_pixel_challenge_script_var,
    get_script_path,
)
from akamai_sdk._stop_signal import is_cookie_valid
from akamai_sdk._transport import RnetTransport
from akamai_sdk._version import Version, get_sdk_version, is_script_static

__all__ = [
    "__version__",
    "Session",
    "generate",
    "RnetTransport",
    "DEFAULT_API_URL",
    "GenerateRequest",
    "GenerateResponse",
    "PixelSolveRequest",
    "PixelSolveResponse",
    "DynamicScriptResponse",
    "get_message_from_error_response",
    "HttpReqOp",
    "DoHttpReq",
    "GetCookie",
    "Version",
    "get_sdk_version",
    "is_script_static",
    "get_script_path",
    "get_pixel_challenge_script_url",
    "get_pixel_challenge_html_var",
    "get_pixel_challenge_script_var",
    "from_hex_string",
    "is_cookie_valid",
    "ErrorKind",
    "AkamaiError",
    "InvalidPageURL",
    "BadStatusCode",
    "HttpOpError",
    "RequestCancelled",
    "HexDecodeError",
    "VariableNotFound",
    "PixelHtmlVarNotFound",
    "PixelScriptVarNotFound",
    "ApiOperationError",
    "ApiRequestFailed",
    "GenerationError",
]

# Silent by default; callers opt in via logging.getLogger("akamai_sdk").setLevel(...)
logging.getLogger("akamai_sdk").addHandler(logging.NullHandler())
