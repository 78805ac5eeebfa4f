"""Shared mock objects, sample pages and fake collaborators for akamai_sdk tests."""

import json
import threading

from akamai_sdk._api import DEFAULT_API_URL, Session

# ---------------------------------------------------------------------------
# Mock rnet types
# ---------------------------------------------------------------------------


class MockStatus:
    def __init__(self, code: int):
        self._code = code

    def as_int(self) -> int:
        return self._code

    def is_success(self) -> bool:
        return 200 <= self._code < 300


class MockResponse:
    def __init__(self, status_code: int, body: bytes | str = b""):
        self.status = MockStatus(status_code)
        if isinstance(body, str):
            body = body.encode("utf-8")
        self._body = body

    def bytes(self):
        return self._body

    def text(self):
        return self._body.decode("utf-8")


def json_response(status_code: int, data) -> MockResponse:
    return MockResponse(status_code, json.dumps(data))


class MockCookie:
    def __init__(self, name: str, value: str):
        self.name = name
        self.value = value


class MockJar:
    """Mock rnet cookie jar keyed by cookie name (URL ignored)."""

    def __init__(self, cookies: dict[str, str] | None = None):
        self._cookies = dict(cookies or {})
        self.added = []

    def get(self, name, url):
        if name not in self._cookies:
            return None
        return MockCookie(name, self._cookies[name])

    def add(self, cookie_str, url):
        self.added.append((cookie_str, url))
        name, _, rest = cookie_str.partition("=")
        self._cookies[name.strip()] = rest.split(";", 1)[0]


class MockClient:
    """Mock rnet blocking client that routes responses by URL.

    Each URL maps to a list of responses (or exceptions) consumed in order;
    the last one repeats. Thread-safe, since generation branches share
    the API client.
    """

    def __init__(
        self,
        routes: dict[str, list[MockResponse | Exception]],
        cookie_jar: MockJar | None = None,
    ):
        self._routes = {url: list(resps) for url, resps in routes.items()}
        self._index: dict[str, int] = {}
        self._lock = threading.Lock()
        self.request_log: list[tuple] = []
        self.cookie_jar = cookie_jar or MockJar()

    def request(self, method, url, **kwargs):
        with self._lock:
            self.request_log.append((method, url, kwargs))
            resps = self._routes[url]
            i = self._index.get(url, 0)
            self._index[url] = i + 1
            resp = resps[min(i, len(resps) - 1)]
        if isinstance(resp, Exception):
            raise resp
        return resp

    def calls_to(self, url: str) -> list[tuple]:
        with self._lock:
            return [entry for entry in self.request_log if entry[1] == url]


# ---------------------------------------------------------------------------
# Generation API routes
# ---------------------------------------------------------------------------

SENSOR_API = f"{DEFAULT_API_URL}/sensor/generate"
PIXEL_API = f"{DEFAULT_API_URL}/pixel/generate"
SCRIPT_API = f"{DEFAULT_API_URL}/script"


def make_session(
    sensor=None, pixel=None, script=None, api_key="test-key"
) -> tuple[Session, MockClient]:
    """Session backed by a MockClient serving the three API endpoints."""
    routes = {
        SENSOR_API: sensor or [json_response(201, {"payload": "sensor-1"})],
        PIXEL_API: pixel or [json_response(201, {"payload": "pixel-1"})],
        SCRIPT_API: script
        or [json_response(200, {"success": True, "scriptValues": "sv"})],
    }
    client = MockClient(routes)
    return Session(api_key, client=client), client


# ---------------------------------------------------------------------------
# Target site
# ---------------------------------------------------------------------------

PAGE_URL = "https://www.example.com/product/1"
SDK_PATH = "/8Yd2kVQ/xnP/Abc-12/def"
SDK_URL = f"https://www.example.com{SDK_PATH}"
PIXEL_SCRIPT_URL = "https://www.example.com/akam/13/1a2b3c4d"
PIXEL_POST_URL = "https://www.example.com/akam/13/pixel_1a2b3c4d"

SDK_TAG = f'<script type="text/javascript"  src="{SDK_PATH}"></script>'
PIXEL_TAG = (
    f'<script type="text/javascript" src="{PIXEL_SCRIPT_URL}" defer></script>'
)
PIXEL_HTML_VAR = '<script>bazadebezolkohpepadr="1403279421"</script>'

SCRIPT_V17 = b"var _cf = _cf || []; bmak = {ver: 1.7};"
SCRIPT_V175 = b"var _acxj = ['x']; bmak = {ver: 1.75};"
SCRIPT_V2_STATIC = b"(function a0_0x4a1f(){ return 1; })();"
SCRIPT_V2_DYNAMIC = b"(function(){ var z = 1; })();"

# "abc" hex-escaped at index 1
PIXEL_SCRIPT = (
    b'var _=["\\x7a","\\x61\\x62\\x63","\\x71"];'
    b"(function(){var g=_[1];return g;})();"
)


def make_page(sdk: bool = True, pixel: bool = True) -> bytes:
    parts = ["<html><head>"]
    if sdk:
        parts.append(SDK_TAG)
    if pixel:
        parts.append(PIXEL_TAG)
        parts.append(PIXEL_HTML_VAR)
    parts.append("</head><body>ok</body></html>")
    return "\n".join(parts).encode("utf-8")


class FakeSite:
    """DoHttpReq + GetCookie fake for the protected site.

    ``routes`` maps (method, url) to a list of ``(status, body)`` tuples or
    exceptions, consumed in order (last repeats). ``on_request`` hooks can
    update cookies as a side effect of a request, keyed the same way.
    """

    def __init__(self, routes, cookies: dict[str, str] | None = None):
        self._routes = {k: list(v) for k, v in routes.items()}
        self._index: dict[tuple, int] = {}
        self._lock = threading.Lock()
        self.cookies = dict(cookies or {})
        self.on_request: dict[tuple, callable] = {}
        self.requests: list[tuple] = []
        self.cookie_reads: list[tuple] = []

    def do_http_req(self, op, url, method, body, cancel):
        key = (method, url)
        with self._lock:
            self.requests.append((op, url, method, body, cancel))
            resps = self._routes[key]
            i = self._index.get(key, 0)
            self._index[key] = i + 1
            resp = resps[min(i, len(resps) - 1)]
            hook = self.on_request.get(key)
            if hook is not None:
                hook(self, i)
        if isinstance(resp, Exception):
            raise resp
        return resp

    def get_cookie(self, url, name):
        with self._lock:
            self.cookie_reads.append((url, name))
            return self.cookies.get(name, "")

    def requests_for(self, op) -> list[tuple]:
        with self._lock:
            return [r for r in self.requests if r[0] is op]
