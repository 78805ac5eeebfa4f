"""RnetTransport -- ready-made DoHttpReq/GetCookie pair on rnet.blocking.Client.

Callers with their own HTTP stack can ignore this module and pass any
callables that satisfy the DoHttpReq/GetCookie contracts to generate().
"""

import logging
import threading

import rnet.blocking
from rnet import Emulation, Method

from akamai_sdk._api import DEFAULT_CONNECT_TIMEOUT, DEFAULT_TIMEOUT
from akamai_sdk._errors import RequestCancelled
from akamai_sdk._http import HttpReqOp

logger = logging.getLogger("akamai_sdk")

DEFAULT_EMULATION = Emulation.Chrome131

_METHOD_MAP: dict[str, Method] = {
    "GET": Method.GET,
    "POST": Method.POST,
}

# Per-operation Content-Type for POST bodies
_CONTENT_TYPES = {
    HttpReqOp.POST_SENSOR_DATA: "text/plain;charset=UTF-8",
    # Required for the pixel challenge to be accepted
    HttpReqOp.POST_PIXEL_PAYLOAD: "application/x-www-form-urlencoded",
}


def _to_method(method: str) -> Method:
    """Convert a string HTTP method to rnet Method enum."""
    try:
        return _METHOD_MAP[method.upper()]
    except KeyError:
        raise ValueError(f"Unsupported HTTP method: {method}") from None


class RnetTransport:
    """Executor and cookie reader sharing one rnet client and cookie jar.

    Thread-safe: the rnet client and its cookie jar can be shared across
    threads, so the two generation branches can use one instance and their
    requests run concurrently.

    ``emulation`` and ``proxy`` (a URL routed for every scheme) only apply
    to the client built here; they are ignored when ``client`` is passed.
    """

    def __init__(
        self,
        user_agent: str,
        client=None,
        emulation: Emulation | None = None,
        proxy: str | None = None,
    ):
        self.user_agent = user_agent
        if client is None:
            kwargs = {
                "emulation": emulation or DEFAULT_EMULATION,
                "connect_timeout": DEFAULT_CONNECT_TIMEOUT,
                "timeout": DEFAULT_TIMEOUT,
                "cookie_store": True,
            }
            if proxy is not None:
                kwargs["proxies"] = [rnet.Proxy.all(proxy)]
            client = rnet.blocking.Client(**kwargs)
        self._client = client

    def do_http_req(
        self,
        op: HttpReqOp,
        url: str,
        method: str,
        body: bytes | None,
        cancel: threading.Event | None,
    ) -> tuple[int, bytes]:
        """DoHttpReq implementation. Never raises on a status code."""
        if cancel is not None and cancel.is_set():
            raise RequestCancelled(url)

        headers = {"User-Agent": self.user_agent}
        content_type = _CONTENT_TYPES.get(op)
        if content_type is not None:
            headers["Content-Type"] = content_type

        kwargs = {"headers": headers}
        if body is not None:
            kwargs["body"] = body

        resp = self._client.request(_to_method(method), url, **kwargs)
        status = resp.status.as_int()
        content = resp.bytes()
        logger.debug("%s %s -> HTTP %d (%s)", method, url, status, op)
        return status, content or b""

    def get_cookie(self, url: str, name: str) -> str:
        """GetCookie implementation. Returns "" if the cookie is absent."""
        cookie = self._client.cookie_jar.get(name, url)
        if cookie is None:
            return ""
        return cookie.value

    def add_cookie(self, raw_set_cookie: str, url: str) -> None:
        """Inject a Set-Cookie header value into the transport's cookie jar."""
        self._client.cookie_jar.add(raw_set_cookie, url)
