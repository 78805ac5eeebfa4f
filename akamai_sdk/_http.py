"""HTTP collaborator contracts: request operations, executor and cookie reader.

The orchestrator never performs I/O against the target site itself. Callers
supply a DoHttpReq executor (so they control TLS fingerprint, header order
and proxies) and a GetCookie reader over whatever cookie jar the executor
writes to.
"""

import enum
import threading
from typing import Protocol


class HttpReqOp(enum.Enum):
    """Why an executor request is being made.

    Executors use this to decide which headers to send and in which order.
    """

    GET_PAGE = 0
    GET_SDK_SCRIPT = 1
    POST_SENSOR_DATA = 2
    GET_PIXEL_CHALLENGE_SCRIPT = 3
    POST_PIXEL_PAYLOAD = 4

    def __str__(self) -> str:
        return _OP_NAMES[self]


_OP_NAMES = {
    HttpReqOp.GET_PAGE: "OpGetPage",
    HttpReqOp.GET_SDK_SCRIPT: "OpGetSdkScript",
    HttpReqOp.POST_SENSOR_DATA: "OpPostSensorData",
    HttpReqOp.GET_PIXEL_CHALLENGE_SCRIPT: "OpGetPixelChallengeScript",
    HttpReqOp.POST_PIXEL_PAYLOAD: "OpPostPixelPayload",
}


class DoHttpReq(Protocol):
    """Executes one HTTP request on behalf of the orchestrator.

    Returns ``(status_code, body)``. ``body`` must be ``b""`` (never None)
    for empty responses. Raise on transport failure only: an undesirable
    status code is NOT an error here, the orchestrator interprets it.

    ``body`` passed in is None for GET requests. ``cancel`` is the
    caller's cancellation signal, passed through unchanged; implementations
    should stop promptly once it is set.

    May be called from two threads at once.
    """

    def __call__(
        self,
        op: HttpReqOp,
        url: str,
        method: str,
        body: bytes | None,
        cancel: threading.Event | None,
    ) -> tuple[int, bytes]: ...


class GetCookie(Protocol):
    """Returns the value of cookie ``name`` for ``url``, or "" if absent.

    May be called from two threads at once.
    """

    def __call__(self, url: str, name: str) -> str: ...
