"""Cookie generation: sensor data and pixel challenge, run concurrently.

Flow:
1. Validate arguments (no I/O before this passes)
2. GET the page -- any failure here aborts everything
3. Two threads, joined before returning:
   - pixel: URL pair → HTML var → script (404 = solved) → script var →
     API payload → POST
   - sensor: script path → script → version → dynamic values (2.0 only) →
     up to max_tries × (API sensor data → POST → stop signal check)
4. Raise GenerationError with every branch failure, if any
"""

import logging
import threading
from urllib.parse import urlparse

from akamai_sdk._api import GenerateRequest, PixelSolveRequest, Session
from akamai_sdk._errors import (
    AkamaiError,
    BadStatusCode,
    GenerationError,
    HttpOpError,
    InvalidPageURL,
)
from akamai_sdk._http import DoHttpReq, GetCookie, HttpReqOp
from akamai_sdk._markup import (
    get_pixel_challenge_html_var,
    get_pixel_challenge_script_url,
    get_pixel_challenge_script_var,
    get_script_path,
)
from akamai_sdk._stop_signal import is_cookie_valid
from akamai_sdk._version import Version, get_sdk_version, is_script_static

logger = logging.getLogger("akamai_sdk")


def _do(
    do_http_req: DoHttpReq,
    op: HttpReqOp,
    url: str,
    method: str,
    body: bytes | None,
    cancel: threading.Event | None,
) -> tuple[int, bytes]:
    """Run one executor request, wrapping executor failures with ``op``."""
    logger.debug("%s %s (%s)", method, url, op)
    try:
        status, content = do_http_req(op, url, method, body, cancel)
    except Exception as e:
        raise HttpOpError(op, e) from e
    if content is None:
        raise TypeError(f"DoHttpReq returned a None body for {op}")
    return status, content


class _Generation:
    """State shared by the two branches of one generate() call.

    Only ``errors`` is written by both threads, always under ``_lock``.
    """

    def __init__(
        self,
        session: Session,
        user_agent: str,
        page_url: str,
        page_body: bytes,
        do_http_req: DoHttpReq,
        get_cookie: GetCookie,
        max_tries: int,
        cancel: threading.Event | None,
    ):
        self.session = session
        self.user_agent = user_agent
        self.page_url = page_url
        self.parsed = urlparse(page_url)
        self.page_body = page_body
        self.do_http_req = do_http_req
        self.get_cookie = get_cookie
        self.max_tries = max_tries
        self.cancel = cancel
        self.errors: list[AkamaiError] = []
        self._lock = threading.Lock()
        # Non-library exceptions (collaborator contract violations)
        self._crashes: list[Exception] = []

    def _add_error(self, err: AkamaiError) -> None:
        with self._lock:
            self.errors.append(err)

    def _run(self, name: str, branch) -> None:
        try:
            branch()
        except AkamaiError as e:
            logger.warning("%s branch failed for %s: %s", name, self.page_url, e)
            self._add_error(e)
        except Exception as e:
            with self._lock:
                self._crashes.append(e)

    def run(self) -> None:
        threads = [
            threading.Thread(
                target=self._run,
                args=("Pixel", self.solve_pixel),
                name="akamai-pixel",
                daemon=True,
            ),
            threading.Thread(
                target=self._run,
                args=("Sensor", self.generate_abck),
                name="akamai-sensor",
                daemon=True,
            ),
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        if self._crashes:
            raise self._crashes[0]

    # ── Pixel challenge ───────────────────────────────────────────────────

    def solve_pixel(self) -> None:
        urls = get_pixel_challenge_script_url(self.page_body)
        if urls is None:
            logger.debug("No pixel challenge on %s", self.page_url)
            return
        script_url, post_url = urls

        html_var = get_pixel_challenge_html_var(self.page_body)

        status, script = _do(
            self.do_http_req,
            HttpReqOp.GET_PIXEL_CHALLENGE_SCRIPT,
            script_url,
            "GET",
            None,
            self.cancel,
        )
        if status == 404:
            # The pixel script 404s once the challenge is solved
            logger.info("Pixel challenge already solved for %s", self.page_url)
            return
        if status != 200:
            raise HttpOpError(
                HttpReqOp.GET_PIXEL_CHALLENGE_SCRIPT, BadStatusCode(status)
            )

        script_var = get_pixel_challenge_script_var(script)

        response = self.session.generate_pixel_payload(
            PixelSolveRequest(
                user_agent=self.user_agent,
                html_var=html_var,
                script_var=script_var,
            )
        )

        _do(
            self.do_http_req,
            HttpReqOp.POST_PIXEL_PAYLOAD,
            post_url,
            "POST",
            response.payload.encode("utf-8"),
            self.cancel,
        )
        logger.info("Pixel challenge payload posted for %s", self.page_url)

    # ── Sensor data ───────────────────────────────────────────────────────

    def generate_abck(self) -> None:
        script_path = get_script_path(self.page_body)
        if script_path is None:
            logger.debug("No web SDK script on %s", self.page_url)
            return
        # script_path always starts with "/"; credentials are not carried over
        host = self.parsed.netloc.rpartition("@")[2]
        script_url = f"{self.parsed.scheme}://{host}{script_path}"

        status, script = _do(
            self.do_http_req,
            HttpReqOp.GET_SDK_SCRIPT,
            script_url,
            "GET",
            None,
            self.cancel,
        )
        if status != 200:
            raise HttpOpError(HttpReqOp.GET_SDK_SCRIPT, BadStatusCode(status))

        version = get_sdk_version(script)
        logger.debug("Web SDK version %s at %s", version.label, script_url)

        script_values = ""
        if version is Version.V2 and not is_script_static(script):
            dynamic = self.session.get_dynamic_script_values(script)
            if dynamic.success:
                script_values = dynamic.script_values

        for attempt in range(self.max_tries):
            req = GenerateRequest(
                user_agent=self.user_agent,
                version=version,
                page_url=self.page_url,
                abck=self.get_cookie(self.page_url, "_abck"),
                script_values=script_values,
            )
            if version is Version.V2:
                req.bm_sz = self.get_cookie(self.page_url, "bm_sz")

            response = self.session.generate_sensor_data(req)

            # Payload goes in verbatim, no JSON escaping
            body = '{"sensor_data":"' + response.payload + '"}'
            _do(
                self.do_http_req,
                HttpReqOp.POST_SENSOR_DATA,
                script_url,
                "POST",
                body.encode("utf-8"),
                self.cancel,
            )

            if is_cookie_valid(self.get_cookie(self.page_url, "_abck"), attempt):
                logger.info(
                    "Stop signal reached after %d post(s) for %s",
                    attempt + 1,
                    self.page_url,
                )
                break


def generate(
    session: Session,
    user_agent: str,
    page_url: str,
    do_http_req: DoHttpReq,
    get_cookie: GetCookie,
    max_tries: int,
    cancel: threading.Event | None = None,
) -> None:
    """Generate Akamai cookies (``_abck``, ``bm_sz``, ``ak_bmsc``, ...) for a page.

    GETs ``page_url``, then solves the pixel challenge (if present and not
    already solved) and generates ``_abck`` concurrently. Cookies end up
    wherever ``do_http_req`` stores them; read them with ``get_cookie``.

    Sensor data is posted at most ``max_tries`` times, fewer if the site
    uses the stop signal (see is_cookie_valid). Most sites need one post,
    sites with challenges need two, so 2 is a reasonable value.

    Both branches call ``do_http_req`` and ``get_cookie`` concurrently and
    in no fixed order; they must be thread-safe. ``cancel`` is passed to
    every ``do_http_req`` call unchanged.

    Raises:
        TypeError: ``do_http_req`` or ``get_cookie`` is None.
        ValueError: ``max_tries`` is not a positive integer.
        InvalidPageURL: ``page_url`` has no scheme or host.
        HttpOpError: the page request failed or returned non-200.
        GenerationError: one or both branches failed; see ``.errors``.
    """
    if do_http_req is None:
        raise TypeError("do_http_req must not be None")
    if get_cookie is None:
        raise TypeError("get_cookie must not be None")
    if isinstance(max_tries, bool) or not isinstance(max_tries, int):
        raise ValueError(f"max_tries must be an int, got {max_tries!r}")
    if max_tries <= 0:
        raise ValueError(f"max_tries must be positive, got {max_tries}")

    parsed = urlparse(page_url)
    if not parsed.scheme or not parsed.netloc:
        raise InvalidPageURL(page_url)

    status, page_body = _do(
        do_http_req, HttpReqOp.GET_PAGE, page_url, "GET", None, cancel
    )
    if status != 200:
        raise HttpOpError(HttpReqOp.GET_PAGE, BadStatusCode(status))

    gen = _Generation(
        session,
        user_agent,
        page_url,
        page_body,
        do_http_req,
        get_cookie,
        max_tries,
        cancel,
    )
    gen.run()

    if gen.errors:
        raise GenerationError(gen.errors)
