"""Typed exceptions for akamai_sdk."""

import enum


class ErrorKind(enum.Enum):
    """Machine-checkable category of an AkamaiError."""

    PRECONDITION = "precondition"
    TRANSPORT = "transport"
    BAD_STATUS = "bad_status"
    EXTRACTION = "extraction"
    DECODE = "decode"
    API = "api"
    AGGREGATE = "aggregate"


class AkamaiError(Exception):
    """Base exception for all akamai_sdk errors.

    ``cause`` is the underlying error (if any). It is stored as
    ``__cause__`` so tracebacks show the full chain even when the error
    is collected rather than raised.
    """

    kind = ErrorKind.PRECONDITION

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    @property
    def cause(self) -> BaseException | None:
        return self.__cause__


class InvalidPageURL(AkamaiError, ValueError):
    """Page URL is not absolute (missing scheme or host)."""

    kind = ErrorKind.PRECONDITION

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Invalid page URL: {url!r}")


class BadStatusCode(AkamaiError):
    """An HTTP response had an undesirable status code."""

    kind = ErrorKind.BAD_STATUS

    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__(f"Bad status HTTP {status_code}")


class HttpOpError(AkamaiError):
    """An executor request failed for the given operation.

    The cause is either the exception raised by the executor or a
    BadStatusCode.
    """

    def __init__(self, op, cause: BaseException):
        self.op = op
        super().__init__(f"HTTP request failed for operation {op}", cause)

    @property
    def kind(self) -> ErrorKind:
        if isinstance(self.__cause__, BadStatusCode):
            return ErrorKind.BAD_STATUS
        return ErrorKind.TRANSPORT


class RequestCancelled(AkamaiError):
    """The cancellation signal was set before the request was sent."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Request to {url} cancelled")


class HexDecodeError(AkamaiError):
    """A hex-escaped string segment is not valid base 16."""

    kind = ErrorKind.DECODE

    def __init__(self, segment: str, cause: BaseException | None = None):
        self.segment = segment
        super().__init__(f"Invalid hex segment: {segment!r}", cause)


class VariableNotFound(AkamaiError):
    """A dynamic variable could not be extracted from a page or script."""

    kind = ErrorKind.EXTRACTION
    variable = "variable"

    def __init__(self, cause: BaseException | None = None):
        msg = f"Pixel {self.variable} not found"
        if cause is not None:
            msg += f": {cause}"
        super().__init__(msg, cause)


class PixelHtmlVarNotFound(VariableNotFound):
    """The pixel challenge HTML variable is missing or malformed."""

    variable = "HTML var"


class PixelScriptVarNotFound(VariableNotFound):
    """The pixel challenge script variable is missing or malformed."""

    variable = "script var"


class ApiOperationError(AkamaiError):
    """The generation API answered with a non-success status code."""

    kind = ErrorKind.API

    def __init__(self, status_code: int, message: str = ""):
        self.status_code = status_code
        self.message = message
        msg = f"API operation failed with HTTP {status_code}"
        if message:
            msg += f"; {message}"
        super().__init__(msg)


class ApiRequestFailed(AkamaiError):
    """The generation API could not be reached or sent an unreadable body."""

    kind = ErrorKind.API

    def __init__(self, url: str, cause: BaseException):
        self.url = url
        super().__init__(f"API request to {url} failed: {cause}", cause)


class GenerationError(AkamaiError):
    """One or both generation branches failed.

    ``errors`` holds every branch failure in the order it was collected.
    """

    kind = ErrorKind.AGGREGATE

    def __init__(self, errors: list[AkamaiError]):
        self.errors = list(errors)
        detail = "; ".join(str(e) for e in self.errors)
        super().__init__(
            f"Generation failed with {len(self.errors)} error(s): {detail}"
        )
