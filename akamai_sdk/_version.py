"""Akamai Bot Manager web SDK version and script shape detection.

Pure logic, no I/O. Both checks are prefix matches against the raw script
source, so they never fail: no match is itself a meaningful answer.
"""

import enum
import re


class Version(enum.Enum):
    """Akamai Bot Manager web SDK version.

    Values are the strings the generation API expects.
    """

    V1_7 = "1.7"
    V1_75 = "1.75"
    V2 = "2"

    @property
    def label(self) -> str:
        return "2.0" if self is Version.V2 else self.value


# Checked in this order; anything else is 1.7.
_VERSION_175_RE = re.compile(rb"^var _acxj")
_VERSION_2_RE = re.compile(rb"^\(function")

_STATIC_SCRIPT_RE = re.compile(rb"^\(function \w+?")


def get_sdk_version(src: bytes) -> Version:
    """Get the web SDK version from the script source."""
    if _VERSION_175_RE.match(src):
        return Version.V1_75
    if _VERSION_2_RE.match(src):
        return Version.V2
    return Version.V1_7


def is_script_static(src: bytes) -> bool:
    """Report whether the script is the static variant of the web SDK.

    The web SDK ships in three shapes:
    - static scripts, which start with a named function expression;
    - dynamic scripts;
    - dynamic scripts of the newer "static-like" shape, which mix both.

    Only the first returns True. Dynamic 2.0 scripts need per-load values
    from the generation API before sensor data can be generated.
    """
    return _STATIC_SCRIPT_RE.match(src) is not None
