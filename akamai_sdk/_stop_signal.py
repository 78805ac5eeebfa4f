"""Stop signal: client-side check for whether more sensor posts are redundant."""


def is_cookie_valid(value: str, request_count: int) -> bool:
    """Report if an ``_abck`` value is valid under the stop signal logic.

    The second ``~``-delimited field of ``_abck`` is the number of sensor
    posts after which the cookie is valid. ``-1``, a missing field or a
    non-integer field means the site does not use the stop signal; then
    there is no way to tell a valid cookie apart without using it, and
    this returns False.

    Always pass the live cookie value: the threshold can change between
    posts.
    """
    parts = value.split("~")
    if len(parts) < 2:
        return False

    try:
        threshold = int(parts[1])
    except ValueError:
        return False
    return threshold != -1 and request_count >= threshold
