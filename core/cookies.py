"""Cookie header parsing."""

from core.request_types import Cookie

PAIR_SEPARATOR = "; "


def parse_cookie_header(value: str | None) -> list[Cookie]:
    """Split a cookie header into records, in header order.

    Parsing is best-effort per pair: a pair without "=" yields a record
    whose value is None instead of failing the whole header.
    """
    if value is None:
        return []

    cookies = []
    for pair in value.split(PAIR_SEPARATOR):
        if not pair:
            continue
        name, sep, cookie_value = pair.partition("=")
        cookies.append(Cookie(name=name, value=cookie_value if sep else None))
    return cookies
