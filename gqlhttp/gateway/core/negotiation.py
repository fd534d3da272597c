"""
Accept header negotiation between JSON and HTML responses.
"""

from typing import Optional, Tuple

from python_multipart.multipart import parse_options_header

HTML = "text/html"
JSON = "application/json"


def _quality(accept: str, media_type: str) -> Tuple[float, int]:
    """Return (q, specificity) of the best range in ``accept`` matching media_type."""
    major = media_type.split("/", 1)[0]
    best = (0.0, -1)
    for part in accept.split(","):
        if not part.strip():
            continue
        range_, options = parse_options_header(part)
        range_ = range_.decode("latin-1").strip().lower()
        if range_ == media_type:
            specificity = 2
        elif range_ == f"{major}/*":
            specificity = 1
        elif range_ == "*/*":
            specificity = 0
        else:
            continue
        try:
            q = float(options.get(b"q", b"1").decode("latin-1"))
        except ValueError:
            q = 0.0
        if specificity > best[1]:
            best = (q, specificity)
    return best


def prefers_html(accept: Optional[str]) -> bool:
    """
    True when the Accept header ranks text/html above application/json.

    Ties go to HTML only when it was named explicitly and JSON was not.
    """
    if not accept:
        return False
    html_q, html_specificity = _quality(accept, HTML)
    json_q, json_specificity = _quality(accept, JSON)
    if html_q <= 0:
        return False
    if html_q != json_q:
        return html_q > json_q
    return html_specificity > json_specificity
