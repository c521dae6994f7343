"""Input sanitization utilities"""
import html
import re
from urllib.parse import urlsplit

import bleach

MAX_PLAIN_TEXT = 10000

# Characters that never belong in a plain text field
PLAIN_TEXT_STRIP_RE = re.compile(r"[<>\"'`\\]")
CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f]")

ALLOWED_URL_SCHEMES = ("http", "https")


class HtmlSanitizer:
    """Removes executable constructs from an HTML fragment."""

    name = "base"

    def sanitize(self, text: str) -> str:
        raise NotImplementedError


class RegexHtmlSanitizer(HtmlSanitizer):
    """Pattern based stripping, usable without an HTML parser.

    Passes are repeated until nothing changes, so fragments that only form a
    tag once an inner tag is removed (``<scr<script></script>ipt>``) are
    caught and a second call is a no-op.
    """

    name = "regex"

    PATTERNS = (
        # an unterminated script swallows the rest of the input
        re.compile(r"<script\b[^>]*>.*?(?:</script\s*>|$)", re.IGNORECASE | re.DOTALL),
        re.compile(r"</?script\b[^>]*>?", re.IGNORECASE),
        re.compile(r"<iframe\b[^>]*>.*?</iframe\s*>", re.IGNORECASE | re.DOTALL),
        re.compile(r"</?iframe\b[^>]*>?", re.IGNORECASE),
        re.compile(r"\bon\w+\s*=\s*(?:\"[^\"]*\"|'[^']*'|[^\s>]*)", re.IGNORECASE),
        re.compile(r"(?:java|vb)script\s*:", re.IGNORECASE),
    )

    def sanitize(self, text: str) -> str:
        if not text:
            return ""

        previous = None
        while text != previous:
            previous = text
            for pattern in self.PATTERNS:
                text = _strip_all(pattern, text)
        return text


def _strip_all(pattern: re.Pattern, text: str) -> str:
    # A whole block has to go before the stray-tag patterns run, otherwise
    # a rebuilt "<script>...</script>" would leave its body behind
    stripped = pattern.sub("", text)
    while stripped != text:
        text = stripped
        stripped = pattern.sub("", text)
    return text


class BleachHtmlSanitizer(HtmlSanitizer):
    """Parser based sanitizer with a small formatting allow-list."""

    name = "bleach"

    ALLOWED_TAGS = frozenset({"b", "i", "em", "strong", "p", "br"})

    def __init__(self, allowed_tags=None):
        self.allowed_tags = frozenset(allowed_tags or self.ALLOWED_TAGS)
        # bleach keeps the text of stripped tags, so script and iframe
        # bodies have to go before the parser sees them
        self._prepass = RegexHtmlSanitizer()

    def sanitize(self, text: str) -> str:
        if not text:
            return ""

        # stripping a tag can join its neighbours into "javascript:" or an
        # on*= handler, so both passes repeat until the output settles
        previous = None
        while text != previous:
            previous = text
            text = bleach.clean(
                self._prepass.sanitize(text),
                tags=self.allowed_tags,
                attributes={},
                protocols=list(ALLOWED_URL_SCHEMES),
                strip=True,
                strip_comments=True,
            )
        return text


HTML_SANITIZERS = {
    BleachHtmlSanitizer.name: BleachHtmlSanitizer,
    RegexHtmlSanitizer.name: RegexHtmlSanitizer,
}

_active_sanitizer: HtmlSanitizer = BleachHtmlSanitizer()


def configure_html_sanitizer(name: str) -> HtmlSanitizer:
    """Select the HTML sanitizer backend used by sanitize_html()."""
    global _active_sanitizer
    try:
        sanitizer_cls = HTML_SANITIZERS[(name or "").lower()]
    except KeyError:
        raise ValueError(
            f"Unknown HTML sanitizer backend: {name!r} "
            f"(expected one of {', '.join(sorted(HTML_SANITIZERS))})"
        )
    _active_sanitizer = sanitizer_cls()
    return _active_sanitizer


def get_html_sanitizer() -> HtmlSanitizer:
    return _active_sanitizer


def sanitize_html(text: str) -> str:
    """Strip scripts, iframes, event handlers and javascript: references from HTML."""
    return _active_sanitizer.sanitize(text)


def sanitize_plain_text(text: str, max_length: int = MAX_PLAIN_TEXT) -> str:
    """Sanitize a plain text field: drop markup characters, trim, cap the length."""
    if not text:
        return ""

    text = PLAIN_TEXT_STRIP_RE.sub("", text)
    return text.strip()[:max_length]


def _url_allowed(url: str) -> bool:
    try:
        parts = urlsplit(url)
    except ValueError:
        return False

    scheme = parts.scheme.lower()
    if not scheme:
        # root-relative only; "//host" and "/\host" are resolved against
        # another origin by browsers
        return url.startswith("/") and url[1:2] not in ("/", "\\")
    return scheme in ALLOWED_URL_SCHEMES and bool(parts.netloc)


def sanitize_url(url: str) -> str:
    """Return the URL if it is root-relative or http(s), otherwise an empty string."""
    if not url:
        return ""

    cleaned = CONTROL_CHARS_RE.sub("", url.strip())
    if not cleaned:
        return ""

    # "javascript&colon;" turns into a scheme once written into an attribute
    decoded = CONTROL_CHARS_RE.sub("", html.unescape(cleaned))
    if _url_allowed(cleaned) and _url_allowed(decoded):
        return cleaned
    return ""


GENERIC_ERROR_MESSAGE = "An error occurred. Please try again later."

ERROR_REDACTIONS = (
    (re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"), "[EMAIL]"),
    (re.compile(r"\b\d{10}\b"), "[PHONE]"),
    (re.compile(r"Bearer\s+[A-Za-z0-9._-]+", re.IGNORECASE), "[TOKEN]"),
    (re.compile(r"password[=:]\s*\S+", re.IGNORECASE), "password=[REDACTED]"),
    (re.compile(r"api[_-]?key[=:]\s*\S+", re.IGNORECASE), "api_key=[REDACTED]"),
)
INTERNAL_ERROR_RE = re.compile(r"database|sql|auth|jwt", re.IGNORECASE)


def sanitize_error_message(error) -> str:
    """Make an exception message safe to show to an end user."""
    message = str(error) if error is not None else ""
    for pattern, replacement in ERROR_REDACTIONS:
        message = pattern.sub(replacement, message)

    if INTERNAL_ERROR_RE.search(message):
        return GENERIC_ERROR_MESSAGE
    return message or GENERIC_ERROR_MESSAGE
