import re
from urllib.parse import urlparse

from app.core.config import Limit, get_global_limit
from app.core.errors import EmptyContentError, InvalidUrlError

SCHEME_PATTERN = re.compile(r"^https?://", re.IGNORECASE)

FIELD_MESSAGES = {
    "url": "Please enter a valid URL.",
    "paymentLink": "Please enter a valid payment link URL.",
}


def _is_valid_host(host: str | None) -> bool:
    if not host or any(ch.isspace() for ch in host):
        return False
    return host == "localhost" or "." in host.strip(".")


def normalize_url_input(raw: str, field: str = "url") -> str:
    """
    Trim, prepend ``https://`` to scheme-less input and require an absolute
    http(s) URL with a host. Raises InvalidUrlError otherwise.
    """
    message = FIELD_MESSAGES.get(field, FIELD_MESSAGES["url"])
    value = (raw or "").strip()

    if not value or len(value) > get_global_limit(Limit.MAX_INPUT_LENGTH):
        raise InvalidUrlError(message, field=field)

    if not SCHEME_PATTERN.match(value):
        value = f"https://{value}"

    try:
        parsed = urlparse(value)
        host = parsed.hostname
        parsed.port  # raises on a malformed port
    except ValueError:
        raise InvalidUrlError(message, field=field)

    if parsed.scheme.lower() not in {"http", "https"} or not _is_valid_host(host):
        raise InvalidUrlError(message, field=field)

    return value


def validate_qr_content(raw: str | None, field: str = "qrContent") -> str:
    # QR payloads may be vCards, WiFi credentials or plain text; no URL shape required
    if raw is None or not raw.strip():
        raise EmptyContentError("QR code content is empty.", field=field)
    return raw.strip()
