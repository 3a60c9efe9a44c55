from urllib.parse import urlparse

from shortlink.errors import ValidationError

ALLOWED_SCHEMES = ("http", "https")
MAX_URL_LENGTH = 2048


def normalize_url(url: str) -> str:
    """Strip the URL and default a missing scheme to https.

    Raises:
        ValidationError: If the result is not an http(s) URL with a host
    """
    url = url.strip()
    if not url:
        raise ValidationError("URL is required")
    if len(url) > MAX_URL_LENGTH:
        raise ValidationError(f"URL must be at most {MAX_URL_LENGTH} characters long")

    if "://" not in url:
        url = "https://" + url

    parsed = urlparse(url)
    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        raise ValidationError(f"Unsupported URL scheme: '{parsed.scheme}'")
    if not parsed.netloc:
        raise ValidationError("URL must include a host")
    return url
