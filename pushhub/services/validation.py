"""Input sanitizing and format checks shared by request schemas."""

import re

# hostname[:port], localhost[:port], or IPv4[:port]
DOMAIN_REGEX = re.compile(
    r"^([a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?\.)+[a-zA-Z]{2,}(:[0-9]+)?$"
    r"|^localhost(:[0-9]+)?$"
    r"|^[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}(:[0-9]+)?$"
)

URL_REGEX = re.compile(
    r"^https?://(www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b"
    r"([-a-zA-Z0-9()@:%_+.~#?&/=]*)$"
)

_UNSAFE_CHARS = re.compile(r"[<>\"'&]")

MAX_DOMAIN_LENGTH = 253
MAX_URL_LENGTH = 2048


def sanitize_string(value: str) -> str:
    """Trim whitespace and strip characters commonly used for markup injection."""
    return _UNSAFE_CHARS.sub("", value.strip())


def sanitize_text(value: str, field_name: str, min_length: int, max_length: int) -> str:
    """Sanitize a text field and enforce its length bounds.

    Raises:
        ValueError: If the sanitized value is shorter or longer than allowed.
    """
    sanitized = sanitize_string(value)
    if len(sanitized) < min_length:
        if min_length == 1:
            raise ValueError(f"{field_name} is required")
        raise ValueError(f"{field_name} must be at least {min_length} characters long")
    if len(sanitized) > max_length:
        raise ValueError(f"{field_name} must be no more than {max_length} characters long")
    return sanitized


def normalize_domain(value: str) -> str:
    """Lower-case and validate a domain name.

    Raises:
        ValueError: If the value is not a hostname, localhost or IPv4 address.
    """
    domain = value.strip().lower()
    if not domain:
        raise ValueError("Domain name is required")
    if len(domain) > MAX_DOMAIN_LENGTH:
        raise ValueError("Domain name is too long")
    if not DOMAIN_REGEX.match(domain):
        raise ValueError("Please enter a valid domain name (e.g., example.com)")
    return domain


def validate_url(value: str) -> str:
    """Validate an absolute http(s) URL.

    Raises:
        ValueError: If the URL is malformed or too long.
    """
    url = value.strip()
    if len(url) > MAX_URL_LENGTH:
        raise ValueError("URL is too long")
    if not URL_REGEX.match(url):
        raise ValueError("Please enter a valid URL (must start with http:// or https://)")
    return url


def validate_target_url(value: str) -> str:
    """Validate a click-through URL: either site-relative or absolute http(s)."""
    url = value.strip()
    if url.startswith("/") and not url.startswith("//"):
        if len(url) > MAX_URL_LENGTH:
            raise ValueError("URL is too long")
        return url
    return validate_url(url)
