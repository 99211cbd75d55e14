"""
Request hardening for the will API.

Covers per-endpoint rate limits, response headers and the scrubbing of
free-text answers before they reach validation and the document text.
"""

import re
from typing import Any, Dict

from flask_limiter import Limiter
from flask_limiter.util import get_remote_address


# Default limits come from RATELIMIT_DEFAULT in the app config
limiter = Limiter(key_func=get_remote_address)

# Per-endpoint limits
RATE_LIMITS = {
    'download': "10 per hour",
    'document': "30 per hour",
    'preview': "120 per hour",
    'validate': "300 per hour",
}

# Applied to every response
SECURITY_HEADERS = {
    'Content-Security-Policy': "default-src 'none'; frame-ancestors 'none'",
    'X-Content-Type-Options': 'nosniff',
    'X-Frame-Options': 'DENY',
    'Referrer-Policy': 'no-referrer',
    'Cache-Control': 'no-store',
}


def add_security_headers(response):
    """after_request hook; overrides any caching a view asked for."""
    for name, value in SECURITY_HEADERS.items():
        response.headers[name] = value
    return response


def init_security(app):
    limiter.init_app(app)
    app.logger.debug(
        f'Rate limiting {"enabled" if app.config.get("RATELIMIT_ENABLED", True) else "disabled"}'
    )


def rate_limit(endpoint: str):
    """Decorator applying the configured limit for an endpoint."""
    return limiter.limit(RATE_LIMITS[endpoint])


# Stripped from every string answer
SCRIPT_BLOCK = re.compile(r'<script[^>]*>.*?</script>', re.DOTALL | re.IGNORECASE)
MARKUP_TAG = re.compile(r'<[^>]+>')
CONTROL_CHARS = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]')

MAX_ANSWER_LENGTH = 10000


def sanitize_string(value: Any, max_length: int = MAX_ANSWER_LENGTH) -> str:
    """
    Scrub one free-text answer.

    Script blocks are dropped with their content; other tags lose only the
    tag. Newlines and tabs survive, other control characters do not.

    Args:
        value: Raw answer; non-strings are converted
        max_length: Answers are cut to this many characters

    Returns:
        Trimmed, scrubbed text ('' for None)
    """
    if value is None:
        return ''
    text = value if isinstance(value, str) else str(value)

    for pattern in (SCRIPT_BLOCK, MARKUP_TAG, CONTROL_CHARS):
        text = pattern.sub('', text)

    return text[:max_length].strip()


def sanitize_payload(payload: Any) -> Any:
    """
    Scrub every string in a decoded JSON value and return a new value.

    Numbers, booleans and None pass through untouched so share percentages
    and include flags keep their types.
    """
    if isinstance(payload, str):
        return sanitize_string(payload)
    if isinstance(payload, dict):
        return {key: sanitize_payload(value) for key, value in payload.items()}
    if isinstance(payload, list):
        return [sanitize_payload(item) for item in payload]
    return payload


def summarize_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Shape of a payload for logs, without any personal values."""
    return {
        key: (f'list[{len(value)}]' if isinstance(value, list) else type(value).__name__)
        for key, value in sorted(payload.items())
    }
