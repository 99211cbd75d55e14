"""
Utility functions for number wording, hashing, and text processing.
"""

import hashlib
import re
from datetime import datetime
from typing import Any, Optional, Union


NUMBER_PLACEHOLDER = '[NUMBER]'

Number = Union[int, float]


def or_placeholder(value: Any, placeholder: str) -> str:
    """
    Return the value as stripped text, or the placeholder when blank.

    Args:
        value: Raw field value
        placeholder: Bracketed token, e.g. '[NAME]'

    Returns:
        Text safe to drop into clause prose
    """
    if value is None:
        return placeholder
    text = str(value).strip()
    return text if text else placeholder


def to_number(value: Any) -> Optional[Number]:
    """
    Coerce a payload value to a number.

    Integral values come back as int so they word-render; anything that
    cannot be read as a number returns None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = value
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if isinstance(number, float) and number.is_integer():
        return int(number)
    return number


def number_to_words(n: int) -> str:
    """
    Convert an integer from 0 to 100 to English words.

    Args:
        n: Integer number

    Returns:
        Number in words, hyphenating compound tens (forty-five)
    """
    if n == 0:
        return 'zero'

    ones = ['', 'one', 'two', 'three', 'four', 'five', 'six', 'seven', 'eight', 'nine']
    teens = ['ten', 'eleven', 'twelve', 'thirteen', 'fourteen', 'fifteen',
             'sixteen', 'seventeen', 'eighteen', 'nineteen']
    tens = ['', '', 'twenty', 'thirty', 'forty', 'fifty', 'sixty', 'seventy', 'eighty', 'ninety']

    if n == 100:
        return 'one hundred'
    elif n < 10:
        return ones[n]
    elif n < 20:
        return teens[n - 10]
    return tens[n // 10] + ('' if n % 10 == 0 else '-' + ones[n % 10])


def to_words(value: Any) -> str:
    """
    Render a percentage or day count for clause text.

    Whole numbers 0 through 100 become words. Anything else renders as its
    literal number (101 -> '101', 33.5 -> '33.5'), and a missing value
    becomes the [NUMBER] placeholder.
    """
    number = to_number(value)
    if number is None:
        if value is None or (isinstance(value, str) and not value.strip()):
            return NUMBER_PLACEHOLDER
        return str(value).strip()
    if isinstance(number, int) and 0 <= number <= 100:
        return number_to_words(number)
    return str(number)


def calculate_sha256(data: bytes) -> str:
    """
    Calculate SHA256 hash of data.

    Args:
        data: Bytes to hash

    Returns:
        Hexadecimal hash string
    """
    return hashlib.sha256(data).hexdigest()


def short_hash(full_hash: str, length: int = 16) -> str:
    """Shortened hash for display in footers and audit ids."""
    if not full_hash:
        return ''
    return full_hash[:length]


def escape_text(text: str) -> str:
    """
    Escape special characters for ReportLab paragraph markup.

    Args:
        text: Input text

    Returns:
        Escaped text safe for ReportLab
    """
    if not text:
        return ''

    replacements = [
        ('&', '&amp;'),
        ('<', '&lt;'),
        ('>', '&gt;'),
        ('"', '&quot;'),
    ]

    result = text
    for old, new in replacements:
        result = result.replace(old, new)

    return result


def sanitize_filename(name: Any, fallback: str = 'Testator') -> str:
    """Collapse a person's name into a filesystem-safe token."""
    if name is None or name == '':
        return fallback
    cleaned = re.sub(r'[^A-Za-z0-9]+', '_', str(name)).strip('_')
    return cleaned or fallback


def format_long_date(timestamp: Optional[datetime]) -> str:
    """
    Format a timestamp as 'October 18, 2026'.

    Args:
        timestamp: Datetime to format

    Returns:
        Formatted date, or an empty string for None
    """
    if timestamp is None:
        return ''
    return f'{timestamp.strftime("%B")} {timestamp.day}, {timestamp.year}'
