"""
Numbering helpers for article labels and lettered sub-lists.

Article numbers are assigned in a separate pass over the already-filtered
section list, so no generator ever sees or advances a counter.
"""

from dataclasses import replace
from typing import Iterable, Tuple

from will_generator.document import Article


ROMAN_NUMERALS = (
    (1000, 'M'), (900, 'CM'), (500, 'D'), (400, 'CD'),
    (100, 'C'), (90, 'XC'), (50, 'L'), (40, 'XL'),
    (10, 'X'), (9, 'IX'), (5, 'V'), (4, 'IV'), (1, 'I'),
)


def to_roman(n) -> str:
    """
    Convert a positive integer to subtractive roman notation.

    Zero, negatives, bools and non-integers return an empty string
    ("no label") instead of raising.
    """
    if isinstance(n, bool) or not isinstance(n, int) or n <= 0:
        return ''

    result = []
    remaining = n
    for value, numeral in ROMAN_NUMERALS:
        count, remaining = divmod(remaining, value)
        result.append(numeral * count)
    return ''.join(result)


def letter_label(index: int) -> str:
    """Zero-based index to a, b, ..., z, aa, ab, ..."""
    if isinstance(index, bool) or not isinstance(index, int) or index < 0:
        return ''

    letters = []
    n = index + 1
    while n > 0:
        n, rem = divmod(n - 1, 26)
        letters.append(chr(ord('a') + rem))
    return ''.join(reversed(letters))


def number_articles(sections: Iterable) -> Tuple:
    """
    Return a new section tuple with articles numbered 1..N in order.

    Non-article sections pass through untouched.
    """
    numbered = []
    article_number = 0
    for section in sections:
        if isinstance(section, Article):
            article_number += 1
            section = replace(section, number=article_number)
        numbered.append(section)
    return tuple(numbered)


def article_heading(article: Article) -> str:
    return f'ARTICLE {to_roman(article.number)} - {article.title}'
