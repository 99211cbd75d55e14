"""
Completeness check for rendered will text.

This is the last gate before a document may be finalized: any bracketed
all-caps token left in the text is a field the assembly engine had to
default to a placeholder.
"""

import re
from typing import Dict, List

PLACEHOLDER_PATTERN = re.compile(r'\[[A-Z_ ]+\]')

# Markers that are intentionally blank in every executed document
ALLOWED_PLACEHOLDERS = frozenset({'[NOTARY SEAL]'})


def scan_for_placeholders(text: str) -> List[str]:
    """Unique unresolved placeholder tokens, in order of first appearance."""
    if not text or not isinstance(text, str):
        return []

    found = []
    for match in PLACEHOLDER_PATTERN.finditer(text):
        token = match.group(0)
        if token in ALLOWED_PLACEHOLDERS or token in found:
            continue
        found.append(token)
    return found


def completeness_errors(text: str) -> Dict[str, str]:
    tokens = scan_for_placeholders(text)
    if not tokens:
        return {}
    return {
        'placeholders': (
            f'Your will contains incomplete fields: {", ".join(tokens)}. '
            f'Please go back and fill in all required information.'
        )
    }
