"""
Numeric extraction and distance unit detection.
"""
import re
from typing import List, Optional

from .contracts import Unit


# A digit run, optionally continued by thousands groups ("50,000", "123.456")
NUMBER_PATTERN = re.compile(r'[0-9]+(?:[,.][0-9]{3}(?![0-9]))*')

# Unit tokens; must not be embedded in a longer word but may follow digits
UNIT_PATTERN = re.compile(
    r'(?<![a-z])(?:(?P<km>kilomet(?:er|re)s?|km)|(?P<mi>miles?|mi))(?![a-z])',
    re.IGNORECASE,
)


def extract_numbers(text: str) -> List[int]:
    """
    Extract every number from corrected text, in order of appearance.

    Args:
        text: Text that already went through character correction

    Returns:
        List of integers (may be empty)
    """
    if not text:
        return []

    numbers = []
    for match in NUMBER_PATTERN.finditer(text):
        digits = re.sub(r'[,.]', '', match.group(0))
        numbers.append(int(digits))
    return numbers


def detect_unit(text: str) -> Optional[Unit]:
    """
    Detect a distance unit label in OCR text.

    The first unit token in the text wins.

    Returns:
        Unit.KILOMETERS, Unit.MILES, or None when no unit label is present
    """
    if not text:
        return None

    match = UNIT_PATTERN.search(text)
    if not match:
        return None
    if match.group('km'):
        return Unit.KILOMETERS
    return Unit.MILES
