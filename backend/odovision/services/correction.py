"""
OCR character correction for odometer text.

Letters that OCR engines commonly return in place of digits are rewritten,
but only inside clusters that already contain a real digit, so labels such
as "ODO" or "MILES" pass through untouched.
"""
import re


# Common OCR misreadings of digits
CHAR_TO_DIGIT = {
    # Zero misreads
    'O': '0', 'o': '0', 'Q': '0', 'D': '0',
    # One misreads
    'l': '1', 'I': '1', 'i': '1', '|': '1',
    # Two misreads
    'Z': '2', 'z': '2',
    # Five misreads
    'S': '5', 's': '5',
    # Six misreads
    'G': '6', 'b': '6',
    # Eight misreads
    'B': '8',
    # Nine misreads
    'g': '9', 'q': '9',
}

DIGITS = frozenset('0123456789')

# Maximal runs of letters/digits; '|' is kept in because it is read for '1'
CLUSTER_PATTERN = re.compile(r'[A-Za-z0-9|]+')

# A unit label glued to the end of a reading, e.g. "52mi" or "50000KM"
UNIT_SUFFIX_PATTERN = re.compile(
    r'^(?P<reading>.*[0-9].*?)(?P<unit>kilomet(?:er|re)s?|km|miles?|mi)$',
    re.IGNORECASE,
)


def has_digit(cluster: str) -> bool:
    """Check whether a cluster contains at least one ASCII digit."""
    return any(c in DIGITS for c in cluster)


def correct_cluster(cluster: str) -> str:
    """
    Correct a single alphanumeric cluster.

    A cluster without any digit is returned unchanged. Otherwise every
    ambiguous character in the cluster is replaced by its digit, except a
    trailing distance unit which is kept as written.

    Args:
        cluster: Run of letters/digits with no separators

    Returns:
        Corrected cluster
    """
    if not has_digit(cluster):
        return cluster

    unit = ""
    match = UNIT_SUFFIX_PATTERN.match(cluster)
    if match:
        cluster, unit = match.group('reading'), match.group('unit')

    corrected = ''.join(CHAR_TO_DIGIT.get(c, c) for c in cluster)
    return corrected + unit


def correct_text(text: str) -> str:
    """
    Apply character correction to every cluster of a recognized string.

    Separators (spaces, punctuation) between clusters are preserved.

    >>> correct_text("ODO 5O000")
    'ODO 50000'
    """
    if not text:
        return ""
    return CLUSTER_PATTERN.sub(lambda m: correct_cluster(m.group(0)), text)
