"""IEEE-style author/editor name formatting."""

import logging
import re
from typing import List, Optional

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# "J." or "J.R."
INITIALS_PATTERN = re.compile(r"^\w\.(\w\.)*$")

# Suffixes end in a period ("Jr.", "III."), surnames never do
SUFFIX_PATTERN = re.compile(r"\.$")


def convert_name(surname: str, initials: str, suffix: Optional[str] = None) -> str:
    """
    Convert one "surname, initials[, suffix]" name into IEEE order.

    Forenames are reduced to initials if they are not initials already,
    one initial per whitespace-separated word.

    Args:
        surname: Family name
        initials: Initials ("J.R.") or forenames ("John")
        suffix: Optional suffix ("Jr.")

    Returns:
        Name as "J.R. Smith[, Jr.]"
    """
    if not INITIALS_PATTERN.match(initials):
        initials = "".join(f"{word[0]}." for word in initials.split())

    result = f"{initials} {surname}".strip()
    if suffix:
        result += f", {suffix}"

    return result


def join_names(names: List[str]) -> str:
    """
    Join converted names with commas and a final "and".

    Examples:
        >>> join_names(["A. One", "B. Two", "C. Three"])
        'A. One, B. Two and C. Three'
    """
    if not names:
        return ""
    if len(names) == 1:
        return names[0]
    return ", ".join(names[:-1]) + " and " + names[-1]


def split_names(name: str, names: Optional[str] = None) -> List[tuple]:
    """
    Split a primary name plus an optional name list into name triples.

    All whitespace is removed before splitting, so "van Dyke" becomes
    "vanDyke" and "John Robert" is a single forename. The combined list is
    a flat sequence of "surname, initials[, suffix]" groups. A token
    following a surname/initials pair that ends in a period is taken as
    that name's suffix. An unpaired trailing token is dropped.

    Args:
        name: Primary name ("Smith, J.")
        names: Additional names ("Jones, A., Jr., Brown, B.")

    Returns:
        List of (surname, initials, suffix) tuples
    """
    combined = f"{name}, {names}" if names else name
    combined = re.sub(r"\s", "", combined)
    tokens = combined.split(",")

    # Trailing empty fields carry no name data
    while tokens and not tokens[-1]:
        tokens.pop()

    triples = []
    i = 0
    while i < len(tokens):
        if i + 1 >= len(tokens):
            logger.warning(f"Dropping unmatched name token '{tokens[i]}' in '{combined}'")
            break

        surname, initials, suffix = tokens[i], tokens[i + 1], None
        if i + 2 < len(tokens) and SUFFIX_PATTERN.search(tokens[i + 2]):
            suffix = tokens[i + 2]
            i += 1

        triples.append((surname, initials, suffix))
        i += 2

    return triples


def convert_names(name: str, names: Optional[str] = None) -> str:
    """
    Convert one or more names into an IEEE-style author list.

    Args:
        name: Primary author/editor in "Surname, Initials[, Suffix]" form
        names: Optional comma-separated list of further names

    Returns:
        Formatted list, e.g. "J. Smith, A. Jones and B. Brown"

    Examples:
        >>> convert_names("Smith, John")
        'J. Smith'
        >>> convert_names("Smith, J.", "Jones, A.")
        'J. Smith and A. Jones'
    """
    if not name:
        return ""
    return join_names([convert_name(*triple) for triple in split_names(name, names)])
