"""Step location and key normalization utilities."""

import re
from typing import Any

from courseproc.exceptions import MalformedLocationError

# Non-digit prefix, step number, .htm/.html suffix: "node12.html", "intro_3.htm"
STEP_FILENAME_PATTERN = re.compile(r"^\D*(\d+)\.html?$", re.IGNORECASE)


def parse_step_number(step_filename: str) -> int:
    """
    Extract the step number from a step file name.

    Only the number is kept since step names are likely to change between
    builds while the numbering is stable.

    Args:
        step_filename: Step file name (e.g., "intro_12.html")

    Returns:
        Step number

    Raises:
        MalformedLocationError: If the name contains no step number

    Examples:
        >>> parse_step_number("intro_12.html")
        12
        >>> parse_step_number("node05.htm")
        5
    """
    match = STEP_FILENAME_PATTERN.match(step_filename or "")
    if not match:
        raise MalformedLocationError(f"Unable to determine step number from '{step_filename}'")
    return int(match.group(1))


def lead_zero(value: int) -> str:
    """
    Zero-pad a step number to two digits.

    Args:
        value: Step number

    Returns:
        Padded string ("7" -> "07", "12" -> "12")
    """
    return f"{value:02d}"


def build_step_link(theme: str, module: str, step_number: int, anchor: str = "") -> str:
    """
    Build a link to a generated step page, relative to a top-level page dir.

    Args:
        theme: Theme directory name
        module: Module directory name
        step_number: Step number
        anchor: Optional fragment identifier

    Returns:
        Link string

    Examples:
        >>> build_step_link("ThemeA", "Mod1", 2, "x")
        '../ThemeA/Mod1/step02.html#x'
    """
    link = f"../{theme}/{module}/step{lead_zero(step_number)}.html"
    if anchor:
        link += f"#{anchor}"
    return link


def normalize_term(term: Any) -> str:
    """
    Normalize a glossary term into a reference key.

    Lowercases the term, drops everything that is not a word character or
    whitespace, then collapses whitespace runs into single underscores.

    Args:
        term: Term text

    Returns:
        Normalized key

    Examples:
        >>> normalize_term("Dynamic  Web-Pages!")
        'dynamic_webpages'
    """
    key = str(term).lower()
    key = re.sub(r"[^\w\s]", "", key)
    return re.sub(r"\s+", "_", key.strip())
