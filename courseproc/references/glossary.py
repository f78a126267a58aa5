"""Glossary term handling."""

from typing import Any, Dict, Iterable, List, Mapping

from courseproc.exceptions import MissingReferenceIdError
from courseproc.models import ReferenceEntry, RenderedEntry, normalize_term
from courseproc.templating import TemplateRenderer
from courseproc.references.base_strategy import ReferenceKeyStrategy

DIGIT_BUCKET = "digit"
SYMBOL_BUCKET = "symb"


class GlossaryStrategy(ReferenceKeyStrategy):
    """
    Glossary handler.

    Keys are normalized term text, so differently-cased or punctuated uses of
    a term collate together. An occurrence carrying non-empty "definition"
    text defines the term; everything else is a use of it.
    """

    name = "glossary"
    template_prefix = "glossary"

    def make_key(self, key: Any, attrs: Mapping[str, Any]) -> str:
        term = key or attrs.get("term")
        if not term:
            raise MissingReferenceIdError("Malformed glossary entry: no term provided")

        normalized = normalize_term(term)
        if not normalized:
            raise MissingReferenceIdError(f"Glossary term '{term}' has no usable characters")
        return normalized

    def is_definition(self, attrs: Mapping[str, Any]) -> bool:
        return bool(attrs.get("definition"))

    def render_text(self, entry: ReferenceEntry, renderer: TemplateRenderer) -> str:
        attrs = entry.definition.attrs
        return renderer.render("glossary/entry", {
            "termname": entry.key,
            "term": attrs.get("term") or entry.key,
            "definition": attrs.get("definition") or "",
        })

    def convert_glossary_term(self, term: str, renderer: TemplateRenderer) -> str:
        """
        Build the inline link that replaces a glossary tag in step text.

        The target page is chosen from the first character of the term as
        written, the anchor from its normalized key.

        Args:
            term: Term text as it appears in the tag
            renderer: Template renderer

        Returns:
            Link to the term on its glossary letter page
        """
        return renderer.render("glossary/inline-link", {
            "letter": initial_bucket(term),
            "term": self.make_key(term, {}),
            "name": term,
        })


def initial_bucket(key: str) -> str:
    """
    Work out which glossary page a key belongs on.

    Returns:
        'a'-'z' for letters, 'digit' for digits, 'symb' for anything else
    """
    first = key[:1].lower()
    if "a" <= first <= "z":
        return first
    if first.isdigit():
        return DIGIT_BUCKET
    return SYMBOL_BUCKET


def group_by_initial(entries: Iterable[RenderedEntry]) -> Dict[str, List[RenderedEntry]]:
    """
    Group glossary entries into per-letter pages.

    Args:
        entries: Finalized glossary entries

    Returns:
        Mapping of bucket name to entries sorted by key. Only non-empty
        buckets are present.
    """
    buckets: Dict[str, List[RenderedEntry]] = {}
    for entry in entries:
        buckets.setdefault(initial_bucket(entry.key), []).append(entry)

    return {
        bucket: sorted(members, key=lambda e: e.key)
        for bucket, members in buckets.items()
    }
