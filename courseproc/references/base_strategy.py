"""Base class for reference key strategies."""

from abc import ABC, abstractmethod
from typing import Any, Mapping

from courseproc.models import ReferenceEntry
from courseproc.templating import TemplateRenderer


class ReferenceKeyStrategy(ABC):
    """
    Abstract base class for reference handler variants.

    A strategy decides how occurrence keys are normalized, which occurrences
    count as definitions, and how a defined entry is rendered for the
    references or glossary page. The collator owns all bookkeeping.
    """

    #: Short handler name used in log messages
    name: str = "reference"

    #: Template id prefix ("references" or "glossary")
    template_prefix: str = "references"

    @abstractmethod
    def make_key(self, key: Any, attrs: Mapping[str, Any]) -> str:
        """
        Build the collation key for an occurrence.

        Args:
            key: Caller-supplied key (id or term), may be empty
            attrs: Occurrence attributes

        Returns:
            Normalized key

        Raises:
            MissingReferenceIdError: If no key can be determined
        """
        pass

    @abstractmethod
    def is_definition(self, attrs: Mapping[str, Any]) -> bool:
        """True if an occurrence with these attributes defines its key."""
        pass

    def accepts_definition(self, attrs: Mapping[str, Any]) -> bool:
        """
        Check that a definition carries usable data.

        Default implementation accepts every definition.
        """
        return True

    @abstractmethod
    def render_text(self, entry: ReferenceEntry, renderer: TemplateRenderer) -> str:
        """
        Render the page text for a defined entry.

        Args:
            entry: Collated entry with a definition
            renderer: Template renderer

        Returns:
            Formatted entry text
        """
        pass
