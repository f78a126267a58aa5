"""Base class for step annotation scanners."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from courseproc.models import OccurrenceKind

GLOSSARY = "glossary"
CITATION = "citation"


@dataclass
class Annotation:
    """
    A glossary or citation occurrence found in step content.

    Attributes:
        handler: Which collator the occurrence belongs to ("glossary" or "citation")
        key: Term text or citation id (None if only present in attrs)
        kind: Definition or reference; None lets the handler decide
        attrs: Occurrence attributes
    """
    handler: str
    key: Optional[str]
    kind: Optional[OccurrenceKind] = None
    attrs: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate handler."""
        if self.handler not in (GLOSSARY, CITATION):
            raise ValueError(f"Unknown annotation handler: {self.handler}")


class BaseAnnotationScanner(ABC):
    """
    Abstract base class for step annotation scanners.

    Scanners must be deterministic: the same content always produces the
    same annotations in the same order.
    """

    @abstractmethod
    def scan(self, content: str) -> List[Annotation]:
        """
        Extract annotations from step content.

        Args:
            content: Step body

        Returns:
            List of Annotation objects
        """
        pass

    def extract_title(self, content: str) -> str:
        """Extract the step title. Default implementation returns ""."""
        return ""
