"""Reference models: occurrence locations, collated entries, rendered output."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional


class OccurrenceKind(str, Enum):
    """Whether an occurrence defines a key or merely refers to it."""

    DEFINITION = "definition"
    REFERENCE = "reference"


class StepLocation(NamedTuple):
    """
    A place in the course tree where a key was seen.

    Attributes:
        theme: Theme directory name
        module: Module directory name
        step: Step number (parsed from the step file name)
        title: Human-readable step title
    """

    theme: str
    module: str
    step: int
    title: str = ""

    def describe(self) -> str:
        """Location in "theme/module/step - title" form for log messages."""
        text = f"{self.theme}/{self.module}/{self.step}"
        if self.title:
            text += f" - {self.title}"
        return text


@dataclass
class ReferenceDefinition:
    """
    The authoritative occurrence of a key.

    Attributes:
        attrs: Citation metadata or glossary term/definition
        location: Where the definition was recorded
    """

    attrs: Dict[str, Any]
    location: StepLocation


@dataclass
class ReferenceEntry:
    """
    Collated state for one reference key.

    Attributes:
        key: Normalized reference key
        definition: First definition seen, if any
        backrefs: Every location the key was seen, in traversal order
    """

    key: str
    definition: Optional[ReferenceDefinition] = None
    backrefs: List[StepLocation] = field(default_factory=list)

    @property
    def is_defined(self) -> bool:
        return self.definition is not None

    def __repr__(self) -> str:
        return f"ReferenceEntry(key={self.key}, defined={self.is_defined}, refs={len(self.backrefs)})"


@dataclass(frozen=True)
class RenderedEntry:
    """
    One finalized entry for the references or glossary page.

    Attributes:
        key: Reference key (also the page anchor)
        text: Formatted citation or glossary entry text ("" if undefined)
        backlinks: Formatted, numbered backlink block
        backrefs: Locations the backlinks point at
        definition: Definition location, or None for dangling keys
    """

    key: str
    text: str
    backlinks: str
    backrefs: tuple = ()
    definition: Optional[StepLocation] = None

    @property
    def is_dangling(self) -> bool:
        return self.definition is None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "key": self.key,
            "text": self.text,
            "backlinks": self.backlinks,
            "backrefs": [tuple(ref) for ref in self.backrefs],
            "definition": tuple(self.definition) if self.definition else None,
        }
