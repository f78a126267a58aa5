"""Citation and glossary reference collation."""

from .base_strategy import ReferenceKeyStrategy
from .citation import CitationStrategy
from .glossary import GlossaryStrategy, group_by_initial, initial_bucket
from .collator import ReferenceCollator, CollatorState
from .names import convert_name, convert_names, join_names, split_names

__all__ = [
    "ReferenceKeyStrategy",
    "CitationStrategy",
    "GlossaryStrategy",
    "group_by_initial",
    "initial_bucket",
    "ReferenceCollator",
    "CollatorState",
    "convert_name",
    "convert_names",
    "join_names",
    "split_names",
]
