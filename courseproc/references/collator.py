"""Reference collation across a course tree traversal."""

import logging
import threading
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from courseproc.exceptions import CollatorFinalizedError, RedefinitionError
from courseproc.models import (
    OccurrenceKind,
    ReferenceDefinition,
    ReferenceEntry,
    RenderedEntry,
    StepLocation,
    build_step_link,
    parse_step_number,
)
from courseproc.templating import TemplateRenderer
from courseproc.references.base_strategy import ReferenceKeyStrategy

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class CollatorState(str, Enum):
    NOT_STARTED = "not_started"
    ACCUMULATING = "accumulating"
    FINALIZED = "finalized"


class ReferenceCollator:
    """
    Accumulate citation or glossary occurrences for one course build.

    Occurrences are recorded in traversal order. The first definition of a
    key wins; later definitions are reported and their attributes dropped,
    but their locations still count as backreferences. Once the traversal is
    complete, finalize() renders one entry per key, in the order keys were
    first seen.

    One collator instance belongs to one build. Recording is serialized so
    backreference order always matches call order.
    """

    def __init__(
        self,
        strategy: ReferenceKeyStrategy,
        renderer: Optional[TemplateRenderer] = None,
        redefines_fatal: bool = False
    ):
        """
        Initialize the collator.

        Args:
            strategy: Key normalization and rendering strategy
            renderer: Template renderer (default: built-in templates)
            redefines_fatal: Raise RedefinitionError on redefinition instead
                             of logging a warning
        """
        self.strategy = strategy
        self.renderer = renderer or TemplateRenderer()
        self.redefines_fatal = redefines_fatal

        self._entries: Dict[str, ReferenceEntry] = {}
        self._rendered: Optional[List[RenderedEntry]] = None
        self._state = CollatorState.NOT_STARTED
        self._lock = threading.Lock()

        logger.debug(f"ReferenceCollator initialized ({strategy.name})")

    @property
    def state(self) -> CollatorState:
        return self._state

    @property
    def entries(self) -> List[ReferenceEntry]:
        """Collated entries in first-seen order."""
        return list(self._entries.values())

    @property
    def dangling_keys(self) -> List[str]:
        """Keys that were referenced but never defined."""
        return [key for key, entry in self._entries.items() if not entry.is_defined]

    def get(self, key: str) -> Optional[ReferenceEntry]:
        return self._entries.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def record_occurrence(
        self,
        key: Any,
        kind: Union[OccurrenceKind, str, None],
        attrs: Optional[Mapping[str, Any]],
        location: Sequence[str],
        title: str = "",
        store_backref: bool = True
    ) -> Optional[ReferenceEntry]:
        """
        Record a definition of, or reference to, a key.

        Args:
            key: Citation id or glossary term (may be None if attrs carry it)
            kind: OccurrenceKind, its string value, or None to let the
                  strategy decide from the attributes
            attrs: Occurrence attributes (citation metadata, term/definition)
            location: (theme, module, step_filename)
            title: Step title, used in backlinks and log messages
            store_backref: If False, a definition is still stored but the
                           location is not added to the backreferences, and
                           a plain reference is ignored

        Returns:
            The updated ReferenceEntry, or None if the occurrence was ignored

        Raises:
            MalformedLocationError: If the step file name has no step number
            MissingReferenceIdError: If no key can be determined
            RedefinitionError: On redefinition when redefines_fatal is set
            CollatorFinalizedError: If called after finalize()
        """
        attrs = attrs or {}
        theme, module, step_filename = location
        step_location = StepLocation(theme, module, parse_step_number(step_filename), title)
        norm_key = self.strategy.make_key(key, attrs)

        if kind is None:
            is_definition = self.strategy.is_definition(attrs)
        else:
            is_definition = OccurrenceKind(kind) is OccurrenceKind.DEFINITION

        logger.debug(f"Setting {self.strategy.name} entry {norm_key} in {step_location.describe()}")

        with self._lock:
            if self._state is CollatorState.FINALIZED:
                raise CollatorFinalizedError(
                    f"Cannot record '{norm_key}': {self.strategy.name} collator already finalized"
                )
            self._state = CollatorState.ACCUMULATING

            if is_definition:
                if not self.strategy.accepts_definition(attrs):
                    logger.warning(
                        f"Unsupported {self.strategy.name} type '{attrs.get('type')}' "
                        f"for {norm_key} in {step_location.describe()}"
                    )
                    return None
                entry = self._entry(norm_key)
                self._define(entry, attrs, step_location)
            else:
                if not store_backref:
                    return None
                entry = self._entry(norm_key)

            if store_backref:
                entry.backrefs.append(step_location)

        return entry

    def _entry(self, key: str) -> ReferenceEntry:
        entry = self._entries.get(key)
        if entry is None:
            entry = self._entries[key] = ReferenceEntry(key=key)
        return entry

    def _define(self, entry: ReferenceEntry, attrs: Mapping[str, Any], location: StepLocation) -> None:
        """Store a definition, keeping the first one if the key is already defined."""
        if entry.definition is None:
            entry.definition = ReferenceDefinition(attrs=dict(attrs), location=location)
            return

        message = (
            f"Redefinition of {self.strategy.name} {entry.key} in {location.describe()}, "
            f"originally set in {entry.definition.location.describe()}"
        )
        if self.redefines_fatal:
            raise RedefinitionError(message)
        logger.warning(f"Ignoring {message}")

    def finalize(self) -> List[RenderedEntry]:
        """
        Render every collated entry for the references/glossary page.

        Dangling keys (used but never defined) are logged as errors and
        rendered with empty text. Entries without any backreferences (defined
        only in excluded content) are left out. Calling finalize() again
        returns the same entries.

        Returns:
            RenderedEntry list in first-seen key order
        """
        with self._lock:
            if self._rendered is not None:
                return list(self._rendered)

            rendered = []
            for entry in self._entries.values():
                if not entry.backrefs:
                    logger.debug(f"Skipping {self.strategy.name} {entry.key}: no references in generated content")
                    continue

                if entry.is_defined:
                    text = self.strategy.render_text(entry, self.renderer)
                else:
                    logger.error(
                        f"Use of {self.strategy.name} {entry.key} with no definition, "
                        f"first used in {entry.backrefs[0].describe()}"
                    )
                    text = ""

                rendered.append(RenderedEntry(
                    key=entry.key,
                    text=text,
                    backlinks=self._render_backlinks(entry),
                    backrefs=tuple(entry.backrefs),
                    definition=entry.definition.location if entry.is_defined else None,
                ))

            self._rendered = rendered
            self._state = CollatorState.FINALIZED

        logger.info(f"Finalized {len(rendered)} {self.strategy.name} entries")
        return list(rendered)

    def _render_backlinks(self, entry: ReferenceEntry) -> str:
        """Build the numbered block of links back to each use of the entry."""
        if not entry.backrefs:
            return ""

        prefix = self.strategy.template_prefix
        links = ""
        for i, ref in enumerate(entry.backrefs):
            if i > 0:
                links += self.renderer.render(f"{prefix}/backlink-divider")
            links += self.renderer.render(f"{prefix}/backlink-entry", {
                "link": build_step_link(ref.theme, ref.module, ref.step, entry.key),
                "title": ref.title,
                "text": i + 1,
            })

        return self.renderer.render(f"{prefix}/backlink-block", {"links": links})
