"""Course build driver: filtering and reference collation over a course tree."""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from tqdm import tqdm

from courseproc.config import BuildConfig, load_config
from courseproc.exceptions import CourseProcessorError
from courseproc.extraction import Annotation, BaseAnnotationScanner, MarkupScanner, GLOSSARY
from courseproc.filtering import Filter
from courseproc.models import RenderedEntry, ResourceFilterSpec, StepLocation, parse_step_number
from courseproc.references import CitationStrategy, GlossaryStrategy, ReferenceCollator, group_by_initial
from courseproc.templating import TemplateRenderer

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@dataclass
class StepRecord:
    """
    One step visited by the traversal driver.

    Attributes:
        theme: Theme directory name
        module: Module directory name
        filename: Step file name (e.g., "node03.html")
        content: Step body, scanned for annotations if none are supplied
        title: Step title (default: taken from the content's <title>)
        theme_filters: Filters declared on the enclosing theme
        module_filters: Filters declared on the enclosing module
        step_filters: Filters declared on the step itself
        annotations: Pre-extracted annotations, overriding content scanning
    """

    theme: str
    module: str
    filename: str
    content: str = ""
    title: Optional[str] = None
    theme_filters: ResourceFilterSpec = field(default_factory=ResourceFilterSpec)
    module_filters: ResourceFilterSpec = field(default_factory=ResourceFilterSpec)
    step_filters: ResourceFilterSpec = field(default_factory=ResourceFilterSpec)
    annotations: Optional[List[Annotation]] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StepRecord":
        """
        Create a StepRecord from loosely-structured traversal data.

        Filter entries may be raw metadata fragments; they are converted to
        ResourceFilterSpec here.

        Raises:
            ValueError: If theme, module or filename is missing
        """
        missing = [name for name in ("theme", "module", "filename") if not data.get(name)]
        if missing:
            raise ValueError(f"Step record missing required fields: {', '.join(missing)}")

        def as_spec(value: Any) -> ResourceFilterSpec:
            if isinstance(value, ResourceFilterSpec):
                return value
            return ResourceFilterSpec.from_metadata(value)

        return cls(
            theme=data["theme"],
            module=data["module"],
            filename=data["filename"],
            content=data.get("content") or "",
            title=data.get("title"),
            theme_filters=as_spec(data.get("theme_filters")),
            module_filters=as_spec(data.get("module_filters")),
            step_filters=as_spec(data.get("step_filters")),
            annotations=data.get("annotations"),
        )


@dataclass
class BuildResult:
    """
    Outcome of a course build.

    Attributes:
        included_steps: Steps that pass filtering, in traversal order
        excluded_steps: Steps removed by filtering, in traversal order
        glossary: Finalized glossary entries
        references: Finalized citation entries
    """

    included_steps: List[StepLocation] = field(default_factory=list)
    excluded_steps: List[StepLocation] = field(default_factory=list)
    glossary: List[RenderedEntry] = field(default_factory=list)
    references: List[RenderedEntry] = field(default_factory=list)

    @property
    def glossary_pages(self) -> Dict[str, List[RenderedEntry]]:
        """Glossary entries grouped into per-letter pages."""
        return group_by_initial(self.glossary)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "included_steps": [tuple(step) for step in self.included_steps],
            "excluded_steps": [tuple(step) for step in self.excluded_steps],
            "glossary": [entry.to_dict() for entry in self.glossary],
            "references": [entry.to_dict() for entry in self.references],
        }


class CourseBuild:
    """
    Drive filtering and reference collation for one course build.

    The caller supplies steps in traversal order (themes, then modules, then
    steps). Each step is checked against the selected filters; a theme or
    module exclusion also excludes everything inside it. Glossary and
    citation occurrences are collected from every step, including excluded
    ones, since a term may only be defined in filtered-out content.
    """

    def __init__(
        self,
        config: Optional[BuildConfig] = None,
        scanner: Optional[BaseAnnotationScanner] = None,
        **overrides
    ):
        """
        Initialize a course build.

        Args:
            config: Build configuration (default: load_config(**overrides))
            scanner: Annotation scanner (default: MarkupScanner)
            **overrides: Config overrides, applied on top of config if given

        Raises:
            TypeError: If an override names an unknown config field
        """
        if config is None:
            config = load_config(**overrides)
        elif overrides:
            config = replace(config, **overrides)
        self.config = config
        self.filter = Filter(self.config.filters)
        self.scanner = scanner or MarkupScanner()

        renderer = TemplateRenderer(template_dir=self.config.template_dir)
        self.glossary = ReferenceCollator(
            GlossaryStrategy(), renderer, redefines_fatal=self.config.redefines_fatal
        )
        self.references: Optional[ReferenceCollator] = None
        if self.config.reference_style != "none":
            self.references = ReferenceCollator(
                CitationStrategy(), renderer, redefines_fatal=self.config.redefines_fatal
            )

        logger.info(
            f"CourseBuild initialized (filters={self.filter.selected!r}, "
            f"references={self.config.reference_style})"
        )

    def is_excluded(self, step: StepRecord) -> bool:
        """True if the step, its module, or its theme is filtered out."""
        return (
            self.filter.exclude_resource(step.theme_filters)
            or self.filter.exclude_resource(step.module_filters)
            or self.filter.exclude_resource(step.step_filters)
        )

    def process_step(self, step: StepRecord) -> Tuple[StepLocation, bool]:
        """
        Filter one step and record its glossary and citation occurrences.

        Args:
            step: Step to process

        Returns:
            (location, excluded) for the step

        Raises:
            MalformedLocationError: If the step file name has no step number
            MissingReferenceIdError: If a citation has no id
        """
        title = step.title if step.title is not None else self.scanner.extract_title(step.content)
        location = StepLocation(step.theme, step.module, parse_step_number(step.filename), title)

        excluded = self.is_excluded(step)
        if excluded:
            logger.info(f"Step '{title}' ({step.theme}/{step.module}/{step.filename}) excluded by filter rules.")

        annotations = step.annotations if step.annotations is not None else self.scanner.scan(step.content)
        store_backref = not excluded or self.config.collect_excluded

        for annotation in annotations:
            collator = self.glossary if annotation.handler == GLOSSARY else self.references
            if collator is None:
                logger.debug(f"No reference handler, ignoring citation in {location.describe()}")
                continue

            collator.record_occurrence(
                annotation.key,
                annotation.kind,
                annotation.attrs,
                (step.theme, step.module, step.filename),
                title,
                store_backref=store_backref,
            )

        return location, excluded

    def run(self, steps: Iterable[Any]) -> BuildResult:
        """
        Process every step and finalize the glossary and references.

        Args:
            steps: StepRecords (or dicts accepted by StepRecord.from_dict)
                   in traversal order

        Returns:
            BuildResult
        """
        records = [s if isinstance(s, StepRecord) else StepRecord.from_dict(s) for s in steps]
        result = BuildResult()

        for step in tqdm(records, desc="Processing steps", disable=not self.config.show_progress):
            try:
                location, excluded = self.process_step(step)
            except CourseProcessorError as e:
                logger.error(f"Build failed in {step.theme}/{step.module}/{step.filename}: {e}")
                raise

            if excluded:
                result.excluded_steps.append(location)
            else:
                result.included_steps.append(location)

        result.glossary = self.glossary.finalize()
        if self.references is not None:
            result.references = self.references.finalize()

        logger.info(
            f"Build complete: {len(result.included_steps)} steps included, "
            f"{len(result.excluded_steps)} excluded, {len(result.glossary)} glossary terms, "
            f"{len(result.references)} references"
        )
        return result
