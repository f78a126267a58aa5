"""Resource inclusion/exclusion filtering."""

import logging
from typing import Any, Iterable, Mapping, Optional, Union

from courseproc.models import FilterSet, ResourceFilterSpec
from courseproc.models.filter_spec import FilterData, split_filter_names

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

Resource = Union[ResourceFilterSpec, Mapping[str, Any], None]


def _any_selected(entries: Iterable[Any], selected: FilterSet) -> bool:
    """True if any string entry, lowercased, is in the selected set."""
    for entry in entries:
        # Structured data can turn up here from metadata parsing; skip it
        if not isinstance(entry, str):
            continue
        if entry.lower() in selected.names:
            return True
    return False


def should_include(resource: Resource, selected: FilterSet) -> bool:
    """
    Decide whether a resource belongs in a build with the given filters.

    Rules, in precedence order:
    1. Resources with no filters are always included.
    2. With no filters selected, resources without includes are included.
    3. A matching exclude removes the resource, even if an include matches.
    4. Resources with no includes are included.
    5. A matching include keeps the resource.
    6. Anything else (includes declared, none selected) is excluded.

    Args:
        resource: ResourceFilterSpec or raw metadata fragment
        selected: Filters selected for this build

    Returns:
        True if the resource should be included
    """
    if not isinstance(resource, ResourceFilterSpec):
        resource = ResourceFilterSpec.from_metadata(resource)

    if not resource.has_filters:
        return True

    if not selected and not resource.includes:
        return True

    if _any_selected(resource.excludes, selected):
        return False

    if not resource.includes:
        return True

    return _any_selected(resource.includes, selected)


class Filter:
    """
    Filter engine for one course build.

    Holds the user's selected filters and applies the inclusion rules to
    resources. Immutable after construction, so one instance can be shared
    between traversal workers.
    """

    def __init__(self, filterdata: FilterData = None):
        """
        Initialize the filter engine.

        Args:
            filterdata: Comma-separated filter names, a sequence of such
                        strings, or None/"" when no filtering is needed
        """
        self._selected = FilterSet.from_spec(filterdata)

        if self._selected:
            logger.info(f"Filter initialized with filters: {', '.join(sorted(self._selected.names))}")
        else:
            logger.info("Filter initialized with no filters selected")

    @property
    def selected(self) -> FilterSet:
        """The normalized set of selected filters."""
        return self._selected

    def should_include(self, resource: Resource, selected: Optional[FilterSet] = None) -> bool:
        """
        Determine whether a resource should be included in the build.

        Args:
            resource: ResourceFilterSpec or metadata fragment
            selected: Override for the selected filters (default: this
                      engine's filters)

        Returns:
            True if the resource should be included, False otherwise
        """
        return should_include(resource, self._selected if selected is None else selected)

    def include_resource(self, resource: Resource, selected: Optional[FilterSet] = None) -> bool:
        """Alias for should_include(), for readability at call sites."""
        return self.should_include(resource, selected)

    def exclude_resource(self, resource: Resource, selected: Optional[FilterSet] = None) -> bool:
        """True if the resource should *not* be included; inverse of include_resource()."""
        return not self.should_include(resource, selected)

    def matches_inline_filter(
        self,
        include_csv: Any = None,
        exclude_csv: Any = None,
        selected: Optional[FilterSet] = None
    ) -> bool:
        """
        Apply the inclusion rules to inline comma-separated filter strings.

        Used for theme include blocks, where filters are given as attributes
        rather than metadata lists.

        Args:
            include_csv: Comma-separated include filters, or None
            exclude_csv: Comma-separated exclude filters, or None
            selected: Override for the selected filters

        Returns:
            True if the block should be included
        """
        spec = ResourceFilterSpec(
            includes=split_filter_names(include_csv),
            excludes=split_filter_names(exclude_csv),
        )
        return self.should_include(spec, selected)

    def __repr__(self) -> str:
        return f"Filter(selected={sorted(self._selected.names)})"
