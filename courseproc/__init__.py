"""Course processor core: resource filtering and reference collation."""

from courseproc.filtering import Filter
from courseproc.references import ReferenceCollator
from courseproc.pipeline import CourseBuild, BuildResult

__all__ = [
    "Filter",
    "ReferenceCollator",
    "CourseBuild",
    "BuildResult",
]
