"""Exceptions raised by the course processor core."""


class CourseProcessorError(Exception):
    """Base class for course processor errors."""


class MalformedLocationError(CourseProcessorError, ValueError):
    """A step filename did not contain a step number."""


class MissingReferenceIdError(CourseProcessorError, ValueError):
    """A citation occurrence was recorded without an id."""


class RedefinitionError(CourseProcessorError):
    """A reference key was defined twice and redefinitions are fatal."""


class CollatorFinalizedError(CourseProcessorError, RuntimeError):
    """An occurrence was recorded after the collator was finalized."""
