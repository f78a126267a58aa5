"""Step annotation extraction module."""

from .base_scanner import Annotation, BaseAnnotationScanner, CITATION, GLOSSARY
from .markup_scanner import MarkupScanner

__all__ = [
    "Annotation",
    "BaseAnnotationScanner",
    "MarkupScanner",
    "CITATION",
    "GLOSSARY",
]
