"""Regex-based scanner for glossary and citation markup in step HTML."""

import re
from typing import Dict, List, Pattern

from courseproc.models import OccurrenceKind
from courseproc.extraction.base_scanner import (
    Annotation,
    BaseAnnotationScanner,
    CITATION,
    GLOSSARY,
)


class MarkupScanner(BaseAnnotationScanner):
    """
    Find glossary and citation markers in converted step content.

    Recognized markup:
        [glossary term="Term"]definition[/glossary]   glossary definition
        [glossary term="Term"/]                       glossary reference
        [ref id="x" type="book" author="..."/]        citation (definition if typed)
    """

    DEFAULT_PATTERNS: Dict[str, str] = {
        "title": r"<title>\s*(.*?)\s*</title>",
        "glossary_definition": r'\[glossary\s+term\s*=\s*"([^"]+?)"\s*\](.*?)\[/glossary\]',
        "glossary_reference": r'\[glossary\s+term\s*=\s*"([^"]+?)"\s*/\s*\]',
        "citation": r"\[ref\s+(.*?)\s*/?\s*\]",
        "attribute": r'(\w+)\s*=\s*"([^"]*)"',
    }

    def __init__(self, patterns: Dict[str, str] = None):
        """
        Initialize markup scanner.

        Args:
            patterns: Pattern overrides {name: regex}, merged over DEFAULT_PATTERNS
        """
        pattern_dict = dict(self.DEFAULT_PATTERNS)
        if patterns:
            pattern_dict.update(patterns)

        self.patterns: Dict[str, Pattern] = {}
        for name, pattern_str in pattern_dict.items():
            try:
                self.patterns[name] = re.compile(pattern_str, re.IGNORECASE | re.DOTALL)
            except re.error as e:
                raise ValueError(f"Invalid regex pattern for '{name}': {e}")

    def extract_title(self, content: str) -> str:
        match = self.patterns["title"].search(content)
        return match.group(1) if match else ""

    def scan(self, content: str) -> List[Annotation]:
        """
        Extract glossary and citation annotations.

        Glossary definitions come first, then glossary references, then
        citations, each group in document order.

        Args:
            content: Step body

        Returns:
            List of Annotation objects
        """
        annotations: List[Annotation] = []

        for match in self.patterns["glossary_definition"].finditer(content):
            term, definition = match.group(1), match.group(2)
            annotations.append(Annotation(
                handler=GLOSSARY,
                key=term,
                kind=OccurrenceKind.DEFINITION if definition.strip() else OccurrenceKind.REFERENCE,
                attrs={"term": term, "definition": definition},
            ))

        for match in self.patterns["glossary_reference"].finditer(content):
            term = match.group(1)
            annotations.append(Annotation(
                handler=GLOSSARY,
                key=term,
                kind=OccurrenceKind.REFERENCE,
                attrs={"term": term},
            ))

        for match in self.patterns["citation"].finditer(content):
            attrs = self.parse_attributes(match.group(1))
            annotations.append(Annotation(
                handler=CITATION,
                key=attrs.get("id"),
                attrs=attrs,
            ))

        return annotations

    def parse_attributes(self, text: str) -> Dict[str, str]:
        """
        Parse name="value" pairs from a tag body.

        Args:
            text: Tag contents after the tag name

        Returns:
            Dictionary of {lowercased name: value}
        """
        return {
            name.lower(): value
            for name, value in self.patterns["attribute"].findall(text)
        }
