"""Template rendering for reference and glossary page fragments."""

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

MARKER = "***{name}***"

DEFAULT_TEMPLATES: Dict[str, str] = {
    # Citation (IEEE) backlinks
    "references/backlink-entry": '<a href="***link***" title="***title***">***text***</a>',
    "references/backlink-divider": ", ",
    "references/backlink-block": '<span class="backlinks">[***links***]</span>',

    # Citation entries, one per supported reference type
    "references/entry-book": (
        '<li id="***id***">***authors***<i>***booktitle***</i>***edtrans***. '
        "***location***: ***publisher***, ***date***.</li>"
    ),
    "references/entry-bookarticle": (
        '<li id="***id***">***authors***"***articletitle***," in '
        "<i>***booktitle***</i>***edtrans***. ***location***: ***publisher***, "
        "***date***, pp. ***pages***.</li>"
    ),
    "references/entry-periodical": (
        '<li id="***id***">***authors***"***articletitle***," '
        "<i>***journalname***</i>, ***volume******issue***pp. ***pages***, ***date***.</li>"
    ),

    # Inline citation links
    "references/inline-link": '[<a href="../../references.html#***id***">***id***</a>]',

    # Glossary
    "glossary/backlink-entry": '<a href="***link***" title="***title***">***text***</a>',
    "glossary/backlink-divider": ", ",
    "glossary/backlink-block": '<span class="backlinks">***links***</span>',
    "glossary/entry": '<dt id="***termname***">***term***</dt><dd>***definition***</dd>',

    # Inline glossary links, one page per initial
    "glossary/inline-link": '<a href="../../glossary/***letter***.html#***term***">***name***</a>',
}


class TemplateRenderer:
    """
    Render named templates by marker substitution.

    Templates contain ***name*** markers. Rendering replaces every occurrence
    of each supplied marker and leaves markers without a value untouched.
    Built-in defaults exist for every template id; a template directory can
    override any of them with a <id>.tem file.
    """

    def __init__(
        self,
        template_dir: Optional[str] = None,
        templates: Optional[Mapping[str, str]] = None
    ):
        """
        Initialize the renderer.

        Args:
            template_dir: Directory of <id>.tem override files
            templates: Extra in-memory templates, overriding the defaults
        """
        self.template_dir = Path(template_dir) if template_dir else None
        self._templates: Dict[str, str] = dict(DEFAULT_TEMPLATES)
        if templates:
            self._templates.update(templates)
        self._cache: Dict[str, str] = {}

    def load_template(self, template_id: str) -> str:
        """
        Load the raw text of a template.

        Args:
            template_id: Template id (e.g., "references/backlink-entry")

        Returns:
            Template text

        Raises:
            KeyError: If no template with that id exists
        """
        if template_id in self._cache:
            return self._cache[template_id]

        text = None
        if self.template_dir is not None:
            path = self.template_dir / f"{template_id}.tem"
            if path.is_file():
                logger.debug(f"Loading template override {path}")
                text = path.read_text(encoding="utf-8")

        if text is None:
            if template_id not in self._templates:
                raise KeyError(f"Unknown template: {template_id}")
            text = self._templates[template_id]

        self._cache[template_id] = text
        return text

    def render(self, template_id: str, values: Optional[Mapping[str, Any]] = None) -> str:
        """
        Render a template with the given marker values.

        Args:
            template_id: Template id
            values: Mapping of marker name (without asterisks) to value

        Returns:
            Rendered text
        """
        return substitute(self.load_template(template_id), values)


def substitute(text: str, values: Optional[Mapping[str, Any]] = None) -> str:
    """
    Replace ***name*** markers in text.

    Args:
        text: Template text
        values: Mapping of marker name to value; None values become ""

    Returns:
        Text with every supplied marker replaced
    """
    for name, value in (values or {}).items():
        text = text.replace(MARKER.format(name=name), "" if value is None else str(value))
    return text
