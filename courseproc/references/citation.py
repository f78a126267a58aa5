"""IEEE-style citation handling."""

import logging
import re
from typing import Any, Dict, Mapping

from courseproc.exceptions import MissingReferenceIdError
from courseproc.models import ReferenceEntry
from courseproc.templating import TemplateRenderer
from courseproc.references.base_strategy import ReferenceKeyStrategy
from courseproc.references.names import convert_names

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class CitationStrategy(ReferenceKeyStrategy):
    """
    Citation handler producing IEEE-style reference entries.

    Keys are author-assigned ids, used verbatim. An occurrence with a "type"
    attribute is a definition; the recognized attributes are:

        id            - course-wide citation id [all]
        type          - 'book', 'book article' or 'periodical' [definitions]
        author        - primary author, 'Surname, I. I.[, Jr.]'
        coauthors     - further authors in the same format (alias: authors)
        editor        - primary editor, coeditors - further editors
        translator    - primary translator, cotranslators - further translators
        booktitle     - book name [book, book article]
        edition       - edition [book]
        articletitle  - article title [book article, periodical]
        journalname   - journal name [periodical]
        volume, issue - periodical volume/issue
        pages         - page range, without 'pp'
        location      - publisher location
        publisher     - publisher name
        date          - 'YYYY[, Month DD]'
    """

    name = "citation"
    template_prefix = "references"

    TYPE_TEMPLATES: Dict[str, str] = {
        "book": "references/entry-book",
        "book article": "references/entry-bookarticle",
        "periodical": "references/entry-periodical",
    }

    def make_key(self, key: Any, attrs: Mapping[str, Any]) -> str:
        key = key or attrs.get("id")
        if not key:
            raise MissingReferenceIdError("Malformed reference: no id provided")
        return str(key)

    def is_definition(self, attrs: Mapping[str, Any]) -> bool:
        return bool(attrs.get("type"))

    def accepts_definition(self, attrs: Mapping[str, Any]) -> bool:
        return attrs.get("type") in self.TYPE_TEMPLATES

    def render_text(self, entry: ReferenceEntry, renderer: TemplateRenderer) -> str:
        refdata = entry.definition.attrs

        authors = ""
        if refdata.get("author"):
            coauthors = refdata.get("coauthors") or refdata.get("authors")
            authors = convert_names(refdata["author"], coauthors) + ", "
        else:
            logger.debug(f"Citation '{entry.key}' has no author")

        editors = ""
        if refdata.get("editor"):
            editors = convert_names(refdata["editor"], refdata.get("coeditors"))
            editors += ", Eds." if refdata.get("coeditors") else ", Ed."

        translators = ""
        if refdata.get("translator"):
            translators = convert_names(refdata["translator"], refdata.get("cotranslators")) + " Trans."

        edtrans = ", ".join(part for part in (editors, translators) if part)

        booktitle = refdata.get("booktitle") or ""
        if refdata.get("edition"):
            booktitle += f", {refdata['edition']}"

        return renderer.render(self.TYPE_TEMPLATES[refdata["type"]], {
            "id": entry.key,
            "authors": authors,
            "booktitle": booktitle,
            "articletitle": refdata.get("articletitle") or "",
            "journalname": refdata.get("journalname") or "",
            "volume": f"{refdata['volume']}, " if refdata.get("volume") else "",
            "issue": f"{refdata['issue']}, " if refdata.get("issue") else "",
            "pages": refdata.get("pages") or "",
            "edtrans": f", {edtrans}" if edtrans else "",
            "location": refdata.get("location") or "n.p.",
            "publisher": refdata.get("publisher") or "n.p.",
            "date": refdata.get("date") or "n.d.",
        })

    def convert_reference(self, ref_id: str, renderer: TemplateRenderer) -> str:
        """
        Build the inline link that replaces a citation tag in step text.

        Args:
            ref_id: Citation id
            renderer: Template renderer

        Returns:
            Inline citation link, e.g. '[<a href="../../references.html#x">x</a>]'
        """
        return renderer.render("references/inline-link", {"id": ref_id})

    @staticmethod
    def compress_references(body: str) -> str:
        """
        Merge runs of adjacent inline citation blocks, so [1][2][3] becomes [1,2,3].

        Args:
            body: Step body containing converted citation links

        Returns:
            Body with adjacent citation blocks merged
        """
        body = re.sub(r"</a>\]\s+\[<a href=", "</a>][<a href=", body)
        return re.sub(
            r'(<a href="\.\./\.\./references\.html#[^"]*?">.*?</a>)\]\[',
            r"\1,",
            body,
        )
