"""Test course builds end to end."""

import os
import tempfile
from pathlib import Path

import pytest

from courseproc.config import BuildConfig, load_config
from courseproc.exceptions import MalformedLocationError
from courseproc.extraction import Annotation, MarkupScanner, CITATION, GLOSSARY
from courseproc.models import OccurrenceKind, ResourceFilterSpec
from courseproc.pipeline import CourseBuild, StepRecord
from courseproc.templating import TemplateRenderer


def make_step(filename, title, body, module="Mod1", **filters):
    return StepRecord(
        theme="ThemeA",
        module=module,
        filename=filename,
        content=f"<html><head><title>{title}</title></head><body>{body}</body></html>",
        **filters,
    )


@pytest.fixture
def sample_course():
    """A small course with glossary terms, a citation and a filtered module."""
    return [
        make_step(
            "node01.html", "Intro",
            '[glossary term="Widget"]A small thing.[/glossary] '
            '[ref id="smith01" type="book" author="Smith, John" booktitle="Testing" date="2001"/]',
        ),
        make_step(
            "node02.html", "Details",
            'More on [glossary term="widget"/] as shown in [ref id="smith01"/].',
        ),
        make_step(
            "node01.html", "Advanced",
            'Only for experts: [glossary term="Gadget"/]',
            module="Mod2",
            module_filters=ResourceFilterSpec(includes=("advanced",)),
        ),
    ]


@pytest.fixture
def template_dir():
    """Create a temporary template override directory."""
    with tempfile.TemporaryDirectory() as tmp:
        os.makedirs(os.path.join(tmp, "glossary"))
        with open(os.path.join(tmp, "glossary", "backlink-divider.tem"), "w", encoding="utf-8") as f:
            f.write(" | ")
        yield tmp


def test_build_filters_and_collates(sample_course):
    build = CourseBuild(show_progress=False)
    result = build.run(sample_course)

    assert result.included_steps == [("ThemeA", "Mod1", 1, "Intro"), ("ThemeA", "Mod1", 2, "Details")]
    assert result.excluded_steps == [("ThemeA", "Mod2", 1, "Advanced")]

    # Collection ignores filtering by default
    assert [entry.key for entry in result.glossary] == ["widget", "gadget"]
    widget, gadget = result.glossary
    assert list(widget.backrefs) == [("ThemeA", "Mod1", 1, "Intro"), ("ThemeA", "Mod1", 2, "Details")]
    assert "A small thing." in widget.text
    assert gadget.is_dangling

    assert len(result.references) == 1
    citation = result.references[0]
    assert citation.key == "smith01"
    assert "J. Smith, <i>Testing</i>" in citation.text
    assert len(citation.backrefs) == 2


def test_build_with_selected_filter(sample_course):
    result = CourseBuild(filters="Advanced", show_progress=False).run(sample_course)

    assert len(result.included_steps) == 3
    assert result.excluded_steps == []


def test_excluded_backrefs_not_collected(sample_course):
    result = CourseBuild(collect_excluded=False, show_progress=False).run(sample_course)

    assert [entry.key for entry in result.glossary] == ["widget"]


def test_theme_exclusion_cascades():
    step = make_step(
        "node01.html", "Intro", "",
        theme_filters=ResourceFilterSpec(excludes=("print",)),
        step_filters=ResourceFilterSpec(includes=("print",)),
    )
    build = CourseBuild(filters="print", show_progress=False)

    assert build.is_excluded(step) is True
    assert build.run([step]).excluded_steps == [("ThemeA", "Mod1", 1, "Intro")]


def test_run_accepts_dicts():
    steps = [{
        "theme": "ThemeA",
        "module": "Mod1",
        "filename": "node03.html",
        "title": "Third",
        "step_filters": {"filters": {"include": ["advanced"]}},
        "annotations": [
            Annotation(handler=GLOSSARY, key="Term", kind=OccurrenceKind.DEFINITION,
                       attrs={"term": "Term", "definition": "Meaning"}),
        ],
    }]
    result = CourseBuild(show_progress=False).run(steps)

    assert result.excluded_steps == [("ThemeA", "Mod1", 3, "Third")]
    assert result.glossary[0].definition == ("ThemeA", "Mod1", 3, "Third")


def test_step_record_requires_location():
    with pytest.raises(ValueError, match="filename"):
        StepRecord.from_dict({"theme": "ThemeA", "module": "Mod1"})


def test_malformed_step_stops_build():
    with pytest.raises(MalformedLocationError):
        CourseBuild(show_progress=False).run([make_step("intro.html", "Intro", "")])


def test_citations_ignored_without_reference_handler(sample_course):
    result = CourseBuild(reference_style="none", show_progress=False).run(sample_course)

    assert result.references == []
    assert len(result.glossary) == 2


def test_glossary_pages(sample_course):
    pages = CourseBuild(show_progress=False).run(sample_course).glossary_pages

    assert sorted(pages) == ["g", "w"]
    assert pages["w"][0].key == "widget"


def test_template_dir_overrides_defaults(sample_course, template_dir):
    result = CourseBuild(template_dir=template_dir, show_progress=False).run(sample_course)

    assert " | " in result.glossary[0].backlinks
    # Templates without an override fall back to the defaults
    assert TemplateRenderer(template_dir).load_template("glossary/backlink-divider") == " | "
    assert TemplateRenderer(template_dir).load_template("references/backlink-divider") == ", "


def test_to_dict(sample_course):
    data = CourseBuild(show_progress=False).run(sample_course).to_dict()

    assert data["included_steps"][0] == ("ThemeA", "Mod1", 1, "Intro")
    assert data["glossary"][0]["key"] == "widget"
    assert data["references"][0]["definition"] == ("ThemeA", "Mod1", 1, "Intro")


def test_markup_scanner():
    scanner = MarkupScanner()
    content = (
        "<title> Step Title </title>"
        '[glossary term="Alpha"]First letter.[/glossary]'
        '[glossary term="Beta"/]'
        '[REF id="c1" type="periodical" author="Doe, J."/]'
        '[ref id="c2"]'
    )

    assert scanner.extract_title(content) == "Step Title"

    annotations = scanner.scan(content)
    assert [(a.handler, a.key, a.kind) for a in annotations] == [
        (GLOSSARY, "Alpha", OccurrenceKind.DEFINITION),
        (GLOSSARY, "Beta", OccurrenceKind.REFERENCE),
        (CITATION, "c1", None),
        (CITATION, "c2", None),
    ]
    assert annotations[2].attrs == {"id": "c1", "type": "periodical", "author": "Doe, J."}


def test_annotation_rejects_unknown_handler():
    with pytest.raises(ValueError):
        Annotation(handler="footnote", key="x")


def test_renderer_leaves_unknown_markers():
    renderer = TemplateRenderer(templates={"custom": "***a*** and ***b***"})
    assert renderer.render("custom", {"a": 1}) == "1 and ***b***"

    with pytest.raises(KeyError):
        renderer.render("missing")


def test_load_config_env_and_overrides(monkeypatch):
    monkeypatch.setenv("COURSEPROC_FILTERS", "Advanced, basic")
    monkeypatch.setenv("COURSEPROC_REDEFINES_FATAL", "true")
    monkeypatch.setenv("COURSEPROC_SHOW_PROGRESS", "false")

    cfg = load_config(collect_excluded=False)
    assert cfg.filters == "Advanced, basic"
    assert cfg.redefines_fatal is True
    assert cfg.show_progress is False
    assert cfg.collect_excluded is False

    build = CourseBuild(cfg)
    assert build.filter.selected.names == frozenset({"advanced", "basic"})


def test_load_config_rejects_bad_values():
    with pytest.raises(TypeError):
        load_config(no_such_option=True)
    with pytest.raises(ValueError):
        load_config(reference_style="apa")


def test_overrides_apply_on_top_of_config():
    """Keyword overrides given alongside a config replace its fields."""
    cfg = BuildConfig(filters="advanced", show_progress=True)
    build = CourseBuild(cfg, show_progress=False, filters="print")

    assert build.config.show_progress is False
    assert build.filter.selected.names == frozenset({"print"})
    assert cfg.show_progress is True
    assert cfg.filters == "advanced"

    with pytest.raises(TypeError):
        CourseBuild(cfg, no_such_option=True)
    with pytest.raises(ValueError):
        CourseBuild(cfg, reference_style="apa")
