import re

import pytest

from comicscript.services.formatter import (ScriptFormatter, ScriptFormat, LineKind, LineStyle,
                                            blocks_to_text, split_speaker, speaker_label)
from comicscript.services.pdf_export import ScriptPdfExporter


def pdf_page_count(pdf_bytes):
    # Page objects only, "/Type /Pages" is the page tree root
    return len(re.findall(rb"/Type\s*/Page\b", pdf_bytes))


@pytest.fixture
def formatter():
    return ScriptFormatter(standard_indent=4, compact_indent=2)


@pytest.fixture
def scripted_issue(db, service, issue):
    issue.synopsis = "A city without power."
    issue.issue_number = 3
    page = issue.pages[0]
    panel = page.panels[0]
    service.update_panel_details(panel, "Wide shot of the city.")
    service.add_character(panel, "CAPTION", "Gotham, 1939.")
    service.add_character(panel, "BOB (O.S.)", "Help!")
    service.add_character(panel, "SFX", "boom")
    service.add_character(panel, "ALICE", "")
    service.add_character(panel, "Alice", "Who's there?")

    second = service.add_panel(page)
    service.add_character(second, "BOB", "Over here.")
    db.commit()
    return issue


STANDARD_TEXT = """\
THE LONG NIGHT
ISSUE #3
Written by Jane Doe
A city without power.

PAGE 1
PANEL 1
    Wide shot of the city.
    CAPTION: Gotham, 1939.
    1. BOB (O.S.): Help!
    SFX: BOOM
    3. ALICE: Who's there?
PANEL 2
    1. BOB: Over here.
"""

COMPACT_TEXT = """\
THE LONG NIGHT
ISSUE #3
Written by Jane Doe
A city without power.

PAGE 1
PANEL 1
  Wide shot of the city.
  CAPTION: Gotham, 1939.
  BOB (O.S.): Help!
  SFX: BOOM
  ALICE: Who's there?
PANEL 2
  BOB: Over here.
"""


def test_split_speaker():
    assert split_speaker("Bob (O.S.)") == ("Bob", "O.S.")
    assert split_speaker("BOB") == ("BOB", None)
    assert split_speaker("BOB ()") == ("BOB", None)
    assert speaker_label("bob (v.o.)") == "BOB (V.O.):"


def test_standard_render(formatter, scripted_issue):
    blocks = formatter.render_issue(scripted_issue, ScriptFormat.STANDARD)
    assert blocks_to_text(blocks) == STANDARD_TEXT


def test_compact_render(formatter, scripted_issue):
    blocks = formatter.render_issue(scripted_issue, ScriptFormat.COMPACT)
    assert blocks_to_text(blocks) == COMPACT_TEXT


def test_block_structure_and_styles(formatter, scripted_issue):
    title, page = formatter.render_issue(scripted_issue)

    assert title.kind == "title"
    assert [line.kind for line in title.lines] == [
        LineKind.TITLE, LineKind.ISSUE_NUMBER, LineKind.BYLINE, LineKind.SYNOPSIS
    ]
    assert title.lines[-1].style == LineStyle.ITALIC

    assert page.kind == "page" and page.number == 1
    styles = {line.kind: line.style for line in page.lines}
    assert styles[LineKind.CAPTION] == LineStyle.ITALIC_SERIF
    assert styles[LineKind.SFX] == LineStyle.BOLD_MONO


def test_formats_differ_only_in_indent_and_numbering(formatter, scripted_issue):
    standard = formatter.render_issue(scripted_issue, ScriptFormat.STANDARD)
    compact = formatter.render_issue(scripted_issue, ScriptFormat.COMPACT)

    def content(blocks):
        return [[(line.kind, line.label, line.text) for line in block.lines] for block in blocks]

    assert content(standard) == content(compact)


def test_render_is_deterministic(formatter, scripted_issue):
    first = formatter.render_issue(scripted_issue, ScriptFormat.STANDARD)
    second = formatter.render_issue(scripted_issue, ScriptFormat.STANDARD)
    assert first == second
    assert blocks_to_text(first) == blocks_to_text(second)


def test_render_does_not_touch_the_tree(db, formatter, scripted_issue):
    formatter.render_issue(scripted_issue)
    assert not db.dirty
    assert not db.new


def test_moved_dialogue_renders_in_new_order(db, service, formatter, scripted_issue):
    panel = scripted_issue.pages[0].panels[0]
    service.move_character(panel, 4, 0)  # Alice's line to the top
    db.commit()

    dialogue = [line.text for line in formatter.render_issue(scripted_issue)[1].lines
                if line.kind == LineKind.DIALOGUE]
    assert dialogue == ["Who's there?", "Help!", "Over here."]


def test_minimal_issue_renders_without_optional_blocks(db, service, series, formatter):
    bare = service.add_issue(series, "Blank")
    db.commit()

    blocks = formatter.render_issue(bare)
    assert blocks_to_text(blocks) == "BLANK\nISSUE #1\n"


def test_pdf_export_produces_a_document(formatter, scripted_issue):
    scripted_issue.pages[0].panels[0].details = "Café sign — “OPEN”"
    blocks = formatter.render_issue(scripted_issue)

    pdf_bytes = ScriptPdfExporter().export(blocks, title=scripted_issue.title, author="Jane Doe")

    assert pdf_bytes.startswith(b"%PDF-")
    assert pdf_bytes.rstrip().endswith(b"%%EOF")


def test_pdf_export_flows_long_pages(db, service, formatter, scripted_issue):
    page = scripted_issue.pages[0]
    for n in range(40):
        panel = service.add_panel(page)
        service.update_panel_details(panel, f"Panel {n} " + "lots of action " * 20)
    db.commit()

    blocks = formatter.render_issue(scripted_issue)
    title_only = ScriptPdfExporter().export(blocks[:1])
    full = ScriptPdfExporter().export(blocks)

    assert pdf_page_count(title_only) == 1
    # Every block opens a page, and the long script page runs onto more
    assert pdf_page_count(full) > len(blocks)
