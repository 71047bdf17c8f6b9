import pytest

from comicscript.models import Page, Panel, Character
from comicscript.services.commands import (classify_line, current_line, CommandInterpreter,
                                           CommandKind, EditContext)


@pytest.mark.parametrize("line,kind,name", [
    ("page", CommandKind.ADD_PAGE, None),
    ("  PAGE  ", CommandKind.ADD_PAGE, None),
    ("Panel", CommandKind.ADD_PANEL, None),
    ("BOB:", CommandKind.ADD_CHARACTER, "BOB"),
    ("Bob (O.S.):", CommandKind.NONE, None),  # dots are not allowed in a name command
    ("BOB (OS):", CommandKind.ADD_CHARACTER, "BOB (OS)"),
    ("  Mary Jane 2 :", CommandKind.ADD_CHARACTER, "Mary Jane 2"),
    ("just dialogue", CommandKind.NONE, None),
    ("pages", CommandKind.NONE, None),
    ("BOB: hello", CommandKind.NONE, None),
    (":", CommandKind.NONE, None),
    ("   :", CommandKind.NONE, None),
    ("", CommandKind.NONE, None),
])
def test_classify_line(line, kind, name):
    command = classify_line(line)
    assert command.kind == kind
    assert command.name == name


def test_current_line_finds_line_under_cursor():
    text = "first\nsecond\nthird"
    assert current_line(text, 12) == ("second", True)
    assert current_line(text, 8) == ("second", False)
    assert current_line(text, len(text)) == ("third", True)
    assert current_line("", 0) == ("", True)


@pytest.fixture
def interpreter(service):
    return CommandInterpreter(service)


@pytest.fixture
def context(issue):
    page = issue.pages[0]
    return EditContext(issue=issue, page=page, panel=page.panels[0])


def test_page_command_appends_page_and_clears_field(db, interpreter, context, issue):
    result = interpreter.handle_return("page", 4, context)
    db.commit()

    assert result.handled
    assert result.text == ""
    assert isinstance(result.created, Page)
    assert sorted(p.page_number for p in issue.pages) == [1, 2]


def test_panel_command_uses_page_context(db, interpreter, context):
    result = interpreter.handle_return("Some description\npanel", 22, context)
    db.commit()

    assert result.command.kind == CommandKind.ADD_PANEL
    assert isinstance(result.created, Panel)
    assert sorted(p.panel_number for p in context.page.panels) == [1, 2]


def test_name_command_adds_dialogue_element(db, interpreter, context):
    result = interpreter.handle_return("BOB:", 4, context)
    db.commit()

    assert result.handled
    assert isinstance(result.created, Character)
    assert [(c.name, c.dialogue) for c in context.panel.characters] == [("BOB", "")]


def test_plain_line_inserts_newline(db, interpreter, context):
    result = interpreter.handle_return("just dialogue", 13, context)

    assert not result.handled
    assert result.text == "just dialogue\n"
    assert result.cursor == 14
    assert db.query(Character).count() == 0


def test_command_only_fires_at_end_of_line(db, interpreter, context):
    result = interpreter.handle_return("page", 2, context)

    assert not result.handled
    assert result.text == "pa\nge"
    assert db.query(Page).count() == 1


def test_missing_context_falls_through_to_newline(db, interpreter, issue):
    result = interpreter.handle_return("BOB:", 4, EditContext(issue=issue, page=issue.pages[0]))
    assert not result.handled
    assert result.text == "BOB:\n"

    result = interpreter.handle_return("panel", 5, EditContext(issue=issue))
    assert not result.handled
    assert result.text == "panel\n"

    assert db.query(Character).count() == 0
    assert db.query(Panel).count() == 1


@pytest.mark.parametrize("text,cursor,deleted", [
    ("", 0, True),
    ("x", 0, False),
    ("x", 1, False),
    ("", 3, False),
])
def test_backspace_deletes_only_from_empty_field(db, service, interpreter, context, text, cursor, deleted):
    bob = service.add_character(context.panel, "BOB")
    service.add_character(context.panel, "ALICE", "Hi")
    db.commit()

    assert interpreter.handle_backspace(text, cursor, bob) is deleted
    db.commit()

    expected = ["ALICE"] if deleted else ["BOB", "ALICE"]
    assert [c.name for c in service.ordered_characters(context.panel)] == expected


def test_backspace_without_element_is_noop(db, interpreter):
    assert interpreter.handle_backspace("", 0, None) is False
