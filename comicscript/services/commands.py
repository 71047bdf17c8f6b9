"""
Inline script commands.

While a panel description or a line of dialogue is being typed, finishing a
line with one of these keywords edits the script structure instead of
inserting a newline:

    page        -> append a page to the issue
    panel       -> append a panel to the current page
    NAME:       -> add a dialogue element called NAME to the current panel

Backspace pressed in an already empty dialogue field deletes that element.
"""
import enum
import logging
import re
from dataclasses import dataclass
from typing import Optional

from comicscript.models import Issue, Page, Panel, Character
from comicscript.services.script_tree import ScriptTreeService

logger = logging.getLogger(__name__)

NAME_COMMAND = re.compile(r"^([A-Za-z0-9\s()]+):$")


class CommandKind(str, enum.Enum):
    ADD_PAGE = "add_page"
    ADD_PANEL = "add_panel"
    ADD_CHARACTER = "add_character"
    NONE = "none"


@dataclass(frozen=True)
class ScriptCommand:
    kind: CommandKind
    name: Optional[str] = None  # Only set for ADD_CHARACTER


NO_COMMAND = ScriptCommand(CommandKind.NONE)


def classify_line(line: str) -> ScriptCommand:
    """Turn one finished line of text into a structural command (or none)."""
    text = (line or "").strip()
    lowered = text.lower()

    if lowered == "page":
        return ScriptCommand(CommandKind.ADD_PAGE)
    if lowered == "panel":
        return ScriptCommand(CommandKind.ADD_PANEL)

    match = NAME_COMMAND.match(text)
    if match:
        name = match.group(1).strip()
        if name:
            return ScriptCommand(CommandKind.ADD_CHARACTER, name=name)

    return NO_COMMAND


def current_line(text: str, cursor: int):
    """
    Return (line, at_line_end) for the line holding the cursor.
    The cursor is clamped into the text.
    """
    cursor = max(0, min(cursor, len(text)))
    start = text.rfind("\n", 0, cursor) + 1
    end = text.find("\n", cursor)
    if end == -1:
        end = len(text)
    return text[start:end], cursor == end


@dataclass
class EditContext:
    """The nodes surrounding the text field being edited"""
    issue: Optional[Issue] = None
    page: Optional[Page] = None
    panel: Optional[Panel] = None


@dataclass
class ReturnResult:
    """Outcome of pressing return in a script field"""
    command: ScriptCommand
    text: str
    cursor: int
    created: object = None  # The Page, Panel or Character that was added

    @property
    def handled(self) -> bool:
        return self.command.kind != CommandKind.NONE


class CommandInterpreter:
    def __init__(self, service: ScriptTreeService):
        self.service = service

    def _execute(self, command: ScriptCommand, context: EditContext):
        """Run a command. Returns the new node, or None when its context is missing."""
        if command.kind == CommandKind.ADD_PAGE and context.issue is not None:
            return self.service.add_page(context.issue)
        if command.kind == CommandKind.ADD_PANEL and context.page is not None:
            return self.service.add_panel(context.page)
        if command.kind == CommandKind.ADD_CHARACTER and context.panel is not None:
            return self.service.add_character(context.panel, command.name)
        return None

    def handle_return(self, text: str, cursor: int, context: EditContext) -> ReturnResult:
        """
        Handle a newline typed at `cursor`. A recognised command on the line
        being finished runs and clears the field; anything else inserts a
        literal newline.
        """
        text = text or ""
        line, at_line_end = current_line(text, cursor)

        command = classify_line(line) if at_line_end else NO_COMMAND
        if command.kind != CommandKind.NONE:
            created = self._execute(command, context)
            if created is not None:
                logger.debug(f"Inline command {command.kind.value} ran")
                return ReturnResult(command=command, text="", cursor=0, created=created)

        cursor = max(0, min(cursor, len(text)))
        return ReturnResult(
            command=NO_COMMAND,
            text=text[:cursor] + "\n" + text[cursor:],
            cursor=cursor + 1
        )

    def handle_backspace(self, text: str, cursor: int, character: Optional[Character]) -> bool:
        """
        Handle backspace typed in a dialogue field. Only an empty field with
        the cursor at its start removes its element; returns True when it did.
        """
        if character is None or text or cursor != 0:
            return False

        logger.debug(f"Backspace in empty field deletes {character.name}")
        return self.service.delete_character(character)
