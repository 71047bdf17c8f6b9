import enum
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from comicscript.config import settings
from comicscript.models import Issue, Page, Panel, Character

# "BOB (O.S.)" -> name "BOB", modifier "O.S."
SPEAKER_MODIFIER = re.compile(r"^(?P<name>.*?)\s*\((?P<modifier>[^()]*)\)\s*$")


class ScriptFormat(str, enum.Enum):
    STANDARD = "standard"
    COMPACT = "compact"


class LineKind(str, enum.Enum):
    TITLE = "title"
    ISSUE_NUMBER = "issue_number"
    BYLINE = "byline"
    SYNOPSIS = "synopsis"
    PAGE_HEADER = "page_header"
    PANEL_HEADER = "panel_header"
    DESCRIPTION = "description"
    CAPTION = "caption"
    SFX = "sfx"
    DIALOGUE = "dialogue"


class LineStyle(str, enum.Enum):
    HEADING = "heading"
    BODY = "body"
    ITALIC = "italic"
    ITALIC_SERIF = "italic_serif"
    BOLD_MONO = "bold_mono"


@dataclass(frozen=True)
class ScriptLine:
    kind: LineKind
    text: str
    style: LineStyle = LineStyle.BODY
    label: str = ""
    number: Optional[int] = None
    indent: int = 0

    def render(self) -> str:
        prefix = f"{self.number}. " if self.number is not None else ""
        head = f"{prefix}{self.label}"
        body = f"{head} {self.text}" if head and self.text else head or self.text
        return " " * self.indent + body


@dataclass(frozen=True)
class ScriptBlock:
    """One unit of output: the title page, or one script page"""
    kind: str  # "title" or "page"
    lines: Tuple[ScriptLine, ...]
    number: Optional[int] = None


def split_speaker(name: str) -> Tuple[str, Optional[str]]:
    """Split a trailing parenthetical modifier off a speaker name."""
    name = (name or "").strip()
    match = SPEAKER_MODIFIER.match(name)
    if match and match.group("name").strip():
        modifier = match.group("modifier").strip()
        return match.group("name").strip(), modifier or None
    return name, None


def speaker_label(name: str) -> str:
    speaker, modifier = split_speaker(name)
    if modifier:
        return f"{speaker.upper()} ({modifier.upper()}):"
    return f"{speaker.upper()}:"


class ScriptFormatter:
    """
    Walks an issue into title and page blocks.
    Pure projection, the tree is never modified.
    """

    def __init__(self, standard_indent: int = None, compact_indent: int = None):
        self.indents = {
            ScriptFormat.STANDARD: settings.standard_indent if standard_indent is None else standard_indent,
            ScriptFormat.COMPACT: settings.compact_indent if compact_indent is None else compact_indent,
        }

    def render_issue(self, issue: Issue, fmt: ScriptFormat = ScriptFormat.STANDARD) -> List[ScriptBlock]:
        fmt = ScriptFormat(fmt)
        blocks = [self._title_block(issue)]
        for page in sorted(issue.pages, key=lambda p: p.page_number):
            blocks.append(self._page_block(page, fmt))
        return blocks

    def _title_block(self, issue: Issue) -> ScriptBlock:
        lines = [
            ScriptLine(LineKind.TITLE, (issue.title or "").upper(), LineStyle.HEADING),
            ScriptLine(LineKind.ISSUE_NUMBER, f"ISSUE #{issue.issue_number}", LineStyle.HEADING),
        ]
        if issue.writer and issue.writer.strip():
            lines.append(ScriptLine(LineKind.BYLINE, f"Written by {issue.writer.strip()}"))
        if issue.synopsis and issue.synopsis.strip():
            lines.append(ScriptLine(LineKind.SYNOPSIS, issue.synopsis.strip(), LineStyle.ITALIC))
        return ScriptBlock(kind="title", lines=tuple(lines))

    def _page_block(self, page: Page, fmt: ScriptFormat) -> ScriptBlock:
        lines = [ScriptLine(LineKind.PAGE_HEADER, f"PAGE {page.page_number}", LineStyle.HEADING)]
        for panel in sorted(page.panels, key=lambda p: p.panel_number):
            lines.extend(self._panel_lines(panel, fmt))
        return ScriptBlock(kind="page", lines=tuple(lines), number=page.page_number)

    def _panel_lines(self, panel: Panel, fmt: ScriptFormat) -> List[ScriptLine]:
        indent = self.indents[fmt]
        lines = [ScriptLine(LineKind.PANEL_HEADER, f"PANEL {panel.panel_number}", LineStyle.HEADING)]

        if panel.details and panel.details.strip():
            lines.append(ScriptLine(LineKind.DESCRIPTION, panel.details.strip(), indent=indent))

        speaker_count = 0
        for character in sorted(panel.characters, key=lambda c: (c.sequence, c.id or 0)):
            if not character.is_caption and not character.is_sfx:
                # Empty lines still use up their number
                speaker_count += 1

            line = self._element_line(character, fmt, indent, speaker_count)
            if line is not None:
                lines.append(line)
        return lines

    def _element_line(self, character: Character, fmt: ScriptFormat,
                      indent: int, speaker_number: int) -> Optional[ScriptLine]:
        text = (character.dialogue or "").strip()
        if not text:
            return None

        if character.is_caption:
            return ScriptLine(LineKind.CAPTION, text, LineStyle.ITALIC_SERIF, label="CAPTION:", indent=indent)
        if character.is_sfx:
            return ScriptLine(LineKind.SFX, text.upper(), LineStyle.BOLD_MONO, label="SFX:", indent=indent)

        number = speaker_number if fmt == ScriptFormat.STANDARD else None
        return ScriptLine(LineKind.DIALOGUE, text, label=speaker_label(character.name),
                          number=number, indent=indent)


def render_issue(issue: Issue, fmt: ScriptFormat = ScriptFormat.STANDARD) -> List[ScriptBlock]:
    return ScriptFormatter().render_issue(issue, fmt)


def blocks_to_text(blocks: Sequence[ScriptBlock]) -> str:
    """Plain text script, blocks separated by a blank line."""
    return "\n\n".join("\n".join(line.render() for line in block.lines) for block in blocks) + "\n"
