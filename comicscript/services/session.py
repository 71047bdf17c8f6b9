from typing import List, Optional

from comicscript.models import Issue, Page, Panel, Character
from comicscript.services.commands import CommandInterpreter, EditContext, ReturnResult
from comicscript.services.script_tree import ScriptTreeService


class EditorSession:
    """
    View state of one script editor: the issue being edited plus the
    selected page and panel. Selection follows the structural edits made
    through the session.
    """

    def __init__(self, service: ScriptTreeService, issue: Issue):
        self.service = service
        self.issue = issue
        self.page: Optional[Page] = None
        self.panel: Optional[Panel] = None

        pages = self.pages
        if pages:
            self.select_page(pages[0])

    @property
    def pages(self) -> List[Page]:
        return sorted(self.issue.pages, key=lambda p: p.page_number)

    def context(self) -> EditContext:
        return EditContext(issue=self.issue, page=self.page, panel=self.panel)

    # --- SELECTION ---

    def select_page(self, page: Optional[Page]):
        if page is not self.page:
            self.panel = None
        self.page = page

    def select_panel(self, panel: Optional[Panel]):
        if panel is not None and panel.page is not self.page:
            self.page = panel.page
        self.panel = panel

    def next_page(self) -> Optional[Page]:
        return self._step(1)

    def previous_page(self) -> Optional[Page]:
        return self._step(-1)

    def _step(self, offset: int) -> Optional[Page]:
        pages = self.pages
        if self.page not in pages:
            return None

        index = pages.index(self.page) + offset
        if 0 <= index < len(pages):
            self.select_page(pages[index])
            return self.page
        return None

    # --- EDITS ---

    def add_page(self) -> Optional[Page]:
        page = self.service.add_page(self.issue)
        if page is not None:
            self.page = page
            self.panel = page.panels[0]
        return page

    def add_panel(self) -> Optional[Panel]:
        panel = self.service.add_panel(self.page)
        if panel is not None:
            self.panel = panel
        return panel

    def duplicate_panel(self) -> Optional[Panel]:
        copy = self.service.duplicate_panel(self.panel)
        if copy is not None:
            self.panel = copy
        return copy

    def add_character(self, name: str, dialogue: str = "") -> Optional[Character]:
        return self.service.add_character(self.panel, name, dialogue)

    def delete_panel(self, panel: Panel) -> bool:
        if panel is self.panel:
            self.panel = None
        return self.service.delete_panel(panel)

    def delete_page(self, page: Page) -> bool:
        if page is self.page:
            self.page = None
            self.panel = None
        return self.service.delete_page(page)

    def handle_return(self, text: str, cursor: int, panel: Optional[Panel] = None) -> ReturnResult:
        """
        Newline typed in a field. `panel` is the panel owning the field, which
        becomes the active one before the line is interpreted.
        """
        if panel is not None:
            self.select_panel(panel)

        result = CommandInterpreter(self.service).handle_return(text, cursor, self.context())

        if isinstance(result.created, Page):
            self.page = result.created
            self.panel = result.created.panels[0]
        elif isinstance(result.created, Panel):
            self.panel = result.created
        return result

    def handle_backspace(self, text: str, cursor: int, character: Optional[Character]) -> bool:
        """Backspace in a dialogue field; an empty field deletes its element."""
        if character is not None and character.panel is not None:
            self.select_panel(character.panel)
        return CommandInterpreter(self.service).handle_backspace(text, cursor, character)
