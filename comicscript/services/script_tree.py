import logging
from datetime import datetime, timezone
from operator import attrgetter
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from comicscript.models import Series, Issue, Page, Panel, Character, CoverCategory, CoverStyle, CAPTION, SFX

logger = logging.getLogger(__name__)

# Editable columns per entity, anything else passed to an update is ignored
SERIES_FIELDS = ("title", "synopsis", "category", "cover_image")
ISSUE_FIELDS = ("title", "issue_number", "synopsis", "writer", "cover_image",
                "cover_style", "cover_title_position", "show_cover_title")
CHARACTER_FIELDS = ("name", "dialogue")

# Child -> parent attribute, used to bubble updated_at up the tree
_PARENT_ATTR = {
    Character: "panel",
    Panel: "page",
    Page: "issue",
    Issue: "series",
}


def _by_sequence(character: Character):
    return character.sequence, character.id or 0


def _renumber(items, attr: str):
    """Rewrite a numbering column as 1..n, keeping the existing relative order."""
    for number, item in enumerate(sorted(items, key=attrgetter(attr)), start=1):
        if getattr(item, attr) != number:
            setattr(item, attr, number)


class ScriptTreeService:
    """
    Create, delete, renumber and duplicate nodes of the
    Series -> Issue -> Page -> Panel -> Character tree.

    Every mutation flushes but never commits; the caller owns the transaction.
    A missing parent or target is a no-op that returns None (or False),
    never an exception.
    """

    def __init__(self, db: Session):
        self.db = db

    # --- HELPERS ---

    def _touch(self, node):
        """Mark a node and all of its ancestors as updated."""
        now = datetime.now(timezone.utc)
        while node is not None:
            node.updated_at = now
            attr = _PARENT_ATTR.get(type(node))
            node = getattr(node, attr) if attr else None

    # --- SERIES ---

    def find_series(self, category: Optional[str] = None, search: Optional[str] = None) -> List[Series]:
        """Series shelf, most recently edited first."""
        query = self.db.query(Series)

        if category:
            query = query.filter(Series.category == category)

        if search and search.strip():
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(Series.title.ilike(pattern), Series.synopsis.ilike(pattern)))

        return query.order_by(Series.updated_at.desc(), Series.id.desc()).all()

    def add_series(self, title: str, synopsis: str = "",
                   category: str = CoverCategory.SUPERHERO.value,
                   cover_image: Optional[bytes] = None) -> Optional[Series]:
        title = (title or "").strip()
        if not title:
            return None

        series = Series(
            title=title,
            synopsis=synopsis or "",
            category=CoverCategory(category).value,
            cover_image=cover_image
        )
        self.db.add(series)
        self.db.flush()

        logger.info(f"Created series {series.id}: {title}")
        return series

    def update_series(self, series: Optional[Series], **changes) -> Optional[Series]:
        if series is None:
            return None

        if "title" in changes:
            changes["title"] = (changes["title"] or "").strip()
            if not changes["title"]:
                return None

        for field in SERIES_FIELDS:
            if field in changes:
                value = changes[field]
                if field == "category":
                    value = CoverCategory(value).value
                setattr(series, field, value)

        self._touch(series)
        self.db.flush()
        return series

    def delete_series(self, series: Optional[Series]) -> bool:
        if series is None:
            return False

        # ORM cascade walks issues -> pages -> panels -> characters
        logger.info(f"Deleting series {series.id} with {len(series.issues)} issue(s)")
        self.db.delete(series)
        self.db.flush()
        return True

    # --- ISSUES ---

    def next_issue_number(self, series: Series) -> int:
        return max((issue.issue_number for issue in series.issues), default=0) + 1

    def add_issue(self, series: Optional[Series], title: str,
                  issue_number: Optional[int] = None,
                  synopsis: str = "",
                  writer: Optional[str] = None,
                  cover_style: str = CoverStyle.CLASSIC.value,
                  cover_image: Optional[bytes] = None) -> Optional[Issue]:
        title = (title or "").strip()
        if series is None or not title:
            return None

        if issue_number is None:
            issue_number = self.next_issue_number(series)

        issue = Issue(
            title=title,
            issue_number=issue_number,
            synopsis=synopsis or "",
            writer=writer,
            cover_style=CoverStyle(cover_style).value,
            cover_image=cover_image
        )
        series.issues.append(issue)
        self._touch(series)
        self.db.flush()

        logger.info(f"Created issue #{issue_number} ({issue.id}) in series {series.id}")
        return issue

    def update_issue(self, issue: Optional[Issue], **changes) -> Optional[Issue]:
        if issue is None:
            return None

        if "title" in changes:
            changes["title"] = (changes["title"] or "").strip()
            if not changes["title"]:
                return None

        for field in ISSUE_FIELDS:
            if field in changes:
                value = changes[field]
                if field == "cover_style":
                    value = CoverStyle(value).value
                setattr(issue, field, value)

        self._touch(issue)
        self.db.flush()
        return issue

    def delete_issue(self, issue: Optional[Issue]) -> bool:
        """Delete an issue and everything under it. Issue numbers are left alone."""
        if issue is None:
            return False

        series = issue.series
        if series is not None:
            series.issues.remove(issue)
            self._touch(series)

        logger.info(f"Deleting issue {issue.id} (#{issue.issue_number})")
        self.db.delete(issue)
        self.db.flush()
        return True

    # --- PAGES ---

    def _create_page(self, issue: Issue, page_number: int) -> Page:
        page = Page(page_number=page_number)
        # A new page always starts with an empty first panel
        page.panels.append(Panel(panel_number=1, details=""))
        issue.pages.append(page)
        self._touch(issue)
        self.db.flush()
        return page

    def add_page(self, issue: Optional[Issue]) -> Optional[Page]:
        """Append a page to the end of the issue."""
        if issue is None:
            return None

        next_number = max((page.page_number for page in issue.pages), default=0) + 1
        page = self._create_page(issue, next_number)

        logger.debug(f"Added page {next_number} to issue {issue.id}")
        return page

    def insert_page(self, issue: Optional[Issue], page_number: int) -> Optional[Page]:
        """
        Insert a page at an explicit number, shifting that page and every
        later one up by one. Numbers past the end append.
        """
        if issue is None:
            return None

        last_number = max((page.page_number for page in issue.pages), default=0)
        page_number = max(1, min(page_number, last_number + 1))

        for page in issue.pages:
            if page.page_number >= page_number:
                page.page_number += 1

        page = self._create_page(issue, page_number)
        logger.debug(f"Inserted page {page_number} into issue {issue.id}")
        return page

    def delete_page(self, page: Optional[Page]) -> bool:
        if page is None:
            return False

        issue = page.issue
        deleted_number = page.page_number

        if issue is not None:
            issue.pages.remove(page)
            _renumber(issue.pages, "page_number")
            self._touch(issue)

        self.db.delete(page)
        self.db.flush()

        logger.debug(f"Deleted page {deleted_number}")
        return True

    # --- PANELS ---

    def _create_panel(self, page: Page, panel_number: int, details: str = "") -> Panel:
        panel = Panel(panel_number=panel_number, details=details)
        page.panels.append(panel)
        self._touch(page)
        self.db.flush()
        return panel

    def add_panel(self, page: Optional[Page]) -> Optional[Panel]:
        """Append a panel to the end of the page."""
        if page is None:
            return None

        next_number = max((panel.panel_number for panel in page.panels), default=0) + 1
        return self._create_panel(page, next_number)

    def insert_panel(self, page: Optional[Page], panel_number: int) -> Optional[Panel]:
        if page is None:
            return None

        last_number = max((panel.panel_number for panel in page.panels), default=0)
        panel_number = max(1, min(panel_number, last_number + 1))

        for panel in page.panels:
            if panel.panel_number >= panel_number:
                panel.panel_number += 1

        return self._create_panel(page, panel_number)

    def update_panel_details(self, panel: Optional[Panel], details: str) -> Optional[Panel]:
        if panel is None:
            return None

        panel.details = details or ""
        self._touch(panel)
        self.db.flush()
        return panel

    def delete_panel(self, panel: Optional[Panel]) -> bool:
        if panel is None:
            return False

        page = panel.page
        deleted_number = panel.panel_number

        if page is not None:
            page.panels.remove(panel)
            _renumber(page.panels, "panel_number")
            self._touch(page)

        self.db.delete(panel)
        self.db.flush()

        logger.debug(f"Deleted panel {deleted_number}")
        return True

    def duplicate_panel(self, panel: Optional[Panel]) -> Optional[Panel]:
        """
        Copy a panel to the end of its page, including a full copy of every
        dialogue element in the same relative order.
        """
        if panel is None or panel.page is None:
            return None

        page = panel.page
        next_number = max((p.panel_number for p in page.panels), default=0) + 1

        copy = Panel(panel_number=next_number, details=panel.details)
        for sequence, character in enumerate(sorted(panel.characters, key=_by_sequence), start=1):
            copy.characters.append(Character(
                name=character.name,
                dialogue=character.dialogue,
                sequence=sequence
            ))

        page.panels.append(copy)
        self._touch(page)
        self.db.flush()

        logger.debug(f"Duplicated panel {panel.panel_number} as panel {next_number}")
        return copy

    # --- DIALOGUE ELEMENTS ---

    def ordered_characters(self, panel: Panel) -> List[Character]:
        return sorted(panel.characters, key=_by_sequence)

    def add_character(self, panel: Optional[Panel], name: str, dialogue: str = "") -> Optional[Character]:
        name = (name or "").strip()
        if panel is None or not name:
            return None

        next_sequence = max((c.sequence for c in panel.characters), default=0) + 1
        character = Character(name=name, dialogue=dialogue or "", sequence=next_sequence)
        panel.characters.append(character)
        self._touch(panel)
        self.db.flush()

        logger.debug(f"Added {name} to panel {panel.id}")
        return character

    def update_character(self, character: Optional[Character], **changes) -> Optional[Character]:
        if character is None:
            return None

        if changes.get("name") is not None:
            changes["name"] = changes["name"].strip()
            # Same rule as add_character, a speaker always has a name
            if not changes["name"]:
                return None

        for field in CHARACTER_FIELDS:
            if field in changes and changes[field] is not None:
                setattr(character, field, changes[field])

        self._touch(character)
        self.db.flush()
        return character

    def move_character(self, panel: Optional[Panel], from_index: int, to_index: int) -> Optional[List[Character]]:
        """
        Move the element at from_index to to_index (positions in the ascending
        order) and rewrite every sequence in the panel as 1..n.
        """
        if panel is None:
            return None

        elements = self.ordered_characters(panel)
        count = len(elements)
        if not (0 <= from_index < count and 0 <= to_index < count):
            return None

        element = elements.pop(from_index)
        elements.insert(to_index, element)

        for sequence, character in enumerate(elements, start=1):
            character.sequence = sequence

        self._touch(panel)
        self.db.flush()
        return elements

    def delete_character(self, character: Optional[Character]) -> bool:
        if character is None:
            return False

        panel = character.panel
        if panel is not None:
            panel.characters.remove(character)
            self._touch(panel)

        self.db.delete(character)
        self.db.flush()
        return True

    def character_names(self, issue: Optional[Issue]) -> List[str]:
        """Speaker names used in the issue, most recently used first."""
        if issue is None:
            return []

        # Ids grow with creation order and survive reordering
        last_used = {}
        for page in issue.pages:
            for panel in page.panels:
                for character in panel.characters:
                    if character.name in (CAPTION, SFX):
                        continue
                    stamp = character.id or 0
                    if last_used.get(character.name, -1) < stamp:
                        last_used[character.name] = stamp

        return [name for name, _ in sorted(last_used.items(), key=lambda item: item[1], reverse=True)]
