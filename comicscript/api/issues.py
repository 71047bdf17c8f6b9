import logging
import re
from fastapi import APIRouter, HTTPException, Request, Response
from fastapi.responses import HTMLResponse
from typing import List, Optional

from comicscript.api.deps import SessionDep, TreeServiceDep, IssueDep, saving
from comicscript.config import settings
from comicscript.core.templates import templates
from comicscript.schemas.series import IssueUpdate, IssueResponse
from comicscript.schemas.script import (PageCreate, PageResponse, IssueScriptResponse,
                                        RenderResponse, ScriptBlockResponse)
from comicscript.services.formatter import ScriptFormat, ScriptFormatter, blocks_to_text
from comicscript.services.pdf_export import ScriptPdfExporter

logger = logging.getLogger(__name__)

router = APIRouter()


def _sorted_pages(issue):
    return sorted(issue.pages, key=lambda p: p.page_number)


def _export_filename(issue) -> str:
    slug = re.sub(r'[^a-z0-9]+', '-', issue.title.lower()).strip('-') or "script"
    return f"{slug}-{issue.issue_number}.pdf"


@router.get("/{issue_id}", response_model=IssueResponse)
def get_issue_detail(issue: IssueDep):
    return issue


@router.put("/{issue_id}", response_model=IssueResponse)
def update_issue(issue: IssueDep, update_data: IssueUpdate, db: SessionDep, service: TreeServiceDep):
    changes = update_data.model_dump(exclude_unset=True)
    if changes.get("cover_style") is not None:
        changes["cover_style"] = changes["cover_style"].value
    # Only the writer byline may be cleared with an explicit null
    changes = {k: v for k, v in changes.items() if v is not None or k == "writer"}

    with saving(db):
        updated = service.update_issue(issue, **changes)
    if updated is None:
        raise HTTPException(status_code=400, detail="Issue title is required")

    db.refresh(issue)
    return issue


@router.delete("/{issue_id}")
def delete_issue(issue: IssueDep, db: SessionDep, service: TreeServiceDep):
    with saving(db):
        service.delete_issue(issue)
    return {"message": "Issue deleted"}


# --- Cover ---

@router.get("/{issue_id}/cover")
def get_issue_cover(issue: IssueDep):
    if issue.cover_image is None:
        raise HTTPException(status_code=404, detail="Issue has no cover")
    return Response(content=issue.cover_image, media_type="application/octet-stream")


@router.put("/{issue_id}/cover")
async def set_issue_cover(issue: IssueDep, request: Request, db: SessionDep, service: TreeServiceDep):
    data = await request.body()
    with saving(db):
        service.update_issue(issue, cover_image=data or None)
    return {"message": "Cover updated" if data else "Cover removed"}


# --- Script tree ---

@router.get("/{issue_id}/script", response_model=IssueScriptResponse)
def get_issue_script(issue: IssueDep):
    """The whole page/panel/dialogue tree in script order."""
    return {
        "issue": issue,
        "pages": [
            {
                "id": page.id,
                "issue_id": page.issue_id,
                "page_number": page.page_number,
                "panels": [
                    {
                        "id": panel.id,
                        "page_id": panel.page_id,
                        "panel_number": panel.panel_number,
                        "details": panel.details,
                        "characters": sorted(panel.characters, key=lambda c: (c.sequence, c.id)),
                    }
                    for panel in sorted(page.panels, key=lambda p: p.panel_number)
                ],
            }
            for page in _sorted_pages(issue)
        ],
    }


@router.post("/{issue_id}/pages", response_model=PageResponse)
def add_page(issue: IssueDep, db: SessionDep, service: TreeServiceDep, page_data: Optional[PageCreate] = None):
    """Append a page (with its first panel), or insert one at page_number."""
    with saving(db):
        if page_data is None or page_data.page_number is None:
            page = service.add_page(issue)
        else:
            page = service.insert_page(issue, page_data.page_number)

    db.refresh(page)
    return page


@router.get("/{issue_id}/character-names", response_model=List[str])
def get_character_names(issue: IssueDep, service: TreeServiceDep):
    """Speakers already used in this issue, most recent first."""
    return service.character_names(issue)


# --- Output ---

@router.get("/{issue_id}/render", response_model=RenderResponse)
def render_issue(issue: IssueDep, format: Optional[ScriptFormat] = None):
    fmt = format or ScriptFormat(settings.default_format)
    blocks = ScriptFormatter().render_issue(issue, fmt)
    return {
        "format": fmt,
        "blocks": [ScriptBlockResponse.model_validate(block) for block in blocks],
        "text": blocks_to_text(blocks),
    }


@router.get("/{issue_id}/export.pdf")
def export_issue_pdf(issue: IssueDep, format: Optional[ScriptFormat] = None):
    fmt = format or ScriptFormat(settings.default_format)
    blocks = ScriptFormatter().render_issue(issue, fmt)
    pdf_bytes = ScriptPdfExporter().export(blocks, title=issue.title, author=issue.writer or "")

    logger.info(f"Exported issue {issue.id} to PDF ({len(pdf_bytes)} bytes)")
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{_export_filename(issue)}"'}
    )


@router.get("/{issue_id}/preview", response_class=HTMLResponse)
def preview_issue(request: Request, issue: IssueDep, format: Optional[ScriptFormat] = None):
    fmt = format or ScriptFormat(settings.default_format)
    blocks = ScriptFormatter().render_issue(issue, fmt)
    return templates.TemplateResponse(
        request=request,
        name="preview.html",
        context={"issue": issue, "blocks": blocks, "fmt": fmt.value, "page_count": len(blocks) - 1}
    )
