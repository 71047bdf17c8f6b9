from fastapi import APIRouter, HTTPException, Query, Request, Response
from typing import List, Optional, Annotated

from comicscript.api.deps import SessionDep, TreeServiceDep, SeriesDep, saving
from comicscript.models import CoverCategory
from comicscript.schemas.series import (SeriesCreate, SeriesUpdate, SeriesResponse,
                                        IssueCreate, IssueResponse)

router = APIRouter()


@router.get("/", response_model=List[SeriesResponse])
def list_series(
        service: TreeServiceDep,
        category: Optional[CoverCategory] = None,
        search: Annotated[Optional[str], Query(max_length=200)] = None
):
    """Series shelf, optionally filtered by category and a title/synopsis search."""
    return service.find_series(category=category.value if category else None, search=search)


@router.post("/", response_model=SeriesResponse)
def create_series(series_data: SeriesCreate, db: SessionDep, service: TreeServiceDep):
    with saving(db):
        series = service.add_series(
            title=series_data.title,
            synopsis=series_data.synopsis,
            category=series_data.category.value
        )
    if series is None:
        raise HTTPException(status_code=400, detail="Series title is required")

    db.refresh(series)
    return series


@router.get("/{series_id}", response_model=SeriesResponse)
def get_series_detail(series: SeriesDep):
    return series


@router.put("/{series_id}", response_model=SeriesResponse)
def update_series(series: SeriesDep, update_data: SeriesUpdate, db: SessionDep, service: TreeServiceDep):
    """Rename, re-categorise or edit the synopsis."""
    changes = update_data.model_dump(exclude_unset=True, exclude_none=True)
    if "category" in changes:
        changes["category"] = changes["category"].value

    with saving(db):
        updated = service.update_series(series, **changes)
    if updated is None:
        raise HTTPException(status_code=400, detail="Series title is required")

    db.refresh(series)
    return series


@router.delete("/{series_id}")
def delete_series(series: SeriesDep, db: SessionDep, service: TreeServiceDep):
    """Delete the series and every issue, page, panel and line under it."""
    with saving(db):
        service.delete_series(series)
    return {"message": "Series deleted"}


# --- Cover ---

@router.get("/{series_id}/cover")
def get_series_cover(series: SeriesDep):
    if series.cover_image is None:
        raise HTTPException(status_code=404, detail="Series has no cover")
    return Response(content=series.cover_image, media_type="application/octet-stream")


@router.put("/{series_id}/cover")
async def set_series_cover(series: SeriesDep, request: Request, db: SessionDep, service: TreeServiceDep):
    """Store the raw request body as the cover image. An empty body removes it."""
    data = await request.body()
    with saving(db):
        service.update_series(series, cover_image=data or None)
    return {"message": "Cover updated" if data else "Cover removed"}


# --- Issues ---

@router.get("/{series_id}/issues", response_model=List[IssueResponse])
def list_issues(series: SeriesDep):
    """Issues sorted by issue number."""
    return sorted(series.issues, key=lambda issue: (issue.issue_number, issue.id))


@router.post("/{series_id}/issues", response_model=IssueResponse)
def create_issue(series: SeriesDep, issue_data: IssueCreate, db: SessionDep, service: TreeServiceDep):
    with saving(db):
        issue = service.add_issue(
            series,
            title=issue_data.title,
            issue_number=issue_data.issue_number,
            synopsis=issue_data.synopsis,
            writer=issue_data.writer,
            cover_style=issue_data.cover_style.value
        )
    if issue is None:
        raise HTTPException(status_code=400, detail="Issue title is required")

    db.refresh(issue)
    return issue
