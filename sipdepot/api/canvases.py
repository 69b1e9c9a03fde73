from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from sipdepot.api.deps import get_current_user
from sipdepot.core.exceptions import DomainError
from sipdepot.db.session import get_db
from sipdepot.models.user import User
from sipdepot.schemas.canvas import Canvas as CanvasSchema, CanvasCreate, CanvasImportRequest, CanvasImportResponse
from sipdepot.services import canvases as canvas_service

router = APIRouter()


@router.get("", response_model=List[CanvasSchema])
def list_canvases(db: Session = Depends(get_db)):
    return canvas_service.list_canvases(db)


@router.post("", response_model=CanvasSchema, status_code=status.HTTP_201_CREATED)
def create_canvas(
    data: CanvasCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        return canvas_service.create_canvas(db, data.name, str(data.image_url), data.tags)
    except DomainError as e:
        raise e.to_http_exception()


@router.post("/import", response_model=CanvasImportResponse, status_code=status.HTTP_201_CREATED)
def import_canvases(
    data: CanvasImportRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    count = canvas_service.import_canvases(db, [
        {"name": c.name, "image_url": str(c.image_url), "tags": c.tags}
        for c in data.canvases
    ])
    return CanvasImportResponse(count=count)
