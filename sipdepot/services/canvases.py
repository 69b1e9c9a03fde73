import logging
import re
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from sipdepot.core.exceptions import DomainError
from sipdepot.models.canvas import Canvas

logger = logging.getLogger(__name__)


def canvas_id_for(name: str) -> str:
    return re.sub(r"\s+", "-", name.strip().lower())


def list_canvases(db: Session) -> List[Canvas]:
    return db.query(Canvas).order_by(Canvas.name.asc()).all()


def create_canvas(db: Session, name: str, image_url: str, tags: List[str]) -> Canvas:
    canvas_id = canvas_id_for(name)
    if db.get(Canvas, canvas_id) is not None:
        raise DomainError("A canvas with this name already exists")
    canvas = Canvas(id=canvas_id, name=name, image_url=image_url, tags=list(tags))
    db.add(canvas)
    db.commit()
    db.refresh(canvas)
    return canvas


def import_canvases(db: Session, canvases: List[Dict[str, Any]]) -> int:
    """Insert or update each canvas keyed by its slugified name. Returns how many were written."""
    count = 0
    for item in canvases:
        canvas_id = canvas_id_for(item["name"])
        canvas = db.get(Canvas, canvas_id)
        if canvas is None:
            canvas = Canvas(id=canvas_id)
            db.add(canvas)
        canvas.name = item["name"]
        canvas.image_url = item["image_url"]
        canvas.tags = list(item.get("tags") or [])
        count += 1
    db.commit()
    logger.info(f"[CANVASES] Imported {count} canvases")
    return count
