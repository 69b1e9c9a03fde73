from sqlalchemy import Column, String, DateTime, JSON
from datetime import datetime
from sipdepot.db.session import Base


class Canvas(Base):
    __tablename__ = "canvases"

    id = Column(String, primary_key=True)  # Slug of the name, e.g. "starry-night-reimagined"
    name = Column(String, nullable=False)
    image_url = Column(String, nullable=False)
    tags = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
