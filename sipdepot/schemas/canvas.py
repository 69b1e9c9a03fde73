from pydantic import BaseModel, Field, HttpUrl
from typing import List
from datetime import datetime


class CanvasCreate(BaseModel):
    name: str = Field(min_length=1)
    image_url: HttpUrl
    tags: List[str] = []


class CanvasImportRequest(BaseModel):
    canvases: List[CanvasCreate]


class CanvasImportResponse(BaseModel):
    count: int


class Canvas(BaseModel):
    id: str
    name: str
    image_url: str
    tags: List[str] = []
    created_at: datetime

    class Config:
        from_attributes = True
