#!/usr/bin/env python3
"""Seed the canvas catalogue with the starter paintings"""
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.orm import Session
from sipdepot.db.session import SessionLocal
from sipdepot.services.canvases import import_canvases

CANVASES = [
    {
        "name": "Starry Night Reimagined",
        "image_url": "https://images.unsplash.com/photo-1579783902614-a3fb3927b6a5?w=800",
        "tags": ["classic", "night", "beginner"],
    },
    {
        "name": "Sunset Beach",
        "image_url": "https://images.unsplash.com/photo-1507003211169-0a1dd7228f2d?w=800",
        "tags": ["nature", "sunset", "beginner"],
    },
    {
        "name": "Abstract Florals",
        "image_url": "https://images.unsplash.com/photo-1490750967868-88aa4486c946?w=800",
        "tags": ["flowers", "abstract", "intermediate"],
    },
    {
        "name": "Mountain Majesty",
        "image_url": "https://images.unsplash.com/photo-1464822759023-fed622ff2c3b?w=800",
        "tags": ["nature", "mountains", "intermediate"],
    },
    {
        "name": "Wine & Grapes",
        "image_url": "https://images.unsplash.com/photo-1510812431401-41d2bd2722f3?w=800",
        "tags": ["food", "wine", "beginner"],
    },
]


def seed_canvases():
    db: Session = SessionLocal()
    try:
        count = import_canvases(db, CANVASES)
        print(f"Seeded {count} canvases")
    except Exception as e:
        db.rollback()
        print(f"Error seeding canvases: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_canvases()
