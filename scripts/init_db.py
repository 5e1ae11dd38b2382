"""Create all tables and the default publication index points rows."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from cv_manager.config import settings
from cv_manager.database import SessionLocal, engine, Base
from cv_manager.models.item_points import IndexPointsConfig
import cv_manager.models  # noqa: F401 - registers all models


def init_db():
    print(f"Creating tables on {settings.DATABASE_URL} ...")
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        existing = {row.index_name for row in db.query(IndexPointsConfig).all()}
        missing = [name for name in settings.DEFAULT_INDEX_POINTS if name not in existing]
        for name in missing:
            db.add(IndexPointsConfig(index_name=name, points=settings.DEFAULT_INDEX_POINTS[name]))
        db.commit()
    finally:
        db.close()

    print(f"Database initialized. Added {len(missing)} index points row(s).")


if __name__ == "__main__":
    init_db()
