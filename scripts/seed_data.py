"""Seed the database with test data."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from cv_manager.database import SessionLocal, engine, Base
import cv_manager.models  # noqa: F401

from cv_manager.models.user import AdminUser, User
from cv_manager.models.cv import CV
from cv_manager.models.item_points import IndexPointsConfig
from cv_manager.services import history_service, item_points_service


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.query(User).count() > 0:
            print("Database already seeded. Skipping.")
            return

        # Users
        users = [
            User(email="admin@univ.ac.kr", name="관리자 김철수", department="교무처"),
            User(email="prof.lee@univ.ac.kr", name="이영희", department="경영학과"),
            User(email="prof.park@univ.ac.kr", name="박민준", department="경제학과"),
        ]
        db.add_all(users)
        db.flush()

        db.add(AdminUser(user_id=users[0].user_id))

        # Publication index points
        db.add_all([
            IndexPointsConfig(index_name="SSCI", points=10),
            IndexPointsConfig(index_name="SCOPUS", points=7),
            IndexPointsConfig(index_name="KCI", points=5),
            IndexPointsConfig(index_name="Other", points=1),
        ])
        db.flush()

        cv = CV(
            user_id=users[1].user_id,
            full_name="Younghee Lee",
            email=users[1].email,
            phone="031-750-0000",
            education=[
                {"degree": "PhD", "institution": "KAIST", "year": "2010", "field": "Marketing"},
            ],
            academic_employment=[
                {"position": "Assistant Professor", "institution": "SNU", "start_date": "2011", "end_date": "2016"},
                {"position": "Professor", "institution": "Gachon University", "start_date": "Mar 2017", "end_date": "Present"},
            ],
            teaching=[{"course": "Marketing Strategy", "institution": "Gachon University", "year": "2023"}],
            courses=[{"course": "Consumer Behavior", "institution": "Gachon University", "year": "2024", "credit_hours": "3"}],
            publications_research=[
                {"title": "Brand Loyalty in Digital Markets", "journal": "Journal of Marketing", "year": "2022", "index": "SSCI"},
                {"title": "Retail Analytics", "journal": "Korean Marketing Review", "year": "2019", "index": "KCI"},
            ],
            publications_books=[],
            conference_presentations=[{"title": "AI in Retail", "conference": "AMA Summer", "year": "2023"}],
            professional_service=[{"role": "Reviewer", "organization": "Journal of Marketing", "year": "2021"}],
            internal_activities=[],
        )
        db.add(cv)
        db.commit()
        db.refresh(cv)

        item_points_service.sync_publication_index_points(db, cv, [])
        history_service.create_snapshot(db, cv=cv, user_id=cv.user_id)

        print("Seed data inserted successfully.")
        print(f"  Users: {len(users)}")
        print(f"  CVs: 1 (ID={cv.cv_id})")
        print()
        print("Test login emails:")
        for u in users:
            print(f"  email={u.email}  name={u.name}")

    except Exception as e:
        db.rollback()
        raise e
    finally:
        db.close()


if __name__ == "__main__":
    seed()
