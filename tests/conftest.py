import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from cv_manager.database import Base, get_db
from cv_manager.main import app
from cv_manager.models.user import AdminUser, User

TEST_DB_URL = "sqlite:///./test_cv_manager.db"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def seed_users(db):
    users = {
        "admin": User(email="admin@univ.ac.kr", name="Admin", department="Academic Affairs"),
        "prof": User(email="prof@univ.ac.kr", name="Professor Kim", department="Business"),
        "prof2": User(email="prof2@univ.ac.kr", name="Professor Lee", department="Economics"),
    }
    for u in users.values():
        db.add(u)
    db.commit()
    for u in users.values():
        db.refresh(u)
    db.add(AdminUser(user_id=users["admin"].user_id))
    db.commit()
    return users


SAMPLE_CV = {
    "full_name": "Professor Kim",
    "phone": "010-1234-5678",
    "email": "prof@univ.ac.kr",
    "address": "Seongnam",
    "education": [{"degree": "PhD", "institution": "KAIST", "year": "2010", "field": "Management"}],
    "academic_employment": [
        {"position": "Lecturer", "institution": "SNU", "start_date": "2011", "end_date": "2015", "current": False},
        {"position": "Professor", "institution": "Gachon", "start_date": "May 2019", "end_date": "Present", "current": True},
    ],
    "teaching": [{"course": "Marketing", "institution": "Gachon", "year": "2022", "description": ""}],
    "courses": [{"course": "Strategy", "institution": "Gachon", "year": "2021", "credit_hours": "3"}],
    "publications_research": [{"title": "P1", "journal": "J1", "year": "2021", "authors": "Kim", "doi": "", "index": ""}],
    "publications_books": [],
    "conference_presentations": [],
    "professional_service": [{"role": "Reviewer", "organization": "AMA", "year": "2018", "description": ""}],
    "internal_activities": [],
}


def get_token(client, email: str) -> str:
    resp = client.post("/api/auth/login", json={"email": email})
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


def auth_headers(client, email: str) -> dict:
    return {"Authorization": f"Bearer {get_token(client, email)}"}


def save_cv(client, email: str, payload: dict) -> dict:
    resp = client.put("/api/cv/me", headers=auth_headers(client, email), json=payload)
    assert resp.status_code == 200, resp.text
    return resp.json()
