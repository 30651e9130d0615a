"""
Shared fixtures: in-memory database, users, images and a fake vision provider.
"""
import copy
import json

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from aiface.core import config
from aiface.core.auth_dependency import get_db
from aiface.core.security import create_access_token
from aiface.db.base import Base
from aiface.db.models.image import Image
from aiface.db.models.user import User
from aiface.llm.openai_provider import get_vision_provider
from aiface.llm.provider import LLMProvider, LLMResponse
from aiface.main import app


# Setup in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


SAMPLE_ANALYSIS = {
    "analysis": "A calm, balanced face with a strong jawline.",
    "positive_traits": ["kind", "kind", " generous ", "determined"],
    "negative_traits": ["stubborn"],
    "personality_analysis": {
        "facial_features": [
            {"feature": "eyes", "interpretation": "attentive", "confidence": 0.7}
        ],
        "mian_xiang": {"elements": ["wood"], "interpretation": "growth"},
        "physiognomy": {"traits": ["steady"], "interpretation": "reliable"},
    },
    "age_health_analysis": {
        "estimated_age": 31,
        "biological_age": 29,
        "health_indicators": [{"indicator": "skin", "status": "good"}],
        "stress_level": {"value": 0.3, "interpretation": "low"},
        "fatigue_level": {"value": 0.2, "interpretation": "rested"},
        "hydration_level": {"value": 0.8, "interpretation": "well hydrated"},
    },
    "beauty_analysis": {
        "symmetry_score": 0.82,
        "golden_ratio_score": 0.76,
        "aesthetic_balance": {"score": 0.8, "interpretation": "harmonious"},
    },
}

SAMPLE_CELEBRITIES = {
    "celebrity_matches": [
        {"name": "Jane Doe", "similarity": 0.71, "features": ["cheekbones", "eyes"]}
    ]
}


class FakeVisionProvider(LLMProvider):
    """Stands in for OpenAI; each call can return content or raise."""

    def __init__(self, analysis=None, celebrities=None, analysis_error=None, celebrity_error=None):
        self.analysis = json.dumps(SAMPLE_ANALYSIS) if analysis is None else analysis
        self.celebrities = json.dumps(SAMPLE_CELEBRITIES) if celebrities is None else celebrities
        self.analysis_error = analysis_error
        self.celebrity_error = celebrity_error
        self.calls = []

    def analyze_face(self, image_b64, mimetype):
        self.calls.append(("analyze_face", mimetype))
        if self.analysis_error:
            raise self.analysis_error
        return LLMResponse(content=self.analysis, model="fake")

    def match_celebrities(self, image_b64, mimetype):
        self.calls.append(("match_celebrities", mimetype))
        if self.celebrity_error:
            raise self.celebrity_error
        return LLMResponse(content=self.celebrities, model="fake")


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=test_engine)
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def test_user(db):
    """Create a test user."""
    user = User(
        google_id="google-123",
        email="test@example.com",
        name="Test User",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def other_user(db):
    user = User(
        google_id="google-456",
        email="other@example.com",
        name="Other User",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def test_user_token(test_user):
    """Create JWT token for test user."""
    return create_access_token({"sub": str(test_user.id), "email": test_user.email})


@pytest.fixture
def auth_headers(test_user_token):
    return {"Authorization": f"Bearer {test_user_token}"}


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    """Point storage, and the mounted /uploads files, at a per-test directory."""
    monkeypatch.setattr(config, "UPLOAD_DIR", str(tmp_path))
    for route in app.routes:
        if getattr(route, "name", None) == "uploads":
            monkeypatch.setattr(route.app, "directory", str(tmp_path))
            monkeypatch.setattr(route.app, "all_directories", [str(tmp_path)])
    return tmp_path


@pytest.fixture
def test_image(db, test_user, upload_dir):
    """An uploaded image with bytes on disk."""
    path = upload_dir / "1700000000000-face.jpg"
    path.write_bytes(b"\xff\xd8\xff\xe0fake-jpeg-bytes")
    image = Image(
        user_id=test_user.id,
        filename=path.name,
        original_name="face.jpg",
        path=str(path),
        size=path.stat().st_size,
        mimetype="image/jpeg",
    )
    db.add(image)
    db.commit()
    db.refresh(image)
    return image


@pytest.fixture
def fake_provider():
    return FakeVisionProvider()


@pytest.fixture
def client(db, fake_provider):
    """Test client bound to the in-memory database and the fake provider."""
    def override_get_db():
        session = TestSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_vision_provider] = lambda: fake_provider
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def sample_analysis():
    return copy.deepcopy(SAMPLE_ANALYSIS)
