"""Shared test fixtures."""

import asyncio
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
from typing import List, Optional

from app.config import CategorizationConfig
from app.database import Base, get_db
from app.dependencies import get_categorization_config
from app.main import app
from app.models import MerchantCategoryMap
from app.schemas.categorization import AdapterResponse
from app.services.normalizer import normalize_text


@pytest.fixture(scope="function")
def db_engine():
    """In-memory SQLite engine shared by every connection of one test."""
    # Use StaticPool to ensure all connections use the same in-memory database
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Create a fresh database for each test using in-memory SQLite."""
    Base.metadata.create_all(bind=db_engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=db_engine)


@pytest.fixture(scope="function")
def empty_db_session(db_engine):
    """Session against a database where no tables have been provisioned."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def config():
    """Default engine configuration without any model credentials."""
    return CategorizationConfig()


@pytest.fixture(scope="function")
def client(db_session, config):
    """Create a test client with database override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_categorization_config] = lambda: config
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_entry(db_session):
    """Factory for dictionary rows."""
    def _make_entry(
        keyword: str,
        category: str,
        confidence: float = 0.8,
        user_id: Optional[str] = None,
        source: str = "seed",
        is_active: bool = True,
    ) -> MerchantCategoryMap:
        entry = MerchantCategoryMap(
            user_id=user_id,
            merchant_keyword=keyword,
            normalized_keyword=normalize_text(keyword),
            category=category,
            confidence_score=confidence,
            source=source,
            hit_count=0,
            is_active=is_active,
        )
        db_session.add(entry)
        db_session.commit()
        db_session.refresh(entry)
        return entry

    return _make_entry


class FakeAdapter:
    """In-process stand-in for a model adapter."""

    def __init__(
        self,
        response: Optional[AdapterResponse] = None,
        error: Optional[Exception] = None,
        delay: float = 0.0,
        configured: bool = True,
    ):
        self.response = response
        self.error = error
        self.delay = delay
        self.configured = configured
        self.calls: List[dict] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def categorize(self, text, amount, payment_method, categories):
        self.calls.append({
            "text": text,
            "amount": amount,
            "payment_method": payment_method,
            "categories": categories,
        })
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.response


@pytest.fixture
def fake_adapter():
    return FakeAdapter
