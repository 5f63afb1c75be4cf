"""Tests configuration and fixtures."""

import os

# Environment must be in place before any wellness module reads settings
os.environ["WELLNESS_ENV"] = "test"
os.environ["WELLNESS_LOG_LEVEL"] = "WARNING"
os.environ["WELLNESS_DB_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["WELLNESS_DB_AUTO_CREATE_TABLES"] = "true"
os.environ["WELLNESS_GEMINI_API_KEY"] = ""
os.environ["WELLNESS_OPENAI_API_KEY"] = ""
os.environ["WELLNESS_SENTRY_DSN"] = ""
os.environ["WELLNESS_JWT_SECRET_KEY"] = "test_secret_key_for_jwt_signing_min_32_chars"
os.environ["WELLNESS_JWT_REFRESH_SECRET_KEY"] = "test_refresh_secret_for_jwt_signing_32_chars"
os.environ["WELLNESS_RATE_LIMIT_REQUESTS_PER_MINUTE"] = "10000"
os.environ["WELLNESS_RATE_LIMIT_CHAT_REQUESTS_PER_MINUTE"] = "10000"
os.environ["WELLNESS_RATE_LIMIT_AUTH_REQUESTS_PER_MINUTE"] = "10000"

from typing import AsyncGenerator, Callable, Iterator, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession

from wellness.api import dependencies
from wellness.config import Settings, get_settings
from wellness.infrastructure.database import DatabaseManager, get_db_manager
from wellness.infrastructure.database.models import UserModel
from wellness.infrastructure.database.models.user_model import default_preferences
from wellness.infrastructure.database.repositories import UserRepository
from wellness.infrastructure.llm import LLMProvider, LLMProviderError, LLMResponse, clear_provider_cache
from wellness.services.auth.passwords import get_password_context
from wellness.services.chat import get_chat_service
from wellness.services.prompt import BuiltPrompt


def _clear_caches() -> None:
    get_settings.cache_clear()
    get_db_manager.cache_clear()
    get_chat_service.cache_clear()
    get_password_context.cache_clear()
    dependencies.get_token_service.cache_clear()
    dependencies.get_auth_service.cache_clear()
    dependencies.get_assessment_service.cache_clear()
    dependencies.get_account_service.cache_clear()
    clear_provider_cache()


@pytest.fixture(autouse=True)
def fresh_singletons() -> Iterator[None]:
    """Every test starts with new settings, services and database."""
    _clear_caches()
    yield
    _clear_caches()


@pytest.fixture
def test_settings() -> Settings:
    return get_settings()


# =============================================================================
# DATABASE
# =============================================================================

@pytest.fixture
async def db_manager() -> AsyncGenerator[DatabaseManager, None]:
    """Initialized in-memory database with all tables."""
    manager = DatabaseManager()
    await manager.initialize()
    await manager.create_all()
    yield manager
    await manager.close()


@pytest.fixture
async def db_session(db_manager: DatabaseManager) -> AsyncGenerator[AsyncSession, None]:
    async with db_manager.session() as session:
        yield session


@pytest.fixture
async def user(db_session: AsyncSession) -> UserModel:
    """Anonymous user stored in the test database."""
    return await UserRepository(db_session).create(UserModel(
        anonymous=True,
        age=19,
        terms_accepted=True,
        is_active=True,
        login_attempts=0,
        is_anonymized=False,
        preferences=default_preferences(),
        wellness_profile={},
    ))


# =============================================================================
# LLM FAKES
# =============================================================================

class FakeProvider(LLMProvider):
    """Scripted provider: returns `reply` or raises `error`."""

    def __init__(
        self,
        name: str = "gemini",
        reply: str = "That sounds hard. I'm here with you.",
        error: Optional[LLMProviderError] = None,
    ) -> None:
        self._name = name
        self.reply = reply
        self.error = error
        self.prompts: list[BuiltPrompt] = []

    @property
    def provider_name(self) -> str:
        return self._name

    @property
    def default_model(self) -> str:
        return f"{self._name}-test"

    async def generate(self, prompt, *, model=None, max_tokens=None, temperature=None) -> LLMResponse:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return LLMResponse(content=self.reply, model=self.default_model, provider=self._name)

    async def health_check(self) -> bool:
        return self.error is None

    def is_configured(self) -> bool:
        return True


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


# =============================================================================
# HTTP CLIENT
# =============================================================================

@pytest.fixture
def client() -> Iterator[TestClient]:
    """TestClient over a fresh application and empty database."""
    from wellness.main import create_application

    app = create_application()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register_user(client: TestClient) -> Callable[..., dict]:
    """
    Register an account and return the response body.

    Anonymous by default; pass email and password for a registered one.
    """
    def _register(**overrides) -> dict:
        payload = {"age": 19, "terms_accepted": True, "privacy_policy_accepted": True}
        if "email" in overrides:
            payload["anonymous"] = False
        payload.update(overrides)
        response = client.post("/api/v1/auth/register", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest.fixture
def auth_headers(register_user: Callable[..., dict]) -> dict:
    """Bearer headers for a new anonymous account."""
    body = register_user()
    return {"Authorization": f"Bearer {body['tokens']['access_token']}"}
