"""API Dependencies — session user, admin gate, and service wiring for routes.

Invariants:
    - The session token is read from the configured cookie only
    - Admin ⇔ signed-in user whose email equals the configured owner email;
      an empty owner email means nobody is admin
    - require_admin raises AccessDeniedError (403) for anonymous and non-owner callers

Design Decisions:
    - Every collaborator is a Depends() provider so tests swap them through
      app.dependency_overrides
    - Upstream clients are cheap to build (httpx client per call), so providers
      construct them per request; the Anthropic client is cached per process
"""

from functools import lru_cache

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.config import Settings, get_settings
from storefront.core.errors import AccessDeniedError
from storefront.infrastructure.anthropic_client import ResilientAnthropicClient
from storefront.infrastructure.database import get_db
from storefront.infrastructure.platform_client import PlatformApiClient
from storefront.infrastructure.schema_registry import SchemaRegistry, get_schema_registry
from storefront.infrastructure.shopping_client import ShoppingServiceClient
from storefront.infrastructure.users_client import UsersServiceClient
from storefront.services.chatbot import FashionChatbot
from storefront.services.email_notifier import EmailNotifier
from storefront.services.form_submission import FormSubmissionService
from storefront.services.table_repository import TableRepository


# ─── Upstream clients ───────────────────────────────────────────

def get_users_client(settings: Settings = Depends(get_settings)) -> UsersServiceClient:
    return UsersServiceClient(settings.users_service_url, settings.external_timeout_seconds)


def get_shopping_client(settings: Settings = Depends(get_settings)) -> ShoppingServiceClient:
    return ShoppingServiceClient(
        settings.shopping_service_url, settings.project_id,
        settings.external_timeout_seconds,
    )


def get_platform_client(settings: Settings = Depends(get_settings)) -> PlatformApiClient:
    return PlatformApiClient(
        settings.platform_api_url, settings.platform_api_key,
        settings.external_timeout_seconds,
    )


@lru_cache
def _anthropic_client() -> ResilientAnthropicClient:
    settings = get_settings()
    return ResilientAnthropicClient(
        api_key=settings.anthropic_api_key,
        max_retries=settings.anthropic_max_retries,
        base_delay_ms=settings.anthropic_base_delay_ms,
        max_delay_ms=settings.anthropic_max_delay_ms,
        timeout_seconds=settings.anthropic_timeout_seconds,
    )


def get_chatbot(settings: Settings = Depends(get_settings)) -> FashionChatbot:
    return FashionChatbot(
        _anthropic_client(), settings.chatbot_model, settings.chatbot_max_tokens,
    )


# ─── Session user ───────────────────────────────────────────────

async def get_current_user(
    request: Request,
    settings: Settings = Depends(get_settings),
    users: UsersServiceClient = Depends(get_users_client),
) -> dict | None:
    token = request.cookies.get(settings.session_cookie_name)
    if not token:
        return None
    return await users.get_current_user(token)


def is_owner(user: dict | None, settings: Settings) -> bool:
    return bool(user and settings.owner_email and user.get("email") == settings.owner_email)


async def require_admin(
    user: dict | None = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
) -> dict:
    if not is_owner(user, settings):
        raise AccessDeniedError()
    return user


# ─── Services ───────────────────────────────────────────────────

def get_registry() -> SchemaRegistry:
    return get_schema_registry()


def get_table_repository(
    db: AsyncSession = Depends(get_db),
    registry: SchemaRegistry = Depends(get_registry),
) -> TableRepository:
    return TableRepository(db, registry)


def get_email_notifier(
    settings: Settings = Depends(get_settings),
    platform: PlatformApiClient = Depends(get_platform_client),
) -> EmailNotifier:
    return EmailNotifier(platform, settings.owner_email, settings.project_id)


def get_form_service(
    db: AsyncSession = Depends(get_db),
    registry: SchemaRegistry = Depends(get_registry),
    notifier: EmailNotifier = Depends(get_email_notifier),
) -> FormSubmissionService:
    return FormSubmissionService(db, registry, notifier)
