"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutriplan.adapters.openai_content_client import OpenAIContentClient
from nutriplan.adapters.supabase_state_store import SupabaseStateStore
from nutriplan.config import Settings
from nutriplan.services.favorites import FavoritesService
from nutriplan.services.food_log import FoodLogService
from nutriplan.services.gateway import ContentGateway
from nutriplan.services.sessions import PlanSessionController
from nutriplan.services.storage import StateStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    state_store: StateStore
    content_gateway: ContentGateway
    plan_session: PlanSessionController
    food_log_service: FoodLogService
    favorites_service: FavoritesService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    state_store = SupabaseStateStore(supabase_client)
    content_client = OpenAIContentClient.create(
        api_key=resolved_settings.openai_api_key,
        timeout_seconds=resolved_settings.openai_timeout_seconds,
    )
    content_gateway = ContentGateway(
        client=content_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )

    async def close_resources() -> None:
        await content_client.close()

    return AppContainer(
        settings=resolved_settings,
        state_store=state_store,
        content_gateway=content_gateway,
        plan_session=PlanSessionController(content_gateway, state_store),
        food_log_service=FoodLogService(content_gateway, state_store),
        favorites_service=FavoritesService(state_store),
        close_resources=close_resources,
    )
