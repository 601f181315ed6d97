"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from calorics.adapters.calorics_client import CaloricsClient, HttpxCaloricsClient
from calorics.config import Settings
from calorics.domain.session import Session
from calorics.services.catalog import NutritionCatalog
from calorics.services.entries import FoodEntryStore
from calorics.services.food_sets import FoodSetApplier
from calorics.services.register import FoodRegister
from calorics.services.search import FoodSelection, SearchIndex


@dataclass
class AppContainer:
    """Holds the engine components for one user session."""

    settings: Settings
    session: Session
    client: CaloricsClient
    catalog: NutritionCatalog
    entry_store: FoodEntryStore
    food_set_applier: FoodSetApplier
    food_register: FoodRegister
    close_resources: Callable[[], Awaitable[None]]


def build_container(
    settings: Settings | None = None, session: Session | None = None
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    resolved_session = session or Session(token=resolved_settings.calorics_api_token)
    client = HttpxCaloricsClient.create(
        base_url=resolved_settings.calorics_api_url,
        session=resolved_session,
        timeout=resolved_settings.request_timeout_seconds,
    )
    if resolved_settings.catalog_csv_path:
        catalog = NutritionCatalog.from_csv(resolved_settings.catalog_csv_path)
    else:
        catalog = NutritionCatalog(client=client)
    entry_store = FoodEntryStore(
        client=client,
        session=resolved_session,
        rollback_failed_deletes=resolved_settings.rollback_failed_deletes,
    )
    food_set_applier = FoodSetApplier(client=client, store=entry_store)
    food_register = FoodRegister(
        client=client,
        catalog=catalog,
        store=entry_store,
        applier=food_set_applier,
        selection=FoodSelection(
            index=SearchIndex(limit=resolved_settings.search_result_limit)
        ),
    )

    async def close_resources() -> None:
        await client.close()

    return AppContainer(
        settings=resolved_settings,
        session=resolved_session,
        client=client,
        catalog=catalog,
        entry_store=entry_store,
        food_set_applier=food_set_applier,
        food_register=food_register,
        close_resources=close_resources,
    )
