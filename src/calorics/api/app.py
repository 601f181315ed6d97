"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from calorics.api.models import FoodEntryCreate, FoodSetCommit, FoodSetItem
from calorics.app_logging import configure_logging
from calorics.config import parse_day
from calorics.containers import AppContainer
from calorics.errors import NetworkError, NotFound, RequestFailed, ValidationError
from calorics.services.calculator import (
    goal_label,
    preview_calories,
    render_calorie_bar,
)


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            await app.state.container.catalog.load()
        except Exception:
            logger.exception("Failed to load the food catalog")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(ValidationError)
    async def validation_failed(_: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"error": str(exc)},
        )

    @app.exception_handler(NotFound)
    async def not_found(_: Request, exc: NotFound) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"error": exc.message}
        )

    @app.exception_handler(RequestFailed)
    async def request_failed(_: Request, exc: RequestFailed) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY, content={"error": exc.message}
        )

    @app.exception_handler(NetworkError)
    async def network_error(_: Request, exc: NetworkError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY, content={"error": str(exc)}
        )

    async def _catalog(request: Request) -> AppContainer:
        state_container: AppContainer = request.app.state.container
        if not state_container.catalog.loaded:
            await state_container.catalog.load()
        return state_container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/foods/search")
    async def search_foods(request: Request, q: str = "") -> dict[str, object]:
        """Return catalog foods matching the query."""
        state_container = await _catalog(request)
        return {"foods": state_container.food_register.search(q)}

    @app.get("/foods/{food_id}/preview")
    async def preview_food(
        food_id: int, request: Request, serving: str, quantity: float = 1.0
    ) -> dict[str, object]:
        """Return the rounded kcal for a serving of a food."""
        state_container = await _catalog(request)
        food = state_container.catalog.get(food_id)
        if food is None:
            raise ValidationError(f"Unknown food: {food_id}")
        chosen = food.serving(serving)
        if chosen is None:
            raise ValidationError(f"Unknown serving: {serving!r}")
        return {"calories": preview_calories(food, chosen, quantity)}

    @app.get("/progress")
    async def progress(request: Request, date: str) -> dict[str, object]:
        """Return entries and progress for a date."""
        state_container = await _catalog(request)
        day = parse_day(date)
        store = state_container.entry_store
        await store.load_for_date(day)
        daily = store.progress(state_container.catalog.by_id)
        stats = store.stats
        return {
            "date": day.isoformat(),
            "entries": store.entries,
            "progress": daily,
            "bar": render_calorie_bar(
                daily.calorie_progress_percent,
                daily.daily_calories,
                daily.needed_calories,
            ),
            "goal": goal_label(stats.goal if stats else None),
        }

    @app.post("/entries", status_code=status.HTTP_201_CREATED)
    async def create_entry(
        payload: FoodEntryCreate, request: Request
    ) -> dict[str, object]:
        """Log a single food entry."""
        state_container = await _catalog(request)
        food = state_container.catalog.get(payload.food_id)
        if food is None:
            raise ValidationError(f"Unknown food: {payload.food_id}")
        serving = food.serving(payload.serving_desc)
        entry = await state_container.entry_store.add(
            food, serving, payload.quantity, parse_day(payload.date)
        )
        return {"entry": entry}

    @app.delete("/entries/{entry_id}")
    async def delete_entry(entry_id: int, request: Request) -> dict[str, object]:
        """Delete a food entry of the active date."""
        state_container: AppContainer = request.app.state.container
        removed = await state_container.entry_store.remove(entry_id)
        return {
            "removed": removed,
            "daily_calories": state_container.entry_store.daily_calories,
        }

    @app.get("/food-sets")
    async def list_food_sets(request: Request) -> dict[str, object]:
        """Return the stored food sets."""
        state_container: AppContainer = request.app.state.container
        return {"food_sets": await state_container.food_set_applier.refresh()}

    @app.post("/food-sets/draft/items")
    async def add_draft_item(payload: FoodSetItem, request: Request) -> dict[str, object]:
        """Add an item to the food set being authored."""
        state_container = await _catalog(request)
        register = state_container.food_register
        builder = register.start_authoring()
        register.select(payload.food_id, quantity=payload.quantity)
        register.choose_serving(payload.serving_desc)
        register.append_to_set()
        return {"entries": builder.entries}

    @app.delete("/food-sets/draft/items/{index}")
    async def remove_draft_item(index: int, request: Request) -> dict[str, object]:
        """Remove an item from the food set being authored."""
        state_container: AppContainer = request.app.state.container
        return {"entries": state_container.food_register.remove_from_set(index)}

    @app.post("/food-sets/draft/commit", status_code=status.HTTP_201_CREATED)
    async def commit_draft(payload: FoodSetCommit, request: Request) -> dict[str, object]:
        """Save the authored food set."""
        state_container: AppContainer = request.app.state.container
        food_set = await state_container.food_register.commit_set(
            payload.name, payload.description
        )
        return {"food_set": food_set}

    @app.post("/food-sets/{set_id}/apply")
    async def apply_food_set(
        set_id: int, request: Request, date: str
    ) -> dict[str, str]:
        """Apply a stored food set to a date."""
        state_container: AppContainer = request.app.state.container
        await state_container.food_set_applier.apply(set_id, date)
        return {"status": "ok"}

    @app.delete("/food-sets/{set_id}")
    async def delete_food_set(set_id: int, request: Request) -> dict[str, str]:
        """Delete a stored food set."""
        state_container: AppContainer = request.app.state.container
        await state_container.food_set_applier.delete(set_id)
        return {"status": "ok"}

    return app
