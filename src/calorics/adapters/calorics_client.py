"""HTTP client for the Calorics backend."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Protocol

import httpx

from calorics.domain.entries import FoodEntry, UserStats
from calorics.domain.food_sets import FoodSet, FoodSetEntry
from calorics.domain.nutrition import Food, Serving
from calorics.domain.session import Session
from calorics.errors import NetworkError, NotFound, RequestFailed

_logger = logging.getLogger(__name__)


class CaloricsClient(Protocol):
    """Interface for Calorics backend interactions."""

    async def list_foods(self) -> list[Food]:
        """Return the food catalog with servings."""

    async def get_user_stats(self, day: date) -> UserStats:
        """Return the stats snapshot and entries for a date."""

    async def create_food_entry(
        self, food_id: int, serving_description: str, quantity: float, day: date
    ) -> FoodEntry:
        """Create a food entry and return the stored row."""

    async def delete_food_entry(self, entry_id: int) -> None:
        """Delete a food entry."""

    async def list_food_sets(self) -> list[FoodSet]:
        """Return the user's food sets."""

    async def create_food_set(
        self, name: str, description: str | None, entries: list[FoodSetEntry]
    ) -> FoodSet:
        """Create a food set and return it."""

    async def delete_food_set(self, set_id: int) -> None:
        """Delete a food set."""

    async def apply_food_set(self, set_id: int, day: date) -> None:
        """Materialize a food set as entries on a date."""


@dataclass
class HttpxCaloricsClient(CaloricsClient):
    """HTTPX-backed Calorics backend client."""

    base_url: str
    session: Session
    http_client: httpx.AsyncClient
    timeout: float = 15.0

    @classmethod
    def create(
        cls, base_url: str, session: Session, timeout: float = 15.0
    ) -> "HttpxCaloricsClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            session=session,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def list_foods(self) -> list[Food]:
        """Fetch the food catalog."""
        payload = await self._request("GET", "/foods")
        return [parse_food(row) for row in payload or []]

    async def get_user_stats(self, day: date) -> UserStats:
        """Fetch stats and entries for a date."""
        payload = await self._request(
            "GET", "/user/stats", params={"date": day.isoformat()}
        )
        return parse_user_stats(payload or {}, day)

    async def create_food_entry(
        self, food_id: int, serving_description: str, quantity: float, day: date
    ) -> FoodEntry:
        """Create a food entry."""
        payload = await self._request(
            "POST",
            "/food-entries",
            json={
                "food_id": food_id,
                "serving_desc": serving_description,
                "quantity": quantity,
                "date": day.isoformat(),
            },
        )
        if not payload:
            raise RequestFailed("Failed to create food entry")
        return parse_food_entry(payload, day)

    async def delete_food_entry(self, entry_id: int) -> None:
        """Delete a food entry."""
        await self._request("DELETE", f"/food-entries/{entry_id}")

    async def list_food_sets(self) -> list[FoodSet]:
        """Fetch the user's food sets."""
        payload = await self._request("GET", "/food-sets")
        return [parse_food_set(row) for row in payload or []]

    async def create_food_set(
        self, name: str, description: str | None, entries: list[FoodSetEntry]
    ) -> FoodSet:
        """Create a food set."""
        payload = await self._request(
            "POST",
            "/food-sets",
            json={
                "name": name,
                "description": description,
                "entries": [
                    {
                        "food_id": entry.food_id,
                        "serving_desc": entry.serving_description,
                        "quantity": entry.quantity,
                    }
                    for entry in entries
                ],
            },
        )
        if not payload:
            raise RequestFailed("Failed to create food set")
        return parse_food_set(payload)

    async def delete_food_set(self, set_id: int) -> None:
        """Delete a food set."""
        await self._request("DELETE", f"/food-sets/{set_id}")

    async def apply_food_set(self, set_id: int, day: date) -> None:
        """Apply a food set to a date."""
        await self._request(
            "POST", f"/food-sets/{set_id}/apply", params={"date": day.isoformat()}
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, object] | None = None,
    ) -> object:
        headers = {}
        if self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"
        try:
            response = await self.http_client.request(
                method,
                f"{self.base_url}{path}",
                params=params,
                json=json,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            message = _error_message(exc.response)
            _logger.warning("Calorics %s %s failed: %s", method, path, status_code)
            if status_code == httpx.codes.NOT_FOUND:
                raise NotFound(message, status_code) from exc
            raise RequestFailed(message, status_code) from exc
        except httpx.TransportError as exc:
            _logger.warning("Calorics %s %s unreachable: %s", method, path, exc)
            raise NetworkError(str(exc) or "Network error") from exc
        if not response.content:
            return None
        return response.json()


def _error_message(response: httpx.Response) -> str:
    """Extract the backend error message from a failed response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"Request failed with status {response.status_code}"


def _row_id(row: dict[str, object]) -> int:
    raw = row.get("id", row.get("ID"))
    return int(raw) if raw is not None else 0


def _to_float(value: object, default: float = 0.0) -> float:
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return default
    return default


def _optional_float(value: object) -> float | None:
    if value is None:
        return None
    return _to_float(value)


def _parse_day(value: object, fallback: date) -> date:
    if isinstance(value, str) and len(value) >= 10:
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return fallback
    return fallback


def parse_food(row: dict[str, object]) -> Food:
    """Parse a catalog food row into a domain model."""
    servings = tuple(
        Serving(
            id=_row_id(serving) or None,
            description=str(serving.get("description", "")),
            grams=_to_float(serving.get("grams")),
        )
        for serving in row.get("servings") or []
    )
    return Food(
        id=_row_id(row),
        name=str(row.get("name", "")),
        calories_per_100g=_to_float(row.get("calories")),
        protein_per_100g=_to_float(row.get("protein")),
        carbs_per_100g=_to_float(row.get("carbohydrates", row.get("carbs"))),
        fat_per_100g=_to_float(row.get("fat")),
        servings=servings,
    )


def parse_food_entry(row: dict[str, object], fallback_day: date) -> FoodEntry:
    """Parse a food entry row into a domain model."""
    return FoodEntry(
        id=_row_id(row),
        food_id=int(row.get("food_id") or 0),
        serving_description=str(row.get("serving_desc", "")),
        quantity=_to_float(row.get("quantity")),
        date=_parse_day(row.get("date"), fallback_day),
        calories=_to_float(row.get("calories")),
    )


def parse_user_stats(row: dict[str, object], day: date) -> UserStats:
    """Parse the stats payload for a date."""
    age = row.get("age")
    return UserStats(
        day=day,
        daily_calories=_to_float(row.get("dailyCalories")),
        needed_calories=_to_float(row.get("neededCalories")),
        current_weight=_to_float(row.get("currentWeight")),
        age=int(age) if isinstance(age, int | float) else None,
        goal=str(row.get("goal") or "maintain"),
        neck=_optional_float(row.get("neckMeasurement")),
        waist=_optional_float(row.get("waistMeasurement")),
        fat_percentage=_optional_float(row.get("fatPercentage")),
        food_entries=tuple(
            parse_food_entry(entry, day) for entry in row.get("foodEntries") or []
        ),
    )


def parse_food_set(row: dict[str, object]) -> FoodSet:
    """Parse a food set row into a domain model."""
    return FoodSet(
        id=_row_id(row),
        name=str(row.get("name", "")),
        description=row.get("description") or None,
        entries=tuple(
            FoodSetEntry(
                food_id=int(entry.get("food_id") or 0),
                serving_description=str(entry.get("serving_desc", "")),
                quantity=_to_float(entry.get("quantity")),
            )
            for entry in row.get("entries") or []
        ),
    )
