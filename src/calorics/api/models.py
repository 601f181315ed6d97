"""Request bodies accepted by the HTTP facade."""

from pydantic import BaseModel, Field


class FoodEntryCreate(BaseModel):
    """Single food entry submission."""

    food_id: int
    serving_desc: str
    quantity: float = Field(gt=0, allow_inf_nan=False)
    date: str


class FoodSetItem(BaseModel):
    """Item added to the food set being authored."""

    food_id: int
    serving_desc: str
    quantity: float = Field(gt=0, allow_inf_nan=False)


class FoodSetCommit(BaseModel):
    """Name and description for the authored food set."""

    name: str
    description: str | None = None
