"""Per-user session context shared by the engine components."""

from dataclasses import dataclass, field
from datetime import date


@dataclass
class Session:
    """Bearer credential and the date currently being viewed."""

    token: str | None = None
    active_date: date = field(default_factory=date.today)
