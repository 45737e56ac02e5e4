"""Build session model: the in-progress plaque configuration.

A BuildSession is held by the shopper's browser (or any local key-value
store) while they assemble a plaque: team name, sport, the plaque itself,
roster positions and the cards picked for them. It is never sent to the
server until checkout.

The persisted form is camelCase JSON so existing browser sessions stay
readable. ``version`` guards against loading a blob written by an
incompatible release.
"""

import random
import string
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

SESSION_VERSION = 1


class Sport(Enum):
    NFL = "NFL"
    MLB = "MLB"
    NBA = "NBA"
    NHL = "NHL"


class BuildStep(Enum):
    SETUP = "setup"
    BUILDING = "building"
    CARDS = "cards"
    PURCHASE = "purchase"
    DONE = "done"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SelectedPlaque(_CamelModel):
    id: str
    name: str
    material: str = ""
    style: str = ""
    price: float = Field(ge=0)


class RosterPosition(_CamelModel):
    id: str
    position: str
    player_name: str = ""


class BuildSession(_CamelModel):
    version: int = SESSION_VERSION
    session_id: str
    team_name: str = ""
    selected_sport: Sport = Sport.NFL
    current_step: BuildStep = BuildStep.SETUP
    selected_plaque: SelectedPlaque | None = None
    roster_positions: list[RosterPosition] = Field(default_factory=list)
    selected_cards: dict[str, dict[str, Any]] = Field(default_factory=dict)
    last_updated: datetime

    @property
    def is_complete(self) -> bool:
        return self.current_step == BuildStep.DONE

    @property
    def filled_positions(self) -> int:
        """Number of roster positions that have a player assigned."""
        return sum(1 for p in self.roster_positions if p.player_name)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


def field_name_for(key: str) -> str | None:
    """Map a camelCase or snake_case key to its BuildSession field name."""
    if key in BuildSession.model_fields:
        return key
    for name, field in BuildSession.model_fields.items():
        if field.alias == key:
            return name
    return None


def generate_session_id(now: datetime) -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"session_{int(now.timestamp() * 1000)}_{suffix}"
