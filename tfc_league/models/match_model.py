# match_model.py
# Defines Match (fixtures and results), MatchEvent (goals, cards, subs) and MatchLineup (goalkeeper of record)

from typing import Optional
from datetime import datetime, timezone
from enum import Enum
from sqlmodel import SQLModel, Field
from pydantic import BaseModel, Field as PydanticField, field_validator

from tfc_league.core.standings import MatchStatus


class EventType(str, Enum):
    GOAL = "GOAL"
    YELLOW = "YELLOW"
    RED = "RED"
    SUB = "SUB"
    PENALTY = "PENALTY"
    FOUL = "FOUL"
    OTHER = "OTHER"


class Match(SQLModel, table=True):
    """
    Represents a scheduled match (fixture) between two teams in a season.
    Scores are meaningful once the match is LIVE or FINISHED.
    """
    id: Optional[int] = Field(default=None, primary_key=True)

    # Foreign keys
    season_id: int = Field(foreign_key="season.id")        # Season this match is part of
    home_team_id: int = Field(foreign_key="team.id")       # Home team
    away_team_id: int = Field(foreign_key="team.id")       # Away team

    # Match details
    matchday: Optional[int] = None                         # Round number within the season
    kickoff_at: Optional[datetime] = None                  # Scheduled date/time (UTC)
    venue: Optional[str] = None

    # Results
    status: str = Field(default=MatchStatus.SCHEDULED.value)
    home_score: int = 0
    away_score: int = 0

    updated_at: datetime = Field(default_factory=datetime.utcnow)


class MatchEvent(SQLModel, table=True):
    """A single match event. Only GOAL events feed the scorer/assist leaderboards."""
    id: Optional[int] = Field(default=None, primary_key=True)
    match_id: int = Field(foreign_key="match.id", index=True)
    type: str = Field(default=EventType.GOAL.value)

    team_id: Optional[int] = Field(default=None, foreign_key="team.id")
    player_id: Optional[int] = Field(default=None, foreign_key="player.id")
    assist_player_id: Optional[int] = Field(default=None, foreign_key="player.id")

    minute: Optional[int] = None
    extra_minute: Optional[int] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)


class MatchLineup(SQLModel, table=True):
    """Goalkeeper of record for one side of a match (one row per match + team)."""
    id: Optional[int] = Field(default=None, primary_key=True)
    match_id: int = Field(foreign_key="match.id", index=True)
    team_id: int = Field(foreign_key="team.id")
    goalkeeper_player_id: Optional[int] = Field(default=None, foreign_key="player.id")


# -------------------------------
# Pydantic schemas for admin requests
# -------------------------------
class MatchCreate(BaseModel):
    home_team_id: int
    away_team_id: int
    matchday: Optional[int] = PydanticField(default=None, ge=1)
    kickoff_at: Optional[datetime] = None
    venue: Optional[str] = None

    @field_validator("kickoff_at")
    @classmethod
    def kickoff_to_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # Stored kickoffs are naive UTC; offset-aware input is converted, naive input is taken as UTC
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class MatchResultUpdate(BaseModel):
    status: MatchStatus
    home_score: int = PydanticField(default=0, ge=0)
    away_score: int = PydanticField(default=0, ge=0)


class MatchEventCreate(BaseModel):
    type: EventType = EventType.GOAL
    team_id: Optional[int] = None
    player_id: Optional[int] = None
    assist_player_id: Optional[int] = None
    minute: Optional[int] = PydanticField(default=None, ge=0)
    extra_minute: Optional[int] = PydanticField(default=None, ge=0)


class LineupUpsert(BaseModel):
    team_id: int
    goalkeeper_player_id: Optional[int] = None
