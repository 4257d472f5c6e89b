# tournament_model.py
# Defines Tournament, Season (one competition instance of a tournament) and SeasonTeam (registration link)

from typing import Optional
from datetime import datetime, date
from sqlmodel import SQLModel, Field
from pydantic import BaseModel


class Tournament(SQLModel, table=True):
    """A competition (league or cup) run by the organisers. Holds many seasons."""
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    format: str = Field(default="league")          # "league" | "cup"
    status: str = Field(default="active")          # "draft" | "active" | "archived"
    logo_url: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Season(SQLModel, table=True):
    """
    Represents a specific season of a tournament.
    The latest season (by created_at) is the one shown on public pages.
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    tournament_id: int = Field(foreign_key="tournament.id")
    title: str

    start_date: Optional[date] = None
    end_date: Optional[date] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)


class SeasonTeam(SQLModel, table=True):
    """Registers a team into a season (used for fixture generation and team pages)."""
    id: Optional[int] = Field(default=None, primary_key=True)
    season_id: int = Field(foreign_key="season.id")
    team_id: int = Field(foreign_key="team.id")


# -------------------------------
# Pydantic schemas for admin requests
# -------------------------------
class TournamentCreate(BaseModel):
    title: str
    format: str = "league"
    status: str = "active"
    logo_url: Optional[str] = None


class TournamentStatusUpdate(BaseModel):
    status: str


class SeasonCreate(BaseModel):
    title: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
