# team_model.py
# Defines Team and Player (roster entries)

from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field
from pydantic import BaseModel


class Team(SQLModel, table=True):
    """Database model representing an amateur football team."""
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    logo_url: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Player(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    team_id: Optional[int] = Field(default=None, foreign_key="team.id")
    full_name: str
    position: Optional[str] = None          # "GK", "DF", "MF", "FW"
    number: Optional[int] = None            # shirt number
    is_goalkeeper: bool = False


# -------------------------------
# Pydantic schemas for admin requests
# -------------------------------
class TeamCreate(BaseModel):
    name: str
    logo_url: Optional[str] = None


class PlayerCreate(BaseModel):
    full_name: str
    position: Optional[str] = None
    number: Optional[int] = None
    is_goalkeeper: bool = False
