# tfc_league/models/__init__.py
# Centralized imports for all database models and schemas

# Tournament and season
from .tournament_model import (
    Tournament, Season, SeasonTeam, TournamentCreate, TournamentStatusUpdate, SeasonCreate
)

# Team and roster
from .team_model import Team, Player, TeamCreate, PlayerCreate

# Match, events and lineups
from .match_model import (
    Match, MatchEvent, MatchLineup, EventType,
    MatchCreate, MatchResultUpdate, MatchEventCreate, LineupUpsert
)

# Users
from .user_model import AppUser, AdminRegister, AdminLogin, ROLE_USER, ROLE_ADMIN
