# season_data.py
# Loads one season's rows from the database and turns them into standings engine records.

from typing import Dict, List, Optional
from sqlmodel import Session, select
from sqlalchemy.orm import aliased

from tfc_league.core.standings import MatchRecord, GoalRecord, LineupRecord
from tfc_league.models.tournament_model import Season
from tfc_league.models.team_model import Team, Player
from tfc_league.models.match_model import Match, MatchEvent, MatchLineup, EventType


def get_latest_season(session: Session, tournament_id: int) -> Optional[Season]:
    """The season shown on public pages: most recently created one."""
    return session.exec(
        select(Season)
        .where(Season.tournament_id == tournament_id)
        .order_by(Season.created_at.desc(), Season.id.desc())
    ).first()


def load_season_matches(session: Session, season_id: int) -> List[MatchRecord]:
    """All matches of a season (any status) with team names, kickoff ascending, unscheduled last."""
    HomeTeam = aliased(Team)
    AwayTeam = aliased(Team)
    rows = session.exec(
        select(Match, HomeTeam.name, AwayTeam.name)
        .join(HomeTeam, Match.home_team_id == HomeTeam.id)
        .join(AwayTeam, Match.away_team_id == AwayTeam.id)
        .where(Match.season_id == season_id)
        .order_by(Match.kickoff_at.is_(None), Match.kickoff_at, Match.id)
    ).all()

    return [to_match_record(m, home_name, away_name) for m, home_name, away_name in rows]


def to_match_record(m: Match, home_name: Optional[str], away_name: Optional[str]) -> MatchRecord:
    return MatchRecord(
        id=m.id,
        home_team_id=m.home_team_id,
        away_team_id=m.away_team_id,
        home_team_name=home_name,
        away_team_name=away_name,
        home_score=m.home_score,
        away_score=m.away_score,
        status=m.status,
        kickoff_at=m.kickoff_at,
        matchday=m.matchday,
    )


def _player_names(session: Session, player_ids) -> Dict[int, str]:
    ids = {pid for pid in player_ids if pid is not None}
    if not ids:
        return {}
    players = session.exec(select(Player).where(Player.id.in_(ids))).all()
    return {p.id: p.full_name for p in players}


def load_goal_events(session: Session, match_ids: List[int]) -> List[GoalRecord]:
    """GOAL events for the given matches, in insertion order, with scorer/assist names."""
    if not match_ids:
        return []
    events = session.exec(
        select(MatchEvent)
        .where(MatchEvent.match_id.in_(match_ids), MatchEvent.type == EventType.GOAL.value)
        .order_by(MatchEvent.created_at, MatchEvent.id)
    ).all()

    names = _player_names(session, [e.player_id for e in events] + [e.assist_player_id for e in events])
    return [
        GoalRecord(
            match_id=e.match_id,
            team_id=e.team_id,
            player_id=e.player_id,
            player_name=names.get(e.player_id),
            assist_player_id=e.assist_player_id,
            assist_name=names.get(e.assist_player_id),
            minute=e.minute,
        )
        for e in events
    ]


def load_lineups(session: Session, match_ids: List[int]) -> List[LineupRecord]:
    if not match_ids:
        return []
    lineups = session.exec(
        select(MatchLineup).where(MatchLineup.match_id.in_(match_ids)).order_by(MatchLineup.id)
    ).all()

    names = _player_names(session, [l.goalkeeper_player_id for l in lineups])
    return [
        LineupRecord(
            match_id=l.match_id,
            team_id=l.team_id,
            goalkeeper_player_id=l.goalkeeper_player_id,
            goalkeeper_name=names.get(l.goalkeeper_player_id),
        )
        for l in lineups
    ]
