# match_routes.py
# Public match page: score, teams, season/tournament and the event timeline.

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from tfc_league.core.database import get_session
from tfc_league.models.tournament_model import Tournament, Season
from tfc_league.models.team_model import Team, Player
from tfc_league.models.match_model import Match, MatchEvent, MatchLineup

router = APIRouter()


@router.get("/{match_id}")
def get_match(match_id: int, session: Session = Depends(get_session)):
    match = session.get(Match, match_id)
    if not match:
        raise HTTPException(status_code=404, detail="Match not found.")

    season = session.get(Season, match.season_id)
    tournament = session.get(Tournament, season.tournament_id) if season else None

    # Events ordered by minute (unknown minute first), then insertion
    events = session.exec(
        select(MatchEvent)
        .where(MatchEvent.match_id == match_id)
        .order_by(MatchEvent.minute.is_not(None), MatchEvent.minute, MatchEvent.extra_minute, MatchEvent.created_at, MatchEvent.id)
    ).all()

    player_ids = {e.player_id for e in events} | {e.assist_player_id for e in events}
    player_ids.discard(None)
    names = {}
    if player_ids:
        names = {p.id: p.full_name for p in session.exec(select(Player).where(Player.id.in_(player_ids))).all()}

    lineups = session.exec(select(MatchLineup).where(MatchLineup.match_id == match_id)).all()

    return {
        "match": match,
        "home_team": session.get(Team, match.home_team_id),
        "away_team": session.get(Team, match.away_team_id),
        "season": season,
        "tournament": tournament,
        "events": [
            {
                **e.model_dump(),
                "player_name": names.get(e.player_id),
                "assist_name": names.get(e.assist_player_id),
            }
            for e in events
        ],
        "lineups": lineups,
    }
