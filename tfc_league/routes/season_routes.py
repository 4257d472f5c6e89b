# season_routes.py
# Public read endpoints addressed by season id (standings, stats, matchday grouping).

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from tfc_league.core.database import get_session
from tfc_league.core.standings import compute_standings, group_by_matchday
from tfc_league.models.tournament_model import Season
from tfc_league.routes.tournament_routes import serialize_match, build_season_stats
from tfc_league.services.season_data import load_season_matches

router = APIRouter()


def get_season_or_404(session: Session, season_id: int) -> Season:
    season = session.get(Season, season_id)
    if not season:
        raise HTTPException(status_code=404, detail="Season not found.")
    return season


@router.get("/{season_id}/standings")
def get_season_standings(season_id: int, session: Session = Depends(get_session)):
    season = get_season_or_404(session, season_id)
    return {"season": season, "standings": compute_standings(load_season_matches(session, season.id))}


@router.get("/{season_id}/stats")
def get_season_stats(season_id: int, session: Session = Depends(get_session)):
    season = get_season_or_404(session, season_id)
    return build_season_stats(session, season)


@router.get("/{season_id}/matchdays")
def get_season_matchdays(season_id: int, session: Session = Depends(get_session)):
    """Matches grouped by matchday; matches without a matchday come last under matchday=None."""
    season = get_season_or_404(session, season_id)
    groups = group_by_matchday(load_season_matches(session, season.id))
    return {
        "season": season,
        "matchdays": [
            {"matchday": matchday, "matches": [serialize_match(m) for m in matches]}
            for matchday, matches in groups
        ],
    }
