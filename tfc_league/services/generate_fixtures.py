# generate_fixtures.py
# Service for generating season fixtures (double round-robin) for the teams registered in a season.

import logging
from datetime import date, datetime, timedelta
from typing import List, Optional

import pytz
from sqlmodel import Session, select

from tfc_league.core.config import DEFAULT_TZ, FIXTURE_WEEKDAYS, FIXTURE_KICKOFF_TIME, parse_weekdays
from tfc_league.core.standings import MatchStatus
from tfc_league.models.tournament_model import Season, SeasonTeam
from tfc_league.models.match_model import Match, MatchEvent, MatchLineup

logger = logging.getLogger(__name__)


def round_robin_pairings(team_ids: List[int], double: bool = True) -> List[List[tuple]]:
    """
    Pairings per round using the "circle method".
    - Odd team counts get a dummy "bye" (None) which is skipped.
    - With double=True a second cycle repeats the rounds with home/away swapped.
    """
    ids = list(team_ids)
    if len(ids) % 2 != 0:
        ids.append(None)  # bye

    half = len(ids) // 2
    cycles = 2 if double else 1
    rounds = []

    for cycle in range(cycles):
        rotated = ids[:]
        for _ in range(len(ids) - 1):
            round_fixtures = []
            for i in range(half):
                home = rotated[i]
                away = rotated[-i - 1]

                if home is None or away is None:
                    continue  # Skip bye

                # Swap home/away in second cycle
                if cycle == 1:
                    home, away = away, home

                round_fixtures.append((home, away))
            rounds.append(round_fixtures)

            # Rotate teams (keep the first team fixed)
            rotated = [rotated[0]] + [rotated[-1]] + rotated[1:-1]

    return rounds


def _round_dates(start: date, count: int, weekdays: List[int]) -> List[date]:
    """One date per round, walking forward over the given weekdays (date.weekday() numbers)."""
    weekdays = set(weekdays) or {5}  # Saturday
    dates = []
    current = start
    while len(dates) < count:
        if current.weekday() in weekdays:
            dates.append(current)
        current += timedelta(days=1)
    return dates


def generate_fixtures_for_season(
    session: Session,
    season_id: int,
    start: Optional[date] = None,
    double: bool = True,
) -> List[Match]:
    """
    Generates fixtures for a season from its registered teams.
    - Double round-robin (home & away) by default
    - One round per configured weekday, kickoff at FIXTURE_KICKOFF_TIME local time (stored in UTC)
    - Existing SCHEDULED fixtures are replaced; a season with started/finished matches is left alone
    """
    season = session.get(Season, season_id)
    if not season:
        raise ValueError(f"Season {season_id} not found.")

    team_ids = [
        st.team_id for st in session.exec(
            select(SeasonTeam).where(SeasonTeam.season_id == season_id).order_by(SeasonTeam.id)
        ).all()
    ]
    if len(team_ids) < 2:
        raise ValueError(f"Not enough teams in {season.title} to generate fixtures.")

    weekdays = parse_weekdays(FIXTURE_WEEKDAYS)

    existing = session.exec(select(Match).where(Match.season_id == season_id)).all()
    if any(m.status != MatchStatus.SCHEDULED.value for m in existing):
        raise ValueError(f"{season.title} already has played matches; fixtures were not regenerated.")
    for match in existing:
        # events and lineups go with their match
        for event in session.exec(select(MatchEvent).where(MatchEvent.match_id == match.id)).all():
            session.delete(event)
        for lineup in session.exec(select(MatchLineup).where(MatchLineup.match_id == match.id)).all():
            session.delete(lineup)
        session.delete(match)
    session.commit()

    rounds = round_robin_pairings(team_ids, double=double)

    # =====================================
    # ASSIGN MATCH DATES
    # =====================================
    tz = pytz.timezone(DEFAULT_TZ)
    first_day = start or season.start_date or datetime.utcnow().date()
    dates = _round_dates(first_day, len(rounds), weekdays)

    created = []
    for matchday, (pairings, day) in enumerate(zip(rounds, dates), start=1):
        local_kickoff = tz.localize(datetime(day.year, day.month, day.day, *FIXTURE_KICKOFF_TIME))
        kickoff_utc = local_kickoff.astimezone(pytz.utc).replace(tzinfo=None)
        for home_id, away_id in pairings:
            match = Match(
                season_id=season_id,
                home_team_id=home_id,
                away_team_id=away_id,
                matchday=matchday,
                kickoff_at=kickoff_utc,
            )
            session.add(match)
            created.append(match)

    session.commit()
    for match in created:
        session.refresh(match)

    logger.info("Fixtures generated for %s (%d matches, %d rounds)", season.title, len(created), len(rounds))
    return created
