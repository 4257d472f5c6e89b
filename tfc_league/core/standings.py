# standings.py
# Pure computation of league tables, team form and player leaderboards.
#
# Everything here works on plain records handed in by the caller (see
# services/season_data.py). No database access, no caching: every call builds
# its output from scratch, so the same input always gives the same table.

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, Field

from tfc_league.core.config import FORM_LENGTH, LEADERBOARD_LIMIT


class MatchStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    LIVE = "LIVE"
    FINISHED = "FINISHED"


WIN, DRAW, LOSS = "W", "D", "L"

# Points awarded per result
POINTS_WIN = 3
POINTS_DRAW = 1

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


# -------------------------------
# Input records
# -------------------------------
@dataclass(frozen=True)
class MatchRecord:
    """One match as the engine sees it. Scores only count once FINISHED."""
    id: Any
    home_team_id: Optional[Any]
    away_team_id: Optional[Any]
    home_team_name: Optional[str] = None
    away_team_name: Optional[str] = None
    home_score: Optional[int] = 0
    away_score: Optional[int] = 0
    status: str = MatchStatus.SCHEDULED
    kickoff_at: Optional[datetime] = None
    matchday: Optional[int] = None


@dataclass(frozen=True)
class GoalRecord:
    match_id: Any
    team_id: Optional[Any] = None
    player_id: Optional[Any] = None
    player_name: Optional[str] = None
    assist_player_id: Optional[Any] = None
    assist_name: Optional[str] = None
    minute: Optional[int] = None


@dataclass(frozen=True)
class LineupRecord:
    match_id: Any
    team_id: Optional[Any]
    goalkeeper_player_id: Optional[Any] = None
    goalkeeper_name: Optional[str] = None


# -------------------------------
# Output rows
# -------------------------------
class StandingRow(BaseModel):
    team_id: Any
    team_name: str
    played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_for: int = 0
    goals_against: int = 0
    goal_diff: int = 0
    points: int = 0
    form: List[str] = Field(default_factory=list)  # oldest first, most recent last


class ScorerRow(BaseModel):
    player_id: Any
    name: str
    goals: int = 0


class AssistRow(BaseModel):
    player_id: Any
    name: str
    assists: int = 0


class CleanSheetRow(BaseModel):
    goalkeeper_id: Any
    name: str
    count: int = 0


# ---------------------------------------------
# Helpers
# ---------------------------------------------
def is_finished(match: MatchRecord) -> bool:
    return match.status == MatchStatus.FINISHED


def _score(value: Optional[int]) -> int:
    return int(value or 0)


def _kickoff_timestamp(kickoff_at: Optional[datetime]) -> float:
    """Sortable kickoff time. Missing kickoff sorts first (epoch 0); naive datetimes are taken as UTC."""
    if kickoff_at is None:
        return 0.0
    if kickoff_at.tzinfo is None:
        kickoff_at = kickoff_at.replace(tzinfo=timezone.utc)
    return (kickoff_at - _EPOCH).total_seconds()


def chronological_key(match: MatchRecord) -> Tuple[float, int, str]:
    return (_kickoff_timestamp(match.kickoff_at), match.matchday or 0, str(match.id))


def result_letter(home_score: Optional[int], away_score: Optional[int], is_home: bool) -> str:
    """W/D/L for one side of a match."""
    home, away = _score(home_score), _score(away_score)
    if home == away:
        return DRAW
    home_won = home > away
    if is_home:
        return WIN if home_won else LOSS
    return LOSS if home_won else WIN


def _has_teams(match: MatchRecord) -> bool:
    return match.home_team_id is not None and match.away_team_id is not None


def _apply_result(row: StandingRow, scored: int, conceded: int) -> None:
    row.played += 1
    row.goals_for += scored
    row.goals_against += conceded
    if scored > conceded:
        row.wins += 1
        row.points += POINTS_WIN
    elif scored == conceded:
        row.draws += 1
        row.points += POINTS_DRAW
    else:
        row.losses += 1


def standing_sort_key(row: StandingRow):
    """Points desc, goal difference desc, goals for desc, then team name."""
    return (-row.points, -row.goal_diff, -row.goals_for, row.team_name.lower(), row.team_name, str(row.team_id))


# =========================================
# STANDINGS
# =========================================
def compute_standings(matches: Iterable[MatchRecord], form_length: int = FORM_LENGTH) -> List[StandingRow]:
    """
    Build the ranked league table for one season.

    - Every team appearing as home or away in any match gets a row, even with
      no finished match yet (all zeros).
    - Only FINISHED matches change the numbers.
    - A team id seen under different names keeps the first name found in
      chronological order.
    """
    ordered = sorted(matches, key=chronological_key)

    table: Dict[object, StandingRow] = {}

    def ensure(team_id, team_name) -> StandingRow:
        row = table.get(team_id)
        if row is None:
            row = StandingRow(team_id=team_id, team_name=team_name or str(team_id))
            table[team_id] = row
        return row

    # 1. Team universe (all statuses)
    for m in ordered:
        if not _has_teams(m):
            continue
        ensure(m.home_team_id, m.home_team_name)
        ensure(m.away_team_id, m.away_team_name)

    # 2. Results
    for m in ordered:
        if not is_finished(m) or not _has_teams(m):
            continue
        home = table[m.home_team_id]
        away = table[m.away_team_id]
        hs, as_ = _score(m.home_score), _score(m.away_score)

        _apply_result(home, hs, as_)
        _apply_result(away, as_, hs)

        home.form.append(result_letter(hs, as_, True))
        away.form.append(result_letter(hs, as_, False))
        if len(home.form) > form_length:
            home.form = home.form[-form_length:]
        if len(away.form) > form_length:
            away.form = away.form[-form_length:]

    # 3. Goal difference
    for row in table.values():
        row.goal_diff = row.goals_for - row.goals_against

    # 4. Rank
    return sorted(table.values(), key=standing_sort_key)


# =========================================
# FORM
# =========================================
def compute_form(matches: Iterable[MatchRecord], team_id, length: int = FORM_LENGTH) -> List[str]:
    """Last `length` results of a team (W/D/L), oldest first, most recent last."""
    played = [
        m for m in matches
        if is_finished(m) and team_id is not None and team_id in (m.home_team_id, m.away_team_id)
    ]
    played.sort(key=chronological_key)

    letters = [result_letter(m.home_score, m.away_score, m.home_team_id == team_id) for m in played]
    return letters[-length:] if length > 0 else []


# =========================================
# LEADERBOARDS
# =========================================
def _count_by(events: Iterable[GoalRecord], id_attr: str, name_attr: str) -> List[Tuple[object, str, int]]:
    """Counts per player id, keeping the order in which players first appear."""
    counts: Dict[object, List] = {}
    for event in events:
        player_id = getattr(event, id_attr)
        if player_id is None:
            continue
        entry = counts.get(player_id)
        if entry is None:
            entry = counts[player_id] = [getattr(event, name_attr) or "Unknown", 0]
        entry[1] += 1

    # sorted() is stable: equal counts stay in first-appearance order
    ranked = sorted(counts.items(), key=lambda item: -item[1][1])
    return [(player_id, name, count) for player_id, (name, count) in ranked]


def _cap(rows: list, limit: Optional[int]) -> list:
    if limit is None:
        return rows
    return rows[:max(limit, 0)]


def compute_top_scorers(goal_events: Iterable[GoalRecord], limit: Optional[int] = LEADERBOARD_LIMIT) -> List[ScorerRow]:
    rows = [
        ScorerRow(player_id=pid, name=name, goals=count)
        for pid, name, count in _count_by(goal_events, "player_id", "player_name")
    ]
    return _cap(rows, limit)


def compute_top_assists(goal_events: Iterable[GoalRecord], limit: Optional[int] = LEADERBOARD_LIMIT) -> List[AssistRow]:
    rows = [
        AssistRow(player_id=pid, name=name, assists=count)
        for pid, name, count in _count_by(goal_events, "assist_player_id", "assist_name")
    ]
    return _cap(rows, limit)


def compute_clean_sheets(
    matches: Iterable[MatchRecord],
    lineups: Iterable[LineupRecord],
    limit: Optional[int] = None,
) -> List[CleanSheetRow]:
    """
    Clean sheets per goalkeeper of record.

    A FINISHED match where a side conceded nothing credits that side's
    goalkeeper from the lineup. Sides without a lineup entry (or without a
    goalkeeper in it) are skipped.
    """
    lineup_index: Dict[Tuple[object, object], LineupRecord] = {}
    for entry in lineups:
        if entry.team_id is None:
            continue
        lineup_index[(entry.match_id, entry.team_id)] = entry

    counts: Dict[object, CleanSheetRow] = {}

    def credit(match_id, team_id):
        entry = lineup_index.get((match_id, team_id))
        if entry is None or entry.goalkeeper_player_id is None:
            return
        row = counts.get(entry.goalkeeper_player_id)
        if row is None:
            row = counts[entry.goalkeeper_player_id] = CleanSheetRow(
                goalkeeper_id=entry.goalkeeper_player_id,
                name=entry.goalkeeper_name or "Unknown",
            )
        row.count += 1

    for m in matches:
        if not is_finished(m) or not _has_teams(m):
            continue
        # home conceded = away score
        if _score(m.away_score) == 0:
            credit(m.id, m.home_team_id)
        # away conceded = home score
        if _score(m.home_score) == 0:
            credit(m.id, m.away_team_id)

    ranked = sorted(counts.values(), key=lambda row: -row.count)
    return _cap(ranked, limit)


# =========================================
# GROUPING
# =========================================
def group_by_matchday(matches: Iterable[MatchRecord]) -> List[Tuple[Optional[int], List[MatchRecord]]]:
    """Matches grouped per matchday (ascending, unnumbered last), each group in kickoff order."""
    groups: Dict[Optional[int], List[MatchRecord]] = {}
    for m in sorted(matches, key=chronological_key):
        groups.setdefault(m.matchday, []).append(m)
    return sorted(groups.items(), key=lambda item: (item[0] is None, item[0] or 0))
