from dataclasses import replace
from datetime import datetime, timezone

from tfc_league.core.standings import (
    MatchRecord,
    MatchStatus,
    compute_standings,
    compute_form,
    group_by_matchday,
)

FINISHED = MatchStatus.FINISHED
SCHEDULED = MatchStatus.SCHEDULED


def match(mid, home, away, hs=0, as_=0, status=FINISHED, kickoff=None, matchday=None, names=None):
    names = names or {}
    return MatchRecord(
        id=mid,
        home_team_id=home,
        away_team_id=away,
        home_team_name=names.get(home, home),
        away_team_name=names.get(away, away),
        home_score=hs,
        away_score=as_,
        status=status,
        kickoff_at=kickoff,
        matchday=matchday,
    )


def as_tuple(row):
    return (row.team_id, row.played, row.wins, row.draws, row.losses,
            row.goals_for, row.goals_against, row.goal_diff, row.points)


def test_empty_input_gives_empty_table():
    assert compute_standings([]) == []


def test_two_match_scenario():
    matches = [
        match(1, "A", "B", 2, 1),
        match(2, "B", "A", 0, 0),
    ]
    table = compute_standings(matches)

    assert [r.team_id for r in table] == ["A", "B"]
    assert as_tuple(table[0]) == ("A", 2, 1, 1, 0, 2, 1, 1, 4)
    assert as_tuple(table[1]) == ("B", 2, 0, 1, 1, 1, 2, -1, 1)


def test_teams_without_finished_matches_still_listed():
    matches = [
        match(1, "A", "B", 3, 0),
        match(2, "C", "D", status=SCHEDULED),
        match(3, "A", "C", 5, 5, status=MatchStatus.LIVE),
    ]
    table = compute_standings(matches)

    assert {r.team_id for r in table} == {"A", "B", "C", "D"}
    for team in ("C", "D"):
        row = next(r for r in table if r.team_id == team)
        assert (row.played, row.points, row.goals_for, row.form) == (0, 0, 0, [])


def test_points_and_goal_difference_invariants():
    matches = [
        match(1, "A", "B", 2, 2),
        match(2, "B", "C", 1, 0),
        match(3, "C", "A", 4, 1),
        match(4, "A", "B", 0, 3),
        match(5, "C", "B", 1, 1),
    ]
    for row in compute_standings(matches):
        assert row.points == 3 * row.wins + row.draws
        assert row.goal_diff == row.goals_for - row.goals_against
        assert row.played == row.wins + row.draws + row.losses


def test_tie_breaks_points_then_goal_diff_then_goals_for_then_name():
    matches = [
        # Zeta and Alpha both win 1-0, Beta wins 3-2 (same GD, more GF), Gamma wins 2-0 (better GD)
        match(1, "zeta", "l1", 1, 0),
        match(2, "alpha", "l2", 1, 0),
        match(3, "beta", "l3", 3, 2),
        match(4, "gamma", "l4", 2, 0),
    ]
    names = {"zeta": "Zeta", "alpha": "Alpha", "beta": "Beta", "gamma": "Gamma"}
    matches = [
        replace(m, home_team_name=names[m.home_team_id]) for m in matches
    ]
    order = [r.team_name for r in compute_standings(matches)][:4]
    assert order == ["Gamma", "Beta", "Alpha", "Zeta"]


def test_result_is_independent_of_input_order():
    matches = [
        match(1, "A", "B", 1, 0, kickoff=datetime(2025, 1, 1)),
        match(2, "C", "A", 2, 2, kickoff=datetime(2025, 1, 8)),
        match(3, "B", "C", 0, 1, kickoff=datetime(2025, 1, 15)),
        match(4, "A", "D", status=SCHEDULED),
    ]
    first = compute_standings(matches)
    second = compute_standings(list(reversed(matches)))
    again = compute_standings(matches)

    assert [r.model_dump() for r in first] == [r.model_dump() for r in second]
    assert [r.model_dump() for r in first] == [r.model_dump() for r in again]


def test_first_seen_name_wins_for_conflicting_names():
    matches = [
        match(2, "A", "B", 1, 0, kickoff=datetime(2025, 2, 1), names={"A": "Renamed"}),
        match(1, "A", "B", 1, 0, kickoff=datetime(2025, 1, 1), names={"A": "Original"}),
    ]
    row = next(r for r in compute_standings(matches) if r.team_id == "A")
    assert row.team_name == "Original"


def test_null_scores_and_missing_teams_are_tolerated():
    matches = [
        MatchRecord(id=1, home_team_id="A", away_team_id="B", home_score=None, away_score=None, status=FINISHED),
        MatchRecord(id=2, home_team_id=None, away_team_id="B", home_score=1, away_score=0, status=FINISHED),
    ]
    table = compute_standings(matches)
    assert [(r.team_id, r.played, r.draws) for r in table] == [("A", 1, 1), ("B", 1, 1)]


def test_standings_form_keeps_last_five():
    matches = [match(i, "A", "B", i % 3, 1, kickoff=datetime(2025, 1, i)) for i in range(1, 8)]
    row = next(r for r in compute_standings(matches) if r.team_id == "A")
    # scores for i=3..7: 0-1, 1-1, 2-1, 0-1, 1-1
    assert row.form == ["L", "D", "W", "L", "D"]


# -------------------------------
# Form
# -------------------------------
def test_form_is_chronological_and_capped():
    matches = [
        match(1, "A", "B", 1, 0, kickoff=datetime(2025, 3, 1)),
        match(2, "B", "A", 2, 0, kickoff=datetime(2025, 3, 8)),
        match(3, "A", "C", 1, 1, kickoff=datetime(2025, 3, 15)),
        match(4, "C", "A", 0, 3, kickoff=datetime(2025, 3, 22)),
        match(5, "A", "B", 0, 1, kickoff=datetime(2025, 3, 29)),
        match(6, "A", "C", 2, 0, kickoff=datetime(2025, 4, 5)),
    ]
    # shuffled input, same answer
    form = compute_form(list(reversed(matches)), "A")
    assert form == ["L", "D", "W", "L", "W"]
    assert len(form) == 5


def test_form_ignores_unfinished_matches_and_does_not_pad():
    matches = [
        match(1, "A", "B", 2, 0, kickoff=datetime(2025, 3, 1)),
        match(2, "A", "B", 0, 5, status=MatchStatus.LIVE, kickoff=datetime(2025, 3, 2)),
        match(3, "B", "A", status=SCHEDULED, kickoff=datetime(2025, 3, 3)),
    ]
    assert compute_form(matches, "A") == ["W"]
    assert compute_form(matches, "B") == ["L"]
    assert compute_form(matches, "Z") == []
    assert compute_form([], "A") == []


def test_form_without_kickoff_sorts_first():
    matches = [
        match(1, "A", "B", 1, 0, kickoff=datetime(2025, 3, 1, tzinfo=timezone.utc)),
        match(2, "A", "B", 0, 1, kickoff=None),
    ]
    assert compute_form(matches, "A") == ["L", "W"]


def test_group_by_matchday_orders_rounds_and_puts_unnumbered_last():
    matches = [
        match(1, "A", "B", status=SCHEDULED, matchday=2),
        match(2, "C", "D", status=SCHEDULED, matchday=None),
        match(3, "A", "C", status=SCHEDULED, matchday=1),
        match(4, "B", "D", status=SCHEDULED, matchday=1),
    ]
    groups = group_by_matchday(matches)
    assert [md for md, _ in groups] == [1, 2, None]
    assert [m.id for m in groups[0][1]] == [3, 4]
