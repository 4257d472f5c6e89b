from collections import Counter
from datetime import date, datetime

import pytest
from sqlmodel import select

from tfc_league.models import Season, SeasonTeam, Team, Tournament, Match, MatchEvent, MatchLineup
from tfc_league.services import generate_fixtures
from tfc_league.services.generate_fixtures import _round_dates, generate_fixtures_for_season, round_robin_pairings


@pytest.mark.parametrize("team_count", [2, 3, 4, 5, 6])
def test_double_round_robin_meets_everyone_home_and_away(team_count):
    teams = list(range(1, team_count + 1))
    rounds = round_robin_pairings(teams, double=True)
    fixtures = [pair for rnd in rounds for pair in rnd]

    assert len(fixtures) == team_count * (team_count - 1)
    assert len(set(fixtures)) == len(fixtures)
    for home, away in fixtures:
        assert home != away
        assert (away, home) in fixtures


def test_single_round_robin_and_byes():
    rounds = round_robin_pairings([1, 2, 3, 4, 5], double=False)
    assert len(rounds) == 5
    # one team sits out each round
    assert all(len(rnd) == 2 for rnd in rounds)
    assert Counter(t for rnd in rounds for pair in rnd for t in pair) == {t: 4 for t in range(1, 6)}


def test_no_team_plays_twice_in_a_round():
    for rnd in round_robin_pairings(list(range(8))):
        teams = [t for pair in rnd for t in pair]
        assert len(teams) == len(set(teams))


@pytest.fixture
def season(session):
    tournament = Tournament(title="Cup")
    session.add(tournament)
    session.commit()
    session.refresh(tournament)
    season = Season(tournament_id=tournament.id, title="2025", start_date=date(2025, 3, 3))
    session.add(season)
    session.commit()
    session.refresh(season)
    return season


def register(session, season, names):
    for name in names:
        team = Team(name=name)
        session.add(team)
        session.commit()
        session.refresh(team)
        session.add(SeasonTeam(season_id=season.id, team_id=team.id))
    session.commit()


def test_generate_fixtures_dates_and_matchdays(session, season):
    register(session, season, ["A", "B", "C", "D"])

    created = generate_fixtures_for_season(session, season.id)

    assert len(created) == 12
    assert sorted({m.matchday for m in created}) == [1, 2, 3, 4, 5, 6]
    # 2025-03-03 is a Monday: first round on Saturday 8th, 18:00 Tashkent = 13:00 UTC
    first = [m for m in created if m.matchday == 1]
    assert {m.kickoff_at for m in first} == {datetime(2025, 3, 8, 13, 0)}
    second = [m for m in created if m.matchday == 2]
    assert {m.kickoff_at for m in second} == {datetime(2025, 3, 9, 13, 0)}


def test_regenerating_replaces_scheduled_fixtures(session, season):
    register(session, season, ["A", "B", "C"])
    generate_fixtures_for_season(session, season.id)
    generate_fixtures_for_season(session, season.id, double=False)

    assert len(session.exec(select(Match).where(Match.season_id == season.id)).all()) == 3


def test_played_season_is_not_regenerated(session, season):
    register(session, season, ["A", "B"])
    created = generate_fixtures_for_season(session, season.id)
    created[0].status = "FINISHED"
    session.add(created[0])
    session.commit()

    with pytest.raises(ValueError, match="already has played matches"):
        generate_fixtures_for_season(session, season.id)


def test_needs_two_teams(session, season):
    register(session, season, ["Solo"])
    with pytest.raises(ValueError, match="Not enough teams"):
        generate_fixtures_for_season(session, season.id)
    with pytest.raises(ValueError, match="not found"):
        generate_fixtures_for_season(session, 999)


def test_round_dates_walk_weekday_numbers():
    # 2025-01-01 is a Wednesday
    assert _round_dates(date(2025, 1, 1), 3, [5, 6]) == [date(2025, 1, 4), date(2025, 1, 5), date(2025, 1, 11)]
    assert _round_dates(date(2025, 1, 1), 1, []) == [date(2025, 1, 4)]


def test_configured_weekdays_are_case_insensitive(session, season, monkeypatch):
    monkeypatch.setattr(generate_fixtures, "FIXTURE_WEEKDAYS", ["wed"])
    register(session, season, ["A", "B"])

    created = generate_fixtures_for_season(session, season.id)
    assert [m.kickoff_at.date() for m in created] == [date(2025, 3, 5), date(2025, 3, 12)]


def test_unknown_weekday_is_a_value_error(session, season, monkeypatch):
    monkeypatch.setattr(generate_fixtures, "FIXTURE_WEEKDAYS", ["Samstag"])
    register(session, season, ["A", "B"])
    with pytest.raises(ValueError, match="Unknown fixture weekday"):
        generate_fixtures_for_season(session, season.id)


def test_regenerating_drops_events_and_lineups_of_replaced_matches(session, season):
    register(session, season, ["A", "B", "C"])
    created = generate_fixtures_for_season(session, season.id)
    last = created[-1]
    session.add(MatchEvent(match_id=last.id, team_id=last.home_team_id, minute=3))
    session.add(MatchLineup(match_id=last.id, team_id=last.home_team_id))
    session.commit()

    generate_fixtures_for_season(session, season.id)

    assert session.exec(select(MatchEvent)).all() == []
    assert session.exec(select(MatchLineup)).all() == []
