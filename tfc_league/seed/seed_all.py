# seed_all.py
# Populates an empty database with a demo tournament: one season, six teams with rosters,
# a generated fixture list and the first two matchdays played.

import random
from datetime import datetime, timedelta

from sqlmodel import Session, select

from tfc_league.core.database import sync_engine
from tfc_league.core.standings import MatchStatus
from tfc_league.models.tournament_model import Tournament, Season, SeasonTeam
from tfc_league.models.team_model import Team, Player
from tfc_league.models.match_model import Match, MatchEvent, MatchLineup, EventType
from tfc_league.services.generate_fixtures import generate_fixtures_for_season

DEMO_TEAMS = ["Chilonzor United", "Yunusobod FC", "Sergeli Stars", "Olmazor City", "Mirobod Athletic", "Shayxontohur"]
PLAYED_MATCHDAYS = 2
SQUAD_SIZE = 8


def _seed_roster(session: Session, team: Team) -> list:
    players = []
    for number in range(1, SQUAD_SIZE + 1):
        player = Player(
            team_id=team.id,
            full_name=f"{team.name.split()[0]} Player {number}",
            position="GK" if number == 1 else random.choice(["DF", "MF", "FW"]),
            number=number,
            is_goalkeeper=(number == 1),
        )
        session.add(player)
        players.append(player)
    session.commit()
    for p in players:
        session.refresh(p)
    return players


def _play_match(session: Session, match: Match, rosters: dict, rng: random.Random) -> None:
    """Random result with matching GOAL events and both goalkeepers in the lineup."""
    match.home_score = rng.randint(0, 4)
    match.away_score = rng.randint(0, 3)
    match.status = MatchStatus.FINISHED.value

    for team_id, goals in ((match.home_team_id, match.home_score), (match.away_team_id, match.away_score)):
        squad = rosters[team_id]
        session.add(MatchLineup(match_id=match.id, team_id=team_id, goalkeeper_player_id=squad[0].id))
        outfield = squad[1:]
        for _ in range(goals):
            scorer = rng.choice(outfield)
            assist = rng.choice([p for p in outfield if p.id != scorer.id] + [None])
            session.add(MatchEvent(
                match_id=match.id,
                type=EventType.GOAL.value,
                team_id=team_id,
                player_id=scorer.id,
                assist_player_id=assist.id if assist else None,
                minute=rng.randint(1, 90),
            ))
    session.add(match)


def seed_all(seed: int = 7):
    print("\n🌱 Starting demo database seeding...\n")
    rng = random.Random(seed)

    with Session(sync_engine) as session:
        if session.exec(select(Tournament)).first():
            print("✅ Database already seeded. Skipping.")
            return

        print("➡️  Step 1: Seeding tournament and season...")
        tournament = Tournament(title="TFC Amateur League", format="league", status="active")
        session.add(tournament)
        session.commit()
        session.refresh(tournament)

        start = (datetime.utcnow() - timedelta(days=14)).date()
        season = Season(tournament_id=tournament.id, title=f"Season {start.year}", start_date=start)
        session.add(season)
        session.commit()
        session.refresh(season)

        print("➡️  Step 2: Seeding teams and rosters...")
        rosters = {}
        for name in DEMO_TEAMS:
            team = Team(name=name)
            session.add(team)
            session.commit()
            session.refresh(team)
            session.add(SeasonTeam(season_id=season.id, team_id=team.id))
            rosters[team.id] = _seed_roster(session, team)
        session.commit()

        print("➡️  Step 3: Generating fixtures...")
        matches = generate_fixtures_for_season(session, season.id, start=start)

        print(f"➡️  Step 4: Playing the first {PLAYED_MATCHDAYS} matchdays...")
        for match in matches:
            if match.matchday <= PLAYED_MATCHDAYS:
                _play_match(session, match, rosters, rng)
        session.commit()

    print("\n✅ Demo seeding complete.\n")


if __name__ == "__main__":
    seed_all()
