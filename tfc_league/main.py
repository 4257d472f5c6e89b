import logging

from fastapi import FastAPI
from sqlmodel import select, Session

from tfc_league.core.config import AUTO_SEED
from tfc_league.core.database import init_db, sync_engine
from tfc_league.models.tournament_model import Tournament
from tfc_league.seed.seed_all import seed_all

# --- Routers ---
from tfc_league.core.auth import router as auth_router
from tfc_league.routes.tournament_routes import router as tournament_router
from tfc_league.routes.season_routes import router as season_router
from tfc_league.routes.team_routes import router as team_router
from tfc_league.routes.match_routes import router as match_router
from tfc_league.routes.admin_routes import router as admin_router
from tfc_league.routes.telegram_routes import router as telegram_router
from tfc_league.routes.tma_routes import router as tma_router

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = FastAPI(title="TFC League")


@app.on_event("startup")
async def on_startup():
    # 1️⃣ Init DB tables async
    await init_db()

    # 2️⃣ Auto-seed DB in sync mode
    if not AUTO_SEED:
        return
    with Session(sync_engine) as session:
        has_data = session.exec(select(Tournament)).first() is not None
    if not has_data:
        print("🌱 No tournaments found. Auto-seeding database...")
        seed_all()
    else:
        print("✅ Database already seeded. Skipping auto-seed.")


@app.get("/ping")
def ping():
    return {"ok": True}


# Routers
app.include_router(auth_router, prefix="/auth", tags=["Auth"])
app.include_router(tournament_router, prefix="/tournaments", tags=["Tournaments"])
app.include_router(season_router, prefix="/seasons", tags=["Seasons"])
app.include_router(team_router, prefix="/teams", tags=["Teams"])
app.include_router(match_router, prefix="/matches", tags=["Matches"])
app.include_router(admin_router, prefix="/admin", tags=["Admin"])
app.include_router(telegram_router, prefix="/admin/telegram", tags=["Telegram"])
app.include_router(tma_router, prefix="/tma", tags=["Mini App"])
