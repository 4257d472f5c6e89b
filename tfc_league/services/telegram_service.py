# telegram_service.py
# Announcement texts (HTML parse mode) and delivery through the Telegram Bot API.

import html
import logging
from datetime import datetime
from typing import Iterable, List, Optional

import httpx
import pytz

from tfc_league.core.config import (
    TELEGRAM_API_BASE,
    TELEGRAM_BOT_TOKEN,
    TELEGRAM_CHAT_ID,
    TELEGRAM_TIMEOUT_SECONDS,
    DEFAULT_TZ,
)
from tfc_league.core.standings import MatchRecord, MatchStatus, StandingRow, ScorerRow

logger = logging.getLogger(__name__)

STANDINGS_MAX_ROWS = 24
SUMMARY_TABLE_ROWS = 5
SUMMARY_SCORERS = 5


class TelegramError(Exception):
    """Telegram refused or failed a request. `payload` holds the API answer when there was one."""

    def __init__(self, message: str, payload: Optional[dict] = None):
        super().__init__(message)
        self.payload = payload


class TelegramConfigError(TelegramError):
    """Bot token or target chat is not configured."""


# ============================
# Formatting
# ============================
def esc(text) -> str:
    return html.escape(str(text or ""), quote=True)


def format_kickoff(kickoff_at: Optional[datetime], tz_name: str = DEFAULT_TZ) -> str:
    """Kickoff rendered in the league's timezone (stored values are UTC)."""
    if kickoff_at is None:
        return "-"
    if kickoff_at.tzinfo is None:
        kickoff_at = pytz.utc.localize(kickoff_at)
    return kickoff_at.astimezone(pytz.timezone(tz_name)).strftime("%d.%m %H:%M")


def format_standings_message(title: str, standings: List[StandingRow], max_rows: int = STANDINGS_MAX_ROWS) -> str:
    """
    Standings as a monospace table:
        #  Team             P  GD  PTS
    """
    name_width = min(max([len(r.team_name) for r in standings[:max_rows]] + [4]), 18)
    lines = [f"{'#':>2} {'Team':<{name_width}} {'P':>2} {'GD':>4} {'PTS':>3}"]
    for pos, row in enumerate(standings[:max_rows], start=1):
        name = row.team_name[:name_width]
        gd = f"{row.goal_diff:+d}" if row.goal_diff else "0"
        lines.append(f"{pos:>2} {name:<{name_width}} {row.played:>2} {gd:>4} {row.points:>3}")

    body = "\n".join(esc(line) for line in lines) if standings else "No teams yet."
    return f"<b>🏆 {esc(title)}</b>\n<pre>{body}</pre>"


def _match_line(m: MatchRecord) -> str:
    home, away = esc(m.home_team_name), esc(m.away_team_name)
    if m.status in (MatchStatus.LIVE, MatchStatus.FINISHED):
        score = f"<b>{int(m.home_score or 0)}:{int(m.away_score or 0)}</b>"
        suffix = " 🔴" if m.status == MatchStatus.LIVE else ""
        return f"{home} {score} {away}{suffix}"
    return f"{home} vs {away} · ⏰ {esc(format_kickoff(m.kickoff_at))}"


def format_matchday_message(
    title: str,
    matchday: int,
    matches: Iterable[MatchRecord],
    standings: List[StandingRow],
    scorers: List[ScorerRow],
) -> str:
    """Round summary: results/fixtures of the round, top of the table and top scorers."""
    parts = [f"<b>⚽ {esc(title)} · Matchday {matchday}</b>", ""]

    match_lines = [_match_line(m) for m in matches]
    parts.extend(match_lines or ["No matches in this round."])

    if standings:
        parts += ["", "<b>📊 Table</b>"]
        for pos, row in enumerate(standings[:SUMMARY_TABLE_ROWS], start=1):
            parts.append(f"{pos}. {esc(row.team_name)} · {row.points} pts ({row.played} pl, GD {row.goal_diff:+d})")

    if scorers:
        parts += ["", "<b>🥇 Top scorers</b>"]
        for pos, row in enumerate(scorers[:SUMMARY_SCORERS], start=1):
            parts.append(f"{pos}. {esc(row.name)} · {row.goals}")

    return "\n".join(parts)


# ============================
# Delivery
# ============================
async def send_message(
    text: str,
    chat_id: Optional[str] = None,
    parse_mode: str = "HTML",
    disable_web_page_preview: bool = True,
    bot_token: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> dict:
    """
    Calls sendMessage and returns Telegram's `result` object.
    Raises ValueError for empty text. TelegramConfigError means token or chat is missing;
    TelegramError means Telegram could not be reached or rejected the call.
    """
    text = (text or "").strip()
    if not text:
        raise ValueError("Message text is empty.")

    token = bot_token or TELEGRAM_BOT_TOKEN
    if not token:
        raise TelegramConfigError("TELEGRAM_BOT_TOKEN is not configured.")
    chat_id = str(chat_id or TELEGRAM_CHAT_ID).strip()
    if not chat_id:
        raise TelegramConfigError("TELEGRAM_CHAT_ID is not configured.")

    body = {
        "chat_id": chat_id,
        "text": text,
        "parse_mode": parse_mode,
        "disable_web_page_preview": disable_web_page_preview,
    }
    url = f"{TELEGRAM_API_BASE}/bot{token}/sendMessage"

    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=TELEGRAM_TIMEOUT_SECONDS)
    try:
        response = await client.post(url, json=body)
    except httpx.HTTPError as e:
        logger.warning("Telegram sendMessage failed for chat %s: %s", chat_id, e)
        raise TelegramError(f"Telegram request failed: {e}") from e
    finally:
        if owns_client:
            await client.aclose()

    try:
        payload = response.json()
    except ValueError:
        payload = None

    accepted = isinstance(payload, dict) and payload.get("ok")
    if response.status_code != 200 or not accepted:
        logger.warning("Telegram rejected sendMessage for chat %s: %s", chat_id, payload)
        raise TelegramError("Telegram error", payload)

    logger.info("Telegram message sent to chat %s", chat_id)
    return payload.get("result") or {}
