# tg_init_data.py
# Verification of Telegram WebApp initData (mini-app launch parameters).
#
#   secret_key      = HMAC_SHA256(key="WebAppData", msg=bot_token)
#   expected_hash   = HMAC_SHA256(key=secret_key, msg=data_check_string)
#   data_check_string: every key=value pair except "hash", sorted by key, joined by "\n"

import hashlib
import hmac
import json
import time
from typing import Dict, Optional
from urllib.parse import parse_qsl

from tfc_league.core.config import TMA_INIT_DATA_MAX_AGE


class InitDataError(ValueError):
    """initData could not be trusted. The message is a short machine-friendly reason."""


def parse_init_data(init_data: str) -> Dict[str, str]:
    return dict(parse_qsl(init_data, keep_blank_values=True))


def build_data_check_string(raw: Dict[str, str]) -> str:
    return "\n".join(f"{k}={raw[k]}" for k in sorted(raw) if k != "hash")


def compute_hash(raw: Dict[str, str], bot_token: str) -> str:
    secret_key = hmac.new(b"WebAppData", bot_token.encode(), hashlib.sha256).digest()
    return hmac.new(secret_key, build_data_check_string(raw).encode(), hashlib.sha256).hexdigest()


def verify_init_data(
    init_data: str,
    bot_token: str,
    max_age_seconds: int = TMA_INIT_DATA_MAX_AGE,
    now: Optional[int] = None,
) -> dict:
    """
    Returns {"user": {...}, "auth_date": int, "raw": {...}} for valid initData.
    Raises InitDataError otherwise.
    """
    if not init_data:
        raise InitDataError("initData empty")
    if not bot_token:
        raise InitDataError("bot token missing")

    raw = parse_init_data(init_data)
    received_hash = raw.get("hash")
    if not received_hash:
        raise InitDataError("hash missing")

    if not hmac.compare_digest(compute_hash(raw, bot_token), received_hash.lower()):
        raise InitDataError("initData hash mismatch")

    try:
        auth_date = int(raw.get("auth_date") or 0)
    except ValueError:
        auth_date = 0
    if not auth_date:
        raise InitDataError("auth_date missing")

    now = int(time.time()) if now is None else now
    if now - auth_date > max_age_seconds:
        raise InitDataError("initData expired")

    if not raw.get("user"):
        raise InitDataError("user missing")
    try:
        user = json.loads(raw["user"])
    except json.JSONDecodeError:
        raise InitDataError("user json invalid")

    if not isinstance(user, dict) or not user.get("id"):
        raise InitDataError("telegram user id missing")
    if not isinstance(user["id"], int) or isinstance(user["id"], bool):
        raise InitDataError("telegram user id invalid")

    return {"user": user, "auth_date": auth_date, "raw": raw}
