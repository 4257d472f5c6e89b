import json
import time
from urllib.parse import urlencode

import pytest

from tfc_league.core.session import create_session_token, read_session_token
from tfc_league.core.tg_init_data import InitDataError, compute_hash, verify_init_data
from tfc_league.main import app
from tfc_league.models import AppUser
from tfc_league.routes.tma_routes import get_bot_token

BOT_TOKEN = "123456:TEST-TOKEN"


def make_init_data(tg_user=None, auth_date=None, token=BOT_TOKEN, **fields):
    """Signed initData; `fields` are extra raw key=value pairs and may override `user`."""
    raw = {"auth_date": str(auth_date or int(time.time())), "query_id": "AAF-test"}
    if tg_user is not None:
        raw["user"] = json.dumps(tg_user)
    raw.update(fields)
    raw["hash"] = compute_hash(raw, token)
    return urlencode(raw)


@pytest.fixture
def tma_client(client):
    app.dependency_overrides[get_bot_token] = lambda: BOT_TOKEN
    return client


# =========================================
# initData verification
# =========================================
def test_valid_init_data():
    init_data = make_init_data({"id": 777, "first_name": "Aziz"})
    verified = verify_init_data(init_data, BOT_TOKEN)
    assert verified["user"]["id"] == 777
    assert verified["raw"]["query_id"] == "AAF-test"


@pytest.mark.parametrize(
    "init_data, token, reason",
    [
        ("", BOT_TOKEN, "initData empty"),
        ("auth_date=1&user=%7B%7D", BOT_TOKEN, "hash missing"),
        ("auth_date=1", "", "bot token missing"),
    ],
)
def test_init_data_rejections(init_data, token, reason):
    with pytest.raises(InitDataError, match=reason):
        verify_init_data(init_data, token)


def test_tampered_init_data_is_rejected():
    init_data = make_init_data({"id": 777})
    tampered = init_data.replace("777", "778")
    with pytest.raises(InitDataError, match="hash mismatch"):
        verify_init_data(tampered, BOT_TOKEN)


def test_init_data_signed_with_other_token_is_rejected():
    init_data = make_init_data({"id": 777}, token="999:OTHER")
    with pytest.raises(InitDataError, match="hash mismatch"):
        verify_init_data(init_data, BOT_TOKEN)


def test_expired_init_data():
    init_data = make_init_data({"id": 777}, auth_date=1_000_000)
    with pytest.raises(InitDataError, match="expired"):
        verify_init_data(init_data, BOT_TOKEN, max_age_seconds=60, now=1_000_061)
    assert verify_init_data(init_data, BOT_TOKEN, max_age_seconds=60, now=1_000_060)["auth_date"] == 1_000_000


def test_user_checks():
    with pytest.raises(InitDataError, match="user missing"):
        verify_init_data(make_init_data(None), BOT_TOKEN)
    with pytest.raises(InitDataError, match="user id missing"):
        verify_init_data(make_init_data({"first_name": "NoId"}), BOT_TOKEN)
    with pytest.raises(InitDataError, match="user json invalid"):
        verify_init_data(make_init_data(None, user="{not json"), BOT_TOKEN)


def test_non_numeric_user_id_is_rejected():
    for bad_id in ("abc", "777", True, 1.5):
        with pytest.raises(InitDataError, match="user id invalid"):
            verify_init_data(make_init_data({"id": bad_id}), BOT_TOKEN)


# =========================================
# Session tokens
# =========================================
def test_session_token_round_trip_and_tamper():
    user = AppUser(id=5, role="admin")
    token = create_session_token(user, issued_at=1000)

    assert read_session_token(token, now=1000) == {"user_id": 5, "role": "admin", "issued_at": 1000}
    assert read_session_token(token.replace("5:admin", "6:admin", 1), now=1000) is None
    assert read_session_token("garbage", now=1000) is None
    assert read_session_token(None) is None


def test_session_token_expires():
    from tfc_league.core.config import SESSION_MAX_AGE

    token = create_session_token(AppUser(id=5, role="user"), issued_at=0)
    assert read_session_token(token, now=SESSION_MAX_AGE) is not None
    assert read_session_token(token, now=SESSION_MAX_AGE + 1) is None


# =========================================
# /tma endpoints
# =========================================
def test_tma_tournaments_require_session(client):
    resp = client.get("/tma/tournaments")
    assert resp.status_code == 401
    assert resp.json()["detail"] == "no_session"


def test_tma_session_rejects_bad_init_data(tma_client):
    resp = tma_client.post("/tma/session", json={"initData": "auth_date=1&hash=abc"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "initData hash mismatch"


def test_tma_session_creates_user_and_cookie(tma_client, session):
    init_data = make_init_data({"id": 4242, "first_name": "Dilnoza", "last_name": "K", "username": "dilk"})

    resp = tma_client.post("/tma/session", json={"initData": init_data})
    assert resp.status_code == 200
    body = resp.json()
    assert body["ok"] is True and body["role"] == "user"

    me = tma_client.get("/tma/me").json()["user"]
    assert me["telegram_id"] == 4242
    assert me["full_name"] == "Dilnoza K"
    assert me["telegram_username"] == "dilk"

    assert tma_client.get("/tma/tournaments").json() == {"ok": True, "tournaments": []}


def test_tma_session_reuses_existing_user(tma_client, session):
    existing = AppUser(telegram_id=4242, role="admin")
    session.add(existing)
    session.commit()
    session.refresh(existing)

    resp = tma_client.post("/tma/session", json={"initData": make_init_data({"id": 4242, "username": "new"})})
    assert resp.json()["app_user_id"] == existing.id
    assert resp.json()["role"] == "admin"


def test_tma_session_with_non_numeric_id_is_unauthorized(tma_client):
    resp = tma_client.post("/tma/session", json={"initData": make_init_data({"id": "abc"})})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "telegram user id invalid"
