from powerup_economy import main
from powerup_economy.models import Player


def open_session(client, player_id):
    response = client.post("/sessions", json={"player_id": player_id})
    assert response.status_code == 200
    return response.json()["session_id"]


def request_powerup(client, session_id, kind, phase="playing", ui_disabled=False):
    response = client.post(
        f"/sessions/{session_id}/powerups/{kind}/request",
        json={"phase": phase, "ui_disabled": ui_disabled},
    )
    assert response.status_code == 200
    return response.json()


def answer(client, session_id, confirmation_id, confirmed):
    response = client.post(
        f"/sessions/{session_id}/confirmations/{confirmation_id}",
        json={"confirmed": confirmed},
    )
    assert response.status_code == 200
    return response.json()


def balance(client, player_id):
    return client.get(f"/players/{player_id}/balance").json()["coins"]


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_create_player(client):
    response = client.post("/players", json={"username": "ada"})
    assert response.status_code == 200
    data = response.json()
    assert data["username"] == "ada"
    assert data["coins"] == main.STARTING_COINS

    duplicate = client.post("/players", json={"username": "ada"})
    assert duplicate.status_code == 400

    blank = client.post("/players", json={"username": "   "})
    assert blank.status_code == 422


def test_unknown_player(client):
    assert client.get("/players/999/balance").status_code == 404
    assert client.post("/sessions", json={"player_id": 999}).status_code == 404


def test_catalog(client):
    response = client.get("/powerups/catalog")
    assert response.status_code == 200
    assert [(p["kind"], p["name"], p["price"]) for p in response.json()] == [
        ("bomb", "Bomb", 50),
        ("glimpse", "Glimpse", 100),
        ("skip", "Skip", 600),
    ]


def test_glimpse_purchase_end_to_end(client, make_player):
    player_id = make_player(coins=100)
    session_id = open_session(client, player_id)

    outcome = request_powerup(client, session_id, "glimpse")
    assert outcome["status"] == "confirmation_required"
    assert outcome["price"] == 100
    assert outcome["title"] == "Use Glimpse?"

    result = answer(client, session_id, outcome["confirmation_id"], True)
    assert result == {"status": "applied", "kind": "glimpse", "price": 100}
    assert balance(client, player_id) == 0

    session = client.get(f"/sessions/{session_id}").json()
    assert session["in_flight"] is False

    effects = client.get(f"/sessions/{session_id}/effects").json()
    assert effects == [{"kind": "glimpse", "count": 1}]

    consumed = client.post(f"/sessions/{session_id}/effects/glimpse/consume")
    assert consumed.status_code == 200
    assert consumed.json()["remaining"] == 0
    assert client.post(f"/sessions/{session_id}/effects/glimpse/consume").status_code == 404


def test_bomb_insufficient_funds(client, make_player):
    player_id = make_player(coins=40)
    session_id = open_session(client, player_id)

    outcome = request_powerup(client, session_id, "bomb")

    assert outcome["status"] == "insufficient_funds"
    assert (outcome["price"], outcome["balance"]) == (50, 40)
    assert outcome["message"] == "You need 50 coins to use Bomb."
    assert balance(client, player_id) == 40


def test_declined_confirmation(client, make_player):
    player_id = make_player(coins=500)
    session_id = open_session(client, player_id)

    outcome = request_powerup(client, session_id, "bomb")
    result = answer(client, session_id, outcome["confirmation_id"], False)

    assert result == {"status": "declined", "kind": "bomb"}
    assert balance(client, player_id) == 500
    assert client.get(f"/sessions/{session_id}/effects").json() == []


def test_balance_changed_before_confirmation(client, make_player, session_factory):
    player_id = make_player(coins=50)
    session_id = open_session(client, player_id)
    outcome = request_powerup(client, session_id, "bomb")

    db = session_factory()
    try:
        db.get(Player, player_id).coins = 10
        db.commit()
    finally:
        db.close()

    result = answer(client, session_id, outcome["confirmation_id"], True)

    assert result["status"] == "insufficient_funds"
    assert result["balance"] == 10
    assert result["title"] == "Purchase Failed"
    assert client.get(f"/sessions/{session_id}/effects").json() == []
    assert client.get(f"/sessions/{session_id}").json()["in_flight"] is False


def test_ineligible_requests(client, make_player):
    player_id = make_player(coins=1000)
    session_id = open_session(client, player_id)

    paused = request_powerup(client, session_id, "skip", phase="paused")
    disabled = request_powerup(client, session_id, "skip", ui_disabled=True)

    assert paused == {"status": "ineligible", "reason": "not_playing"}
    assert disabled == {"status": "ineligible", "reason": "ui_disabled"}
    assert balance(client, player_id) == 1000


def test_confirmation_is_single_use(client, make_player):
    player_id = make_player(coins=1000)
    session_id = open_session(client, player_id)
    outcome = request_powerup(client, session_id, "bomb")

    answer(client, session_id, outcome["confirmation_id"], True)
    again = answer(client, session_id, outcome["confirmation_id"], True)

    assert again == {"status": "ineligible", "reason": "unknown_confirmation"}
    assert balance(client, player_id) == 950


def test_powerup_bar(client, make_player):
    player_id = make_player(coins=100)
    session_id = open_session(client, player_id)

    playing = client.get(f"/sessions/{session_id}/powerups", params={"phase": "playing"}).json()
    assert playing["balance"] == 100
    assert {p["kind"]: p["state"] for p in playing["powerups"]} == {
        "bomb": "can_buy",
        "glimpse": "can_buy",
        "skip": "unaffordable",
    }

    paused = client.get(f"/sessions/{session_id}/powerups", params={"phase": "paused"}).json()
    assert {p["state"] for p in paused["powerups"]} == {"disabled"}


def test_unknown_kind_rejected(client, make_player):
    session_id = open_session(client, make_player(coins=100))

    response = client.post(
        f"/sessions/{session_id}/powerups/freeze/request",
        json={"phase": "playing"},
    )

    assert response.status_code == 422


def test_closed_session(client, make_player):
    session_id = open_session(client, make_player(coins=100))

    assert client.delete(f"/sessions/{session_id}").status_code == 200
    assert client.delete(f"/sessions/{session_id}").status_code == 404
    assert client.get(f"/sessions/{session_id}").status_code == 404
    response = client.post(
        f"/sessions/{session_id}/powerups/bomb/request",
        json={"phase": "playing"},
    )
    assert response.status_code == 404


def test_new_request_replaces_unanswered_confirmation(client, make_player):
    player_id = make_player(coins=1000)
    session_id = open_session(client, player_id)

    abandoned = request_powerup(client, session_id, "bomb")
    current = request_powerup(client, session_id, "glimpse")

    stale = answer(client, session_id, abandoned["confirmation_id"], True)
    assert stale == {"status": "ineligible", "reason": "unknown_confirmation"}
    assert balance(client, player_id) == 1000

    result = answer(client, session_id, current["confirmation_id"], True)
    assert result["status"] == "applied"
    assert balance(client, player_id) == 900
