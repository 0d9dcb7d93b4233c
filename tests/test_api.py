import json

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from pystatdb.api import create_app
from pystatdb.config import Settings
from pystatdb.ingest import TrackingFeedClient


PLAYERS = [
    {
        "player_id": 1,
        "full_name": "Patient Slugger",
        "team": "NYY",
        "ab": 520,
        "pa": 610,
        "bat_speed": 76.0,
        "avg_la": 14.0,
        "avg_ev": 93.5,
        "z-swing%": 70.0,
        "z-whiff%": 12.0,
        "chase%": 18.0,
        "o-whiff%": 30.0,
        "zd_plus": 112,
    },
    {
        "player_id": 2,
        "full_name": "Free Swinger",
        "team": "SEA",
        "ab": 480,
        "pa": 515,
        "bat_speed": 73.0,
        "avg_la": 10.0,
        "avg_ev": 89.0,
        "z-swing%": 72.0,
        "z-whiff%": 20.0,
        "chase%": 36.0,
        "o-whiff%": 45.0,
    },
    {
        "player_id": 3,
        "full_name": "Contact Guy",
        "team": "CLE",
        "ab": 410,
        "pa": 450,
        "bat_speed": 69.0,
        "avg_la": 9.0,
        "avg_ev": 87.0,
        "z-swing%": 60.0,
        "z-whiff%": 8.0,
        "chase%": 24.0,
        "o-whiff%": 25.0,
    },
    {"player_id": 4, "full_name": "Call Up", "ab": 40, "z-swing%": 55.0, "chase%": 40.0},
]

ZONE_CSV = "zone,description,estimated_woba_using_speedangle\n" + "".join(
    ["5,hit_into_play,0.4348\n"] * 10 + ["5,called_strike,\n"] * 50 + ["12,ball,\n"] * 20
)


def _feed_handler(request: httpx.Request) -> httpx.Response:
    if request.url.params.get("batters_lookup[]") == "500":
        return httpx.Response(500, text="down")
    return httpx.Response(200, text=ZONE_CSV)


@pytest.fixture
async def client(tmp_path):
    (tmp_path / "players.json").write_text(json.dumps(PLAYERS), encoding="utf-8")
    settings = Settings(data_dir=tmp_path, season=2025)
    feed = TrackingFeedClient(client=httpx.Client(transport=httpx.MockTransport(_feed_handler)))
    app = create_app(settings, feed=feed)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_list_datasets(client):
    response = await client.get("/datasets")
    assert response.status_code == 200
    ids = [entry["dataset_id"] for entry in response.json()]
    assert ids[0] == "mlb2025"
    assert "ncaa2025" in ids


async def test_player_percentiles(client):
    response = await client.get("/datasets/mlb2025/players/1/percentiles")
    assert response.status_code == 200
    body = response.json()
    assert body["player"] == {"player_id": 1, "full_name": "Patient Slugger", "team": "NYY"}
    assert body["zd_plus"] == 112
    entries = {entry["metric"]: entry for entry in body["percentiles"]}
    assert entries["bat_speed"]["percentile"] == 100
    assert entries["bat_speed"]["display"] == "100th"
    assert entries["bat_speed"]["rating"] == "Elite"
    # lowest chase rate in the population, inverted once
    assert entries["chase%"]["percentile"] == 75
    assert entries["swing_length"]["percentile"] is None
    assert entries["swing_length"]["display"] == "N/A"
    assert body["decision_plus"] is not None and body["decision_plus"] > 100


async def test_unknown_dataset_and_player(client):
    assert (await client.get("/datasets/kbo2025/players/1/percentiles")).status_code == 404
    assert (await client.get("/datasets/mlb2025/players/999/percentiles")).status_code == 404
    assert (await client.get("/datasets/aaa2025/players/1/percentiles")).status_code == 404


async def test_similar_players(client):
    response = await client.get("/datasets/mlb2025/players/1/similar", params={"limit": 2})
    assert response.status_code == 200
    body = response.json()
    assert body["weights"] == {"bat_speed": 4.0, "avg_la": 4.0}
    names = [result["player"]["full_name"] for result in body["results"]]
    assert "Patient Slugger" not in names
    assert "Call Up" not in names
    assert len(names) == 2
    first = body["results"][0]
    diffs = {entry["metric"]: entry for entry in first["differences"]}
    assert diffs["bat_speed"]["target"] == 76.0


async def test_custom_similarity_query(client):
    payload = {"metrics": {"z-swing%": 61.0, "z-whiff%": 9.0, "chase%": 23.0, "o-whiff%": None}, "limit": 1}
    response = await client.post("/datasets/mlb2025/similar", json=payload)
    assert response.status_code == 200
    body = response.json()
    assert body["metrics"] == ["z-swing%", "z-whiff%", "chase%", "o-whiff%"]
    assert [r["player"]["full_name"] for r in body["results"]] == ["Contact Guy"]


async def test_custom_similarity_rejects_bad_input(client):
    unknown = await client.post("/datasets/mlb2025/similar", json={"metrics": {"war": 3.0, "chase%": 20.0}})
    assert unknown.status_code == 400

    negative = await client.post(
        "/datasets/mlb2025/similar",
        json={"metrics": {"z-swing%": 61.0, "z-whiff%": 9.0, "chase%": 23.0}, "weights": {"chase%": -2}},
    )
    assert negative.status_code == 400


async def test_leaderboard(client):
    response = await client.get("/datasets/mlb2025/leaderboard")
    assert response.status_code == 200
    body = response.json()
    assert body["league_chase"] == pytest.approx(26.0)
    assert body["entries"][0]["player"]["full_name"] == "Patient Slugger"
    assert body["entries"][0]["rank"] == 1

    filtered = await client.get("/datasets/mlb2025/leaderboard", params={"min_ab": 300})
    assert len(filtered.json()["entries"]) == 3


async def test_zone_contact(client):
    response = await client.get("/zone-contact/592450")
    assert response.status_code == 200
    body = response.json()
    assert body["season"] == 2025
    assert body["pitch_count"] == 60
    assert body["zd_plus"] == 100 + round((60 - 32) / 3)
    assert body["xwoba"] == pytest.approx(0.435)
    assert len(body["zones"]) == 9


async def test_zone_contact_feed_failure(client):
    response = await client.get("/zone-contact/500")
    assert response.status_code == 502


async def test_app_owns_and_closes_default_feed(tmp_path):
    app = create_app(Settings(data_dir=tmp_path))

    assert isinstance(app.state.feed, TrackingFeedClient)
    async with app.router.lifespan_context(app):
        assert not app.state.feed._client.is_closed
    assert app.state.feed._client.is_closed


async def test_app_leaves_injected_feed_open(tmp_path):
    http = httpx.Client(transport=httpx.MockTransport(_feed_handler))
    app = create_app(Settings(data_dir=tmp_path), feed=TrackingFeedClient(client=http))

    async with app.router.lifespan_context(app):
        pass

    assert not http.is_closed
    http.close()
