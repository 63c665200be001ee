import pytest

from light_endpoint import build_payload
from mock_light_server import create_app


@pytest.fixture
def client():
    app = create_app()
    app.config["TESTING"] = True
    return app.test_client()


def test_get_returns_state(client):
    resp = client.get("/elgato/lights")
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["numberOfLights"] == 1
    assert data["lights"][0]["on"] == 0


def test_put_updates_state_and_counts(client):
    resp = client.put("/elgato/lights", json=build_payload(True, 70, 200))
    assert resp.status_code == 200
    assert resp.get_json()["lights"][0] == {"on": 1, "brightness": 70, "temperature": 200}

    assert client.get("/elgato/lights").get_json()["lights"][0]["brightness"] == 70
    assert client.get("/stats").get_json() == {"updates": 1}


@pytest.mark.parametrize("body", [
    {"numberOfLights": 1},
    {"lights": []},
    {"lights": ["nope"]},
    {"lights": [{"brightness": "bright"}]},
])
def test_put_rejects_bad_bodies(client, body):
    resp = client.put("/elgato/lights", json=body)
    assert resp.status_code == 400
    assert client.get("/stats").get_json() == {"updates": 0}
