import pytest

from netload_sim.server import create_app


@pytest.fixture
def client(simulator, tmp_path):
    app = create_app(simulator, static_dir=str(tmp_path))
    app.config["TESTING"] = True
    return app.test_client()


def test_network_stats(client, simulator):
    simulator.run(2)

    response = client.get("/network-stats")

    assert response.status_code == 200
    data = response.get_json()
    assert data == simulator.snapshot().to_dict()
    assert data["nodes"][0]["packetsGenerated"] == 2


def test_cors_allows_any_origin(client):
    response = client.get("/network-stats", headers={"Origin": "http://example.com"})
    assert response.headers["Access-Control-Allow-Origin"] in ("*", "http://example.com")


def test_static_files(simulator, tmp_path):
    (tmp_path / "index.html").write_text("<h1>stats</h1>")
    (tmp_path / "app.js").write_text("console.log(1)")
    client = create_app(simulator, static_dir=str(tmp_path)).test_client()

    assert client.get("/").data == b"<h1>stats</h1>"
    assert client.get("/app.js").status_code == 200


def test_missing_index(client):
    assert client.get("/").status_code == 404
