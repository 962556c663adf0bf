import database


def test_root_answers(test_client):
    response = test_client.get("/")

    assert response.status_code == 200
    assert "message" in response.json()


def test_health_reports_connected_database(test_client):
    response = test_client.get("/health")

    assert response.status_code == 200
    assert response.json()["database"] == "connected"


def test_health_reports_missing_database(test_client, monkeypatch):
    monkeypatch.setattr(database, "db", None)

    response = test_client.get("/health")

    assert response.status_code == 200
    assert response.json()["database"] == "disconnected"
