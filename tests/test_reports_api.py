import datetime as dt

import pytest
from fastapi.testclient import TestClient

from workload_report.api.reports import get_report_service
from workload_report.main import create_app
from workload_report.services.report_generation import ReportGenerationService

MARCH_BODY = {"period_type": "custom", "start": "2024-03-01", "end": "2024-03-31"}


@pytest.fixture
def client(seeded_db):
    app = create_app()
    app.dependency_overrides[get_report_service] = lambda: ReportGenerationService(
        clock=lambda: dt.datetime(2024, 4, 1, 8, 0, tzinfo=dt.timezone.utc),
    )
    with TestClient(app) as test_client:
        yield test_client


def test_generate_report(client):
    response = client.post("/reports/teams/team-1", json=MARCH_BODY)

    assert response.status_code == 201
    body = response.json()
    assert body["title"] == "Falcons Report - 2024-03-01 ~ 2024-03-31"
    assert body["generation_status"] == "completed"
    assert body["summary_data"]["totalAthletes"] == 2
    assert body["view_count"] == 0


def test_generate_unknown_team_is_404(client):
    response = client.post("/reports/teams/team-404", json={"period_type": "monthly", "today": "2024-03-31"})

    assert response.status_code == 404
    assert response.json()["detail"] == "Team not found: team-404"
    assert client.get("/reports/teams/team-404").json() == []


def test_generate_custom_without_end_is_422(client):
    response = client.post("/reports/teams/team-1", json={"period_type": "custom", "start": "2024-03-01"})

    assert response.status_code == 422


def test_generate_unknown_period_type_is_422(client):
    response = client.post("/reports/teams/team-1", json={"period_type": "daily"})

    assert response.status_code == 422


def test_list_view_and_delete(client):
    report_id = client.post("/reports/teams/team-1", json=MARCH_BODY).json()["id"]

    listed = client.get("/reports/teams/team-1")
    assert listed.status_code == 200
    assert [r["id"] for r in listed.json()] == [report_id]

    assert client.post(f"/reports/{report_id}/viewed").status_code == 204
    assert client.get("/reports/teams/team-1").json()[0]["view_count"] == 1

    assert client.delete(f"/reports/{report_id}").status_code == 204
    assert client.delete(f"/reports/{report_id}").status_code == 404
    assert client.post(f"/reports/{report_id}/viewed").status_code == 404
    assert client.get("/reports/teams/team-1").json() == []


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
