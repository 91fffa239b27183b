from datetime import date

import pytest

from fakes import (
    FixedClock,
    InMemoryAttendance,
    InMemoryDepartments,
    InMemoryEmployees,
    InMemoryOverrides,
    InMemoryRosters,
    at,
    make_roster,
)

from roster_attendance.container import wire
from roster_attendance.employees.model import Department, Employee
from roster_attendance.main import create_app

MONDAY = date(2025, 1, 6)


@pytest.fixture
def clock():
    return FixedClock(at(MONDAY, "08:20"))


@pytest.fixture
def client(monkeypatch, clock):
    monkeypatch.setenv("APP_ENV", "testing")
    employees = InMemoryEmployees(Employee(employee_id=1, full_name="Nguyen Van An", department_id=7))
    departments = InMemoryDepartments(Department(7, "Engineering"))
    container = wire(
        conn=None,
        employees_repo=employees,
        departments_repo=departments,
        rosters_repo=InMemoryRosters(make_roster(grace_period=15)),
        overrides_repo=InMemoryOverrides(),
        attendance_repo=InMemoryAttendance(employees, departments),
        clock=clock,
    )
    app = create_app(container=container)
    return app.test_client()


def test_check_in_and_check_out_flow(client, clock):
    res = client.post("/api/attendance/check-in", json={"employee_id": 1})
    assert res.status_code == 200
    body = res.get_json()
    assert body["status"] == "FIRST_SESSION_ACTIVE"
    assert body["minutes_late"] == 5
    assert body["first_check_in"] == "08:20"

    clock.advance(hours=4)
    res = client.post("/api/attendance/check-out", json={"employee_id": 1})
    assert res.get_json()["status"] == "FIRST_CHECK_OUT"

    res = client.get("/api/attendance/1/2025-01-06")
    assert res.get_json()["working_duration_minutes"] == 240


def test_explicit_timestamp_is_used(client):
    res = client.post("/api/attendance/check-in", json={"employee_id": 1, "at": "2025-01-06T07:55:00"})
    assert res.get_json()["minutes_late"] == 0


def test_errors_map_to_status_codes(client):
    assert client.post("/api/attendance/check-in", json={}).status_code == 400
    assert client.post("/api/attendance/check-out", json={"employee_id": 1}).status_code == 400
    res = client.post("/api/attendance/check-in", json={"employee_id": 99})
    assert res.status_code == 404
    assert "does not exist" in res.get_json()["error"]


def test_absent_day_view(client):
    body = client.get("/api/attendance/1/2025-01-05").get_json()
    assert body["status"] == "ABSENT"
    assert client.get("/api/attendance/99/2025-01-05").status_code == 404
    assert client.get("/api/attendance/1/not-a-date").status_code == 400


def test_roster_endpoints(client):
    res = client.get("/api/rosters/resolve?employee_id=1&date=2025-01-06")
    assert res.status_code == 200
    assert res.get_json()["start_time"] == "08:00"
    assert client.get("/api/rosters/resolve?employee_id=1&date=2026-01-06").status_code == 404

    res = client.post(
        "/api/overrides",
        json={"scope": "employee", "target_id": 1, "start_time": "09:00", "effective_from": "2025-01-06"},
    )
    assert res.status_code == 201
    body = client.get("/api/rosters/resolve?employee_id=1&date=2025-01-06").get_json()
    assert body["start_time"] == "09:00"
    assert body["source"] == "employee_override"

    res = client.post(
        "/api/rosters",
        json={
            "employee_id": 1,
            "start_date": "2025-02-01",
            "end_date": "2025-02-28",
            "start_time": "07:00",
            "end_time": "16:00",
        },
    )
    assert res.status_code == 201
    roster_id = res.get_json()["roster_id"]
    assert client.post(f"/api/rosters/{roster_id}/hours", json={"start_time": "07:30", "end_time": "16:30"}).status_code == 200
    assert client.post(f"/api/rosters/{roster_id}/deactivate").status_code == 200
    assert client.post("/api/rosters", json={"employee_id": 1}).status_code == 400


def test_recalculate_and_report(client):
    client.post("/api/attendance/check-in", json={"employee_id": 1})

    res = client.post("/api/attendance/recalculate", json={"start": "2025-01-06", "end": "2025-01-06"})
    assert res.status_code == 200
    assert res.get_json()["processed"] == 1

    res = client.get("/api/reports/attendance")
    body = res.get_json()
    assert body["start"] == "2024-12-31"
    assert body["end"] == "2025-01-06"
    assert body["stats"]["late_count"] == 1
    assert body["summary"][0]["full_name"] == "Nguyen Van An"

    assert client.get("/api/reports/attendance?start=2025-01-07&end=2025-01-06").status_code == 400


def test_directory_and_history_endpoints(client):
    assert client.get("/api/departments").get_json() == [{"department_id": 7, "name": "Engineering"}]
    assert [e["employee_id"] for e in client.get("/api/employees?department_id=7").get_json()] == [1]
    assert client.get("/api/employees?department_id=8").get_json() == []

    rosters = client.get("/api/employees/1/rosters").get_json()
    assert rosters[0]["start_time"] == "08:00"
    assert rosters[0]["is_active"] is True
    assert client.get("/api/employees/99/rosters").status_code == 404

    client.post("/api/attendance/check-in", json={"employee_id": 1})
    history = client.get("/api/employees/1/attendance?limit=5").get_json()
    assert len(history) == 1
    assert history[0]["late_display"] == "5M"
    assert client.get("/api/employees/99/attendance").status_code == 404
