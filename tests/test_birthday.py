import json
from datetime import date

import httpx
from fastapi.testclient import TestClient

from personnel_directory.core.clock import get_today
from personnel_directory.main import app
from personnel_directory.schemas.birthday import BirthdayCandidate
from personnel_directory.services.birthday import SKIPPED_NO_MOBILE, BirthdayNotifier
from tests.helpers import bulk_load_master, create_master


def test_today_matches_day_and_month(client: TestClient, db_session):
    create_master(db_session, "2599713", "MANOHAR", surname="SIMHADRI", dob="15/06/1988", mobileno="9502789815")
    create_master(db_session, "1253675", "NARASIMHA PRASAD", surname="PALASANI", dob="16/06/1984")
    create_master(db_session, "0000001", "NO DOB")

    body = client.get("/api/birthday/today").json()
    assert body["count"] == 1
    assert body["employees"][0]["employeeid"] == "2599713"

    app.dependency_overrides[get_today] = lambda: date(2026, 6, 16)
    body = client.get("/api/birthday/today").json()
    assert [e["employeeid"] for e in body["employees"]] == ["1253675"]


def test_leap_day_birthdays_on_28_february(client: TestClient, db_session):
    create_master(db_session, "E1", "LEAP", dob="29/02/1992")

    app.dependency_overrides[get_today] = lambda: date(2027, 2, 28)
    assert client.get("/api/birthday/today").json()["count"] == 1

    app.dependency_overrides[get_today] = lambda: date(2028, 2, 28)
    assert client.get("/api/birthday/today").json()["count"] == 0


def test_send_posts_greeting_to_gateway(client: TestClient, db_session, notifier, sent_messages):
    create_master(db_session, "2599713", "MANOHAR", surname="SIMHADRI", dob="15/06/1988", mobileno="9502789815")

    r = client.post("/api/birthday/send")
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert (body["sent"], body["failed"], body["skipped"]) == (1, 0, 0)

    assert len(sent_messages) == 1
    payload = json.loads(sent_messages[0].content)
    assert payload["reciever"] == "9502789815"
    assert payload["department"] == "CDMA"
    assert payload["content"].startswith("Dear MANOHAR SIMHADRI,")
    assert str(sent_messages[0].url) == "https://gateway.test/direct-send"


def test_send_skips_staff_without_mobile(client: TestClient, db_session, notifier, sent_messages):
    create_master(db_session, "E1", "NO PHONE", dob="15/06/1990", mobileno="  ")

    body = client.post("/api/birthday/send").json()
    assert (body["sent"], body["failed"], body["skipped"]) == (0, 0, 1)
    assert body["results"][0]["reason"] == SKIPPED_NO_MOBILE
    assert sent_messages == []


def test_gateway_failure_is_recorded(client: TestClient, db_session, notifier, gateway_status):
    gateway_status["code"] = 500
    create_master(db_session, "E1", "RAVI", dob="15/06/1990", mobileno="9000000000")

    body = client.post("/api/birthday/send").json()
    assert (body["sent"], body["failed"], body["skipped"]) == (0, 1, 0)
    assert body["results"][0]["status_code"] == 500


def test_send_run_is_audited(client: TestClient, db_session, notifier):
    create_master(db_session, "E1", "RAVI", dob="15/06/1990", mobileno="9000000000")
    client.post("/api/birthday/send")

    events = client.get("/api/audit", params={"action": "BIRTHDAY_JOB_RUN"}).json()
    assert len(events) == 1
    assert events[0]["entity_id"] == "2026-06-15"
    assert events[0]["metadata"] == {"sent": 1, "failed": 0, "skipped": 0}


def test_notifier_pauses_between_messages_only():
    pauses = []

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200)

    with httpx.Client(transport=httpx.MockTransport(handler)) as http:
        n = BirthdayNotifier(http, url="https://gateway.test/send", delay=0.5, sleep=pauses.append)
        summary = n.run([BirthdayCandidate(employeeid=str(i), name=f"P{i}", mobileno="9") for i in range(3)])

    assert summary.sent == 3
    assert pauses == [0.5, 0.5]


def test_notifier_connection_error_does_not_stop_the_run():
    def handler(request: httpx.Request) -> httpx.Response:
        if json.loads(request.content)["reciever"] == "1":
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200)

    with httpx.Client(transport=httpx.MockTransport(handler)) as http:
        n = BirthdayNotifier(http, url="https://gateway.test/send", delay=0)
        summary = n.run(
            [
                BirthdayCandidate(employeeid="A", name="First", mobileno="1"),
                BirthdayCandidate(employeeid="B", name="Second", mobileno="2"),
            ]
        )

    assert (summary.sent, summary.failed) == (1, 1)
    assert summary.results[0].reason == "connection refused"


def test_rows_loaded_with_plain_sql_are_greeted(client: TestClient, db_session, notifier, sent_messages):
    bulk_load_master(db_session, "E9", "BULK", dob="15/06/1988", mobileno="9000000009")

    body = client.get("/api/birthday/today").json()
    assert body["count"] == 1
    assert body["employees"][0]["employeeid"] == "E9"

    body = client.post("/api/birthday/send").json()
    assert body["sent"] == 1
    assert len(sent_messages) == 1
