from datetime import timedelta

import pytest

from conftest import SteppingClock


@pytest.fixture
def couple(register):
    kiran = register("kiran@kannadamatch.in", name="Kiran Gowda", gender="male")
    ananya = register("ananya@kannadamatch.in", gender="female")
    return kiran, ananya


def _report(reporter, reported, **overrides):
    report = {
        "reportingUserId": reporter,
        "reportedProfileId": reported,
        "reason": "fake-profile",
        "category": "profile",
        "message": "Photos are taken from a film actor",
    }
    report.update(overrides)
    return report


def test_submit_report(client, couple):
    kiran, ananya = couple

    response = client.post("/api/report-profile", json=_report(kiran, ananya))

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Report submitted successfully"
    assert body["report"]["reportingUserId"] == kiran
    assert body["report"]["reason"] == "fake-profile"
    assert body["report"]["category"] == "profile"
    assert body["report"]["createdAt"]


def test_reports_are_not_deduplicated(client, couple):
    kiran, ananya = couple

    first = client.post("/api/report-profile", json=_report(kiran, ananya)).json()
    second = client.post("/api/report-profile", json=_report(kiran, ananya)).json()

    assert first["report"]["id"] != second["report"]["id"]
    assert first["report"]["reportedProfileId"] == second["report"]["reportedProfileId"]


def test_report_resolves_internal_id(client, couple):
    kiran, ananya = couple
    internal_id = client.post("/api/report-profile", json=_report(kiran, ananya)).json()["report"]["reportedProfileId"]

    response = client.post("/api/report-profile", json=_report(kiran, internal_id, reason="spam", category="message"))

    assert response.status_code == 201
    assert response.json()["report"]["reportedProfileId"] == internal_id


def test_report_validation(client, couple):
    kiran, ananya = couple

    response = client.post("/api/report-profile", json=_report(kiran, ananya, message=""))
    assert response.status_code == 400
    assert response.json()["error"] == "All fields are required"
    assert response.json()["missingFields"] == ["message"]

    response = client.post("/api/report-profile", json=_report(kiran, ananya, reason="rude"))
    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid reason. Must be one of:")

    response = client.post("/api/report-profile", json=_report(kiran, ananya, category="billing"))
    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid category. Must be one of:")

    response = client.post("/api/report-profile", json=_report(kiran, "KM0"))
    assert response.status_code == 404
    assert response.json()["error"] == "Reported profile not found"


def test_messages_are_listed_newest_first(client, couple, monkeypatch):
    monkeypatch.setattr("app.services.message_service.utcnow", SteppingClock(step=timedelta(seconds=1)))
    kiran, ananya = couple

    for text in ("Namaskara!", "Would love to talk to your family"):
        response = client.post("/api/messages", json={
            "senderProfileId": kiran, "recipientProfileId": ananya, "message": text
        })
        assert response.status_code == 201

    response = client.get("/api/messages", params={"profileId": ananya})

    assert response.status_code == 200
    messages = response.json()["messages"]
    assert [m["message"] for m in messages] == ["Would love to talk to your family", "Namaskara!"]
    assert all(m["senderProfileId"] == kiran for m in messages)
    assert client.get("/api/messages", params={"profileId": kiran}).json()["messages"] == []

    stats = client.get("/api/user/stats", params={"profileId": ananya}).json()
    assert stats["messages"] == 2


def test_message_to_unknown_profile(client, couple):
    kiran, _ = couple

    response = client.post("/api/messages", json={"senderProfileId": kiran, "recipientProfileId": "KM0", "message": "Hi"})

    assert response.status_code == 404
    assert response.json()["error"] == "Recipient profile not found"


def test_message_requires_body(client, couple):
    kiran, ananya = couple

    response = client.post("/api/messages", json={"senderProfileId": kiran, "recipientProfileId": ananya})

    assert response.status_code == 400
    assert response.json()["missingFields"] == ["message"]
