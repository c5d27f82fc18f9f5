import pytest


@pytest.fixture
def couple(register):
    kiran = register("kiran@kannadamatch.in", name="Kiran Gowda", gender="male")
    ananya = register("ananya@kannadamatch.in", gender="female")
    return kiran, ananya


def _interested(client, owner):
    response = client.get("/api/interested-profiles", params={"userProfileId": owner})
    assert response.status_code == 200
    return [p["id"] for p in response.json()]


def _passed(client, owner):
    response = client.get("/api/passed-profiles", params={"userProfileId": owner})
    assert response.status_code == 200
    return [p["id"] for p in response.json()]


def test_send_interest_is_a_set_add(client, couple):
    kiran, ananya = couple

    for _ in range(2):
        response = client.post("/api/send-interest", json={"userProfileId": kiran, "interestedProfileId": ananya})
        assert response.status_code == 200
        assert response.json()["message"] == "Interest sent successfully"

    assert _interested(client, kiran) == [ananya]
    assert _interested(client, ananya) == []


def test_interested_list_returns_profile_cards(client, couple):
    kiran, ananya = couple
    client.post("/api/send-interest", json={"userProfileId": kiran, "interestedProfileId": ananya})

    cards = client.get("/api/interested-profiles", params={"userProfileId": kiran}).json()

    assert cards[0]["name"] == "Ananya Rao"
    assert cards[0]["community"] == "Vokkaliga"
    assert set(cards[0]) == {
        "id", "name", "age", "profession", "location", "education", "community", "income", "horoscope", "image"
    }


def test_send_interest_to_unknown_profile(client, couple):
    kiran, _ = couple

    response = client.post("/api/send-interest", json={"userProfileId": kiran, "interestedProfileId": "KM0"})

    assert response.status_code == 404
    assert response.json()["error"] == "Interested profile not found"


def test_remove_interest(client, couple):
    kiran, ananya = couple
    client.post("/api/send-interest", json={"userProfileId": kiran, "interestedProfileId": ananya})

    response = client.request(
        "DELETE", "/api/remove-interest", json={"userProfileId": kiran, "interestedProfileId": ananya}
    )
    assert response.status_code == 200
    assert _interested(client, kiran) == []

    response = client.request(
        "DELETE", "/api/remove-interest", json={"userProfileId": kiran, "interestedProfileId": ananya}
    )
    assert response.status_code == 404
    assert response.json()["error"] == "Interest not found"


def test_remove_all_interests(client, couple, register):
    kiran, ananya = couple
    divya = register("divya@kannadamatch.in", name="Divya Shetty", gender="female")
    client.post("/api/send-interest", json={"userProfileId": kiran, "interestedProfileId": ananya})
    client.post("/api/send-interest", json={"userProfileId": kiran, "interestedProfileId": divya})
    client.post("/api/pass-profile", json={"userProfileId": kiran, "passedProfileId": divya})

    response = client.request("DELETE", "/api/remove-all-interests", json={"userProfileId": kiran})

    assert response.status_code == 200
    assert response.json()["modifiedCount"] == 2
    assert _interested(client, kiran) == []
    assert _passed(client, kiran) == [divya]


def test_remove_all_interests_when_empty(client, couple):
    kiran, _ = couple

    response = client.request("DELETE", "/api/remove-all-interests", json={"userProfileId": kiran})

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert response.json()["modifiedCount"] == 0


def test_interest_and_pass_are_independent(client, couple):
    kiran, ananya = couple

    client.post("/api/send-interest", json={"userProfileId": kiran, "interestedProfileId": ananya})
    response = client.post("/api/pass-profile", json={"userProfileId": kiran, "passedProfileId": ananya})
    assert response.status_code == 200
    assert response.json()["message"] == "Profile passed successfully"

    assert _interested(client, kiran) == [ananya]
    assert _passed(client, kiran) == [ananya]

    client.post("/api/send-interest", json={"userProfileId": kiran, "interestedProfileId": ananya})
    assert _interested(client, kiran) == [ananya]


def test_pass_unknown_profile(client, couple):
    kiran, _ = couple

    response = client.post("/api/pass-profile", json={"userProfileId": kiran, "passedProfileId": "KM0"})

    assert response.status_code == 404
    assert response.json()["error"] == "Passed profile not found"


def test_interest_requires_both_ids(client):
    response = client.post("/api/send-interest", json={"userProfileId": "KM1"})

    assert response.status_code == 400
    assert response.json()["missingFields"] == ["interestedProfileId"]


def test_interests_received_counted_in_stats(client, couple):
    kiran, ananya = couple
    client.post("/api/send-interest", json={"userProfileId": kiran, "interestedProfileId": ananya})

    stats = client.get("/api/user/stats", params={"profileId": ananya}).json()

    assert stats["interestsReceived"] == 1
