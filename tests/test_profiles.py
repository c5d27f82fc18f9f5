from datetime import date, timedelta

from app.utils.profile_formatting import age_from_birth_year, exact_age
from conftest import SteppingClock, profile_payload


def test_age_uses_birth_year_only():
    assert age_from_birth_year("2000-06-15", date(2024, 1, 1)) == 24
    assert exact_age("2000-06-15", date(2024, 1, 1)) == 23
    assert age_from_birth_year(None) is None
    assert age_from_birth_year("not a date") is None


def test_signup_and_login(client, verify_email):
    verify_email("ananya@kannadamatch.in")

    response = client.post("/api/create-profile", json=profile_payload("ananya@kannadamatch.in"))

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Profile created successfully"
    assert body["profileId"].startswith("KM")
    assert body["profileId"][2:].isdigit()
    assert body["subscription"] == "free"

    response = client.post("/api/login", json={"email": "ananya@kannadamatch.in", "password": "secret123"})
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["profileId"] == body["profileId"]
    assert user["name"] == "Ananya Rao"
    assert user["subscription"]["current"] == "free"
    assert user["subscription"]["details"]["startDate"] is not None
    assert user["subscription"]["details"]["expiryDate"] is None
    assert "passwordHash" not in user
    assert "otpCode" not in user


def test_create_profile_is_idempotent_by_email(client, register):
    profile_id = register("ananya@kannadamatch.in")

    response = client.post(
        "/api/create-profile",
        json=profile_payload("ananya@kannadamatch.in", name="Ananya R", location={"city": "Mysuru"})
    )

    assert response.status_code == 201
    assert response.json()["message"] == "Profile updated successfully"
    assert response.json()["profileId"] == profile_id

    profiles = client.get("/api/profiles").json()
    assert [p["id"] for p in profiles] == [profile_id]
    assert profiles[0]["name"] == "Ananya R"
    assert profiles[0]["location"] == "Mysuru"


def test_create_profile_lists_every_missing_field(client, verify_email):
    verify_email("ananya@kannadamatch.in")
    payload = profile_payload("ananya@kannadamatch.in")
    del payload["personalInfo"]["name"]
    payload["location"]["city"] = "  "
    del payload["credentials"]

    response = client.post("/api/create-profile", json=payload)

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Missing required fields"
    assert body["missingFields"] == ["personalInfo.name", "location.city", "credentials.password"]


def test_create_profile_requires_verified_email(client):
    client.post("/api/send-email-otp", json={"email": "ananya@kannadamatch.in"})

    response = client.post("/api/create-profile", json=profile_payload("ananya@kannadamatch.in"))

    assert response.status_code == 400
    assert response.json()["error"] == "Email not verified"

    response = client.post("/api/create-profile", json=profile_payload("nobody@kannadamatch.in"))
    assert response.status_code == 400
    assert response.json()["error"] == "Email not verified"


def test_login_errors(client, register):
    client.post("/api/send-email-otp", json={"email": "pending@kannadamatch.in"})
    register("ananya@kannadamatch.in")

    response = client.post("/api/login", json={"email": "ghost@kannadamatch.in", "password": "secret123"})
    assert response.status_code == 404
    assert response.json()["error"] == "User not found"

    response = client.post("/api/login", json={"email": "pending@kannadamatch.in", "password": "secret123"})
    assert response.status_code == 400
    assert response.json()["error"] == "Email not verified"

    response = client.post("/api/login", json={"email": "ananya@kannadamatch.in", "password": "wrong-password"})
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid password"


def test_login_without_password_on_record(client, verify_email):
    verify_email("ananya@kannadamatch.in")

    response = client.post("/api/login", json={"email": "ananya@kannadamatch.in", "password": "secret123"})

    assert response.status_code == 400
    assert response.json()["code"] == "no_credential"


def test_list_profiles_filters(client, register):
    ananya = register("ananya@kannadamatch.in", gender="female")
    kiran = register("kiran@kannadamatch.in", name="Kiran Gowda", gender="male", date_of_birth="1992-11-02")
    client.post("/api/send-email-otp", json={"email": "pending@kannadamatch.in"})

    profiles = client.get("/api/profiles").json()
    assert sorted(p["id"] for p in profiles) == sorted([ananya, kiran])

    profiles = client.get("/api/profiles", params={"excludeId": ananya}).json()
    assert [p["id"] for p in profiles] == [kiran]

    profiles = client.get("/api/profiles", params={"gender": "female"}).json()
    assert [p["id"] for p in profiles] == [ananya]

    card = profiles[0]
    assert card["age"] == date.today().year - 1995
    assert card["profession"] == "Software Engineer"
    assert card["location"] == "Bengaluru"
    assert card["horoscope"] is True
    assert card["image"].startswith("https://")


def test_recent_matches_are_opposite_gender_newest_first(client, register, monkeypatch):
    clock = SteppingClock(step=timedelta(minutes=1))
    monkeypatch.setattr("app.services.profile_service.utcnow", clock)

    viewer = register("kiran@kannadamatch.in", name="Kiran Gowda", gender="male")
    older = register("ananya@kannadamatch.in", gender="female")
    newer = register("divya@kannadamatch.in", name="Divya Shetty", gender="female")
    register("rahul@kannadamatch.in", name="Rahul Hegde", gender="male")

    response = client.get("/api/recent-matches", params={"profileId": viewer, "gender": "male"})

    assert response.status_code == 200
    assert [m["id"] for m in response.json()["matches"]] == [newer, older]


def test_recent_matches_are_capped_at_six(client, register):
    viewer = register("kiran@kannadamatch.in", name="Kiran Gowda", gender="male")
    for n in range(8):
        register(f"bride{n}@kannadamatch.in", name=f"Bride {n}", gender="female")

    response = client.get("/api/recent-matches", params={"profileId": viewer, "gender": "male"})

    assert response.status_code == 200
    matches = response.json()["matches"]
    assert len(matches) == 6
    assert viewer not in [m["id"] for m in matches]


def test_update_profile_merges_supplied_fields(client, register):
    profile_id = register("ananya@kannadamatch.in")

    response = client.put("/api/update-profile", json={
        "profileId": profile_id,
        "updatedData": {"profession": "Architect", "caste": "Lingayat", "family": {"father": "Suresh Rao"}}
    })

    assert response.status_code == 200
    assert response.json()["user"]["profileId"] == profile_id

    detail = client.get(f"/api/profiles/{profile_id}").json()
    assert detail["profession"] == "Architect"
    assert detail["community"] == "Lingayat"
    assert detail["family"]["father"] == "Suresh Rao"
    assert detail["family"]["mother"] == "Lakshmi Rao"
    assert detail["education"] == "B.E. Computer Science"


def test_update_unknown_profile(client):
    response = client.put("/api/update-profile", json={"profileId": "KM1", "updatedData": {"name": "X"}})

    assert response.status_code == 404


def test_profile_detail_defaults_and_view_counter(client, register):
    ananya = register("ananya@kannadamatch.in", family={"father": None, "mother": None})
    kiran = register("kiran@kannadamatch.in", name="Kiran Gowda", gender="male")

    detail = client.get(f"/api/profiles/{ananya}").json()
    assert detail["family"] == {"father": "Not specified", "mother": "Not specified", "siblings": "None"}
    assert detail["location"] == "Bengaluru, Karnataka"
    assert detail["preferences"] == [
        "Age: Not specified",
        "Education: Not specified",
        "Profession: Not specified",
        "Location: Not specified",
    ]
    assert detail["profileViews"] == 0

    client.get(f"/api/profiles/{ananya}", params={"viewerId": kiran})
    client.get(f"/api/profiles/{ananya}", params={"viewerId": ananya})

    stats = client.get("/api/user/stats", params={"profileId": ananya}).json()
    assert stats == {"profileViews": 1, "interestsReceived": 0, "messages": 0}


def test_profile_detail_not_found(client):
    response = client.get("/api/profiles/KM0")

    assert response.status_code == 404
    assert response.json()["error"] == "Profile not found"


def test_user_profile_lookup(client, register):
    profile_id = register("ananya@kannadamatch.in")

    response = client.get("/api/user-profile", params={"email": "ananya@kannadamatch.in"})
    assert response.status_code == 200
    assert response.json()["user"]["profileId"] == profile_id

    response = client.get("/api/user-profile")
    assert response.status_code == 400
    assert response.json()["error"] == "Email or Profile ID is required"


def test_password_longer_than_bcrypt_limit_is_rejected(client, verify_email):
    verify_email("ananya@kannadamatch.in")

    response = client.post("/api/create-profile", json=profile_payload(
        "ananya@kannadamatch.in", credentials={"password": "x" * 73}
    ))

    assert response.status_code == 400
    assert response.json()["code"] == "password_too_long"

    # multi-byte characters count by their encoded size
    response = client.post("/api/create-profile", json=profile_payload(
        "ananya@kannadamatch.in", credentials={"password": "ಕ" * 25}
    ))
    assert response.status_code == 400

    response = client.post("/api/create-profile", json=profile_payload(
        "ananya@kannadamatch.in", credentials={"password": "x" * 72}
    ))
    assert response.status_code == 201

    response = client.post("/api/login", json={"email": "ananya@kannadamatch.in", "password": "x" * 72})
    assert response.status_code == 200
