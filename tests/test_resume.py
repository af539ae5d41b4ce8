import json

import pytest

from app.core.auth import create_access_token

from conftest import FakeProvider, auth, register, log_achievement, validate


def _validated(client, student_token, admin_token, **overrides):
    created = log_achievement(client, student_token, **overrides)
    return validate(client, admin_token, created["id"])


@pytest.fixture
def mixed_resume_data(client, student_token, admin_token):
    for title, category in [
        ("Crop Yield Predictor", "project"),
        ("Soil Study", "research"),
        ("Backend Intern", "internship"),
        ("Club President", "leadership"),
        ("Dean's List", "academic"),
        ("Football Captain", "sports"),
        ("Hackathon Winner", "competition"),
    ]:
        _validated(client, student_token, admin_token, achievementTitle=title, category=category)


def test_mock_mode_routes_by_category(client, student_token, mixed_resume_data):
    response = client.post("/api/resume/generate?mock=true", json={}, headers=auth(student_token))

    assert response.status_code == 200
    resume = response.json()
    assert resume["generatedBy"] == "rule-based"
    assert sorted(p["title"] for p in resume["projects"]) == ["Crop Yield Predictor", "Soil Study"]
    assert sorted(e["role"] for e in resume["experience"]) == ["Backend Intern", "Club President"]
    assert [e["degree"] for e in resume["education"]] == ["Dean's List"]
    assert [a["role"] for a in resume["extracurricularActivities"]] == ["Football Captain"]
    assert [a["title"] for a in resume["achievements"]] == ["Hackathon Winner"]


def test_mock_flag_in_body(client, student_token, admin_token, ai):
    ai.provider = FakeProvider(reply="{}")
    _validated(client, student_token, admin_token)

    response = client.post("/api/resume/generate", json={"mock": True}, headers=auth(student_token))

    assert response.json()["generatedBy"] == "rule-based"
    assert ai.provider.calls == []


def test_only_validated_achievements_are_used(client, student_token, admin_token):
    _validated(client, student_token, admin_token, achievementTitle="Kept")
    log_achievement(client, student_token, achievementTitle="Still pending")
    rejected = log_achievement(client, student_token, achievementTitle="Rejected one")
    validate(client, admin_token, rejected["id"], "rejected")

    resume = client.post("/api/resume/generate?mock=true", json={}, headers=auth(student_token)).json()

    assert [p["title"] for p in resume["projects"]] == ["Kept"]


def test_no_validated_achievements_is_404(client, student_token):
    log_achievement(client, student_token)

    response = client.post("/api/resume/generate?mock=true", json={"rollNumber": "R1"}, headers=auth(student_token))

    assert response.status_code == 404
    assert "validated" in response.json()["message"]


def test_student_cannot_generate_for_someone_else(client, student_token):
    response = client.post("/api/resume/generate", json={"rollNumber": "R2"}, headers=auth(student_token))
    assert response.status_code == 403


def test_student_token_without_roll_number_is_403(client):
    token = create_access_token({"id": "s9", "role": "student", "username": "ghost"})

    response = client.post("/api/resume/generate?mock=true", json={}, headers=auth(token))

    assert response.status_code == 403


def test_admin_must_name_roll_number(client, admin_token):
    response = client.post("/api/resume/generate?mock=true", json={}, headers=auth(admin_token))
    assert response.status_code == 400


def test_admin_generates_for_student(client, student_token, admin_token):
    _validated(client, student_token, admin_token, achievementTitle="X")

    response = client.post("/api/resume/generate?mock=true", json={"rollNumber": "R1"}, headers=auth(admin_token))

    assert response.status_code == 200
    assert response.json()["personalInfo"]["name"] == "Alice Student"


def test_requires_token(client):
    assert client.post("/api/resume/generate", json={}).status_code == 401


def test_profile_details_flow_into_resume(client, student_token, admin_token):
    client.put("/api/user/profile", json={
        "name": "Alice A. Student",
        "email": "alice@example.com",
        "phone": "555-0100",
        "degree": "B.Tech",
        "institution": "State University",
        "gpa": 8.9,
        "skills": [{"name": "Docker", "category": "tool"}, {"name": "Public Speaking"}],
    }, headers=auth(student_token))
    _validated(client, student_token, admin_token)

    resume = client.post("/api/resume/generate?mock=true", json={}, headers=auth(student_token)).json()

    assert resume["personalInfo"]["name"] == "Alice A. Student"
    assert resume["personalInfo"]["email"] == "alice@example.com"
    assert resume["education"][0]["institution"] == "State University"
    assert resume["education"][0]["score"] == "8.9"
    assert "Python" in resume["technicalSkills"]["languages"]
    assert "Arduino" in resume["technicalSkills"]["frameworksAndTools"]
    assert "Docker" in resume["technicalSkills"]["frameworksAndTools"]
    assert "Public Speaking" in resume["technicalSkills"]["concepts"]


# ============================================================
# AI PATH AND FALLBACK
# ============================================================

def test_ai_generated_resume(client, student_token, admin_token, ai):
    ai.provider = FakeProvider(reply="```json\n" + json.dumps({
        "personalInfo": {"name": "Someone Else", "email": "wrong@example.com"},
        "objective": "Build reliable systems.",
        "projects": [{"title": "Smart Irrigation System", "description": "Led the build."}],
        "technicalSkills": {"languages": ["Python"]},
    }) + "\n```")
    _validated(client, student_token, admin_token)

    response = client.post("/api/resume/generate", json={}, headers=auth(student_token))

    assert response.status_code == 200
    resume = response.json()
    assert resume["generatedBy"] == "ai"
    assert resume["objective"] == "Build reliable systems."
    assert resume["projects"][0]["description"] == "Led the build."
    # Contact details always come from stored data
    assert resume["personalInfo"]["name"] == "Alice Student"
    assert resume["experience"] == []

    prompt = ai.provider.calls[0]["prompt"]
    assert "Smart Irrigation System" in prompt
    assert "internship, leadership -> experience" in prompt


def test_ai_resume_tolerates_null_fields(client, student_token, admin_token, ai):
    ai.provider = FakeProvider(reply=json.dumps({
        "personalInfo": {"linkedin": None},
        "objective": "Build reliable systems.",
        "projects": [{"title": "Smart Irrigation System", "description": None, "link": None}, None],
        "technicalSkills": {"languages": ["Python", None], "web": None},
        "certifications": None,
    }))
    _validated(client, student_token, admin_token)

    response = client.post("/api/resume/generate", json={}, headers=auth(student_token))

    assert response.status_code == 200
    resume = response.json()
    assert resume["generatedBy"] == "ai"
    assert resume["objective"] == "Build reliable systems."
    assert resume["projects"] == [{
        "title": "Smart Irrigation System", "description": "", "date": "",
        "level": "", "issuer": "", "link": "",
    }]
    assert resume["technicalSkills"]["languages"] == ["Python"]
    assert resume["technicalSkills"]["web"] == []
    assert resume["certifications"] == []


@pytest.mark.parametrize("provider", [
    FakeProvider(error="quota exceeded"),
    FakeProvider(reply="Sorry, I cannot help with that."),
    FakeProvider(reply='["not", "an", "object"]'),
    FakeProvider(reply='{"projects": "should be a list"}'),
])
def test_falls_back_to_rule_based(client, student_token, admin_token, ai, provider):
    ai.provider = provider
    _validated(client, student_token, admin_token, achievementTitle="X")

    response = client.post("/api/resume/generate", json={}, headers=auth(student_token))

    assert response.status_code == 200
    assert response.json()["generatedBy"] == "rule-based"
    assert [p["title"] for p in response.json()["projects"]] == ["X"]


def test_no_provider_uses_rule_based(client, student_token, admin_token):
    _validated(client, student_token, admin_token)

    response = client.post("/api/resume/generate", json={}, headers=auth(student_token))

    assert response.status_code == 200
    assert response.json()["generatedBy"] == "rule-based"


def test_other_students_achievements_are_excluded(client, student_token, admin_token):
    bob = register(client, username="bob", roll_number="R2", name="Bob")
    _validated(client, student_token, admin_token, achievementTitle="Alice's")
    _validated(client, bob, admin_token, rollNumber="R2", studentName="Bob", achievementTitle="Bob's")

    resume = client.post("/api/resume/generate?mock=true", json={}, headers=auth(student_token)).json()

    assert [p["title"] for p in resume["projects"]] == ["Alice's"]
