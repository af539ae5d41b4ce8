from conftest import auth, register, log_achievement, validate


def test_admin_sees_global_counts(client, student_token, admin_token):
    bob = register(client, username="bob", roll_number="R2", name="Bob")
    first = log_achievement(client, student_token, achievementTitle="A", category="project", level="college")
    log_achievement(client, student_token, achievementTitle="B", category="sports", level="national")
    third = log_achievement(client, bob, rollNumber="R2", studentName="Bob", achievementTitle="C",
                            category="project", level="national")
    validate(client, admin_token, first["id"])
    validate(client, admin_token, third["id"], "rejected")

    response = client.get("/api/achievements/analytics", headers=auth(admin_token))

    assert response.status_code == 200
    stats = response.json()
    assert (stats["total"], stats["pending"], stats["validated"], stats["rejected"]) == (3, 1, 1, 1)
    assert stats["byCategory"] == [{"name": "project", "value": 2}, {"name": "sports", "value": 1}]
    assert stats["byLevel"] == [{"name": "national", "value": 2}, {"name": "college", "value": 1}]


def test_student_sees_own_counts(client, student_token):
    bob = register(client, username="bob", roll_number="R2", name="Bob")
    log_achievement(client, student_token, achievementTitle="A")
    log_achievement(client, bob, rollNumber="R2", studentName="Bob", achievementTitle="B", category="sports")

    stats = client.get("/api/achievements/analytics", headers=auth(student_token)).json()

    assert stats["total"] == 1
    assert stats["byCategory"] == [{"name": "project", "value": 1}]


def test_missing_category_and_level_are_grouped(client, db, admin_token):
    db.achievements.insert_many([
        {"id": "1", "rollNumber": "R9", "achievementTitle": "Legacy 1", "status": "pending"},
        {"id": "2", "rollNumber": "R9", "achievementTitle": "Legacy 2", "status": "validated", "category": ""},
        {"id": "3", "rollNumber": "R9", "achievementTitle": "Modern", "status": "validated",
         "category": "project", "level": "state"},
    ])

    stats = client.get("/api/achievements/analytics", headers=auth(admin_token)).json()

    assert stats["byCategory"] == [{"name": "uncategorized", "value": 2}, {"name": "project", "value": 1}]
    assert stats["byLevel"] == [{"name": "uncategorized", "value": 2}, {"name": "state", "value": 1}]


def test_empty_analytics(client, admin_token):
    stats = client.get("/api/achievements/analytics", headers=auth(admin_token)).json()
    assert stats == {"total": 0, "pending": 0, "validated": 0, "rejected": 0, "byCategory": [], "byLevel": []}


def test_analytics_requires_token(client):
    assert client.get("/api/achievements/analytics").status_code == 401
