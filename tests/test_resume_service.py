import asyncio

import pytest

from app.services.ai import AIProviderError, extract_json
from app.services.resume_service import (
    RuleBasedGenerator,
    build_technical_skills,
    extract_keywords,
    route_section,
    serialize_achievements,
)


def achievement(title, category="project", description="", **extra):
    doc = {
        "achievementTitle": title,
        "achievementDescription": description,
        "category": category,
        "level": "national",
        "achievementDate": "2024-05-01",
        "issuingAuthority": "IEEE",
        "evidenceLink": "http://e",
    }
    doc.update(extra)
    return doc


@pytest.mark.parametrize("category, section", [
    ("academic", "education"),
    ("project", "projects"),
    ("Research", "projects"),
    ("internship", "experience"),
    ("leadership", "experience"),
    ("sports", "extracurricularActivities"),
    ("volunteering", "extracurricularActivities"),
    ("competition", "achievements"),
    ("", "achievements"),
    (None, "achievements"),
])
def test_route_section(category, section):
    assert route_section(category) == section


def test_keywords_respect_word_boundaries():
    found = extract_keywords("Wrote JavaScript and C++ tooling, studied Javanese history")

    assert found["languages"] == ["JavaScript", "C++"]


def test_keywords_match_case_insensitively():
    found = extract_keywords("deployed a flask api on aws using docker and machine learning")

    assert "Flask" in found["frameworksAndTools"]
    assert "Docker" in found["frameworksAndTools"]
    assert found["platforms"] == ["AWS"]
    assert found["concepts"] == ["Machine Learning"]


def test_keywords_empty_text():
    assert all(v == [] for v in extract_keywords("").values())


def test_technical_skills_merge_profile_skills_without_duplicates():
    skills = build_technical_skills(
        [achievement("Chatbot", description="Python bot on Firebase")],
        [
            {"name": "python"},
            {"name": "Figma"},
            {"name": "Rust-lang", "category": "Programming Language"},
            {"name": "Teamwork", "category": "soft"},
            {"name": "  "},
        ],
    )

    assert skills.languages == ["Python", "Rust-lang"]
    assert skills.frameworksAndTools == ["Figma"]
    assert skills.platforms == ["Firebase"]
    assert skills.concepts == ["Teamwork"]


def test_serialize_achievements_one_line_each():
    text = serialize_achievements([
        achievement("A", description="did a"),
        achievement("B", category=None),
    ])

    lines = text.splitlines()
    assert len(lines) == 2
    assert lines[0].startswith("- [project] A | Description: did a | Issued by: IEEE")
    assert lines[1].startswith("- [uncategorized] B | Description: N/A")


def test_rule_based_generator_sections_and_objective():
    profile = {
        "email": "a@example.com",
        "degree": "B.Sc",
        "institution": "City College",
        "education": [{"degree": "B.Sc", "major": "Physics", "institution": "City College",
                       "startYear": "2021", "endYear": "2025", "gpa": "3.8"}],
        "certifications": [{"name": "AWS Cloud Practitioner", "issuer": "AWS"}, {"issuer": "nameless"}],
    }
    achievements = [
        achievement("Drone Mapper", description="OpenCV pipeline", evidenceLink="http://drone"),
        achievement("Research Intern", category="internship", description="Wrote a survey"),
        achievement("Gold Medal", category="academic", issuingAuthority="University"),
        achievement("Blood Drive", category="social"),
    ]

    resume = RuleBasedGenerator().build(profile, "Dana", achievements)

    assert resume.personalInfo.name == "Dana"
    assert resume.personalInfo.email == "a@example.com"
    assert resume.projects[0].link == "http://drone"
    assert resume.experience[0].responsibilities == ["Wrote a survey"]
    assert resume.experience[0].organization == "IEEE"
    assert [e.degree for e in resume.education] == ["B.Sc in Physics", "Gold Medal"]
    assert resume.education[0].dates == "2021 - 2025"
    assert resume.education[0].scoreType == "GPA"
    assert resume.extracurricularActivities[0].role == "Blood Drive"
    assert [c.name for c in resume.certifications] == ["AWS Cloud Practitioner"]
    assert resume.objective.startswith("Motivated B.Sc at City College")
    assert "OpenCV" in resume.objective
    assert resume.generatedBy == "rule-based"


def test_rule_based_generator_is_deterministic():
    achievements = [achievement("One", description="Python"), achievement("Two", category="sports")]
    first = RuleBasedGenerator().build({}, "Eve", achievements)
    second = asyncio.run(RuleBasedGenerator().generate({}, "Eve", achievements))

    assert first.model_dump() == second.model_dump()
    assert first.objective == "Motivated student seeking opportunities to apply proven skills in Python, " \
                              "backed by 1 validated project and experience highlight."


# ============================================================
# JSON EXTRACTION
# ============================================================

@pytest.mark.parametrize("text", [
    '{"a": 1}',
    '```json\n{"a": 1}\n```',
    '```\n{"a": 1}\n```',
    'Here you go:\n{"a": 1}\nGood luck!',
])
def test_extract_json(text):
    assert extract_json(text) == {"a": 1}


@pytest.mark.parametrize("text", ["no json here", "{broken", None])
def test_extract_json_rejects_garbage(text):
    with pytest.raises(AIProviderError):
        extract_json(text)
