"""
Resume Service - Validated achievements -> structured resume JSON.

Two generators share one output contract (ResumeDocument):
1. RemoteGenerator    - asks the configured AI provider for the JSON
2. RuleBasedGenerator - routes and extracts locally, no network

generate_resume() prefers the remote one and falls back to the rule-based
one whenever the provider is missing, fails, or answers with something
that does not fit the resume shape.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from pydantic import ValidationError

from app.schemas.schemas import (
    ResumeDocument, PersonalInfo, ResumeEducation, TechnicalSkills,
    ResumeProject, ResumeExperience, ResumeAchievement, ResumeActivity,
    ResumeCertification,
)
from app.services.ai import AIProvider, AIProviderError

logger = logging.getLogger(__name__)


# ============================================================
# CATEGORY ROUTING
# ============================================================

SECTION_BY_CATEGORY = {
    "academic": "education",
    "project": "projects",
    "research": "projects",
    "internship": "experience",
    "leadership": "experience",
    "sports": "extracurricularActivities",
    "cultural": "extracurricularActivities",
    "social": "extracurricularActivities",
    "volunteering": "extracurricularActivities",
    "extracurricular": "extracurricularActivities",
}

DEFAULT_SECTION = "achievements"


def route_section(category: Optional[str]) -> str:
    """Resume section an achievement category belongs to."""
    return SECTION_BY_CATEGORY.get((category or "").strip().lower(), DEFAULT_SECTION)


# ============================================================
# SKILL KEYWORDS
# Matched case-insensitively on word boundaries against title + description
# ============================================================

SKILL_KEYWORDS: Dict[str, List[str]] = {
    "languages": [
        "Python", "Java", "JavaScript", "TypeScript", "C++", "C#", "Golang",
        "Rust", "Kotlin", "Swift", "Ruby", "PHP", "SQL", "MATLAB", "Scala", "Dart",
    ],
    "web": [
        "HTML", "CSS", "React", "Angular", "Vue", "Next.js", "Node.js",
        "Express.js", "Tailwind", "Bootstrap", "REST API", "GraphQL",
    ],
    "frameworksAndTools": [
        "Django", "Flask", "FastAPI", "Spring Boot", "TensorFlow", "PyTorch",
        "Keras", "scikit-learn", "Pandas", "NumPy", "OpenCV", "Git",
        "Docker", "Kubernetes", "Jenkins", "MongoDB", "PostgreSQL", "MySQL",
        "Redis", "Figma", "Unity", "Arduino",
    ],
    "platforms": [
        "AWS", "Azure", "GCP", "Google Cloud", "Firebase", "Heroku", "Vercel",
        "Linux", "Android", "iOS", "Raspberry Pi",
    ],
    "concepts": [
        "Machine Learning", "Deep Learning", "Artificial Intelligence", "NLP",
        "Computer Vision", "Data Science", "Data Structures", "Algorithms",
        "Blockchain", "Cybersecurity", "Cloud Computing", "IoT",
        "Microservices", "DevOps", "Agile",
    ],
}

# Profile skill categories that map straight onto a resume bucket
SKILL_CATEGORY_HINTS = {
    "language": "languages",
    "programming": "languages",
    "web": "web",
    "frontend": "web",
    "backend": "web",
    "framework": "frameworksAndTools",
    "tool": "frameworksAndTools",
    "library": "frameworksAndTools",
    "database": "frameworksAndTools",
    "platform": "platforms",
    "cloud": "platforms",
}


def _keyword_pattern(keyword: str) -> re.Pattern:
    # \b fails next to symbols like "+" and "#", so use explicit word-char lookarounds
    return re.compile(r"(?<!\w)" + re.escape(keyword) + r"(?!\w)", re.IGNORECASE)


_KEYWORD_PATTERNS = {
    bucket: [(kw, _keyword_pattern(kw)) for kw in keywords]
    for bucket, keywords in SKILL_KEYWORDS.items()
}

_CANONICAL = {kw.lower(): (bucket, kw) for bucket, keywords in SKILL_KEYWORDS.items() for kw in keywords}


def extract_keywords(text: str) -> Dict[str, List[str]]:
    """Technology keywords found in text, grouped by resume skill bucket."""
    found = {bucket: [] for bucket in SKILL_KEYWORDS}
    if not text:
        return found
    for bucket, patterns in _KEYWORD_PATTERNS.items():
        for keyword, pattern in patterns:
            if pattern.search(text):
                found[bucket].append(keyword)
    return found


def _add_unique(items: List[str], value: str):
    if value and value.lower() not in (i.lower() for i in items):
        items.append(value)


def build_technical_skills(achievements: List[dict], profile_skills: List[dict] = None) -> TechnicalSkills:
    """Keyword hits from achievement text merged with the profile's declared skills."""
    buckets: Dict[str, List[str]] = {bucket: [] for bucket in SKILL_KEYWORDS}

    for achievement in achievements:
        text = f"{achievement.get('achievementTitle') or ''} {achievement.get('achievementDescription') or ''}"
        for bucket, keywords in extract_keywords(text).items():
            for keyword in keywords:
                _add_unique(buckets[bucket], keyword)

    for skill in profile_skills or []:
        name = (skill.get("name") or "").strip()
        if not name:
            continue
        if name.lower() in _CANONICAL:
            bucket, canonical = _CANONICAL[name.lower()]
            _add_unique(buckets[bucket], canonical)
            continue
        hint = (skill.get("category") or "").lower()
        bucket = next((b for key, b in SKILL_CATEGORY_HINTS.items() if key in hint), "concepts")
        _add_unique(buckets[bucket], name)

    return TechnicalSkills(**buckets)


# ============================================================
# PROMPT CONSTRUCTION
# ============================================================

def serialize_achievements(achievements: List[dict]) -> str:
    """One line per achievement, in the order given."""
    lines = []
    for a in achievements:
        lines.append(
            f"- [{a.get('category') or 'uncategorized'}] {a.get('achievementTitle') or ''}"
            f" | Description: {a.get('achievementDescription') or 'N/A'}"
            f" | Issued by: {a.get('issuingAuthority') or 'N/A'}"
            f" | Date: {a.get('achievementDate') or 'N/A'}"
            f" | Level: {a.get('level') or 'N/A'}"
        )
    return "\n".join(lines)


RESUME_SYSTEM_PROMPT = (
    "You are an expert technical resume writer. "
    "You only answer with a single valid JSON object and never invent facts."
)

RESUME_JSON_SHAPE = """{
  "personalInfo": {"name": "", "email": "", "phone": "", "location": "", "linkedin": "", "github": "", "portfolio": ""},
  "objective": "",
  "education": [{"institution": "", "degree": "", "dates": "", "score": "", "scoreType": "", "details": ""}],
  "technicalSkills": {"languages": [], "web": [], "frameworksAndTools": [], "platforms": [], "concepts": []},
  "projects": [{"title": "", "description": "", "date": "", "level": "", "issuer": "", "link": ""}],
  "experience": [{"role": "", "organization": "", "dates": "", "location": "", "responsibilities": [""]}],
  "achievements": [{"title": "", "event": "", "details": "", "date": "", "level": ""}],
  "extracurricularActivities": [{"role": "", "organization": "", "description": "", "date": ""}],
  "certifications": [{"name": "", "issuer": "", "date": "", "url": ""}]
}"""


def build_prompt(personal_info: PersonalInfo, profile: dict, achievements: List[dict],
                 skills: TechnicalSkills) -> str:
    """Structured-output prompt for the remote generator."""
    education = profile.get("education") or []
    certifications = profile.get("certifications") or []
    return f"""Convert the following student data into a professional, action-oriented resume.

Student Profile:
Name: {personal_info.name}
Email: {personal_info.email or 'N/A'}
Phone: {personal_info.phone or 'N/A'}
Location: {personal_info.location or 'N/A'}
Degree: {profile.get('degree') or 'N/A'} at {profile.get('institution') or 'N/A'}
Graduation Year: {profile.get('graduationYear') or 'N/A'}
GPA: {profile.get('gpa') or 'N/A'}
Education entries: {education}
Certifications: {certifications}

Validated Achievements:
{serialize_achievements(achievements)}

Detected technical skills: {skills.model_dump()}

Instructions:
1. Write a two-sentence "objective" grounded in the profile and achievements.
2. Route every achievement by its category:
   - academic -> education
   - project, research -> projects
   - internship, leadership -> experience (responsibilities as action-verb bullets)
   - sports, cultural, social, volunteering, extracurricular -> extracurricularActivities
   - any other category -> achievements
3. Keep every detected technical skill in its bucket; add only skills clearly implied by the text.
4. Use strong action verbs. Quantify results only when the data gives numbers.
5. Return ONLY valid JSON with exactly this structure:
{RESUME_JSON_SHAPE}
"""


# ============================================================
# GENERATORS
# ============================================================

def build_personal_info(profile: dict, display_name: str) -> PersonalInfo:
    return PersonalInfo(
        name=display_name or "",
        email=profile.get("email") or "",
        phone=profile.get("phone") or "",
        location=profile.get("location") or "",
        linkedin=profile.get("linkedin") or "",
        github=profile.get("github") or "",
        portfolio=profile.get("portfolio") or "",
    )


class ResumeGenerator(ABC):
    """Strategy interface: every generator returns a ResumeDocument."""

    @abstractmethod
    async def generate(self, profile: dict, display_name: str, achievements: List[dict]) -> ResumeDocument:
        pass


class RuleBasedGenerator(ResumeGenerator):
    """Deterministic resume built from category routing and keyword lists."""

    async def generate(self, profile: dict, display_name: str, achievements: List[dict]) -> ResumeDocument:
        return self.build(profile, display_name, achievements)

    def build(self, profile: dict, display_name: str, achievements: List[dict]) -> ResumeDocument:
        resume = ResumeDocument(
            personalInfo=build_personal_info(profile, display_name),
            technicalSkills=build_technical_skills(achievements, profile.get("skills")),
            education=self._profile_education(profile),
            certifications=[
                ResumeCertification(
                    name=c.get("name") or "",
                    issuer=c.get("issuer") or "",
                    date=c.get("date") or "",
                    url=c.get("url") or "",
                )
                for c in profile.get("certifications") or []
                if c.get("name")
            ],
            generatedBy="rule-based",
        )

        for a in achievements:
            title = a.get("achievementTitle") or ""
            description = a.get("achievementDescription") or ""
            issuer = a.get("issuingAuthority") or ""
            date = a.get("achievementDate") or ""
            level = a.get("level") or ""

            section = route_section(a.get("category"))
            if section == "education":
                resume.education.append(ResumeEducation(
                    institution=issuer, degree=title, dates=date, details=description,
                ))
            elif section == "projects":
                resume.projects.append(ResumeProject(
                    title=title, description=description, date=date, level=level,
                    issuer=issuer, link=a.get("evidenceLink") or "",
                ))
            elif section == "experience":
                resume.experience.append(ResumeExperience(
                    role=title, organization=issuer, dates=date,
                    responsibilities=[description] if description else [],
                ))
            elif section == "extracurricularActivities":
                resume.extracurricularActivities.append(ResumeActivity(
                    role=title, organization=issuer, description=description, date=date,
                ))
            else:
                resume.achievements.append(ResumeAchievement(
                    title=title, event=issuer, details=description, date=date, level=level,
                ))

        resume.objective = self._objective(profile, resume)
        return resume

    def _profile_education(self, profile: dict) -> List[ResumeEducation]:
        entries = []
        for e in profile.get("education") or []:
            if not (e.get("degree") or e.get("institution")):
                continue
            degree = e.get("degree") or ""
            if e.get("major"):
                degree = f"{degree} in {e['major']}" if degree else e["major"]
            years = " - ".join(y for y in (e.get("startYear"), e.get("endYear")) if y)
            entries.append(ResumeEducation(
                institution=e.get("institution") or "",
                degree=degree,
                dates=years,
                score=e.get("gpa") or "",
                scoreType="GPA" if e.get("gpa") else "",
            ))

        # Flat profile fields stand in when no education list was saved
        if not entries and (profile.get("degree") or profile.get("institution")):
            entries.append(ResumeEducation(
                institution=profile.get("institution") or "",
                degree=profile.get("degree") or "",
                dates=profile.get("graduationYear") or "",
                score=profile.get("gpa") or "",
                scoreType="GPA" if profile.get("gpa") else "",
            ))
        return entries

    def _objective(self, profile: dict, resume: ResumeDocument) -> str:
        degree = profile.get("degree") or "student"
        institution = profile.get("institution")
        who = f"{degree} at {institution}" if institution else degree

        skills = resume.technicalSkills
        top_skills = (skills.languages + skills.frameworksAndTools + skills.web + skills.concepts)[:3]

        objective = f"Motivated {who} seeking opportunities to apply proven skills"
        if top_skills:
            objective += f" in {', '.join(top_skills)}"
        highlights = len(resume.projects) + len(resume.experience)
        if highlights:
            noun = "project and experience highlight" if highlights == 1 else "project and experience highlights"
            objective += f", backed by {highlights} validated {noun}"
        return objective + "."


def drop_nulls(value):
    """Remove None values at any depth so missing fields fall back to their defaults."""
    if isinstance(value, dict):
        return {k: drop_nulls(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [drop_nulls(v) for v in value if v is not None]
    return value


class RemoteGenerator(ResumeGenerator):
    """Resume written by the AI provider, normalized onto the fixed shape."""

    def __init__(self, provider: AIProvider):
        self.provider = provider

    async def generate(self, profile: dict, display_name: str, achievements: List[dict]) -> ResumeDocument:
        personal_info = build_personal_info(profile, display_name)
        skills = build_technical_skills(achievements, profile.get("skills"))
        prompt = build_prompt(personal_info, profile, achievements, skills)

        data = await self.provider.generate_json(prompt, system_prompt=RESUME_SYSTEM_PROMPT, max_tokens=4096)
        if not isinstance(data, dict):
            raise AIProviderError("Resume response is not a JSON object")

        resume = ResumeDocument.model_validate(drop_nulls(data))

        # Contact details come from the profile, not from the model
        resume.personalInfo = personal_info
        resume.generatedBy = "ai"
        return resume


async def generate_resume(
    provider: Optional[AIProvider],
    profile: dict,
    display_name: str,
    achievements: List[dict],
    mock: bool = False,
) -> ResumeDocument:
    """
    Build a resume, degrading to the rule-based generator when AI is unusable.

    Args:
        provider: Configured AI provider, or None
        profile: Student profile document (may be empty)
        display_name: Name printed on the resume
        achievements: Validated achievements only
        mock: Force the rule-based generator
    """
    rule_based = RuleBasedGenerator()
    if mock:
        return await rule_based.generate(profile, display_name, achievements)
    if provider is None:
        logger.info("No AI provider configured, using rule-based resume generator")
        return await rule_based.generate(profile, display_name, achievements)

    try:
        return await RemoteGenerator(provider).generate(profile, display_name, achievements)
    except (AIProviderError, ValidationError) as e:
        logger.warning(f"AI resume generation via {provider.name} failed, falling back to rule-based: {e}")
        return await rule_based.generate(profile, display_name, achievements)
