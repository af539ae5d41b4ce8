"""
AI Helper Service - single-prompt helpers behind /api/ai/*.

Each method builds one prompt, sends it to the configured provider and
returns either plain text or the parsed JSON object. Provider failures
surface as AIProviderError; the routes turn that into a 502.
"""

import json
from typing import Any, Dict, List, Optional

from app.services.ai import AIProvider, AIProviderError


HELPER_SYSTEM_PROMPT = (
    "You are a career assistant for university students. "
    "Be concise and specific, and never invent achievements the student did not report."
)

JSON_ONLY = "Return ONLY valid JSON, no markdown, no explanation."


def _dump(data: Any) -> str:
    return json.dumps(data, indent=2, default=str)


def _summarize_achievements(achievements: List[Dict[str, Any]]) -> str:
    """Short, prompt-friendly view of the achievement dicts sent by the client."""
    lines = []
    for a in achievements:
        title = a.get("achievementTitle") or a.get("title") or "Untitled"
        description = a.get("achievementDescription") or a.get("description") or ""
        category = a.get("category") or "uncategorized"
        level = a.get("level") or ""
        line = f"- {title} ({category}{', ' + level if level else ''})"
        if description:
            line += f": {description}"
        lines.append(line)
    return "\n".join(lines)


class AIHelperService:
    """Prompt builders for the AI helper endpoints."""

    def __init__(self, provider: AIProvider):
        self.provider = provider

    async def _ask_json(self, prompt: str, op: str) -> Dict[str, Any]:
        data = await self.provider.generate_json(f"{prompt}\n\n{JSON_ONLY}", system_prompt=HELPER_SYSTEM_PROMPT)
        if not isinstance(data, dict):
            raise AIProviderError(f"{op}: expected a JSON object")
        return data

    # ============================================================
    # WRITING HELPERS
    # ============================================================

    async def generate_description(self, title: str, category: Optional[str] = None,
                                   level: Optional[str] = None, description: Optional[str] = None) -> str:
        prompt = f"""Write a professional 2-3 sentence description of this student achievement
for a resume or portfolio. Use strong action verbs and mention impact.

Title: {title}
Category: {category or 'N/A'}
Level: {level or 'N/A'}
Notes from the student: {description or 'N/A'}

Return only the description text."""
        text = await self.provider.generate_text(prompt, system_prompt=HELPER_SYSTEM_PROMPT, temperature=0.7)
        return text.strip()

    async def optimize_bullet(self, text: str) -> Dict[str, Any]:
        prompt = f"""Rewrite this resume bullet point in three styles.

Bullet: {text}

Respond with JSON:
{{"actionOriented": "...", "quantified": "...", "skillFocused": "..."}}"""
        return await self._ask_json(prompt, "optimize-bullet")

    async def tailor_resume(self, achievements: List[Dict[str, Any]], job_description: str) -> Dict[str, Any]:
        prompt = f"""Select and rank the student's achievements most relevant to this job.

Job description:
{job_description}

Achievements:
{_summarize_achievements(achievements)}

Respond with JSON:
{{"relevantAchievements": [{{"title": "...", "relevanceScore": 0-100, "reason": "..."}}],
  "keySkills": ["..."],
  "customizationTips": ["..."]}}"""
        return await self._ask_json(prompt, "tailor-resume")

    async def categorize(self, title: str, description: Optional[str] = None) -> Dict[str, Any]:
        prompt = f"""Classify this student achievement.

Title: {title}
Description: {description or 'N/A'}

Allowed categories: academic, project, research, internship, leadership,
sports, cultural, social, volunteering, certification, competition, other.
Allowed levels: college, state, national, international.

Respond with JSON:
{{"category": "...", "level": "...", "tags": ["..."], "confidence": 0.0-1.0}}"""
        return await self._ask_json(prompt, "categorize")

    # ============================================================
    # ANALYSIS HELPERS
    # ============================================================

    async def interview_prep(self, achievements: List[Dict[str, Any]]) -> Dict[str, Any]:
        prompt = f"""Prepare STAR-format interview answers from these achievements.

Achievements:
{_summarize_achievements(achievements)}

Respond with JSON where each key holds {{"question": "...", "answer": "..."}}:
{{"leadership": {{}}, "challenge": {{}}, "teamwork": {{}}}}"""
        return await self._ask_json(prompt, "interview-prep")

    async def extract_skills(self, achievements: List[Dict[str, Any]]) -> Dict[str, Any]:
        prompt = f"""Extract the skills these achievements demonstrate.

Achievements:
{_summarize_achievements(achievements)}

Respond with JSON:
{{"technical": ["..."], "soft": ["..."], "tools": ["..."], "languages": ["..."],
  "trending": ["..."], "recommendations": ["..."]}}"""
        return await self._ask_json(prompt, "extract-skills")

    async def career_path(self, profile: Dict[str, Any], achievements: List[Dict[str, Any]]) -> Dict[str, Any]:
        prompt = f"""Suggest career paths for this student.

Profile:
{_dump(profile)}

Achievements:
{_summarize_achievements(achievements)}

Respond with JSON:
{{"careerPaths": [{{"title": "...", "matchScore": 0-100, "reasoning": "...", "nextSteps": ["..."]}}],
  "strengthsAnalysis": "...",
  "developmentAreas": ["..."]}}"""
        return await self._ask_json(prompt, "career-path")

    async def analyze_gaps(self, profile: Dict[str, Any], achievements: List[Dict[str, Any]]) -> Dict[str, Any]:
        prompt = f"""Find gaps in this student's achievement portfolio.

Profile:
{_dump(profile)}

Achievements:
{_summarize_achievements(achievements)}

Respond with JSON:
{{"missingCategories": ["..."], "recommendations": ["..."], "skillGaps": ["..."],
  "strengthScore": 0-100}}"""
        return await self._ask_json(prompt, "analyze-gaps")

    async def sentiment_analysis(self, items: List[Any]) -> Dict[str, Any]:
        prompt = f"""Rate the current market value of each skill or certification.

Items:
{_dump(items)}

Respond with JSON:
{{"scores": [{{"item": "...", "score": 0-100, "trend": "rising|stable|declining", "note": "..."}}]}}"""
        return await self._ask_json(prompt, "sentiment-analysis")

    async def chat(self, message: str, context: Optional[Dict[str, Any]] = None) -> str:
        prompt = message
        if context:
            prompt = f"Context provided by the student:\n{_dump(context)}\n\nQuestion:\n{message}"
        text = await self.provider.generate_text(prompt, system_prompt=HELPER_SYSTEM_PROMPT, temperature=0.7)
        return text.strip()
