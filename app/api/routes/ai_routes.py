"""
AI Helper Routes (rate limited per caller)

POST /ai/generate-description - Write an achievement description
POST /ai/optimize-bullet - Rewrite a bullet three ways
POST /ai/tailor-resume - Rank achievements against a job description
POST /ai/categorize - Suggest category/level/tags
POST /ai/interview-prep - STAR answers from achievements
POST /ai/extract-skills - Skills demonstrated by achievements
POST /ai/career-path - Career path suggestions
POST /ai/analyze-gaps - Portfolio gap analysis
POST /ai/sentiment-analysis - Market value of skills/certifications
POST /ai/chat - Free-form assistant with caller-supplied context
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, HTTPException, Depends

from app.core.rate_limit import ai_rate_limit
from app.services.ai import AIProvider, AIProviderError, require_ai_provider
from app.services.ai_helpers import AIHelperService
from app.schemas.schemas import (
    DescriptionRequest, DescriptionResponse, TextRequest, TailorRequest, CategorizeRequest,
    AchievementsRequest, ProfileAchievementsRequest, ItemsRequest, ChatRequest, ChatResponse
)

logger = logging.getLogger(__name__)

# Rate limit runs before the provider check so throttled callers never reach the AI
router = APIRouter(prefix="/ai", tags=["AI"], dependencies=[Depends(ai_rate_limit)])


def get_helper(provider: AIProvider = Depends(require_ai_provider)) -> AIHelperService:
    return AIHelperService(provider)


async def _run(op: str, call):
    """Await a helper call, mapping provider failures to 502."""
    try:
        return await call
    except AIProviderError as e:
        logger.error(f"AI helper {op} failed: {e}")
        raise HTTPException(status_code=502, detail=f"Failed to {op.replace('-', ' ')}")


@router.post("/generate-description", response_model=DescriptionResponse)
async def generate_description(data: DescriptionRequest, helper: AIHelperService = Depends(get_helper)):
    if not data.title:
        raise HTTPException(status_code=400, detail="Title is required")
    description = await _run(
        "generate-description",
        helper.generate_description(data.title, data.category, data.level, data.description),
    )
    return DescriptionResponse(description=description)


@router.post("/optimize-bullet", response_model=Dict[str, Any])
async def optimize_bullet(data: TextRequest, helper: AIHelperService = Depends(get_helper)):
    if not data.text:
        raise HTTPException(status_code=400, detail="Text is required")
    return await _run("optimize-bullet", helper.optimize_bullet(data.text))


@router.post("/tailor-resume", response_model=Dict[str, Any])
async def tailor_resume(data: TailorRequest, helper: AIHelperService = Depends(get_helper)):
    if not data.achievements or not data.jobDescription:
        raise HTTPException(status_code=400, detail="Achievements and job description are required")
    return await _run("tailor-resume", helper.tailor_resume(data.achievements, data.jobDescription))


@router.post("/categorize", response_model=Dict[str, Any])
async def categorize(data: CategorizeRequest, helper: AIHelperService = Depends(get_helper)):
    if not data.title:
        raise HTTPException(status_code=400, detail="Title is required")
    return await _run("categorize", helper.categorize(data.title, data.description))


@router.post("/interview-prep", response_model=Dict[str, Any])
async def interview_prep(data: AchievementsRequest, helper: AIHelperService = Depends(get_helper)):
    if not data.achievements:
        raise HTTPException(status_code=400, detail="Achievements are required")
    return await _run("interview-prep", helper.interview_prep(data.achievements))


@router.post("/extract-skills", response_model=Dict[str, Any])
async def extract_skills(data: AchievementsRequest, helper: AIHelperService = Depends(get_helper)):
    if not data.achievements:
        raise HTTPException(status_code=400, detail="Achievements are required")
    return await _run("extract-skills", helper.extract_skills(data.achievements))


@router.post("/career-path", response_model=Dict[str, Any])
async def career_path(data: ProfileAchievementsRequest, helper: AIHelperService = Depends(get_helper)):
    if data.profile is None or data.achievements is None:
        raise HTTPException(status_code=400, detail="Profile and achievements are required")
    return await _run("career-path", helper.career_path(data.profile, data.achievements))


@router.post("/analyze-gaps", response_model=Dict[str, Any])
async def analyze_gaps(data: ProfileAchievementsRequest, helper: AIHelperService = Depends(get_helper)):
    if data.profile is None or data.achievements is None:
        raise HTTPException(status_code=400, detail="Profile and achievements are required")
    return await _run("analyze-gaps", helper.analyze_gaps(data.profile, data.achievements))


@router.post("/sentiment-analysis", response_model=Dict[str, Any])
async def sentiment_analysis(data: ItemsRequest, helper: AIHelperService = Depends(get_helper)):
    if not data.items:
        raise HTTPException(status_code=400, detail="Items are required")
    return await _run("sentiment-analysis", helper.sentiment_analysis(data.items))


@router.post("/chat", response_model=ChatResponse)
async def chat(data: ChatRequest, helper: AIHelperService = Depends(get_helper)):
    if not data.message or not data.message.strip():
        raise HTTPException(status_code=400, detail="Message is required")
    response = await _run("chat", helper.chat(data.message, data.context))
    return ChatResponse(response=response)
