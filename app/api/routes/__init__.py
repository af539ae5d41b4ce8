"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from app.api.routes.auth_routes import router as auth_router
from app.api.routes.student_routes import router as student_router
from app.api.routes.user_routes import router as user_router
from app.api.routes.profile_routes import router as profile_router
from app.api.routes.achievement_routes import router as achievement_router
from app.api.routes.resume_routes import router as resume_router
from app.api.routes.ai_routes import router as ai_router
from app.api.routes.chat_routes import router as chat_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(student_router)
api_router.include_router(user_router)
api_router.include_router(profile_router)
api_router.include_router(achievement_router)
api_router.include_router(resume_router)
api_router.include_router(ai_router)
api_router.include_router(chat_router)
