"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.

Request bodies keep every field optional: missing fields are reported by the
handlers as 400 with a readable message instead of pydantic's 422 list.
Field names follow the camelCase wire format the frontend already uses.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Any, Dict
from enum import Enum


# Ignore unknown keys; accept 3.8 where "3.8" is expected (forms and AI output vary)
LENIENT = ConfigDict(extra="ignore", coerce_numbers_to_str=True)


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    student = "student"
    admin = "admin"


class AchievementStatus(str, Enum):
    pending = "pending"
    validated = "validated"
    rejected = "rejected"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None

class RegisterRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None
    rollNumber: Optional[str] = None
    name: Optional[str] = None

class StudentSummary(BaseModel):
    id: str
    username: str
    rollNumber: str
    name: str

class UserSummary(BaseModel):
    id: str
    username: str
    name: Optional[str] = None
    rollNumber: Optional[str] = None
    role: UserRole

class LoginResponse(BaseModel):
    message: str
    token: str
    user: UserSummary

class StudentAuthResponse(BaseModel):
    message: str
    token: str
    profileComplete: bool
    student: StudentSummary


# ============================================================
# ACHIEVEMENT SCHEMAS
# ============================================================

class AchievementCreate(BaseModel):
    studentName: Optional[str] = None
    rollNumber: Optional[str] = None
    achievementTitle: Optional[str] = None
    achievementDescription: Optional[str] = None
    category: Optional[str] = None
    level: Optional[str] = None
    achievementDate: Optional[str] = None
    issuingAuthority: Optional[str] = None
    evidenceLink: Optional[str] = None

class AchievementUpdate(BaseModel):
    achievementTitle: Optional[str] = None
    achievementDescription: Optional[str] = None
    category: Optional[str] = None
    level: Optional[str] = None
    achievementDate: Optional[str] = None
    issuingAuthority: Optional[str] = None
    evidenceLink: Optional[str] = None

class AchievementStatusUpdate(BaseModel):
    # Plain str: anything other than validated/rejected is a 400, not a 422
    status: Optional[str] = None

class StatusChange(BaseModel):
    status: AchievementStatus
    changedBy: Optional[str] = None
    changedAt: str

class AchievementResponse(BaseModel):
    id: str
    studentId: Optional[str] = None
    studentName: str
    rollNumber: str
    achievementTitle: str
    achievementDescription: Optional[str] = None
    category: str
    level: str
    achievementDate: str
    issuingAuthority: str
    evidenceLink: str
    status: AchievementStatus
    dateLogged: str
    lastUpdated: Optional[str] = None
    reviewedBy: Optional[str] = None
    reviewedAt: Optional[str] = None
    statusHistory: List[StatusChange] = []

class AchievementSummary(BaseModel):
    id: str
    studentName: str
    rollNumber: str
    status: AchievementStatus

class AchievementLogResponse(BaseModel):
    message: str
    achievement: AchievementSummary

class AchievementActionResponse(BaseModel):
    message: str
    achievement: AchievementResponse


# ============================================================
# PROFILE SCHEMAS
# ============================================================

class SkillEntry(BaseModel):
    model_config = LENIENT
    name: Optional[str] = None
    category: Optional[str] = None
    proficiency: Optional[str] = None

class EducationEntry(BaseModel):
    model_config = LENIENT
    degree: Optional[str] = None
    institution: Optional[str] = None
    startYear: Optional[str] = None
    endYear: Optional[str] = None
    gpa: Optional[str] = None
    major: Optional[str] = None

class CertificationEntry(BaseModel):
    model_config = LENIENT
    name: Optional[str] = None
    issuer: Optional[str] = None
    date: Optional[str] = None
    credentialId: Optional[str] = None
    url: Optional[str] = None

class ProfileUpdate(BaseModel):
    model_config = LENIENT
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    linkedin: Optional[str] = None
    github: Optional[str] = None
    portfolio: Optional[str] = None
    degree: Optional[str] = None
    institution: Optional[str] = None
    graduationYear: Optional[str] = None
    gpa: Optional[str] = None
    skills: Optional[List[SkillEntry]] = None
    education: Optional[List[EducationEntry]] = None
    certifications: Optional[List[CertificationEntry]] = None

class ProfileResponse(BaseModel):
    model_config = LENIENT
    id: Optional[str] = None
    username: Optional[str] = None
    rollNumber: str
    name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""
    github: str = ""
    portfolio: str = ""
    degree: str = ""
    institution: str = ""
    graduationYear: str = ""
    gpa: str = ""
    skills: List[SkillEntry] = []
    education: List[EducationEntry] = []
    certifications: List[CertificationEntry] = []
    profileComplete: bool = False
    completionPercentage: int = 0
    type: str = "student"

class ProfileUpdateResponse(BaseModel):
    message: str
    token: str
    profileComplete: bool
    profile: ProfileResponse

class NameUpdate(BaseModel):
    name: Optional[str] = None

class NameUpdateResponse(BaseModel):
    message: str
    token: str
    name: str

class DashboardStats(BaseModel):
    total: int
    accepted: int
    rejected: int
    pending: int


# ============================================================
# ANALYTICS SCHEMAS
# ============================================================

class CountBucket(BaseModel):
    name: str
    value: int

class AnalyticsResponse(BaseModel):
    total: int = 0
    pending: int = 0
    validated: int = 0
    rejected: int = 0
    byCategory: List[CountBucket] = []
    byLevel: List[CountBucket] = []


# ============================================================
# RESUME SCHEMAS
# ============================================================

class ResumeRequest(BaseModel):
    rollNumber: Optional[str] = None
    mock: Optional[bool] = None

class PersonalInfo(BaseModel):
    model_config = LENIENT
    name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""
    github: str = ""
    portfolio: str = ""

class ResumeEducation(BaseModel):
    model_config = LENIENT
    institution: str = ""
    degree: str = ""
    dates: str = ""
    score: str = ""
    scoreType: str = ""
    details: str = ""

class TechnicalSkills(BaseModel):
    model_config = LENIENT
    languages: List[str] = []
    web: List[str] = []
    frameworksAndTools: List[str] = []
    platforms: List[str] = []
    concepts: List[str] = []

class ResumeProject(BaseModel):
    model_config = LENIENT
    title: str = ""
    description: str = ""
    date: str = ""
    level: str = ""
    issuer: str = ""
    link: str = ""

class ResumeExperience(BaseModel):
    model_config = LENIENT
    role: str = ""
    organization: str = ""
    dates: str = ""
    location: str = ""
    responsibilities: List[str] = []

class ResumeAchievement(BaseModel):
    model_config = LENIENT
    title: str = ""
    event: str = ""
    details: str = ""
    date: str = ""
    level: str = ""

class ResumeActivity(BaseModel):
    model_config = LENIENT
    role: str = ""
    organization: str = ""
    description: str = ""
    date: str = ""

class ResumeCertification(BaseModel):
    model_config = LENIENT
    name: str = ""
    issuer: str = ""
    date: str = ""
    url: str = ""

class ResumeDocument(BaseModel):
    """Fixed résumé shape shared by the AI and rule-based generators."""
    model_config = LENIENT

    personalInfo: PersonalInfo = Field(default_factory=PersonalInfo)
    objective: str = ""
    education: List[ResumeEducation] = []
    technicalSkills: TechnicalSkills = Field(default_factory=TechnicalSkills)
    projects: List[ResumeProject] = []
    experience: List[ResumeExperience] = []
    achievements: List[ResumeAchievement] = []
    extracurricularActivities: List[ResumeActivity] = []
    certifications: List[ResumeCertification] = []
    generatedBy: str = "rule-based"


# ============================================================
# AI HELPER SCHEMAS
# ============================================================

class DescriptionRequest(BaseModel):
    title: Optional[str] = None
    category: Optional[str] = None
    level: Optional[str] = None
    description: Optional[str] = None

class TextRequest(BaseModel):
    text: Optional[str] = None

class TailorRequest(BaseModel):
    achievements: Optional[List[Dict[str, Any]]] = None
    jobDescription: Optional[str] = None

class CategorizeRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None

class AchievementsRequest(BaseModel):
    achievements: Optional[List[Dict[str, Any]]] = None

class ProfileAchievementsRequest(BaseModel):
    profile: Optional[Dict[str, Any]] = None
    achievements: Optional[List[Dict[str, Any]]] = None

class ItemsRequest(BaseModel):
    items: Optional[List[Any]] = None

class ChatRequest(BaseModel):
    message: Optional[str] = None
    context: Optional[Dict[str, Any]] = None

class ChatResponse(BaseModel):
    response: str

class DescriptionResponse(BaseModel):
    description: str


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True
