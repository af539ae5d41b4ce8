"""
Student Achievement Tracker
Students log achievements, admins validate them, validated ones become a resume.

Architecture:
- MongoDB: students (account + profile) and achievements
- Gemini / Azure OpenAI: resume writing and helper prompts, with a
  rule-based resume generator when no provider is usable
"""

__version__ = "1.0.0"
