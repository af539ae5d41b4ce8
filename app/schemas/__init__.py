"""
Schemas module - Request/Response schemas for API endpoints.

All schemas live in app.schemas.schemas:
- Request schemas (what API accepts; fields optional, handlers report 400)
- Response schemas (what API returns)
"""
