"""
Placement Forms
Dynamic form engine of the campus placement platform.

Architecture:
- MongoDB: Form templates, responses, student profiles (read-only)
- Object storage: Files attached to answers
- FastAPI: Admin builder/export API and student form API
"""

__version__ = "1.0.0"
