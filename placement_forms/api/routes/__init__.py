"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from placement_forms.api.routes.admin_form_routes import router as admin_form_router
from placement_forms.api.routes.form_routes import router as form_router
from placement_forms.api.routes.student_routes import router as student_router
from placement_forms.api.routes.upload_routes import router as upload_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(admin_form_router)
api_router.include_router(form_router)
api_router.include_router(student_router)
api_router.include_router(upload_router)
