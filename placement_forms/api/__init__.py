"""
API module - FastAPI routers and endpoint definitions.

- routes/: one router per audience (admin forms, respondent forms, student, uploads)
- dependencies: access to the service container built at startup

Usage:
    from placement_forms.api.routes import api_router
    app.include_router(api_router, prefix="/api")
"""
