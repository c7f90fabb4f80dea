from fastapi import APIRouter

from sitecms.api.routes import (
    admin_content,
    admin_forms,
    admin_pages,
    admin_pricing,
    forms,
    health,
    pages,
    pricing,
)

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(pages.router, tags=["pages"])
api_router.include_router(pricing.router, tags=["pricing"])
api_router.include_router(forms.router, tags=["forms"])
api_router.include_router(admin_pricing.router)
api_router.include_router(admin_pages.router)
api_router.include_router(admin_content.router)
api_router.include_router(admin_forms.router)
