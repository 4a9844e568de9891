"""API endpoints."""

from fastapi import APIRouter

api_router = APIRouter()

# Импортируем все роутеры
from codix.api import admin, admin_dashboard, blog, career, client, client_service, contact, pricing, services  # noqa: E402

api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(admin_dashboard.router, prefix="/adminDashboard", tags=["admin-dashboard"])
api_router.include_router(services.router, prefix="/services", tags=["services"])
api_router.include_router(pricing.router, prefix="/pricing", tags=["pricing"])
api_router.include_router(client.router, prefix="/client", tags=["client"])
api_router.include_router(client_service.router, prefix="/clientService", tags=["client-service"])
api_router.include_router(blog.router, prefix="/blog", tags=["blog"])
api_router.include_router(contact.router, prefix="/contact", tags=["contact"])
api_router.include_router(career.router, prefix="/career", tags=["career"])
