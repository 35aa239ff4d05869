"""Main API router for v1."""
from fastapi import APIRouter

from wellpulse.api.v1.endpoints import admins, auth, checkins, company_users, domains, reports, support

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(domains.router, prefix="/domains", tags=["Domains"])
api_router.include_router(admins.router, prefix="/admins", tags=["Licenses"])
api_router.include_router(company_users.router, prefix="/company/users", tags=["Company users"])
api_router.include_router(checkins.router, prefix="/checkin", tags=["Check-ins"])
api_router.include_router(support.router, prefix="/support", tags=["Support"])
api_router.include_router(reports.router, prefix="/reports", tags=["Reports"])
