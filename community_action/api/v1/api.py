from fastapi import APIRouter

from community_action.api.v1.routes_auth import router as auth_router
from community_action.api.v1.routes_project import router as project_router


api_router = APIRouter()

api_router.include_router(project_router, prefix="/projects", tags=["projects"])
api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
