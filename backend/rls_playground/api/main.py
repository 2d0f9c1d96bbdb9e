from fastapi import APIRouter

from rls_playground.api.routes import playground, sessions, utils

api_router = APIRouter()
api_router.include_router(utils.router)
api_router.include_router(playground.router)
api_router.include_router(sessions.router)
