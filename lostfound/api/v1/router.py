from fastapi import APIRouter

from lostfound.api.v1.endpoints import items, matches

api_router = APIRouter()
api_router.include_router(items.router)
api_router.include_router(matches.router)
