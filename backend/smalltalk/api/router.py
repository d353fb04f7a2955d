from fastapi import APIRouter

from smalltalk.api.routes import voice

api_router = APIRouter()
api_router.include_router(voice.router, tags=["voice"])
