from fastapi import APIRouter

from app.api.endpoints import chat, queries

api_router = APIRouter()
api_router.include_router(queries.router, tags=["queries"])
api_router.include_router(chat.router, tags=["chat"])
