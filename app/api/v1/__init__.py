"""API v1 router."""
from fastapi import APIRouter

from app.api.v1 import exams, lexicon

api_router = APIRouter()

api_router.include_router(exams.router, prefix="/exams", tags=["Exams"])
api_router.include_router(lexicon.router, prefix="/lexicon", tags=["Lexicon"])
