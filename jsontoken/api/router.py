from fastapi import APIRouter

from . import tokens

api_router = APIRouter()
api_router.include_router(tokens.router, prefix="/tokens", tags=["tokens"])
