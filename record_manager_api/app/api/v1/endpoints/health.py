"""Liveness endpoint for API v1."""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter()


@router.get("/health", response_class=PlainTextResponse, summary="Liveness probe")
async def health() -> str:
    return "Ok"
