"""
Health Check Router
==================
Endpoints for health checks and readiness probes.
"""
from fastapi import APIRouter

from method_audit import __version__
from method_audit.frontends import SUFFIX_LANGUAGES

router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Health check endpoint.
    Returns OK if the service is running.
    """
    return {"status": "ok", "version": __version__}


@router.get("/ready")
async def readiness_check():
    """
    Readiness check endpoint.
    Lists the languages the service can analyse.
    """
    languages = sorted({lang.value for lang in SUFFIX_LANGUAGES.values()})
    return {"status": "ready", "languages": languages}
