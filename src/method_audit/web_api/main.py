"""
FastAPI Application
==================
Main entry point for the Method Audit API.

Run with:
    uvicorn method_audit.web_api.main:app --reload
"""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from method_audit import __version__
from method_audit.frontends import SourceError
from method_audit.web_api.config import settings
from method_audit.web_api.routers import analyze, health

_logger = logging.getLogger(__name__)

app = FastAPI(
    title="Method Audit API",
    description="Dead code, loop depth and complexity analysis for C# and Python methods",
    version=__version__,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, tags=["Health"])
app.include_router(analyze.router, prefix="/analyze", tags=["Analyze"])


@app.exception_handler(SourceError)
async def source_error_handler(request: Request, exc: SourceError):
    """Unparsable or unsupported source is the client's problem: 422."""
    _logger.info("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.get("/")
async def root():
    """Root endpoint - API info"""
    return {
        "name": "Method Audit API",
        "version": __version__,
        "docs": "/docs" if settings.DEBUG else "disabled",
        "path_analysis": settings.ALLOW_PATH_ANALYSIS,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
