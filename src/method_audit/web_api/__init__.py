"""
Method Audit Web API
====================
FastAPI-based REST API exposing the structural analyzers.

Quick Start:
    uvicorn method_audit.web_api.main:app --reload
"""
from .main import app

__all__ = ["app"]
