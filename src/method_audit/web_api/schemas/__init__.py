"""
Pydantic Schemas
===============
Request and response models for the API.
"""
from .analyze import (
    AnalyzePathRequest,
    AnalyzeResponse,
    AnalyzeSourceRequest,
    AnalyzeSummary,
)

__all__ = [
    "AnalyzePathRequest",
    "AnalyzeResponse",
    "AnalyzeSourceRequest",
    "AnalyzeSummary",
]
