"""
Analyze Schemas
===============
Request and response models for the analyze endpoints.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from method_audit.model import Language


class AnalyzeSourceRequest(BaseModel):
    """Request to analyse source text"""

    source: str = Field(..., description="Source text of one file")
    language: Language = Field(..., description="Source language: csharp or python")
    filename: Optional[str] = Field(default=None, description="Name shown in the report")
    checks: Optional[List[str]] = Field(
        default=None, description="Checks to run (default: all)"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "source": "class A { int F() { return 1; Console.Write(\"x\"); } }",
                "language": "csharp",
                "filename": "A.cs",
                "checks": ["dead-code", "depth", "complexity"],
            }
        }


class AnalyzePathRequest(BaseModel):
    """Request to analyse a file or directory on the server"""

    path: str = Field(..., description="Local file or directory path")
    checks: Optional[List[str]] = Field(
        default=None, description="Checks to run (default: all)"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "path": "/path/to/repo/src",
                "checks": ["dead-code"],
            }
        }


class AnalyzeSummary(BaseModel):
    """Summary of an analysis run"""

    files_analyzed: int = Field(default=0)
    files_failed: int = Field(default=0)
    methods_analyzed: int = Field(default=0)
    unreachable_statements: int = Field(default=0)
    critical_methods: int = Field(default=0)


class AnalyzeResponse(BaseModel):
    """Response from an analyze operation"""

    status: str = Field(..., description="clean or violations")
    summary: AnalyzeSummary
    result: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        json_schema_extra = {
            "example": {
                "status": "violations",
                "summary": {
                    "files_analyzed": 1,
                    "files_failed": 0,
                    "methods_analyzed": 1,
                    "unreachable_statements": 1,
                    "critical_methods": 0,
                },
                "result": {},
            }
        }
