"""
Analyze Router
==============
Endpoints for analysing source text or server-side paths.

Source that cannot be parsed raises ``SourceError``, which the application
turns into a 422 response.
"""
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, HTTPException

from method_audit import api as core_api
from method_audit.contracts.load import validate_instance
from method_audit.core.runner import parse_checks
from method_audit.model.report import AnalysisReport
from method_audit.policy.bands import exit_code_from_reports
from method_audit.utils.exit_codes import ExitCode
from method_audit.web_api.config import settings
from method_audit.web_api.schemas.analyze import (
    AnalyzePathRequest,
    AnalyzeResponse,
    AnalyzeSourceRequest,
    AnalyzeSummary,
)

router = APIRouter()


def _checked(names: Optional[List[str]]) -> List[str]:
    """Reject unknown check names up front so they never reach the analyzers."""
    try:
        return sorted(c.value for c in parse_checks(names))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


def _response(report: AnalysisReport) -> AnalyzeResponse:
    result = report.to_dict()
    summary = result["summary"]
    clean = exit_code_from_reports(report.files) == ExitCode.SUCCESS
    return AnalyzeResponse(
        status="clean" if clean else "violations",
        summary=AnalyzeSummary(
            files_analyzed=summary["files_analyzed"],
            files_failed=summary["files_failed"],
            methods_analyzed=summary["methods_analyzed"],
            unreachable_statements=summary["unreachable_statements"],
            critical_methods=summary["critical_methods"],
        ),
        result=result,
    )


@router.post("", response_model=AnalyzeResponse)
def analyze_source(request: AnalyzeSourceRequest):
    """
    Analyse the source text of one file.

    - **source**: file contents
    - **language**: csharp or python
    - **checks**: optional subset of checks
    """
    if len(request.source.encode("utf-8")) > settings.MAX_SOURCE_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"Source exceeds {settings.MAX_SOURCE_BYTES} bytes",
        )

    checks = _checked(request.checks)
    filename = request.filename or f"<source>.{request.language.value}"
    file_report = core_api.analyze_source(
        request.source,
        request.language,
        filename=filename,
        checks=checks,
    )

    report = AnalysisReport(
        config={"target": filename, "checks": checks},
        files=[file_report],
    )
    validate_instance(report.to_dict())
    return _response(report)


@router.post("/path", response_model=AnalyzeResponse)
def analyze_path(request: AnalyzePathRequest):
    """
    Analyse a file or directory on the server's filesystem.

    Disabled unless ``METHOD_AUDIT_API_ALLOW_PATH_ANALYSIS`` is set.

    - **path**: local path (file or directory)
    - **checks**: optional subset of checks
    """
    if not settings.ALLOW_PATH_ANALYSIS:
        raise HTTPException(status_code=403, detail="Path analysis is disabled")

    target = Path(request.path)
    if not target.exists():
        raise HTTPException(status_code=404, detail=f"Path not found: {request.path}")

    report, _ = core_api.analyze_path(target, checks=_checked(request.checks))
    return _response(report)
