"""
Analysis Routes
===============

Submit a message, read the current result, and export its texts.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from myjellybean.core.enums import ExportKind
from myjellybean.schemas.analysis import ResultView
from myjellybean.schemas.session import SubmissionForm
from myjellybean.services.session_service import AnalysisSession, get_analysis_session

router = APIRouter(tags=["Analysis"])


@router.post(
    "/analyze",
    response_model=ResultView,
    summary="Analyze a suspicious message",
    description="Runs one analysis. Rejected with 409 while another is in flight.",
)
async def analyze_message(
    form: SubmissionForm,
    session: AnalysisSession = Depends(get_analysis_session),
):
    await session.submit(form)
    return session.current_view()


@router.get("/result", response_model=ResultView, summary="Current analysis result")
def get_current_result(session: AnalysisSession = Depends(get_analysis_session)):
    return session.current_view()


@router.get(
    "/report",
    response_class=PlainTextResponse,
    summary="Shareable report",
    description="Moves to the report view and returns the plain-text report.",
)
def get_report(session: AnalysisSession = Depends(get_analysis_session)):
    return PlainTextResponse(session.request_report())


@router.get(
    "/export/{kind}",
    response_class=PlainTextResponse,
    summary="Text for clipboard export",
)
def export_text(
    kind: ExportKind,
    session: AnalysisSession = Depends(get_analysis_session),
):
    return PlainTextResponse(session.export_text(kind))
