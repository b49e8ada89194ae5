"""
Schemas Package Initialization
==============================

Exports all Pydantic schemas for the application.

Usage:
    from myjellybean.schemas import AnalysisResult, SubmissionForm
"""

# Analysis schemas
from myjellybean.schemas.analysis import (
    AnalysisRequest,
    AnalysisResult,
    ContextSignals,
    ReportSummary,
    ResultView,
)

# Session schemas
from myjellybean.schemas.session import (
    HistoryResponse,
    NavigateRequest,
    SampleMessage,
    SessionState,
    SubmissionForm,
)

__all__ = [
    # Analysis
    "AnalysisRequest",
    "AnalysisResult",
    "ContextSignals",
    "ReportSummary",
    "ResultView",
    # Session
    "HistoryResponse",
    "NavigateRequest",
    "SampleMessage",
    "SessionState",
    "SubmissionForm",
]
