"""
Analysis request builder.

Turns raw form fields into an AnalysisRequest. An empty (or whitespace
only) message is rejected here so nothing is ever sent for it.
"""

from typing import Any, Mapping, Optional, Union

from myjellybean.core.exceptions import EmptyMessageError
from myjellybean.core.logging import get_logger
from myjellybean.schemas.analysis import UNKNOWN, AnalysisRequest, ContextSignals

logger = get_logger(__name__)

ContextInput = Union[ContextSignals, Mapping[str, Any], None]


def _or_unknown(value: Optional[str]) -> str:
    if value is None or not value.strip():
        return UNKNOWN
    return value.strip()


def _coerce_context(context: ContextInput) -> ContextSignals:
    if context is None:
        return ContextSignals()
    if isinstance(context, ContextSignals):
        return context.model_copy()
    return ContextSignals.model_validate(dict(context))


def build_analysis_request(
    message: Optional[str],
    platform: Optional[str] = None,
    relationship: Optional[str] = None,
    context: ContextInput = None,
) -> AnalysisRequest:
    """
    Assemble an analysis request from form fields.

    Args:
        message: The pasted message.
        platform: Where it arrived; blank becomes "Unknown".
        relationship: Who sent it; blank becomes "Unknown".
        context: Full or partial context signals; unset keys default to False.

    Returns:
        AnalysisRequest carrying all six context keys.

    Raises:
        EmptyMessageError: If the trimmed message is empty.
    """
    if message is None or not message.strip():
        logger.info("analysis_request_rejected", reason="empty_message")
        raise EmptyMessageError()

    signals = _coerce_context(context)
    request = AnalysisRequest(
        message=message,
        platform=_or_unknown(platform),
        relationship=_or_unknown(relationship),
        context=signals,
    )

    logger.debug(
        "analysis_request_built",
        message_length=len(message),
        platform=request.platform,
        relationship=request.relationship,
        active_signals=signals.active(),
    )
    return request
