"""
Session schemas.

Models for the input form, the demo catalog and the session snapshot
that the front end polls to know which screen to render.
"""

from typing import Optional

from pydantic import BaseModel, Field

from myjellybean.core.enums import ViewState
from myjellybean.schemas.analysis import AnalysisResult, ContextSignals


class SubmissionForm(BaseModel):
    """
    Schema for the analysis input form.

    The message is not length-checked here: empty submissions are rejected
    by the request builder so they never reach the ``analyzing`` view.
    """

    message: str = Field(default="", description="The suspicious message")
    platform: str = Field(default="", examples=["SMS", "Instagram", "Marketplace"])
    relationship: str = Field(default="", examples=["unknown", "friend", "buyer/seller"])
    context: ContextSignals = Field(default_factory=ContextSignals)
    save_to_history: bool = Field(default=False, description="Keep this result in local history")

    model_config = {
        "extra": "forbid",
        "json_schema_extra": {
            "examples": [
                {
                    "message": "Hey it's mom, I lost my phone, send me $200 via gift card",
                    "platform": "SMS",
                    "relationship": "unknown",
                    "context": {"asked_for_money": True},
                    "save_to_history": True,
                }
            ]
        },
    }


class SampleMessage(BaseModel):
    """Demo catalog entry used to pre-fill the input form."""

    id: int
    label: str
    message: str
    platform: str
    relationship: str
    context: ContextSignals = Field(default_factory=ContextSignals)

    model_config = {
        "extra": "forbid",
        "frozen": True,
    }

    def to_form(self) -> SubmissionForm:
        return SubmissionForm(
            message=self.message,
            platform=self.platform,
            relationship=self.relationship,
            context=self.context.model_copy(),
        )


class NavigateRequest(BaseModel):
    """Requested target view."""

    target: ViewState


class SessionState(BaseModel):
    """Snapshot of the application state owned by the session."""

    view: ViewState
    has_result: bool
    is_analyzing: bool
    history_count: int = Field(..., ge=0)
    draft: Optional[SubmissionForm] = None
    last_error: Optional[str] = None


class HistoryResponse(BaseModel):
    """Local history, most recent first."""

    items: list[AnalysisResult]
    count: int = Field(..., ge=0)
    limit: int = Field(..., ge=1)
