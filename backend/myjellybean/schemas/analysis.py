"""
Analysis request/result schemas.

Pydantic v2 models for the data that crosses the provider boundary.
The result models are the single gate every provider response and every
stored history entry must pass: missing fields, unknown categories,
mistyped numbers and out-of-range scores are all rejected, never patched.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from myjellybean.core.enums import Category, RiskBand

UNKNOWN = "Unknown"
HIGH_RISK_THRESHOLD = 70
MEDIUM_RISK_THRESHOLD = 30


class ContextSignals(BaseModel):
    """
    Known risk indicators the user ticks alongside the message.

    Attributes:
        asked_for_money: Sender asked for money or gift cards.
        asked_to_move_off_platform: Sender wants to continue elsewhere.
        asked_for_otp: Sender asked for a one-time code.
        threatened_me: Message contains a threat.
        asking_for_meetup: Sender wants to meet in person.
        sexual_content: Message contains sexual content.
    """

    asked_for_money: bool = False
    asked_to_move_off_platform: bool = False
    asked_for_otp: bool = False
    threatened_me: bool = False
    asking_for_meetup: bool = False
    sexual_content: bool = False

    model_config = {
        "extra": "forbid",
    }

    def active(self) -> list[str]:
        """Names of the signals that are set."""
        return [name for name, value in self.model_dump().items() if value]


class AnalysisRequest(BaseModel):
    """
    One submission, ready to be sent to the analysis provider.

    Built by ``build_analysis_request``; never issued with an empty message.
    """

    message: str = Field(..., description="Message text exactly as pasted")
    platform: str = Field(default=UNKNOWN, description="Where the message arrived")
    relationship: str = Field(default=UNKNOWN, description="Who the sender is to the user")
    context: ContextSignals = Field(default_factory=ContextSignals)

    model_config = {
        "extra": "forbid",
    }

    @field_validator("message")
    @classmethod
    def message_must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("message cannot be empty")
        return v

    @field_validator("platform", "relationship", mode="before")
    @classmethod
    def blank_means_unknown(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return UNKNOWN
        return v

    def to_payload(self) -> dict[str, Any]:
        """Provider-facing dict with every context key present."""
        return self.model_dump(mode="json")


class ReportSummary(BaseModel):
    """Report-ready digest of an analysis."""

    what_happened: str
    why_risky: list[str]
    next_steps: list[str]
    evidence_checklist: list[str]

    model_config = {
        "extra": "forbid",
    }


class AnalysisResult(BaseModel):
    """
    Structured risk assessment returned by the analysis provider.

    Attributes:
        category: One of the closed risk categories.
        risk_score: Integer from 0 to 100.
        confidence: Float from 0 to 1.
        top_signals: Red flags, most significant first.
        why_it_matters: Plain-language explanation.
        do_this_now: Steps in the order they should be taken.
        safer_reply: Non-escalatory reply draft.
        report_summary: Material for the shareable report.
        limitations: Caveats about the assessment.
    """

    category: Category
    risk_score: int = Field(..., strict=True, ge=0, le=100)
    confidence: float = Field(..., strict=True, ge=0.0, le=1.0, allow_inf_nan=False)
    top_signals: list[str]
    why_it_matters: str
    do_this_now: list[str]
    safer_reply: str
    report_summary: ReportSummary
    limitations: str

    model_config = {
        "extra": "forbid",
    }

    @property
    def is_high_risk(self) -> bool:
        return self.risk_score >= HIGH_RISK_THRESHOLD

    @property
    def risk_band(self) -> RiskBand:
        if self.risk_score >= HIGH_RISK_THRESHOLD:
            return RiskBand.HIGH
        if self.risk_score >= MEDIUM_RISK_THRESHOLD:
            return RiskBand.MEDIUM
        return RiskBand.LOW


class ResultView(BaseModel):
    """An analysis result plus the facts the result screen derives from it."""

    result: AnalysisResult
    risk_band: RiskBand
    is_high_risk: bool = Field(..., description="Show the emergency-services banner")
    confidence_percent: int = Field(..., ge=0, le=100)
    category_label: str
    saved_to_history: Optional[bool] = None

    @classmethod
    def from_result(
        cls,
        result: AnalysisResult,
        saved_to_history: Optional[bool] = None,
    ) -> "ResultView":
        return cls(
            result=result,
            risk_band=result.risk_band,
            is_high_risk=result.is_high_risk,
            confidence_percent=round(result.confidence * 100),
            category_label=result.category.value.replace("_", " "),
            saved_to_history=saved_to_history,
        )
