"""
Enumeration Module
==================

Defines enumerations used across the application.
"""

from enum import Enum


class Category(str, Enum):
    """Closed set of risk categories an analysis can assign."""

    SCAM_FRAUD = "scam_fraud"
    IMPERSONATION = "impersonation"
    HARASSMENT_ABUSE = "harassment_abuse"
    COERCION_MANIPULATION = "coercion_manipulation"
    PRIVACY_RISK = "privacy_risk"
    MEETUP_ESCALATION_RISK = "meetup_escalation_risk"
    SELF_HARM_OR_VIOLENCE_RISK = "self_harm_or_violence_risk"
    UNCERTAIN = "uncertain"
    SAFE = "safe"


class RiskBand(str, Enum):
    """Coarse risk level used for the result meter."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ViewState(str, Enum):
    """Screens the client can show."""

    HOME = "home"
    ANALYZING = "analyzing"
    RESULTS = "results"
    REPORT = "report"
    EDUCATION = "education"


class ViewEvent(str, Enum):
    """Events that move the client between screens."""

    SUBMIT = "submit"
    SUCCESS = "success"
    FAILURE = "failure"
    REQUEST_REPORT = "request_report"
    BACK = "back"
    NAVIGATE_HOME = "navigate_home"
    NAVIGATE_EDUCATION = "navigate_education"


class ExportKind(str, Enum):
    """Texts that can be copied out of a result."""

    SAFER_REPLY = "safer_reply"
    REPORT = "report"
