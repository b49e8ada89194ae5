"""
Schema Validation Unit Tests
=============================

Tests for Pydantic schema validation including:
- ContextSignals
- AnalysisRequest
- AnalysisResult (the provider boundary)
- ResultView derived fields
- SubmissionForm and SampleMessage
"""

import json

import pytest
from pydantic import ValidationError as PydanticValidationError

from myjellybean.core.enums import Category, RiskBand
from myjellybean.schemas.analysis import (
    AnalysisRequest,
    AnalysisResult,
    ContextSignals,
    ResultView,
)
from myjellybean.schemas.session import SampleMessage, SubmissionForm


pytestmark = pytest.mark.schema


class TestContextSignals:
    """Tests for ContextSignals schema."""

    def test_all_signals_default_to_false(self):
        signals = ContextSignals()

        dumped = signals.model_dump()
        assert len(dumped) == 6
        assert not any(dumped.values())

    def test_partial_input_fills_missing_keys(self):
        signals = ContextSignals.model_validate({"asked_for_money": True})

        assert signals.asked_for_money is True
        assert signals.asked_for_otp is False
        assert signals.active() == ["asked_for_money"]

    def test_unknown_signal_raises_error(self):
        with pytest.raises(PydanticValidationError):
            ContextSignals.model_validate({"asked_for_crypto": True})


class TestAnalysisRequest:
    """Tests for AnalysisRequest schema."""

    def test_blank_platform_and_relationship_become_unknown(self):
        request = AnalysisRequest(message="hello", platform="  ", relationship="")

        assert request.platform == "Unknown"
        assert request.relationship == "Unknown"

    def test_blank_message_raises_error(self):
        with pytest.raises(PydanticValidationError):
            AnalysisRequest(message="   \n")

    def test_payload_contains_every_context_key(self):
        request = AnalysisRequest(message="hi", context={"threatened_me": True})

        payload = request.to_payload()

        assert set(payload["context"]) == {
            "asked_for_money",
            "asked_to_move_off_platform",
            "asked_for_otp",
            "threatened_me",
            "asking_for_meetup",
            "sexual_content",
        }
        assert payload["context"]["threatened_me"] is True


class TestAnalysisResult:
    """Tests for the strict AnalysisResult schema."""

    def test_valid_payload(self, result_data):
        result = AnalysisResult.model_validate_json(json.dumps(result_data))

        assert result.category is Category.SCAM_FRAUD
        assert result.risk_score == 88
        assert result.report_summary.why_risky == ["Impersonation", "Untraceable payment"]

    @pytest.mark.parametrize("field", [
        "category",
        "risk_score",
        "confidence",
        "top_signals",
        "why_it_matters",
        "do_this_now",
        "safer_reply",
        "report_summary",
        "limitations",
    ])
    def test_missing_required_field_raises_error(self, result_data, field):
        del result_data[field]

        with pytest.raises(PydanticValidationError):
            AnalysisResult.model_validate_json(json.dumps(result_data))

    def test_missing_nested_summary_field_raises_error(self, result_data):
        del result_data["report_summary"]["evidence_checklist"]

        with pytest.raises(PydanticValidationError):
            AnalysisResult.model_validate_json(json.dumps(result_data))

    def test_unknown_category_raises_error(self, make_result_data):
        with pytest.raises(PydanticValidationError):
            AnalysisResult.model_validate_json(json.dumps(make_result_data(category="spam")))

    @pytest.mark.parametrize("score", [-1, 101, 250])
    def test_risk_score_out_of_range_is_rejected_not_clamped(self, make_result_data, score):
        with pytest.raises(PydanticValidationError):
            AnalysisResult.model_validate_json(json.dumps(make_result_data(risk_score=score)))

    @pytest.mark.parametrize("confidence", [-0.01, 1.01, 7])
    def test_confidence_out_of_range_is_rejected(self, make_result_data, confidence):
        with pytest.raises(PydanticValidationError):
            AnalysisResult.model_validate_json(json.dumps(make_result_data(confidence=confidence)))

    @pytest.mark.parametrize("score", ["85", 85.5, 85.0, True])
    def test_mistyped_risk_score_is_rejected(self, make_result_data, score):
        with pytest.raises(PydanticValidationError):
            AnalysisResult.model_validate_json(json.dumps(make_result_data(risk_score=score)))

    def test_string_list_field_must_be_a_list(self, make_result_data):
        with pytest.raises(PydanticValidationError):
            AnalysisResult.model_validate_json(
                json.dumps(make_result_data(top_signals="just one signal"))
            )

    def test_boundaries_are_accepted(self, make_result_data):
        low = AnalysisResult.model_validate_json(
            json.dumps(make_result_data(risk_score=0, confidence=0.0))
        )
        high = AnalysisResult.model_validate_json(
            json.dumps(make_result_data(risk_score=100, confidence=1.0))
        )

        assert low.risk_score == 0
        assert high.confidence == 1.0

    @pytest.mark.parametrize("score, band", [
        (0, RiskBand.LOW),
        (29, RiskBand.LOW),
        (30, RiskBand.MEDIUM),
        (69, RiskBand.MEDIUM),
        (70, RiskBand.HIGH),
        (100, RiskBand.HIGH),
    ])
    def test_risk_band(self, make_result, score, band):
        result = make_result(risk_score=score)

        assert result.risk_band is band
        assert result.is_high_risk is (score >= 70)


class TestResultView:
    """Tests for ResultView derived fields."""

    def test_from_result(self, make_result):
        result = make_result(category="meetup_escalation_risk", confidence=0.876, risk_score=72)

        view = ResultView.from_result(result, saved_to_history=True)

        assert view.category_label == "meetup escalation risk"
        assert view.confidence_percent == 88
        assert view.is_high_risk is True
        assert view.risk_band is RiskBand.HIGH
        assert view.saved_to_history is True


class TestSubmissionForm:
    """Tests for SubmissionForm schema."""

    def test_defaults(self):
        form = SubmissionForm()

        assert form.message == ""
        assert form.save_to_history is False
        assert form.context == ContextSignals()

    def test_extra_field_raises_error(self):
        with pytest.raises(PydanticValidationError):
            SubmissionForm(message="hi", urgent=True)


class TestSampleMessage:
    """Tests for SampleMessage schema."""

    def test_to_form_carries_all_context_keys(self):
        sample = SampleMessage(
            id=9,
            label="Test",
            message="Send the code",
            platform="SMS",
            relationship="unknown",
            context={"asked_for_otp": True},
        )

        form = sample.to_form()

        assert form.message == "Send the code"
        assert form.context.asked_for_otp is True
        assert form.context.asked_for_money is False
        assert form.save_to_history is False
