"""
Request Builder Unit Tests
==========================

Tests for build_analysis_request covering:
- Empty message rejection
- "Unknown" substitution for platform and relationship
- Full context forwarding
"""

import pytest

from myjellybean.core.exceptions import EmptyMessageError
from myjellybean.schemas.analysis import ContextSignals
from myjellybean.services.request_builder import build_analysis_request


pytestmark = pytest.mark.unit

ALL_SIGNALS = {
    "asked_for_money",
    "asked_to_move_off_platform",
    "asked_for_otp",
    "threatened_me",
    "asking_for_meetup",
    "sexual_content",
}


class TestEmptyMessage:
    """An empty message never produces a request."""

    @pytest.mark.parametrize("message", ["", "   ", "\n\t", None])
    def test_blank_message_is_rejected(self, message):
        with pytest.raises(EmptyMessageError) as exc_info:
            build_analysis_request(message, platform="SMS")

        assert exc_info.value.status_code == 422

    def test_message_is_forwarded_as_pasted(self):
        request = build_analysis_request("  call me back  ")

        assert request.message == "  call me back  "


class TestDefaults:
    """Blank metadata is sent as the literal "Unknown"."""

    @pytest.mark.parametrize("platform, relationship", [
        ("", ""),
        (None, None),
        ("   ", "\t"),
    ])
    def test_blank_metadata_becomes_unknown(self, platform, relationship):
        request = build_analysis_request("hello", platform=platform, relationship=relationship)

        assert request.platform == "Unknown"
        assert request.relationship == "Unknown"

    def test_provided_metadata_is_kept(self):
        request = build_analysis_request("hello", platform="Discord", relationship="friend")

        assert request.platform == "Discord"
        assert request.relationship == "friend"


class TestContextForwarding:
    """All six context keys are always present."""

    def test_no_context(self):
        request = build_analysis_request("hello")

        payload = request.to_payload()
        assert set(payload["context"]) == ALL_SIGNALS
        assert not any(payload["context"].values())

    def test_partial_mapping(self):
        request = build_analysis_request("hello", context={"asked_for_money": True})

        payload = request.to_payload()
        assert set(payload["context"]) == ALL_SIGNALS
        assert payload["context"]["asked_for_money"] is True
        assert payload["context"]["sexual_content"] is False

    def test_context_model_is_copied(self):
        signals = ContextSignals(asking_for_meetup=True)

        request = build_analysis_request("hello", context=signals)
        signals.asking_for_meetup = False

        assert request.context.asking_for_meetup is True
