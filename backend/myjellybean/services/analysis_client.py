"""
Analysis provider client.

Sends an AnalysisRequest to the Gemini ``generateContent`` endpoint with a
strict response schema and turns the reply into a validated
AnalysisResult. Every provider-specific failure is translated here into
ConfigurationError, ProviderError or MalformedResponseError.

There is no retry loop: a failed analysis needs an explicit resubmission.
"""

import json
from typing import Any, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from myjellybean.core.config import Settings, get_settings
from myjellybean.core.enums import Category
from myjellybean.core.exceptions import (
    ConfigurationError,
    MalformedResponseError,
    ProviderError,
)
from myjellybean.core.logging import get_logger, log_execution_time
from myjellybean.schemas.analysis import AnalysisRequest, AnalysisResult

logger = get_logger(__name__)

SYSTEM_INSTRUCTION = """You are a world-class human-safety analyst. Your goal is to protect users from scams, impersonation, harassment, and coercion.

Guidelines:
- Prioritize user protection and be conservative in risk scoring. When in doubt, flag the risk rather than under-flag it.
- Never encourage retaliation, doxxing, or threats.
- If content suggests imminent danger (violence, stalking, self-harm), explicitly state to contact emergency services.
- If uncertain, choose "uncertain" and provide verification steps instead of a confident guess.
- The safer reply must be non-escalatory and must not share personal information.
- Provide a strict JSON response.

Categories: {categories}.""".format(categories=", ".join(c.value for c in Category))

PROMPT_TEMPLATE = """Analyze this message for safety risks.

Message: "{message}"
Platform: {platform}
Relationship: {relationship}
Additional Context: {context}
"""

_STRING = {"type": "STRING"}
_STRING_LIST = {"type": "ARRAY", "items": {"type": "STRING"}}

RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "category": {"type": "STRING", "enum": [c.value for c in Category]},
        "risk_score": {"type": "INTEGER"},
        "confidence": {"type": "NUMBER"},
        "top_signals": _STRING_LIST,
        "why_it_matters": _STRING,
        "do_this_now": _STRING_LIST,
        "safer_reply": _STRING,
        "report_summary": {
            "type": "OBJECT",
            "properties": {
                "what_happened": _STRING,
                "why_risky": _STRING_LIST,
                "next_steps": _STRING_LIST,
                "evidence_checklist": _STRING_LIST,
            },
            "required": ["what_happened", "why_risky", "next_steps", "evidence_checklist"],
        },
        "limitations": _STRING,
    },
    "required": [
        "category",
        "risk_score",
        "confidence",
        "top_signals",
        "why_it_matters",
        "do_this_now",
        "safer_reply",
        "report_summary",
        "limitations",
    ],
}


def build_prompt(request: AnalysisRequest) -> str:
    """Natural-language instruction embedding the whole request."""
    payload = request.to_payload()
    return PROMPT_TEMPLATE.format(
        message=payload["message"],
        platform=payload["platform"],
        relationship=payload["relationship"],
        context=json.dumps(payload["context"]),
    )


def build_generate_content_body(request: AnalysisRequest) -> dict[str, Any]:
    """Request body for the ``generateContent`` call."""
    return {
        "systemInstruction": {"parts": [{"text": SYSTEM_INSTRUCTION}]},
        "contents": [{"role": "user", "parts": [{"text": build_prompt(request)}]}],
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": RESPONSE_SCHEMA,
        },
    }


def _extract_text(envelope: Any) -> str:
    """Pull the generated JSON text out of a ``generateContent`` envelope."""
    if not isinstance(envelope, dict):
        raise MalformedResponseError("Provider envelope is not an object")

    feedback = envelope.get("promptFeedback") or {}
    if isinstance(feedback, dict) and feedback.get("blockReason"):
        raise ProviderError(
            "Provider refused the request",
            details={"block_reason": feedback["blockReason"]},
        )

    candidates = envelope.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        raise MalformedResponseError("Provider response has no candidates")

    content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        raise MalformedResponseError("Provider response has no content parts")

    text = "".join(
        part["text"] for part in parts
        if isinstance(part, dict) and isinstance(part.get("text"), str)
    )
    if not text.strip():
        raise MalformedResponseError("Provider response has no text")
    return text


def parse_analysis_result(text: str) -> AnalysisResult:
    """
    Validate generated JSON text against the AnalysisResult schema.

    Raises:
        MalformedResponseError: On invalid JSON or any schema violation.
    """
    try:
        return AnalysisResult.model_validate_json(text)
    except PydanticValidationError as e:
        errors = [
            {"field": ".".join(str(loc) for loc in err["loc"]), "type": err["type"]}
            for err in e.errors()
        ]
        raise MalformedResponseError(
            "Provider response failed schema validation",
            details={"errors": errors},
        ) from e


class AnalysisClient:
    """
    Async client for the analysis provider.

    Args:
        api_key: Provider credential. Checked on every call.
        model: Model name.
        base_url: REST API base URL.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport (used to stub the provider).
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gemini-3-flash-preview",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "AnalysisClient":
        settings = settings or get_settings()
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
            timeout=settings.provider_timeout,
            transport=transport,
        )

    @property
    def endpoint(self) -> str:
        return f"{self._base_url}/models/{self._model}:generateContent"

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key and self._api_key.strip())

    async def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        """
        Analyze one request.

        Raises:
            ConfigurationError: No API key; raised before any network call.
            ProviderError: Transport failure, timeout, HTTP error or refusal.
            MalformedResponseError: Reply is not a valid AnalysisResult.
        """
        if not self.is_configured:
            logger.error("provider_not_configured", setting="GEMINI_API_KEY")
            raise ConfigurationError()

        return await self._call_provider(request)

    @log_execution_time(logger, "provider_call")
    async def _call_provider(self, request: AnalysisRequest) -> AnalysisResult:
        body = build_generate_content_body(request)

        logger.info(
            "provider_request",
            endpoint=self.endpoint,
            model=self._model,
            message_length=len(request.message),
        )

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(
                    self.endpoint,
                    json=body,
                    headers={"x-goog-api-key": self._api_key},
                )
                response.raise_for_status()

        except httpx.TimeoutException as e:
            raise ProviderError("Analysis provider timed out", details={"timeout": self._timeout}) from e

        except httpx.HTTPStatusError as e:
            raise ProviderError(
                "Analysis provider returned an error status",
                details={"status_code": e.response.status_code},
            ) from e

        except httpx.HTTPError as e:
            raise ProviderError("Analysis provider is unreachable", details={"error": str(e)}) from e

        try:
            envelope = response.json()
        except ValueError as e:
            raise MalformedResponseError("Provider envelope is not JSON") from e

        result = parse_analysis_result(_extract_text(envelope))
        logger.info(
            "provider_result_validated",
            category=result.category.value,
            risk_score=result.risk_score,
        )
        return result


# Singleton instance for dependency injection
_analysis_client: AnalysisClient | None = None


def get_analysis_client() -> AnalysisClient:
    """Get the analysis client singleton instance."""
    global _analysis_client
    if _analysis_client is None:
        _analysis_client = AnalysisClient.from_settings()
    return _analysis_client
