"""
Analysis session orchestration service.

The session is the single owner of application state: the visible view,
the current result and history (through the ResultStore), the last
submitted form and the last user-facing error. Routes only talk to the
session; the components it wires together never reach into each other.
"""

import asyncio
import uuid
from typing import Optional

from myjellybean.core.enums import ExportKind, ViewEvent, ViewState
from myjellybean.core.exceptions import GENERIC_FAILURE_MESSAGE, AnalysisError, NoCurrentResultError
from myjellybean.core.logging import LogContext, get_logger
from myjellybean.schemas.analysis import AnalysisResult, ResultView
from myjellybean.schemas.session import SessionState, SubmissionForm
from myjellybean.services.analysis_client import AnalysisClient, get_analysis_client
from myjellybean.services.report_formatter import format_report
from myjellybean.services.request_builder import build_analysis_request
from myjellybean.services.result_store import ResultStore, build_result_store
from myjellybean.services.sample_catalog import SampleCatalog, get_sample_catalog
from myjellybean.services.view_controller import ViewController, validate_transition

logger = get_logger(__name__)


class AnalysisSession:
    """
    Service class for the submit → analyze → results → report workflow.

    Args:
        client: Analysis provider client.
        store: Current result and history holder.
        catalog: Demo samples for form pre-fill.
        controller: View state machine; a fresh one starts at ``home``.
    """

    def __init__(
        self,
        client: AnalysisClient,
        store: ResultStore,
        catalog: Optional[SampleCatalog] = None,
        controller: Optional[ViewController] = None,
    ) -> None:
        self._client = client
        self._store = store
        self._catalog = catalog
        self._controller = controller or ViewController()
        self._draft: Optional[SubmissionForm] = None
        self._last_error: Optional[str] = None
        self._last_saved: Optional[bool] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def view(self) -> ViewState:
        return self._controller.state

    @property
    def store(self) -> ResultStore:
        return self._store

    @property
    def draft(self) -> Optional[SubmissionForm]:
        return self._draft

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    def snapshot(self) -> SessionState:
        return SessionState(
            view=self._controller.state,
            has_result=self._store.current is not None,
            is_analyzing=self._controller.is_analyzing,
            history_count=len(self._store.history),
            draft=self._draft,
            last_error=self._last_error,
        )

    def start(self) -> None:
        """Load persisted history; called once at startup."""
        self._store.load_history()

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    async def submit(self, form: SubmissionForm) -> AnalysisResult:
        """
        Run one analysis.

        The form is kept as the draft whatever happens, so a failed
        submission can be resent without retyping it.

        Raises:
            AnalysisInProgressError: Another analysis is pending.
            InvalidTransitionError: Not on the ``home`` view.
            EmptyMessageError: Blank message; the view stays ``home``.
            ConfigurationError | ProviderError | MalformedResponseError:
                The analysis failed; the view is back on ``home``.
        """
        validate_transition(self._controller.state, ViewEvent.SUBMIT)

        self._draft = form
        self._last_error = None
        request = build_analysis_request(
            form.message,
            platform=form.platform,
            relationship=form.relationship,
            context=form.context,
        )

        analysis_id = uuid.uuid4().hex[:12]
        with LogContext(analysis_id=analysis_id):
            self._controller.dispatch(ViewEvent.SUBMIT)
            logger.info(
                "analysis_started",
                message_length=len(request.message),
                save_to_history=form.save_to_history,
            )

            try:
                result = await self._client.analyze(request)
            except AnalysisError as e:
                self._fail(e.user_message)
                logger.warning("analysis_failed", error_type=type(e).__name__, error=e.message)
                raise
            except Exception as e:
                self._fail(GENERIC_FAILURE_MESSAGE)
                logger.error("analysis_crashed", error_type=type(e).__name__, exc_info=True)
                raise
            except asyncio.CancelledError:
                self._fail(GENERIC_FAILURE_MESSAGE)
                logger.warning("analysis_cancelled")
                raise

            self._store.set_current(result)
            self._last_saved = self._save(result) if form.save_to_history else None
            self._controller.dispatch(ViewEvent.SUCCESS)

            logger.info(
                "analysis_completed",
                category=result.category.value,
                risk_score=result.risk_score,
                high_risk=result.is_high_risk,
            )
        return result

    def _fail(self, message: str) -> None:
        self._last_error = message
        self._controller.dispatch(ViewEvent.FAILURE)

    def _save(self, result: AnalysisResult) -> bool:
        try:
            self._store.append_history(result)
        except OSError:
            logger.error("history_save_failed", exc_info=True)
            return False
        return True

    def current_view(self) -> ResultView:
        result = self._store.current
        if result is None:
            raise NoCurrentResultError()
        return ResultView.from_result(result, saved_to_history=self._last_saved)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def navigate(self, target: ViewState) -> SessionState:
        self._controller.navigate(target, has_result=self._store.current is not None)
        return self.snapshot()

    def request_report(self) -> str:
        """Show the report view and return the report text."""
        result = self._store.current
        if result is None:
            raise NoCurrentResultError()
        if self._controller.state is not ViewState.REPORT:
            self._controller.dispatch(ViewEvent.REQUEST_REPORT)
        return format_report(result)

    def back(self) -> SessionState:
        self._controller.dispatch(ViewEvent.BACK)
        return self.snapshot()

    # ------------------------------------------------------------------
    # Export, history and samples
    # ------------------------------------------------------------------

    def export_text(self, kind: ExportKind) -> str:
        """Text for a one-shot clipboard copy."""
        result = self._store.current
        if result is None:
            raise NoCurrentResultError()
        if kind is ExportKind.SAFER_REPLY:
            return result.safer_reply
        return format_report(result)

    def history(self) -> list[AnalysisResult]:
        return self._store.history

    def clear_history(self) -> None:
        self._store.clear()

    def apply_sample(self, sample_id: int) -> SubmissionForm:
        """Pre-fill the draft form from a demo sample."""
        catalog = self._catalog or get_sample_catalog()
        form = catalog.get(sample_id).to_form()
        self._draft = form
        return form


# Singleton instance for dependency injection
_analysis_session: AnalysisSession | None = None


def get_analysis_session() -> AnalysisSession:
    """Get the analysis session singleton instance."""
    global _analysis_session
    if _analysis_session is None:
        _analysis_session = AnalysisSession(
            client=get_analysis_client(),
            store=build_result_store(),
            catalog=get_sample_catalog(),
        )
    return _analysis_session


def reset_analysis_session() -> None:
    """Forget the session singleton (used on shutdown and in tests)."""
    global _analysis_session
    _analysis_session = None
