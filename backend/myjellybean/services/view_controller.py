"""
View state machine.

Allowed transitions:
    home      --submit-------------> analyzing
    analyzing --success------------> results
    analyzing --failure------------> home
    results   --request_report-----> report
    report    --back---------------> results
    results | report | education --navigate_home------> home
    home | results | report      --navigate_education-> education

``analyzing`` only accepts success or failure, which is what keeps a
second submission out while one is in flight.
"""

from myjellybean.core.enums import ViewEvent, ViewState
from myjellybean.core.exceptions import AnalysisInProgressError, InvalidTransitionError
from myjellybean.core.logging import get_logger

logger = get_logger(__name__)

# Define allowed view transitions
VALID_TRANSITIONS: dict[ViewState, dict[ViewEvent, ViewState]] = {
    ViewState.HOME: {
        ViewEvent.SUBMIT: ViewState.ANALYZING,
        ViewEvent.NAVIGATE_EDUCATION: ViewState.EDUCATION,
    },
    ViewState.ANALYZING: {
        ViewEvent.SUCCESS: ViewState.RESULTS,
        ViewEvent.FAILURE: ViewState.HOME,
    },
    ViewState.RESULTS: {
        ViewEvent.REQUEST_REPORT: ViewState.REPORT,
        ViewEvent.NAVIGATE_HOME: ViewState.HOME,
        ViewEvent.NAVIGATE_EDUCATION: ViewState.EDUCATION,
    },
    ViewState.REPORT: {
        ViewEvent.BACK: ViewState.RESULTS,
        ViewEvent.NAVIGATE_HOME: ViewState.HOME,
        ViewEvent.NAVIGATE_EDUCATION: ViewState.EDUCATION,
    },
    ViewState.EDUCATION: {
        ViewEvent.NAVIGATE_HOME: ViewState.HOME,
    },
}

RESULT_VIEWS = frozenset({ViewState.RESULTS, ViewState.REPORT})


def validate_transition(current: ViewState, event: ViewEvent) -> ViewState:
    """
    Return the state reached from ``current`` on ``event``.

    Raises:
        AnalysisInProgressError: On submit while analyzing.
        InvalidTransitionError: For any other pair not in the table.
    """
    if current is ViewState.ANALYZING and event is ViewEvent.SUBMIT:
        raise AnalysisInProgressError()

    target = VALID_TRANSITIONS.get(current, {}).get(event)
    if target is None:
        raise InvalidTransitionError(current.value, event.value)
    return target


class ViewController:
    """Tracks the visible screen; starts at ``home``."""

    def __init__(self, initial: ViewState = ViewState.HOME) -> None:
        if initial in RESULT_VIEWS or initial is ViewState.ANALYZING:
            raise ValueError(f"{initial.value} cannot be an initial view")
        self._state = initial

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def is_analyzing(self) -> bool:
        return self._state is ViewState.ANALYZING

    def dispatch(self, event: ViewEvent) -> ViewState:
        """Apply an event and return the new state."""
        previous = self._state
        self._state = validate_transition(previous, event)
        logger.debug("view_transition", previous=previous.value, trigger=event.value, current=self._state.value)
        return self._state

    def navigate(self, target: ViewState, has_result: bool) -> ViewState:
        """
        Move to a named view.

        Result views without a current result redirect to ``home``.
        Asking for the view already shown changes nothing.
        """
        if target is self._state:
            return self._state

        if target in RESULT_VIEWS and not has_result:
            if self._state is ViewState.ANALYZING:
                raise InvalidTransitionError(self._state.value, f"navigate to {target.value}")
            logger.info("view_redirected", requested=target.value, reason="no_current_result")
            self._state = ViewState.HOME
            return self._state

        event = {
            ViewState.HOME: ViewEvent.NAVIGATE_HOME,
            ViewState.EDUCATION: ViewEvent.NAVIGATE_EDUCATION,
            ViewState.REPORT: ViewEvent.REQUEST_REPORT,
            ViewState.RESULTS: ViewEvent.BACK,
        }.get(target)
        if event is None:
            raise InvalidTransitionError(self._state.value, f"navigate to {target.value}")

        try:
            return self.dispatch(event)
        except InvalidTransitionError:
            raise InvalidTransitionError(self._state.value, f"navigate to {target.value}") from None
