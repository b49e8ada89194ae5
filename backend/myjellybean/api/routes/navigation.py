from fastapi import APIRouter, Depends

from myjellybean.schemas.session import NavigateRequest, SessionState
from myjellybean.services.session_service import AnalysisSession, get_analysis_session

router = APIRouter(tags=["Navigation"])


@router.post("/navigate", response_model=SessionState)
def navigate(
    payload: NavigateRequest,
    session: AnalysisSession = Depends(get_analysis_session),
):
    return session.navigate(payload.target)


@router.post("/report/back", response_model=SessionState)
def back_to_results(session: AnalysisSession = Depends(get_analysis_session)):
    return session.back()
