from fastapi import APIRouter, Depends, status

from myjellybean.schemas.session import HistoryResponse
from myjellybean.services.session_service import AnalysisSession, get_analysis_session

router = APIRouter(prefix="/history", tags=["History"])


@router.get("", response_model=HistoryResponse)
def get_history(session: AnalysisSession = Depends(get_analysis_session)):
    items = session.history()
    return HistoryResponse(items=items, count=len(items), limit=session.store.limit)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def clear_history(session: AnalysisSession = Depends(get_analysis_session)):
    session.clear_history()
