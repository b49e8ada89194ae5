from fastapi import APIRouter, Depends

from myjellybean.schemas.session import SampleMessage, SubmissionForm
from myjellybean.services.sample_catalog import SampleCatalog, get_sample_catalog
from myjellybean.services.session_service import AnalysisSession, get_analysis_session

router = APIRouter(prefix="/samples", tags=["Demo"])


@router.get("", response_model=list[SampleMessage])
def list_samples(catalog: SampleCatalog = Depends(get_sample_catalog)):
    return catalog.all()


@router.post("/{sample_id}/apply", response_model=SubmissionForm)
def apply_sample(
    sample_id: int,
    session: AnalysisSession = Depends(get_analysis_session),
):
    return session.apply_sample(sample_id)
