"""
Demo sample catalog.

Read-only example messages used to pre-fill the input form.
"""

from pathlib import Path
from typing import Optional

from pydantic import TypeAdapter

from myjellybean.core.exceptions import SampleNotFoundError
from myjellybean.core.logging import get_logger
from myjellybean.schemas.session import SampleMessage

logger = get_logger(__name__)

SAMPLES_PATH = Path(__file__).resolve().parent.parent / "data" / "sample_messages.json"

_samples_adapter = TypeAdapter(list[SampleMessage])


class SampleCatalog:
    """Immutable collection of demo messages keyed by id."""

    def __init__(self, samples: list[SampleMessage]) -> None:
        self._samples = tuple(samples)
        self._by_id = {sample.id: sample for sample in self._samples}

    @classmethod
    def from_file(cls, path: Path = SAMPLES_PATH) -> "SampleCatalog":
        samples = _samples_adapter.validate_json(path.read_text(encoding="utf-8"))
        logger.debug("samples_loaded", count=len(samples), path=str(path))
        return cls(samples)

    def all(self) -> list[SampleMessage]:
        return list(self._samples)

    def get(self, sample_id: int) -> SampleMessage:
        sample = self._by_id.get(sample_id)
        if sample is None:
            raise SampleNotFoundError(identifier=str(sample_id))
        return sample


_catalog: Optional[SampleCatalog] = None


def get_sample_catalog() -> SampleCatalog:
    """Get the sample catalog singleton."""
    global _catalog
    if _catalog is None:
        _catalog = SampleCatalog.from_file()
    return _catalog
