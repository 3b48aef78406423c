import random
import uuid
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timezone

from docguard.analysis.evidence import EvidenceSynthesizer
from docguard.analysis.exceptions import AnalysisFailure
from docguard.analysis.models import (
    Document,
    DocumentMetadata,
    Evidence,
    FileDescriptor,
    Outcome,
    TamperingRegion,
)
from docguard.analysis.outcomes import OutcomeSampler
from docguard.logging.logger import Log


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AnalysisAssembler:
    """Composes evidence and outcome into one immutable Document."""

    def __init__(
        self,
        synthesizer: EvidenceSynthesizer,
        sampler: OutcomeSampler,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._synthesizer = synthesizer
        self._sampler = sampler
        self._clock = clock

    def assemble(
        self,
        descriptor: FileDescriptor,
        owner_id: str,
        rng: random.Random,
    ) -> Document:
        """Run one simulated analysis for ``descriptor``.

        Raises:
            AnalysisFailure: if evidence or outcome generation fails.
        """
        now = self._clock()
        try:
            evidence = self._synthesizer.synthesize(descriptor.category, rng, now)
            outcome = self._sampler.sample(descriptor.category, rng)
            document_id = str(uuid.UUID(int=rng.getrandbits(128), version=4))
        except AnalysisFailure:
            raise
        except Exception as exc:
            raise AnalysisFailure(f"Could not analyze {descriptor.name}: {exc}") from exc

        document = Document(
            status=outcome.status,
            confidence_score=outcome.confidence_score,
            analysis=outcome.analysis,
            ocr_text=evidence.ocr_text,
            metadata=self._merge_metadata(evidence.metadata, outcome, now),
            blockchain_verified=outcome.blockchain_verified,
            blockchain_hash=outcome.blockchain_hash,
            tampering_heatmap=self._limit_heatmap(evidence, outcome),
            id=document_id,
            owner_id=owner_id,
            filename=descriptor.name,
            file_size=descriptor.size,
            file_type=descriptor.mime_type,
            upload_timestamp=now,
        )
        Log.info(
            f"Analyzed {descriptor.name}",
            document_id=document.id,
            status=document.status.value,
            confidence=f"{document.confidence_score:.2f}",
        )
        return document

    @staticmethod
    def _merge_metadata(
        metadata: DocumentMetadata,
        outcome: Outcome,
        now: datetime,
    ) -> DocumentMetadata:
        changes: dict[str, object] = {}
        for key, value in outcome.metadata_overrides.items():
            changes[key] = now if key in ("creation_date", "last_modified") else value
        merged = replace(metadata, **changes)

        if (
            merged.creation_date is not None
            and merged.last_modified is not None
            and merged.last_modified < merged.creation_date
        ):
            merged = replace(merged, last_modified=merged.creation_date)
        return merged

    @staticmethod
    def _limit_heatmap(evidence: Evidence, outcome: Outcome) -> tuple[TamperingRegion, ...]:
        if outcome.heatmap_limit is None:
            return evidence.tampering_heatmap
        return evidence.tampering_heatmap[: outcome.heatmap_limit]
