import random
from datetime import datetime, timedelta

from docguard.analysis.models import Category, DocumentMetadata, Evidence, TamperingRegion
from docguard.analysis.profile_loader import EvidenceProfile
from docguard.logging.logger import Log


class EvidenceSynthesizer:
    """Builds category-driven evidence: OCR sample, metadata, tampering regions.

    Content is random, shape is fixed. All randomness comes from the ``rng``
    argument so a seeded stream reproduces the same evidence.
    """

    def __init__(self, profile: EvidenceProfile) -> None:
        self._profile = profile

    def synthesize(self, category: Category, rng: random.Random, now: datetime) -> Evidence:
        ocr_text = rng.choice(self._profile.ocr_samples)
        metadata = self._build_metadata(category, rng, now)
        heatmap = self._build_heatmap(category, rng)
        Log.debug(
            "Synthesized evidence",
            category=category.value,
            software=metadata.software,
            regions=len(heatmap),
        )
        return Evidence(ocr_text=ocr_text, metadata=metadata, tampering_heatmap=heatmap)

    def _build_metadata(
        self,
        category: Category,
        rng: random.Random,
        now: datetime,
    ) -> DocumentMetadata:
        creation_window = timedelta(days=self._profile.creation_window_days)
        creation_date = now - creation_window * rng.random()

        # last_modified never precedes creation_date
        earliest = max(creation_date, now - timedelta(days=self._profile.modification_window_days))
        last_modified = earliest + (now - earliest) * rng.random()

        return DocumentMetadata(
            creation_date=creation_date,
            last_modified=last_modified,
            software=rng.choice(self._profile.software_for(category)),
            author=rng.choice(self._profile.authors),
            producer=self._profile.producer_for(category),
        )

    def _build_heatmap(
        self,
        category: Category,
        rng: random.Random,
    ) -> tuple[TamperingRegion, ...]:
        if category is not Category.IMAGE:
            return ()
        if rng.random() >= self._profile.tampering_probability:
            return ()
        return tuple(
            TamperingRegion(
                x=rng.random() * self._profile.canvas_width,
                y=rng.random() * self._profile.canvas_height,
                width=rng.uniform(template.width_min, template.width_max),
                height=rng.uniform(template.height_min, template.height_max),
                severity=template.severity,
            )
            for template in self._profile.regions
        )
