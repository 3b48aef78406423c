import random
from collections.abc import Iterable

from docguard.analysis.assembler import AnalysisAssembler
from docguard.analysis.exceptions import ValidationError
from docguard.analysis.factory import AssemblerFactory
from docguard.analysis.models import Document, FileDescriptor
from docguard.auth.base import BaseAuthProvider
from docguard.auth.models import Identity
from docguard.batch.latency import SimulatedLatency
from docguard.batch.models import BatchReport, Rejection
from docguard.batch.processor import BulkQueueProcessor, Listener
from docguard.config.settings import Settings
from docguard.intake.validator import UploadValidator
from docguard.logging.logger import Log
from docguard.session.base import BaseSessionStore
from docguard.session.factory import SessionStoreFactory
from docguard.trends.aggregator import TrendAggregator, summarize_insights
from docguard.trends.models import TrendInsights, TrendReport

ANONYMOUS_OWNER = "anonymous"


class TriageService:
    """Entry points for single-file, batch and trend operations.

    Session state is loaded once on construction and saved after every
    mutation (sign-in, sign-out, each new document).
    """

    def __init__(
        self,
        assembler: AnalysisAssembler,
        validator: UploadValidator,
        store: BaseSessionStore,
        aggregator: TrendAggregator,
        rng: random.Random,
        latency: SimulatedLatency | None = None,
    ) -> None:
        self._assembler = assembler
        self._validator = validator
        self._store = store
        self._aggregator = aggregator
        self._rng = rng
        self._latency = latency or SimulatedLatency()
        self._state = store.load()

    @property
    def identity(self) -> Identity | None:
        return self._state.identity

    @property
    def owner_id(self) -> str:
        return self._state.identity.id if self._state.identity else ANONYMOUS_OWNER

    def sign_in(self, auth: BaseAuthProvider, email: str, password: str) -> Identity:
        identity = auth.login(email, password)
        updated = self._state.with_identity(identity)
        self._store.save(updated)
        self._state = updated
        return identity

    def sign_out(self) -> None:
        updated = self._state.with_identity(None)
        self._store.save(updated)
        self._state = updated

    def classify(self, descriptor: FileDescriptor) -> Document:
        """Validate and analyze one file, then record it in the history.

        Raises:
            ValidationError: if the file is rejected before analysis.
            AnalysisFailure: if no result could be produced; safe to retry.
        """
        self._validator.validate(descriptor)
        self._latency.wait()
        return self._analyze_and_record(descriptor)

    def run_batch(
        self,
        descriptors: Iterable[FileDescriptor],
        listener: Listener | None = None,
    ) -> BatchReport:
        """Queue every valid descriptor and analyze them in submission order."""
        accepted: list[FileDescriptor] = []
        rejected: list[Rejection] = []
        for descriptor in descriptors:
            try:
                accepted.append(self._validator.validate(descriptor))
            except ValidationError as exc:
                Log.warning(f"Rejected {descriptor.name}: {exc}")
                rejected.append(Rejection(descriptor=descriptor, reason=str(exc)))

        processor = BulkQueueProcessor(self._analyze_and_record, latency=self._latency)
        if listener is not None:
            processor.subscribe(listener)
        processor.submit(accepted)
        processor.run_pending()
        return BatchReport(items=tuple(processor.items), rejected=tuple(rejected))

    def history(self, include_all_owners: bool = False) -> list[Document]:
        """Own documents; everyone's when ``include_all_owners`` is set."""
        if include_all_owners:
            return list(self._state.documents)
        return self._state.documents_for(self.owner_id)

    def compute_trends(self, documents: list[Document] | None = None) -> TrendReport:
        return self._aggregator.aggregate(self.history() if documents is None else documents)

    def insights(self, documents: list[Document] | None = None) -> TrendInsights:
        return summarize_insights(self.history() if documents is None else documents)

    def _analyze_and_record(self, descriptor: FileDescriptor) -> Document:
        document = self._assembler.assemble(descriptor, self.owner_id, self._rng)
        updated = self._state.append(document)
        self._store.save(updated)
        self._state = updated
        return document


def build_service(settings: Settings) -> TriageService:
    """Build a TriageService with all configured collaborators."""
    return TriageService(
        assembler=AssemblerFactory.create(settings),
        validator=UploadValidator.from_settings(settings),
        store=SessionStoreFactory.create(settings),
        aggregator=TrendAggregator(settings.trend_timezone),
        rng=random.Random(settings.rng_seed),
        latency=SimulatedLatency.from_settings(settings),
    )
