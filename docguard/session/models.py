from dataclasses import dataclass, replace

from docguard.analysis.models import Document
from docguard.auth.models import Identity


@dataclass(frozen=True)
class SessionState:
    """Signed-in identity plus the append-only document history."""

    identity: Identity | None = None
    documents: tuple[Document, ...] = ()

    def with_identity(self, identity: Identity | None) -> "SessionState":
        return replace(self, identity=identity)

    def append(self, document: Document) -> "SessionState":
        return replace(self, documents=(*self.documents, document))

    def documents_for(self, owner_id: str) -> list[Document]:
        return [d for d in self.documents if d.owner_id == owner_id]
