from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import PurePath


class Category(str, Enum):
    """Declared content category of an uploaded file."""

    IMAGE = "image"
    PDF = "pdf"
    WORD = "word"
    OTHER = "other"

    @classmethod
    def from_filename(cls, filename: str) -> "Category":
        """Resolve a category from the file extension (case-insensitive)."""
        extension = PurePath(filename).suffix.lower().lstrip(".")
        return _EXTENSION_CATEGORIES.get(extension, cls.OTHER)


_EXTENSION_CATEGORIES: dict[str, Category] = {
    "jpg": Category.IMAGE,
    "jpeg": Category.IMAGE,
    "png": Category.IMAGE,
    "gif": Category.IMAGE,
    "pdf": Category.PDF,
    "doc": Category.WORD,
    "docx": Category.WORD,
}


class Verdict(str, Enum):
    """Classification outcome; declaration order is the sampling order."""

    AUTHENTIC = "authentic"
    SUSPICIOUS = "suspicious"
    FRAUDULENT = "fraudulent"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class FileDescriptor:
    """Caller-supplied description of one file to analyze."""

    name: str
    size: int
    category: Category
    mime_type: str = ""

    @classmethod
    def from_upload(cls, name: str, size: int, mime_type: str = "") -> "FileDescriptor":
        return cls(
            name=name,
            size=size,
            category=Category.from_filename(name),
            mime_type=mime_type,
        )

    @property
    def extension(self) -> str:
        return PurePath(self.name).suffix.lower().lstrip(".")


@dataclass(frozen=True)
class DocumentMetadata:
    creation_date: datetime | None = None
    last_modified: datetime | None = None
    software: str | None = None
    author: str | None = None
    producer: str | None = None


@dataclass(frozen=True)
class TamperingRegion:
    """Rectangle flagged as a likely manipulation site."""

    x: float
    y: float
    width: float
    height: float
    severity: Severity


@dataclass(frozen=True)
class Evidence:
    """Category-driven evidence, independent of the verdict."""

    ocr_text: str
    metadata: DocumentMetadata
    tampering_heatmap: tuple[TamperingRegion, ...] = ()


@dataclass(frozen=True)
class AnalysisFields:
    text_extracted: bool
    metadata_check: bool
    font_consistency: bool
    watermark_present: bool
    suspicious_edits: bool
    hidden_text_detected: bool
    font_mismatches: tuple[str, ...] = ()
    typos_detected: tuple[str, ...] = ()
    anomalies: tuple[str, ...] = ()
    ai_suggestions: tuple[str, ...] = ()


@dataclass(frozen=True)
class Outcome:
    """Verdict-driven part of an analysis, as drawn by the outcome sampler."""

    status: Verdict
    confidence_score: float
    analysis: AnalysisFields
    blockchain_verified: bool
    blockchain_hash: str | None = None
    metadata_overrides: dict[str, str] = field(default_factory=dict)
    heatmap_limit: int | None = None


@dataclass(frozen=True)
class AnalysisRecord:
    """Synthesized forensic result for one file."""

    status: Verdict
    confidence_score: float
    analysis: AnalysisFields
    ocr_text: str | None = None
    metadata: DocumentMetadata | None = None
    blockchain_verified: bool = False
    blockchain_hash: str | None = None
    tampering_heatmap: tuple[TamperingRegion, ...] = ()


@dataclass(frozen=True)
class Document(AnalysisRecord):
    """AnalysisRecord stamped with identity and provenance. Never mutated."""

    id: str = ""
    owner_id: str = ""
    filename: str = ""
    file_size: int = 0
    file_type: str = ""
    upload_timestamp: datetime | None = None
