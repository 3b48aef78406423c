"""Converts session state to and from plain JSON-ready dicts."""

from datetime import datetime
from typing import Any

from docguard.analysis.models import (
    AnalysisFields,
    Document,
    DocumentMetadata,
    Severity,
    TamperingRegion,
    Verdict,
)
from docguard.auth.models import Identity
from docguard.session.exceptions import SessionStoreError
from docguard.session.models import SessionState

FORMAT_VERSION = 1


def state_to_dict(state: SessionState) -> dict[str, Any]:
    return {
        "version": FORMAT_VERSION,
        "identity": identity_to_dict(state.identity) if state.identity else None,
        "documents": [document_to_dict(d) for d in state.documents],
    }


def state_from_dict(data: Any) -> SessionState:
    """Rebuild a SessionState from its stored form.

    Raises:
        SessionStoreError: if the payload is not a valid session document.
    """
    if not isinstance(data, dict):
        raise SessionStoreError("Session payload must be an object")
    version = data.get("version", FORMAT_VERSION)
    if version != FORMAT_VERSION:
        raise SessionStoreError(f"Unsupported session format version: {version}")
    raw_documents = data.get("documents") or []
    if not isinstance(raw_documents, list):
        raise SessionStoreError("'documents' must be a list")
    raw_identity = data.get("identity")
    try:
        return SessionState(
            identity=identity_from_dict(raw_identity) if raw_identity else None,
            documents=tuple(document_from_dict(d) for d in raw_documents),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise SessionStoreError(f"Malformed session payload: {exc}") from exc


def identity_to_dict(identity: Identity) -> dict[str, Any]:
    return {
        "id": identity.id,
        "name": identity.name,
        "email": identity.email,
        "role": identity.role,
        "created_at": identity.created_at.isoformat(),
    }


def identity_from_dict(data: dict[str, Any]) -> Identity:
    return Identity(
        id=str(data["id"]),
        name=str(data["name"]),
        email=str(data["email"]),
        role=str(data["role"]),
        created_at=datetime.fromisoformat(data["created_at"]),
    )


def document_to_dict(document: Document) -> dict[str, Any]:
    """Flatten a Document to plain serializable values."""
    metadata = document.metadata
    return {
        "id": document.id,
        "owner_id": document.owner_id,
        "filename": document.filename,
        "file_size": document.file_size,
        "file_type": document.file_type,
        "upload_timestamp": _iso(document.upload_timestamp),
        "status": document.status.value,
        "confidence_score": document.confidence_score,
        "ocr_text": document.ocr_text,
        "metadata": None if metadata is None else {
            "creation_date": _iso(metadata.creation_date),
            "last_modified": _iso(metadata.last_modified),
            "software": metadata.software,
            "author": metadata.author,
            "producer": metadata.producer,
        },
        "blockchain_verified": document.blockchain_verified,
        "blockchain_hash": document.blockchain_hash,
        "tampering_heatmap": [
            {
                "x": r.x,
                "y": r.y,
                "width": r.width,
                "height": r.height,
                "severity": r.severity.value,
            }
            for r in document.tampering_heatmap
        ],
        "analysis": {
            "text_extracted": document.analysis.text_extracted,
            "metadata_check": document.analysis.metadata_check,
            "font_consistency": document.analysis.font_consistency,
            "watermark_present": document.analysis.watermark_present,
            "suspicious_edits": document.analysis.suspicious_edits,
            "hidden_text_detected": document.analysis.hidden_text_detected,
            "font_mismatches": list(document.analysis.font_mismatches),
            "typos_detected": list(document.analysis.typos_detected),
            "anomalies": list(document.analysis.anomalies),
            "ai_suggestions": list(document.analysis.ai_suggestions),
        },
    }


def document_from_dict(data: dict[str, Any]) -> Document:
    raw_metadata = data.get("metadata")
    raw_analysis = data["analysis"]
    return Document(
        status=Verdict(data["status"]),
        confidence_score=float(data["confidence_score"]),
        analysis=AnalysisFields(
            text_extracted=bool(raw_analysis["text_extracted"]),
            metadata_check=bool(raw_analysis["metadata_check"]),
            font_consistency=bool(raw_analysis["font_consistency"]),
            watermark_present=bool(raw_analysis["watermark_present"]),
            suspicious_edits=bool(raw_analysis["suspicious_edits"]),
            hidden_text_detected=bool(raw_analysis["hidden_text_detected"]),
            font_mismatches=tuple(raw_analysis.get("font_mismatches") or ()),
            typos_detected=tuple(raw_analysis.get("typos_detected") or ()),
            anomalies=tuple(raw_analysis.get("anomalies") or ()),
            ai_suggestions=tuple(raw_analysis.get("ai_suggestions") or ()),
        ),
        ocr_text=data.get("ocr_text"),
        metadata=None if raw_metadata is None else DocumentMetadata(
            creation_date=_parse(raw_metadata.get("creation_date")),
            last_modified=_parse(raw_metadata.get("last_modified")),
            software=raw_metadata.get("software"),
            author=raw_metadata.get("author"),
            producer=raw_metadata.get("producer"),
        ),
        blockchain_verified=bool(data.get("blockchain_verified", False)),
        blockchain_hash=data.get("blockchain_hash"),
        tampering_heatmap=tuple(
            TamperingRegion(
                x=float(r["x"]),
                y=float(r["y"]),
                width=float(r["width"]),
                height=float(r["height"]),
                severity=Severity(r["severity"]),
            )
            for r in data.get("tampering_heatmap") or ()
        ),
        id=str(data["id"]),
        owner_id=str(data["owner_id"]),
        filename=str(data["filename"]),
        file_size=int(data["file_size"]),
        file_type=str(data.get("file_type") or ""),
        upload_timestamp=_parse(data.get("upload_timestamp")),
    )


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None
