import json
from dataclasses import replace
from datetime import datetime, timezone

import pytest

from docguard.analysis.models import Severity, TamperingRegion, Verdict
from docguard.auth.models import Identity
from docguard.session.exceptions import SessionStoreError
from docguard.session.models import SessionState
from docguard.session.serialization import (
    FORMAT_VERSION,
    document_to_dict,
    state_from_dict,
    state_to_dict,
)
from tests.factories import FIXED_NOW, make_document


def _make_identity() -> Identity:
    return Identity(
        id="user-1",
        name="John Doe",
        email="user@example.com",
        role="user",
        created_at=FIXED_NOW,
    )


class TestDocumentToDict:
    def test_is_json_serializable(self) -> None:
        document = make_document(verified=True, anomalies=("Metadata timestamp anomaly",))
        json.dumps(document_to_dict(document))

    def test_enums_and_dates_flattened(self) -> None:
        data = document_to_dict(make_document(status=Verdict.FRAUDULENT))
        assert data["status"] == "fraudulent"
        assert data["upload_timestamp"] == "2024-06-15T12:00:00+00:00"
        assert data["metadata"]["producer"] == "PDF Library 1.2"

    def test_lists_not_tuples(self) -> None:
        data = document_to_dict(make_document(anomalies=("a", "b")))
        assert data["analysis"]["anomalies"] == ["a", "b"]


class TestStateRoundTrip:
    def test_identity_and_documents_survive(self) -> None:
        region = TamperingRegion(x=10.0, y=20.0, width=60.0, height=30.0, severity=Severity.HIGH)
        document = replace(
            make_document(status=Verdict.SUSPICIOUS, anomalies=("Inconsistent font sizing",)),
            tampering_heatmap=(region,),
        )
        state = SessionState(identity=_make_identity(), documents=(document,))

        restored = state_from_dict(json.loads(json.dumps(state_to_dict(state))))

        assert restored == state

    def test_missing_metadata_and_timestamp(self) -> None:
        document = replace(make_document(), metadata=None, upload_timestamp=None)
        restored = state_from_dict(state_to_dict(SessionState(documents=(document,))))
        assert restored.documents[0].metadata is None
        assert restored.documents[0].upload_timestamp is None


class TestStateFromDictErrors:
    def test_not_an_object(self) -> None:
        with pytest.raises(SessionStoreError, match="must be an object"):
            state_from_dict(["documents"])

    def test_unsupported_version(self) -> None:
        with pytest.raises(SessionStoreError, match="version"):
            state_from_dict({"version": FORMAT_VERSION + 1, "documents": []})

    def test_documents_not_a_list(self) -> None:
        with pytest.raises(SessionStoreError, match="must be a list"):
            state_from_dict({"version": FORMAT_VERSION, "documents": {"id": "x"}})

    def test_malformed_document(self) -> None:
        with pytest.raises(SessionStoreError, match="Malformed"):
            state_from_dict({"version": FORMAT_VERSION, "documents": [{"id": "x"}]})

    def test_unknown_status(self) -> None:
        data = document_to_dict(make_document())
        data["status"] = "forged"
        with pytest.raises(SessionStoreError, match="Malformed"):
            state_from_dict({"version": FORMAT_VERSION, "documents": [data]})

    def test_empty_payload_is_empty_state(self) -> None:
        assert state_from_dict({}) == SessionState()


class TestSessionState:
    def test_append_keeps_order(self) -> None:
        first, second = make_document(document_id="1"), make_document(document_id="2")
        state = SessionState().append(first).append(second)
        assert [d.id for d in state.documents] == ["1", "2"]

    def test_documents_for_owner(self) -> None:
        state = SessionState(
            documents=(
                make_document(owner_id="user-1"),
                make_document(owner_id="admin-1"),
            )
        )
        assert [d.owner_id for d in state.documents_for("admin-1")] == ["admin-1"]

    def test_with_identity_keeps_documents(self) -> None:
        state = SessionState(documents=(make_document(),)).with_identity(_make_identity())
        assert state.identity is not None
        assert len(state.documents) == 1

    def test_created_at_timezone_survives(self) -> None:
        identity = replace(
            _make_identity(), created_at=datetime(2024, 1, 1, tzinfo=timezone.utc)
        )
        restored = state_from_dict(state_to_dict(SessionState(identity=identity)))
        assert restored.identity.created_at.tzinfo is not None
