"""Integration tests for the documents API

The app runs with in-memory port doubles; requests go through routing,
JWT authentication, validation and the domain error handlers.
"""

import json

import pytest
from fastapi.testclient import TestClient

from auth.jwt import create_access_token
from domain.documents import AuthenticationStatus
from main import create_app

from conftest import AUTH_REQUEST_QUEUE

OWNER_ID = 42
OTHER_OWNER_ID = 7


def _auth(owner_id: int = OWNER_ID) -> dict:
    return {"Authorization": f"Bearer {create_access_token(owner_id)}"}


@pytest.fixture
def client(container):
    with TestClient(create_app(container)) as test_client:
        yield test_client


def _upload(client, content: bytes, filename: str = "invoice.pdf", owner_id: int = OWNER_ID):
    return client.post(
        "/api/v1/documents/upload",
        files={"file": (filename, content, "application/pdf")},
        headers=_auth(owner_id),
    )


class TestAuthentication:

    def test_missing_token(self, client):
        response = client.get("/api/v1/documents")
        assert response.status_code in (401, 403)

    def test_invalid_token(self, client):
        response = client.get("/api/v1/documents", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401


class TestUpload:

    def test_upload_creates_document(self, client, storage, pdf_content):
        response = _upload(client, pdf_content)

        assert response.status_code == 201
        body = response.json()
        assert body["filename"] == "invoice.pdf"
        assert body["mime_type"] == "application/pdf"
        assert body["size_bytes"] == len(pdf_content)
        assert body["owner_id"] == OWNER_ID
        assert body["authentication_status"] == "unauthenticated"
        assert len(storage.objects) == 1

    def test_duplicate_upload_returns_same_document(self, client, repository, pdf_content):
        first = _upload(client, pdf_content).json()
        second = _upload(client, pdf_content, filename="copy.pdf").json()

        assert second["id"] == first["id"]
        assert len(repository.documents) == 1

    def test_same_content_for_two_owners(self, client, repository, pdf_content):
        first = _upload(client, pdf_content, owner_id=OWNER_ID).json()
        second = _upload(client, pdf_content, owner_id=OTHER_OWNER_ID).json()

        assert first["id"] != second["id"]
        assert len(repository.documents) == 2

    def test_empty_file_is_rejected(self, client, repository):
        response = _upload(client, b"")

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"
        assert repository.documents == {}

    def test_storage_failure(self, client, storage, pdf_content):
        storage.fail_on.add("put")

        response = _upload(client, pdf_content)

        assert response.status_code == 500
        assert response.json()["error"] == "STORAGE_UPLOAD_ERROR"


class TestReadAndList:

    def test_get_returns_presigned_url(self, client, pdf_content):
        document_id = _upload(client, pdf_content).json()["id"]

        response = client.get(f"/api/v1/documents/{document_id}", headers=_auth())

        assert response.status_code == 200
        assert response.json()["url"].startswith("https://storage.test/test-bucket/")

    def test_get_other_owners_document_is_not_found(self, client, pdf_content):
        document_id = _upload(client, pdf_content).json()["id"]

        response = client.get(f"/api/v1/documents/{document_id}", headers=_auth(OTHER_OWNER_ID))

        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"

    def test_list_is_paginated(self, client):
        for i in range(3):
            _upload(client, f"content {i}".encode(), filename=f"doc-{i}.pdf")
        _upload(client, b"someone else", owner_id=OTHER_OWNER_ID)

        response = client.get("/api/v1/documents?page=1&limit=2", headers=_auth())

        body = response.json()
        assert response.status_code == 200
        assert body["total"] == 3
        assert body["total_pages"] == 2
        assert [item["filename"] for item in body["items"]] == ["doc-2.pdf", "doc-1.pdf"]


class TestRequestAuthentication:

    def test_request_authentication(self, client, publisher, repository, pdf_content):
        document_id = _upload(client, pdf_content).json()["id"]

        response = client.post(f"/api/v1/documents/{document_id}/request-authentication", headers=_auth())

        assert response.status_code == 202
        assert response.json()["authentication_status"] == "authenticating"
        assert repository.documents[document_id].authentication_status == AuthenticationStatus.AUTHENTICATING
        queue, body = publisher.published[0]
        assert queue == AUTH_REQUEST_QUEUE
        assert json.loads(body)["documentId"] == document_id

    def test_authenticated_document_cannot_be_resent(self, client, repository, pdf_content):
        document_id = _upload(client, pdf_content).json()["id"]
        repository.documents[document_id] = repository.documents[document_id].with_status(
            AuthenticationStatus.AUTHENTICATED
        )

        response = client.post(f"/api/v1/documents/{document_id}/request-authentication", headers=_auth())

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    def test_publish_failure(self, client, publisher, pdf_content):
        document_id = _upload(client, pdf_content).json()["id"]
        publisher.fail_on.add("publish")

        response = client.post(f"/api/v1/documents/{document_id}/request-authentication", headers=_auth())

        assert response.status_code == 502
        assert response.json()["error"] == "PUBLISH_ERROR"

    def test_other_owners_document(self, client, publisher, pdf_content):
        document_id = _upload(client, pdf_content).json()["id"]

        response = client.post(
            f"/api/v1/documents/{document_id}/request-authentication", headers=_auth(OTHER_OWNER_ID)
        )

        assert response.status_code == 404
        assert publisher.published == []


class TestTransfer:

    def test_transfer_shares_one_expiry(self, client):
        for i in range(3):
            _upload(client, f"content {i}".encode(), filename=f"doc-{i}.pdf")

        response = client.post("/api/v1/documents/transfer", headers=_auth())

        body = response.json()
        assert response.status_code == 200
        assert body["owner_id"] == OWNER_ID
        assert len(body["documents"]) == 3
        assert {item["expires_at"] for item in body["documents"]} == {body["expires_at"]}

    def test_transfer_without_documents(self, client):
        body = client.post("/api/v1/documents/transfer", headers=_auth()).json()

        assert body["documents"] == []
        assert body["expires_at"] is None


class TestDelete:

    def test_delete_one(self, client, repository, storage, pdf_content):
        document_id = _upload(client, pdf_content).json()["id"]

        response = client.delete(f"/api/v1/documents/{document_id}", headers=_auth())

        assert response.status_code == 200
        assert response.json()["id"] == document_id
        assert repository.documents == {}
        assert storage.objects == {}

    def test_delete_other_owners_document(self, client, repository, pdf_content):
        document_id = _upload(client, pdf_content).json()["id"]

        response = client.delete(f"/api/v1/documents/{document_id}", headers=_auth(OTHER_OWNER_ID))

        assert response.status_code == 404
        assert document_id in repository.documents

    def test_delete_all(self, client, repository):
        for i in range(2):
            _upload(client, f"content {i}".encode(), filename=f"doc-{i}.pdf")
        _upload(client, b"kept", owner_id=OTHER_OWNER_ID)

        response = client.delete("/api/v1/documents", headers=_auth())

        assert response.json() == {"deleted": 2}
        assert [d.owner_id for d in repository.documents.values()] == [OTHER_OWNER_ID]


class TestObservability:

    def test_health_without_broker_is_degraded(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "degraded"
        assert body["components"]["object_storage"]["status"] == "healthy"
        assert body["components"]["broker"]["status"] == "degraded"

    def test_health_with_storage_down(self, client, storage):
        storage.fail_on.add("verify_bucket_exists")

        response = client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"

    def test_metrics(self, client, pdf_content):
        _upload(client, pdf_content)

        response = client.get("/metrics")

        assert response.status_code == 200
        assert "documents_uploads_total" in response.text

    def test_request_id_header(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"
