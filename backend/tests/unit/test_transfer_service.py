"""Unit tests for TransferService (shared-expiry pre-signed URL batches)"""

from datetime import datetime, timedelta, timezone

import pytest

from domain.documents.errors import PersistenceError, UrlGenerationError
from transfers.service import MAX_TRANSFER_DOCUMENTS, TransferService

from fakes import make_document


async def _seed(repository, count, owner_id=42):
    return [await repository.create(make_document(i, owner_id)) for i in range(count)]


class TestPrepareTransfer:

    @pytest.mark.asyncio
    async def test_one_url_per_document(self, transfer_service, repository, storage):
        documents = await _seed(repository, 3)

        items = await transfer_service.prepare_transfer(42)

        assert {item.document.id for item in items} == {d.id for d in documents}
        for item in items:
            assert item.presigned_url.startswith(f"https://storage.test/test-bucket/{item.document.object_key}")
        assert len(storage.presigned) == 3

    @pytest.mark.asyncio
    async def test_all_urls_share_one_expiry(self, transfer_service, repository):
        await _seed(repository, 5)
        before = datetime.now(timezone.utc)

        items = await transfer_service.prepare_transfer(42)

        after = datetime.now(timezone.utc)
        expiries = {item.expires_at for item in items}
        assert len(expiries) == 1
        expires_at = expiries.pop()
        assert before + timedelta(minutes=15) <= expires_at <= after + timedelta(minutes=15)

    @pytest.mark.asyncio
    async def test_url_ttl_is_configurable(self, repository, storage):
        await _seed(repository, 2)
        service = TransferService(repository, storage, url_ttl=timedelta(minutes=5))

        await service.prepare_transfer(42)

        assert {ttl for _, ttl in storage.presigned} == {timedelta(minutes=5)}

    @pytest.mark.asyncio
    async def test_only_owner_documents(self, transfer_service, repository):
        await _seed(repository, 2, owner_id=42)
        await repository.create(make_document(99, owner_id=7))

        items = await transfer_service.prepare_transfer(7)

        assert [item.document.owner_id for item in items] == [7]

    @pytest.mark.asyncio
    async def test_owner_without_documents(self, transfer_service, storage):
        assert await transfer_service.prepare_transfer(42) == []
        assert storage.presigned == []

    @pytest.mark.asyncio
    async def test_batch_is_capped(self, transfer_service, repository):
        await _seed(repository, MAX_TRANSFER_DOCUMENTS + 1)

        items = await transfer_service.prepare_transfer(42)

        assert len(items) == MAX_TRANSFER_DOCUMENTS

    @pytest.mark.asyncio
    async def test_one_url_failure_fails_the_batch(self, transfer_service, repository, storage):
        documents = await _seed(repository, 3)
        storage.fail_presign_for.add(documents[1].object_key)

        with pytest.raises(UrlGenerationError) as exc:
            await transfer_service.prepare_transfer(42)

        assert documents[1].id in exc.value.message

    @pytest.mark.asyncio
    async def test_list_failure(self, transfer_service, repository):
        repository.fail_on.add("list")

        with pytest.raises(PersistenceError):
            await transfer_service.prepare_transfer(42)


@pytest.mark.asyncio
async def test_transfer_item_to_dict(transfer_service, repository):
    document = (await _seed(repository, 1))[0]

    item = (await transfer_service.prepare_transfer(42))[0]
    data = item.to_dict()

    assert data["document_id"] == document.id
    assert data["filename"] == document.filename
    assert data["hash_sha256"] == document.hash_sha256
    assert data["url"] == item.presigned_url
    assert data["expires_at"] == item.expires_at.isoformat()
