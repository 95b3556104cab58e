"""Unit tests for DocumentQueryService"""

from datetime import timedelta

import pytest

from documents.service import DocumentQueryService
from domain.documents.errors import NotFoundError, PersistenceError, UrlGenerationError

from fakes import make_document


class TestGet:

    @pytest.mark.asyncio
    async def test_get_with_presigned_url(self, query_service, repository, storage):
        document = await repository.create(make_document(1))

        result = await query_service.get(document.id)

        assert result.id == document.id
        assert result.url == f"https://storage.test/test-bucket/{document.object_key}?expires=900"
        assert storage.presigned == [(document.object_key, timedelta(minutes=15))]
        assert repository.documents[document.id].url == ""

    @pytest.mark.asyncio
    async def test_get_without_storage_keeps_stored_url(self, repository):
        document = await repository.create(make_document(1))
        service = DocumentQueryService(repository)

        result = await service.get(document.id)

        assert result.url == ""

    @pytest.mark.asyncio
    async def test_other_owner_is_not_found(self, query_service, repository, storage):
        document = await repository.create(make_document(1, owner_id=42))

        with pytest.raises(NotFoundError):
            await query_service.get(document.id, owner_id=7)

        assert storage.presigned == []

    @pytest.mark.asyncio
    async def test_missing(self, query_service):
        with pytest.raises(NotFoundError):
            await query_service.get("missing")

    @pytest.mark.asyncio
    async def test_url_failure(self, query_service, repository, storage):
        document = await repository.create(make_document(1))
        storage.fail_on.add("generate_presigned_url")

        with pytest.raises(UrlGenerationError):
            await query_service.get(document.id)

    @pytest.mark.asyncio
    async def test_read_failure(self, query_service, repository):
        repository.fail_on.add("get_by_id")

        with pytest.raises(PersistenceError):
            await query_service.get_owned("any", 42)


class TestList:

    @pytest.mark.asyncio
    async def test_newest_first(self, query_service, repository):
        created = [await repository.create(make_document(i)) for i in range(3)]

        page = await query_service.list(42)

        assert [d.id for d in page.items] == [d.id for d in reversed(created)]
        assert page.total == 3
        assert page.total_pages == 1

    @pytest.mark.asyncio
    async def test_pagination(self, query_service, repository):
        created = [await repository.create(make_document(i)) for i in range(25)]

        page = await query_service.list(42, page=3, limit=10)

        assert page.page == 3
        assert page.limit == 10
        assert page.total == 25
        assert page.total_pages == 3
        assert [d.id for d in page.items] == [d.id for d in reversed(created[:5])]

    @pytest.mark.asyncio
    async def test_out_of_range_values_are_normalized(self, query_service, repository):
        await repository.create(make_document(1))

        page = await query_service.list(42, page=0, limit=1000)

        assert page.page == 1
        assert page.limit == 100
        assert len(page.items) == 1

    @pytest.mark.asyncio
    async def test_empty(self, query_service):
        page = await query_service.list(42)

        assert page.items == []
        assert page.total == 0
        assert page.total_pages == 1

    @pytest.mark.asyncio
    async def test_list_failure(self, query_service, repository):
        repository.fail_on.add("list")

        with pytest.raises(PersistenceError):
            await query_service.list(42)
