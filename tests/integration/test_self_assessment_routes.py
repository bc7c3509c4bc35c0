from __future__ import annotations

import uuid

import pytest
from fastapi import status
from httpx import AsyncClient

from tests.utils import API, TestAccount

PAYLOAD = {"mood": 4, "stress": 3, "workload": 4, "notes": "Good week overall"}


async def _create(client: AsyncClient, account: TestAccount, **overrides) -> dict:
    response = await client.post(
        f"{API}/selfassessments", json={**PAYLOAD, **overrides}, headers=account.headers
    )
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()


class TestCreateSelfAssessment:
    @pytest.mark.asyncio
    async def test_create_returns_location(
        self, async_client: AsyncClient, collaborator: TestAccount
    ) -> None:
        response = await async_client.post(
            f"{API}/selfassessments", json=PAYLOAD, headers=collaborator.headers
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["mood"] == 4
        assert data["stress"] == 3
        assert data["workload"] == 4
        assert data["notes"] == "Good week overall"
        assert data["createdAt"]
        assert response.headers["location"] == (
            f"http://test/api/v1/selfassessments/{data['id']}"
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides",
        [{"mood": 0}, {"stress": 6}, {"workload": "High"}, {"notes": "x" * 1001}],
    )
    async def test_invalid_body_is_rejected(
        self, async_client: AsyncClient, collaborator: TestAccount, overrides: dict
    ) -> None:
        response = await async_client.post(
            f"{API}/selfassessments", json={**PAYLOAD, **overrides}, headers=collaborator.headers
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_requires_token(self, async_client: AsyncClient) -> None:
        response = await async_client.post(f"{API}/selfassessments", json=PAYLOAD)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestListMySelfAssessments:
    @pytest.mark.asyncio
    async def test_create_then_list(
        self, async_client: AsyncClient, collaborator: TestAccount
    ) -> None:
        created = await _create(async_client, collaborator)

        response = await async_client.get(
            f"{API}/selfassessments/my", headers=collaborator.headers
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["totalCount"] == 1
        assert data["items"][0]["id"] == created["id"]
        assert not data["hasPrevious"]
        assert not data["hasNext"]
        assert data["links"] == [
            {
                "href": "http://test/api/v1/selfassessments/my?pageNumber=1&pageSize=10",
                "rel": "self",
                "method": "GET",
            }
        ]

    @pytest.mark.asyncio
    async def test_only_own_assessments_are_listed(
        self,
        async_client: AsyncClient,
        collaborator: TestAccount,
        other_collaborator: TestAccount,
    ) -> None:
        await _create(async_client, collaborator)
        await _create(async_client, other_collaborator)
        await _create(async_client, other_collaborator)

        response = await async_client.get(
            f"{API}/selfassessments/my", headers=collaborator.headers
        )

        assert response.json()["totalCount"] == 1

    @pytest.mark.asyncio
    async def test_paging_through_own_assessments(
        self, async_client: AsyncClient, collaborator: TestAccount
    ) -> None:
        for _ in range(3):
            await _create(async_client, collaborator)

        response = await async_client.get(
            f"{API}/selfassessments/my",
            params={"pageNumber": 2, "pageSize": 2},
            headers=collaborator.headers,
        )

        data = response.json()
        assert len(data["items"]) == 1
        assert data["totalPages"] == 2
        assert data["hasPrevious"] and not data["hasNext"]
        assert {link["rel"] for link in data["links"]} == {"self", "previous"}


class TestSingleSelfAssessment:
    @pytest.mark.asyncio
    async def test_get_is_idempotent(
        self, async_client: AsyncClient, collaborator: TestAccount
    ) -> None:
        created = await _create(async_client, collaborator)
        url = f"{API}/selfassessments/{created['id']}"

        first = await async_client.get(url, headers=collaborator.headers)
        second = await async_client.get(url, headers=collaborator.headers)

        assert first.status_code == status.HTTP_200_OK
        assert first.json() == second.json()

    @pytest.mark.asyncio
    async def test_other_users_assessment_is_not_found(
        self,
        async_client: AsyncClient,
        collaborator: TestAccount,
        other_collaborator: TestAccount,
    ) -> None:
        created = await _create(async_client, collaborator)
        url = f"{API}/selfassessments/{created['id']}"

        get = await async_client.get(url, headers=other_collaborator.headers)
        put = await async_client.put(url, json=PAYLOAD, headers=other_collaborator.headers)
        delete = await async_client.delete(url, headers=other_collaborator.headers)

        assert get.status_code == status.HTTP_404_NOT_FOUND
        assert put.status_code == status.HTTP_404_NOT_FOUND
        assert delete.status_code == status.HTTP_404_NOT_FOUND

        still_there = await async_client.get(url, headers=collaborator.headers)
        assert still_there.status_code == status.HTTP_200_OK

    @pytest.mark.asyncio
    async def test_unknown_id(self, async_client: AsyncClient, collaborator: TestAccount) -> None:
        response = await async_client.get(
            f"{API}/selfassessments/{uuid.uuid4()}", headers=collaborator.headers
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_malformed_id(self, async_client: AsyncClient, collaborator: TestAccount) -> None:
        response = await async_client.get(
            f"{API}/selfassessments/not-a-uuid", headers=collaborator.headers
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_update_replaces_levels_and_notes(
        self, async_client: AsyncClient, collaborator: TestAccount
    ) -> None:
        created = await _create(async_client, collaborator)

        response = await async_client.put(
            f"{API}/selfassessments/{created['id']}",
            json={"mood": 2, "stress": 5, "workload": 5},
            headers=collaborator.headers,
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert (data["mood"], data["stress"], data["workload"]) == (2, 5, 5)
        assert data["notes"] is None
        assert data["id"] == created["id"]

    @pytest.mark.asyncio
    async def test_delete(self, async_client: AsyncClient, collaborator: TestAccount) -> None:
        created = await _create(async_client, collaborator)
        url = f"{API}/selfassessments/{created['id']}"

        deleted = await async_client.delete(url, headers=collaborator.headers)
        again = await async_client.delete(url, headers=collaborator.headers)

        assert deleted.status_code == status.HTTP_204_NO_CONTENT
        assert again.status_code == status.HTTP_404_NOT_FOUND
