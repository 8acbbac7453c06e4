# tests/test_api_pagination.py

"""Tests for API pagination and sorting functionality."""

import pytest
from httpx import AsyncClient

# =============================================================================
# Helper Functions
# =============================================================================


async def create_player(client: AsyncClient, username: str) -> int:
    """Helper to create a player and return its ID."""
    res = await client.post("/players/", json={"username": username})
    assert res.status_code == 201
    return int(res.json()["id"])


async def create_match(
    client: AsyncClient, player1_id: int, player2_id: int, winner_id: int
) -> int:
    """Helper to record a match and return its ID."""
    res = await client.post(
        "/matches/",
        json={
            "player1_id": player1_id,
            "player2_id": player2_id,
            "winner_id": winner_id,
        },
    )
    assert res.status_code == 201
    return int(res.json()["id"])


# =============================================================================
# Pagination Edge Cases - Players
# =============================================================================


@pytest.mark.asyncio
async def test_players_pagination_skip_zero_limit_one(async_client: AsyncClient):
    """Test pagination with smallest possible page (skip=0, limit=1)."""
    for i in range(3):
        await create_player(async_client, f"PagePlayer{i}")

    response = await async_client.get("/players/?skip=0&limit=1")
    assert response.status_code == 200
    data = response.json()

    assert len(data["items"]) == 1
    assert data["skip"] == 0
    assert data["limit"] == 1
    assert data["total"] == 3
    assert data["has_more"] is True


@pytest.mark.asyncio
async def test_players_pagination_skip_exceeds_total(async_client: AsyncClient):
    """Test that skip exceeding total returns empty list."""
    await create_player(async_client, "SkipExceeds")

    response = await async_client.get("/players/?skip=10000")
    assert response.status_code == 200
    data = response.json()

    assert data["items"] == []
    assert data["total"] == 1
    assert data["has_more"] is False


@pytest.mark.asyncio
async def test_players_pagination_last_page_has_no_more(async_client: AsyncClient):
    for i in range(3):
        await create_player(async_client, f"LastPage{i}")

    response = await async_client.get("/players/?skip=2&limit=2")
    data = response.json()

    assert len(data["items"]) == 1
    assert data["has_more"] is False


@pytest.mark.asyncio
@pytest.mark.parametrize("limit", [0, 101])
async def test_players_pagination_limit_out_of_range(
    async_client: AsyncClient, limit: int
):
    response = await async_client.get(f"/players/?limit={limit}")
    assert response.status_code == 422


# =============================================================================
# Sorting Tests - Players
# =============================================================================


@pytest.mark.asyncio
async def test_players_sort_by_username_desc(async_client: AsyncClient):
    for name in ("Beta", "Alpha", "Gamma"):
        await create_player(async_client, name)

    response = await async_client.get(
        "/players/?sort_by=username&sort_order=desc"
    )
    assert response.status_code == 200

    names = [p["username"] for p in response.json()["items"]]
    assert names == ["Gamma", "Beta", "Alpha"]


@pytest.mark.asyncio
async def test_players_sort_by_created_at_asc(async_client: AsyncClient):
    ids = [await create_player(async_client, f"Created{i}") for i in range(3)]

    response = await async_client.get(
        "/players/?sort_by=created_at&sort_order=asc"
    )
    assert response.status_code == 200

    assert [p["id"] for p in response.json()["items"]] == ids


@pytest.mark.asyncio
async def test_players_sort_by_matches_played(async_client: AsyncClient):
    busy = await create_player(async_client, "Busy")
    casual = await create_player(async_client, "Casual")
    idle = await create_player(async_client, "Idle")

    await create_match(async_client, busy, casual, busy)
    await create_match(async_client, busy, casual, casual)
    await create_match(async_client, busy, casual, busy)
    extra = await create_player(async_client, "Extra")
    await create_match(async_client, busy, extra, extra)

    response = await async_client.get("/players/?sort_by=matches_played")
    ids = [p["id"] for p in response.json()["items"]]

    assert ids[:2] == [busy, casual]
    assert ids[-1] == idle


@pytest.mark.asyncio
async def test_players_invalid_sort_field_returns_422(async_client: AsyncClient):
    response = await async_client.get("/players/?sort_by=password")
    assert response.status_code == 422


# =============================================================================
# Pagination Tests - Matches
# =============================================================================


@pytest.mark.asyncio
async def test_matches_pagination_walks_history(async_client: AsyncClient):
    p1 = await create_player(async_client, "Walker1")
    p2 = await create_player(async_client, "Walker2")
    ids = [await create_match(async_client, p1, p2, p1) for _ in range(5)]

    seen = []
    skip = 0
    while True:
        data = (await async_client.get(f"/matches/?skip={skip}&limit=2")).json()
        seen.extend(m["id"] for m in data["items"])
        assert data["total"] == 5
        if not data["has_more"]:
            break
        skip += 2

    assert seen == list(reversed(ids))


@pytest.mark.asyncio
async def test_player_matches_endpoint_pagination(async_client: AsyncClient):
    p1 = await create_player(async_client, "Paged1")
    p2 = await create_player(async_client, "Paged2")
    p3 = await create_player(async_client, "Paged3")

    await create_match(async_client, p1, p2, p1)
    await create_match(async_client, p2, p3, p3)
    await create_match(async_client, p3, p1, p1)

    response = await async_client.get(f"/players/{p1}/matches?limit=1")
    assert response.status_code == 200
    data = response.json()

    # Only the two matches p1 played count toward the total
    assert data["total"] == 2
    assert len(data["items"]) == 1
    assert data["has_more"] is True
    assert data["items"][0]["player2_id"] == p1
