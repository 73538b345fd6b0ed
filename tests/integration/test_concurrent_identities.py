import asyncio

import pytest
from httpx import AsyncClient

BASE = "/api/gamecheckpoints"


@pytest.mark.asyncio
async def test_interleaved_requests_never_share_identity(client: AsyncClient, make_headers, admin):
    players = {f"p-{i}": make_headers(f"p-{i}") for i in range(6)}

    async def _create(subject: str, headers: dict) -> dict:
        r = await client.post(BASE, json={"owner_name": subject, "payload": f"save-{subject}"}, headers=headers)
        assert r.status_code == 201, r.text
        return r.json()

    created = await asyncio.gather(*(_create(s, h) for s, h in players.items()))
    for row in created:
        assert row["owner_id"] == row["owner_name"]

    async def _list(headers: dict) -> list:
        r = await client.get(BASE, headers=headers)
        assert r.status_code == 200
        return r.json()

    # Admin and player lists interleaved on the same app instance.
    calls = []
    for headers in players.values():
        calls.append(_list(admin))
        calls.append(_list(headers))
    results = await asyncio.gather(*calls)

    admin_lists = results[0::2]
    player_lists = results[1::2]

    for rows in admin_lists:
        assert len(rows) == len(players)
    for subject, rows in zip(players, player_lists):
        assert [r["owner_id"] for r in rows] == [subject]


@pytest.mark.asyncio
async def test_whoami_is_per_request(client: AsyncClient, make_headers, admin):
    async def _whoami(headers: dict) -> dict:
        r = await client.get("/api/session", headers=headers)
        return r.json()

    pairs = [(admin, "admin-1", True)] + [(make_headers(f"p-{i}"), f"p-{i}", False) for i in range(5)]
    results = await asyncio.gather(*(_whoami(h) for h, _, _ in pairs * 3))

    for (_, subject, is_admin), body in zip(pairs * 3, results):
        assert body["subject_id"] == subject
        assert body["is_admin"] is is_admin
