"""
Integration tests for Group API endpoints.
Tests roster management and admin authorization over HTTP.
"""
import pytest


@pytest.mark.asyncio
class TestGroupAPI:
    """Test cases for Group API endpoints."""

    async def test_create_and_list(self, as_user, alice):
        async with as_user(alice) as client:
            created = await client.post(
                "/api/v1/groups/",
                json={"name": "Book Club", "description": "Monthly picks"}
            )
            listing = await client.get("/api/v1/groups/")

        assert created.status_code == 201
        data = created.json()
        assert data["createdBy"] == alice.id
        assert data["role"] == "admin"
        assert data["memberCount"] == 1
        assert [g["id"] for g in listing.json()] == [data["id"]]

    async def test_blank_name(self, as_user, alice):
        async with as_user(alice) as client:
            response = await client.post("/api/v1/groups/", json={"name": "   "})

        assert response.status_code == 400

    async def test_add_friend_then_roster(self, as_user, alice, bob, test_group, make_friends):
        await make_friends(alice, bob)

        async with as_user(alice) as client:
            added = await client.post(
                f"/api/v1/groups/{test_group['id']}/members",
                json={"user_id": bob.id}
            )
            roster = await client.get(f"/api/v1/groups/{test_group['id']}/members")

        assert added.status_code == 201
        assert added.json()["role"] == "member"
        assert {(m["userId"], m["role"]) for m in roster.json()} == {
            (alice.id, "admin"),
            (bob.id, "member"),
        }

    async def test_add_stranger_forbidden(self, as_user, alice, dave, test_group):
        async with as_user(alice) as client:
            response = await client.post(
                f"/api/v1/groups/{test_group['id']}/members",
                json={"user_id": dave.id}
            )

        assert response.status_code == 403

    async def test_addable_friends_scenario(self, as_user, alice, bob, carol, dave, test_group, make_friends):
        # Alice befriends Bob and Carol, adds Bob; only Carol remains addable
        await make_friends(alice, bob)
        await make_friends(alice, carol)

        async with as_user(alice) as client:
            await client.post(f"/api/v1/groups/{test_group['id']}/members", json={"user_id": bob.id})
            response = await client.get(f"/api/v1/groups/{test_group['id']}/addable-friends")

        assert response.status_code == 200
        assert [u["id"] for u in response.json()] == [carol.id]

    async def test_creator_protection(self, as_user, alice, test_group):
        async with as_user(alice) as client:
            removed = await client.delete(f"/api/v1/groups/{test_group['id']}/members/{alice.id}")
            left = await client.post(f"/api/v1/groups/{test_group['id']}/leave")

        assert removed.status_code == 403
        assert left.status_code == 403

    async def test_member_leaves(self, as_user, alice, bob, test_group, make_friends):
        await make_friends(alice, bob)
        async with as_user(alice) as client:
            await client.post(f"/api/v1/groups/{test_group['id']}/members", json={"user_id": bob.id})

        async with as_user(bob) as client:
            left = await client.post(f"/api/v1/groups/{test_group['id']}/leave")
            detail = await client.get(f"/api/v1/groups/{test_group['id']}")

        assert left.status_code == 200
        assert left.json()["success"] is True
        assert detail.status_code == 403

    async def test_admin_removes_member(self, as_user, alice, bob, test_group, make_friends):
        await make_friends(alice, bob)
        async with as_user(alice) as client:
            await client.post(f"/api/v1/groups/{test_group['id']}/members", json={"user_id": bob.id})
            removed = await client.delete(f"/api/v1/groups/{test_group['id']}/members/{bob.id}")
            detail = await client.get(f"/api/v1/groups/{test_group['id']}")

        assert removed.status_code == 200
        assert detail.json()["memberCount"] == 1

    async def test_unknown_group(self, as_user, alice):
        async with as_user(alice) as client:
            response = await client.get("/api/v1/groups/does-not-exist")

        assert response.status_code == 404
