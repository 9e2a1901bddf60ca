"""
IDOR (Insecure Direct Object Reference) security tests.

These tests verify that users cannot access, modify, or delete decks and cards
belonging to other users by manipulating resource IDs.

OWASP Reference: A01:2021 - Broken Access Control
"""
from uuid import uuid4

from httpx import AsyncClient

from models.card import Card
from models.deck import Deck


class TestDeckIDOR:
    """Test IDOR protection for deck resources."""

    async def test__get_deck__returns_404_for_other_users_deck(
        self, client_as_user_b: AsyncClient, user_a_deck: Deck,
    ) -> None:
        response = await client_as_user_b.get(f"/api/decks/{user_a_deck.id}")

        # 404, not 403, so IDs cannot be enumerated
        assert response.status_code == 404
        assert response.json()["message"] == f"Deck with ID {user_a_deck.id} not found"

    async def test__foreign_and_missing_ids_are_indistinguishable(
        self, client_as_user_b: AsyncClient, user_a_deck: Deck,
    ) -> None:
        missing = uuid4()

        foreign = await client_as_user_b.get(f"/api/decks/{user_a_deck.id}")
        absent = await client_as_user_b.get(f"/api/decks/{missing}")

        assert foreign.status_code == absent.status_code == 404
        assert foreign.json()["message"].replace(str(user_a_deck.id), "X") == (
            absent.json()["message"].replace(str(missing), "X")
        )

    async def test__get_deck_by_slug__returns_404_for_other_users_slug(
        self, client_as_user_b: AsyncClient, user_a_deck: Deck,
    ) -> None:
        response = await client_as_user_b.get(f"/api/decks/slug/{user_a_deck.slug}")

        assert response.status_code == 404

    async def test__update_deck__returns_404_for_other_users_deck(
        self, client: AsyncClient, client_as_user_b: AsyncClient, user_a_deck: Deck,
    ) -> None:
        response = await client_as_user_b.patch(
            f"/api/decks/{user_a_deck.id}", json={"name": "Hacked by User B"},
        )

        assert response.status_code == 404
        unchanged = await client.get(f"/api/decks/{user_a_deck.id}")
        assert unchanged.json()["data"]["name"] == "Spanish"

    async def test__archive_deck__returns_404_for_other_users_deck(
        self, client: AsyncClient, client_as_user_b: AsyncClient, user_a_deck: Deck,
    ) -> None:
        response = await client_as_user_b.post(f"/api/decks/{user_a_deck.id}/archive")

        assert response.status_code == 404
        unchanged = await client.get(f"/api/decks/{user_a_deck.id}")
        assert unchanged.json()["data"]["archived"] is False

    async def test__delete_deck__returns_404_for_other_users_deck(
        self, client: AsyncClient, client_as_user_b: AsyncClient, user_a_deck: Deck,
    ) -> None:
        response = await client_as_user_b.delete(f"/api/decks/{user_a_deck.id}")

        assert response.status_code == 404
        assert (await client.get(f"/api/decks/{user_a_deck.id}")).status_code == 200

    async def test__list_deck_cards__returns_404_for_other_users_deck(
        self, client_as_user_b: AsyncClient, user_a_card: Card,
    ) -> None:
        response = await client_as_user_b.get(f"/api/decks/{user_a_card.deck_id}/cards")

        assert response.status_code == 404

    async def test__list_decks__excludes_other_users_data(
        self, client_as_user_b: AsyncClient, user_a_deck: Deck, user_b_deck: Deck,
    ) -> None:
        response = await client_as_user_b.get("/api/decks", params={"include_archived": "true"})

        assert [d["id"] for d in response.json()["data"]] == [str(user_b_deck.id)]

    async def test__list_decks__user_id_filter_cannot_widen_scope(
        self, client_as_user_b: AsyncClient, user_a_deck: Deck,
    ) -> None:
        response = await client_as_user_b.get(
            "/api/decks", params={"user_id": user_a_deck.user_id},
        )

        assert response.status_code == 400


class TestCardIDOR:
    """Test IDOR protection for card resources."""

    async def test__get_card__returns_404_for_other_users_card(
        self, client_as_user_b: AsyncClient, user_a_card: Card,
    ) -> None:
        response = await client_as_user_b.get(f"/api/cards/{user_a_card.id}")

        assert response.status_code == 404

    async def test__update_card__returns_404_for_other_users_card(
        self, client: AsyncClient, client_as_user_b: AsyncClient, user_a_card: Card,
    ) -> None:
        response = await client_as_user_b.patch(
            f"/api/cards/{user_a_card.id}", json={"front": "hacked"},
        )

        assert response.status_code == 404
        unchanged = await client.get(f"/api/cards/{user_a_card.id}")
        assert unchanged.json()["data"]["front"] == "hola"

    async def test__move_own_card_into_other_users_deck__returns_404(
        self, client: AsyncClient, user_a_card: Card, user_b_deck: Deck,
    ) -> None:
        response = await client.patch(
            f"/api/cards/{user_a_card.id}", json={"deck_id": str(user_b_deck.id)},
        )

        assert response.status_code == 404
        unchanged = await client.get(f"/api/cards/{user_a_card.id}")
        assert unchanged.json()["data"]["deck_id"] == str(user_a_card.deck_id)

    async def test__create_card_in_other_users_deck__returns_404(
        self, client_as_user_b: AsyncClient, user_a_deck: Deck,
    ) -> None:
        response = await client_as_user_b.post(
            "/api/cards", json={"front": "x", "back": "y", "deck_id": str(user_a_deck.id)},
        )

        assert response.status_code == 404

    async def test__delete_card__returns_404_for_other_users_card(
        self, client: AsyncClient, client_as_user_b: AsyncClient, user_a_card: Card,
    ) -> None:
        response = await client_as_user_b.delete(f"/api/cards/{user_a_card.id}")

        assert response.status_code == 404
        assert (await client.get(f"/api/cards/{user_a_card.id}")).status_code == 200

    async def test__list_cards__excludes_other_users_data(
        self, client_as_user_b: AsyncClient, user_a_card: Card,
    ) -> None:
        response = await client_as_user_b.get("/api/cards")

        assert response.json()["data"] == []
