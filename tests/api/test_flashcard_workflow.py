"""End-to-end flow across decks and cards for two users."""
from httpx import AsyncClient


async def test__deck_lifecycle_across_two_users(
    client: AsyncClient, client_as_user_b: AsyncClient,
) -> None:
    # User A creates a deck
    response = await client.post("/api/decks", json={"name": "Spanish"})
    assert response.status_code == 201
    deck = response.json()["data"]
    assert deck["archived"] is False

    # User A adds a card
    card_payload = {"front": "hola", "back": "hello", "deck_id": deck["id"]}
    response = await client.post("/api/cards", json=card_payload)
    assert response.status_code == 201

    # User B cannot add a card to user A's deck
    response = await client_as_user_b.post("/api/cards", json=card_payload)
    assert response.status_code == 404

    # Archived decks refuse new cards
    response = await client.post(f"/api/decks/{deck['id']}/archive")
    assert response.status_code == 200
    response = await client.post(
        "/api/cards", json={"front": "adiós", "back": "goodbye", "deck_id": deck["id"]},
    )
    assert response.status_code == 400

    # Deleting a deck with a card archives it instead
    response = await client.delete(f"/api/decks/{deck['id']}")
    assert response.status_code == 200
    body = response.json()
    assert body["data"]["outcome"] == "archived"
    assert body["data"]["deck"]["archived"] is True

    response = await client.get(f"/api/decks/{deck['id']}")
    assert response.status_code == 200
    assert response.json()["data"]["archived"] is True

    # User A's cards are untouched and user B still sees nothing
    response = await client.get(f"/api/decks/{deck['id']}/cards")
    assert response.json()["results"] == 1
    response = await client_as_user_b.get("/api/cards")
    assert response.json()["results"] == 0
