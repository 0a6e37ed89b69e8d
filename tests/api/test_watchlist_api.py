"""
API tests for watchlist endpoints.
"""

import pytest

BASE = "/api/users/alice/watchlist"


def _positions(response):
    return [(i["movie_id"], i["position"]) for i in response.json()["items"]]


@pytest.fixture
def stocked(client, add_movies):
    add_movies("A", "B", "C")
    for movie_id in ("A", "B", "C"):
        client.post(BASE, json={"movie_id": movie_id})
    return client


class TestWatchlistEndpoints:
    """Tests for /api/users/{user_id}/watchlist."""

    def test_empty_list_created_lazily(self, client):
        r = client.get(BASE)
        assert r.status_code == 200
        assert r.json() == {"user_id": "alice", "items": []}

    def test_add_appends(self, stocked):
        r = stocked.get(BASE)
        assert _positions(r) == [("A", 1), ("B", 2), ("C", 3)]
        assert r.json()["items"][0]["title"] == "Title A"

    def test_add_at_position(self, stocked, add_movies):
        add_movies("D")
        r = stocked.post(BASE, json={"movie_id": "D", "position": 2})
        assert r.status_code == 200
        assert _positions(r) == [("A", 1), ("D", 2), ("B", 3), ("C", 4)]

    def test_add_unknown_movie_is_404(self, client):
        r = client.post(BASE, json={"movie_id": "tt404"})
        assert r.status_code == 404

    def test_add_blank_movie_is_422(self, client):
        r = client.post(BASE, json={"movie_id": ""})
        assert r.status_code == 422

    def test_remove_compacts(self, stocked):
        r = stocked.delete(f"{BASE}/B")
        assert r.status_code == 204
        assert _positions(stocked.get(BASE)) == [("A", 1), ("C", 2)]

    def test_remove_absent_is_204(self, stocked):
        assert stocked.delete(f"{BASE}/Z").status_code == 204
        assert len(stocked.get(BASE).json()["items"]) == 3

    def test_reorder(self, stocked):
        r = stocked.patch(f"{BASE}/reorder", json={"movie_id": "C", "new_position": 1})
        assert r.status_code == 200
        assert _positions(r) == [("C", 1), ("A", 2), ("B", 3)]

    def test_reorder_clamps(self, stocked):
        r = stocked.patch(f"{BASE}/reorder", json={"movie_id": "A", "new_position": 10})
        assert _positions(r) == [("B", 1), ("C", 2), ("A", 3)]

    def test_reorder_unlisted_is_404(self, stocked, add_movies):
        add_movies("E")
        r = stocked.patch(f"{BASE}/reorder", json={"movie_id": "E", "new_position": 1})
        assert r.status_code == 404

    def test_reorder_position_below_one_is_422(self, stocked):
        r = stocked.patch(f"{BASE}/reorder", json={"movie_id": "A", "new_position": 0})
        assert r.status_code == 422

    def test_lists_are_per_user(self, stocked):
        r = stocked.get("/api/users/bob/watchlist")
        assert r.json()["items"] == []
