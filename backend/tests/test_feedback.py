"""
Tests pour les avis et l'agrégation des notes.
"""
import pytest

from ..src import config
from ..src.models_feedback import Feedback
from ..src.services import ratings
from ..src.services.ratings import average_of

BASE = "/api/Destinations"


@pytest.mark.parametrize(
    "ratings, expected",
    [
        ([], 0),
        ([4], 4),
        ([1, 2, 2], 2),
        ([2, 3], 2),  # 2.5 arrondi au pair
        ([3, 4], 4),  # 3.5 arrondi au pair
        ([5, 4, 4, 5], 4),
    ],
)
def test_average_of(ratings, expected):
    """Test de la moyenne arrondie des notes."""
    assert average_of(ratings) == expected


def test_add_feedback_updates_aggregate(client, db, make_destination, make_user, auth_headers):
    """Test qu'un avis met à jour la note moyenne et le nombre d'avis."""
    dest = make_destination()
    user = make_user()

    response = client.post(
        f"{BASE}/AddFeedback/{dest.id}",
        json={"content": "Great diving", "rating": 5},
        headers=auth_headers(user),
    )
    assert response.status_code == 200
    assert response.json() == {
        "message": "Comment and rating submitted successfully.",
        "newAverageRating": 5,
        "totalComments": 1,
    }

    response = client.post(
        f"{BASE}/AddFeedback/{dest.id}",
        json={"content": "Too crowded", "rating": 2},
        headers=auth_headers(user),
    )
    assert response.json()["newAverageRating"] == 4  # 3.5 arrondi au pair
    assert response.json()["totalComments"] == 2

    db.refresh(dest)
    assert dest.average_rating == 4
    assert dest.feedback_count == 2


def test_aggregate_rederived_from_all_rows(client, db, make_destination, make_user, auth_headers):
    """Test que l'agrégat est recalculé à partir de tous les avis, même s'il était faux."""
    dest = make_destination(average_rating=1, feedback_count=40)
    user = make_user()
    db.add(Feedback(destination_id=dest.id, user_id=user.id, content="Older", rating=3))
    db.commit()

    response = client.post(
        f"{BASE}/AddFeedback/{dest.id}",
        json={"content": "Nice", "rating": 3},
        headers=auth_headers(user),
    )
    assert response.json() == {
        "message": "Comment and rating submitted successfully.",
        "newAverageRating": 3,
        "totalComments": 2,
    }


def test_add_feedback_requires_token(client, make_destination):
    """Test qu'un avis sans jeton renvoie 401."""
    dest = make_destination()
    response = client.post(f"{BASE}/AddFeedback/{dest.id}", json={"content": "Hi", "rating": 4})
    assert response.status_code == 401


def test_add_feedback_unknown_destination(client, db, make_user, auth_headers):
    """Test qu'un avis sur une destination inexistante renvoie 404 sans rien écrire."""
    user = make_user()
    response = client.post(
        f"{BASE}/AddFeedback/missing", json={"content": "Hi", "rating": 4}, headers=auth_headers(user)
    )
    assert response.status_code == 404
    assert db.query(Feedback).count() == 0


@pytest.mark.parametrize(
    "payload",
    [
        {"content": "Hi", "rating": 0},
        {"content": "Hi", "rating": 6},
        {"content": "Hi", "rating": "great"},
        {"content": "   ", "rating": 3},
        {"rating": 3},
        {"content": "Hi", "rating": True},
        {"content": "Hi", "rating": "4"},
        {"content": "Hi", "rating": 4.0},
    ],
)
def test_add_feedback_invalid_payload(client, db, make_destination, make_user, auth_headers, payload):
    """Test que les avis mal formés renvoient 400 sans rien écrire."""
    dest = make_destination()
    user = make_user()
    response = client.post(f"{BASE}/AddFeedback/{dest.id}", json=payload, headers=auth_headers(user))
    assert response.status_code == 400
    assert db.query(Feedback).count() == 0


def test_rating_bounds_are_configurable(client, make_destination, make_user, auth_headers, monkeypatch):
    """Test que les bornes de note suivent la configuration."""
    monkeypatch.setattr(config, "FEEDBACK_MAX_RATING", 10)
    dest = make_destination()
    user = make_user()
    response = client.post(
        f"{BASE}/AddFeedback/{dest.id}", json={"content": "Top", "rating": 9}, headers=auth_headers(user)
    )
    assert response.status_code == 200
    assert response.json()["newAverageRating"] == 9


def test_get_comments_for_destination(client, make_destination, make_user, auth_headers):
    """Test de la liste des commentaires avec le nom de l'auteur."""
    dest = make_destination()
    ali = make_user("ali")
    sara = make_user("sara")
    client.post(f"{BASE}/AddFeedback/{dest.id}", json={"content": "First", "rating": 4}, headers=auth_headers(ali))
    client.post(f"{BASE}/AddFeedback/{dest.id}", json={"content": "Second", "rating": 2}, headers=auth_headers(sara))

    response = client.get(f"{BASE}/GetCommentsForDestination/{dest.id}")
    assert response.status_code == 200
    data = response.json()
    assert [(c["content"], c["username"]) for c in data] == [("First", "ali"), ("Second", "sara")]
    assert set(data[0].keys()) == {"feedbackId", "content", "rating", "date", "username"}


def test_get_comments_unknown_destination_is_empty(client):
    """Test qu'une destination sans avis renvoie une liste vide."""
    response = client.get(f"{BASE}/GetCommentsForDestination/missing")
    assert response.status_code == 200
    assert response.json() == []


def test_failed_aggregate_update_leaves_no_orphan_feedback(db, make_destination, make_user, monkeypatch):
    """Test qu'un échec après l'insertion annule l'avis et conserve l'agrégat."""
    dest = make_destination(average_rating=4, feedback_count=0)
    user = make_user()

    def broken_recompute(session, destination):
        raise RuntimeError("aggregate update failed")

    monkeypatch.setattr(ratings, "recompute_rating", broken_recompute)

    with pytest.raises(RuntimeError):
        ratings.submit_feedback(db, dest.id, user.id, "Lovely", 5)

    assert db.query(Feedback).count() == 0
    db.refresh(dest)
    assert dest.average_rating == 4
    assert dest.feedback_count == 0
