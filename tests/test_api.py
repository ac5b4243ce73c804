"""
HTTP back-office tests.
"""

import pytest
from fastapi.testclient import TestClient

from rundown.api.main import create_app
from rundown.core.placement import LockedRandom
from rundown.core.schema import Story
from rundown.core.store import FileRepo, PersistenceError

USER, PASSWORD = "editor", "secret"


@pytest.fixture
def repo(dataset_path):
    return FileRepo.open(dataset_path, rng=LockedRandom(1))


@pytest.fixture
def client(repo):
    """Authenticated client for the back-office."""
    test_client = TestClient(create_app(repo, USER, PASSWORD))
    test_client.auth = (USER, PASSWORD)
    return test_client


@pytest.fixture
def episode(repo):
    repo.add_episode("Ep 1!")
    for title, presenter in [("one", "A"), ("two", "B")]:
        repo.add_story("ep-1-", "News", Story(title=title, notes="see example.com", presenter=presenter))
    return repo.episode_by_slug("ep-1-")


class TestAuthentication:

    def test_missing_credentials(self, repo):
        response = TestClient(create_app(repo, USER, PASSWORD)).get("/")
        assert response.status_code == 401
        assert response.headers["www-authenticate"].startswith("Basic")

    def test_wrong_password(self, repo):
        client = TestClient(create_app(repo, USER, PASSWORD))
        response = client.get("/", auth=(USER, "wrong"))
        assert response.status_code == 401
        assert response.headers["www-authenticate"] == 'Basic realm="Authorization Required"'

    def test_writes_require_credentials(self, repo, dataset_path):
        before = dataset_path.read_bytes()
        response = TestClient(create_app(repo, USER, PASSWORD)).post("/", data={"title": "Ep"})
        assert response.status_code == 401
        assert dataset_path.read_bytes() == before

    def test_health_is_public(self, repo):
        response = TestClient(create_app(repo, USER, PASSWORD)).get("/_health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["episodes"] == 0


class TestEpisodes:

    def test_create_episode_redirects_to_details(self, client, repo):
        response = client.post("/", data={"title": "Ep 1!"}, follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "/ep-1-"
        assert repo.episode_by_slug("ep-1-").title == "Ep 1!"

    def test_empty_title_is_rejected(self, client, repo):
        response = client.post("/", data={"title": "   "})
        assert response.status_code == 400
        assert "title cannot be empty" in response.text
        assert repo.episode_list() == []

    def test_list_is_newest_first(self, client):
        client.post("/", data={"title": "A"})
        client.post("/", data={"title": "B"})
        text = client.get("/").text
        assert text.index(">B</a>") < text.index(">A</a>")

    def test_details(self, client, episode):
        response = client.get("/ep-1-")
        assert response.status_code == 200
        assert "<h2>News</h2>" in response.text
        assert "<h2>Tips</h2>" in response.text
        assert '<a href="http://example.com">example.com</a>' in response.text

    def test_unknown_episode(self, client):
        assert client.get("/missing").status_code == 404


class TestStories:

    def test_add_story(self, client, episode, repo):
        response = client.post(
            "/ep-1-",
            data={"title": "three", "notes": "", "presenter": "A", "segment": "News"},
            follow_redirects=False,
        )
        assert response.status_code == 303
        assert response.headers["location"] == "/ep-1-"
        news = repo.episode_by_slug("ep-1-").segments[0]
        assert sorted(s.id for s in news.stories) == [1, 2, 3]
        assert [s.presenter for s in news.stories] == ["A", "B", "A"]

    def test_add_story_unknown_segment(self, client, episode):
        response = client.post("/ep-1-", data={"title": "t", "presenter": "A", "segment": "Sports"})
        assert response.status_code == 404

    def test_add_story_unknown_episode(self, client):
        response = client.post("/missing", data={"title": "t", "presenter": "A", "segment": "News"})
        assert response.status_code == 404

    def test_add_story_requires_title(self, client, episode, repo):
        response = client.post("/ep-1-", data={"title": "", "presenter": "A", "segment": "News"})
        assert response.status_code == 400
        assert len(repo.episode_by_slug("ep-1-").segments[0].stories) == 2

    def test_edit_form(self, client, episode):
        response = client.get("/ep-1-/0/2/edit")
        assert response.status_code == 200
        assert 'value="two"' in response.text

    @pytest.mark.parametrize("path", [
        "/ep-1-/x/1/edit",
        "/ep-1-/0/y/edit",
        "/ep-1-/2/1/edit",
        "/ep-1-/-1/1/edit",
        "/ep-1-/0/9/edit",
        "/missing/0/1/edit",
    ])
    def test_edit_form_not_found(self, client, episode, path):
        assert client.get(path).status_code == 404

    def test_update_story(self, client, episode, repo):
        response = client.post(
            "/ep-1-/0/2/edit",
            data={"title": "renamed", "notes": "new", "presenter": "A"},
            follow_redirects=False,
        )
        assert response.status_code == 303
        story = repo.story_by_id(repo.episode_by_slug("ep-1-").segments[0], 2)
        assert (story.title, story.notes, story.presenter) == ("renamed", "new", "A")

    def test_update_missing_story(self, client, episode):
        response = client.post("/ep-1-/0/9/edit", data={"title": "t", "presenter": "A"})
        assert response.status_code == 404

    def test_delete_story(self, client, episode, repo):
        response = client.post("/ep-1-/0/1/delete", follow_redirects=False)
        assert response.status_code == 303
        assert [s.id for s in repo.episode_by_slug("ep-1-").segments[0].stories] == [2]

    @pytest.mark.parametrize("path", ["/ep-1-/0/abc/delete", "/ep-1-/1/1/delete", "/ep-1-/5/1/delete"])
    def test_delete_not_found(self, client, episode, path):
        assert client.post(path).status_code == 404

    @pytest.mark.parametrize("story_id", ["%201", "+1", "1_0", "%D9%A1", "1.0"])
    def test_ids_must_be_plain_ascii_integers(self, client, episode, repo, story_id):
        assert client.get(f"/ep-1-/0/{story_id}/edit").status_code == 404
        assert client.post(f"/ep-1-/0/{story_id}/delete").status_code == 404
        assert len(repo.episode_by_slug("ep-1-").segments[0].stories) == 2


def test_failed_save_returns_500(client, episode, repo, dataset_path, monkeypatch):
    before = dataset_path.read_bytes()

    def fail(path, dataset):
        raise PersistenceError("disk full")

    monkeypatch.setattr("rundown.core.store.write_dataset", fail)
    response = client.post("/ep-1-", data={"title": "t", "presenter": "A", "segment": "News"})
    assert response.status_code == 500
    assert dataset_path.read_bytes() == before
    assert len(repo.episode_by_slug("ep-1-").segments[0].stories) == 2


def test_get_app_uses_configured_dataset(dataset_path, monkeypatch):
    from rundown.api import main

    monkeypatch.setenv("RUNDOWN_FILENAME", str(dataset_path))
    monkeypatch.setenv("RUNDOWN_USER", "cfg-user")
    monkeypatch.setenv("RUNDOWN_PASS", "cfg-pass")
    monkeypatch.setenv("RUNDOWN_SEED", "3")
    monkeypatch.setattr(main, "_app", None)

    app = main.get_app()
    assert main.get_app() is app

    client = TestClient(app)
    assert client.get("/", auth=("cfg-user", "cfg-pass")).status_code == 200
    assert client.get("/", auth=(USER, PASSWORD)).status_code == 401


def test_unexpected_error_returns_500(repo, monkeypatch):
    def fail():
        raise RuntimeError("boom")

    monkeypatch.setattr(repo, "episode_list", fail)
    client = TestClient(create_app(repo, USER, PASSWORD), raise_server_exceptions=False)
    response = client.get("/", auth=(USER, PASSWORD))
    assert response.status_code == 500
    assert "Internal Server Error" in response.text
