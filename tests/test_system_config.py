"""Tests for the public configuration endpoint."""

from fastapi import status
from fastapi.testclient import TestClient

from synclock.core.settings import settings


def test_config_hides_connection_strings(client: TestClient) -> None:
    r = client.get("/api/config")
    assert r.status_code == status.HTTP_200_OK
    body = r.text
    assert settings.database_url not in body
    data = r.json()
    assert data["app"]["name"] == settings.app_name
    assert data["geo"] == {"enabled": False}


def test_comment_widget_disabled_without_repo(client: TestClient) -> None:
    data = client.get("/api/config").json()
    assert data["comments"]["enabled"] is False
    assert data["comments"]["repo"] is None


def test_comment_widget_options_pass_through(client: TestClient, monkeypatch) -> None:
    monkeypatch.setattr(settings, "comments_repo", "octo/clock-comments")
    monkeypatch.setattr(settings, "comments_repo_id", "R_kgDOExample")
    monkeypatch.setattr(settings, "comments_category", "Announcements")
    monkeypatch.setattr(settings, "comments_category_id", "DIC_kwDOExample")

    comments = client.get("/api/config").json()["comments"]

    assert comments == {
        "enabled": True,
        "repo": "octo/clock-comments",
        "repo_id": "R_kgDOExample",
        "category": "Announcements",
        "category_id": "DIC_kwDOExample",
        "mapping": "pathname",
        "theme": "dark",
    }
