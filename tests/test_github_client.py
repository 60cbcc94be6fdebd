from pathlib import Path
from unittest import mock

import pytest
import requests

from webflow_starter import github_client as github_client_mod
from webflow_starter.github_client import GitHubClient, GitHubError
from webflow_starter.provisioner import KeyListingError


def _response(status: int, payload=None, next_url: str | None = None) -> mock.Mock:
    r = mock.Mock()
    r.status_code = status
    r.json.return_value = payload
    r.text = ""
    r.links = {"next": {"url": next_url, "rel": "next"}} if next_url else {}
    return r


def test_requires_token() -> None:
    with pytest.raises(GitHubError):
        GitHubClient("  ")


def test_status_true_for_valid_token() -> None:
    with mock.patch.object(github_client_mod.requests, "request", return_value=_response(200, {"login": "acme"})) as req:
        assert GitHubClient("t0k").status() is True
    method, url = req.call_args.args
    assert (method, url) == ("GET", "https://api.github.com/user")
    assert req.call_args.kwargs["headers"]["Authorization"] == "Bearer t0k"


def test_status_false_for_rejected_token() -> None:
    with mock.patch.object(github_client_mod.requests, "request", return_value=_response(401, {"message": "Bad credentials"})):
        assert GitHubClient("t0k").status() is False


def test_network_error_is_not_reported_as_bad_token() -> None:
    with mock.patch.object(github_client_mod.requests, "request", side_effect=requests.ConnectionError("down")):
        with pytest.raises(GitHubError, match="Could not reach GitHub") as exc_info:
            GitHubClient("t0k").status()
    assert exc_info.value.status_code is None
    assert "rejected" not in str(exc_info.value)


def test_server_error_raises_instead_of_login() -> None:
    with mock.patch.object(github_client_mod.requests, "request", return_value=_response(503, {"message": "Unavailable"})):
        with pytest.raises(GitHubError) as exc_info:
            GitHubClient("t0k").status()
    assert exc_info.value.status_code == 503


def test_login_is_not_interactive() -> None:
    with pytest.raises(GitHubError, match="GITHUB_TOKEN"):
        GitHubClient("t0k").login()


def test_list_renders_one_key_per_line() -> None:
    payload = [
        {"id": 1, "title": "laptop", "key": "ssh-ed25519 AAAA"},
        {"id": 2, "title": "desktop", "key": "ssh-rsa BBBB"},
    ]
    with mock.patch.object(github_client_mod.requests, "request", return_value=_response(200, payload)):
        listing = GitHubClient("t0k").list()
    assert listing == "laptop\tssh-ed25519 AAAA\ndesktop\tssh-rsa BBBB"


def test_list_follows_next_page_links() -> None:
    first = [{"id": i, "title": f"k{i}", "key": f"ssh-rsa K{i}"} for i in range(100)]
    second = [{"id": 100, "title": "laptop", "key": "ssh-ed25519 LAST"}]
    page2 = "https://api.github.com/user/keys?per_page=100&page=2"
    responses = [_response(200, first, next_url=page2), _response(200, second)]
    with mock.patch.object(github_client_mod.requests, "request", side_effect=responses) as req:
        listing = GitHubClient("t0k").list()

    assert "laptop\tssh-ed25519 LAST" in listing
    assert len(listing.splitlines()) == 101
    assert [c.args[1] for c in req.call_args_list] == [
        "https://api.github.com/user/keys?per_page=100",
        page2,
    ]


def test_list_failure_becomes_key_listing_error() -> None:
    with mock.patch.object(github_client_mod.requests, "request", return_value=_response(403, {"message": "Forbidden"})):
        with pytest.raises(KeyListingError, match="403"):
            GitHubClient("t0k").list()


def test_add_posts_public_key(tmp_path: Path) -> None:
    pub = tmp_path / "id_ed25519.pub"
    pub.write_text("ssh-ed25519 AAAA me@example.com\n", encoding="utf-8")
    created = {"id": 7, "title": "laptop", "key": "ssh-ed25519 AAAA"}
    with mock.patch.object(github_client_mod.requests, "request", return_value=_response(201, created)) as req:
        GitHubClient("t0k").add(pub, "laptop")
    assert req.call_args.args == ("POST", "https://api.github.com/user/keys")
    assert req.call_args.kwargs["json"] == {"title": "laptop", "key": "ssh-ed25519 AAAA me@example.com"}
