"""Tests for the GitHub release listers."""

from unittest.mock import patch

import pytest

import repository.github as github
from repository.github import (
    AnonymousReleaseLister,
    AuthenticatedReleaseLister,
    ReleaseDescriptor,
    create_release_lister,
)

RELEASES_URL = "https://api.github.com/repos/Myriad-Dreamin/shiroa/releases"


class TestCreateReleaseLister:
    """Lister selection happens once, from token presence."""

    def test_token_selects_authenticated(self):
        lister = create_release_lister("ghp_secret")
        assert isinstance(lister, AuthenticatedReleaseLister)
        assert lister.token == "ghp_secret"

    @pytest.mark.parametrize("token", [None, ""])
    def test_missing_token_selects_anonymous(self, token):
        assert isinstance(create_release_lister(token), AnonymousReleaseLister)

    def test_custom_api_base(self):
        lister = create_release_lister(None, "owner/repo", "https://ghe.example.com/api/v3/")
        assert lister.releases_url == "https://ghe.example.com/api/v3/repos/owner/repo/releases"


class TestAnonymousReleaseLister:
    """Single unauthenticated request."""

    @patch('repository.github.get_json')
    def test_lists_releases(self, mock_get_json):
        mock_get_json.return_value = (200, {}, [
            {"tag_name": "v0.3.0", "name": "v0.3.0", "prerelease": False},
            {"tag_name": "v0.3.1-rc1", "prerelease": True},
        ])

        releases = AnonymousReleaseLister().list_releases()

        mock_get_json.assert_called_once_with(RELEASES_URL)
        assert [r.tag_name for r in releases] == ["v0.3.0", "v0.3.1-rc1"]
        assert releases[1].prerelease is True

    @patch('repository.github.get_json')
    def test_invalid_json_is_reported_as_rate_limit(self, mock_get_json):
        mock_get_json.return_value = (200, {}, None)

        with pytest.raises(github.ReleaseListError) as excinfo:
            AnonymousReleaseLister().list_releases()

        assert "rate limit" in str(excinfo.value)

    @patch('repository.github.get_json')
    def test_rate_limited_response(self, mock_get_json):
        mock_get_json.return_value = (403, {}, {"message": "API rate limit exceeded for 1.2.3.4."})

        with pytest.raises(github.ReleaseListError) as excinfo:
            AnonymousReleaseLister().list_releases()

        assert "HTTP 403" in str(excinfo.value)
        assert "API rate limit exceeded for 1.2.3.4." in str(excinfo.value)

    @patch('repository.github.get_json')
    def test_non_list_payload(self, mock_get_json):
        mock_get_json.return_value = (200, {}, {"unexpected": True})

        with pytest.raises(github.ReleaseListError):
            AnonymousReleaseLister().list_releases()


class TestAuthenticatedReleaseLister:
    """Paginated listing with a token."""

    @patch('repository.github.get_json')
    def test_follows_link_header(self, mock_get_json):
        page2 = f"{RELEASES_URL}?per_page=100&page=2"
        mock_get_json.side_effect = [
            (200, {"Link": f'<{page2}>; rel="next", <{page2}>; rel="last"'},
             [{"tag_name": "v0.3.0"}]),
            (200, {"Link": f'<{RELEASES_URL}?per_page=100&page=1>; rel="prev"'},
             [{"tag_name": "v0.2.0"}]),
        ]

        releases = AuthenticatedReleaseLister("tok").list_releases()

        assert [r.tag_name for r in releases] == ["v0.3.0", "v0.2.0"]
        assert mock_get_json.call_count == 2
        first_url = mock_get_json.call_args_list[0].args[0]
        assert first_url == f"{RELEASES_URL}?per_page=100"
        assert mock_get_json.call_args_list[1].args[0] == page2

    @patch('repository.github.get_json')
    def test_sends_bearer_token(self, mock_get_json):
        mock_get_json.return_value = (200, {}, [])

        AuthenticatedReleaseLister("tok").list_releases()

        headers = mock_get_json.call_args.kwargs["headers"]
        assert headers["Authorization"] == "Bearer tok"

    @patch('repository.github.get_json')
    def test_error_status_raises(self, mock_get_json):
        mock_get_json.return_value = (401, {}, {"message": "Bad credentials"})

        with pytest.raises(github.ReleaseListError) as excinfo:
            AuthenticatedReleaseLister("bad").list_releases()

        assert "HTTP 401" in str(excinfo.value)


def test_descriptor_from_json_tolerates_missing_fields():
    release = ReleaseDescriptor.from_json({"tag_name": "v0.2.0"})
    assert release.tag_name == "v0.2.0"
    assert release.draft is False
    assert release.metadata == {"tag_name": "v0.2.0"}
