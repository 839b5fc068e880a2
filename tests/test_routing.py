from __future__ import annotations

import pytest

from app.routing import check_access, normalize_path


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/birdroom/temp", "/temp"),
        ("/birdroom/op/add", "/op/add"),
        ("/birdroom", "/"),
        ("/temp", "/temp"),
        ("/rooms/birdroom", "/rooms/birdroom"),
    ],
)
def test_normalize_path_strips_prefix(path: str, expected: str) -> None:
    assert normalize_path(path, "/birdroom") == expected


def test_normalize_path_without_prefix_is_identity() -> None:
    assert normalize_path("/birdroom/temp", None) == "/birdroom/temp"


def test_unprotected_paths_pass_without_key() -> None:
    assert check_access("/temp", "GET", None, "secret") is None
    assert check_access("/rooms", "DELETE", None, "secret") is None


def test_protected_path_with_key_and_post_passes() -> None:
    assert check_access("/op/add", "POST", "secret", "secret") is None


@pytest.mark.parametrize("supplied", [None, "", "Secret", "secret "])
def test_protected_path_rejects_bad_key(supplied) -> None:
    response = check_access("/op/add", "POST", supplied, "secret")

    assert response is not None
    assert response.status_code == 401
    assert response.body == b"Unauthorized"


def test_secret_is_checked_before_method() -> None:
    unauthorized = check_access("/op/add", "GET", None, "secret")
    wrong_method = check_access("/op/add", "GET", "secret", "secret")

    assert unauthorized is not None and unauthorized.status_code == 401
    assert wrong_method is not None and wrong_method.status_code == 405


def test_empty_configured_secret_never_matches() -> None:
    response = check_access("/op/add", "POST", "", "")

    assert response is not None
    assert response.status_code == 401
