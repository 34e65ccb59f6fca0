import pytest

from aggie_nexus.domain.route_guard import resolve_redirect


@pytest.mark.parametrize(
    ("path", "authenticated", "should_setup", "expected"),
    [
        ("/", False, False, None),
        ("/", True, True, None),
        ("/profile", False, False, "/"),
        ("/projects/new", False, False, "/"),
        ("/calendar", True, True, "/profile/setup"),
        ("/projects", True, False, None),
        ("/profile/setup", True, True, None),
        ("/auth/login", True, False, "/"),
        ("/auth/signup", False, False, None),
        ("/about", False, False, None),
        ("/about", True, True, None),
    ],
)
def test_resolve_redirect(path, authenticated, should_setup, expected):
    assert resolve_redirect(path, authenticated, should_setup) == expected


def test_password_reset_keeps_recovery_session_on_page():
    assert resolve_redirect("/auth/reset-password", True, on_password_reset=True) is None


def test_reset_page_redirects_outside_recovery():
    assert resolve_redirect("/auth/reset-password", True) == "/"
