"""Page redirect rules for the web client."""

PROTECTED_ROUTES = (
    "/profile",
    "/projects/new",
    "/projects/edit",
    "/bookmarks",
    "/users",
    "/projects",
    "/calendar",
)

AUTH_ROUTES = (
    "/auth/login",
    "/auth/signup",
    "/auth/forgot-password",
    "/auth/reset-password",
)

PUBLIC_ROUTES = ("/",)

LANDING_PATH = "/"
PROFILE_SETUP_PATH = "/profile/setup"
RESET_PASSWORD_PATH = "/auth/reset-password"


def _matches(path: str, prefixes: tuple[str, ...]) -> bool:
    return any(path.startswith(prefix) for prefix in prefixes)


def resolve_redirect(
    path: str,
    is_authenticated: bool,
    should_setup_profile: bool = False,
    on_password_reset: bool = False,
) -> str | None:
    """
    Return the path to redirect to, or None to render `path`.

    `on_password_reset` is set while a recovery session is finishing a
    password reset; it keeps that user on the reset page.
    """
    if path in PUBLIC_ROUTES:
        return None

    if on_password_reset and path.startswith(RESET_PASSWORD_PATH):
        return None

    if _matches(path, PROTECTED_ROUTES):
        if not is_authenticated:
            return LANDING_PATH
        if should_setup_profile and not path.startswith(PROFILE_SETUP_PATH):
            return PROFILE_SETUP_PATH
        return None

    if _matches(path, AUTH_ROUTES) and is_authenticated:
        return LANDING_PATH

    return None
