"""Session cookies.

Learn: Tokens live only in HTTP-only cookies — browser JavaScript cannot
read them, which takes XSS token theft off the table. ``SameSite=lax``
blocks cross-site POSTs from carrying them, and ``Secure`` is on
everywhere except local development (plain http://localhost).
"""

from fastapi import Response

from wardrobe.config import Settings

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


def _cookie_options(config: Settings) -> dict:
    return {
        "httponly": True,
        "secure": config.cookie_secure,
        "samesite": "lax",
        "path": "/",
    }


def set_access_cookie(response: Response, token: str, config: Settings) -> None:
    response.set_cookie(
        ACCESS_COOKIE,
        token,
        max_age=config.access_token_expire_minutes * 60,
        **_cookie_options(config),
    )


def set_refresh_cookie(response: Response, token: str, config: Settings) -> None:
    response.set_cookie(
        REFRESH_COOKIE,
        token,
        max_age=config.refresh_token_expire_days * 24 * 60 * 60,
        **_cookie_options(config),
    )


def clear_session_cookies(response: Response, config: Settings) -> None:
    """Expire both cookies. Options must match the ones used to set them."""
    for name in (ACCESS_COOKIE, REFRESH_COOKIE):
        response.delete_cookie(name, **_cookie_options(config))
