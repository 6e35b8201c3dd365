from __future__ import annotations

from typing import Final, Sequence

from oauthlib.oauth2 import MobileApplicationClient, WebApplicationClient

from ._errors import InvalidArgument
from ._models import AuthType, Scope
from ._util import _require, _string_to_tuple, _validate_enum

__all__ = [
    "AUTHORIZE_URL",
    "build_auth_url",
]

AUTHORIZE_URL: Final[str] = "https://vid.me/oauth/authorize"

_OAUTH_CLIENTS = {
    AuthType.CODE: WebApplicationClient,
    AuthType.TOKEN: MobileApplicationClient,
}


def build_auth_url(
    client_id: str,
    redirect_url: str | None,
    scopes: Sequence[Scope | str] | str,
    auth_type: AuthType | str = AuthType.CODE,
) -> str:
    """Return the vid.me OAuth authorization URL for a browser redirect.

    Args:
        client_id (str):
            **Required.** Application client id.
        redirect_url (str | None):
            Where vid.me sends the user back; URL-encoded into ``redirect_uri``.
        scopes (Sequence[Scope | str] | str):
            **Required.** At least one scope, or a comma-separated string;
            sent space-separated.
        auth_type (AuthType | str):
            ``AuthType.CODE`` (default) or ``AuthType.TOKEN``; becomes the
            lower-cased ``response_type``.

    Raises:
        InvalidArgument: If *client_id* is empty, *scopes* is empty, or a
            scope / auth type is not recognised.
    """
    _require("client_id", client_id, "Client ID cannot be null or empty")
    scopes = _string_to_tuple(scopes) if scopes else ()
    if not scopes:
        raise InvalidArgument("scopes", "Scopes must be provided")

    scope_values = [_validate_enum("scopes", s, Scope).value for s in scopes]
    kind = _validate_enum("auth_type", (auth_type or AuthType.CODE).lower(), AuthType)

    client = _OAUTH_CLIENTS[kind](client_id)
    return client.prepare_request_uri(
        AUTHORIZE_URL,
        redirect_uri=redirect_url or None,
        scope=scope_values,
    )
