from __future__ import annotations

"""vidme_kit: **shared exception hierarchy**.

Every module raises one of these so that callers can handle failures
uniformly:

```python
from vidme_kit import RemoteError, Unauthorized

try:
    vm.follow_channel("42")
except Unauthorized:
    vm.authenticate(username, password)
except RemoteError as e:
    logger.warning("vid.me refused (%s): %s", e.status_code, e.error)
```"""

from typing import Any

__all__ = [
    "VidMeError",
    "InvalidArgument",
    "Unauthorized",
    "RemoteError",
    "DecodeError",
    "Cancelled",
]

# ---------------------------------------------------------------------------
# Base & specialised exceptions
# ---------------------------------------------------------------------------


class VidMeError(Exception):
    """Base for *all* vidme_kit exceptions."""


# ── Client mistakes ---------------------------------------------------------
class InvalidArgument(VidMeError, ValueError):
    """A required parameter is missing or has a value the API does not accept.

    Raised before any request is sent.
    """

    def __init__(self, param: str, reason: str):
        super().__init__(f"{param}: {reason}")
        self.param = param
        self.reason = reason


# ── Auth -------------------------------------------------------------------
class Unauthorized(VidMeError):
    """No authentication info is set, or the token has expired.

    Raised before any request is sent.
    """

    status_code = 401


# ── Server side ------------------------------------------------------------
class RemoteError(VidMeError):
    """The API answered with a non-2xx status.

    ``error`` is the ``error`` member of the error envelope, or the raw body
    text when the envelope itself could not be decoded (the
    :class:`DecodeError` is then chained as ``__cause__``).
    """

    def __init__(self, status_code: int, error: Any, body: str = ""):
        super().__init__(f"vid.me API error {status_code}: {error}")
        self.status_code = status_code
        self.error = error
        self.body = body


class DecodeError(VidMeError, ValueError):
    """A response body is not valid JSON or does not have the expected shape."""


# ── Cancellation -----------------------------------------------------------
class Cancelled(VidMeError):
    """The call was aborted through its :class:`CancellationToken`."""
