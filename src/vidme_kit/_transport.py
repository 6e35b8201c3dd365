from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping
from urllib.parse import urlsplit

import requests

from ._cancel import CancellationToken
from ._errors import Cancelled

__all__ = ["RawResponse", "Transport"]

logger = logging.getLogger(__name__)

_HEADERS = {"Accept": "application/json", "Accept-Encoding": "gzip, deflate"}


@dataclass(frozen=True)
class RawResponse:
    """Status and fully-read, decompressed body of one HTTP exchange.

    ``content`` holds the body bytes exactly as received (after content
    decoding); ``encoding`` is the charset ``requests`` derived from the
    headers. Strict decoding is left to the response decoder.
    """

    status_code: int
    content: bytes | str
    url: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    encoding: str | None = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        """Body text for diagnostics; undecodable bytes become U+FFFD."""
        if isinstance(self.content, str):
            return self.content
        try:
            return self.content.decode(self.encoding or "utf-8", errors="replace")
        except LookupError:
            return self.content.decode("utf-8", errors="replace")


class Transport:
    """Single-attempt HTTP calls over a shared ``requests.Session``.

    The request itself runs on a daemon worker thread so that a
    :class:`CancellationToken` can abandon the connect and header wait; the
    body is then streamed on the caller's thread and ``iter_content`` undoes
    gzip/deflate content encoding. There is no retry and no timeout other
    than what the token enforces.
    """

    chunk_size = 8192

    def __init__(self, session: requests.Session | None = None):
        self.session = session if session is not None else requests.Session()

    def close(self) -> None:
        self.session.close()

    def post(self, url: str, envelope: Mapping[str, str], cancel: CancellationToken | None = None) -> RawResponse:
        return self._send("POST", url, cancel, data=list(envelope.items()))

    def get(self, url: str, query: str = "", cancel: CancellationToken | None = None) -> RawResponse:
        if query:
            url = f"{url}?{query}"
        return self._send("GET", url, cancel)

    def _send(self, method: str, url: str, cancel: CancellationToken | None, **kwargs) -> RawResponse:
        cancel = cancel if cancel is not None else CancellationToken()
        cancel.raise_if_cancelled()

        path = urlsplit(url).path
        try:
            resp = self._request(method, url, cancel, **kwargs)
        except requests.RequestException as exc:
            if cancel.cancelled:
                raise Cancelled(f"{method} {path} was cancelled") from exc
            raise
        if resp is None:
            logger.debug("%s %s abandoned while waiting for the server", method, path)
            raise Cancelled(f"{method} {path} was cancelled")

        try:
            with cancel.register(resp.close):
                body = b"".join(self._read_body(resp, cancel))
        except Cancelled:
            raise
        except Exception as exc:
            if cancel.cancelled:
                raise Cancelled(f"{method} {path} was cancelled") from exc
            raise
        finally:
            resp.close()

        cancel.raise_if_cancelled()
        logger.debug("%s %s -> %s (%d bytes)", method, path, resp.status_code, len(body))

        return RawResponse(
            status_code=resp.status_code,
            content=body,
            url=resp.url,
            headers=dict(resp.headers),
            encoding=resp.encoding,
        )

    def _request(self, method: str, url: str, cancel: CancellationToken, **kwargs) -> requests.Response | None:
        """Send the request and wait for the response headers.

        Returns ``None`` when *cancel* fires first. The worker then closes
        whatever response it eventually receives.
        """
        done = threading.Event()
        lock = threading.Lock()
        outcome: dict[str, Any] = {}

        def worker() -> None:
            try:
                resp = self.session.request(method, url, headers=_HEADERS, stream=True, **kwargs)
            except BaseException as exc:
                outcome["error"] = exc
            else:
                with lock:
                    abandoned = outcome.get("abandoned", False)
                    if not abandoned:
                        outcome["response"] = resp
                if abandoned:
                    resp.close()
            finally:
                done.set()

        threading.Thread(target=worker, name=f"vidme-{method.lower()}", daemon=True).start()
        with cancel.register(done.set):
            done.wait()

        with lock:
            if "response" in outcome:
                return outcome["response"]
            if "error" in outcome:
                raise outcome["error"]
            outcome["abandoned"] = True
        return None

    def _read_body(self, resp: requests.Response, cancel: CancellationToken) -> Iterator[bytes]:
        for chunk in resp.iter_content(chunk_size=self.chunk_size):
            cancel.raise_if_cancelled()
            yield chunk
