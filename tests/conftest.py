import gzip
import io
import json
import pathlib
import zlib

import pytest
from requests.adapters import HTTPAdapter
from urllib3.response import HTTPResponse

from vidme_kit import VidMeClient

DATA_DIR = pathlib.Path(__file__).parent / "data"


class StubAdapter(HTTPAdapter):
    """Transport adapter that answers from a queue of canned responses.

    Every prepared request is recorded in ``sent`` so tests can inspect the
    URL, headers and form body exactly as ``requests`` would put them on the
    wire.
    """

    def __init__(self):
        super().__init__()
        self.queue = []
        self.sent = []

    def reply(self, body, status=200, headers=None, encoding=None):
        if not isinstance(body, (bytes, io.IOBase)):
            body = json.dumps(body).encode("utf-8")
        headers = {"Content-Type": "application/json", **(headers or {})}
        if encoding == "gzip":
            body = gzip.compress(body)
            headers["Content-Encoding"] = "gzip"
        elif encoding == "deflate":
            body = zlib.compress(body)
            headers["Content-Encoding"] = "deflate"
        self.queue.append((body, status, headers))

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        self.sent.append(request)
        body, status, headers = self.queue.pop(0)
        fp = body if hasattr(body, "read") else io.BytesIO(body)
        raw = HTTPResponse(body=fp, headers=headers, status=status, preload_content=False)
        return self.build_response(request, raw)


@pytest.fixture
def stub():
    return StubAdapter()


@pytest.fixture
def client(stub):
    vm = VidMeClient("test-device", "pytest")
    vm.session.mount("https://", stub)
    yield vm
    vm.close()


@pytest.fixture
def load_fixture():
    def _load(name):
        with open(DATA_DIR / name) as f:
            return json.load(f)
    return _load
