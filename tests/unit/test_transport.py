import io
import socket
import threading
import time

import pytest
import requests

from vidme_kit import Cancelled, CancellationToken, DecodeError, RemoteError, VideosResponse, VidMeClient
from vidme_kit._transport import Transport


@pytest.fixture
def silent_server():
    """Listening socket that accepts connections and never answers."""
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.bind(("127.0.0.1", 0))
    server.listen(5)
    yield f"http://127.0.0.1:{server.getsockname()[1]}/"
    server.close()


class CancelOnRead(io.BytesIO):
    """Body that fires the token the first time the client reads it."""

    def __init__(self, data, token):
        super().__init__(data)
        self.token = token

    def read(self, *args):
        self.token.cancel()
        return super().read(*args)


@pytest.mark.parametrize("encoding", [None, "gzip", "deflate"])
def test_compressed_bodies_are_decoded(client, stub, encoding):
    stub.reply({"status": True, "videos": [{"video_id": "1"}]}, encoding=encoding)

    resp = client.search_videos("cats")

    assert isinstance(resp, VideosResponse)
    assert resp.videos[0].video_id == "1"


def test_post_sends_form_encoded_body(client, stub):
    stub.reply({"status": True, "tags": []})

    client.suggested_tags("boats")

    sent = stub.sent[0]
    assert sent.method == "POST"
    assert sent.url == "https://api.vid.me/tags/suggest"
    assert sent.headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert sent.body == "DEVICE=test-device&PLATFORM=pytest&text=boats"


def test_get_appends_query_string(client, stub):
    stub.reply({"status": True, "videos": []})

    client.search_videos("cats & dogs")

    sent = stub.sent[0]
    assert sent.method == "GET"
    assert sent.url == "https://api.vid.me/videos/search?DEVICE=test-device&PLATFORM=pytest&query=cats%20%26%20dogs"
    assert sent.body is None


def test_get_without_options_has_no_query(client, stub):
    stub.reply({"status": True, "channels": []})

    assert client.list_channels() == []
    assert stub.sent[0].url == "https://api.vid.me/channels"


def test_remote_error_carries_status(client, stub):
    stub.reply({"status": False, "error": "Channel not found"}, status=404)

    with pytest.raises(RemoteError) as exc:
        client.get_channel("missing")

    assert exc.value.status_code == 404
    assert exc.value.error == "Channel not found"


def test_cancelled_before_send_never_hits_the_network(client, stub):
    token = CancellationToken()
    token.cancel()

    with pytest.raises(Cancelled):
        client.search_videos("cats", cancel=token)

    assert stub.sent == []


def test_cancel_during_body_read_is_cancelled_not_decoded(client, stub):
    token = CancellationToken()
    stub.reply(CancelOnRead(b'{"status": true, "videos": []}', token))

    with pytest.raises(Cancelled):
        client.search_videos("cats", cancel=token)

    assert len(stub.sent) == 1



def test_cancel_while_waiting_for_headers(silent_server):
    vm = VidMeClient(base_url=silent_server)
    vm.session.trust_env = False
    token = CancellationToken()
    token.cancel_after(0.2)

    started = time.monotonic()
    with pytest.raises(Cancelled):
        vm.list_channels(cancel=token)

    assert time.monotonic() - started < 5
    vm.close()


def test_response_arriving_after_cancel_is_closed(mocker):
    token = CancellationToken()
    session = requests.Session()
    release = threading.Event()
    closed = threading.Event()
    late = mocker.Mock(spec=requests.Response)
    late.close.side_effect = closed.set

    def slow(*args, **kwargs):
        release.wait(timeout=5)
        return late

    mocker.patch.object(session, "request", side_effect=slow)
    token.cancel_after(0.05)

    with pytest.raises(Cancelled):
        Transport(session).get("https://api.vid.me/channels", cancel=token)

    release.set()
    assert closed.wait(timeout=5)
    late.iter_content.assert_not_called()

def test_network_error_after_cancel_surfaces_as_cancelled(mocker):
    token = CancellationToken()
    session = requests.Session()

    def boom(*args, **kwargs):
        token.cancel()
        raise requests.ConnectionError("connection reset")

    mocker.patch.object(session, "request", side_effect=boom)

    with pytest.raises(Cancelled):
        Transport(session).get("https://api.vid.me/channels", cancel=token)


def test_network_error_without_cancel_propagates(mocker):
    session = requests.Session()
    mocker.patch.object(session, "request", side_effect=requests.ConnectionError("down"))

    with pytest.raises(requests.ConnectionError):
        Transport(session).post("https://api.vid.me/grab", {"url": "x"})


def test_cancellation_is_not_a_network_error():
    assert not issubclass(Cancelled, requests.RequestException)


def test_token_runs_callbacks_once():
    token = CancellationToken()
    calls = []

    with token.register(lambda: calls.append("closed")):
        token.cancel()
        token.cancel()

    assert calls == ["closed"]
    assert token.cancelled


def test_register_after_cancel_fires_immediately():
    token = CancellationToken()
    token.cancel()
    calls = []

    with token.register(lambda: calls.append("closed")):
        pass

    assert calls == ["closed"]


def test_cancel_after_fires_from_timer_thread():
    token = CancellationToken()
    fired = threading.Event()

    with token.register(fired.set):
        token.cancel_after(0.01)
        assert fired.wait(timeout=5)

    assert token.cancelled


def test_invalid_utf8_success_body_is_decode_error(client, stub):
    stub.reply(b'{"status": true, "videos": [{"title": "\xff\xfe"}]}')

    with pytest.raises(DecodeError):
        client.search_videos("cats")


def test_invalid_utf8_error_body_keeps_status(client, stub):
    stub.reply(b"\xff<h1>Bad Gateway</h1>", status=502)

    with pytest.raises(RemoteError) as exc:
        client.search_videos("cats")

    assert exc.value.status_code == 502
    assert exc.value.error == "\ufffd<h1>Bad Gateway</h1>"
    assert isinstance(exc.value.__cause__, DecodeError)
