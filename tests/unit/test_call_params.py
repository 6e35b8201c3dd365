import base64
import io
from datetime import datetime, timedelta
from urllib.parse import parse_qsl, urlsplit

import pytest

from vidme_kit import (Auth, LocationOrderBy, LocationRequest, SortDirection, VideoRequest, VidMeClient, Vote)


@pytest.fixture
def authed(client):
    client.set_authentication(Auth(token="tok", expires=datetime.now() + timedelta(hours=1), user_id="77"))
    return client


def _form(request):
    return parse_qsl(request.body)


def _query(request):
    return parse_qsl(urlsplit(request.url).query)


def test_channel_hot_videos_builds_query(client, stub, load_fixture):
    stub.reply(load_fixture("videos.json"))

    resp = client.get_channel_hot_videos("42", offset=0, limit=10)

    sent = stub.sent[0]
    assert urlsplit(sent.url).path == "/channel/42/hot"
    assert _query(sent) == [("offset", "0"), ("limit", "10")]
    assert len(resp.videos) == 2


def test_channel_new_videos_without_paging_sends_no_query(client, stub):
    stub.reply({"status": True, "videos": []})

    client.get_channel_new_videos("42")

    assert stub.sent[0].url == "https://api.vid.me/channel/42/new"


def test_path_segments_are_escaped(client, stub):
    stub.reply({"status": True, "channel": {"channel_id": "a/b"}})

    channel = client.get_channel("a/b")

    assert urlsplit(stub.sent[0].url).path == "/channel/a%2Fb"
    assert channel.channel_id == "a/b"


def test_list_endpoint_missing_field_is_empty_list(client, stub):
    stub.reply({"status": True})
    assert client.suggest_geofences("harbour") == []
    assert _query(stub.sent[0]) == [("text", "harbour")]


def test_create_comment(authed, stub):
    stub.reply({"status": True, "comment": {"comment_id": "c1", "body": "Nice"}})

    comment = authed.create_comment("v1", "Nice", at=timedelta(seconds=12), in_reply_to="c0")

    assert comment.comment_id == "c1"
    assert _form(stub.sent[0]) == [
        ("token", "tok"),
        ("DEVICE", "test-device"),
        ("PLATFORM", "pytest"),
        ("video", "v1"),
        ("comment", "c0"),
        ("body", "Nice"),
        ("at", "12.0"),
    ]


def test_get_comments_sort_direction(client, stub):
    stub.reply({"status": True, "comments": [{"comment_id": "c1"}, {"comment_id": "c2"}]})

    comments = client.get_comments("v1", SortDirection.DESC)

    assert [c.comment_id for c in comments] == ["c1", "c2"]
    assert _query(stub.sent[0]) == [("video", "v1"), ("direction", "desc")]


def test_vote_comment_accepts_raw_value(authed, stub):
    stub.reply({"status": True, "comment": {"comment_id": "c1", "score": 3}})

    authed.vote_comment("c1", "-1")

    assert dict(_form(stub.sent[0]))["value"] == Vote.DOWN.value
    assert urlsplit(stub.sent[0].url).path == "/comment/c1/vote"


def test_mark_notifications_as_read(authed, stub):
    stub.reply({"status": True})
    stub.reply({"status": True})

    assert authed.mark_notifications_as_read("n1, n2") is True
    assert authed.mark_all_notifications_as_read() is True

    assert dict(_form(stub.sent[0]))["notifications"] == "n1,n2"
    assert dict(_form(stub.sent[1]))["notifications"] == "all"


def test_flag_video(authed, stub):
    stub.reply({"status": True, "video": {"video_id": "v1"}})

    authed.flag_video("v1", False)

    assert dict(_form(stub.sent[0]))["flagged"] == "0"


def test_edit_user_sends_only_given_fields(authed, stub, load_fixture):
    stub.reply(load_fixture("auth.json"))

    authed.edit_user("77", email="a@b.c", bio="")

    form = dict(_form(stub.sent[0]))
    assert form["email"] == "a@b.c"
    assert not {"username", "password", "passwordCurrent", "bio"} & form.keys()
    assert authed.authentication_info.token == "tok-123"


def test_update_avatar_from_stream(authed, stub):
    stub.reply({"status": True, "user": {"user_id": "77", "avatar_url": "https://x/a.png"}})

    user = authed.update_avatar("77", io.BytesIO(b"\x89PNG"))

    assert user.avatar_url == "https://x/a.png"
    assert dict(_form(stub.sent[0]))["filedata"] == base64.b64encode(b"\x89PNG").decode()


def test_upload_video_with_code(client, stub):
    stub.reply({"status": True, "code": "abc", "video": {"video_id": "v9"}})

    resp = client.upload_video(b"movie", code="abc")

    assert resp.video.video_id == "v9"
    form = dict(_form(stub.sent[0]))
    assert form["code"] == "abc"
    assert form["filedata"] == base64.b64encode(b"movie").decode()


def test_upload_video_with_request(client, stub):
    stub.reply({"status": True, "code": "abc"})

    client.upload_video(b"movie", request=VideoRequest(title="Gulls", private=True, file_name="g.mp4", size=5))

    form = _form(stub.sent[0])
    keys = [k for k, _ in form]
    assert keys == ["DEVICE", "PLATFORM", "size", "title", "private", "filename", "filedata"]
    assert dict(form)["private"] == "1"


def test_request_video_sends_thumbnail(client, stub):
    stub.reply({"status": True, "code": "abc", "access_token": "del-1"})

    resp = client.request_video(VideoRequest(title="Gulls", thumbnail=b"jpg", latitude=59.9))

    assert resp.access_token == "del-1"
    form = dict(_form(stub.sent[0]))
    assert form["thumbnail"] == base64.b64encode(b"jpg").decode()
    assert form["latitude"] == "59.9"


def test_location_search_prefers_geofence(client, stub):
    stub.reply({"status": True, "videos": []})

    client.location_search(LocationRequest(latitude=1.0, longitude=2.0, geofence_id="g1", limit=5,
                                           order_by=LocationOrderBy.DISTANCE))

    assert _form(stub.sent[0]) == [
        ("DEVICE", "test-device"),
        ("PLATFORM", "pytest"),
        ("geofence", "g1"),
        ("limit", "5"),
        ("order", "distance"),
    ]


def test_location_search_by_coordinates(client, stub):
    stub.reply({"status": True, "videos": []})

    client.location_search(LocationRequest(latitude=1.5, longitude=-2.25, distance=10, order_by="hot"))

    form = dict(_form(stub.sent[0]))
    assert (form["latitude"], form["longitude"], form["distance"], form["order"]) == ("1.5", "-2.25", "10", "hot")
    assert "geofence" not in form


def test_get_video_sends_identity_in_query(client, stub):
    stub.reply({"status": True, "video": {"video_id": "v1", "title": "Gulls"}})

    video = client.get_video("v1")

    assert video.title == "Gulls"
    assert _query(stub.sent[0]) == [("DEVICE", "test-device"), ("PLATFORM", "pytest")]


def test_url_helpers():
    vm = VidMeClient(base_url="https://api.example.test")
    assert vm.get_video_thumbnail("v1") == "https://api.example.test/video/v1/thumbnail"
    assert vm.get_channel_url("42") == "https://api.example.test/channel/42/url"
    assert vm.get_comment_url("c1") == "https://api.example.test/comment/c1/url"
    assert vm.get_user_avatar("77") == "https://api.example.test/user/77/avatar"


def test_context_manager_closes_session(mocker):
    with VidMeClient() as vm:
        close = mocker.spy(vm.session, "close")
    close.assert_called_once()
