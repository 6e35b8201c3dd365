from datetime import datetime, timedelta
from urllib.parse import parse_qsl

import pytest

from vidme_kit import Auth, SortDirection, VidMeClient
from vidme_kit._util import add_if_present, to_query_string


@pytest.mark.parametrize("value", [None, "", [], (), {}])
def test_absent_values_are_left_out(value):
    envelope = {}
    add_if_present(envelope, "title", value)
    assert "title" not in envelope


@pytest.mark.parametrize(
    "value, expected",
    [
        ("Gulls", "Gulls"),
        (0, "0"),
        (12, "12"),
        (1.5, "1.5"),
        (True, "1"),
        (False, "0"),
        (["a", "b", "c"], "a,b,c"),
        (SortDirection.DESC, "desc"),
        (timedelta(minutes=1), "60.0"),
        (b"hi", "aGk="),
    ],
)
def test_present_values_are_stringified_once(value, expected):
    envelope = {}
    add_if_present(envelope, "key", value)
    assert envelope == {"key": expected}


def test_query_string_keeps_insertion_order_and_encodes():
    envelope = {}
    add_if_present(envelope, "query", "cats & dogs")
    add_if_present(envelope, "b", "1")
    add_if_present(envelope, "a", "x/y")

    assert to_query_string(envelope) == "query=cats%20%26%20dogs&b=1&a=x%2Fy"


def test_query_string_of_empty_envelope_is_empty():
    assert to_query_string({}) == ""


def test_envelope_seeded_with_token_device_and_platform():
    vm = VidMeClient("dev-1", "python")
    vm.set_authentication(Auth(token="tok", expires=datetime.now() + timedelta(hours=1)))

    assert vm._build_authenticated() == {"token": "tok", "DEVICE": "dev-1", "PLATFORM": "python"}


def test_envelope_omits_empty_identity_fields():
    vm = VidMeClient()
    assert vm._build_authenticated(False) == {}

    vm.set_device_name_and_platform("dev-2", "")
    assert vm._build_authenticated(False) == {"DEVICE": "dev-2"}


def test_token_attached_when_present_even_if_not_required():
    vm = VidMeClient()
    vm.set_authentication(Auth(token="tok", expires=datetime.now() + timedelta(hours=1)))

    assert vm._build_authenticated(False) == {"token": "tok"}


def test_cleared_auth_is_no_longer_attached():
    vm = VidMeClient()
    vm.set_authentication(Auth(token="tok"))
    vm.set_authentication(None)

    assert "token" not in vm._build_authenticated(False)


def test_optional_arguments_never_reach_the_wire(client, stub):
    stub.reply({"status": True, "videos": []})

    client.get_anonymous_videos(limit=5)

    form = parse_qsl(stub.sent[0].body)
    assert form == [("DEVICE", "test-device"), ("PLATFORM", "pytest"), ("limit", "5")]
