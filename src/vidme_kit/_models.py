"""Typed models for vid.me JSON envelopes and request objects.

Each model is a dataclass decoded by :meth:`_Model.from_dict`. Field
metadata carries the JSON key (when it differs from the attribute name) and
an optional decoder for nested models, lists and timestamps. Unknown keys
are ignored and missing keys keep their defaults.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, Callable, IO, Mapping

import pandas as pd

from ._errors import DecodeError
from ._util import to_dataframe

__all__ = [
    "Scope",
    "AuthType",
    "SortDirection",
    "Vote",
    "LocationOrderBy",
    "decode_flexible_list",
    "Auth",
    "User",
    "UserTag",
    "Channel",
    "Comment",
    "Geofence",
    "Notification",
    "Tag",
    "Video",
    "ViewerVote",
    "Page",
    "Response",
    "ErrorResponse",
    "AuthResponse",
    "ChannelResponse",
    "ChannelsResponse",
    "CommentResponse",
    "CommentsResponse",
    "GeofencesResponse",
    "NotificationsResponse",
    "TagsResponse",
    "UserTagsResponse",
    "UserResponse",
    "VideoResponse",
    "VideosResponse",
    "VideoInfoResponse",
    "VideoRequestResponse",
    "VideoUploadResponse",
    "VideoRequest",
    "LocationRequest",
]


# ─────────────────────────────────────────────────────────────────────────────
# Enumerations
# ─────────────────────────────────────────────────────────────────────────────
class Scope(str, enum.Enum):
    BASIC = "basic"
    VIDEO_READ = "video_read"
    VIDEO_WRITE = "video_write"
    VIDEO_UPLOAD = "video_upload"
    VIDEO_VOTE = "video_vote"
    COMMENT_WRITE = "comment_write"
    COMMENT_VOTE = "comment_vote"
    ACCOUNT_READ = "account_read"
    ACCOUNT_WRITE = "account_write"
    CHANNEL_FOLLOW = "channel_follow"
    USER_FOLLOW = "user_follow"
    NOTIFICATIONS = "notifications"


class AuthType(str, enum.Enum):
    CODE = "code"
    TOKEN = "token"


class SortDirection(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"


class Vote(str, enum.Enum):
    UP = "1"
    NEUTRAL = "0"
    DOWN = "-1"


class LocationOrderBy(str, enum.Enum):
    DISTANCE = "distance"
    DATE_CREATED = "date_created"
    SCORE = "score"
    HOT = "hot"


# ─────────────────────────────────────────────────────────────────────────────
# Decoders
# ─────────────────────────────────────────────────────────────────────────────
def _parse_datetime(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError as exc:
        raise DecodeError(f"invalid timestamp {value!r}") from exc


def _nested(model: type[_Model]) -> Callable[[Any], Any]:
    def decode(value: Any):
        return None if value is None else model.from_dict(value)
    return decode


def _list_of(model: type[_Model]) -> Callable[[Any], list]:
    def decode(value: Any) -> list:
        if value is None:
            return []
        if not isinstance(value, list):
            raise DecodeError(f"expected a JSON array of {model.__name__}, got {type(value).__name__}")
        return [model.from_dict(v) for v in value]
    return decode


def decode_flexible_list(value: Any, model: type[_Model]) -> list:
    """Normalise a field the API sends as an object *or* an array of objects.

    ``null``/absent gives ``[]``, an array keeps its order, a single object
    becomes a one-element list. Any other shape raises :class:`DecodeError`.
    """
    if value is None:
        return []
    if isinstance(value, list):
        return [model.from_dict(v) for v in value]
    if isinstance(value, Mapping):
        return [model.from_dict(value)]
    raise DecodeError(
        f"expected a JSON object or array of {model.__name__}, got {type(value).__name__}"
    )


def _flexible(model: type[_Model]) -> Callable[[Any], list]:
    def decode(value: Any) -> list:
        return decode_flexible_list(value, model)
    return decode


def _json(key: str | None = None, decode: Callable[[Any], Any] | None = None, default: Any = None):
    return field(default=default, metadata={"json": key, "decode": decode})


def _many(decode: Callable[[Any], list], key: str | None = None):
    return field(default_factory=list, metadata={"json": key, "decode": decode})


class _Model:
    """Mixin giving dataclasses a metadata-driven ``from_dict``."""

    @classmethod
    def from_dict(cls, data: Any):
        if not isinstance(data, Mapping):
            raise DecodeError(f"{cls.__name__} expects a JSON object, got {type(data).__name__}")
        kwargs = {}
        for f in fields(cls):
            key = f.metadata.get("json") or f.name
            if key not in data:
                continue
            decode = f.metadata.get("decode")
            kwargs[f.name] = decode(data[key]) if decode is not None else data[key]
        return cls(**kwargs)


# ─────────────────────────────────────────────────────────────────────────────
# Entities
# ─────────────────────────────────────────────────────────────────────────────
@dataclass
class User(_Model):
    user_id: str | None = None
    username: str | None = None
    full_url: str | None = None
    avatar: str | None = None
    avatar_url: str | None = None
    cover: str | None = None
    cover_url: str | None = None
    displayname: str | None = None
    bio: str | None = None
    follower_count: int | None = None
    likes_count: int | None = None
    video_count: int | None = None
    video_views: int | None = None
    date_created: datetime | None = _json(decode=_parse_datetime)


@dataclass
class Auth(_Model):
    """Authentication info: an opaque token and its expiry."""

    token: str | None = None
    expires: datetime | None = _json(decode=_parse_datetime)
    user_id: str | None = None
    user: User | None = _json(decode=_nested(User))

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires is None:
            return False
        if now is None:
            now = datetime.now(self.expires.tzinfo)
        return self.expires < now


@dataclass
class UserTag(_Model):
    user_id: str | None = None
    username: str | None = None
    avatar_url: str | None = None
    label: str | None = None


@dataclass
class Channel(_Model):
    channel_id: str | None = None
    url: str | None = None
    full_url: str | None = None
    title: str | None = None
    description: str | None = None
    avatar_url: str | None = None
    cover_url: str | None = None
    is_default: bool | None = None
    nsfw: bool | None = None
    follower_count: int | None = None
    video_count: int | None = None
    date_created: datetime | None = _json(decode=_parse_datetime)


@dataclass
class Video(_Model):
    video_id: str | None = None
    url: str | None = None
    full_url: str | None = None
    embed_url: str | None = None
    user_id: str | None = None
    complete: str | None = None
    complete_url: str | None = None
    state: str | None = None
    title: str | None = None
    description: str | None = None
    duration: float | None = None
    height: int | None = None
    width: int | None = None
    date_created: datetime | None = _json(decode=_parse_datetime)
    date_stored: datetime | None = _json(decode=_parse_datetime)
    date_completed: datetime | None = _json(decode=_parse_datetime)
    comment_count: int | None = None
    view_count: int | None = None
    version: int | None = None
    nsfw: bool | None = None
    thumbnail: str | None = None
    thumbnail_url: str | None = None
    thumbnail_gif: str | None = None
    thumbnail_gif_url: str | None = None
    storyboard: str | None = None
    score: int | None = None
    likes_count: int | None = None
    channel_id: str | None = None
    source: str | None = None
    private: bool | None = None
    latitude: float | None = None
    longitude: float | None = None
    place_id: Any = None
    place_name: Any = None
    colors: str | None = None
    clip_url: str | None = None
    user: User | None = _json(decode=_nested(User))


@dataclass
class Comment(_Model):
    comment_id: str | None = None
    video_id: str | None = None
    user_id: str | None = None
    parent_comment_id: str | None = None
    body: str | None = None
    time_of_video: float | None = None
    score: int | None = None
    comment_count: int | None = None
    date_created: datetime | None = _json(decode=_parse_datetime)
    user: User | None = _json(decode=_nested(User))


@dataclass
class Geofence(_Model):
    geofence_id: str | None = None
    name: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    radius: float | None = None
    video_count: int | None = None


@dataclass
class Notification(_Model):
    notification_id: str | None = None
    type: str | None = None
    read: bool | None = None
    text: str | None = None
    date_created: datetime | None = _json(decode=_parse_datetime)
    user: User | None = _json(decode=_nested(User))
    video: Video | None = _json(decode=_nested(Video))
    comment: Comment | None = _json(decode=_nested(Comment))


@dataclass
class Tag(_Model):
    tag_id: str | None = None
    text: str | None = None
    label: str | None = None
    use_count: str | None = None


@dataclass
class ViewerVote(_Model):
    video_id: str | None = None
    value: int | None = None


@dataclass
class Page(_Model):
    total: int | None = None
    offset: int | None = None
    limit: int | None = None
    current_marker: Any = _json("currentMarker")


# ─────────────────────────────────────────────────────────────────────────────
# Envelopes
# ─────────────────────────────────────────────────────────────────────────────
@dataclass
class Response(_Model):
    status: bool = False


@dataclass
class ErrorResponse(Response):
    error: Any = None


@dataclass
class AuthResponse(Response):
    auth: Auth | None = _json(decode=_nested(Auth))
    user: User | None = _json(decode=_nested(User))


@dataclass
class ChannelResponse(Response):
    channel: Channel | None = _json(decode=_nested(Channel))


@dataclass
class ChannelsResponse(Response):
    channels: list[Channel] = _many(_list_of(Channel))


@dataclass
class CommentResponse(Response):
    comment: Comment | None = _json(decode=_nested(Comment))


@dataclass
class CommentsResponse(Response):
    comments: list[Comment] = _many(_list_of(Comment))


@dataclass
class GeofencesResponse(Response):
    geofences: list[Geofence] = _many(_list_of(Geofence))


@dataclass
class NotificationsResponse(Response):
    notifications: list[Notification] = _many(_list_of(Notification))


@dataclass
class TagsResponse(Response):
    tags: list[Tag] = _many(_list_of(Tag))


@dataclass
class UserTagsResponse(Response):
    user_tags: list[UserTag] = _many(_list_of(UserTag), "users")


@dataclass
class UserResponse(Response):
    user: User | None = _json(decode=_nested(User))


@dataclass
class VideoResponse(Response):
    video: Video | None = _json(decode=_nested(Video))


@dataclass
class VideosResponse(Response):
    page: Page | None = _json(decode=_nested(Page))
    parameters: dict | None = None
    videos: list[Video] = _many(_list_of(Video))
    viewer_votes: list[ViewerVote] = _many(_flexible(ViewerVote), "viewerVotes")

    def to_dataframe(self) -> pd.DataFrame:
        return to_dataframe(self.videos)


@dataclass
class VideoInfoResponse(Response):
    url: str | None = None
    title: str | None = None
    description: str | None = None
    thumbnail: str | None = None
    duration: float | None = None
    site: str | None = None


@dataclass
class VideoRequestResponse(Response):
    code: str | None = None
    access_token: str | None = None
    url: str | None = None
    video: Video | None = _json(decode=_nested(Video))


@dataclass
class VideoUploadResponse(Response):
    code: str | None = None
    url: str | None = None
    video: Video | None = _json(decode=_nested(Video))


# ─────────────────────────────────────────────────────────────────────────────
# Request objects
# ─────────────────────────────────────────────────────────────────────────────
@dataclass
class VideoRequest:
    """Metadata sent with ``request_video``, ``edit_video`` and ``upload_video``.

    ``thumbnail`` may be raw bytes or a readable binary stream; it is sent
    base64-encoded.
    """

    title: str | None = None
    description: str | None = None
    thumbnail: bytes | IO[bytes] | None = None
    source: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    place_id: str | None = None
    place_name: str | None = None
    private: bool | None = None
    channel_id: str | None = None
    size: int | None = None
    file_name: str | None = None


@dataclass
class LocationRequest:
    """Parameters for ``location_search``.

    Supply either ``geofence_id`` or ``latitude``/``longitude``; a geofence
    wins when both are given.
    """

    latitude: float | None = None
    longitude: float | None = None
    geofence_id: str | None = None
    from_: datetime | None = None
    to: datetime | None = None
    distance: float | None = None
    offset: int | None = None
    limit: int | None = None
    order_by: LocationOrderBy | str | None = None
