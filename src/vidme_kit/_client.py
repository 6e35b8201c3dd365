from __future__ import annotations

import functools
import logging
from datetime import timedelta
from typing import IO, Final, Sequence, TypeVar
from urllib.parse import quote

import requests

from ._auth import build_auth_url
from ._cancel import CancellationToken
from ._decode import decode_response
from ._errors import InvalidArgument, Unauthorized
from ._models import (Auth, AuthResponse, AuthType, Channel, ChannelResponse, ChannelsResponse, Comment,
                      CommentResponse, CommentsResponse, Geofence, GeofencesResponse, LocationOrderBy,
                      LocationRequest, Notification, NotificationsResponse, Response, Scope, SortDirection,
                      Tag, TagsResponse, User, UserResponse, UserTag, UserTagsResponse, Video,
                      VideoInfoResponse, VideoRequest, VideoRequestResponse, VideoResponse, VideosResponse,
                      VideoUploadResponse, Vote)
from ._transport import Transport
from ._util import (runtime_typecheck, add_if_present, to_query_string, _require, _string_to_tuple,
                    _to_base64, _validate_enum)

__all__ = ["VidMeClient", "BASE_URL"]

logger = logging.getLogger(__name__)

BASE_URL: Final[str] = "https://api.vid.me/"

T = TypeVar("T")

_seg = functools.partial(quote, safe="")


class VidMeClient:
    """Typed wrapper around the **vid.me REST API**.

    Every public method maps onto one remote endpoint. Arguments are
    validated locally, the request envelope is built (adding the session
    token, ``DEVICE`` and ``PLATFORM`` where required), sent as a
    form-encoded POST or a query-string GET, and the JSON reply is decoded
    into a model from :mod:`vidme_kit._models`.

    Args:
        device_id (str, optional):
            Device identifier sent as ``DEVICE`` with every request.
        platform (str, optional):
            Platform label sent as ``PLATFORM`` with every request.
        session (requests.Session, optional):
            HTTP session to reuse; one is created when omitted.
        base_url (str, optional):
            API root to use instead of ``"https://api.vid.me/"``.

    Attributes:
        transport (Transport):
            Single-attempt HTTP invoker wrapping the session.
        base_url (str):
            Root prefix for every endpoint path.

    Raises:
        vidme_kit.InvalidArgument:
            A required argument is missing; nothing is sent.
        vidme_kit.Unauthorized:
            The call needs a live token and none is set (or it expired).
        vidme_kit.RemoteError:
            The API answered with a non-2xx status.
        vidme_kit.DecodeError:
            The reply body is not the JSON shape the method expects.
        vidme_kit.Cancelled:
            The ``cancel`` token fired before the call completed.
        requests.RequestException:
            Propagated from the session if the network fails.

    Note:
        Authentication info and device identity are plain attributes on the
        instance. Calls that refresh the token from several threads at once
        are last-write-wins; no lock guards them.

    Examples:
         vm = VidMeClient("my-device", "python")
         vm.authenticate("user", "secret")
         videos = vm.get_user_videos(vm.authentication_info.user_id, limit=20)
         videos.to_dataframe()[["video_id", "title", "date_created"]]
    """

    def __init__(
            self,
            device_id: str = "",
            platform: str = "",
            *,
            session: requests.Session | None = None,
            base_url: str = BASE_URL,
    ):
        self.transport = Transport(session)
        self.base_url = base_url if base_url.endswith("/") else f"{base_url}/"
        self._auth: Auth | None = None
        self._device_id = device_id or ""
        self._platform = platform or ""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        self.transport.close()

    @property
    def session(self) -> requests.Session:
        return self.transport.session

    @property
    def authentication_info(self) -> Auth | None:
        return self._auth

    @property
    def device_id(self) -> str:
        return self._device_id

    @property
    def platform(self) -> str:
        return self._platform

    def set_device_name_and_platform(self, device_id: str, platform: str) -> None:
        self._device_id = device_id or ""
        self._platform = platform or ""

    def set_authentication(self, auth: Auth | None) -> None:
        """Replace the stored authentication info; ``None`` clears it."""
        self._auth = auth
        if auth is None:
            logger.debug("authentication info cleared")
        else:
            logger.debug("authentication info set for user %s (expires %s)", auth.user_id, auth.expires)

    # ------------------------------------------------------------------
    # Request pipeline
    # ------------------------------------------------------------------
    def _check_expiration_date_is_ok(self) -> None:
        if self._auth is None or self._auth.is_expired():
            raise Unauthorized("No valid AuthenticationInfo set")

    def _require_auth(self) -> None:
        if self._auth is None:
            raise Unauthorized("No AuthenticationInfo set")

    def _build_authenticated(self, token_required: bool = True) -> dict[str, str]:
        """Fresh envelope seeded with ``token``, ``DEVICE`` and ``PLATFORM``.

        With *token_required* the stored auth must exist and be unexpired,
        otherwise :class:`Unauthorized` is raised.
        """
        if token_required:
            self._check_expiration_date_is_ok()

        envelope: dict[str, str] = {}
        if self._auth is not None:
            add_if_present(envelope, "token", self._auth.token)
        add_if_present(envelope, "DEVICE", self._device_id)
        add_if_present(envelope, "PLATFORM", self._platform)
        return envelope

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _post(self, path: str, envelope: dict[str, str], result_type: type[T],
              cancel: CancellationToken | None = None) -> T:
        raw = self.transport.post(self._url(path), envelope, cancel)
        return decode_response(raw, result_type)

    def _get(self, path: str, result_type: type[T], envelope: dict[str, str] | None = None,
             cancel: CancellationToken | None = None) -> T:
        raw = self.transport.get(self._url(path), to_query_string(envelope or {}), cancel)
        return decode_response(raw, result_type)

    def _store_auth(self, response: AuthResponse) -> AuthResponse:
        if response.auth is not None:
            self.set_authentication(response.auth)
        return response

    @staticmethod
    def _add_video_request(envelope: dict[str, str], request: VideoRequest | None, *, upload: bool = False) -> None:
        if request is None:
            return
        if upload:
            add_if_present(envelope, "channel", request.channel_id)
            add_if_present(envelope, "size", request.size)
        add_if_present(envelope, "title", request.title)
        add_if_present(envelope, "description", request.description)
        if not upload:
            add_if_present(envelope, "thumbnail", _to_base64(request.thumbnail))
        add_if_present(envelope, "source", request.source)
        add_if_present(envelope, "latitude", request.latitude)
        add_if_present(envelope, "longitude", request.longitude)
        add_if_present(envelope, "place_id", request.place_id)
        add_if_present(envelope, "place_name", request.place_name)
        add_if_present(envelope, "private", request.private)
        if upload:
            add_if_present(envelope, "filename", request.file_name)

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------
    @runtime_typecheck
    def authenticate(self, username: str, password: str, *,
                     cancel: CancellationToken | None = None) -> AuthResponse:
        """Log in with username and password (``auth/create``).

        The OAuth flow (:meth:`get_auth_url` + :meth:`exchange_code_for_token`)
        is preferred; this remains for first-party apps. On success the
        returned auth info replaces the stored one.
        """
        _require("username", username)
        _require("password", password)

        envelope = {"username": username, "password": password}
        return self._store_auth(self._post("auth/create", envelope, AuthResponse, cancel))

    @runtime_typecheck
    def check_auth_token(self, *, cancel: CancellationToken | None = None) -> AuthResponse:
        """Validate the stored token with the server and refresh the stored auth."""
        self._require_auth()
        envelope = self._build_authenticated(False)
        return self._store_auth(self._post("auth/check", envelope, AuthResponse, cancel))

    @runtime_typecheck
    def delete_auth_token(self, *, cancel: CancellationToken | None = None) -> bool:
        self._require_auth()
        envelope = self._build_authenticated(False)
        return self._post("auth/delete", envelope, Response, cancel).status

    @staticmethod
    def get_auth_url(client_id: str, redirect_url: str | None, scopes: Sequence[Scope | str] | str,
                     auth_type: AuthType | str = AuthType.CODE) -> str:
        """See :func:`vidme_kit.build_auth_url`."""
        return build_auth_url(client_id, redirect_url, scopes, auth_type)

    @runtime_typecheck
    def exchange_code_for_token(self, code: str, client_id: str, client_secret: str, *,
                                cancel: CancellationToken | None = None) -> AuthResponse:
        """Trade an OAuth authorization *code* for a token (``oauth/token``).

        Args:
            code (str):
                **Required.** Code vid.me appended to the redirect URL.
            client_id (str):
                **Required.** Application client id.
            client_secret (str):
                **Required.** Application client secret.

        Returns:
            AuthResponse: also stored as :attr:`authentication_info`.
        """
        _require("code", code)
        _require("client_id", client_id, "Client ID cannot be null or empty")
        _require("client_secret", client_secret, "Client Secret cannot be null or empty")

        envelope = {
            "grant_type": "client_credentials",
            "client_id": client_id,
            "client_secret": client_secret,
            "code": code,
        }
        return self._store_auth(self._post("oauth/token", envelope, AuthResponse, cancel))

    # ------------------------------------------------------------------
    # Channels
    # ------------------------------------------------------------------
    @runtime_typecheck
    def get_channel(self, channel_id: str, *, cancel: CancellationToken | None = None) -> Channel | None:
        _require("channel_id", channel_id, "Channel ID cannot be null or empty")
        return self._get(f"channel/{_seg(channel_id)}", ChannelResponse, cancel=cancel).channel

    @runtime_typecheck
    def follow_channel(self, channel_id: str, *, cancel: CancellationToken | None = None) -> bool:
        _require("channel_id", channel_id, "Channel ID cannot be null or empty")
        envelope = self._build_authenticated()
        return self._post(f"channel/{_seg(channel_id)}/follow", envelope, Response, cancel).status

    @runtime_typecheck
    def unfollow_channel(self, channel_id: str, *, cancel: CancellationToken | None = None) -> bool:
        _require("channel_id", channel_id, "Channel ID cannot be null or empty")
        envelope = self._build_authenticated()
        return self._post(f"channel/{_seg(channel_id)}/unfollow", envelope, Response, cancel).status

    def _channel_videos(self, channel_id: str, feed: str, offset: int | None, limit: int | None,
                        cancel: CancellationToken | None) -> VideosResponse:
        _require("channel_id", channel_id, "Channel ID cannot be null or empty")
        options: dict[str, str] = {}
        add_if_present(options, "offset", offset)
        add_if_present(options, "limit", limit)
        return self._get(f"channel/{_seg(channel_id)}/{feed}", VideosResponse, options, cancel)

    @runtime_typecheck
    def get_channel_hot_videos(self, channel_id: str, *, offset: int | None = None, limit: int | None = None,
                               cancel: CancellationToken | None = None) -> VideosResponse:
        """Currently popular videos of a channel (``channel/{id}/hot``).

        Args:
            channel_id (str):
                **Required.** Channel to read.
            offset (int | None):
                Number of videos to skip.
            limit (int | None):
                Page size.

        Returns:
            VideosResponse: ``page`` describes the slice returned.
        """
        return self._channel_videos(channel_id, "hot", offset, limit, cancel)

    @runtime_typecheck
    def get_channel_new_videos(self, channel_id: str, *, offset: int | None = None, limit: int | None = None,
                               cancel: CancellationToken | None = None) -> VideosResponse:
        """Most recent videos of a channel (``channel/{id}/new``)."""
        return self._channel_videos(channel_id, "new", offset, limit, cancel)

    def get_channel_url(self, channel_id: str) -> str:
        _require("channel_id", channel_id, "Channel ID cannot be null or empty")
        return self._url(f"channel/{_seg(channel_id)}/url")

    @runtime_typecheck
    def list_channels(self, *, cancel: CancellationToken | None = None) -> list[Channel]:
        return self._get("channels", ChannelsResponse, cancel=cancel).channels

    @runtime_typecheck
    def list_suggested_channels(self, text: str | None = None, number: int | None = None, *,
                                cancel: CancellationToken | None = None) -> list[Channel]:
        options: dict[str, str] = {}
        add_if_present(options, "text", text)
        add_if_present(options, "number", number)
        return self._get("channels/suggest", ChannelsResponse, options, cancel).channels

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------
    @runtime_typecheck
    def create_comment(self, video_id: str, text: str, at: float | int | timedelta = 0,
                       in_reply_to: str | None = None, *,
                       cancel: CancellationToken | None = None) -> Comment | None:
        """Post a comment on a video (``comment/create``).

        Args:
            video_id (str):
                **Required.** Video to comment on.
            text (str):
                **Required.** Comment body; empty comments are rejected.
            at (float | int | timedelta):
                Position in the video the comment refers to, in seconds.
            in_reply_to (str | None):
                Parent comment id when replying.

        Raises:
            InvalidArgument: If *video_id* or *text* is empty.
            Unauthorized: If no live token is stored.
        """
        _require("video_id", video_id, "Video ID cannot be null or empty")
        _require("text", text, "Empty comments are not allowed")
        seconds = at.total_seconds() if isinstance(at, timedelta) else float(at or 0)

        envelope = self._build_authenticated()
        add_if_present(envelope, "video", video_id)
        add_if_present(envelope, "comment", in_reply_to)
        add_if_present(envelope, "body", text)
        add_if_present(envelope, "at", seconds)
        return self._post("comment/create", envelope, CommentResponse, cancel).comment

    @runtime_typecheck
    def delete_comment(self, comment_id: str, *, cancel: CancellationToken | None = None) -> bool:
        _require("comment_id", comment_id, "Comment ID cannot be null or empty")
        envelope = self._build_authenticated()
        return self._post(f"comment/{_seg(comment_id)}/delete", envelope, Response, cancel).status

    @runtime_typecheck
    def get_comment(self, comment_id: str, *, cancel: CancellationToken | None = None) -> Comment | None:
        _require("comment_id", comment_id, "Comment ID cannot be null or empty")
        return self._get(f"comment/{_seg(comment_id)}", CommentResponse, cancel=cancel).comment

    @runtime_typecheck
    def get_comments(self, video_id: str, direction: SortDirection | str | None = None, *,
                     cancel: CancellationToken | None = None) -> list[Comment]:
        """Comments on a video (``comments/list``), optionally sorted."""
        _require("video_id", video_id, "Video ID cannot be null or empty")
        options: dict[str, str] = {}
        add_if_present(options, "video", video_id)
        add_if_present(options, "direction", _validate_enum("direction", direction, SortDirection))
        return self._get("comments/list", CommentsResponse, options, cancel).comments

    def get_comment_url(self, comment_id: str) -> str:
        _require("comment_id", comment_id, "Comment ID cannot be null or empty")
        return self._url(f"comment/{_seg(comment_id)}/url")

    @runtime_typecheck
    def vote_comment(self, comment_id: str, vote: Vote | str, *,
                     cancel: CancellationToken | None = None) -> Comment | None:
        _require("comment_id", comment_id, "Comment ID cannot be null or empty")
        _require("vote", vote)
        envelope = self._build_authenticated()
        add_if_present(envelope, "value", _validate_enum("vote", vote, Vote))
        return self._post(f"comment/{_seg(comment_id)}/vote", envelope, CommentResponse, cancel).comment

    # ------------------------------------------------------------------
    # Geofences
    # ------------------------------------------------------------------
    @runtime_typecheck
    def get_geofences(self, *, cancel: CancellationToken | None = None) -> list[Geofence]:
        return self._get("geofences", GeofencesResponse, cancel=cancel).geofences

    @runtime_typecheck
    def suggest_geofences(self, text: str | None = None, *,
                          cancel: CancellationToken | None = None) -> list[Geofence]:
        options: dict[str, str] = {}
        add_if_present(options, "text", text)
        return self._get("geofences/suggest", GeofencesResponse, options, cancel).geofences

    # ------------------------------------------------------------------
    # Grab (import from other sites)
    # ------------------------------------------------------------------
    @runtime_typecheck
    def grab_external_video(self, url: str, title: str | None = None, description: str | None = None, *,
                            cancel: CancellationToken | None = None) -> Video | None:
        """Import a video hosted elsewhere (``grab``)."""
        _require("url", url, "External URL cannot be null or empty")
        envelope = self._build_authenticated(False)
        add_if_present(envelope, "url", url)
        add_if_present(envelope, "title", title)
        add_if_present(envelope, "description", description)
        return self._post("grab", envelope, VideoResponse, cancel).video

    @runtime_typecheck
    def grab_external_video_info(self, url: str, *,
                                 cancel: CancellationToken | None = None) -> VideoInfoResponse:
        """Preview what :meth:`grab_external_video` would import (``grab/preview``)."""
        _require("url", url, "External URL cannot be null or empty")
        options: dict[str, str] = {}
        add_if_present(options, "url", url)
        return self._get("grab/preview", VideoInfoResponse, options, cancel)

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------
    @runtime_typecheck
    def get_notifications(self, *, cancel: CancellationToken | None = None) -> list[Notification]:
        envelope = self._build_authenticated()
        return self._post("notifications", envelope, NotificationsResponse, cancel).notifications

    @runtime_typecheck
    def mark_notifications_as_read(self, notification_ids: str | Sequence[str], *,
                                   cancel: CancellationToken | None = None) -> bool:
        """Mark the given notifications as read.

        Args:
            notification_ids (str | Sequence[str]):
                **Required.** Ids as a list or a comma-separated string.
        """
        ids = _string_to_tuple(notification_ids) if notification_ids else ()
        _require("notification_ids", ids, "You must provide a list of notification IDs")
        envelope = self._build_authenticated()
        add_if_present(envelope, "notifications", ids)
        return self._post("notifications/mark-read", envelope, Response, cancel).status

    @runtime_typecheck
    def mark_all_notifications_as_read(self, *, cancel: CancellationToken | None = None) -> bool:
        envelope = self._build_authenticated()
        envelope["notifications"] = "all"
        return self._post("notifications/mark-read", envelope, Response, cancel).status

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------
    @runtime_typecheck
    def suggested_tags(self, text: str | None = None, *, cancel: CancellationToken | None = None) -> list[Tag]:
        envelope = self._build_authenticated(False)
        add_if_present(envelope, "text", text)
        return self._post("tags/suggest", envelope, TagsResponse, cancel).tags

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    def get_user_avatar(self, user_id: str) -> str:
        _require("user_id", user_id, "User ID cannot be null or empty")
        return self._url(f"user/{_seg(user_id)}/avatar")

    @runtime_typecheck
    def create_user(self, username: str, password: str, email: str | None = None, *,
                    cancel: CancellationToken | None = None) -> AuthResponse:
        """Register a new account (``user/create``) and store its auth info."""
        _require("username", username)
        _require("password", password)

        envelope = {"username": username, "password": password}
        add_if_present(envelope, "email", email)
        return self._store_auth(self._post("user/create", envelope, AuthResponse, cancel))

    @runtime_typecheck
    def get_user(self, user_id: str, *, cancel: CancellationToken | None = None) -> User | None:
        _require("user_id", user_id, "User ID cannot be null or empty")
        envelope = self._build_authenticated(False)
        return self._post(f"user/{_seg(user_id)}", envelope, UserResponse, cancel).user

    @runtime_typecheck
    def edit_user(
            self,
            user_id: str,
            *,
            username: str | None = None,
            current_password: str | None = None,
            new_password: str | None = None,
            email: str | None = None,
            bio: str | None = None,
            cancel: CancellationToken | None = None,
    ) -> AuthResponse:
        """Update account details (``user/edit``).

        Only the arguments you pass are sent. Changing the password requires
        *current_password*. The returned auth info replaces the stored one.

        Raises:
            InvalidArgument: If *user_id* is empty.
            Unauthorized: If no live token is stored.
        """
        _require("user_id", user_id, "User ID cannot be null or empty")
        envelope = self._build_authenticated()
        add_if_present(envelope, "username", username)
        add_if_present(envelope, "email", email)
        add_if_present(envelope, "password", new_password)
        add_if_present(envelope, "passwordCurrent", current_password)
        add_if_present(envelope, "bio", bio)
        return self._store_auth(self._post("user/edit", envelope, AuthResponse, cancel))

    @runtime_typecheck
    def follow_user(self, user_id: str, *, cancel: CancellationToken | None = None) -> bool:
        _require("user_id", user_id, "User ID cannot be null or empty")
        envelope = self._build_authenticated()
        return self._post(f"user/{_seg(user_id)}/follow", envelope, Response, cancel).status

    @runtime_typecheck
    def unfollow_user(self, user_id: str, *, cancel: CancellationToken | None = None) -> bool:
        _require("user_id", user_id, "User ID cannot be null or empty")
        envelope = self._build_authenticated()
        return self._post(f"user/{_seg(user_id)}/unfollow", envelope, Response, cancel).status

    @runtime_typecheck
    def get_user_followed_channels(self, user_id: str, *,
                                   cancel: CancellationToken | None = None) -> list[Channel]:
        _require("user_id", user_id, "User ID cannot be null or empty")
        envelope = self._build_authenticated()
        path = f"user/{_seg(user_id)}/follows-channels"
        return self._post(path, envelope, ChannelsResponse, cancel).channels

    @runtime_typecheck
    def remove_avatar(self, user_id: str, *, cancel: CancellationToken | None = None) -> bool:
        _require("user_id", user_id, "User ID cannot be null or empty")
        envelope = self._build_authenticated()
        return self._post(f"user/{_seg(user_id)}/avatar/remove", envelope, AuthResponse, cancel).status

    def update_avatar(self, user_id: str, image: bytes | IO[bytes], *,
                      cancel: CancellationToken | None = None) -> User | None:
        """Replace the user's avatar with *image* (raw bytes or a binary stream)."""
        _require("user_id", user_id, "User ID cannot be null or empty")
        filedata = _to_base64(image)
        _require("image", filedata, "Image data cannot be empty")

        envelope = self._build_authenticated()
        envelope["filedata"] = filedata
        return self._post(f"user/{_seg(user_id)}/avatar/update", envelope, UserResponse, cancel).user

    @runtime_typecheck
    def suggested_users(self, text: str | None = None, *, cancel: CancellationToken | None = None) -> list[UserTag]:
        envelope = self._build_authenticated(False)
        add_if_present(envelope, "text", text)
        return self._post("users/suggest", envelope, UserTagsResponse, cancel).user_tags

    @runtime_typecheck
    def get_user_videos(self, user_id: str, *, offset: int | None = None, limit: int | None = None,
                        cancel: CancellationToken | None = None) -> VideosResponse:
        _require("user_id", user_id, "User ID cannot be null or empty")
        envelope = self._build_authenticated(False)
        add_if_present(envelope, "user", user_id)
        add_if_present(envelope, "offset", offset)
        add_if_present(envelope, "limit", limit)
        return self._post("videos/list", envelope, VideosResponse, cancel)

    @runtime_typecheck
    def get_anonymous_videos(self, *, offset: int | None = None, limit: int | None = None,
                             cancel: CancellationToken | None = None) -> VideosResponse:
        envelope = self._build_authenticated(False)
        add_if_present(envelope, "offset", offset)
        add_if_present(envelope, "limit", limit)
        return self._post("videos/list", envelope, VideosResponse, cancel)

    # ------------------------------------------------------------------
    # Videos
    # ------------------------------------------------------------------
    @runtime_typecheck
    def delete_video(self, video_id: str, deletion_token: str | None = None, *,
                     cancel: CancellationToken | None = None) -> bool:
        """Delete a video (``video/{id}/delete``).

        Anonymous uploads are deleted with the *deletion_token* returned when
        they were requested; owned videos use the stored session token.
        """
        _require("video_id", video_id, "Video ID cannot be null or empty")
        envelope = self._build_authenticated(False)
        add_if_present(envelope, "deleteToken", deletion_token)
        return self._post(f"video/{_seg(video_id)}/delete", envelope, Response, cancel).status

    @runtime_typecheck
    def get_video(self, video_id: str, *, cancel: CancellationToken | None = None) -> Video | None:
        _require("video_id", video_id, "Video ID cannot be null or empty")
        options = self._build_authenticated(False)
        return self._get(f"video/{_seg(video_id)}", VideoResponse, options, cancel).video

    @runtime_typecheck
    def edit_video(self, video_id: str, request: VideoRequest | None = None, *,
                   cancel: CancellationToken | None = None) -> Video | None:
        _require("video_id", video_id, "Video ID cannot be null or empty")
        envelope = self._build_authenticated(False)
        self._add_video_request(envelope, request)
        return self._post(f"video/{_seg(video_id)}/edit", envelope, VideoResponse, cancel).video

    @runtime_typecheck
    def flag_video(self, video_id: str, flagged: bool, *,
                   cancel: CancellationToken | None = None) -> Video | None:
        _require("video_id", video_id, "Video ID cannot be null or empty")
        envelope = self._build_authenticated()
        envelope["flagged"] = "1" if flagged else "0"
        return self._post(f"video/{_seg(video_id)}/flag", envelope, VideoResponse, cancel).video

    @runtime_typecheck
    def request_video(self, request: VideoRequest | None = None, *,
                      cancel: CancellationToken | None = None) -> VideoRequestResponse:
        """Reserve an upload slot (``video/request``).

        Returns:
            VideoRequestResponse: ``code`` feeds :meth:`upload_video`;
            ``access_token`` deletes an anonymous upload later.
        """
        envelope = self._build_authenticated(False)
        self._add_video_request(envelope, request)
        return self._post("video/request", envelope, VideoRequestResponse, cancel)

    def get_video_thumbnail(self, video_id: str) -> str:
        _require("video_id", video_id, "Video ID cannot be null or empty")
        return self._url(f"video/{_seg(video_id)}/thumbnail")

    @runtime_typecheck
    def update_video_title(self, code: str, title: str, *, cancel: CancellationToken | None = None) -> bool:
        _require("code", code, "A video code must be provided")
        _require("title", title, "Title cannot be null or empty")
        _require("device_id", self._device_id, "You must have set a device id")

        envelope = self._build_authenticated()
        add_if_present(envelope, "code", code)
        add_if_present(envelope, "title", title)
        return self._post("video/update-title", envelope, Response, cancel).status

    def upload_video(
            self,
            video: bytes | IO[bytes],
            code: str | None = None,
            request: VideoRequest | None = None,
            *,
            cancel: CancellationToken | None = None,
    ) -> VideoUploadResponse:
        """Upload video data (``video/upload``).

        Args:
            video (bytes | IO[bytes]):
                **Required.** Raw video bytes or a binary stream; sent
                base64-encoded as ``filedata``.
            code (str | None):
                Upload code obtained from :meth:`request_video`.
            request (VideoRequest | None):
                Metadata for a one-shot upload without a prior request.
                **Exactly one** of *code* or *request* is expected; *code*
                wins when both are given.

        Returns:
            VideoUploadResponse

        Raises:
            InvalidArgument: If *video* is empty or neither *code* nor
                *request* is supplied.
        """
        filedata = _to_base64(video)
        _require("video", filedata, "Invalid video stream passed through")
        if not code and request is None:
            raise InvalidArgument("code", "A valid video code from request_video() or a VideoRequest is required")

        envelope = self._build_authenticated(False)
        if code:
            add_if_present(envelope, "code", code)
        else:
            self._add_video_request(envelope, request, upload=True)
        envelope["filedata"] = filedata
        return self._post("video/upload", envelope, VideoUploadResponse, cancel)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------
    @runtime_typecheck
    def location_search(self, request: LocationRequest, *,
                        cancel: CancellationToken | None = None) -> VideosResponse:
        """Videos recorded near a point or inside a geofence (``videos/location``).

        Args:
            request (LocationRequest):
                **Required.** Either ``geofence_id`` or ``latitude``/``longitude``
                must be set; the geofence wins when both are.

        Raises:
            InvalidArgument: If *request* is missing or has no location.
        """
        if request is None:
            raise InvalidArgument("request", "You must supply a valid request")
        if not request.geofence_id and (request.latitude is None or request.longitude is None):
            raise InvalidArgument("request", "You must supply either long/lat or a geofence ID")

        envelope = self._build_authenticated(False)
        if request.geofence_id:
            add_if_present(envelope, "geofence", request.geofence_id)
        else:
            add_if_present(envelope, "latitude", request.latitude)
            add_if_present(envelope, "longitude", request.longitude)
            add_if_present(envelope, "from", request.from_)
            add_if_present(envelope, "to", request.to)
            add_if_present(envelope, "distance", request.distance)

        add_if_present(envelope, "offset", request.offset)
        add_if_present(envelope, "limit", request.limit)
        add_if_present(envelope, "order", _validate_enum("order_by", request.order_by, LocationOrderBy))
        return self._post("videos/location", envelope, VideosResponse, cancel)

    @runtime_typecheck
    def search_videos(self, query: str, *, cancel: CancellationToken | None = None) -> VideosResponse:
        _require("query", query, "Search text cannot be null or empty")
        options = self._build_authenticated(False)
        add_if_present(options, "query", query)
        return self._get("videos/search", VideosResponse, options, cancel)
