"""
vidme_kit – typed client for the vid.me REST API.

Import the public surface like so:

    from vidme_kit import VidMeClient, CancellationToken

Everything else (modules whose names start with “_”) is internal and
subject to change without notice.
"""

import logging as _logging
from importlib import metadata as _metadata

# ─────────────────────────────────────────────────────────────────────────────
# Re-export PUBLIC objects from the internal implementation modules
# ─────────────────────────────────────────────────────────────────────────────
from ._auth import build_auth_url, AUTHORIZE_URL
from ._cancel import CancellationToken
from ._client import VidMeClient, BASE_URL
from ._decode import raise_for_status
from ._errors import (VidMeError, InvalidArgument, Unauthorized, RemoteError,
                      DecodeError, Cancelled)
from ._models import (Scope, AuthType, SortDirection, Vote, LocationOrderBy,
                      Auth, User, UserTag, Channel, Comment, Geofence, Notification,
                      Tag, Video, ViewerVote, Page, Response, ErrorResponse,
                      AuthResponse, ChannelResponse, ChannelsResponse,
                      CommentResponse, CommentsResponse, GeofencesResponse,
                      NotificationsResponse, TagsResponse, UserTagsResponse,
                      UserResponse, VideoResponse, VideosResponse, VideoInfoResponse,
                      VideoRequestResponse, VideoUploadResponse,
                      VideoRequest, LocationRequest, decode_flexible_list)
from ._util import to_dataframe

__all__: list[str] = [
    "VidMeClient",
    "BASE_URL",
    "AUTHORIZE_URL",
    "build_auth_url",
    "CancellationToken",
    "raise_for_status",
    "to_dataframe",
    "decode_flexible_list",
    "VidMeError",
    "InvalidArgument",
    "Unauthorized",
    "RemoteError",
    "DecodeError",
    "Cancelled",
    "Scope",
    "AuthType",
    "SortDirection",
    "Vote",
    "LocationOrderBy",
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

_logging.getLogger(__name__).addHandler(_logging.NullHandler())

# ─────────────────────────────────────────────────────────────────────────────
# Version handling
# ─────────────────────────────────────────────────────────────────────────────
try:
    # Normal installed case – read version from package metadata
    __version__: str = _metadata.version("vidme-kit")
except _metadata.PackageNotFoundError:
    # Running from a source checkout – fall back to __about__.py
    from .__about__ import __version__  # type: ignore[attr-defined]

# Clean up internal symbols so they don’t leak into dir(vidme_kit)
del _metadata, _logging
