from __future__ import annotations

import base64
import enum
import functools
import inspect
import re
import types
from dataclasses import asdict, is_dataclass
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Sequence, Union, get_args, get_origin, get_type_hints, MutableMapping
from urllib.parse import quote

import pandas as pd

from collections.abc import Sequence as ABCSequence

from ._errors import InvalidArgument

__all__ = [
    "_string_to_tuple",
    "_raise_invalid_argument",
    "_require",
    "runtime_typecheck",
    "_validate_enum",
    "_is_present",
    "_stringify",
    "_to_base64",
    "add_if_present",
    "to_query_string",
    "to_dataframe",
]


def _string_to_tuple(value: str | Iterable[str]) -> tuple[str, ...]:
    if isinstance(value, str):
        # split on commas, trim whitespace, drop empties
        return tuple(s.strip() for s in value.split(",") if s.strip())
    return tuple(value)


def _raise_invalid_argument(param: str, value: object, allowed: Iterable[str]) -> None:
    allowed_set = sorted(set(allowed))
    bullets = "\n  • " + "\n  • ".join(allowed_set)
    raise InvalidArgument(param, f"{value!r} is invalid. Allowed values:{bullets}")


def _require(param: str, value: object, reason: str | None = None) -> None:
    """Raise :class:`InvalidArgument` when *value* is ``None`` or empty."""
    if not _is_present(value):
        raise InvalidArgument(param, reason or f"{param} cannot be null or empty")


def _is_instance(val: Any, anno: Any) -> bool:

    origin = get_origin(anno)

    if origin is ABCSequence and isinstance(val, (str, bytes)):
        return False

    if origin is None:
        return anno is Any or isinstance(val, anno)

    if origin is Union or origin is types.UnionType:
        return any(_is_instance(val, arg) for arg in get_args(anno))

    if origin is Sequence and get_args(anno) == (str,):
        return isinstance(val, Sequence) and all(isinstance(v, str) for v in val)

    return isinstance(val, origin)


def runtime_typecheck(fn):
    """Reject wrongly-typed arguments with ``TypeError`` before *fn* runs.

    ``None`` is let through: required-argument checks inside *fn* turn a
    missing value into :class:`InvalidArgument`.
    """

    sig   = inspect.signature(fn)
    hints = get_type_hints(fn)

    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        bound = sig.bind_partial(*args, **kwargs)
        for name, value in bound.arguments.items():
            anno = hints.get(name)
            if value is None or anno is None:
                continue
            if not _is_instance(value, anno):
                raise TypeError(
                    f"{fn.__name__}() argument '{name}' "
                    f"expects {anno}, got {type(value).__name__}"
                )
        return fn(*args, **kwargs)

    return wrapper


def _validate_enum(param_name: str, value: str | enum.Enum | None, enum_cls: type[enum.Enum]):
    """Coerce *value* to a member of *enum_cls*; accepts members or raw values."""
    if value is None or isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        _raise_invalid_argument(param_name, value, (m.value for m in enum_cls))


def _is_present(value: object) -> bool:
    if value is None:
        return False
    if isinstance(value, (str, bytes, Sequence, set, frozenset, dict)):
        return len(value) > 0
    return True


def _to_base64(data) -> str | None:
    """Base64-encode *data* (``bytes`` or a readable binary stream)."""
    if data is None:
        return None
    if hasattr(data, "read"):
        data = data.read()
    if not data:
        return None
    return base64.b64encode(data).decode("ascii")


def _stringify(value: object) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, enum.Enum):
        return str(value.value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, timedelta):
        return str(value.total_seconds())
    if isinstance(value, (bytes, bytearray)):
        return _to_base64(bytes(value)) or ""
    if isinstance(value, (list, tuple, set, frozenset)):
        return ",".join(_stringify(v) for v in value)
    return str(value)


def add_if_present(envelope: MutableMapping[str, str], key: str, value: object) -> None:
    """Set ``envelope[key]`` to the string form of *value* unless it is absent.

    ``None``, ``""`` and empty collections are absent; the key is then left
    out of the envelope entirely.
    """
    if _is_present(value):
        envelope[key] = _stringify(value)


def to_query_string(envelope: MutableMapping[str, str]) -> str:
    """``key=value`` pairs joined with ``&``, in insertion order, URL-encoded."""
    return "&".join(f"{quote(str(k), safe='')}={quote(str(v), safe='')}" for k, v in envelope.items())


def to_dataframe(items: Sequence[Any]) -> pd.DataFrame:
    """Flatten a list of decoded models (or plain mappings) into a DataFrame.

    Nested models become dotted columns (``user.username``); ``date_*``
    columns are converted to timezone-aware datetimes.
    """
    if not items:
        return pd.DataFrame()

    records = [asdict(i) if is_dataclass(i) else dict(i) for i in items]
    df = pd.json_normalize(records, sep=".")

    dt_like = [c for c in df.columns if re.search(r"(^|\.)date_", c)]
    for c in dt_like:
        df[c] = pd.to_datetime(df[c], utc=True)

    return df
