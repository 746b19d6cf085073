"""
Session model.

Session data and session bookkeeping are kept in two separate objects:
``Session`` wraps a plain dict of user data, ``SessionMetadata`` records
whether the session is new and what it looked like when it was restored.
Only the dict is ever serialized.
"""

import copy
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Mapping, MutableMapping, Optional

from session_cookie.core.codec import SessionEncodeError, serialize


class SessionAssignmentError(TypeError):
    """Raised when a session is replaced with something other than a mapping or None"""
    pass


@dataclass
class SessionMetadata:
    """Bookkeeping for a session within one request"""
    is_new: bool = True
    prior_snapshot: Optional[str] = None


class Session(MutableMapping[str, Any]):
    """Mutable key/value session data with change tracking."""

    def __init__(
        self,
        data: Optional[Mapping[str, Any]] = None,
        metadata: Optional[SessionMetadata] = None,
    ):
        self._data: Dict[str, Any] = dict(data) if data else {}
        self.metadata = metadata or SessionMetadata()

    @classmethod
    def create(cls, data: Optional[Mapping[str, Any]] = None) -> "Session":
        """Create a brand-new session holding a deep copy of ``data``"""
        if data is not None and not isinstance(data, Mapping):
            raise SessionAssignmentError(
                f"session can only be set to a mapping or None, not {type(data).__name__}"
            )
        return cls(copy.deepcopy(dict(data)) if data else None)

    @classmethod
    def restore(cls, data: Dict[str, Any]) -> "Session":
        """Wrap data decoded from an inbound token"""
        metadata = SessionMetadata(is_new=False, prior_snapshot=serialize(data))
        return cls(data, metadata)

    @property
    def data(self) -> Dict[str, Any]:
        return self._data

    @property
    def is_new(self) -> bool:
        return self.metadata.is_new

    @property
    def is_changed(self) -> bool:
        if self.metadata.is_new:
            return True
        try:
            return serialize(self._data) != self.metadata.prior_snapshot
        except SessionEncodeError:
            return True

    @property
    def is_populated(self) -> bool:
        return len(self._data) > 0

    def regenerate(self) -> None:
        """
        Mark the session as new.

        Login flows regenerate the session to rotate it. With the whole
        session stored in the cookie there is nothing to rotate server-side,
        so this only resets the new/changed tracking.
        """
        self.metadata.is_new = True
        self.metadata.prior_snapshot = None

    def save(self) -> None:
        """No-op; the session is written back on every response."""

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = value

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Session({self._data!r}, is_new={self.metadata.is_new})"
