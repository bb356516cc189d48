from __future__ import annotations

"""Profile stores: the persistence boundary of the drilling core.

The core only ever hands plain ``UserProfile`` records across this
interface. ``JsonProfileStore`` keeps every profile in one JSON document:

{
  "schema": 1,
  "current_user": "user-..." | null,
  "users": [ {id, name, createdAt, totalSessions, ..., questionStats: {...}} ]
}

Notes:
- Timestamps are ISO-8601 strings on disk.
- A user entry that fails validation is reported and skipped; the rest load.
- Legacy documents (a bare list of users) are accepted on read.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from pydantic import ValidationError

from tabletrainer.app.explain import trace as xtrace
from tabletrainer.app.explain import warn
from tabletrainer.profile.models import UserProfile

from .schema import SCHEMA_VERSION, UserProfileRecord


class ProfileStore(Protocol):
    def load(self, user_id: str) -> Optional[UserProfile]: ...

    def load_all(self) -> List[UserProfile]: ...

    def save(self, profile: UserProfile) -> None: ...

    def delete(self, user_id: str) -> None: ...

    def get_current_user_id(self) -> Optional[str]: ...

    def set_current_user_id(self, user_id: Optional[str]) -> None: ...


def current_profile(store: ProfileStore) -> Optional[UserProfile]:
    uid = store.get_current_user_id()
    if not uid:
        return None
    return store.load(uid)


class InMemoryProfileStore:
    """Dict-backed store; profiles are copied in and out."""

    def __init__(self) -> None:
        self._profiles: Dict[str, UserProfile] = {}
        self._current: Optional[str] = None

    def load(self, user_id: str) -> Optional[UserProfile]:
        p = self._profiles.get(user_id)
        return p.copy() if p is not None else None

    def load_all(self) -> List[UserProfile]:
        return [p.copy() for p in self._profiles.values()]

    def save(self, profile: UserProfile) -> None:
        self._profiles[profile.id] = profile.copy()

    def delete(self, user_id: str) -> None:
        self._profiles.pop(user_id, None)
        if self._current == user_id:
            self._current = None

    def get_current_user_id(self) -> Optional[str]:
        return self._current

    def set_current_user_id(self, user_id: Optional[str]) -> None:
        self._current = user_id


def _empty_doc() -> Dict[str, Any]:
    return {"schema": SCHEMA_VERSION, "current_user": None, "users": []}


def parse_profile(entry: Any) -> Optional[UserProfile]:
    """Validate one stored user entry; None (with a warning) if it is unusable."""
    try:
        return UserProfileRecord.model_validate(entry).to_profile()
    except ValidationError as e:
        uid = entry.get("id") if isinstance(entry, dict) else None
        warn(f"Skipping unreadable profile {uid!r}: {e.error_count()} validation error(s)")
        xtrace("profile_skipped", {"id": uid, "errors": e.errors(include_url=False)})
        return None


class JsonProfileStore:
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return _empty_doc()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            warn(f"Could not read profiles from {self.path}: {e}")
            return _empty_doc()
        if isinstance(data, list):
            data = {"schema": SCHEMA_VERSION, "current_user": None, "users": data}
        if not isinstance(data, dict):
            warn(f"Ignoring malformed profiles document {self.path}")
            return _empty_doc()
        users = data.get("users")
        data["users"] = users if isinstance(users, list) else []
        data.setdefault("current_user", None)
        data["schema"] = SCHEMA_VERSION
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def load(self, user_id: str) -> Optional[UserProfile]:
        for entry in self._read()["users"]:
            if isinstance(entry, dict) and entry.get("id") == user_id:
                return parse_profile(entry)
        return None

    def load_all(self) -> List[UserProfile]:
        profiles = []
        for entry in self._read()["users"]:
            p = parse_profile(entry)
            if p is not None:
                profiles.append(p)
        return profiles

    def save(self, profile: UserProfile) -> None:
        data = self._read()
        users = data["users"]
        entry = profile.to_json()
        for i, existing in enumerate(users):
            if isinstance(existing, dict) and existing.get("id") == profile.id:
                users[i] = entry
                break
        else:
            users.append(entry)
        self._write(data)
        xtrace("profile_saved", {"id": profile.id, "sessions": profile.total_sessions})

    def delete(self, user_id: str) -> None:
        data = self._read()
        data["users"] = [u for u in data["users"] if not (isinstance(u, dict) and u.get("id") == user_id)]
        if data.get("current_user") == user_id:
            data["current_user"] = None
        self._write(data)

    def get_current_user_id(self) -> Optional[str]:
        return self._read().get("current_user")

    def set_current_user_id(self, user_id: Optional[str]) -> None:
        data = self._read()
        data["current_user"] = user_id
        self._write(data)
