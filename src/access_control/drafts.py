"""Draft/commit values for the settings screens.

An edit session holds a ``Draft``: the committed state it was loaded from,
the edited copy, and when it was loaded. Drafts are immutable; every edit
returns a new draft. Saving hands ``changes()`` to ``commit_changes`` with a
row writer supplied by the caller.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Generic, Hashable, Iterable, Mapping, TypeVar

from django.utils import timezone

from .policy import PermissionKey
from .roles import ALL_ROLES

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

APPLIED = "applied"
FAILED = "failed"
SKIPPED = "skipped"


@dataclass(frozen=True)
class Draft(Generic[K, V]):
    committed: Mapping[K, V]
    edited: Mapping[K, V]
    loaded_at: datetime

    @classmethod
    def from_committed(cls, committed: Mapping[K, V], loaded_at: datetime | None = None):
        return cls(dict(committed), dict(committed), loaded_at or timezone.now())

    def with_value(self, key: K, value: V):
        if key not in self.committed:
            raise KeyError(key)
        edited = dict(self.edited)
        edited[key] = value
        return type(self)(self.committed, edited, self.loaded_at)

    def with_values(self, values: Mapping[K, V]):
        draft = self
        for key, value in values.items():
            draft = draft.with_value(key, value)
        return draft

    def reset(self):
        """Discard edits and return to the committed state."""
        return type(self)(self.committed, dict(self.committed), self.loaded_at)

    def changes(self) -> list[tuple[K, V]]:
        """Edited rows whose value differs from the committed one, in key order."""
        return sorted(
            ((key, value) for key, value in self.edited.items() if self.committed.get(key) != value),
            key=lambda item: item[0],
        )

    @property
    def has_changes(self) -> bool:
        return bool(self.changes())


class PermissionDraft(Draft[PermissionKey, bool]):
    """Draft over the full role x catalog grid; missing rows start as False."""

    @classmethod
    def for_catalog(cls, matrix: Mapping[PermissionKey, bool], codes: Iterable[str],
                    loaded_at: datetime | None = None) -> "PermissionDraft":
        committed = {
            (role.value, code): matrix.get((role.value, code), False)
            for code in codes
            for role in ALL_ROLES
        }
        return cls.from_committed(committed, loaded_at)

    def toggle(self, key: PermissionKey) -> "PermissionDraft":
        return self.with_value(key, not self.edited[key])


@dataclass(frozen=True)
class PageFlags:
    visible_to_admin: bool
    visible_to_members: bool
    is_enabled: bool

    @classmethod
    def of(cls, setting) -> "PageFlags":
        return cls(setting.visible_to_admin, setting.visible_to_members, setting.is_enabled)

    def replace(self, **changes: bool) -> "PageFlags":
        values = {**self.as_dict(), **changes}
        return PageFlags(**values)

    def as_dict(self) -> dict[str, bool]:
        return {
            "visible_to_admin": self.visible_to_admin,
            "visible_to_members": self.visible_to_members,
            "is_enabled": self.is_enabled,
        }


class PageSettingsDraft(Draft[int, PageFlags]):
    """Draft keyed by page setting id."""

    @classmethod
    def for_settings(cls, settings: Iterable, loaded_at: datetime | None = None) -> "PageSettingsDraft":
        return cls.from_committed({setting.pk: PageFlags.of(setting) for setting in settings}, loaded_at)

    def toggle(self, key: int, flag: str) -> "PageSettingsDraft":
        current = self.edited[key]
        return self.with_value(key, current.replace(**{flag: not getattr(current, flag)}))


@dataclass(frozen=True)
class RowWrite:
    key: str
    status: str
    error: str = ""


@dataclass(frozen=True)
class SaveResult:
    rows: list[RowWrite] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(row.status == APPLIED for row in self.rows)

    @property
    def applied(self) -> list[RowWrite]:
        return [row for row in self.rows if row.status == APPLIED]

    def as_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "applied_count": len(self.applied),
            "rows": [{"key": row.key, "status": row.status, "error": row.error} for row in self.rows],
        }


def commit_changes(
    changes: list[tuple[K, V]],
    write: Callable[[K, V], None],
    *,
    catch: tuple[type[BaseException], ...],
    label: Callable[[K], str] = str,
) -> SaveResult:
    """Write each change in order; the first failure aborts the rest.

    Rows after a failure are reported as skipped. Rows written before it stay
    committed; callers reload to see the reconciled state. No retries.
    """
    rows: list[RowWrite] = []
    failed = False
    for key, value in changes:
        name = label(key)
        if failed:
            rows.append(RowWrite(name, SKIPPED))
            continue
        try:
            write(key, value)
        except catch as exc:
            logger.exception("Write failed for %s; aborting remaining rows", name)
            rows.append(RowWrite(name, FAILED, str(exc)))
            failed = True
        else:
            rows.append(RowWrite(name, APPLIED))
    return SaveResult(rows)


__all__ = [
    "Draft",
    "PermissionDraft",
    "PageFlags",
    "PageSettingsDraft",
    "RowWrite",
    "SaveResult",
    "commit_changes",
    "APPLIED",
    "FAILED",
    "SKIPPED",
]
