from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from typing import Any, Generic, TypeVar

from .errors import FailureKind

T = TypeVar("T")


@dataclass
class RawIssue:
    """Tracker wire record, reduced to the three fields git-ticket reads."""

    key: str
    summary: str
    status: str

    @classmethod
    def from_payload(cls, payload: Any) -> RawIssue:
        """Build from a search result entry ``{key, fields: {summary, status: {name}}}``.

        Raises ``ValueError`` when the entry does not have that shape.
        """
        if not isinstance(payload, Mapping):
            raise ValueError(f"issue entry is not an object: {payload!r}")
        key = payload.get("key")
        fields = payload.get("fields")
        if not isinstance(key, str) or not key:
            raise ValueError("issue entry has no key")
        if not isinstance(fields, Mapping):
            raise ValueError(f"issue {key} has no fields object")
        summary = fields.get("summary")
        status = fields.get("status")
        status_name = status.get("name") if isinstance(status, Mapping) else None
        return cls(
            key=key,
            summary=summary if isinstance(summary, str) else "",
            status=status_name if isinstance(status_name, str) else "",
        )


@dataclass(frozen=True)
class NormalizedIssue:
    key: str
    branch: str
    display_name: str
    link: str
    status: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


@dataclass
class FetchResult(Generic[T]):
    """Either the fetched items or the reason there are none.

    ``items`` is empty on failure; a successful fetch may also be empty, which
    is why callers check ``ok`` rather than truthiness.
    """

    items: list[T] = field(default_factory=list)
    failure: FailureKind | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, items: list[T]) -> FetchResult[T]:
        return cls(items=list(items))

    @classmethod
    def failed(cls, failure: FailureKind) -> FetchResult[T]:
        return cls(items=[], failure=failure)


__all__ = ["FetchResult", "NormalizedIssue", "RawIssue"]
