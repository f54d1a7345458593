"""Domain models for translation groups and batch jobs.

Groups are handed out as frozen snapshots. A snapshot may be stale by at
most one in-flight mutation, callers never mutate the store through it.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple


Locale = str


@dataclass(frozen=True)
class Element:
    """Reference to a piece of external content.

    Attributes:
        element_id: Identifier in the host content store.
        kind: Content type tag (post, page, string, field...).
    """

    element_id: str
    kind: str = "post"

    @property
    def key(self) -> Tuple[str, str]:
        return (self.kind, self.element_id)

    def __str__(self) -> str:
        return f"{self.kind}:{self.element_id}"


@dataclass(frozen=True)
class GroupMember:
    element: Element
    locale: Locale
    source_locale: Optional[Locale] = None

    @property
    def is_origin(self) -> bool:
        return self.source_locale is None


@dataclass(frozen=True)
class TranslationGroup:
    """Immutable snapshot of a translation group.

    Attributes:
        trid: Group identifier.
        members: Locale to member mapping, in insertion order.
    """

    trid: int
    members: Mapping[Locale, GroupMember]

    def __post_init__(self):
        object.__setattr__(self, "members", MappingProxyType(dict(self.members)))

    @property
    def locales(self) -> List[Locale]:
        return list(self.members)

    @property
    def origin(self) -> Optional[GroupMember]:
        for member in self.members.values():
            if member.is_origin:
                return member
        return None

    def member_for(self, locale: Locale) -> Optional[GroupMember]:
        return self.members.get(locale)

    def locale_of(self, element: Element) -> Optional[Locale]:
        for member in self.members.values():
            if member.element == element:
                return member.locale
        return None

    def __len__(self) -> int:
        return len(self.members)


class JobStatus(Enum):
    PENDING = "pending"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class TranslationJob:
    """One requested translation of a source element into a target locale."""

    source: Element
    target_locale: Locale
    actor: str
    backend: Optional[str] = None
    status: JobStatus = JobStatus.PENDING


@dataclass(frozen=True)
class JobResult:
    """Outcome of a single job.

    Attributes:
        index: Position of the job in the submitted batch.
        source: Source element.
        target_locale: Requested locale.
        status: Terminal job status.
        element: Created element (succeeded) or existing member (skipped).
        trid: Group the element belongs to, when known.
        error_code: Machine code for failed jobs.
        message: Human readable detail for failed jobs.
    """

    index: int
    source: Element
    target_locale: Locale
    status: JobStatus
    element: Optional[Element] = None
    trid: Optional[int] = None
    error_code: Optional[str] = None
    message: Optional[str] = None

    @property
    def is_failed(self) -> bool:
        return self.status == JobStatus.FAILED


@dataclass(frozen=True)
class BatchResult:
    """Per-job results in input order plus aggregate counts."""

    results: List[JobResult] = field(default_factory=list)
    correlation_id: Optional[str] = None

    def _count(self, status: JobStatus) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def succeeded(self) -> int:
        return self._count(JobStatus.SUCCEEDED)

    @property
    def skipped(self) -> int:
        return self._count(JobStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return self._count(JobStatus.FAILED)


@dataclass(frozen=True)
class SiblingInfo:
    element: Element
    title: str
    permalink: Optional[str]
    status: str


@dataclass(frozen=True)
class TranslationView:
    """Read-only view of an element's translation group."""

    element: Element
    current_locale: Optional[Locale]
    trid: Optional[int]
    siblings: Dict[Locale, SiblingInfo] = field(default_factory=dict)
