"""Request and response schemas for transport layers.

Requests validate call shapes before they reach the service; responses
serialize domain results into plain JSON-friendly models.
"""

from typing import Annotated, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.translations.domain import (
    BatchResult,
    Element,
    JobResult,
    JobStatus,
    TranslationView,
)
from modules.translations.locales import is_well_formed

LocaleCode = Annotated[
    str,
    Field(
        min_length=2,
        max_length=35,
        description="BCP-47 like locale code",
        json_schema_extra={"example": "pt-BR"},
    ),
]


def _check_locale(value: str) -> str:
    value = value.strip()
    if not is_well_formed(value):
        raise ValueError(f"Malformed locale code: {value!r}")
    return value


class ElementRef(BaseModel):
    """Schema for a reference to external content."""

    model_config = ConfigDict(frozen=True)

    element_id: Annotated[
        str,
        Field(
            ...,
            min_length=1,
            description="Identifier in the host content store",
            json_schema_extra={"example": "42"},
        ),
    ]
    kind: Annotated[
        str,
        Field(
            default="post",
            min_length=1,
            description="Content type tag",
            json_schema_extra={"example": "post"},
        ),
    ] = "post"

    def to_domain(self) -> Element:
        return Element(element_id=self.element_id, kind=self.kind)

    @classmethod
    def from_domain(cls, element: Element) -> "ElementRef":
        return cls(element_id=element.element_id, kind=element.kind)


class TranslationRequest(BaseModel):
    """Schema for translating one element into several locales."""

    source: ElementRef
    target_locales: Annotated[
        List[LocaleCode],
        Field(
            ...,
            min_length=1,
            description="Locales to translate into",
            json_schema_extra={"example": ["es", "fr"]},
        ),
    ]
    backend: Optional[str] = Field(default=None, description="Translator backend name")
    actor: Optional[str] = Field(default=None, min_length=1, description="Acting user")

    @field_validator("target_locales")
    @classmethod
    def _validate_locales(cls, v: List[str]) -> List[str]:
        return list(dict.fromkeys(_check_locale(code) for code in v))


class BatchItem(BaseModel):
    source: ElementRef
    target_locale: LocaleCode

    @field_validator("target_locale")
    @classmethod
    def _validate_locale(cls, v: str) -> str:
        return _check_locale(v)


class BatchTranslationRequest(BaseModel):
    """Schema for a batch of (element, locale) jobs."""

    items: Annotated[List[BatchItem], Field(..., min_length=1)]
    backend: Optional[str] = None
    actor: Optional[str] = Field(default=None, min_length=1)
    timeout_seconds: Optional[float] = Field(default=None, gt=0)


class LinkTranslationRequest(BaseModel):
    """Schema for explicitly linking an existing element into a group."""

    element: ElementRef
    locale: LocaleCode
    translation_of: Optional[ElementRef] = None

    @field_validator("locale")
    @classmethod
    def _validate_locale(cls, v: str) -> str:
        return _check_locale(v)


class JobResultResponse(BaseModel):
    index: int
    source: ElementRef
    target_locale: str
    status: JobStatus
    element: Optional[ElementRef] = None
    trid: Optional[int] = None
    error_code: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def from_domain(cls, result: JobResult) -> "JobResultResponse":
        return cls(
            index=result.index,
            source=ElementRef.from_domain(result.source),
            target_locale=result.target_locale,
            status=result.status,
            element=ElementRef.from_domain(result.element) if result.element else None,
            trid=result.trid,
            error_code=result.error_code,
            message=result.message,
        )


class BatchResultResponse(BaseModel):
    correlation_id: Optional[str] = None
    succeeded: int
    skipped: int
    failed: int
    results: List[JobResultResponse]

    @classmethod
    def from_domain(cls, batch: BatchResult) -> "BatchResultResponse":
        return cls(
            correlation_id=batch.correlation_id,
            succeeded=batch.succeeded,
            skipped=batch.skipped,
            failed=batch.failed,
            results=[JobResultResponse.from_domain(r) for r in batch.results],
        )


class SiblingResponse(BaseModel):
    element: ElementRef
    title: str
    permalink: Optional[str] = None
    status: str


class TranslationViewResponse(BaseModel):
    """Schema for an element's translation group as shown to editors."""

    element: ElementRef
    current_locale: Optional[str] = None
    trid: Optional[int] = None
    siblings: Dict[str, SiblingResponse] = Field(default_factory=dict)

    @classmethod
    def from_domain(cls, view: TranslationView) -> "TranslationViewResponse":
        return cls(
            element=ElementRef.from_domain(view.element),
            current_locale=view.current_locale,
            trid=view.trid,
            siblings={
                locale: SiblingResponse(
                    element=ElementRef.from_domain(info.element),
                    title=info.title,
                    permalink=info.permalink,
                    status=info.status,
                )
                for locale, info in view.siblings.items()
            },
        )
