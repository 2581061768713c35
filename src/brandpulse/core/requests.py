"""Request contracts validated with pydantic before any work is dispatched."""

from typing import List, Literal, Optional, Type, TypeVar

from pydantic import BaseModel, Field, ValidationError, field_validator

from .constants import ValidationConstants
from .errors import InputValidationError

Timeframe = Literal["day", "week", "month", "quarter"]

R = TypeVar("R", bound=BaseModel)


def _clean_brand(value: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError("brand name must not be empty")
    return value


def _clean_names(values: List[str]) -> List[str]:
    cleaned = [(v or "").strip() for v in values]
    if any(not v for v in cleaned):
        raise ValueError("names must not be empty")
    return cleaned


class VisibilityRequest(BaseModel):
    brand_name: str = Field(..., max_length=ValidationConstants.MAX_BRAND_LENGTH)
    queries: Optional[List[str]] = None
    timeframe: Timeframe = "week"
    include_recommendations: bool = True

    check_brand = field_validator("brand_name")(_clean_brand)

    @field_validator("queries")
    @classmethod
    def check_queries(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value is None:
            return None
        value = [q.strip() for q in value if q and q.strip()]
        return value or None


class MonitorRequest(BaseModel):
    brand_name: str = Field(..., max_length=ValidationConstants.MAX_BRAND_LENGTH)
    sources: Optional[List[str]] = None
    timeframe: Literal["day", "week", "month"] = "week"
    limit: int = Field(10, ge=1, le=ValidationConstants.MAX_CRAWL_LIMIT)
    include_insights: bool = True
    include_recommendations: bool = True

    check_brand = field_validator("brand_name")(_clean_brand)


class CompetitiveRequest(BaseModel):
    primary_brand: str = Field(..., max_length=ValidationConstants.MAX_BRAND_LENGTH)
    competitors: List[str] = Field(
        ...,
        min_length=ValidationConstants.MIN_COMPETITORS,
        max_length=ValidationConstants.MAX_COMPETITORS,
    )
    industry: str = "general"
    timeframe: Timeframe = "week"
    include_recommendations: bool = True

    check_brand = field_validator("primary_brand")(_clean_brand)
    check_competitors = field_validator("competitors")(_clean_names)


class ContentRequest(BaseModel):
    content: str = Field(
        ...,
        min_length=ValidationConstants.MIN_CONTENT_LENGTH,
        max_length=ValidationConstants.MAX_CONTENT_LENGTH,
    )
    target_keywords: List[str] = Field(
        ...,
        min_length=ValidationConstants.MIN_KEYWORDS,
        max_length=ValidationConstants.MAX_KEYWORDS,
    )
    industry: Optional[str] = None
    content_type: Optional[str] = None
    include_recommendations: bool = True

    check_keywords = field_validator("target_keywords")(_clean_names)


def parse_request(model: Type[R], **data) -> R:
    """Validate request data, converting pydantic errors into InputValidationError."""
    try:
        return model(**data)
    except ValidationError as e:
        problems = []
        for err in e.errors():
            location = ".".join(str(part) for part in err.get("loc", ()))
            message = err.get("msg", "invalid value")
            problems.append(f"{location}: {message}" if location else message)
        raise InputValidationError(problems) from e
