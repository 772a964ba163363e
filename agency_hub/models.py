"""Request models for the JSON API.

The front end posts camelCase keys; rows are stored snake_case. Each model
accepts either spelling and ``to_row()`` returns the storage dict.
"""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Basic email validation — intentionally permissive
_EMAIL_RE = re.compile(r"^[^@\s]{1,64}@[^@\s]{1,255}$")

SERVICE_TAGS = {"seo", "ppc", "gmb", "social", "chatbot"}


class _ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_row(self, partial: bool = False) -> dict:
        """Snake_case dict for storage. ``partial`` keeps only fields sent."""
        return self.model_dump(exclude_unset=partial)


def _check_email(value: str) -> str:
    value = value.strip().lower()
    if not _EMAIL_RE.match(value):
        raise ValueError("Invalid email format")
    return value


# ---------------------------------------------------------------------------
# Contact form
# ---------------------------------------------------------------------------

class InquiryIn(_ApiModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: str
    phone: Optional[str] = Field(default=None, max_length=50)
    services: list[str] = Field(default_factory=list)
    message: Optional[str] = Field(default=None, max_length=5000)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _check_email(v)


# ---------------------------------------------------------------------------
# Service clients (admin)
# ---------------------------------------------------------------------------

class ClientIn(_ApiModel):
    business_name: str = Field(min_length=1, max_length=200)
    contact_email: str
    contact_phone: Optional[str] = None
    address: Optional[str] = None
    gmb_listing_id: Optional[str] = None
    website_url: Optional[str] = None
    services: list[str] = Field(default_factory=list)
    status: str = "active"

    @field_validator("contact_email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("services")
    @classmethod
    def validate_services(cls, v: list[str]) -> list[str]:
        unknown = [s for s in v if s not in SERVICE_TAGS]
        if unknown:
            raise ValueError(f"Unknown services: {', '.join(unknown)}")
        return v


class ClientUpdate(ClientIn):
    business_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    contact_email: Optional[str] = None

    @field_validator("contact_email")
    @classmethod
    def validate_email(cls, v: Optional[str]) -> Optional[str]:
        return _check_email(v) if v is not None else v


# ---------------------------------------------------------------------------
# White-label
# ---------------------------------------------------------------------------

class BrandIn(_ApiModel):
    brand_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    logo_url: Optional[str] = None
    brand_color: Optional[str] = None
    website_url: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None


class WhiteLabelClientIn(_ApiModel):
    client_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    client_email: Optional[str] = None
    client_phone: Optional[str] = None
    business_name: Optional[str] = None
    business_url: Optional[str] = None
    services_offered: Optional[list[str]] = None
    monthly_fee: Optional[str] = None
    status: Optional[str] = None

    @field_validator("client_email")
    @classmethod
    def validate_email(cls, v: Optional[str]) -> Optional[str]:
        return _check_email(v) if v is not None else v


class WhiteLabelReportIn(_ApiModel):
    brand_id: Optional[int] = None
    client_id: Optional[int] = None
    report_type: Optional[str] = None
    report_month: Optional[str] = Field(default=None, pattern=r"^\d{4}-(0[1-9]|1[0-2])$")
    title: Optional[str] = None
    summary: Optional[str] = None
    key_metrics: Optional[dict] = None
    insights: Optional[list[str]] = None
    recommendations: Optional[list[str]] = None
    report_data: Optional[dict] = None
    is_delivered: Optional[bool] = None


# Fields a new white-label row must carry
BRAND_REQUIRED = ("brand_name",)
WHITE_LABEL_CLIENT_REQUIRED = ("client_name", "client_email")
WHITE_LABEL_REPORT_REQUIRED = (
    "brand_id", "client_id", "report_type", "report_month", "title", "key_metrics", "report_data",
)


def missing_fields(row: dict, required: tuple[str, ...]) -> list[str]:
    """Required keys that are absent or None."""
    return [f for f in required if row.get(f) is None]
