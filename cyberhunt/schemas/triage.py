"""Pydantic schemas for the triage service catalog and subscriptions."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field

from cyberhunt.db.enums import (
    PricingModel,
    SubscriptionStatus,
    TriageLevel,
    TriageServiceType,
)
from cyberhunt.utils.money import format_cents


class TriageServiceCreate(BaseModel):
    """Request to create a triage service. Prices are in cents."""
    model_config = ConfigDict(extra="forbid")

    service_name: str = Field(..., min_length=1, max_length=200)
    service_type: TriageServiceType = TriageServiceType.MANAGED_TRIAGE
    pricing_model: PricingModel = PricingModel.PER_REPORT
    price_per_report: int = 0
    monthly_price: int = 0
    annual_price: int = 0
    triage_level: TriageLevel = TriageLevel.STANDARD
    max_reports_per_month: int = 50
    response_time_hours: int = 24
    auto_assign_triage: bool = False
    included_services: list[str] = Field(default_factory=list)


class TriageServiceUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    service_name: str | None = Field(None, min_length=1, max_length=200)
    service_type: TriageServiceType | None = None
    pricing_model: PricingModel | None = None
    price_per_report: int | None = None
    monthly_price: int | None = None
    annual_price: int | None = None
    triage_level: TriageLevel | None = None
    max_reports_per_month: int | None = None
    response_time_hours: int | None = None
    auto_assign_triage: bool | None = None
    included_services: list[str] | None = None
    is_active: bool | None = None


class TriageServiceRead(BaseModel):
    id: int
    company_id: int
    service_name: str
    service_type: TriageServiceType
    pricing_model: PricingModel
    price_per_report: int
    monthly_price: int
    annual_price: int
    triage_level: TriageLevel
    max_reports_per_month: int
    response_time_hours: int
    auto_assign_triage: bool
    included_services: list[str]
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class SubscriptionCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    triage_service_id: int


class SubscriptionRead(BaseModel):
    id: int
    company_id: int
    triage_service_id: int
    status: SubscriptionStatus
    billing_cycle_start: datetime
    next_billing_date: datetime
    reports_processed: int
    total_cost: int
    created_at: datetime

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def total_cost_display(self) -> str | None:
        return format_cents(self.total_cost)


class TriageReportCreate(BaseModel):
    """Company request to send one of its submissions to triage."""
    model_config = ConfigDict(extra="forbid")

    submission_id: int
    triage_service_id: int
