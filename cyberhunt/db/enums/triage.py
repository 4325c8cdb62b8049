"""Triage service catalog enums."""

from enum import Enum


class TriageServiceType(str, Enum):
    MANAGED_TRIAGE = "managed_triage"
    CONSULTATION = "consultation"
    REMEDIATION = "remediation"


class PricingModel(str, Enum):
    PER_REPORT = "per_report"
    MONTHLY = "monthly"
    ANNUAL = "annual"


class TriageLevel(str, Enum):
    BASIC = "basic"
    STANDARD = "standard"
    PREMIUM = "premium"


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    CANCELLED = "cancelled"
