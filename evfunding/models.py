from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator


def _coerce_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", "")
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _coerce_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = " ".join(str(value).split())
    return text or None


class ProjectForm(BaseModel):
    """Site attributes submitted by the caller. Every field is optional."""

    site_address: Optional[str] = Field(None, validation_alias=AliasChoices("siteAddress", "address"))
    utility_provider: Optional[str] = Field(None, validation_alias=AliasChoices("utilityProvider", "utility"))
    num_chargers: Optional[int] = Field(None, validation_alias="numChargers")
    charger_type: Optional[str] = Field(None, validation_alias="chargerType")
    charger_kw: Optional[float] = Field(None, validation_alias="chargerKW")
    num_ports: Optional[int] = Field(None, validation_alias="numPorts")
    port_kw: Optional[float] = Field(None, validation_alias="portKW")
    public_access: Optional[str] = Field(None, validation_alias="publicAccess")
    disadvantaged_community: Optional[str] = Field(None, validation_alias="disadvantagedCommunity")
    usage_type: Optional[str] = Field(None, validation_alias="usageType")
    vehicle_type: Optional[str] = Field(None, validation_alias="vehicleType")

    class Config:
        extra = "ignore"
        frozen = True
        populate_by_name = True

    @field_validator(
        "site_address",
        "utility_provider",
        "charger_type",
        "public_access",
        "disadvantaged_community",
        "usage_type",
        "vehicle_type",
        mode="before",
    )
    @classmethod
    def _clean_text(cls, value: Any) -> Optional[str]:
        return _coerce_text(value)

    @field_validator("num_chargers", "num_ports", mode="before")
    @classmethod
    def _clean_count(cls, value: Any) -> Optional[int]:
        number = _coerce_number(value)
        if number is None or number < 0 or number != int(number):
            return None
        return int(number)

    @field_validator("charger_kw", "port_kw", mode="before")
    @classmethod
    def _clean_power(cls, value: Any) -> Optional[float]:
        number = _coerce_number(value)
        if number is None or number <= 0:
            return None
        return number


class EvaluateRequest(BaseModel):
    form_data: Optional[ProjectForm] = Field(None, validation_alias="formData")

    class Config:
        extra = "ignore"

    @property
    def form(self) -> ProjectForm:
        return self.form_data or ProjectForm()


class EvaluationResult(BaseModel):
    result: str


class ErrorBody(BaseModel):
    error: str


@dataclass
class SearchOutcome:
    query: str
    links: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ScrapeOutcome:
    url: str
    text: str = ""
    kind: Optional[str] = None  # "html" or "pdf"
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class Evidence:
    outcomes: List[ScrapeOutcome]
    text: str

    @property
    def used(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.ok and outcome.text)

    @property
    def failed(self) -> int:
        return sum(1 for outcome in self.outcomes if not outcome.ok)


@dataclass
class EvaluationOutcome:
    result: str
    queries: List[str] = field(default_factory=list)
    urls: List[str] = field(default_factory=list)
    failed_searches: int = 0
    sources_used: int = 0
    sources_failed: int = 0
    latency: float = 0.0

    def stats(self) -> dict:
        return {
            "queries": len(self.queries),
            "urls": len(self.urls),
            "failed_searches": self.failed_searches,
            "sources_used": self.sources_used,
            "sources_failed": self.sources_failed,
            "latency": self.latency,
        }
