"""
Domain models for patient risk assessment.

Raw patient records stay plain mappings: they are untrusted input and every
malformed field has to reach the scorers intact. Everything the pipeline
produces is a validated Pydantic model.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from vitals.domain.scoring import FieldScore

RawPatientRecord = Mapping[str, Any]

HIGH_RISK_THRESHOLD = 4


class RiskLevel(str, Enum):
    """Binary risk classification of a patient's total score."""

    LOW = "LOW RISK"
    HIGH = "HIGH RISK"

    @classmethod
    def from_total(cls, total_risk: int) -> "RiskLevel":
        return cls.LOW if total_risk < HIGH_RISK_THRESHOLD else cls.HIGH


class PageRequest(BaseModel):
    """One page of the patient collection."""

    model_config = ConfigDict(frozen=True)

    page: int = Field(ge=1, description="1-based page index")
    limit: int = Field(ge=1, description="Records per page")

    def as_params(self) -> dict[str, int]:
        return {"page": self.page, "limit": self.limit}


class Pagination(BaseModel):
    """
    Pagination metadata returned with each page.

    Only ``hasNext`` drives the page walk. Other keys (page, limit, total and
    the like) are informational and never decide whether a page is accepted.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    has_next: bool = Field(alias="hasNext")


class PageResponse(BaseModel):
    """A validated page body: the records array plus pagination metadata."""

    data: list[Any] = Field(description="Raw patient records, untrusted")
    pagination: Pagination = Field(default_factory=lambda: Pagination(hasNext=False))

    @property
    def has_next(self) -> bool:
        return self.pagination.has_next


class EvaluatedPatient(BaseModel):
    """Scoring outcome for one patient record."""

    model_config = ConfigDict(frozen=True)

    patient_id: str | None
    name: str | None = None

    age_score: FieldScore
    blood_pressure_score: FieldScore
    temperature_score: FieldScore

    patient_display: str
    age_display: str
    blood_pressure_display: str
    temperature_display: str
    total_risk_display: str

    total_risk: int = Field(ge=0)
    risk_level: RiskLevel
    high_risk: bool
    fever: bool
    data_quality_issue: bool

    def to_display_record(self) -> dict[str, str]:
        """Display-only view written to the evaluated records file."""
        return {
            "Patient": self.patient_display,
            "Age": self.age_display,
            "Blood Pressure": self.blood_pressure_display,
            "Temperature": self.temperature_display,
            "Total Risk": self.total_risk_display,
        }


class RiskSummary(BaseModel):
    """Patient identifiers partitioned into alert categories."""

    high_risk_patients: list[str | None] = Field(default_factory=list)
    fever_patients: list[str | None] = Field(default_factory=list)
    data_quality_issues: list[str | None] = Field(default_factory=list)

    def to_payload(self) -> dict[str, list[str | None]]:
        """JSON body for the submission endpoint."""
        return self.model_dump(mode="json")
