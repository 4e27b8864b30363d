"""Folds evaluated patients into alert categories and display records."""

from collections.abc import Iterable

import structlog

from vitals.domain.models import EvaluatedPatient, RiskSummary

logger = structlog.get_logger(__name__)


class RiskAggregator:
    """
    Accumulates the result of one assessment run.

    Identifiers are appended in arrival order without deduplication: a patient
    delivered twice appears twice. Owned by a single run, so no locking.
    """

    def __init__(self) -> None:
        self.high_risk_patients: list[str | None] = []
        self.fever_patients: list[str | None] = []
        self.data_quality_issues: list[str | None] = []
        self.evaluated_records: list[dict[str, str]] = []
        self.logger = logger.bind(component="risk_aggregator")

    def add(self, patient: EvaluatedPatient) -> None:
        if patient.high_risk:
            self.high_risk_patients.append(patient.patient_id)
        if patient.fever:
            self.fever_patients.append(patient.patient_id)
        if patient.data_quality_issue:
            self.data_quality_issues.append(patient.patient_id)

        self.evaluated_records.append(patient.to_display_record())

    def consume(self, patients: Iterable[EvaluatedPatient]) -> None:
        for patient in patients:
            self.add(patient)

    def counts(self) -> dict[str, int]:
        return {
            "high_risk_patients": len(self.high_risk_patients),
            "fever_patients": len(self.fever_patients),
            "data_quality_issues": len(self.data_quality_issues),
            "evaluated_records": len(self.evaluated_records),
        }

    def summary(self) -> RiskSummary:
        """Snapshot of the categorized identifiers."""
        self.logger.info("risk_summary_built", **self.counts())
        return RiskSummary(
            high_risk_patients=list(self.high_risk_patients),
            fever_patients=list(self.fever_patients),
            data_quality_issues=list(self.data_quality_issues),
        )
