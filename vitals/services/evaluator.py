"""
Patient evaluation: one raw record in, one EvaluatedPatient out.

Malformed fields never abort a record; they degrade to ``Unscorable`` in the
scorers and raise the data quality flag. Only a records collection that is not
a sequence of mappings is an error, and it fails the whole batch.
"""

import json
from collections.abc import Mapping, Sequence
from typing import Any

import structlog

from vitals.domain.models import (
    HIGH_RISK_THRESHOLD,
    EvaluatedPatient,
    RawPatientRecord,
    RiskLevel,
)
from vitals.domain.scoring import (
    FieldScore,
    Unscorable,
    score_age,
    score_blood_pressure,
    score_temperature,
)
from vitals.exceptions import BatchEvaluationError

logger = structlog.get_logger(__name__)


def _display_value(value: Any) -> str:
    """
    Render a raw field the way it appeared in the JSON payload.

    Strings are shown as-is; anything else uses its JSON spelling, so a missing
    value reads ``null``, a boolean ``true`` and an integral float ``101``.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    try:
        return json.dumps(value)
    except (TypeError, ValueError):
        return str(value)


def _display_field(value: Any, score: FieldScore) -> str:
    return f"{_display_value(value)} (Score: {score.effective})"


def evaluate_patient(record: RawPatientRecord) -> EvaluatedPatient:
    """Score one patient record."""
    patient_id = record.get("patient_id")
    name = record.get("name")
    age = record.get("age")
    blood_pressure = record.get("blood_pressure")
    temperature = record.get("temperature")

    age_score = score_age(age)
    blood_pressure_score = score_blood_pressure(blood_pressure)
    temperature_score = score_temperature(temperature)

    # Unscorable fields count as 0 here; the quality flag below tracks them separately
    total_risk = age_score.effective + blood_pressure_score.effective + temperature_score.effective
    risk_level = RiskLevel.from_total(total_risk)

    data_quality_issue = any(
        isinstance(score, Unscorable)
        for score in (age_score, blood_pressure_score, temperature_score)
    )

    return EvaluatedPatient(
        patient_id=None if patient_id is None else str(patient_id),
        name=None if name is None else str(name),
        age_score=age_score,
        blood_pressure_score=blood_pressure_score,
        temperature_score=temperature_score,
        patient_display=f"{_display_value(patient_id)} = {_display_value(name)}",
        age_display=_display_field(age, age_score),
        blood_pressure_display=_display_field(blood_pressure, blood_pressure_score),
        temperature_display=_display_field(temperature, temperature_score),
        total_risk_display=f"{total_risk} ({risk_level.value})",
        total_risk=total_risk,
        risk_level=risk_level,
        high_risk=total_risk >= HIGH_RISK_THRESHOLD,
        fever=temperature_score.effective > 0,
        data_quality_issue=data_quality_issue,
    )


def evaluate_patients(records: Any) -> list[EvaluatedPatient]:
    """
    Score a page of patient records, preserving order.

    Raises:
        BatchEvaluationError: If ``records`` is not a sequence of mappings.
            Nothing from the batch is returned in that case.
    """
    if isinstance(records, str | bytes) or not isinstance(records, Sequence):
        logger.error(
            "batch_evaluation_failed",
            reason="records is not a sequence",
            payload_type=type(records).__name__,
            payload=repr(records),
        )
        raise BatchEvaluationError(
            "Failed to evaluate patients: records is not a sequence", records
        )

    for index, record in enumerate(records):
        if not isinstance(record, Mapping):
            logger.error(
                "batch_evaluation_failed",
                reason="record is not a mapping",
                index=index,
                payload=repr(records),
            )
            raise BatchEvaluationError(
                f"Failed to evaluate patients: record {index} is not a mapping", records
            )

    evaluated = [evaluate_patient(record) for record in records]

    for patient in evaluated:
        logger.debug(
            "patient_evaluated",
            patient_id=patient.patient_id,
            total_risk=patient.total_risk,
            data_quality_issue=patient.data_quality_issue,
        )

    return evaluated
