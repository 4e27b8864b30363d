"""Submission of the final risk summary to the patient service."""

from typing import Any

import structlog

from vitals.config import ApiConfig
from vitals.domain.models import RiskSummary
from vitals.exceptions import SummarySubmissionError
from vitals.services.transport import HttpTransport

logger = structlog.get_logger(__name__)


class AssessmentSubmitter:
    """POSTs a RiskSummary once; the acknowledgment is logged, never interpreted."""

    def __init__(self, transport: HttpTransport, api_config: ApiConfig) -> None:
        self.transport = transport
        self.api_config = api_config
        self.logger = logger.bind(component="assessment_submitter")

    @property
    def submit_url(self) -> str:
        return f"{self.api_config.base_url}/submit-assessment"

    async def submit(self, summary: RiskSummary) -> Any:
        """
        Submit the summary and return the service's acknowledgment body.

        Raises:
            SummarySubmissionError: On transport failure or a non-2xx status.
        """
        headers = {
            "Content-Type": "application/json",
            self.api_config.api_key_header: self.api_config.api_key,
        }

        try:
            response = await self.transport.post(
                self.submit_url, json=summary.to_payload(), headers=headers
            )
        except Exception as e:
            self.logger.error("assessment_submission_failed", error=str(e))
            raise SummarySubmissionError(f"Failed to submit assessment: {e}") from e

        if not response.ok:
            self.logger.error(
                "assessment_submission_rejected", status=response.status_code, body=response.body
            )
            raise SummarySubmissionError(
                f"Assessment submission rejected. Status: {response.status_code}",
                status_code=response.status_code,
            )

        self.logger.info("assessment_submitted", acknowledgment=response.body)
        return response.body
