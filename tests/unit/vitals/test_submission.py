"""Tests for summary submission in `vitals/services/submission.py`."""

import pytest
from fakes import FakeTransport

from vitals.config import ApiConfig
from vitals.domain.models import RiskSummary
from vitals.exceptions import SummarySubmissionError
from vitals.services.submission import AssessmentSubmitter
from vitals.services.transport import HttpResponse

SUMMARY = RiskSummary(
    high_risk_patients=["DEMO001"], fever_patients=["DEMO001"], data_quality_issues=["DEMO002"]
)


async def test_posts_summary_with_api_key(api_config: ApiConfig) -> None:
    transport = FakeTransport(post_outcome=HttpResponse(200, {"success": True, "score": 100}))

    ack = await AssessmentSubmitter(transport, api_config).submit(SUMMARY)

    assert ack == {"success": True, "score": 100}
    call = transport.post_calls[0]
    assert call["url"] == "https://patients.example/api/submit-assessment"
    assert call["json"] == SUMMARY.to_payload()
    assert call["headers"]["x-api-key"] == "test-key"
    assert call["headers"]["Content-Type"] == "application/json"


async def test_rejected_submission_raises_with_status(api_config: ApiConfig) -> None:
    transport = FakeTransport(post_outcome=HttpResponse(400, {"error": "bad payload"}))

    with pytest.raises(SummarySubmissionError) as exc_info:
        await AssessmentSubmitter(transport, api_config).submit(SUMMARY)

    assert exc_info.value.status_code == 400


async def test_transport_failure_raises_submission_error(api_config: ApiConfig) -> None:
    transport = FakeTransport(post_outcome=ConnectionError("refused"))

    with pytest.raises(SummarySubmissionError, match="refused") as exc_info:
        await AssessmentSubmitter(transport, api_config).submit(SUMMARY)

    assert isinstance(exc_info.value.__cause__, ConnectionError)
