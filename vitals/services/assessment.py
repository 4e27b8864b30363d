"""
End-to-end assessment run.

Pipeline:
1. Walk every page of patients (retrying each page as needed)
2. Evaluate each page's records and fold them into the aggregator
3. Persist the evaluated display records locally
4. Submit the risk summary and log the acknowledgment

A fetch or batch failure aborts the run before anything is submitted. A
submission failure is raised after the local results already exist.
"""

import asyncio
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

import structlog

from vitals.config import AppConfig, get_config
from vitals.domain.models import RiskSummary
from vitals.exceptions import SummarySubmissionError, VitalsError
from vitals.observability import configure_logging
from vitals.services.aggregator import RiskAggregator
from vitals.services.evaluator import evaluate_patients
from vitals.services.fetcher import RetryingFetcher, SleepFunc
from vitals.services.paginator import Paginator
from vitals.services.persistence import EvaluatedRecordWriter
from vitals.services.submission import AssessmentSubmitter
from vitals.services.transport import HttpTransport, RequestsTransport

logger = structlog.get_logger(__name__)


@dataclass
class AssessmentResult:
    """Everything one run produced."""

    summary: RiskSummary
    evaluated_records: list[dict[str, str]]
    pages: int
    records_persisted: bool = False
    acknowledgment: Any | None = None
    duration_seconds: float = 0.0
    counts: dict[str, int] = field(default_factory=dict)


class AssessmentService:
    """Wires fetcher, paginator, evaluator, aggregator, writer and submitter for one run."""

    def __init__(
        self,
        config: AppConfig | None = None,
        transport: HttpTransport | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self.config = config or get_config()
        self.logger = logger.bind(component="assessment_service")

        self._owns_transport = transport is None
        self.transport: HttpTransport = transport or RequestsTransport(
            timeout_seconds=self.config.api.request_timeout_seconds
        )

        self.fetcher = RetryingFetcher(
            self.transport, self.config.api, self.config.retry, sleep=sleep
        )
        self.paginator = Paginator(self.fetcher, self.config.pagination)
        self.writer = EvaluatedRecordWriter(self.config.output.evaluated_records_path)
        self.submitter = AssessmentSubmitter(self.transport, self.config.api)

    @asynccontextmanager
    async def session(self) -> AsyncIterator["AssessmentService"]:
        """Close the transport we created once the caller is done."""
        try:
            yield self
        finally:
            if self._owns_transport and isinstance(self.transport, RequestsTransport):
                await self.transport.aclose()

    async def evaluate_all(self) -> tuple[RiskAggregator, int]:
        """Walk all pages and aggregate every evaluated patient."""
        aggregator = RiskAggregator()

        def handle_page(records: list[Any]) -> None:
            aggregator.consume(evaluate_patients(records))

        pages = await self.paginator.fetch_all(handle_page)
        return aggregator, pages

    async def run(self) -> AssessmentResult:
        """
        Perform a full assessment.

        Raises:
            FetchExhaustedError: A page could not be retrieved.
            BatchEvaluationError: A page's records were not a record collection.
            SummarySubmissionError: Submission failed; ``error.result`` holds the
                computed AssessmentResult.
        """
        start_time = time.perf_counter()
        self.logger.info("assessment_started", page_size=self.config.pagination.page_size)

        try:
            aggregator, pages = await self.evaluate_all()
        except VitalsError as e:
            self.logger.error(
                "assessment_aborted", error=str(e), error_type=type(e).__name__
            )
            raise

        summary = aggregator.summary()
        result = AssessmentResult(
            summary=summary,
            evaluated_records=aggregator.evaluated_records,
            pages=pages,
            counts=aggregator.counts(),
        )
        result.records_persisted = self.writer.write(aggregator.evaluated_records)

        if self.config.output.submit_results:
            try:
                result.acknowledgment = await self.submitter.submit(summary)
            except SummarySubmissionError as e:
                e.result = result
                raise

        result.duration_seconds = round(time.perf_counter() - start_time, 3)
        self.logger.info(
            "assessment_completed",
            pages=pages,
            duration_seconds=result.duration_seconds,
            **result.counts,
        )
        return result


async def main() -> None:
    """Run one assessment with configuration from the environment."""
    config = get_config()
    configure_logging(config.logging)

    service = AssessmentService(config)
    async with service.session():
        result = await service.run()

    print("Assessment Results:", result.acknowledgment)


if __name__ == "__main__":
    asyncio.run(main())
