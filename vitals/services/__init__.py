"""
Core services for the application.

This package contains the retrieval pipeline (transport, fetcher, paginator),
patient evaluation, aggregation and the collaborators that persist and submit
the results.
"""

from .aggregator import RiskAggregator
from .assessment import AssessmentResult, AssessmentService
from .evaluator import evaluate_patient, evaluate_patients
from .fetcher import Result, RetryingFetcher, backoff_delay
from .paginator import Paginator
from .persistence import EvaluatedRecordWriter
from .submission import AssessmentSubmitter
from .transport import HttpResponse, HttpTransport, RequestsTransport

__all__ = [
    "AssessmentResult",
    "AssessmentService",
    "AssessmentSubmitter",
    "EvaluatedRecordWriter",
    "HttpResponse",
    "HttpTransport",
    "Paginator",
    "RequestsTransport",
    "Result",
    "RetryingFetcher",
    "RiskAggregator",
    "backoff_delay",
    "evaluate_patient",
    "evaluate_patients",
]
