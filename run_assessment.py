"""
Run a complete patient risk assessment from the command line.

Steps:
1. Load and validate configuration (HEALTH_API_KEY from env or .env)
2. Fetch every page of patients with retry/backoff
3. Score and categorize each patient
4. Write evaluated records locally and submit the summary

Run with: uv run python run_assessment.py
"""

import asyncio
import sys

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from vitals.config import get_config
from vitals.exceptions import SummarySubmissionError, VitalsError
from vitals.observability import configure_logging
from vitals.services.assessment import AssessmentResult, AssessmentService

console = Console()


def render_result(result: AssessmentResult) -> None:
    """Print counts and patient ids per category."""
    summary = result.summary

    table = Table(title="Risk Summary")
    table.add_column("Category", style="cyan")
    table.add_column("Count", style="white", justify="right")
    table.add_column("Patients", style="white")

    rows = [
        ("High risk (score >= 4)", summary.high_risk_patients),
        ("Fever", summary.fever_patients),
        ("Data quality issues", summary.data_quality_issues),
    ]
    for label, ids in rows:
        table.add_row(label, str(len(ids)), ", ".join(str(i) for i in ids) or "-")

    console.print(table)
    console.print(
        f"Evaluated {len(result.evaluated_records)} patients across {result.pages} pages"
    )

    if result.records_persisted:
        console.print("Evaluated records written", style="green")
    else:
        console.print("Evaluated records could not be written", style="yellow")

    if result.acknowledgment is not None:
        console.print(Panel(str(result.acknowledgment), title="Assessment Results"))


async def run() -> int:
    console.print(Panel("Patient Risk Assessment", style="bold blue"))

    try:
        config = get_config()
    except VitalsError as e:
        console.print(f"Configuration failed: {e}", style="red")
        return 2

    configure_logging(config.logging)

    service = AssessmentService(config)
    try:
        async with service.session():
            result = await service.run()
    except SummarySubmissionError as e:
        console.print(f"Submission failed: {e}", style="red")
        if e.result is not None:
            render_result(e.result)
        return 1
    except VitalsError as e:
        console.print(f"Failed to perform full health evaluations: {e}", style="red")
        return 1

    render_result(result)
    return 0


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(run()))
    except KeyboardInterrupt:
        console.print("\nAssessment stopped by user", style="yellow")
        sys.exit(130)
