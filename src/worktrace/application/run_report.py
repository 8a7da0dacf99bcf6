"""End-of-run report: one place to decide a command's exit code."""

from worktrace.domain.generator_status import GeneratorStatusTracker
from worktrace.domain.models import RunReport
from worktrace.domain.result import ResultNode


def build_run_report(
    root: ResultNode,
    generator_status: GeneratorStatusTracker | None = None,
) -> RunReport:
    """
    Summarize a finished run.

    Args:
        root: Root of the run's result tree
        generator_status: Optional run-wide message tracker

    Returns:
        RunReport with exit_code 1 when the tree's aggregate status is
        FAILURE/ERROR or the generator tracker recorded failures, else 0
    """
    aggregate = root.aggregate_status()
    first_failure = root.find_first_failure()
    errors = tuple((node.path, error.message) for node, error in root.collect_errors())
    messages = generator_status.messages if generator_status is not None else ()
    failed = aggregate.is_failing or (
        generator_status is not None and generator_status.has_failures()
    )
    return RunReport(
        summary=root.to_summary(),
        aggregate_status=aggregate,
        first_failure_path=first_failure.path if first_failure is not None else None,
        errors=errors,
        messages=messages,
        exit_code=1 if failed else 0,
    )
