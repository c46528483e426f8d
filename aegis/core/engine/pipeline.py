"""
Step pipeline — the fail-stop provisioning loop.

A pipeline is an ordered list of named steps, fixed at construction.
``run()`` reports progress before each step, executes them in order,
and stops at the first failure. There is no rollback, retry or
resumption: steps are idempotent, so a failed run is simply started
again from the top.

Flow:
    step 1 → step 2 → ... → step N          (AllSucceeded)
    step 1 → ... → step k ✗                 (FailedAt k)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable

from aegis.core.errors import SetupError
from aegis.core.models.step import StepResult

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]


@dataclass(frozen=True)
class Step:
    """A named, zero-argument fallible operation.

    ``run`` signals failure by raising a ``SetupError``; ``execute``
    turns that into a failed StepResult so the pipeline never raises.
    """

    name: str
    run: Callable[[], None]

    def execute(self, index: int) -> StepResult:
        start = time.monotonic()
        try:
            self.run()
        except SetupError as e:
            elapsed_ms = int((time.monotonic() - start) * 1000)
            logger.debug("Step '%s' failed: %s: %s", self.name, e.kind, e)
            return StepResult.failure(index, self.name, e.kind, str(e), elapsed_ms)
        except Exception as e:
            elapsed_ms = int((time.monotonic() - start) * 1000)
            logger.exception("Step '%s' raised unexpectedly", self.name)
            return StepResult.failure(index, self.name, "UnexpectedError", str(e), elapsed_ms)

        elapsed_ms = int((time.monotonic() - start) * 1000)
        return StepResult.success(index, self.name, elapsed_ms)


@dataclass
class PipelineReport:
    """Result of running a pipeline."""

    total: int = 0
    results: list[StepResult] = field(default_factory=list)

    @property
    def failure(self) -> StepResult | None:
        for result in self.results:
            if result.failed:
                return result
        return None

    @property
    def all_succeeded(self) -> bool:
        return self.failure is None and len(self.results) == self.total

    @property
    def status(self) -> str:
        return "ok" if self.all_succeeded else "failed"

    @property
    def failed_index(self) -> int | None:
        failure = self.failure
        return failure.index if failure else None

    @property
    def failed_step(self) -> str | None:
        failure = self.failure
        return failure.name if failure else None

    @property
    def completed(self) -> int:
        return sum(1 for r in self.results if r.ok)

    def to_dict(self) -> dict:
        failure = self.failure
        return {
            "status": self.status,
            "total": self.total,
            "completed": self.completed,
            "failed_index": failure.index if failure else None,
            "failed_step": failure.name if failure else None,
            "error_kind": failure.error_kind if failure else None,
            "error": failure.error if failure else None,
            "steps": [r.model_dump(mode="json") for r in self.results],
        }


class StepPipeline:
    """Runs a fixed sequence of steps, halting on the first failure."""

    def __init__(self, steps: list[Step], on_progress: ProgressCallback | None = None):
        self._steps: tuple[Step, ...] = tuple(steps)
        self._on_progress = on_progress

    @property
    def steps(self) -> tuple[Step, ...]:
        return self._steps

    @property
    def step_names(self) -> list[str]:
        return [step.name for step in self._steps]

    def __len__(self) -> int:
        return len(self._steps)

    def run(self) -> PipelineReport:
        total = len(self._steps)
        report = PipelineReport(total=total)

        for index, step in enumerate(self._steps, start=1):
            if self._on_progress:
                self._on_progress(index, total, step.name)
            logger.info("[%d/%d] %s", index, total, step.name)

            result = step.execute(index)
            report.results.append(result)

            if result.failed:
                logger.info(
                    "✗ Step %d/%d '%s' failed (%s): %s",
                    index,
                    total,
                    step.name,
                    result.error_kind,
                    result.error,
                )
                break

        return report
