"""
Setup use case — the 13-step provisioning wizard.

Builds the canonical step pipeline around one shared SetupConfig and
runs it. Every step is idempotent; a failure stops the run and leaves
whatever earlier steps produced (directories, installed tools) in
place, but nothing reaches the final script, cron or credential
locations before the Finalize step.

    1  Check system requirements        8  Configure cloud provider
    2  Initialize directories           9  Configure backup sources
    3  Check dependencies              10  Configure monitoring
    4  Prepare staging area            11  Configure scheduling and retention
    5  Select backup backend           12  Generate backup scripts
    6  Configure backup backend        13  Finalize setup
    7  Select cloud provider
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from aegis.adapters.base import Prompter, ToolInstaller
from aegis.core.config.loader import config_artifact
from aegis.core.engine.pipeline import PipelineReport, ProgressCallback, Step, StepPipeline
from aegis.core.errors import CommandFailed, GenerationError
from aegis.core.models.config import SetupConfig
from aegis.core.models.template import GeneratedFile
from aegis.core.services import backends, dependencies, policies, providers, staging
from aegis.core.services.artifacts import generate_artifacts
from aegis.core.services.directories import provision_directories

logger = logging.getLogger(__name__)


@dataclass
class SetupResult:
    """Result of a setup run."""

    report: PipelineReport
    config: SetupConfig
    published: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.report.all_succeeded

    @property
    def aborted(self) -> bool:
        failure = self.report.failure
        return failure is not None and failure.error_kind == "PromptAborted"

    def to_dict(self) -> dict:
        result = self.report.to_dict()
        result["paths"] = self.config.paths()
        result["backend"] = self.config.backend.type if self.config.backend else None
        result["provider"] = self.config.provider.type if self.config.provider else None
        result["published"] = self.published
        return result


class SetupWizard:
    """Owns the shared config and the steps that fill it in."""

    def __init__(
        self,
        config: SetupConfig,
        prompter: Prompter,
        installer: ToolInstaller,
        on_progress: ProgressCallback | None = None,
    ):
        self.config = config
        self.prompter = prompter
        self.installer = installer
        self.artifacts: list[GeneratedFile] = []
        self.published: list[str] = []
        self.pipeline = StepPipeline(self._steps(), on_progress=on_progress)

    def _steps(self) -> list[Step]:
        return [
            Step("Check system requirements", self.check_requirements),
            Step("Initialize directories", self.init_directories),
            Step("Check dependencies", self.check_dependencies),
            Step("Prepare staging area", self.prepare_staging),
            Step("Select backup backend", self.select_backend),
            Step("Configure backup backend", self.configure_backend),
            Step("Select cloud provider", self.select_provider),
            Step("Configure cloud provider", self.configure_provider),
            Step("Configure backup sources", self.configure_sources),
            Step("Configure monitoring", self.configure_monitoring),
            Step("Configure scheduling and retention", self.configure_schedule),
            Step("Generate backup scripts", self.generate),
            Step("Finalize setup", self.finalize),
        ]

    def run(self) -> PipelineReport:
        return self.pipeline.run()

    # ── Steps ───────────────────────────────────────────────────

    def check_requirements(self) -> None:
        if not self.installer.is_available():
            raise CommandFailed(
                f"Package manager '{self.installer.name}' is not available on this host",
                stage="requirements",
            )
        logger.info("Installing through %s", self.installer.name)

    def init_directories(self) -> None:
        provision_directories(self.config)

    def check_dependencies(self) -> None:
        dependencies.ensure_tools(dependencies.BASE_TOOLS, self.installer)

    def prepare_staging(self) -> None:
        staging.reset_staging(self.config.staging_dir)

    def select_backend(self) -> None:
        backends.select_backend(self.config, self.prompter)

    def configure_backend(self) -> None:
        backends.configure_backend(self.config, self.prompter)
        dependencies.ensure_tools(dependencies.backend_tools(self.config), self.installer)

    def select_provider(self) -> None:
        providers.select_provider(self.config, self.prompter)

    def configure_provider(self) -> None:
        providers.configure_provider(self.config, self.prompter)
        dependencies.ensure_tools(dependencies.provider_tools(self.config), self.installer)

    def configure_sources(self) -> None:
        policies.configure_sources(self.config, self.prompter)

    def configure_monitoring(self) -> None:
        policies.configure_monitoring(self.config, self.prompter)

    def configure_schedule(self) -> None:
        policies.configure_schedule(self.config, self.prompter)

    def generate(self) -> None:
        self.artifacts = generate_artifacts(self.config)
        staging.stage_files(self.artifacts, self.config.staging_dir)

    def finalize(self) -> None:
        if not self.artifacts:
            raise GenerationError("Nothing was generated; run the generate step first")

        files = [*self.artifacts, config_artifact(self.config)]
        staging.stage_files(files[-1:], self.config.staging_dir)
        self.published = staging.publish_files(files, self.config.staging_dir)
        staging.clean_staging(self.config.staging_dir)
        logger.info("Setup complete: %d files published", len(self.published))


def run_setup(
    config: SetupConfig,
    prompter: Prompter,
    installer: ToolInstaller,
    on_progress: ProgressCallback | None = None,
) -> SetupResult:
    """Run the full setup wizard against ``config``.

    Never raises for step failures; inspect ``result.report``.
    """
    wizard = SetupWizard(config, prompter, installer, on_progress=on_progress)
    report = wizard.run()
    return SetupResult(report=report, config=wizard.config, published=wizard.published)
