import logging
import os
import time
import uuid
from typing import Callable, Dict, List, Optional

from rich.console import Console

from .constants import DEFAULT_DEPLOY_MESSAGE
from .errors import ConfigurationError, DeployerError, EnvironmentMissing
from .errors_catalog import actionable_error
from .models import DeployRun, DeployStage, EnvironmentConfig, UploaderOptions, UploadPlanEntry
from .services.artifacts import ArtifactWriter
from .services.command_runner import CommandRunner
from .services.entry_rewriter import EntryRewriter
from .services.git import GitService
from .services.invalidation import InvalidationTrigger
from .services.notifications import NotificationDispatcher, SlackTransport
from .services.object_store import ObjectStoreClient
from .services.prompts import PromptService
from .services.upload_executor import UploadExecutor
from .services.upload_planner import UploadPlanner
from .services.version_resolver import VersionResolver

console = Console()
logger = logging.getLogger("s3deployer")


class S3Deployer:
    """Runs one deploy of a build directory through every pipeline stage.

    Stages run strictly in order. A fatal ``DeployerError`` moves the run to
    ``aborted``; a soft one is logged and the next stage starts. Uploaded
    objects are never rolled back.
    """

    def __init__(
        self,
        build_path: str,
        environments: Dict[str, EnvironmentConfig],
        options: Optional[UploaderOptions] = None,
        environment: Optional[str] = None,
        deploy_message: Optional[str] = None,
        prompt_service: Optional[PromptService] = None,
        object_store_factory: Callable = ObjectStoreClient.from_environment,
        notification_transport=None,
        git_hash_provider: Optional[Callable[[], Optional[str]]] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.environments = environments or {}
        self.options = options or UploaderOptions()
        self.requested_environment = environment
        self.requested_message = deploy_message
        self.object_store_factory = object_store_factory
        self.clock = clock

        self.deploy_run = DeployRun(
            run_id=uuid.uuid4().hex[:10],
            build_path=os.path.abspath(build_path),
            started_at=int(clock()),
        )
        self.stage_history: List[DeployStage] = []
        self.store = None
        self.plan: List[UploadPlanEntry] = []

        self.prompt_service = prompt_service or PromptService()
        self.command_runner = CommandRunner(logger=logger)
        self.git_service = GitService(command_runner=self.command_runner, logger=logger)
        self.version_resolver = VersionResolver(
            git_hash_provider=git_hash_provider or self.git_service.short_hash,
            logger=logger,
            clock=clock,
        )
        self.entry_rewriter = EntryRewriter(logger=logger)
        self.artifact_writer = ArtifactWriter(logger=logger, console=console)
        self.upload_planner = UploadPlanner(logger=logger)
        self.upload_executor = UploadExecutor(
            logger=logger,
            console=console,
            max_concurrency=self.options.max_concurrency,
        )
        self.invalidation_trigger = InvalidationTrigger(logger=logger, console=console)
        self.notification_dispatcher = NotificationDispatcher(
            transport=notification_transport or SlackTransport(),
            logger=logger,
            console=console,
        )

    @property
    def stage(self) -> Optional[DeployStage]:
        return self.deploy_run.stage

    def _enter(self, stage: DeployStage):
        self.deploy_run.stage = stage
        self.stage_history.append(stage)
        logger.debug("Entering stage: %s", stage.value)

    def _run_step(self, stage: DeployStage, callback, *args, **kwargs):
        self._enter(stage)
        try:
            return callback(*args, **kwargs)
        except DeployerError as exc:
            if exc.fatal:
                raise
            message = str(exc)
            self.deploy_run.soft_failures.append(message)
            console.print(f"[bold red]Error:[/bold red] {message}")
            logger.error(message)
            return None

    def select_environment(self):
        run = self.deploy_run
        if not os.path.isdir(run.build_path):
            raise ConfigurationError(f"Build directory not found: {run.build_path}")
        if not self.environments:
            raise ConfigurationError(actionable_error("environments_missing"))

        names = list(self.environments)
        name = self.requested_environment or self.prompt_service.choose_environment(names)
        environment = self.environments.get(name)
        if environment is None:
            raise EnvironmentMissing(
                actionable_error("environment_missing", environment=name, available=", ".join(names))
            )

        missing = [key for key in ("region", "bucket") if not getattr(environment, key)]
        if missing:
            raise ConfigurationError(
                actionable_error("object_store_incomplete", environment=name, missing=", ".join(missing))
            )

        run.environment = name
        run.environment_config = environment
        console.print(f"[blue]You are deploying to the {name} environment.[/blue]")

        message = self.requested_message
        if message is None:
            message = self.prompt_service.deploy_message()
        run.deploy_message = message or DEFAULT_DEPLOY_MESSAGE

        self.store = self.object_store_factory(environment)

    def resolve_version(self) -> Optional[str]:
        run = self.deploy_run
        version = self.version_resolver.resolve(run, self.options.versioning)
        if version is None:
            return None

        console.print(f"[blue]Setting deployment to version: {version}[/blue]")
        entry_path = os.path.join(run.build_path, self.options.entry_html)
        self.entry_rewriter.rewrite(entry_path, version, build_path=run.build_path)
        return version

    def write_artifacts(self):
        run = self.deploy_run
        if self.options.generate_deploy_file:
            self.artifact_writer.write_deploy_record(run.build_path, run.deploy_message or "")
        self.artifact_writer.write_robots_file(run.build_path, self.options.robots)

    def plan_upload(self) -> List[UploadPlanEntry]:
        self.plan = self.upload_planner.plan(
            build_path=self.deploy_run.build_path,
            pattern=self.options.path_glob,
            version=self.deploy_run.version,
            entry_html=self.options.entry_html,
        )
        return self.plan

    def upload_files(self) -> int:
        console.print("[blue]Deployer is now running.[/blue]")
        count = self.upload_executor.execute(self.plan, self.store)
        self.deploy_run.uploaded_count = count
        return count

    def invalidate_entry(self) -> bool:
        return self.invalidation_trigger.trigger(
            self.deploy_run,
            self.store,
            self.options.entry_html,
            enabled=self.options.invalidate_entry,
        )

    def notify(self) -> int:
        return self.notification_dispatcher.dispatch(self.deploy_run, self.options.slack)

    def _print_header(self):
        console.print("")
        console.print("[bold]------------------------------------[/bold]")
        console.print("[bold]S3 Deployer is initializing.[/bold]")
        console.print("[bold]------------------------------------[/bold]")
        console.print("")

    def run(self) -> int:
        exit_code = 1
        self._print_header()

        try:
            logger.info("Starting deploy run %s for %s", self.deploy_run.run_id, self.deploy_run.build_path)

            self._run_step(DeployStage.SELECTING_ENVIRONMENT, self.select_environment)
            self._run_step(DeployStage.RESOLVING_VERSION, self.resolve_version)
            self._run_step(DeployStage.WRITING_ARTIFACTS, self.write_artifacts)
            self._run_step(DeployStage.PLANNING_UPLOAD, self.plan_upload)
            self._run_step(DeployStage.UPLOADING, self.upload_files)
            self._run_step(DeployStage.INVALIDATING, self.invalidate_entry)

            console.print(
                "[bold green]Deployment finished successfully. "
                f"{self.deploy_run.uploaded_count} files uploaded.[/bold green]"
            )

            self._run_step(DeployStage.NOTIFYING, self.notify)
            self._enter(DeployStage.DONE)

            if self.deploy_run.soft_failures:
                logger.warning(
                    "Deploy finished with %s non-fatal error(s).",
                    len(self.deploy_run.soft_failures),
                )
            exit_code = 0
            return exit_code

        except KeyboardInterrupt:
            console.print("[bold red]Operation cancelled by user.[/bold red]")
            logger.info("Operation cancelled by user")
            self._enter(DeployStage.ABORTED)
            return exit_code
        except DeployerError as exc:
            console.print(f"[bold red]Error:[/bold red] {exc}")
            logger.error(str(exc))
            if self.stage == DeployStage.UPLOADING and self.upload_executor.completed:
                logger.warning(
                    "%s file(s) were uploaded before the failure and remain in the bucket.",
                    self.upload_executor.completed,
                )
            self._enter(DeployStage.ABORTED)
            return exit_code
        except Exception as exc:
            console.print(f"[bold red]Unexpected error:[/bold red] {exc}")
            logger.exception("Unexpected error")
            self._enter(DeployStage.ABORTED)
            return exit_code
