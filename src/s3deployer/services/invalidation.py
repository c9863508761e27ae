"""CloudFront invalidation of the entry document."""

from s3deployer.errors import InvalidationFailed
from s3deployer.models import DeployRun


def caller_reference(run: DeployRun) -> str:
    timestamp = run.timestamp if run.timestamp is not None else run.started_at
    return f"{timestamp}-{run.run_id}"


class InvalidationTrigger:
    def __init__(self, logger, console):
        self.logger = logger
        self.console = console

    def trigger(self, run: DeployRun, store, entry_html: str, enabled: bool = True) -> bool:
        """Invalidates ``/{entry_html}``. Returns ``False`` when disabled."""
        if not enabled:
            self.logger.debug("Entry invalidation is disabled.")
            return False

        distribution_id = run.environment_config.distribution_id if run.environment_config else None
        if not distribution_id:
            raise InvalidationFailed("No distribution ID provided", fatal=False)

        path = f"/{entry_html}"
        invalidation_id = store.create_invalidation(distribution_id, caller_reference(run), [path])
        self.logger.info("Invalidation %s created for %s", invalidation_id or "<unknown>", path)
        self.console.print(f"[green]{entry_html} was invalidated successfully.[/green]")
        return True
