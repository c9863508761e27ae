"""Source-control lookups used for deploy versioning."""

from typing import Optional

from s3deployer.errors import DeployerError


class GitService:
    """Reads the short commit hash of the current checkout."""

    def __init__(self, command_runner, logger, cwd: Optional[str] = None):
        self.command_runner = command_runner
        self.logger = logger
        self.cwd = cwd

    def short_hash(self) -> Optional[str]:
        try:
            result = self.command_runner.run(
                ["git", "rev-parse", "--short", "HEAD"],
                check=False,
                capture_output=True,
                cwd=self.cwd,
            )
        except DeployerError as exc:
            self.logger.debug("Git hash lookup failed: %s", exc)
            return None

        if result.returncode != 0:
            return None
        return (result.stdout or "").strip() or None
