"""Generated files written into the build directory before upload."""

import os
from typing import Iterable

from s3deployer.constants import DEPLOY_FILE_NAME, ROBOTS_FILE_NAME
from s3deployer.errors import ArtifactWriteFailed
from s3deployer.errors_catalog import actionable_error
from s3deployer.models import RobotsRule


def render_robots(rules: Iterable[RobotsRule]) -> str:
    content = ""
    for rule in rules:
        content += f"User-agent: {rule.user_agent}\n"
        for path in rule.ignore_paths:
            content += f"Disallow: {path}\n"
        content += "\n"
    return content


class ArtifactWriter:
    """Writes the deploy record and the robots policy file.

    A deploy record that cannot be written aborts the run. A robots file that
    cannot be written is only logged.
    """

    def __init__(self, logger, console):
        self.logger = logger
        self.console = console

    def write_deploy_record(self, build_path: str, message: str) -> str:
        path = os.path.join(build_path, DEPLOY_FILE_NAME)
        try:
            with open(path, "w", encoding="utf-8") as file_obj:
                file_obj.write(message)
        except OSError as exc:
            raise ArtifactWriteFailed(
                actionable_error("deploy_record_failed", path=DEPLOY_FILE_NAME, reason=str(exc))
            ) from exc

        self.logger.info("%s was created.", DEPLOY_FILE_NAME)
        return path

    def write_robots_file(self, build_path: str, rules: Iterable[RobotsRule]) -> bool:
        rules = list(rules)
        if not rules:
            return False

        path = os.path.join(build_path, ROBOTS_FILE_NAME)
        try:
            with open(path, "w", encoding="utf-8") as file_obj:
                file_obj.write(render_robots(rules))
        except OSError as exc:
            message = f"{ROBOTS_FILE_NAME} was unable to be created: {exc}"
            self.console.print(f"[bold red]Error:[/bold red] {message}")
            self.logger.error(message)
            return False

        self.logger.info("%s was created.", ROBOTS_FILE_NAME)
        return True
