"""Deploy version resolution."""

import time
from typing import Callable, Optional

from s3deployer.errors import VersioningMisconfigured, VersionUnavailable
from s3deployer.errors_catalog import actionable_error
from s3deployer.models import DeployRun, VersioningOptions


class VersionResolver:
    """Builds the version tag used as the key prefix for uploaded assets.

    ``git_hash_provider`` returns the short commit hash or ``None``. ``clock``
    returns the current unix time and is only read when the timestamp lever is
    enabled.
    """

    def __init__(self, git_hash_provider: Callable[[], Optional[str]], logger, clock=time.time):
        self.git_hash_provider = git_hash_provider
        self.logger = logger
        self.clock = clock

    def resolve(self, run: DeployRun, versioning: Optional[VersioningOptions]) -> Optional[str]:
        if versioning is None:
            self.logger.info("Versioning is disabled. Files will be uploaded with bare paths.")
            run.version = None
            return None

        if versioning.custom:
            run.version = versioning.custom
            return run.version

        if not (versioning.timestamp or versioning.git_hash):
            raise VersioningMisconfigured(actionable_error("versioning_misconfigured"))

        version = ""
        if versioning.timestamp:
            run.timestamp = int(self.clock())
            version += str(run.timestamp)

        if versioning.git_hash:
            git_hash = self.git_hash_provider()
            if not git_hash:
                raise VersionUnavailable(actionable_error("git_hash_unavailable"))
            run.git_hash = git_hash
            if versioning.timestamp:
                version += "-"
            version += git_hash

        run.version = version
        return version
