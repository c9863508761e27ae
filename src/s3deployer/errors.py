"""Domain errors for s3deployer."""


class DeployerError(RuntimeError):
    """Raised when a deploy stage cannot complete.

    Fatal errors abort the run. Soft errors are logged by the orchestrator and
    the pipeline continues.
    """

    fatal = True

    def __init__(self, message: str, fatal=None):
        super().__init__(message)
        if fatal is not None:
            self.fatal = fatal


class ConfigurationError(DeployerError):
    """Missing or invalid environment/object-store configuration."""


class EnvironmentMissing(ConfigurationError):
    """The selected environment has no matching configuration."""


class VersionUnavailable(DeployerError):
    """Git hash versioning was requested but no hash could be read."""


class VersioningMisconfigured(DeployerError):
    """Versioning is enabled but no lever would produce a version."""


class RewriteFailed(DeployerError):
    """The entry document could not be read or written."""


class ArtifactWriteFailed(DeployerError):
    """A generated file could not be written into the build directory."""


class NoFilesFound(DeployerError):
    """The build directory produced nothing to upload."""


class UploadFailed(DeployerError):
    """An object upload failed."""


class InvalidationFailed(DeployerError):
    """The CDN invalidation request failed."""


class NotificationFailed(DeployerError):
    """A notification could not be sent."""

    fatal = False
