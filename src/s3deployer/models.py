"""Shared domain models for s3deployer."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class DeployStage(str, Enum):
    SELECTING_ENVIRONMENT = "selecting_environment"
    RESOLVING_VERSION = "resolving_version"
    WRITING_ARTIFACTS = "writing_artifacts"
    PLANNING_UPLOAD = "planning_upload"
    UPLOADING = "uploading"
    INVALIDATING = "invalidating"
    NOTIFYING = "notifying"
    DONE = "done"
    ABORTED = "aborted"


@dataclass(frozen=True)
class EnvironmentConfig:
    """Object store connection parameters for one named environment."""

    name: str
    region: Optional[str]
    bucket: Optional[str]
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    profile: Optional[str] = None
    distribution_id: Optional[str] = None
    endpoint_url: Optional[str] = None

    @property
    def has_static_credentials(self) -> bool:
        return bool(self.access_key_id and self.secret_access_key)


@dataclass(frozen=True)
class VersioningOptions:
    timestamp: bool = True
    git_hash: bool = True
    custom: Optional[str] = None


@dataclass(frozen=True)
class RobotsRule:
    user_agent: str
    ignore_paths: Tuple[str, ...] = ()


@dataclass(frozen=True)
class NotificationOptions:
    webhook: Optional[str] = None
    channels: Tuple[str, ...] = ()
    payload: Optional[Dict[str, Any]] = None
    app_title: Optional[str] = None
    app_link: Optional[str] = None


def _default_robots() -> Tuple[RobotsRule, ...]:
    return (RobotsRule(user_agent="*", ignore_paths=("deploy.txt",)),)


@dataclass(frozen=True)
class UploaderOptions:
    """Uploader behaviour. Operator values are merged over these defaults."""

    path_glob: str = "**/*.*"
    entry_html: str = "index.html"
    auto_run: bool = True
    invalidate_entry: bool = True
    generate_deploy_file: bool = True
    versioning: Optional[VersioningOptions] = field(default_factory=VersioningOptions)
    robots: Tuple[RobotsRule, ...] = field(default_factory=_default_robots)
    slack: Optional[NotificationOptions] = None
    build_path: Optional[str] = None
    max_concurrency: Optional[int] = None


@dataclass(frozen=True)
class UploadPlanEntry:
    source_path: str
    destination_key: str
    content_type: str


@dataclass
class NotificationPayload:
    """One Slack webhook message, addressed to a single channel."""

    channel: Optional[str] = None
    text: Optional[str] = None
    username: Optional[str] = None
    icon_emoji: Optional[str] = None
    attachments: Optional[List[Dict[str, Any]]] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_template(cls, template: Dict[str, Any]) -> "NotificationPayload":
        data = dict(template)
        return cls(
            channel=data.pop("channel", None),
            text=data.pop("text", None),
            username=data.pop("username", None),
            icon_emoji=data.pop("icon_emoji", None),
            attachments=data.pop("attachments", None),
            extra=data,
        )

    def to_dict(self) -> Dict[str, Any]:
        payload = dict(self.extra)
        payload.update(
            {
                "channel": self.channel,
                "text": self.text,
                "username": self.username,
                "icon_emoji": self.icon_emoji,
            }
        )
        if self.attachments:
            payload["attachments"] = self.attachments
        return payload


@dataclass
class DeployRun:
    """Run-scoped state owned by the orchestrator and passed through each stage."""

    run_id: str
    build_path: str
    started_at: int
    environment: Optional[str] = None
    environment_config: Optional[EnvironmentConfig] = None
    version: Optional[str] = None
    git_hash: Optional[str] = None
    timestamp: Optional[int] = None
    deploy_message: Optional[str] = None
    stage: Optional[DeployStage] = None
    uploaded_count: int = 0
    soft_failures: List[str] = field(default_factory=list)
