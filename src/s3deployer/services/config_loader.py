"""Configuration loader for s3deployer."""

from dataclasses import fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from s3deployer.errors import ConfigurationError
from s3deployer.models import (
    EnvironmentConfig,
    NotificationOptions,
    RobotsRule,
    UploaderOptions,
    VersioningOptions,
)


class ConfigLoader:
    """Loads the YAML deploy configuration and builds typed option objects."""

    SUPPORTED_KEYS = {"environments", "options"}
    ENVIRONMENT_KEYS = {
        "region",
        "bucket",
        "access_key_id",
        "secret_access_key",
        "profile",
        "distribution_id",
        "endpoint_url",
    }
    VERSIONING_KEYS = {"timestamp", "git_hash", "custom"}
    SLACK_KEYS = {"webhook", "channels", "payload", "app_title", "app_link"}

    def load(self, config_path: Optional[str]) -> Dict[str, Any]:
        if not config_path:
            return {}

        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise ConfigurationError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return {}
        return self.validate_root(parsed)

    def validate_root(self, config: Any) -> Dict[str, Any]:
        if not isinstance(config, dict):
            raise ConfigurationError("Config file must contain a YAML mapping at the root.")

        self._reject_unknown(config, self.SUPPORTED_KEYS, "configuration keys")
        return config

    def parse_environments(self, raw: Any) -> Dict[str, EnvironmentConfig]:
        if not raw:
            return {}
        if not isinstance(raw, dict):
            raise ConfigurationError("`environments` must be a mapping of name to settings.")

        environments = {}
        for name, settings in raw.items():
            settings = settings or {}
            if not isinstance(settings, dict):
                raise ConfigurationError(f"Environment '{name}' must be a mapping.")
            self._reject_unknown(settings, self.ENVIRONMENT_KEYS, f"keys in environment '{name}'")
            environments[str(name)] = EnvironmentConfig(
                name=str(name),
                region=settings.get("region"),
                bucket=settings.get("bucket"),
                access_key_id=settings.get("access_key_id"),
                secret_access_key=settings.get("secret_access_key"),
                profile=settings.get("profile"),
                distribution_id=settings.get("distribution_id"),
                endpoint_url=settings.get("endpoint_url"),
            )
        return environments

    def parse_options(self, raw: Any) -> UploaderOptions:
        """Merges operator options over the defaults, one field at a time."""
        options = UploaderOptions()
        if not raw:
            return options
        if not isinstance(raw, dict):
            raise ConfigurationError("`options` must be a mapping.")

        known = {item.name for item in fields(UploaderOptions)}
        self._reject_unknown(raw, known, "option keys")

        updates: Dict[str, Any] = {}
        for key, value in raw.items():
            if key == "versioning":
                updates[key] = self._parse_versioning(value)
            elif key == "robots":
                updates[key] = self._parse_robots(value)
            elif key == "slack":
                updates[key] = self._parse_slack(value)
            elif key == "max_concurrency":
                updates[key] = self._parse_concurrency(value)
            elif key in {"auto_run", "invalidate_entry", "generate_deploy_file"}:
                updates[key] = bool(value)
            elif value is not None:
                updates[key] = str(value)

        return replace(options, **updates)

    def _parse_versioning(self, value: Any) -> Optional[VersioningOptions]:
        if value is None or value is False:
            return None
        if value is True:
            return VersioningOptions()
        if not isinstance(value, dict):
            raise ConfigurationError("`versioning` must be false or a mapping.")
        self._reject_unknown(value, self.VERSIONING_KEYS, "versioning keys")

        custom = value.get("custom")
        return VersioningOptions(
            timestamp=value.get("timestamp") is True,
            git_hash=value.get("git_hash") is True,
            custom=str(custom) if custom else None,
        )

    def _parse_robots(self, value: Any):
        if not value:
            return ()
        if not isinstance(value, list):
            raise ConfigurationError("`robots` must be a list of rules.")

        rules = []
        for rule in value:
            if not isinstance(rule, dict) or "user_agent" not in rule:
                raise ConfigurationError("Each robots rule needs a `user_agent`.")
            ignores = rule.get("ignores") or []
            if isinstance(ignores, str):
                ignores = [ignores]
            rules.append(
                RobotsRule(
                    user_agent=str(rule["user_agent"]),
                    ignore_paths=tuple(str(item) for item in ignores),
                )
            )
        return tuple(rules)

    def _parse_slack(self, value: Any) -> Optional[NotificationOptions]:
        if not value:
            return None
        if not isinstance(value, dict):
            raise ConfigurationError("`slack` must be a mapping.")
        self._reject_unknown(value, self.SLACK_KEYS, "slack keys")

        channels = value.get("channels") or ()
        if isinstance(channels, str):
            channels = (channels,)

        payload = value.get("payload")
        if payload is not None and not isinstance(payload, dict):
            raise ConfigurationError("`slack.payload` must be a mapping.")

        return NotificationOptions(
            webhook=value.get("webhook"),
            channels=tuple(str(channel) for channel in channels),
            payload=payload,
            app_title=value.get("app_title"),
            app_link=value.get("app_link"),
        )

    @staticmethod
    def _parse_concurrency(value: Any) -> Optional[int]:
        if value is None:
            return None
        try:
            limit = int(value)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError("`max_concurrency` must be a positive integer.") from exc
        if limit < 1:
            raise ConfigurationError("`max_concurrency` must be a positive integer.")
        return limit

    @staticmethod
    def _reject_unknown(values: Dict[str, Any], supported, label: str):
        unknown = sorted(set(values.keys()) - set(supported))
        if unknown:
            unknown_list = ", ".join(str(key) for key in unknown)
            raise ConfigurationError(f"Unknown {label}: {unknown_list}")
