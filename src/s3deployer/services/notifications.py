"""Slack deploy notifications."""

import copy
from typing import Any, Dict, List, Optional

import requests

from s3deployer.constants import (
    SLACK_ATTACHMENT_TEXT,
    SLACK_DEFAULT_ICON_EMOJI,
    SLACK_DEFAULT_TEXT,
    SLACK_DEFAULT_USERNAME,
)
from s3deployer.errors import NotificationFailed
from s3deployer.models import DeployRun, NotificationOptions, NotificationPayload


class SlackTransport:
    """Posts payloads to a Slack incoming webhook."""

    def __init__(self, requests_module=requests, timeout: float = 10.0):
        self.requests = requests_module
        self.timeout = timeout

    def send(self, webhook: str, payload: Dict[str, Any]):
        try:
            response = self.requests.post(webhook, json=payload, timeout=self.timeout)
            response.raise_for_status()
        except self.requests.RequestException as exc:
            raise NotificationFailed(f"Slack webhook request failed: {exc}") from exc


def build_attachment(text: str, options: NotificationOptions, deploy_message: Optional[str]) -> List[Dict[str, Any]]:
    return [
        {
            "fallback": text,
            "color": "good",
            "title": options.app_title,
            "title_link": options.app_link,
            "text": SLACK_ATTACHMENT_TEXT,
            "fields": [
                {
                    "title": "Context",
                    "value": deploy_message,
                    "short": False,
                }
            ],
        }
    ]


class NotificationDispatcher:
    """Sends one payload per configured channel.

    Every failure raised here is soft: a notification problem never fails a
    deploy that already succeeded.
    """

    def __init__(self, transport, logger, console):
        self.transport = transport
        self.logger = logger
        self.console = console

    def build_payloads(self, run: DeployRun, options: NotificationOptions) -> List[NotificationPayload]:
        if not options.channels:
            raise NotificationFailed("Slack was unable to be notified. No channels specified.")
        if not options.payload:
            raise NotificationFailed("Slack payload data was not found. Slack notifier is aborting.")

        payloads = []
        for channel in options.channels:
            payload = NotificationPayload.from_template(copy.deepcopy(options.payload))
            payload.text = payload.text or SLACK_DEFAULT_TEXT
            payload.username = payload.username or SLACK_DEFAULT_USERNAME
            payload.icon_emoji = payload.icon_emoji or SLACK_DEFAULT_ICON_EMOJI

            if not payload.attachments and options.app_title and options.app_link:
                payload.attachments = build_attachment(payload.text, options, run.deploy_message)

            payload.channel = channel
            payloads.append(payload)
        return payloads

    def dispatch(self, run: DeployRun, options: Optional[NotificationOptions]) -> int:
        if options is None:
            self.logger.debug("No Slack configuration. Skipping notifications.")
            return 0

        if not options.webhook:
            raise NotificationFailed("Slack was unable to be notified. No webhook specified.")

        payloads = self.build_payloads(run, options)
        self.console.print("[blue]Sending notifications to Slack...[/blue]")

        failures = []
        for payload in payloads:
            self.logger.debug("Notifying Slack channel %s", payload.channel)
            try:
                self.transport.send(options.webhook, payload.to_dict())
            except Exception as exc:
                self.logger.warning("Slack notification to %s failed: %s", payload.channel, exc)
                failures.append(f"{payload.channel} ({exc})")

        if failures:
            raise NotificationFailed(f"Slack notification failed for {', '.join(failures)}")

        self.console.print("[green]Slack has been notified.[/green]")
        return len(payloads)
