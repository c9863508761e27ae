import pytest
import requests
from rich.console import Console

from s3deployer.errors import NotificationFailed
from s3deployer.models import DeployRun, NotificationOptions
from s3deployer.services.notifications import NotificationDispatcher, SlackTransport


class DummyLogger:
    def debug(self, *_args, **_kwargs):
        return None

    def warning(self, *_args, **_kwargs):
        return None


class FakeTransport:
    def __init__(self, error=None, failing_channels=()):
        self.error = error
        self.failing_channels = set(failing_channels)
        self.sent = []

    def send(self, webhook, payload):
        if self.error:
            raise self.error
        if payload["channel"] in self.failing_channels:
            raise ConnectionError("channel_not_found")
        self.sent.append((webhook, payload))


def _run():
    return DeployRun(run_id="abc", build_path="/tmp/dist", started_at=1, deploy_message="Fix login")


def _options(**overrides):
    values = {
        "webhook": "https://hooks.slack.com/services/T/B/X",
        "channels": ("#deploys", "#qa"),
        "payload": {"text": "Staging updated"},
        "app_title": "Storefront",
        "app_link": "https://staging.example.com",
    }
    values.update(overrides)
    return NotificationOptions(**values)


def _dispatcher(transport):
    return NotificationDispatcher(transport=transport, logger=DummyLogger(), console=Console(record=True))


def test_one_payload_per_channel_with_shared_text_and_attachments():
    transport = FakeTransport()

    sent = _dispatcher(transport).dispatch(_run(), _options())

    assert sent == 2
    payloads = [payload for _, payload in transport.sent]
    assert [payload["channel"] for payload in payloads] == ["#deploys", "#qa"]
    assert payloads[0]["text"] == payloads[1]["text"] == "Staging updated"
    assert payloads[0]["attachments"] == payloads[1]["attachments"]
    attachment = payloads[0]["attachments"][0]
    assert attachment["title"] == "Storefront"
    assert attachment["title_link"] == "https://staging.example.com"
    assert attachment["fields"] == [{"title": "Context", "value": "Fix login", "short": False}]


def test_defaults_fill_unset_fields():
    transport = FakeTransport()

    _dispatcher(transport).dispatch(_run(), _options(payload={"mrkdwn": True}, channels=("#deploys",)))

    payload = transport.sent[0][1]
    assert payload["text"] == "Application deployed"
    assert payload["username"] == "Bot"
    assert payload["icon_emoji"] == ":ghost:"
    assert payload["mrkdwn"] is True


def test_attachment_is_not_generated_without_app_link():
    transport = FakeTransport()

    _dispatcher(transport).dispatch(_run(), _options(app_link=None))

    assert "attachments" not in transport.sent[0][1]


def test_operator_attachments_are_kept():
    transport = FakeTransport()
    attachments = [{"text": "custom"}]

    _dispatcher(transport).dispatch(_run(), _options(payload={"attachments": attachments}))

    assert transport.sent[0][1]["attachments"] == attachments


def test_template_is_not_mutated_between_channels():
    template = {"text": "Hello"}
    transport = FakeTransport()

    _dispatcher(transport).dispatch(_run(), _options(payload=template))

    assert template == {"text": "Hello"}


def test_missing_configuration_skips_stage():
    transport = FakeTransport()

    assert _dispatcher(transport).dispatch(_run(), None) == 0
    assert transport.sent == []


@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"channels": ()}, "No channels specified"),
        ({"payload": None}, "payload data was not found"),
    ],
)
def test_incomplete_configuration_is_a_soft_failure(overrides, message):
    transport = FakeTransport()

    with pytest.raises(NotificationFailed, match=message) as error:
        _dispatcher(transport).dispatch(_run(), _options(**overrides))

    assert error.value.fatal is False
    assert transport.sent == []


def test_transport_errors_are_soft_failures():
    transport = FakeTransport(error=ConnectionError("offline"))

    with pytest.raises(NotificationFailed, match="offline") as error:
        _dispatcher(transport).dispatch(_run(), _options())

    assert error.value.fatal is False


def test_failed_channel_does_not_stop_remaining_channels():
    transport = FakeTransport(failing_channels={"#deploys"})

    with pytest.raises(NotificationFailed, match="#deploys") as error:
        _dispatcher(transport).dispatch(_run(), _options())

    assert error.value.fatal is False
    assert "#qa" not in str(error.value)
    assert [payload["channel"] for _, payload in transport.sent] == ["#qa"]


class FakeResponse:
    def __init__(self, status_error=None):
        self.status_error = status_error

    def raise_for_status(self):
        if self.status_error:
            raise self.status_error


class FakeRequestsModule:
    RequestException = requests.RequestException

    def __init__(self, response):
        self.response = response
        self.calls = []

    def post(self, url, json=None, timeout=None):
        self.calls.append((url, json, timeout))
        return self.response


def test_slack_transport_posts_json_payload():
    requests_module = FakeRequestsModule(FakeResponse())
    transport = SlackTransport(requests_module=requests_module, timeout=5)

    transport.send("https://hooks.slack.com/x", {"text": "hi"})

    assert requests_module.calls == [("https://hooks.slack.com/x", {"text": "hi"}, 5)]


def test_slack_transport_wraps_http_errors():
    requests_module = FakeRequestsModule(FakeResponse(requests.HTTPError("404 Client Error")))
    transport = SlackTransport(requests_module=requests_module)

    with pytest.raises(NotificationFailed, match="404"):
        transport.send("https://hooks.slack.com/x", {"text": "hi"})
