import pytest

from s3deployer.errors_catalog import actionable_error


def test_actionable_error_formats_message_with_suggested_action():
    message = actionable_error("environment_missing", environment="qa", available="staging, production")

    assert "No qa environment configuration found." in message
    assert "Suggested action: Choose one of: staging, production." in message


def test_actionable_error_rejects_unknown_code():
    with pytest.raises(KeyError):
        actionable_error("does_not_exist")
