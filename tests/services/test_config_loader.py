import pytest

from s3deployer.errors import ConfigurationError
from s3deployer.models import RobotsRule, UploaderOptions, VersioningOptions
from s3deployer.services.config_loader import ConfigLoader


def test_config_loader_loads_yaml_mapping(tmp_path):
    config_file = tmp_path / ".s3deployer.yml"
    config_file.write_text(
        "environments:\n"
        "  staging:\n"
        "    region: us-east-1\n"
        "    bucket: staging-site\n"
        "options:\n"
        "  entry_html: index.html\n",
        encoding="utf-8",
    )

    loader = ConfigLoader()
    loaded = loader.load(str(config_file))

    assert loaded["environments"]["staging"]["bucket"] == "staging-site"
    assert loaded["options"]["entry_html"] == "index.html"


def test_config_loader_rejects_unknown_keys(tmp_path):
    config_file = tmp_path / ".s3deployer.yml"
    config_file.write_text("unknown_key: true\n", encoding="utf-8")

    loader = ConfigLoader()

    with pytest.raises(ConfigurationError, match="Unknown configuration keys"):
        loader.load(str(config_file))


def test_config_loader_reports_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match="Config file not found"):
        ConfigLoader().load(str(tmp_path / "missing.yml"))


def test_parse_environments_builds_typed_configs():
    environments = ConfigLoader().parse_environments(
        {
            "staging": {"region": "eu-west-1", "bucket": "site", "distribution_id": "E123"},
            "production": {"region": "us-east-1", "bucket": "prod", "profile": "deploy"},
        }
    )

    assert list(environments) == ["staging", "production"]
    assert environments["staging"].distribution_id == "E123"
    assert environments["production"].profile == "deploy"
    assert environments["production"].has_static_credentials is False


def test_parse_environments_rejects_unknown_settings():
    with pytest.raises(ConfigurationError, match="Unknown keys in environment 'staging'"):
        ConfigLoader().parse_environments({"staging": {"params": {}}})


def test_parse_options_keeps_defaults_for_missing_fields():
    options = ConfigLoader().parse_options({"invalidate_entry": False})

    defaults = UploaderOptions()
    assert options.invalidate_entry is False
    assert options.path_glob == defaults.path_glob
    assert options.entry_html == defaults.entry_html
    assert options.versioning == VersioningOptions(timestamp=True, git_hash=True, custom=None)
    assert options.robots == (RobotsRule("*", ("deploy.txt",)),)


def test_parse_options_disables_versioning_with_false():
    options = ConfigLoader().parse_options({"versioning": False})

    assert options.versioning is None


def test_parse_options_reads_partial_versioning():
    options = ConfigLoader().parse_options({"versioning": {"timestamp": True}})

    assert options.versioning == VersioningOptions(timestamp=True, git_hash=False, custom=None)


def test_parse_options_wraps_single_slack_channel():
    options = ConfigLoader().parse_options(
        {
            "slack": {
                "webhook": "https://hooks.slack.com/services/T/B/X",
                "channels": "#deploys",
                "payload": {"text": "Shipped"},
            }
        }
    )

    assert options.slack.channels == ("#deploys",)
    assert options.slack.payload == {"text": "Shipped"}


def test_parse_options_reads_robots_rules_in_order():
    options = ConfigLoader().parse_options(
        {
            "robots": [
                {"user_agent": "*", "ignores": ["deploy.txt", "admin/"]},
                {"user_agent": "BadBot", "ignores": "/"},
            ]
        }
    )

    assert options.robots == (
        RobotsRule("*", ("deploy.txt", "admin/")),
        RobotsRule("BadBot", ("/",)),
    )


def test_parse_options_rejects_invalid_concurrency():
    with pytest.raises(ConfigurationError, match="max_concurrency"):
        ConfigLoader().parse_options({"max_concurrency": 0})


def test_parse_options_rejects_unknown_option():
    with pytest.raises(ConfigurationError, match="Unknown option keys: pathGlob"):
        ConfigLoader().parse_options({"pathGlob": "**/*"})
