"""Fixed names and defaults shared across s3deployer."""

DEPLOY_FILE_NAME = "deploy.txt"
ROBOTS_FILE_NAME = "robots.txt"
DEFAULT_CONFIG_FILE = ".s3deployer.yml"

DEFAULT_DEPLOY_MESSAGE = "No deploy message specified."
PUBLIC_READ = "public-read"
FALLBACK_CONTENT_TYPE = "application/octet-stream"

SLACK_DEFAULT_TEXT = "Application deployed"
SLACK_DEFAULT_USERNAME = "Bot"
SLACK_DEFAULT_ICON_EMOJI = ":ghost:"
SLACK_ATTACHMENT_TEXT = "Please notify the corresponding channels if you find any bugs."
DEFAULT_MAX_CONCURRENCY = 10
