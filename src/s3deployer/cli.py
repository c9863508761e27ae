import logging
import os

import click
from rich.logging import RichHandler

from .constants import DEFAULT_CONFIG_FILE
from .errors import DeployerError
from .hook import after_build
from .services.config_loader import ConfigLoader

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, show_level=False, show_path=False)],
)


@click.command()
@click.argument("build_path", required=False, type=click.Path(file_okay=False))
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help=f"Path to a YAML configuration file. Defaults to {DEFAULT_CONFIG_FILE} if present.",
)
@click.option(
    "--environment",
    "-e",
    required=False,
    help="Environment to deploy to. Prompts for one when omitted.",
)
@click.option(
    "--message",
    "-m",
    required=False,
    help="Deploy message written to deploy.txt. Prompts for one when omitted.",
)
@click.option(
    "--deploy",
    is_flag=True,
    default=False,
    help="Run the deploy even when `auto_run` is disabled in the config.",
)
@click.option("--verbose", is_flag=True, default=False, help="Enable verbose logging")
@click.option("--log-file", type=click.Path(), help="Path to log file")
def main(build_path, config, environment, message, deploy, verbose, log_file):
    """Deploy a static site build directory to S3 and notify the team."""
    logger = logging.getLogger("s3deployer")

    try:
        resolved_config = config
        if resolved_config is None:
            default_config_path = os.path.join(os.getcwd(), DEFAULT_CONFIG_FILE)
            if os.path.exists(default_config_path):
                resolved_config = default_config_path

        config_values = ConfigLoader().load(resolved_config)
    except DeployerError as exc:
        raise click.ClickException(str(exc)) from exc

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)

    try:
        exit_code = after_build(
            build_path,
            config_values,
            deploy_requested=deploy,
            environment=environment,
            deploy_message=message,
        )
    except DeployerError as exc:
        raise click.ClickException(str(exc)) from exc

    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
