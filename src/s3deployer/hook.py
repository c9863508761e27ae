"""Entry point called once a build has finished writing its output."""

import logging
from typing import Any, Dict, Optional

from .core import S3Deployer
from .errors import ConfigurationError
from .services.config_loader import ConfigLoader

logger = logging.getLogger("s3deployer")


def after_build(
    build_path: Optional[str],
    config: Dict[str, Any],
    deploy_requested: bool = False,
    environment: Optional[str] = None,
    deploy_message: Optional[str] = None,
    **deployer_kwargs,
) -> int:
    """Deploys ``build_path`` using a config mapping with ``environments`` and ``options``.

    When ``options.auto_run`` is false nothing happens unless
    ``deploy_requested`` is set. ``options.build_path`` overrides the build
    output directory passed in by the caller.
    """
    loader = ConfigLoader()
    config = loader.validate_root(config or {})
    environments = loader.parse_environments(config.get("environments"))
    options = loader.parse_options(config.get("options"))

    if not options.auto_run and not deploy_requested:
        logger.info("auto_run is disabled and no deploy was requested. Skipping deploy.")
        return 0

    resolved_build_path = options.build_path or build_path
    if not resolved_build_path:
        raise ConfigurationError("No build directory given. Pass BUILD_PATH or set `options.build_path`.")

    deployer = S3Deployer(
        build_path=resolved_build_path,
        environments=environments,
        options=options,
        environment=environment,
        deploy_message=deploy_message,
        **deployer_kwargs,
    )
    return deployer.run()
