"""
s3deployer - Static site deploys to S3 with CloudFront invalidation and Slack notifications
"""

__version__ = "0.1.0"

from .core import S3Deployer
from .errors import DeployerError
from .hook import after_build

__all__ = ["S3Deployer", "DeployerError", "after_build"]
