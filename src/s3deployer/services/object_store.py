"""boto3 bindings for S3 uploads and CloudFront invalidations."""

from typing import BinaryIO, List

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from s3deployer.errors import ConfigurationError, InvalidationFailed, UploadFailed
from s3deployer.models import EnvironmentConfig


class ObjectStoreClient:
    """Bucket-scoped wrapper around the S3 and CloudFront clients."""

    def __init__(self, bucket: str, s3_client, cloudfront_client):
        self.bucket = bucket
        self.s3 = s3_client
        self.cloudfront = cloudfront_client

    @classmethod
    def from_environment(cls, environment: EnvironmentConfig, boto3_module=boto3) -> "ObjectStoreClient":
        session_kwargs = {"region_name": environment.region}
        if environment.has_static_credentials:
            session_kwargs["aws_access_key_id"] = environment.access_key_id
            session_kwargs["aws_secret_access_key"] = environment.secret_access_key
        elif environment.profile:
            session_kwargs["profile_name"] = environment.profile

        try:
            session = boto3_module.Session(**session_kwargs)
            s3_client = session.client("s3", endpoint_url=environment.endpoint_url)
            cloudfront_client = session.client("cloudfront")
        except (BotoCoreError, ClientError) as exc:
            raise ConfigurationError(
                f"Could not create object store clients for {environment.name}: {exc}"
            ) from exc

        return cls(environment.bucket, s3_client, cloudfront_client)

    def upload(self, key: str, body: BinaryIO, visibility: str, content_type: str):
        try:
            self.s3.upload_fileobj(
                body,
                self.bucket,
                key,
                ExtraArgs={"ACL": visibility, "ContentType": content_type},
            )
        except (BotoCoreError, ClientError) as exc:
            raise UploadFailed(f"Upload failed for {key}: {exc}") from exc

    def create_invalidation(self, distribution_id: str, caller_reference: str, paths: List[str]) -> str:
        try:
            response = self.cloudfront.create_invalidation(
                DistributionId=distribution_id,
                InvalidationBatch={
                    "CallerReference": caller_reference,
                    "Paths": {"Quantity": len(paths), "Items": list(paths)},
                },
            )
        except (BotoCoreError, ClientError) as exc:
            raise InvalidationFailed(f"Invalidation: {exc}") from exc

        return response.get("Invalidation", {}).get("Id", "")
