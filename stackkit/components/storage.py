"""
Storage construct: a private, versioned S3 bucket with secure defaults.

Configuration
-------------
    {"type": "storage", "archive": 45, "encryption": "s3"}

- `archive`: archival age in days (>= 30, default 45)
- `encryption`: "s3" (S3-managed keys, default) or "kms" (AWS-managed KMS key)

Provisioned resources
---------------------
- Block all public access
- Server-side encryption
- Enforce SSL (bucket policy denying non-TLS requests)
- Versioning enabled
- Current objects move to Intelligent-Tiering immediately
- Noncurrent versions expire after 30 days

The shared Lambda role of the stack gets read/write access to the bucket.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional

from aws_cdk import (
    CfnOutput,
    Duration,
    Fn,
    Stack,
    aws_s3 as s3,
)
from constructs import Construct

from ..policy import PolicyStatement
from ..provider import AwsProvider
from ..validators import ConfigurationError, resolve_configuration, validate_configuration
from .base import AwsConstruct


STORAGE_DEFINITION: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "type": {"const": "storage"},
        "archive": {"type": "number", "minimum": 30},
        "encryption": {
            "anyOf": [{"const": "s3"}, {"const": "kms"}],
        },
    },
    "additionalProperties": False,
    "required": ["type"],
}

STORAGE_DEFAULTS: Dict[str, Any] = {
    "archive": 45,
    "encryption": "s3",
}

ENCRYPTION_OPTIONS = {
    "s3": s3.BucketEncryption.S3_MANAGED,
    "kms": s3.BucketEncryption.KMS_MANAGED,
}

NONCURRENT_VERSION_EXPIRATION_DAYS = 30

BUCKET_ACTIONS = [
    "s3:PutObject",
    "s3:GetObject",
    "s3:DeleteObject",
    "s3:ListBucket",
]


class Storage(Construct, AwsConstruct):
    """S3 bucket exposed to the stack's Lambda functions."""

    def __init__(
        self,
        scope: Construct,
        provider: AwsProvider,
        construct_id: str,
        configuration: Mapping[str, Any],
    ) -> None:
        """
        Initialize the storage construct.

        Args:
            scope: The parent construct
            provider: The AWS provider of the stack
            construct_id: The logical ID of the construct
            configuration: User configuration, see STORAGE_DEFINITION

        Raises:
            ConfigurationError: If the configuration is invalid (nothing is created)
        """
        result = validate_configuration(configuration, STORAGE_DEFINITION)
        if not result.is_valid:
            raise ConfigurationError(construct_id, result.errors)

        super().__init__(scope, construct_id)
        self.provider = provider
        self.configuration = resolve_configuration(configuration, STORAGE_DEFAULTS)

        self.bucket = s3.Bucket(
            self,
            "Bucket",
            encryption=ENCRYPTION_OPTIONS[self.configuration["encryption"]],
            versioned=True,
            block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
            enforce_ssl=True,
            lifecycle_rules=[
                s3.LifecycleRule(
                    transitions=[
                        s3.Transition(
                            storage_class=s3.StorageClass.INTELLIGENT_TIERING,
                            transition_after=Duration.days(0),
                        )
                    ],
                ),
                s3.LifecycleRule(
                    noncurrent_version_expiration=Duration.days(
                        NONCURRENT_VERSION_EXPIRATION_DAYS
                    ),
                ),
            ],
        )

        # Allow all Lambda functions of the stack to read/write the bucket
        self.bucket.grant_read_write(provider.lambda_role)

        self.bucket_name_output = CfnOutput(
            self,
            "BucketName",
            value=self.bucket.bucket_name,
        )

    def permissions(self) -> List[PolicyStatement]:
        return [
            PolicyStatement(
                actions=list(BUCKET_ACTIONS),
                resources=[
                    self.bucket.bucket_arn,
                    Stack.of(self).resolve(Fn.join("/", [self.bucket.bucket_arn, "*"])),
                ],
            )
        ]

    def outputs(self) -> Dict[str, Callable[[], Optional[str]]]:
        return {
            "bucketName": self.get_bucket_name,
        }

    def commands(self) -> Dict[str, Callable[[], None]]:
        return {}

    def references(self) -> Dict[str, str]:
        return {
            "bucketArn": self.bucket.bucket_arn,
        }

    def get_bucket_name(self) -> Optional[str]:
        """Return the deployed bucket name, or None if the stack is not deployed."""
        return self.provider.get_stack_output(self.bucket_name_output)
