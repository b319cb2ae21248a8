"""
AWS provider shared by all constructs of a stack.

The provider owns resources that several constructs hook into (the shared
Lambda execution role) and reads back deployed-stack metadata (stack outputs)
from CloudFormation.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from aws_cdk import CfnOutput, Stack, Token, aws_iam as iam
from botocore.exceptions import ClientError

from . import config as config_mod

logger = logging.getLogger(__name__)


class StackOutputError(RuntimeError):
    """Raised when stack outputs cannot be read for a reason other than absence."""


class AwsProvider:
    """Per-stack AWS context handed to every construct."""

    def __init__(self, stack: Stack, cloudformation_client: Any = None) -> None:
        """
        Initialize the provider.

        Args:
            stack: The CDK stack constructs are added to
            cloudformation_client: Optional boto3 CloudFormation client (created lazily otherwise)
        """
        self.stack = stack
        self._cloudformation = cloudformation_client
        self._outputs_cache: Optional[Dict[str, str]] = None

        self.lambda_role = iam.Role(
            stack,
            "LambdaExecutionRole",
            assumed_by=iam.ServicePrincipal("lambda.amazonaws.com"),
            description="Shared execution role for the stack's Lambda functions",
        )
        self.lambda_role.add_managed_policy(
            iam.ManagedPolicy.from_aws_managed_policy_name(
                "service-role/AWSLambdaBasicExecutionRole"
            )
        )

    @property
    def stack_name(self) -> str:
        return self.stack.stack_name

    @property
    def region(self) -> str:
        """Stack region, falling back to the configured region for env-agnostic stacks."""
        region = self.stack.region
        if Token.is_unresolved(region):
            return config_mod.get_region()
        return region

    def _get_cloudformation(self) -> Any:
        if self._cloudformation is None:
            # Import boto3 lazily so synth-only runs do not pay for client setup.
            import boto3

            self._cloudformation = boto3.client("cloudformation", region_name=self.region)
        return self._cloudformation

    def _fetch_stack_outputs(self) -> Dict[str, str]:
        """
        Read all outputs of the deployed stack.

        Returns:
            Mapping of output key to output value; empty if the stack is not deployed

        Raises:
            StackOutputError: On any CloudFormation error other than a missing stack
        """
        try:
            response = self._get_cloudformation().describe_stacks(StackName=self.stack_name)
        except ClientError as e:
            error = e.response.get("Error", {})
            if error.get("Code") == "ValidationError" and "does not exist" in error.get("Message", ""):
                logger.info("stack %s is not deployed", self.stack_name)
                return {}
            raise StackOutputError(
                f"Could not describe stack {self.stack_name}: {error.get('Message') or e}"
            ) from e

        stacks = response.get("Stacks") or []
        if not stacks:
            return {}
        return {
            output["OutputKey"]: output.get("OutputValue")
            for output in stacks[0].get("Outputs") or []
            if "OutputKey" in output
        }

    def get_stack_output(self, output: CfnOutput) -> Optional[str]:
        """
        Return the deployed value of a stack output.

        Args:
            output: The CfnOutput declared in this stack

        Returns:
            The output value, or None if the stack or output does not exist
        """
        output_id = self.stack.resolve(output.logical_id)
        if self._outputs_cache is None:
            self._outputs_cache = self._fetch_stack_outputs()
        value = self._outputs_cache.get(output_id)
        if value is None:
            logger.debug("output %s not found in stack %s", output_id, self.stack_name)
        return value

    def clear_cache(self) -> None:
        """Forget previously fetched outputs (e.g. after a deploy)."""
        self._outputs_cache = None
