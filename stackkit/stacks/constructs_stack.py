"""Stack that provisions every construct declared in the constructs configuration."""

from typing import Any, Callable, Dict, List, Mapping, Optional

from aws_cdk import CfnOutput, Stack
from constructs import Construct

from stackkit.components import build_constructs, resolve_reference
from stackkit.components.base import AwsConstruct
from stackkit.policy import PolicyStatement
from stackkit.provider import AwsProvider


class ConstructsStack(Stack):
    """Stack for the configured constructs and the shared Lambda role."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        environment_name: str,
        constructs_config: Mapping[str, Any],
        cloudformation_client: Any = None,
        **kwargs
    ) -> None:
        """
        Initialize the constructs stack.

        Args:
            scope: The parent construct
            construct_id: The logical ID of the stack
            environment_name: The environment name (dev, prod, etc.)
            constructs_config: Mapping of construct id to construct configuration
            cloudformation_client: Optional boto3 client used to read stack outputs
            **kwargs: Additional arguments to pass to Stack
        """
        super().__init__(scope, construct_id, **kwargs)
        self.environment_name = environment_name

        self.provider = AwsProvider(self, cloudformation_client=cloudformation_client)
        self.constructs = build_constructs(self, self.provider, constructs_config)

        CfnOutput(
            self,
            "LambdaExecutionRoleArn",
            value=self.provider.lambda_role.role_arn,
            description="Shared Lambda execution role ARN",
        )

    def get_construct(self, construct_id: str) -> Optional[AwsConstruct]:
        return self.constructs.get(construct_id)

    def permissions(self) -> List[PolicyStatement]:
        """Return the IAM statements of all constructs, in configuration order."""
        statements: List[PolicyStatement] = []
        for construct in self.constructs.values():
            statements.extend(construct.permissions())
        return statements

    def outputs(self) -> Dict[str, Dict[str, Callable[[], Optional[str]]]]:
        return {
            construct_id: construct.outputs()
            for construct_id, construct in self.constructs.items()
        }

    def references(self) -> Dict[str, Dict[str, Any]]:
        """Return every construct reference resolved to its CloudFormation expression."""
        return {
            construct_id: {
                name: self.resolve(value)
                for name, value in construct.references().items()
            }
            for construct_id, construct in self.constructs.items()
        }

    def resolve_reference(self, expression: str) -> Any:
        """Resolve a `${construct:id.property}` expression to CloudFormation."""
        return self.resolve(resolve_reference(self.constructs, expression))
