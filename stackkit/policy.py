"""IAM policy statements exposed by constructs to the rest of the stack."""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from aws_cdk import Token, aws_iam as iam


@dataclass
class PolicyStatement:
    """
    A single IAM policy statement.

    Attributes:
        actions: IAM actions, e.g. "s3:GetObject"
        resources: Resource ARNs (plain strings or CloudFormation expressions)
        effect: "Allow" or "Deny"
    """

    actions: List[str]
    resources: List[Any]
    effect: str = field(default="Allow")

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to the IAM JSON representation.

        Returns:
            Dictionary with Effect, Action and Resource keys
        """
        return {
            "Effect": self.effect,
            "Action": list(self.actions),
            "Resource": list(self.resources),
        }

    def to_iam(self) -> iam.PolicyStatement:
        """Build the equivalent CDK policy statement."""
        return iam.PolicyStatement(
            effect=iam.Effect.DENY if self.effect == "Deny" else iam.Effect.ALLOW,
            actions=list(self.actions),
            resources=[Token.as_string(r) for r in self.resources],
        )
