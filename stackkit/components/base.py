"""Contract shared by every construct type."""

from typing import Callable, Dict, List, Optional

from ..policy import PolicyStatement


class AwsConstruct:
    """
    Interface implemented by construct types.

    - permissions: IAM statements the stack's functions need to use the construct
    - outputs: lazily fetched values of the deployed construct
    - commands: operational commands the construct offers
    - references: CloudFormation values other parts of the stack can point at
    """

    def permissions(self) -> List[PolicyStatement]:
        return []

    def outputs(self) -> Dict[str, Callable[[], Optional[str]]]:
        return {}

    def commands(self) -> Dict[str, Callable[[], None]]:
        return {}

    def references(self) -> Dict[str, str]:
        return {}
