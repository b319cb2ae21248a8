from aws_cdk import App, Fn, Stack, aws_iam as iam
from aws_cdk.assertions import Match, Template

from stackkit.policy import PolicyStatement


def test_to_dict_renders_iam_json() -> None:
    statement = PolicyStatement(
        actions=["s3:GetObject"],
        resources=["arn:aws:s3:::bucket", "arn:aws:s3:::bucket/*"],
    )

    assert statement.to_dict() == {
        "Effect": "Allow",
        "Action": ["s3:GetObject"],
        "Resource": ["arn:aws:s3:::bucket", "arn:aws:s3:::bucket/*"],
    }


def test_to_dict_copies_lists() -> None:
    actions = ["s3:GetObject"]
    statement = PolicyStatement(actions=actions, resources=["*"])

    statement.to_dict()["Action"].append("s3:PutObject")

    assert actions == ["s3:GetObject"]


def test_to_iam_deny_effect() -> None:
    statement = PolicyStatement(actions=["s3:*"], resources=["*"], effect="Deny").to_iam()

    assert statement.effect == iam.Effect.DENY
    assert statement.actions == ["s3:*"]


def test_to_iam_accepts_resolved_cloudformation_resources() -> None:
    app = App()
    stack = Stack(app, "PolicyTest")
    resource = stack.resolve(Fn.join("/", [Fn.import_value("BucketArn"), "*"]))
    role = iam.Role(stack, "Role", assumed_by=iam.ServicePrincipal("lambda.amazonaws.com"))

    role.add_to_policy(PolicyStatement(actions=["s3:GetObject"], resources=[resource]).to_iam())

    Template.from_stack(stack).has_resource_properties(
        "AWS::IAM::Policy",
        {
            "PolicyDocument": {
                "Statement": [
                    Match.object_like(
                        {
                            "Action": "s3:GetObject",
                            "Effect": "Allow",
                            "Resource": {"Fn::Join": ["/", [{"Fn::ImportValue": "BucketArn"}, "*"]]},
                        }
                    )
                ]
            }
        },
    )
