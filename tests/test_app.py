import json

import pytest
from aws_cdk.assertions import Template

from stackkit.app import create_app, load_constructs_config
from stackkit.stacks.constructs_stack import ConstructsStack
from stackkit.validators import ConfigurationError


def _write(tmp_path, payload) -> str:
    path = tmp_path / "constructs.json"
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")
    return str(path)


def test_load_constructs_config(tmp_path) -> None:
    path = _write(tmp_path, {"constructs": {"avatars": {"type": "storage"}}})

    assert load_constructs_config(path) == {"avatars": {"type": "storage"}}


def test_load_constructs_config_without_constructs_key(tmp_path) -> None:
    assert load_constructs_config(_write(tmp_path, {})) == {}


@pytest.mark.parametrize(
    "payload, message",
    [
        ("{not json", "Invalid JSON"),
        ("[]", "Top-level value must be an object"),
        ({"constructs": ["avatars"]}, "constructs: Must be an object"),
    ],
)
def test_load_constructs_config_rejects_bad_files(tmp_path, payload, message) -> None:
    with pytest.raises(ConfigurationError, match=message):
        load_constructs_config(_write(tmp_path, payload))


def test_load_constructs_config_missing_file(tmp_path) -> None:
    with pytest.raises(ConfigurationError, match="Cannot read file"):
        load_constructs_config(tmp_path / "missing.json")


def test_create_app_builds_configured_stack(tmp_path, monkeypatch) -> None:
    path = _write(tmp_path, {"constructs": {"avatars": {"type": "storage"}}})
    monkeypatch.setenv("STACKKIT_ENVIRONMENT", "staging")
    monkeypatch.setenv("CDK_DEFAULT_ACCOUNT", "123456789012")
    monkeypatch.setenv("CDK_DEFAULT_REGION", "eu-west-1")

    app = create_app(path)

    stack = app.node.find_child("StackKit-staging")
    assert isinstance(stack, ConstructsStack)
    assert stack.environment_name == "staging"
    assert stack.region == "eu-west-1"
    Template.from_stack(stack).resource_count_is("AWS::S3::Bucket", 1)


def test_create_app_uses_config_from_environment(tmp_path, monkeypatch) -> None:
    path = _write(tmp_path, {"constructs": {"a": {"type": "storage"}, "b": {"type": "storage"}}})
    monkeypatch.setenv("STACKKIT_CONFIG", path)
    monkeypatch.setenv("STACKKIT_STACK_NAME", "MyStack")

    app = create_app()

    stack = app.node.find_child("MyStack")
    Template.from_stack(stack).resource_count_is("AWS::S3::Bucket", 2)
