#!/usr/bin/env python3
"""
stackkit CLI.

Builds the constructs stack in memory (no synth, no deploy) and inspects it:

- info          Print construct outputs read from the deployed stack
- permissions   Print the IAM statements of all constructs
- references    Print construct references as CloudFormation expressions
- resolve EXPR  Resolve one `${construct:<id>.<property>}` expression

Deployed values are read with the standard AWS credential resolution (env vars,
shared config, SSO, instance profile, etc.).

Environment variables: see `stackkit.config`.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import uuid
from typing import Any, Optional

from aws_cdk import App
from botocore.exceptions import BotoCoreError

from stackkit import config as config_mod
from stackkit.app import create_stack, load_constructs_config
from stackkit.log import configure_logging
from stackkit.provider import StackOutputError
from stackkit.stacks.constructs_stack import ConstructsStack
from stackkit.validators import ConfigurationError


def build_stack(config_path: str, cloudformation_client: Any = None) -> ConstructsStack:
    """Build the constructs stack from a configuration file."""
    constructs_config = load_constructs_config(config_path)
    return create_stack(App(), constructs_config, cloudformation_client=cloudformation_client)


def collect_outputs(stack: ConstructsStack, log: logging.LoggerAdapter) -> dict:
    """Fetch every construct output from the deployed stack."""
    result = {}
    for construct_id, outputs in stack.outputs().items():
        values = {}
        for name, fetch in outputs.items():
            log.debug("fetching output %s.%s", construct_id, name)
            values[name] = fetch()
        result[construct_id] = values
    return result


def collect_permissions(stack: ConstructsStack) -> list:
    return [stack.resolve(statement.to_dict()) for statement in stack.permissions()]


def _print_json(payload: Any, pretty: bool) -> None:
    if pretty:
        print(json.dumps(payload, indent=2, ensure_ascii=False, sort_keys=True))
    else:
        print(json.dumps(payload, ensure_ascii=False))


def parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="stackkit",
        description="Inspect declarative constructs (outputs, permissions, references).",
    )
    p.add_argument(
        "--config",
        default=None,
        help="Constructs JSON file (default: STACKKIT_CONFIG or constructs.json).",
    )
    p.add_argument("--pretty", action="store_true", help="Pretty-print JSON output.")
    p.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help='Logging verbosity (default: STACKKIT_LOG_LEVEL or "INFO").',
    )
    sub = p.add_subparsers(dest="command", required=True)
    sub.add_parser("info", help="Print construct outputs from the deployed stack.")
    sub.add_parser("permissions", help="Print IAM statements of all constructs.")
    sub.add_parser("references", help="Print construct references.")
    resolve = sub.add_parser("resolve", help="Resolve a ${construct:id.property} expression.")
    resolve.add_argument("expression")
    return p.parse_args(argv)


def main(argv: Optional[list[str]] = None, cloudformation_client: Any = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    log: Optional[logging.LoggerAdapter] = None
    try:
        run_id = uuid.uuid4().hex[:12]
        log = configure_logging(
            run_id=run_id, level=args.log_level or config_mod.get_log_level()
        )

        config_path = args.config or str(config_mod.get_config_path())
        log.info("building stack %s from %s", config_mod.get_stack_name(), config_path)
        stack = build_stack(config_path, cloudformation_client=cloudformation_client)

        if args.command == "info":
            payload: Any = collect_outputs(stack, log)
        elif args.command == "permissions":
            payload = collect_permissions(stack)
        elif args.command == "references":
            payload = stack.references()
        else:
            payload = stack.resolve_reference(args.expression)

        _print_json(payload, args.pretty)
        log.info("completed successfully")
        return 0
    except ConfigurationError as e:
        (log or logging.getLogger("stackkit")).error("configuration error: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except (StackOutputError, BotoCoreError) as e:
        (log or logging.getLogger("stackkit")).error("AWS error: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 3
    except KeyboardInterrupt:
        (log or logging.getLogger("stackkit")).warning("interrupted by user")
        print("Interrupted.", file=sys.stderr)
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
