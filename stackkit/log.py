"""Logging setup shared by the CDK app and the CLI."""

from __future__ import annotations

import logging
from typing import Callable, Optional

# Factory in place before the first configure_logging call; later calls wrap
# this one instead of stacking on the previous run.
_base_record_factory: Optional[Callable[..., logging.LogRecord]] = None


class _RunIdFilter(logging.Filter):
    """
    Ensure every log record has a run_id attribute for formatting.
    """

    def __init__(self, run_id: str) -> None:
        super().__init__()
        self._run_id = run_id

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003 - logging uses `filter` name
        if not hasattr(record, "run_id"):
            record.run_id = self._run_id
        return True


def coerce_log_level(level: str) -> int:
    level_upper = (level or "").strip().upper()
    if not level_upper:
        return logging.INFO
    return logging._nameToLevel.get(level_upper, logging.INFO)


def configure_logging(*, run_id: str, level: str, name: str = "stackkit") -> logging.LoggerAdapter:
    """
    Configure logging for CLI and synth runs.

    - Uses root logger configuration only if nothing is configured yet.
    - Adds a run_id to all records so a whole run can be correlated.
    """
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=coerce_log_level(level),
            format="%(asctime)s %(levelname)s [%(name)s] [run=%(run_id)s] %(message)s",
        )
    else:
        root.setLevel(coerce_log_level(level))

    # Records from boto3/botocore need run_id too, not only ours.
    global _base_record_factory
    if _base_record_factory is None:
        _base_record_factory = logging.getLogRecordFactory()
    old_factory = _base_record_factory

    def record_factory(*args, **kwargs):  # type: ignore[no-untyped-def]
        record = old_factory(*args, **kwargs)
        if not hasattr(record, "run_id"):
            record.run_id = run_id
        return record

    logging.setLogRecordFactory(record_factory)

    for h in root.handlers:
        h.addFilter(_RunIdFilter(run_id))

    # run_id comes from the record factory; passing it in `extra` as well
    # would raise KeyError on overwrite.
    return logging.LoggerAdapter(logging.getLogger(name), {})
