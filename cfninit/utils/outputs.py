"""
Stack output helpers.

Writes resolved Pulumi outputs to a dotenv file for local tooling.
"""

import logging
from pathlib import Path
from typing import Any

import pulumi
from dotenv import set_key

logger = logging.getLogger(__name__)


def write_env_file(values: dict[str, Any], filename: str) -> Path:
    """
    Write plain values to a dotenv file, one upper-cased key per output.

    Existing keys are updated in place; other lines are preserved.
    """
    path = Path(filename)
    path.touch(exist_ok=True)

    for key, value in values.items():
        set_key(str(path), key.upper(), "" if value is None else str(value))

    logger.info("Wrote %d outputs to %s", len(values), path)
    return path


def write_outputs_to_env(
    outputs: dict[str, pulumi.Input[Any]],
    filename: str,
) -> pulumi.Output[str]:
    """
    Write stack outputs to a dotenv file once they resolve.

    Nothing is written during preview, where outputs are still unknown.

    Args:
        outputs: Output name to value (plain or pulumi.Output)
        filename: Target dotenv file

    Returns:
        Output resolving to the written file path
    """
    return pulumi.Output.all(**outputs).apply(
        lambda values: str(write_env_file(values, filename))
    )
