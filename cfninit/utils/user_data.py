"""
First-boot script rendering for compute pools.

Turns a BootstrapRecipe into the bash user data each instance runs once:

1. Resolve instance id and region from IMDSv2.
2. Run the recipe steps in declared order under ``set -euo pipefail``:
   - PackageStep  -> ``yum install -y <pkg>``
   - CommandStep  -> the command, verbatim
   - FileStep     -> quoted heredoc (no shell expansion) + chmod
   - ServiceStep  -> ``systemctl enable`` / ``systemctl restart``
3. Signal the auto scaling group:
   - every step succeeded -> CONTINUE (instance goes InService)
   - any step failed      -> ABANDON via the ERR trap (instance is replaced)

If the instance never signals, the lifecycle hook times out and its default
result (ABANDON) applies.
"""

import base64
import posixpath
import shlex
from dataclasses import dataclass

from cfninit.configs.topology import (
    BootstrapRecipe,
    BootstrapStep,
    CommandStep,
    FileStep,
    PackageStep,
    ServiceStep,
    TopologyConfigError,
)

HEREDOC_DELIMITER = "CFNINIT_EOF"

_PREAMBLE = """#!/bin/bash
set -euo pipefail

IMDS=http://169.254.169.254/latest
TOKEN=$(curl -sf -X PUT "$IMDS/api/token" -H "X-aws-ec2-metadata-token-ttl-seconds: 300")
INSTANCE_ID=$(curl -sf -H "X-aws-ec2-metadata-token: $TOKEN" "$IMDS/meta-data/instance-id")
REGION=$(curl -sf -H "X-aws-ec2-metadata-token: $TOKEN" "$IMDS/meta-data/placement/region")
"""

_SIGNAL_FUNCTION = """
signal() {{
  aws autoscaling complete-lifecycle-action \\
    --lifecycle-hook-name {hook} \\
    --auto-scaling-group-name {group} \\
    --lifecycle-action-result "$1" \\
    --instance-id "$INSTANCE_ID" \\
    --region "$REGION" || true
}}
trap 'signal ABANDON' ERR
"""


@dataclass(frozen=True)
class LifecycleSignal:
    """Where an instance reports bootstrap completion."""
    hook_name: str
    group_name: str


def _render_step(step: BootstrapStep) -> list[str]:
    if isinstance(step, PackageStep):
        return [f"{step.manager} install -y {shlex.quote(step.name)}"]

    if isinstance(step, CommandStep):
        return [step.command]

    if isinstance(step, FileStep):
        body = step.content[:-1] if step.content.endswith("\n") else step.content
        if HEREDOC_DELIMITER in body.splitlines():
            raise TopologyConfigError(
                f"File {step.path!r} contains the heredoc delimiter {HEREDOC_DELIMITER}"
            )
        path = shlex.quote(step.path)
        return [
            f"mkdir -p {shlex.quote(posixpath.dirname(step.path) or '/')}",
            f"cat > {path} << '{HEREDOC_DELIMITER}'",
            body,
            HEREDOC_DELIMITER,
            f"chmod {step.mode} {path}",
        ]

    if isinstance(step, ServiceStep):
        lines = []
        if step.enabled:
            lines.append(f"systemctl enable {shlex.quote(step.name)}")
        if step.restart:
            lines.append(f"systemctl restart {shlex.quote(step.name)}")
        return lines

    raise TypeError(f"Unsupported bootstrap step: {step!r}")


def render_user_data(recipe: BootstrapRecipe, signal: LifecycleSignal) -> str:
    """
    Render the first-boot script for a recipe.

    Args:
        recipe: Ordered bootstrap steps
        signal: Lifecycle hook the instance completes when done

    Returns:
        Bash script text
    """
    parts = [
        _PREAMBLE,
        _SIGNAL_FUNCTION.format(
            hook=shlex.quote(signal.hook_name),
            group=shlex.quote(signal.group_name),
        ),
    ]

    for index, step in enumerate(recipe.steps, start=1):
        parts.append(f"\n# Step {index}: {type(step).__name__}")
        parts.append("\n".join(_render_step(step)))

    parts.append("\nsignal CONTINUE")
    parts.append('echo "Bootstrap complete"\n')
    return "\n".join(parts)


def encode_user_data(script: str) -> str:
    """Base64-encode user data for a launch template."""
    return base64.b64encode(script.encode("utf-8")).decode("ascii")
