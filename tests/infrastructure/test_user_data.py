"""
Tests for first-boot script rendering.

Validates:
1. Recipe steps render in declared order
2. Files are written through quoted heredocs
3. The lifecycle signal is the last action and failures abandon
"""

import base64

import pytest

from cfninit.configs.topology import (
    BootstrapRecipe,
    CommandStep,
    FileStep,
    PackageStep,
    ServiceStep,
    TopologyConfigError,
)
from cfninit.utils.user_data import (
    HEREDOC_DELIMITER,
    LifecycleSignal,
    encode_user_data,
    render_user_data,
)

SIGNAL = LifecycleSignal(hook_name="cfninit-test-web-asg-bootstrap", group_name="cfninit-test-web-asg")


class TestRenderUserData:
    """Script layout for the default recipe."""

    @pytest.fixture
    def script(self, topology):
        return render_user_data(topology.compute.recipe, SIGNAL)

    def test_starts_with_strict_bash(self, script):
        lines = script.splitlines()

        assert lines[0] == "#!/bin/bash"
        assert "set -euo pipefail" in lines

    def test_steps_render_in_order(self, script):
        """Package before command before file before service."""
        positions = [
            script.index("yum install -y nginx"),
            script.index("sudo yum install php"),
            script.index("cat > /etc/nginx/conf.d/laravel.conf"),
            script.index("systemctl enable nginx"),
            script.index("systemctl restart nginx"),
        ]

        assert positions == sorted(positions)

    def test_step_comments_are_numbered(self, script):
        assert "# Step 1: PackageStep" in script
        assert "# Step 2: CommandStep" in script
        assert "# Step 3: FileStep" in script
        assert "# Step 4: ServiceStep" in script

    def test_file_uses_quoted_heredoc(self, script, topology):
        """Quoted delimiter keeps $uri and friends literal."""
        (vhost,) = topology.compute.recipe.files()

        assert f"<< '{HEREDOC_DELIMITER}'" in script
        assert vhost.content.rstrip("\n") in script
        assert "mkdir -p /etc/nginx/conf.d" in script
        assert "chmod 0644 /etc/nginx/conf.d/laravel.conf" in script

    def test_signal_continue_is_last_action(self, script):
        lines = [line for line in script.splitlines() if line.strip()]

        assert lines[-2] == "signal CONTINUE"
        assert lines[-1] == 'echo "Bootstrap complete"'
        assert script.index("systemctl restart nginx") < script.index("signal CONTINUE")

    def test_failures_abandon(self, script):
        assert "trap 'signal ABANDON' ERR" in script
        assert script.index("trap 'signal ABANDON' ERR") < script.index("# Step 1")

    def test_signal_targets_hook_and_group(self, script):
        assert "--lifecycle-hook-name cfninit-test-web-asg-bootstrap" in script
        assert "--auto-scaling-group-name cfninit-test-web-asg" in script
        assert "--lifecycle-action-result \"$1\"" in script

    def test_uses_imdsv2(self, script):
        assert "X-aws-ec2-metadata-token-ttl-seconds" in script
        assert "meta-data/instance-id" in script


class TestRenderSteps:
    """Individual step kinds."""

    def test_service_without_restart(self):
        recipe = BootstrapRecipe(steps=(ServiceStep("php-fpm", enabled=True, restart=False),))
        script = render_user_data(recipe, SIGNAL)

        assert "systemctl enable php-fpm" in script
        assert "systemctl restart php-fpm" not in script

    def test_package_manager_is_respected(self):
        recipe = BootstrapRecipe(steps=(PackageStep("htop", manager="dnf"),))

        assert "dnf install -y htop" in render_user_data(recipe, SIGNAL)

    def test_command_is_verbatim(self):
        command = "echo \"$HOSTNAME\" > /tmp/host && chown nginx /tmp/host"
        recipe = BootstrapRecipe(steps=(CommandStep(command),))

        assert command in render_user_data(recipe, SIGNAL).splitlines()

    def test_file_mode(self):
        recipe = BootstrapRecipe(steps=(FileStep("/opt/app/run.sh", "#!/bin/sh\n", mode="0755"),))

        assert "chmod 0755 /opt/app/run.sh" in render_user_data(recipe, SIGNAL)

    def test_content_containing_delimiter_is_rejected(self):
        content = f"line\n{HEREDOC_DELIMITER}\nmore\n"
        recipe = BootstrapRecipe(steps=(FileStep("/etc/app.conf", content),))

        with pytest.raises(TopologyConfigError, match="heredoc delimiter"):
            render_user_data(recipe, SIGNAL)

    def test_empty_recipe_still_signals(self):
        script = render_user_data(BootstrapRecipe(steps=()), SIGNAL)

        assert "# Step" not in script
        assert "signal CONTINUE" in script


class TestEncodeUserData:
    """Launch template encoding."""

    def test_base64_round_trip(self, topology):
        script = render_user_data(topology.compute.recipe, SIGNAL)

        assert base64.b64decode(encode_user_data(script)).decode("utf-8") == script
