"""
Tests for writing stack outputs to a dotenv file.
"""

from dotenv import dotenv_values

from cfninit.utils.outputs import write_env_file


class TestWriteEnvFile:
    """Dotenv output file."""

    def test_keys_are_upper_cased(self, tmp_path):
        target = tmp_path / "infrastructure.env"

        path = write_env_file(
            {"vpc_id": "vpc-123", "pipeline_name": "Laravel-pipeline"},
            str(target),
        )

        assert path == target
        assert dotenv_values(target) == {
            "VPC_ID": "vpc-123",
            "PIPELINE_NAME": "Laravel-pipeline",
        }

    def test_existing_keys_are_updated(self, tmp_path):
        target = tmp_path / "infrastructure.env"
        target.write_text("VPC_ID='vpc-old'\nOTHER='kept'\n")

        write_env_file({"vpc_id": "vpc-new"}, str(target))

        assert dotenv_values(target) == {"VPC_ID": "vpc-new", "OTHER": "kept"}

    def test_none_becomes_empty(self, tmp_path):
        target = tmp_path / "infrastructure.env"

        write_env_file({"key_pair": None}, str(target))

        assert dotenv_values(target) == {"KEY_PAIR": ""}
