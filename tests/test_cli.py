"""Tests for the rgb-link command line interface."""

import json
import logging

from click.testing import CliRunner

from rgb_link.cli import cli


class TestProbeCommand:
    """Test the probe command."""

    def setup_method(self):
        """Setup for each test."""
        self.runner = CliRunner()

    def test_probe_success(self, server, clean_env, tmp_path):
        result = self.runner.invoke(cli, [
            '--env-file', str(tmp_path / 'missing.env'),
            'probe', '--host', server.host, '--port', str(server.port),
        ])
        assert result.exit_code == 0
        assert f"Connected to {server.host}:{server.port}" in result.output

    def test_probe_refused(self, closed_port, clean_env, tmp_path):
        result = self.runner.invoke(cli, [
            '--env-file', str(tmp_path / 'missing.env'),
            'probe', '--host', '127.0.0.1', '--port', str(closed_port), '--timeout', '1000',
        ])
        assert result.exit_code == 1
        assert "Connection refused" in result.output

    def test_probe_invalid_port(self, clean_env, tmp_path):
        result = self.runner.invoke(cli, [
            '--env-file', str(tmp_path / 'missing.env'),
            'probe', '--port', '70000',
        ])
        assert result.exit_code == 2
        assert "Invalid configuration" in result.output


class TestShowConfigCommand:
    """Test the show-config command."""

    def test_show_config_reads_env_file(self, clean_env, tmp_path):
        env_file = tmp_path / 'rgb.env'
        env_file.write_text("RGB_LINK_HOST=10.9.9.9\nRGB_LINK_TIMEOUT_MS=2500\n")

        result = CliRunner().invoke(cli, ['--env-file', str(env_file), 'show-config'])

        assert result.exit_code == 0
        settings = json.loads(result.output)
        assert settings == {
            "host": "10.9.9.9",
            "port": 6742,
            "timeout_ms": 2500,
            "log_level": "INFO",
        }

    def test_env_file_log_level_applied(self, clean_env, tmp_path):
        env_file = tmp_path / 'rgb.env'
        env_file.write_text("RGB_LINK_LOG_LEVEL=DEBUG\n")

        result = CliRunner().invoke(cli, ['--env-file', str(env_file), 'show-config'])

        assert result.exit_code == 0
        assert logging.getLogger().level == logging.DEBUG

    def test_verbose_wins_over_env_file_level(self, clean_env, tmp_path):
        env_file = tmp_path / 'rgb.env'
        env_file.write_text("RGB_LINK_LOG_LEVEL=ERROR\n")

        result = CliRunner().invoke(cli, ['--env-file', str(env_file), '--verbose', 'show-config'])

        assert result.exit_code == 0
        assert logging.getLogger().level == logging.DEBUG
