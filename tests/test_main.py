"""Tests for CLI argument handling in main.py."""
from unittest.mock import patch

from click.testing import CliRunner

from iosync.constants import DEFAULT_SOCKET_PATH
from iosync.main import main, xclip_main
from iosync.modes import FrameOutput, Mode, Settings


class TestCLIArguments:
    """Tests for command-line argument validation."""

    def test_no_mode_specified_exits_with_code_2(self):
        """Test that a missing mode flag gives usage error."""
        runner = CliRunner()
        result = runner.invoke(main, ["--socket", "/tmp/test.sock"])
        assert result.exit_code == 2
        assert "must be specified" in result.output

    def test_two_modes_specified_exits_with_code_2(self):
        """Test that --server and --client together give usage error."""
        runner = CliRunner()
        result = runner.invoke(main, ["--server", "--client"])
        assert result.exit_code == 2
        assert "mutually exclusive" in result.output

    def test_frame_output_stdout_rejected_in_relay_mode(self):
        """Test frames may not share stdout with pass-through output."""
        runner = CliRunner()
        result = runner.invoke(main, ["--relay", "--frame-output", "stdout"])
        assert result.exit_code == 2
        assert "pass-through" in result.output

    def test_help_exits_with_code_0(self):
        """Test that --help exits cleanly with code 0."""
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        for word in ("--relay", "--server", "--client", "--socket"):
            assert word in result.output


class TestModeDispatch:
    """Tests for the Settings handed to run_mode."""

    def test_client_get_settings(self):
        """Test --client -o resolves a GET client on the given socket."""
        runner = CliRunner()
        with patch("iosync.modes.run_mode") as mock_run:
            result = runner.invoke(main, ["--client", "-o", "--socket", "/tmp/x.sock"])
        assert result.exit_code == 0
        mock_run.assert_called_once_with(
            Settings(mode=Mode.CLIENT, socket_path="/tmp/x.sock", output=True)
        )

    def test_server_settings_from_environment(self):
        """Test the socket path can come from IOSYNC_SOCKET."""
        runner = CliRunner()
        with patch("iosync.modes.run_mode") as mock_run:
            result = runner.invoke(
                main, ["--server", "--no-bridge"], env={"IOSYNC_SOCKET": "/tmp/env.sock"}
            )
        assert result.exit_code == 0
        settings = mock_run.call_args.args[0]
        assert settings.mode is Mode.SERVER
        assert settings.socket_path == "/tmp/env.sock"
        assert settings.bridge is False

    def test_server_without_bridge_may_send_frames_on_stdout(self):
        """Test stdout is allowed for frames when nothing is passed through."""
        runner = CliRunner()
        with patch("iosync.modes.run_mode") as mock_run:
            result = runner.invoke(
                main, ["--server", "--no-bridge", "--frame-output", "stdout"]
            )
        assert result.exit_code == 0
        assert mock_run.call_args.args[0].frame_output is FrameOutput.STDOUT

    def test_relay_defaults(self):
        """Test relay mode uses the default interval and stderr frames."""
        runner = CliRunner()
        with patch("iosync.modes.run_mode") as mock_run:
            result = runner.invoke(main, ["--relay"], env={"IOSYNC_SOCKET": None})
        assert result.exit_code == 0
        settings = mock_run.call_args.args[0]
        assert settings == Settings(mode=Mode.RELAY, socket_path=DEFAULT_SOCKET_PATH)

    def test_connection_error_exits_with_code_1(self):
        """Test a client transport failure exits non-zero with a message."""
        runner = CliRunner()
        with patch("iosync.modes.run_mode", side_effect=ConnectionError("refused")):
            result = runner.invoke(main, ["--client", "-o"])
        assert result.exit_code == 1
        assert "Error: refused" in result.output


class TestXclipFrontEnd:
    """Tests for the xclip-compatible entry point."""

    def test_output_flag_with_selection(self):
        """Test 'xclip -selection clipboard -o' resolves a GET client."""
        runner = CliRunner()
        with patch("iosync.modes.run_mode") as mock_run:
            result = runner.invoke(
                xclip_main, ["-selection", "clipboard", "-o"],
                env={"IOSYNC_SOCKET": "/tmp/x.sock"},
            )
        assert result.exit_code == 0
        mock_run.assert_called_once_with(
            Settings(mode=Mode.CLIENT, socket_path="/tmp/x.sock", output=True)
        )

    def test_default_is_set(self):
        """Test plain invocation sets the clipboard from stdin."""
        runner = CliRunner()
        with patch("iosync.modes.run_mode") as mock_run:
            result = runner.invoke(xclip_main, ["-sel", "c"])
        assert result.exit_code == 0
        assert mock_run.call_args.args[0].output is False

    def test_input_and_output_conflict(self):
        """Test -i and -o together give usage error."""
        runner = CliRunner()
        result = runner.invoke(xclip_main, ["-i", "-o"])
        assert result.exit_code == 2
        assert "mutually exclusive" in result.output

    def test_connection_error_exits_with_code_1(self):
        """Test a missing server exits non-zero."""
        runner = CliRunner()
        with patch("iosync.modes.run_mode", side_effect=ConnectionError("no server")):
            result = runner.invoke(xclip_main, ["-o"])
        assert result.exit_code == 1
