"""Unit tests for encapsulated_e2e.harness.workspace."""

from unittest.mock import patch

import pytest

from encapsulated_e2e.config import E2EConfig
from encapsulated_e2e.errors import CommandError
from encapsulated_e2e.harness import workspace as workspace_module
from encapsulated_e2e.harness.fileops import create_file, read_file
from encapsulated_e2e.harness.workspace import (
    EncapsulatedWorkspace,
    cleanup_project,
    new_encapsulated_workspace,
    npx_command,
)
from encapsulated_e2e.shared import paths


@pytest.mark.cli_unit
class TestWorkspaceRun:
    """Tests for running commands through the wrapper."""

    def test_run_passes_command(self, fake_workspace, clean_nx_env):
        """The command line reaches ./nx verbatim."""
        output = fake_workspace.run("echo a")

        assert "args: echo a" in output
        assert "FORCE_COLOR=false" in output

    def test_callable(self, fake_workspace, clean_nx_env):
        """The workspace doubles as the invocation function."""
        assert "args: report" in fake_workspace("report")

    def test_env_overrides(self, fake_workspace, clean_nx_env):
        output = fake_workspace(
            "migrate --run-migrations=migrations.json",
            env={"NX_MIGRATE_SKIP_INSTALL": "true", "NX_E2E_FLAG": "1"},
        )

        assert "NX_MIGRATE_SKIP_INSTALL=true" in output
        assert "NX_E2E_FLAG=1" in output

    def test_non_zero_exit_raises(self, fake_workspace):
        """A failing command fails the caller immediately."""
        with pytest.raises(CommandError) as exc_info:
            fake_workspace("fail")

        assert exc_info.value.returncode == 3
        assert exc_info.value.stderr == "boom\n"
        assert exc_info.value.command == "./nx fail"

    def test_activate_targets_file_helpers(self, fake_workspace):
        """Project-relative helpers resolve inside the workspace."""
        create_file("projects/a/project.json", "{}")

        assert (fake_workspace.path / "projects" / "a" / "project.json").exists()
        assert read_file("projects/a/project.json") == "{}"


@pytest.mark.cli_unit
class TestRootArtifacts:
    """Tests for root_package_artifacts."""

    def test_clean_root(self, fake_workspace):
        assert fake_workspace.root_package_artifacts() == []

    def test_leaked_artifacts(self, fake_workspace):
        (fake_workspace.path / "node_modules").mkdir()
        (fake_workspace.path / "pnpm-lock.yaml").write_text("")

        assert fake_workspace.root_package_artifacts() == ["node_modules", "pnpm-lock.yaml"]


@pytest.mark.cli_unit
class TestCleanup:
    """Tests for workspace teardown."""

    def test_cleanup_resets_then_removes(self, fake_workspace):
        with patch.object(fake_workspace, "run", wraps=fake_workspace.run) as run:
            fake_workspace.cleanup()

        run.assert_called_once_with("reset")
        assert not fake_workspace.path.exists()
        assert paths.get_project_name() is None

    def test_skip_reset(self, fake_workspace):
        """skip_reset tears down without running the tool."""
        fake_workspace.config.keep_workspace = True

        fake_workspace.cleanup(skip_reset=True)

        assert fake_workspace.path.exists()
        assert not (fake_workspace.path / "reset.marker").exists()

    def test_reset_failure_is_not_fatal(self, fake_workspace):
        with patch.object(
            fake_workspace, "run", side_effect=CommandError(command="./nx reset")
        ):
            fake_workspace.cleanup()

        assert not fake_workspace.path.exists()

    def test_keep_workspace(self, fake_workspace):
        """keep_workspace leaves the directory for inspection."""
        fake_workspace.config.keep_workspace = True

        fake_workspace.cleanup()

        assert (fake_workspace.path / "reset.marker").exists()


@pytest.mark.cli_unit
class TestProvision:
    """Tests for new_encapsulated_workspace / cleanup_project."""

    def test_requires_published_version(self, tmp_path):
        config = E2EConfig(published_version=None, e2e_root=str(tmp_path))

        with pytest.raises(ValueError, match="published_version"):
            new_encapsulated_workspace("ws", config)

    def test_provision_runs_encapsulated_init(self, e2e_config):
        with patch.object(workspace_module, "run_command") as run_command:
            ws = new_encapsulated_workspace("ws", e2e_config)

        command = run_command.call_args.args[0]
        assert command == "npx nx@9999.0.2 init --encapsulated"
        assert run_command.call_args.kwargs["cwd"] == ws.path
        assert run_command.call_args.kwargs["fail_on_error"] is True
        assert ws.path.is_dir()
        assert paths.get_project_name() == "ws"

        cleanup_project(skip_reset=True)

        assert not ws.path.exists()
        assert paths.get_project_name() is None

    def test_generated_name(self, e2e_config):
        ws = EncapsulatedWorkspace(config=e2e_config)

        assert ws.name.startswith("encapsulated")
        assert ws.path.parent == paths.e2e_cwd(e2e_config.e2e_root)

    def test_cleanup_without_workspace(self):
        cleanup_project(skip_reset=True)

    def test_package_runner(self):
        assert npx_command("npm") == "npx"
        assert npx_command("pnpm") == "pnpm dlx"


@pytest.mark.cli_unit
class TestScratchRoot:
    """Each handle resolves its own root; only activation moves the global one."""

    def test_handles_do_not_move_scratch_root(self, tmp_path):
        default_root = paths.e2e_root()

        first = EncapsulatedWorkspace("ws", E2EConfig(e2e_root=str(tmp_path / "one")))
        second = EncapsulatedWorkspace("ws", E2EConfig(e2e_root=str(tmp_path / "two")))

        assert paths.e2e_root() == default_root
        assert first.path == tmp_path / "one" / "nx" / "ws"
        assert second.path == tmp_path / "two" / "nx" / "ws"

    def test_activate_points_file_helpers_at_workspace(self, tmp_path):
        first = EncapsulatedWorkspace("ws", E2EConfig(e2e_root=str(tmp_path / "one")))
        second = EncapsulatedWorkspace("ws", E2EConfig(e2e_root=str(tmp_path / "two")))
        first.path.mkdir(parents=True)
        second.path.mkdir(parents=True)

        first.activate()
        create_file("marker", "one")
        second.activate()

        assert paths.tmp_proj_path() == second.path
        assert not (second.path / "marker").exists()
        assert read_file("marker", root=first.path) == "one"
