"""Unit tests for the command line interface."""

from unittest.mock import MagicMock, patch

import pytest

from lpn import cli
from lpn.models.errors import ContainerNotFoundError, ImagePullError
from lpn.models.image import ImageType
from lpn.models.tags import TagRow, TagsPage


@pytest.fixture
def factory():
    with patch.object(cli, "DockerClientFactory") as factory_cls:
        yield factory_cls.return_value


@pytest.fixture
def manager():
    with patch.object(cli, "ContainerManager") as manager_cls:
        yield manager_cls.return_value


class TestBuildParser:
    """Tests for argument parsing."""

    def test_run_defaults(self):
        args = cli.build_parser().parse_args(["run", "ce"])

        assert args.variant == "ce"
        assert args.tag == ""
        assert args.http_port == 8080
        assert args.gogo_port == 11311
        assert args.debug_port == 9000
        assert args.debug is False
        assert args.datastore is None
        assert args.handler is cli.cmd_run

    def test_run_options(self):
        args = cli.build_parser().parse_args(
            cli.join_dashed_values(
                ["run", "dxp", "-t", "7.0.10.6", "-p", "8081", "-d", "-s", "postgresql", "-m", "-Xmx2048m"]
            )
        )

        assert args.tag == "7.0.10.6"
        assert args.http_port == 8081
        assert args.debug is True
        assert args.datastore == "postgresql"
        assert args.memory == "-Xmx2048m"

    @pytest.mark.parametrize("flag", ["-m", "--memory"])
    def test_memory_value_starting_with_dash(self, flag):
        argv = cli.join_dashed_values(["run", "ce", flag, "-Xms1g -Xmx2048m", "-d"])

        args = cli.build_parser().parse_args(argv)

        assert args.memory == "-Xms1g -Xmx2048m"
        assert args.debug is True

    def test_memory_equals_form_untouched(self):
        argv = ["run", "ce", "--memory=-Xmx1g"]

        assert cli.join_dashed_values(argv) == argv
        assert cli.build_parser().parse_args(argv).memory == "-Xmx1g"

    def test_unknown_variant_is_rejected(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["stop", "enterprise"])

    def test_unknown_datastore_is_rejected(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["run", "ce", "-s", "oracle"])


class TestMain:
    """Tests for command dispatch and exit codes."""

    def test_stop(self, factory, manager):
        assert cli.main(["stop", "ce"]) == 0

        stopped = manager.stop.call_args[0][0]
        assert stopped.type is ImageType.CE
        factory.close.assert_called_once()

    def test_non_fatal_error_exits_with_one(self, factory, manager):
        manager.remove.side_effect = ContainerNotFoundError("lpn-ce")

        assert cli.main(["rm", "ce"]) == 1
        factory.close.assert_called_once()

    def test_fatal_error_exits_with_one(self, factory, manager):
        manager.puller.pull.side_effect = ImagePullError("docker.io/liferay/portal:7.0.6-ga7")

        assert cli.main(["pull", "ce"]) == 1

    def test_pull_force_removal(self, factory, manager):
        manager.puller.exists.return_value = True

        assert cli.main(["pull", "ce", "-t", "7.1.0-ga1", "-f"]) == 0

        manager.puller.remove.assert_called_once_with("docker.io/liferay/portal:7.1.0-ga1")
        manager.puller.pull.assert_called_once_with("docker.io/liferay/portal:7.1.0-ga1")

    def test_checkc_missing_container(self, factory, manager):
        manager.exists.return_value = False

        assert cli.main(["checkc", "nightly"]) == 1
        manager.exists.assert_called_once_with("lpn-nightly")

    def test_run_with_datastore(self, factory):
        with patch.object(cli, "ContainerManager"), patch.object(cli, "StackOrchestrator") as orchestrator_cls:
            assert cli.main(["run", "ce", "-s", "mysql", "-d"]) == 0

        image, database, options = orchestrator_cls.return_value.run_stack.call_args[0]
        assert image.container_name == "lpn-ce"
        assert database.container_name == "db-ce"
        assert options.debug is True

    def test_run_with_memory(self, factory):
        with patch.object(cli, "ContainerManager"), patch.object(cli, "StackOrchestrator") as orchestrator_cls:
            assert cli.main(["run", "ce", "-m", "-Xmx2048m"]) == 0

        options = orchestrator_cls.return_value.run_stack.call_args[0][2]
        assert options.memory == "-Xmx2048m"

    def test_open_port(self, factory, manager, capsys):
        manager.get_http_port.return_value = "8081"

        assert cli.main(["open-port", "ce"]) == 0
        assert "http://localhost:8081" in capsys.readouterr().out

    def test_tags(self, factory, capsys):
        tags_page = TagsPage(
            repository="liferay/portal",
            page=1,
            size=25,
            count=1,
            rows=[TagRow("liferay/portal:7.1.0-ga1", "789 MB")],
        )
        with patch.object(cli, "TagsClient") as tags_cls:
            tags_cls.return_value.list_tags.return_value = tags_page
            assert cli.main(["tags", "ce"]) == 0

        tags_cls.return_value.list_tags.assert_called_once_with("liferay/portal", page=1, size=25)
        tags_cls.return_value.close.assert_called_once()
        out = capsys.readouterr().out
        assert "liferay/portal:7.1.0-ga1" in out
        assert "1 of 1" in out

    def test_version(self, factory, manager, capsys):
        manager.version.return_value = ("1.43", {"Version": "24.0.7", "ApiVersion": "1.43"})

        assert cli.main(["version"]) == 0
        assert "24.0.7" in capsys.readouterr().out
