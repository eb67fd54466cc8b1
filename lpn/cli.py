"""lpn command line interface.

Usage:
  lpn run ce --tag 7.1.0-ga1 --datastore mysql --debug
  lpn stop ce
  lpn start ce
  lpn rm ce
  lpn tags nightly --page 2 --size 10
  lpn deploy dxp ./my-module.jar
"""

import argparse
import sys
from typing import List, Optional

import structlog
from rich import box
from rich.console import Console
from rich.table import Table

from ._version import __version__
from .config import settings
from .models.container import RunOptions
from .models.database import get_database, get_supported_databases
from .models.errors import LpnException
from .models.image import (
    DEBUG_PORT,
    GOGO_SHELL_PORT,
    HTTP_PORT,
    Image,
    get_image,
    get_supported_variants,
)
from .models.tags import TagsPage
from .services.container import (
    ContainerExecutor,
    ContainerManager,
    DockerClientFactory,
)
from .services.orchestrator import StackOrchestrator
from .services.tags import TagsClient
from .utils.error_handlers import log_error
from .utils.logging import setup_logging

logger = structlog.get_logger(__name__)

console = Console()


# ============================================================================
# Command Handlers
# ============================================================================


def _image(args: argparse.Namespace) -> Image:
    return get_image(args.variant, getattr(args, "tag", "") or "")


def cmd_run(args: argparse.Namespace, factory: DockerClientFactory) -> int:
    image = _image(args)
    database = None
    if args.datastore:
        database = get_database(args.datastore, image.lpn_type)

    options = RunOptions(
        http_port=args.http_port,
        gogo_port=args.gogo_port,
        debug=args.debug,
        debug_port=args.debug_port,
        memory=args.memory or "",
    )

    manager = ContainerManager(factory.get_client())
    StackOrchestrator(manager).run_stack(image, database, options)
    console.print(
        f"[green]{image.container_name}[/green] is starting at "
        f"http://localhost:{options.http_port}"
    )
    return 0


def cmd_start(args: argparse.Namespace, factory: DockerClientFactory) -> int:
    ContainerManager(factory.get_client()).start(_image(args))
    return 0


def cmd_stop(args: argparse.Namespace, factory: DockerClientFactory) -> int:
    ContainerManager(factory.get_client()).stop(_image(args))
    return 0


def cmd_rm(args: argparse.Namespace, factory: DockerClientFactory) -> int:
    ContainerManager(factory.get_client()).remove(_image(args))
    return 0


def cmd_pull(args: argparse.Namespace, factory: DockerClientFactory) -> int:
    image = _image(args)
    manager = ContainerManager(factory.get_client())
    if args.force_removal and manager.puller.exists(image.fully_qualified_name):
        manager.puller.remove(image.fully_qualified_name)
    manager.puller.pull(image.fully_qualified_name)
    return 0


def cmd_rmi(args: argparse.Namespace, factory: DockerClientFactory) -> int:
    image = _image(args)
    ContainerManager(factory.get_client()).puller.remove(image.fully_qualified_name)
    return 0


def cmd_checkc(args: argparse.Namespace, factory: DockerClientFactory) -> int:
    image = _image(args)
    if ContainerManager(factory.get_client()).exists(image.container_name):
        logger.info("The container is running", container=image.container_name)
        return 0

    logger.warning("The container is NOT running", container=image.container_name)
    return 1


def cmd_checki(args: argparse.Namespace, factory: DockerClientFactory) -> int:
    image = _image(args)
    if ContainerManager(factory.get_client()).puller.exists(image.fully_qualified_name):
        logger.info("The image has been pulled from Docker Hub", image=image.fully_qualified_name)
        return 0

    logger.warning("The image has NOT been pulled from Docker Hub", image=image.fully_qualified_name)
    return 1


def cmd_deploy(args: argparse.Namespace, factory: DockerClientFactory) -> int:
    image = _image(args)
    ContainerExecutor(factory.get_client()).deploy(image, args.files)
    return 0


def cmd_log(args: argparse.Namespace, factory: DockerClientFactory) -> int:
    ContainerExecutor(factory.get_client()).follow_logs(_image(args))
    return 0


def cmd_port(args: argparse.Namespace, factory: DockerClientFactory) -> int:
    port = ContainerManager(factory.get_client()).get_http_port(_image(args))
    console.print(f"http://localhost:{port}")
    return 0


def cmd_tags(args: argparse.Namespace, factory: DockerClientFactory) -> int:
    image = _image(args)
    client = TagsClient()
    try:
        tags_page = client.list_tags(image.docker_hub_tags_path, page=args.page, size=args.size)
    finally:
        client.close()

    if not tags_page.rows:
        logger.info(
            "There are no available tags for that pagination. "
            "Please use --page and --size arguments to filter properly"
        )
        return 0

    print_tags_table(tags_page)
    return 0


def cmd_version(args: argparse.Namespace, factory: DockerClientFactory) -> int:
    console.print(f"lpn (Liferay Portal Nook) v{__version__}")
    client_version, server_version = ContainerManager(factory.get_client()).version()
    console.print(f"Docker client API: {client_version}")
    console.print(
        f"Docker server: {server_version.get('Version', 'unknown')} "
        f"(API {server_version.get('ApiVersion', 'unknown')})"
    )
    return 0


def print_tags_table(tags_page: TagsPage) -> None:
    """Render a page of tags."""
    table = Table(box=box.SIMPLE, show_footer=True)
    table.add_column("Image:Tag", justify="left")
    table.add_column(
        "Size", justify="right", footer=f"{tags_page.page} of {tags_page.total_pages}"
    )
    for row in tags_page.rows:
        table.add_row(row.image_tag, row.size)
    console.print(table)


# ============================================================================
# Argument Parsing
# ============================================================================


def _add_variant(parser: argparse.ArgumentParser, with_tag: bool = False) -> None:
    parser.add_argument("variant", choices=get_supported_variants(), help="Image variant")
    if with_tag:
        parser.add_argument("-t", "--tag", default="", help="Image tag (variant default if empty)")


# Options whose values start with a dash, like JVM flags
DASHED_VALUE_OPTIONS = ("-m", "--memory")


def join_dashed_values(argv: List[str]) -> List[str]:
    """Glue ``-m -Xmx2048m`` into ``--memory=-Xmx2048m`` for argparse."""
    joined: List[str] = []
    tokens = iter(argv)
    for token in tokens:
        if token in DASHED_VALUE_OPTIONS:
            value = next(tokens, None)
            if value is None:
                joined.append(token)
            elif value.startswith("-"):
                joined.append(f"--memory={value}")
            else:
                joined.extend([token, value])
            continue
        joined.append(token)
    return joined


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lpn",
        description="Liferay Portal Nook: disposable Liferay Portal instances on Docker",
    )
    parser.add_argument(
        "-V", "--verbose", action="store_true", help="Runs commands with Debug log level"
    )
    parser.add_argument(
        "--log-format", choices=["console", "json"], default=None, help="Log output format"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", help="Runs a Liferay Portal instance")
    _add_variant(run, with_tag=True)
    run.add_argument("-p", "--http-port", type=int, default=HTTP_PORT, help="HTTP port")
    run.add_argument("-g", "--gogo-port", type=int, default=GOGO_SHELL_PORT, help="GoGo Shell port")
    run.add_argument("-d", "--debug", action="store_true", help="Enables debug mode")
    run.add_argument("-D", "--debug-port", type=int, default=DEBUG_PORT, help="Debugger port")
    run.add_argument("-m", "--memory", default="", help="JVM options, e.g. -m -Xmx2048m")
    run.add_argument(
        "-s", "--datastore", choices=get_supported_databases(), default=None,
        help="Database linked to the instance",
    )
    run.set_defaults(handler=cmd_run)

    for name, handler, help_text in [
        ("start", cmd_start, "Starts the stopped Liferay Portal stack"),
        ("stop", cmd_stop, "Stops the Liferay Portal stack"),
        ("rm", cmd_rm, "Removes the Liferay Portal stack"),
        ("log", cmd_log, "Follows the logs of the Liferay Portal instance"),
        ("open-port", cmd_port, "Prints the HTTP address of the running instance"),
        ("checkc", cmd_checkc, "Checks if the Liferay Portal container exists"),
    ]:
        sub = subparsers.add_parser(name, help=help_text)
        _add_variant(sub)
        sub.set_defaults(handler=handler)

    pull = subparsers.add_parser("pull", help="Pulls a Liferay Portal image")
    _add_variant(pull, with_tag=True)
    pull.add_argument(
        "-f", "--force-removal", action="store_true", help="Removes the local image first"
    )
    pull.set_defaults(handler=cmd_pull)

    rmi = subparsers.add_parser("rmi", help="Removes a Liferay Portal image")
    _add_variant(rmi, with_tag=True)
    rmi.set_defaults(handler=cmd_rmi)

    checki = subparsers.add_parser("checki", help="Checks if a Liferay Portal image is present")
    _add_variant(checki, with_tag=True)
    checki.set_defaults(handler=cmd_checki)

    deploy = subparsers.add_parser("deploy", help="Deploys files into the running instance")
    _add_variant(deploy)
    deploy.add_argument("files", nargs="+", help="Files or directories to deploy")
    deploy.set_defaults(handler=cmd_deploy)

    tags = subparsers.add_parser("tags", help="Lists the tags of a Liferay Portal image")
    _add_variant(tags)
    tags.add_argument("-p", "--page", type=int, default=1, help="Page of tags")
    tags.add_argument(
        "-s", "--size", type=int, default=settings.tags_page_size, help="Tags per page"
    )
    tags.set_defaults(handler=cmd_tags)

    version = subparsers.add_parser("version", help="Prints lpn and Docker versions")
    version.set_defaults(handler=cmd_version)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(join_dashed_values(sys.argv[1:] if argv is None else argv))
    setup_logging(verbose=args.verbose, log_format=args.log_format)

    factory = DockerClientFactory()
    try:
        return args.handler(args, factory)
    except LpnException as e:
        log_error(e, "Command failed", command=args.command)
        return 1
    finally:
        factory.close()


if __name__ == "__main__":
    sys.exit(main())
