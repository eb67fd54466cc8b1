"""Liferay stack orchestration.

A stack is one Liferay container, optionally linked to a database
container that must be running before Liferay starts.
"""

from typing import List, Optional

import structlog

from ..models.container import DEPENDS_ON_LABEL, LPN_TYPE_LABEL, ContainerSpec, RunOptions
from ..models.database import DB_ALIAS, DatabaseImage
from ..models.errors import ContainerNotFoundError, PartialFailureError
from ..models.image import DEBUG_PORT, GOGO_SHELL_PORT, HTTP_PORT, Image
from .container.manager import ContainerManager

logger = structlog.get_logger(__name__)

# Characters Liferay escapes when a portal property becomes an env variable
ENV_ESCAPES = {
    ".": "PERIOD",
    "-": "MINUS",
    "_": "UNDERLINE",
    ":": "COLON",
    "[": "OPENBRACKET",
    "]": "CLOSEBRACKET",
}

JDBC_STARTUP_RETRY_DELAY = 5
JDBC_STARTUP_MAX_RETRIES = 5


def liferay_env_name(portal_property: str) -> str:
    """Environment variable name Liferay maps back to a portal property.

    ``jdbc.default.driverClassName`` becomes
    ``LIFERAY_JDBC_PERIOD_DEFAULT_PERIOD_DRIVER_UPPERCASEC_LASS_UPPERCASEN_AME``.
    """
    parts = ["LIFERAY_"]
    for char in portal_property:
        if char in ENV_ESCAPES:
            parts.append(f"_{ENV_ESCAPES[char]}_")
        elif char.isupper():
            parts.append(f"_UPPERCASE{char}_")
        else:
            parts.append(char.upper())
    return "".join(parts)


def jdbc_environment(database: DatabaseImage) -> List[str]:
    """JDBC connection variables plus the startup retry policy."""
    jdbc = database.jdbc_connection
    return [
        f"{liferay_env_name('jdbc.default.driverClassName')}={jdbc.driver_class_name}",
        f"{liferay_env_name('jdbc.default.password')}={jdbc.password}",
        f"{liferay_env_name('jdbc.default.url')}={jdbc.url}",
        f"{liferay_env_name('jdbc.default.username')}={jdbc.user}",
        # retry JDBC in case the database is slower
        f"{liferay_env_name('retry.jdbc.on.startup.delay')}={JDBC_STARTUP_RETRY_DELAY}",
        f"{liferay_env_name('retry.jdbc.on.startup.max.retries')}={JDBC_STARTUP_MAX_RETRIES}",
    ]


class StackOrchestrator:
    """Runs a Liferay container, linked to its database when one is given."""

    def __init__(self, manager: ContainerManager):
        self.manager = manager

    def build_spec(
        self, image: Image, options: RunOptions, database: Optional[DatabaseImage] = None
    ) -> ContainerSpec:
        """Runtime spec for the Liferay container of a stack."""
        spec = ContainerSpec(
            name=image.container_name,
            image=image.fully_qualified_name,
            labels={LPN_TYPE_LABEL: image.lpn_type},
        )
        spec.expose(HTTP_PORT, options.http_port)
        spec.expose(GOGO_SHELL_PORT, options.gogo_port)

        if options.debug:
            spec.expose(DEBUG_PORT, options.debug_port)
            spec.environment.append(f"{image.debug_env_var}=true")

        if options.memory:
            spec.environment.append(f"LIFERAY_JVM_OPTS={options.memory}")

        if database is not None:
            spec.links[database.container_name] = DB_ALIAS
            spec.labels[DEPENDS_ON_LABEL] = database.container_name
            spec.environment.extend(jdbc_environment(database))

        return spec

    def run_stack(
        self,
        image: Image,
        database: Optional[DatabaseImage] = None,
        options: Optional[RunOptions] = None,
    ) -> str:
        """Replace the variant's Liferay container with a fresh one.

        The database container is created only when absent and must be up
        before the Liferay container is created. Returns the container id.

        Raises:
            PartialFailureError: the previous stack could not be fully removed
        """
        options = options or RunOptions()

        if self.manager.exists(image.container_name):
            logger.debug("The container is running", container=image.container_name)
            try:
                self.manager.remove(image)
            except ContainerNotFoundError:
                # Unlabeled leftovers are removed by name
                self.manager.remove_by_name(image.container_name)
            except PartialFailureError as e:
                logger.error(
                    "Could not remove the previous stack",
                    container=image.container_name,
                    **e.to_log_fields(),
                )
                raise

        spec = self.build_spec(image, options, database)

        self.manager.puller.pull(image.fully_qualified_name)

        if database is not None:
            self.manager.run_database(database)

        container_id = self.manager.create_and_start(spec)
        logger.info(
            "Container has been started",
            container=image.container_name,
            image=image.fully_qualified_name,
            http_port=options.http_port,
        )
        return container_id
