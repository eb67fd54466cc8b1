"""Database images linked to a Liferay container."""

from dataclasses import dataclass
from typing import Dict, List, NamedTuple, Protocol, runtime_checkable

from .errors import UnsupportedVariantError

# Name of the default database
DB_NAME = "lportal"

# Default credentials for the database
DB_PASSWORD = "my-secret-pw"

# Alias the Liferay container uses to reach its database
DB_ALIAS = "db"


class EnvVariables(NamedTuple):
    """Variables that configure the database server."""

    database: str
    password: str


class JDBCConnection(NamedTuple):
    """JDBC connection used by Liferay to reach the database."""

    driver_class_name: str
    password: str
    url: str
    user: str


@runtime_checkable
class DatabaseImage(Protocol):
    """Contract for database images."""

    lpn_type: str

    @property
    def type(self) -> str: ...

    @property
    def container_name(self) -> str: ...

    @property
    def data_folder(self) -> str: ...

    @property
    def repository(self) -> str: ...

    @property
    def tag(self) -> str: ...

    @property
    def fully_qualified_name(self) -> str: ...

    @property
    def docker_hub_tags_path(self) -> str: ...

    @property
    def port(self) -> int: ...

    @property
    def env_variables(self) -> EnvVariables: ...

    @property
    def jdbc_connection(self) -> JDBCConnection: ...


MYSQL_DEFAULT_TAG = "5.7"
MYSQL_REPOSITORY = "mdelapenya/mysql-utf8"


@dataclass(frozen=True)
class MySQL:
    """MySQL with utf8 defaults."""

    lpn_type: str
    tag_override: str = ""

    @property
    def type(self) -> str:
        return "mysql"

    @property
    def container_name(self) -> str:
        return f"db-{self.lpn_type}"

    @property
    def data_folder(self) -> str:
        return "/var/lib/mysql"

    @property
    def repository(self) -> str:
        return MYSQL_REPOSITORY

    @property
    def tag(self) -> str:
        return self.tag_override or MYSQL_DEFAULT_TAG

    @property
    def fully_qualified_name(self) -> str:
        return f"{self.repository}:{self.tag}"

    @property
    def docker_hub_tags_path(self) -> str:
        return "mysql"

    @property
    def port(self) -> int:
        return 3301

    @property
    def env_variables(self) -> EnvVariables:
        return EnvVariables(
            database=f"MYSQL_DATABASE={DB_NAME}",
            password=f"MYSQL_ROOT_PASSWORD={DB_PASSWORD}",
        )

    @property
    def jdbc_connection(self) -> JDBCConnection:
        return JDBCConnection(
            driver_class_name="com.mysql.jdbc.Driver",
            password=DB_PASSWORD,
            url=(
                f"jdbc:mysql://{DB_ALIAS}/{DB_NAME}?characterEncoding=UTF-8"
                "&dontTrackOpenResources=true&holdResultsOpenOverStatementClose=true"
                "&useFastDateParsing=false&useUnicode=true"
            ),
            user="root",
        )


POSTGRESQL_DEFAULT_TAG = "9.6"
POSTGRESQL_REPOSITORY = "postgres"


@dataclass(frozen=True)
class PostgreSQL:
    """Official PostgreSQL image."""

    lpn_type: str
    tag_override: str = ""

    @property
    def type(self) -> str:
        return "postgresql"

    @property
    def container_name(self) -> str:
        return f"db-{self.lpn_type}"

    @property
    def data_folder(self) -> str:
        return "/var/lib/postgresql/data"

    @property
    def repository(self) -> str:
        return POSTGRESQL_REPOSITORY

    @property
    def tag(self) -> str:
        return self.tag_override or POSTGRESQL_DEFAULT_TAG

    @property
    def fully_qualified_name(self) -> str:
        return f"{self.repository}:{self.tag}"

    @property
    def docker_hub_tags_path(self) -> str:
        return "library/postgres"

    @property
    def port(self) -> int:
        return 5432

    @property
    def env_variables(self) -> EnvVariables:
        return EnvVariables(
            database=f"POSTGRES_DB={DB_NAME}",
            password=f"POSTGRES_PASSWORD={DB_PASSWORD}",
        )

    @property
    def jdbc_connection(self) -> JDBCConnection:
        return JDBCConnection(
            driver_class_name="org.postgresql.Driver",
            password=DB_PASSWORD,
            url=f"jdbc:postgresql://{DB_ALIAS}:5432/{DB_NAME}",
            user="postgres",
        )


DATABASES: Dict[str, type] = {
    "mysql": MySQL,
    "postgresql": PostgreSQL,
}


def get_supported_databases() -> List[str]:
    """Get the names of all supported database variants."""
    return list(DATABASES.keys())


def get_database(datastore: str, lpn_type: str, tag: str = "") -> DatabaseImage:
    """Build the database image serving an application variant.

    Raises:
        UnsupportedVariantError: the datastore is not supported
    """
    database_cls = DATABASES.get(datastore.lower().strip())
    if database_cls is None:
        raise UnsupportedVariantError(datastore, get_supported_databases())
    return database_cls(lpn_type=lpn_type, tag_override=tag or "")
