"""Dialect registry resolving connection URLs to dialects."""

import re
from abc import ABC, abstractmethod
from typing import Optional, Union

from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError

from sink_dialects.config import DialectConfig
from sink_dialects.dialects.base import DatabaseDialect
from sink_dialects.dialects.generic import GenericDialect
from sink_dialects.dialects.griddb import GriddbDialect
from sink_dialects.dialects.mysql import MySQLDialect
from sink_dialects.dialects.postgresql import PostgreSQLDialect
from sink_dialects.dialects.sqlite import SQLiteDialect
from sink_dialects.errors import DialectConfigurationError, NoDialectMatchError
from sink_dialects.logger import get_logger

logger = get_logger(__name__)

_JDBC_URL = re.compile(r"^jdbc:(?P<subprotocol>[^:]+):(?P<subname>.*)$", re.DOTALL)


class DialectProvider(ABC):
    """Factory for one dialect, keyed by the subprotocols it serves.

    Registering a new provider is how an engine is added without touching
    the registry itself.
    """

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        ...

    @abstractmethod
    def subprotocols(self) -> frozenset[str]:
        ...

    @abstractmethod
    def create(self, config: Optional[DialectConfig] = None) -> DatabaseDialect:
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.dialect_name!r}, {sorted(self.subprotocols())!r})"


class SubprotocolBasedProvider(DialectProvider):
    """Provider constructing a dialect class for a fixed set of subprotocols.

    Examples:
        >>> provider = SubprotocolBasedProvider(GriddbDialect, "gs")
        >>> provider.create(DialectConfig())
    """

    def __init__(self, dialect_class: type[DatabaseDialect], *subprotocols: str):
        if not subprotocols:
            raise DialectConfigurationError(
                f"Provider for {dialect_class.__name__} needs at least one subprotocol"
            )
        self._dialect_class = dialect_class
        self._subprotocols = frozenset(subprotocols)

    @property
    def dialect_name(self) -> str:
        return self._dialect_class.__name__

    def subprotocols(self) -> frozenset[str]:
        return self._subprotocols

    def create(self, config: Optional[DialectConfig] = None) -> DatabaseDialect:
        return self._dialect_class(config)


def extract_subprotocol(url: Union[str, URL]) -> str:
    """Get the engine-identifying token of a connection URL.

    Args:
        url: JDBC URL (``jdbc:<subprotocol>:<subname>``), SQLAlchemy URL
             string (``<backend>[+driver]://...``) or SQLAlchemy URL object

    Returns:
        The subprotocol, with its original case

    Raises:
        NoDialectMatchError: If the URL has no recognizable subprotocol

    Examples:
        >>> extract_subprotocol("jdbc:gs://localhost:20001/cluster/db")
        'gs'
        >>> extract_subprotocol("postgresql+psycopg://user@localhost/db")
        'postgresql'
    """
    if isinstance(url, URL):
        return url.get_backend_name()

    match = _JDBC_URL.match(url)
    if match:
        return match.group("subprotocol")
    try:
        return make_url(url).get_backend_name()
    except ArgumentError as e:
        raise NoDialectMatchError(f"Not a valid connection URL: {url!r}") from e


class DialectRegistry:
    """Maps subprotocols to dialect providers.

    Build one registry at process start (see ``default_registry``) and pass
    it to whatever resolves dialects. A subprotocol can be registered only
    once, so resolution never depends on registration order.
    """

    def __init__(self, providers: tuple[DialectProvider, ...] = ()):
        self._by_subprotocol: dict[str, DialectProvider] = {}
        self._by_name: dict[str, DialectProvider] = {}
        for provider in providers:
            self.register(provider)

    def register(self, provider: DialectProvider) -> None:
        """Register a provider for all of its subprotocols.

        Raises:
            DialectConfigurationError: If a subprotocol or dialect name is
                already registered; nothing is registered in that case
        """
        taken = sorted(key for key in provider.subprotocols() if key in self._by_subprotocol)
        if taken:
            owners = sorted({self._by_subprotocol[key].dialect_name for key in taken})
            raise DialectConfigurationError(
                f"Subprotocols {taken} of {provider.dialect_name} are already "
                f"registered by {', '.join(owners)}"
            )
        if provider.dialect_name in self._by_name:
            raise DialectConfigurationError(f"Dialect {provider.dialect_name} is already registered")

        for key in provider.subprotocols():
            self._by_subprotocol[key] = provider
        self._by_name[provider.dialect_name] = provider
        logger.debug(
            f"Registered {provider.dialect_name} for subprotocols {sorted(provider.subprotocols())}"
        )

    def resolve(self, url: Union[str, URL]) -> DialectProvider:
        """Find the provider for a connection URL.

        Matching is exact and case-sensitive on the subprotocol token.

        Raises:
            NoDialectMatchError: If no provider serves the subprotocol
        """
        subprotocol = extract_subprotocol(url)
        provider = self._by_subprotocol.get(subprotocol)
        if provider is None:
            supported = ", ".join(self.subprotocols())
            raise NoDialectMatchError(
                f"No dialect registered for subprotocol {subprotocol!r}. "
                f"Supported subprotocols: {supported}"
            )
        return provider

    def create_dialect(
        self,
        url: Union[str, URL],
        config: Optional[DialectConfig] = None,
    ) -> DatabaseDialect:
        """Create the dialect for a connection URL, or a GenericDialect.

        Args:
            url: Connection URL whose subprotocol selects the dialect
            config: Dialect options

        Returns:
            The matching dialect, or GenericDialect when nothing matches
        """
        try:
            provider = self.resolve(url)
        except NoDialectMatchError as e:
            logger.warning(f"{e}; falling back to GenericDialect")
            return GenericDialect(config)
        logger.info(f"Using {provider.dialect_name} for subprotocol {extract_subprotocol(url)!r}")
        return provider.create(config)

    def get(self, dialect_name: str) -> DialectProvider:
        """Get a provider by dialect class name.

        Raises:
            NoDialectMatchError: If no dialect has that name
        """
        try:
            return self._by_name[dialect_name]
        except KeyError:
            supported = ", ".join(sorted(self._by_name))
            raise NoDialectMatchError(
                f"Unsupported dialect: {dialect_name!r}. Supported dialects: {supported}"
            ) from None

    def subprotocols(self) -> list[str]:
        """Get the registered subprotocols, sorted."""
        return sorted(self._by_subprotocol)

    def providers(self) -> list[DialectProvider]:
        """Get the registered providers, sorted by dialect name."""
        return [self._by_name[name] for name in sorted(self._by_name)]

    def __contains__(self, subprotocol: str) -> bool:
        return subprotocol in self._by_subprotocol

    def __len__(self) -> int:
        return len(self._by_name)


def default_registry() -> DialectRegistry:
    """Create a registry holding the built-in dialects."""
    return DialectRegistry((
        SubprotocolBasedProvider(GriddbDialect, "gs"),
        SubprotocolBasedProvider(SQLiteDialect, "sqlite"),
        SubprotocolBasedProvider(PostgreSQLDialect, "postgresql"),
        SubprotocolBasedProvider(MySQLDialect, "mysql", "mariadb"),
    ))
