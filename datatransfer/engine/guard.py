"""
Conflict Guard - refuses transfers that would recreate the store being read.

Some sinks can drop and recreate their target before writing. When source
and sink are the same kind of store and point at the same container, doing
so would delete the data mid-read. The guard compares the logical address
of both sides before the operation starts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from datatransfer.config.settings import SettingsBag
from datatransfer.core.exceptions import ContainerConflictError
from datatransfer.core.logger import get_logger

logger = get_logger(__name__)

_ACCOUNT_ENDPOINT = re.compile(r"(?:^|;)\s*AccountEndpoint\s*=\s*([^;]*)", re.IGNORECASE)


@dataclass(frozen=True)
class RecreatableStore:
    """Setting keys that locate a container for a store type with a recreate option."""

    endpoint_key: str
    connection_string_key: str
    database_key: str
    container_key: str
    recreate_key: str


COSMOS_NOSQL = "Cosmos-nosql"

RECREATABLE_STORES: dict[str, RecreatableStore] = {
    COSMOS_NOSQL: RecreatableStore(
        endpoint_key="AccountEndpoint",
        connection_string_key="ConnectionString",
        database_key="Database",
        container_key="Container",
        recreate_key="RecreateContainer",
    ),
}


def endpoint_from_connection_string(connection_string: str | None) -> str | None:
    """
    Extract the ``AccountEndpoint=`` segment of a connection string.

    >>> endpoint_from_connection_string("AccountEndpoint=https://x:443/;AccountKey=k")
    'https://x:443/'
    """
    if not connection_string:
        return None
    match = _ACCOUNT_ENDPOINT.search(connection_string)
    if not match:
        return None
    return match.group(1).strip() or None


def derive_endpoint(settings: SettingsBag, store: RecreatableStore) -> str | None:
    """Explicit endpoint setting first, else the one inside the connection string."""
    endpoint = (settings.get_str(store.endpoint_key) or "").strip()
    if endpoint:
        return endpoint
    return endpoint_from_connection_string(settings.get_str(store.connection_string_key))


def container_address(
    settings: SettingsBag, store: RecreatableStore
) -> tuple[str | None, str | None, str | None]:
    """The (endpoint, database, container) triple one side of an operation points at."""
    return (
        derive_endpoint(settings, store),
        settings.get_str(store.database_key),
        settings.get_str(store.container_key),
    )


def check_operation(operation) -> None:
    """
    Validate one planned operation.

    Raises:
        ContainerConflictError: If the sink would recreate the container the
            source reads from
    """
    source_name = operation.source.display_name
    if source_name != operation.sink.display_name:
        return

    store = RECREATABLE_STORES.get(source_name)
    if store is None:
        return

    if not operation.sink_settings.get_bool(store.recreate_key, False):
        return

    source_address = container_address(operation.source_settings, store)
    sink_address = container_address(operation.sink_settings, store)

    if None in source_address or None in sink_address:
        # Without a full address on both sides there is nothing to compare
        logger.debug(
            f"Operation {operation.index}: incomplete {source_name} address, "
            f"skipping container conflict check"
        )
        return

    if source_address == sink_address:
        endpoint, database, container = sink_address
        raise ContainerConflictError(
            extension=source_name,
            endpoint=endpoint,
            database=database,
            container=container,
            setting=store.recreate_key,
            operation_index=operation.index,
        )

    logger.debug(f"Operation {operation.index}: source and sink containers differ")


def check_operations(operations) -> None:
    """Validate every planned operation; the first conflict aborts."""
    for operation in operations:
        check_operation(operation)
