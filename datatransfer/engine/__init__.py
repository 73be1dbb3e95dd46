"""
Orchestration engine: planning, conflict checks and execution.
"""

from datatransfer.engine.guard import (
    COSMOS_NOSQL,
    RECREATABLE_STORES,
    RecreatableStore,
    check_operation,
    check_operations,
    container_address,
    derive_endpoint,
    endpoint_from_connection_string,
)
from datatransfer.engine.planner import Operation, plan_operations, require_extension_names
from datatransfer.engine.runner import (
    EXIT_FAILURE,
    EXIT_SUCCESS,
    OperationResult,
    RunResult,
    TransferRunner,
)

__all__ = [
    "COSMOS_NOSQL",
    "EXIT_FAILURE",
    "EXIT_SUCCESS",
    "RECREATABLE_STORES",
    "Operation",
    "OperationResult",
    "RecreatableStore",
    "RunResult",
    "TransferRunner",
    "check_operation",
    "check_operations",
    "container_address",
    "derive_endpoint",
    "endpoint_from_connection_string",
    "plan_operations",
    "require_extension_names",
]
