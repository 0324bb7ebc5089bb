"""Service layer for support_copilot."""
from support_copilot.services.factory import ServiceFactory, get_service_factory
from support_copilot.services.index_service import IndexService
from support_copilot.services.query_service import QueryService
from support_copilot.services.solution_service import SolutionService

__all__ = [
    "IndexService",
    "QueryService",
    "ServiceFactory",
    "SolutionService",
    "get_service_factory",
]
