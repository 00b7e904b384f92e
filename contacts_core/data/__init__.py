"""Remote data access: DataStore capability, Supabase adapter, repositories."""

from .store import DataStore, QueryResult, SupabaseDataStore, Order
from .parsing_results import ParsingResultsRepository, PARSING_RESULTS_TABLE

__all__ = [
    "DataStore",
    "QueryResult",
    "SupabaseDataStore",
    "Order",
    "ParsingResultsRepository",
    "PARSING_RESULTS_TABLE",
]
