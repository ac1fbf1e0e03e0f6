from log_ingestor.core.stores.logs.base_log_store import BaseLogStore
from log_ingestor.core.stores.logs.memory_log_store import RamLogStore
from log_ingestor.core.stores.logs.opensearch_log_store import LOG_INDEX_MAPPING, OpenSearchLogStore

__all__ = [
    "BaseLogStore",
    "LOG_INDEX_MAPPING",
    "OpenSearchLogStore",
    "RamLogStore",
]
