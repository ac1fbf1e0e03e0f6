# Copyright Thales 2025
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import logging
import uuid
from typing import Callable, List, Optional

from pydantic import ValidationError

from log_ingestor.application_context import ApplicationContext
from log_ingestor.core.stores.logs.base_log_store import BaseLogStore
from log_ingestor.features.logs.query_builder import build_query
from log_ingestor.features.logs.structures import (
    IndexingError,
    LogData,
    LogSearchParams,
    LogSearchResponse,
    SearchError,
    StoreInitializationError,
)

logger = logging.getLogger(__name__)


def new_document_id() -> str:
    return str(uuid.uuid4())


class LogService:
    """
    Ingest and search over the configured log store.

    Ingest writes one document per record, in input order, and stops at the
    first failure: what was written stays written, what follows is never tried.
    Search forwards the built query and decodes the hit list, nothing more.
    """

    def __init__(self, store: Optional[BaseLogStore] = None, id_factory: Callable[[], str] = new_document_id):
        self._store = store
        self._id_factory = id_factory

    @property
    def store(self) -> BaseLogStore:
        if self._store is None:
            try:
                self._store = ApplicationContext.get_instance().get_log_store()
            except Exception as e:
                raise StoreInitializationError() from e
        return self._store

    def ingest(self, records: List[LogData]) -> List[str]:
        """
        Index every record under a fresh id.
        Returns:
            List[str]: the generated document ids, in input order.
        Raises:
            StoreInitializationError: the store could not be built. Nothing was written.
            IndexingError: record at `position` failed; records before it are indexed.
        """
        store = self.store
        document_ids: List[str] = []
        for position, record in enumerate(records):
            document_id = self._id_factory()
            try:
                store.index_record(document_id, record.to_document())
            except Exception as e:
                logger.error(f"[INGEST] record #{position} id={document_id} failed after {len(document_ids)} write(s): {e}")
                raise IndexingError(document_id, position) from e
            document_ids.append(document_id)
        logger.info(f"[INGEST] indexed {len(document_ids)} record(s).")
        return document_ids

    def search(self, params: LogSearchParams) -> LogSearchResponse:
        try:
            query = build_query(params)
            logger.debug(f"[SEARCH] query={query}")
            raw = self.store.search(query)
        except StoreInitializationError:
            raise
        except Exception as e:
            raise SearchError() from e

        try:
            return LogSearchResponse.model_validate({"hits": {"hits": raw.get("hits", {}).get("hits", [])}})
        except (ValidationError, AttributeError) as e:
            raise SearchError("Failed to parse search response") from e
