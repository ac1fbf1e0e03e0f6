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
#
# OpenSearch-backed LOG store:
# - Single index with explicit mapping (stable fields)
# - Writes: one index call per record, id chosen by the caller
# - Reads: query document forwarded verbatim, total hits tracked
#
# Notes for future devs:
# - Identifier-like fields (level, resourceId, traceId, spanId, commit) are `text`
#   with a `.keyword` subfield, the layout an engine infers for strings on its own.
#   `match` stays case-insensitive on them, `.keyword` is there for exact terms/aggs.
# - timestamp is a real date so the inclusive range clause is cheap.
# - metadata keys are free-form; they are mapped dynamically under `metadata`.

from __future__ import annotations

import logging
from typing import Any, Dict

from opensearchpy import OpenSearch, OpenSearchException

from log_ingestor.core.stores.logs.base_log_store import BaseLogStore

logger = logging.getLogger(__name__)


def _text_with_keyword() -> Dict[str, Any]:
    return {"type": "text", "fields": {"keyword": {"type": "keyword", "ignore_above": 256}}}


LOG_INDEX_MAPPING: Dict[str, Any] = {
    "settings": {
        "index.number_of_shards": 1,
        "index.number_of_replicas": 1,
        "index.refresh_interval": "1s",
    },
    "mappings": {
        "dynamic": "false",
        "properties": {
            "level": _text_with_keyword(),
            "message": {"type": "text"},
            "resourceId": _text_with_keyword(),
            "timestamp": {
                "type": "date",
                "format": "strict_date_optional_time||epoch_millis",
            },
            "traceId": _text_with_keyword(),
            "spanId": _text_with_keyword(),
            "commit": _text_with_keyword(),
            "metadata": {"type": "object", "dynamic": True},
        },
    },
}


class OpenSearchLogStore(BaseLogStore):
    """
    OpenSearch-backed log store (per-record writes + verbatim query reads).
    The client is shared: it is built once by the ApplicationContext.
    """

    def __init__(self, client: OpenSearch, index: str, create_index: bool = True):
        self.client = client
        self.index = index
        self.create_index = create_index

    # -- setup -----------------------------------------------------------------
    def ensure_ready(self) -> None:
        if not self.create_index:
            return
        try:
            if not self.client.indices.exists(index=self.index):
                self.client.indices.create(index=self.index, body=LOG_INDEX_MAPPING)
                logger.info(f"[LOGS] created index '{self.index}'.")
            else:
                logger.info(f"[LOGS] index '{self.index}' already exists.")
        except OpenSearchException as e:
            logger.error(f"[LOGS] ensure_ready failed: {e}")
            raise

    def ping(self) -> bool:
        return bool(self.client.ping())

    # -- writes ----------------------------------------------------------------
    def index_record(self, document_id: str, document: Dict[str, Any]) -> None:
        resp = self.client.index(index=self.index, id=document_id, body=document)
        logger.debug(f"[LOGS] indexed id={document_id} result={resp.get('result')}")

    # -- reads -----------------------------------------------------------------
    def search(self, query: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.search(index=self.index, body=query, track_total_hits=True)
