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
# Purpose:
# - In-memory log store for dev/tests: zero infra, same query documents as OpenSearch.
#
# Design notes:
# - Documents live in an insertion-ordered dict keyed by document id.
# - Thread-safe with a simple RLock (handlers run in the threadpool).
# - Only the subset of the query DSL produced by the query builder is understood:
#   bool.must with `match` and inclusive `range` (gte/lte). Anything else is rejected,
#   like an engine would reject a malformed query.
# - `match` follows the engine default operator (OR): any query token found in the field
#   is a hit, case-insensitive. Tokens are runs of word characters, so "abc-xyz-123"
#   is three tokens.
# - The engine's default page size (10 hits) is mirrored unless the query sets `size`.

from __future__ import annotations

import re
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from log_ingestor.core.stores.logs.base_log_store import BaseLogStore

DEFAULT_SIZE = 10
_TOKEN = re.compile(r"\w+", re.UNICODE)


def _tokens(value: Any) -> List[str]:
    return _TOKEN.findall(str(value).lower())


def _parse_date(value: Any) -> datetime:
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _match(doc: Dict[str, Any], clause: Dict[str, Any]) -> bool:
    ((field, expected),) = clause.items()
    if isinstance(expected, dict):
        expected = expected.get("query", "")
    wanted = _tokens(expected)
    if not wanted:
        return False
    actual = doc.get(field)
    if actual is None:
        return False
    return not set(wanted).isdisjoint(_tokens(actual))


def _range(doc: Dict[str, Any], clause: Dict[str, Any]) -> bool:
    ((field, bounds),) = clause.items()
    actual = doc.get(field)
    if actual is None:
        return False
    value = _parse_date(actual)
    gte: Optional[Any] = bounds.get("gte")
    lte: Optional[Any] = bounds.get("lte")
    if gte is not None and value < _parse_date(gte):
        return False
    if lte is not None and value > _parse_date(lte):
        return False
    return True


_CLAUSES = {"match": _match, "range": _range}


class RamLogStore(BaseLogStore):
    """
    RAM-backed log store.
    - Keeps every document until the process exits.
    - Search is a linear scan, fine for dev and test volumes.
    """

    def __init__(self, index: str = "logs"):
        self.index = index
        self._docs: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.RLock()

    # --- lifecycle ------------------------------------------------------------
    def ensure_ready(self) -> None:
        # Nothing to provision.
        return

    def ping(self) -> bool:
        return True

    # --- writes ---------------------------------------------------------------
    def index_record(self, document_id: str, document: Dict[str, Any]) -> None:
        with self._lock:
            self._docs[document_id] = dict(document)

    # --- reads ----------------------------------------------------------------
    def search(self, query: Dict[str, Any]) -> Dict[str, Any]:
        must = query.get("query", {}).get("bool", {}).get("must", [])
        size = int(query.get("size", DEFAULT_SIZE))
        # Validate the whole query before scanning so malformed input fails even on an empty store.
        for clause in must:
            ((kind, _),) = clause.items()
            if kind not in _CLAUSES:
                raise ValueError(f"Unsupported clause type: {kind}")

        with self._lock:
            items = list(self._docs.items())

        def ok(doc: Dict[str, Any]) -> bool:
            for clause in must:
                ((kind, body),) = clause.items()
                if not _CLAUSES[kind](doc, body):
                    return False
            return True

        matched = [(doc_id, doc) for doc_id, doc in items if ok(doc)]
        return {
            "took": 0,
            "timed_out": False,
            "hits": {
                "total": {"value": len(matched), "relation": "eq"},
                "max_score": 1.0 if matched else None,
                "hits": [{"_index": self.index, "_id": doc_id, "_score": 1.0, "_source": doc} for doc_id, doc in matched[:size]],
            },
        }

    def count(self) -> int:
        with self._lock:
            return len(self._docs)
