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

"""
Base Log Store Abstraction
==========================

This module defines the *storage contract* behind the ingest and search endpoints.

Key ideas:
- `BaseLogStore` is a `Protocol` (static duck-typing): implementations don't
  need inheritance, only matching shape.
- The store speaks the engine's language: it receives JSON-ready documents and
  query documents, and returns the raw engine response. Serialization of
  `LogData` and decoding of hits stay in the service layer.
- Prod is OpenSearch (or an Elasticsearch-compatible cluster); dev and tests
  can run against the in-memory store.
"""

from __future__ import annotations

from typing import Any, Dict, Protocol


class BaseLogStore(Protocol):
    """Abstract log store API used by the log service.

    Implementation notes:
    - `index_record` writes exactly one document under the caller-provided id.
      Errors propagate; the store never retries.
    - `search` forwards the query document verbatim with total-hit tracking
      enabled and returns the engine response body untouched.
    """

    def ensure_ready(self) -> None:
        """Ensure the backing index exists (mapping applied).

        Called once at startup; failures are logged by the caller and are not fatal,
        the next write or search surfaces the real error.
        """
        ...

    def ping(self) -> bool:
        """Return True when the backing engine answers."""
        ...

    def index_record(self, document_id: str, document: Dict[str, Any]) -> None:
        """Index one document under `document_id`."""
        ...

    def search(self, query: Dict[str, Any]) -> Dict[str, Any]:
        """Run `query` and return the raw engine response (with `hits.hits`)."""
        ...
