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
Search query construction
=========================

Maps the optional search parameters onto a boolean query document:

    {"query": {"bool": {"must": [<clause>, ...]}}}

- one `match` clause per non-empty parameter, on the like-named index field;
- one inclusive `range` clause on `timestamp` when *both* dates are given;
- an absent or empty parameter adds nothing (unconstrained, not "match empty").

Values are forwarded as-is: dates are not validated and nothing is escaped,
the engine is the single authority on what a valid value is.
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from log_ingestor.features.logs.structures import LogSearchParams

TIMESTAMP_FIELD = "timestamp"

# (python attribute on LogSearchParams, index field), in clause order.
MATCH_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("level", "level"),
    ("resource_id", "resourceId"),
    ("trace_id", "traceId"),
    ("span_id", "spanId"),
    ("commit", "commit"),
    ("message", "message"),
)


def build_match_clauses(params: LogSearchParams) -> List[Dict[str, Any]]:
    clauses: List[Dict[str, Any]] = []
    for attribute, field in MATCH_FIELDS:
        value = getattr(params, attribute)
        if value:
            clauses.append({"match": {field: value}})
    return clauses


def build_date_range_clause(params: LogSearchParams) -> Dict[str, Any] | None:
    if params.start_date and params.end_date:
        return {
            "range": {
                TIMESTAMP_FIELD: {
                    "gte": params.start_date,
                    "lte": params.end_date,
                }
            }
        }
    return None


def build_query(params: LogSearchParams) -> Dict[str, Any]:
    """Return the engine query document for `params` (conjunction of all clauses)."""
    must = build_match_clauses(params)
    date_range = build_date_range_clause(params)
    if date_range is not None:
        must.append(date_range)
    return {"query": {"bool": {"must": must}}}
