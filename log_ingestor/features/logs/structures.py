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

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Wire names are camelCase; python attributes stay snake_case.


class LogData(BaseModel):
    """
    One structured log entry as posted by producers and as stored in the index.
    Every field is optional on input: producers often omit trace/span/commit.
    """

    model_config = ConfigDict(populate_by_name=True)

    level: str = ""
    message: str = ""
    resource_id: str = Field("", alias="resourceId")
    timestamp: Optional[datetime] = None
    trace_id: str = Field("", alias="traceId")
    span_id: str = Field("", alias="spanId")
    commit: str = ""
    metadata: Dict[str, str] = Field(default_factory=dict)

    # An explicit null is treated like an absent field.
    @field_validator("level", "message", "resource_id", "trace_id", "span_id", "commit", mode="before")
    @classmethod
    def _null_string_is_empty(cls, v):
        return "" if v is None else v

    @field_validator("metadata", mode="before")
    @classmethod
    def _null_metadata_is_empty(cls, v):
        if v is None:
            return {}
        if isinstance(v, dict):
            return {k: "" if val is None else val for k, val in v.items()}
        return v

    def to_document(self) -> Dict[str, object]:
        """JSON-ready document body, keyed by wire names."""
        return self.model_dump(mode="json", by_alias=True)


class LogSearchParams(BaseModel):
    """Optional search criteria. An empty string means 'unconstrained'."""

    model_config = ConfigDict(populate_by_name=True)

    level: Optional[str] = None
    resource_id: Optional[str] = Field(None, alias="resourceId")
    trace_id: Optional[str] = Field(None, alias="traceId")
    span_id: Optional[str] = Field(None, alias="spanId")
    commit: Optional[str] = None
    message: Optional[str] = None
    start_date: Optional[str] = Field(None, alias="startDate")
    end_date: Optional[str] = Field(None, alias="endDate")


class LogHit(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    source: LogData = Field(..., alias="_source")


class LogHits(BaseModel):
    hits: List[LogHit] = Field(default_factory=list)


class LogSearchResponse(BaseModel):
    """Hit envelope returned by GET /search: {"hits": {"hits": [{"_source": ...}]}}."""

    hits: LogHits = Field(default_factory=LogHits)


class IngestResponse(BaseModel):
    message: str = "Log ingested successfully"


class HealthResponse(BaseModel):
    status: str


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class LogIngestorError(Exception):
    """Base class of the errors surfaced by the log service."""


class StoreInitializationError(LogIngestorError):
    def __init__(self, message: str = "Failed to initialize search engine client"):
        super().__init__(message)


class IndexingError(LogIngestorError):
    """A single record could not be serialized or indexed. Earlier records stay indexed."""

    def __init__(self, document_id: str, position: int):
        self.document_id = document_id
        self.position = position
        super().__init__(f"Failed to index document with ID={document_id}")


class SearchError(LogIngestorError):
    def __init__(self, message: str = "Error executing search query"):
        super().__init__(message)
