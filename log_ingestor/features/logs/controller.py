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
from typing import List, Optional

from fastapi import APIRouter, Body, HTTPException, Query
from fastapi.responses import JSONResponse

from log_ingestor.common.utils import log_exception
from log_ingestor.features.logs.service import LogService
from log_ingestor.features.logs.structures import (
    HealthResponse,
    IndexingError,
    IngestResponse,
    LogData,
    LogIngestorError,
    LogSearchParams,
    LogSearchResponse,
    SearchError,
    StoreInitializationError,
)

logger = logging.getLogger(__name__)


def handle_exception(e: Exception) -> HTTPException:
    if isinstance(e, (StoreInitializationError, IndexingError)):
        return HTTPException(status_code=500, detail=str(e))
    if isinstance(e, SearchError):
        return HTTPException(status_code=500, detail="Error executing search query")
    return HTTPException(status_code=500, detail="Internal server error")


class LogsController:
    """
    HTTP surface of the log ingestor.

    - POST /ingest: JSON array of log entries, one document per entry.
    - GET /search: optional query-string filters, returns the engine hit envelope.
    - GET /healthz, GET /ready: liveness and engine readiness checks.

    Endpoints are sync: the search engine client is blocking, FastAPI runs them in its threadpool.
    """

    def __init__(self, router: APIRouter, service: Optional[LogService] = None):
        self.service = service or LogService()

        @router.post(
            "/ingest",
            tags=["Logs"],
            summary="Index a batch of log entries, one document per entry",
            response_model=IngestResponse,
        )
        def ingest_logs(records: List[LogData] = Body(..., description="Log entries to index")):
            try:
                self.service.ingest(records)
                return IngestResponse()
            except LogIngestorError as e:
                log_exception(e, f"ingest of {len(records)} record(s)")
                raise handle_exception(e)

        @router.get(
            "/search",
            tags=["Logs"],
            summary="Search log entries; every given filter must match",
            response_model=LogSearchResponse,
        )
        def search_logs(
            level: Optional[str] = Query(None, description="Log level, e.g. ERROR"),
            resource_id: Optional[str] = Query(None, alias="resourceId"),
            trace_id: Optional[str] = Query(None, alias="traceId"),
            span_id: Optional[str] = Query(None, alias="spanId"),
            commit: Optional[str] = Query(None, description="Commit hash of the emitting build"),
            message: Optional[str] = Query(None, description="Full-text match on the message"),
            start_date: Optional[str] = Query(None, alias="startDate", description="Inclusive lower bound on timestamp"),
            end_date: Optional[str] = Query(None, alias="endDate", description="Inclusive upper bound on timestamp"),
        ):
            params = LogSearchParams(
                level=level,
                resource_id=resource_id,
                trace_id=trace_id,
                span_id=span_id,
                commit=commit,
                message=message,
                start_date=start_date,
                end_date=end_date,
            )
            try:
                return self.service.search(params)
            except LogIngestorError as e:
                log_exception(e, "search")
                raise handle_exception(e)

        @router.get("/healthz", tags=["Health"], response_model=HealthResponse)
        def healthz():
            return HealthResponse(status="ok")

        @router.get("/ready", tags=["Health"], response_model=HealthResponse)
        def ready():
            try:
                if self.service.store.ping():
                    return HealthResponse(status="ready")
            except Exception as e:
                logger.warning(f"[LOGS] readiness check failed: {e}")
            return JSONResponse(status_code=503, content={"status": "unavailable"})
