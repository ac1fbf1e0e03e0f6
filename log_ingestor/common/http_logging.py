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
import time
from typing import Iterable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = logging.getLogger("http")


class RequestResponseLogger(BaseHTTPMiddleware):
    """Logs one line per request and one per response (DEBUG), health checks excluded."""

    def __init__(self, app: ASGIApp, skip_paths: Iterable[str] = ()):
        super().__init__(app)
        self.skip_paths = frozenset(skip_paths)

    async def dispatch(self, request: Request, call_next):
        skip_logging = request.url.path in self.skip_paths
        t0 = time.perf_counter()
        if not skip_logging:
            logger.debug(
                f">>> {request.method} {request.url.path} qs='{request.url.query}' "
                f"client={request.client.host if request.client else None} "
                f"length={request.headers.get('content-length')}"
            )
        response: Response = await call_next(request)
        dt = (time.perf_counter() - t0) * 1000
        if not skip_logging:
            logger.debug(f"<<< {request.method} {request.url.path} status={response.status_code} ms={dt:.1f}")
        return response
