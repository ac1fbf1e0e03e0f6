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

#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Entrypoint for the Log Ingestor App.
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import APIRouter, FastAPI
from rich.logging import RichHandler

from log_ingestor.application_context import ApplicationContext
from log_ingestor.common.fastapi_handlers import register_exception_handlers
from log_ingestor.common.http_logging import RequestResponseLogger
from log_ingestor.common.structures import Configuration
from log_ingestor.common.utils import parse_server_configuration
from log_ingestor.features.logs.controller import LogsController

# -----------------------
# LOGGING + ENVIRONMENT
# -----------------------

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "./config/configuration.yaml"


def configure_logging(log_level: str):
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s - %(levelname)s - %(filename)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[RichHandler(rich_tracebacks=False, show_time=False, show_path=False)],
        force=True,
    )
    # Keep client libraries quiet, their request lines duplicate ours.
    for noisy in ("opensearch", "urllib3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
    logging.getLogger(__name__).info(f"Logging configured at {log_level.upper()} level.")


def load_environment(dotenv_path: str = "./config/.env"):
    if load_dotenv(dotenv_path):
        logging.getLogger().info(f"✅ Loaded environment variables from: {dotenv_path}")
    else:
        logging.getLogger().warning(f"⚠️ No .env file found at: {dotenv_path}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    context = ApplicationContext.get_instance()
    try:
        context.get_log_store().ensure_ready()
    except Exception as e:
        # Not fatal: ingest/search report the engine error per request.
        logger.warning(f"⚠️ Log store not ready at startup: {e}")
    yield
    ApplicationContext.close_connections()


# -----------------------
# APP CREATION
# -----------------------


def create_app(configuration: Optional[Configuration] = None) -> FastAPI:
    load_environment()
    if configuration is None:
        config_file = os.environ.get("CONFIG_FILE", DEFAULT_CONFIG_FILE)
        configuration = parse_server_configuration(config_file)
    configure_logging(configuration.app.log_level)
    base_url = configuration.app.base_url
    logger.info(f"🛠️ create_app() called with base_url={base_url!r}")

    ApplicationContext(configuration)

    app = FastAPI(
        title=configuration.app.name,
        docs_url=f"{base_url}/docs",
        redoc_url=f"{base_url}/redoc",
        openapi_url=f"{base_url}/openapi.json",
        lifespan=lifespan,
    )
    app.add_middleware(RequestResponseLogger, skip_paths={f"{base_url}/healthz", f"{base_url}/ready"})
    register_exception_handlers(app)

    router = APIRouter(prefix=base_url)
    LogsController(router)
    logger.info("🧩 All controllers registered.")
    app.include_router(router)

    return app


# -----------------------
# MAIN ENTRYPOINT
# -----------------------

if __name__ == "__main__":
    print("To start the app, use uvicorn cli with:")
    print("uvicorn --factory log_ingestor.main:create_app --host 0.0.0.0 --port 3000")
