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

import pytest
from fastapi.testclient import TestClient

from log_ingestor.application_context import ApplicationContext
from log_ingestor.common.structures import AppConfig, Configuration, InMemoryLogStorage
from log_ingestor.main import create_app


@pytest.fixture(scope="function")
def configuration() -> Configuration:
    return Configuration(
        app=AppConfig(
            base_url="",
            address="127.0.0.1",
            port=3000,
            log_level="info",
        ),
        log_storage=InMemoryLogStorage(type="in_memory"),
    )


@pytest.fixture(scope="function", autouse=True)
def app_context(configuration: Configuration):
    """
    Initializes the ApplicationContext with the in-memory log store.
    """
    ApplicationContext.reset_instance()  # 🧼 Reset singleton
    context = ApplicationContext(configuration)
    yield context
    ApplicationContext.reset_instance()


@pytest.fixture(scope="function")
def client_fixture(app_context: ApplicationContext, configuration: Configuration):
    """
    TestClient for FastAPI app. ApplicationContext is preloaded.
    """
    app = create_app(configuration)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def log_store(app_context: ApplicationContext):
    """
    Returns the log store from the initialized ApplicationContext.
    """
    return app_context.get_instance().get_log_store()


@pytest.fixture
def sample_records():
    return [
        {
            "level": "ERROR",
            "message": "Disk full on /dev/sda1",
            "resourceId": "server-1234",
            "timestamp": "2023-09-15T08:00:00Z",
            "traceId": "abc-xyz-123",
            "spanId": "span-456",
            "commit": "5e5342f",
            "metadata": {"parentResourceId": "server-0987"},
        },
        {
            "level": "INFO",
            "message": "Service started",
            "resourceId": "server-5678",
            "timestamp": "2023-09-16T12:30:00Z",
            "traceId": "def-uvw-456",
            "spanId": "span-789",
            "commit": "a1b2c3d",
            "metadata": {},
        },
        {
            "level": "ERROR",
            "message": "Connection refused by upstream",
            "resourceId": "server-1234",
            "timestamp": "2023-09-20T23:15:00Z",
            "traceId": "ghi-rst-789",
            "spanId": "span-000",
            "commit": "5e5342f",
            "metadata": {"region": "eu-west-1"},
        },
    ]
