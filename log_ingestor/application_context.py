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
import threading
from typing import Optional

from opensearchpy import OpenSearch, RequestsHttpConnection, Urllib3HttpConnection

from log_ingestor.common.structures import Configuration, SearchEngineConfig
from log_ingestor.common.utils import validate_settings_or_exit
from log_ingestor.config.search_engine_settings import SearchEngineSettings
from log_ingestor.core.stores.logs.base_log_store import BaseLogStore
from log_ingestor.core.stores.logs.memory_log_store import RamLogStore
from log_ingestor.core.stores.logs.opensearch_log_store import OpenSearchLogStore

logger = logging.getLogger(__name__)


def build_opensearch_client(config: SearchEngineConfig) -> OpenSearch:
    """
    Build the search engine client from injected configuration.

    Certificate pinning needs the urllib3 transport (it is the one exposing
    `ssl_assert_fingerprint`); otherwise we keep the requests transport.
    """
    http_auth = (config.username, config.password) if config.username else None
    if config.certificate_fingerprint:
        return OpenSearch(
            config.host,
            http_auth=http_auth,
            use_ssl=True,
            verify_certs=config.verify_certs,
            ssl_assert_fingerprint=config.certificate_fingerprint,
            connection_class=Urllib3HttpConnection,
            ssl_show_warn=False,
            timeout=config.timeout,
        )
    return OpenSearch(
        config.host,
        http_auth=http_auth,
        use_ssl=config.secure,
        verify_certs=config.verify_certs,
        connection_class=RequestsHttpConnection,
        ssl_show_warn=False,
        timeout=config.timeout,
    )


class ApplicationContext:
    """
    Process-wide holder of the configuration and of the long-lived resources
    built from it: one search engine client and one log store, shared by every request.
    """

    _instance: Optional["ApplicationContext"] = None
    _opensearch_client: Optional[OpenSearch] = None
    _log_store_instance: Optional[BaseLogStore] = None

    def __init__(self, config: Configuration):
        # Allow reuse if already initialized
        if ApplicationContext._instance is not None:
            return

        self.config = config
        self._lock = threading.Lock()
        ApplicationContext._instance = self
        self._log_config_summary()

    @classmethod
    def get_instance(cls) -> "ApplicationContext":
        """
        Get the singleton instance of ApplicationContext.
        Raises:
            RuntimeError: If the ApplicationContext is not initialized.
        """
        if cls._instance is None:
            raise RuntimeError("ApplicationContext is not initialized yet.")
        return cls._instance

    @classmethod
    def reset_instance(cls):
        """Reset the singleton instance (used in tests)."""
        cls.close_connections()
        cls._instance = None
        cls._opensearch_client = None
        cls._log_store_instance = None

    @classmethod
    def close_connections(cls):
        if cls._opensearch_client is not None:
            cls._opensearch_client.close()
            cls._opensearch_client = None
            cls._log_store_instance = None
            logger.info("[LOGS] search engine client closed.")

    def get_opensearch_client(self) -> OpenSearch:
        if ApplicationContext._opensearch_client is not None:
            return ApplicationContext._opensearch_client
        config = self.config.search_engine
        if config is None:
            raise ValueError("Missing 'search_engine' section: required by the opensearch log storage")
        with self._lock:
            if ApplicationContext._opensearch_client is None:
                ApplicationContext._opensearch_client = build_opensearch_client(config)
        return ApplicationContext._opensearch_client

    def get_log_store(self) -> BaseLogStore:
        if ApplicationContext._log_store_instance is not None:
            return ApplicationContext._log_store_instance

        config = self.config.log_storage
        if config.type == "in_memory":
            store: BaseLogStore = RamLogStore()
        elif config.type == "opensearch":
            store = OpenSearchLogStore(
                client=self.get_opensearch_client(),
                index=config.index,
                create_index=config.create_index,
            )
        else:
            raise ValueError(f"Unsupported log storage backend: {config.type}")

        ApplicationContext._log_store_instance = store
        return store

    def _log_sensitive(self, name: str, value: Optional[str]):
        logger.info(f"     ↳ {name} set: {'✅' if value else '❌'}")

    def _log_config_summary(self):
        storage = self.config.log_storage
        logger.info("🔧 Application configuration summary:")
        logger.info("--------------------------------------------------")
        logger.info(f"  📚 Log storage backend: {storage.type}")
        if storage.type == "opensearch":
            s = self.config.search_engine
            if s is None:
                logger.warning("⚠️ No search_engine section configured; the log store cannot be built.")
            else:
                logger.info(f"     ↳ Host: {s.host}")
                logger.info(f"     ↳ Index: {storage.index}")
                logger.info(f"     ↳ User: {s.username or '(anonymous)'}")
                if s.username and not s.password:
                    settings = validate_settings_or_exit(SearchEngineSettings, "Search Engine Settings")
                    s.password = settings.search_engine_password
                self._log_sensitive("OPENSEARCH_PASSWORD", s.password)
                self._log_sensitive("OPENSEARCH_CERT_FINGERPRINT", s.certificate_fingerprint)
        logger.info("--------------------------------------------------")


def get_app_context() -> ApplicationContext:
    return ApplicationContext.get_instance()
