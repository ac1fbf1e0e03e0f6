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

import os
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

"""
Top level configuration structures of the log ingestor. The YAML file pointed to by
CONFIG_FILE is parsed into a `Configuration`; secrets (password, certificate
fingerprint) are read from the environment so they never live in the YAML file.
"""


class AppConfig(BaseModel):
    name: Optional[str] = "Log Ingestor"
    base_url: str = ""
    address: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "info"
    reload: bool = False
    reload_dir: str = "."


class SearchEngineConfig(BaseModel):
    """
    Connection parameters of the search engine (OpenSearch or an Elasticsearch-compatible cluster).
    Attributes:
        host (str): Engine URL, e.g. https://127.0.0.1:9200.
        username (Optional[str]): Basic-auth user. No auth when unset.
        password (Optional[str]): Basic-auth password, OPENSEARCH_PASSWORD by default.
        certificate_fingerprint (Optional[str]): SHA-256 fingerprint of the engine certificate.
            When set, the TLS connection is pinned to that certificate.
    """

    host: str = Field(..., description="Search engine URL")
    username: Optional[str] = Field(default=None, description="Basic-auth username")
    password: Optional[str] = Field(default_factory=lambda: os.getenv("OPENSEARCH_PASSWORD"), description="Password from env")
    certificate_fingerprint: Optional[str] = Field(
        default_factory=lambda: os.getenv("OPENSEARCH_CERT_FINGERPRINT"),
        description="SHA-256 fingerprint of the engine TLS certificate",
    )
    secure: bool = Field(default=False, description="Use TLS (https)")
    verify_certs: bool = Field(default=False, description="Verify TLS certs")
    timeout: int = Field(default=30, description="Request timeout in seconds")


class OpenSearchLogStorage(BaseModel):
    type: Literal["opensearch"]
    index: str = Field(default="logs", description="Index receiving the ingested log entries")
    create_index: bool = Field(default=True, description="Create the index with its mapping when absent")


class InMemoryLogStorage(BaseModel):
    type: Literal["in_memory"]


LogStorageConfig = Annotated[Union[OpenSearchLogStorage, InMemoryLogStorage], Field(discriminator="type")]


class Configuration(BaseModel):
    app: AppConfig = Field(default_factory=AppConfig)
    search_engine: Optional[SearchEngineConfig] = Field(default=None, description="Required when log_storage.type is 'opensearch'")
    log_storage: LogStorageConfig = Field(..., description="Log storage configuration")
