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

from pydantic import Field
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class SearchEngineSettings(BaseSettings):
    """
    SearchEngine Settings
    -----------------
    Secrets of the search engine connection, read from the process environment
    (or ./config/.env once loaded by the app factory).
    Attributes:
        search_engine_password (str): The password for SearchEngine authentication.
    """

    search_engine_password: str = Field(..., validation_alias="OPENSEARCH_PASSWORD")
    model_config = {
        "extra": "ignore"  # allows unrelated variables in .env or os.environ
    }
