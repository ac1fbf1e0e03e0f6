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
import sys
from typing import Dict, Optional

import yaml
from pydantic import ValidationError

from log_ingestor.common.structures import Configuration

logger = logging.getLogger(__name__)


def parse_server_configuration(configuration_path: str) -> Configuration:
    """
    Parses the server configuration from a YAML file.

    Args:
        configuration_path (str): The path to the configuration YAML file.

    Returns:
        Configuration: The parsed configuration object.
    """
    try:
        with open(configuration_path, "r") as f:
            config: Dict = yaml.safe_load(f) or {}
    except FileNotFoundError:
        print(f"Configuration file not found: {configuration_path}")
        sys.exit(1)
    except yaml.YAMLError as e:
        print(f"Error while parsing configuration file {configuration_path}: {e}")
        sys.exit(1)
    return Configuration(**config)


def validate_settings_or_exit(settings_class, name: Optional[str] = None):
    try:
        settings = settings_class()
        logger.info(f"{name or settings_class.__name__} loaded successfully.")
        return settings
    except ValidationError as e:
        logger.critical(f"{name or settings_class.__name__} is misconfigured:")
        for error in e.errors():
            field = error.get("loc")[0]
            model_field = settings_class.model_fields.get(field)
            alias = model_field.validation_alias if model_field is not None else field
            msg = error.get("msg")
            logger.critical(f"  - Missing or invalid env var: {alias or field} ({msg})")
        sys.exit(1)


def log_exception(e: Exception, operation: str) -> None:
    """
    Logs a failed operation with its exception chain, attributed to the caller's line.
    The HTTP detail is built separately, so nothing is returned.
    """
    cause = e.__cause__ or e.__context__
    if cause is not None:
        logger.error("[LOGS] %s failed: %s (caused by %r)", operation, e, cause, exc_info=e, stacklevel=2)
    else:
        logger.error("[LOGS] %s failed: %s", operation, e, exc_info=e, stacklevel=2)
