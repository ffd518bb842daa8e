# Copyright 2026 TIER IV, inc.
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

"""Configuration management for structval."""

import os
import logging
from dataclasses import dataclass

from .utils.logging_utils import configure_split_stream_logging

DEFAULT_BASE_URI = "http://localhost/"


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ValidatorConfig:
    """Configuration for schema compilation, validation and the checker CLI."""
    base_uri: str = DEFAULT_BASE_URI
    validate_schema_itself: bool = False
    log_level: str = "WARNING"
    print_level: str = "ERROR"
    cache_enabled: bool = True

    @classmethod
    def from_env(cls) -> 'ValidatorConfig':
        """Create configuration from environment variables."""
        return cls(
            base_uri=os.getenv('STRUCTVAL_BASE_URI', DEFAULT_BASE_URI),
            validate_schema_itself=_env_flag('STRUCTVAL_VALIDATE_SCHEMA', 'false'),
            log_level=os.getenv('STRUCTVAL_LOG_LEVEL', 'WARNING'),
            print_level=os.getenv('STRUCTVAL_PRINT_LEVEL', 'ERROR'),
            cache_enabled=_env_flag('STRUCTVAL_CACHE_ENABLED', 'true'),
        )

    def set_logging(self) -> logging.Logger:
        """Setup logging based on configuration."""
        level = getattr(logging, self.log_level.upper(), logging.WARNING)
        stderr_level = getattr(logging, self.print_level.upper(), logging.ERROR)

        formatter = logging.Formatter('%(name)s - %(levelname)s - %(message)s')
        return configure_split_stream_logging(
            'structval', level=level, stderr_level=stderr_level, formatter=formatter
        )


# Global configuration instance
default_config = ValidatorConfig.from_env()
