# Copyright 2026 Firefly Software Solutions Inc.
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
"""StructlogAdapter: renders dynaquery's log records through structlog.

dynaquery logs from two kinds of call sites: modules that use a stdlib
``logging.getLogger(__name__)`` (dropped directives, malformed request
parameters) and the repository, which emits structured events through
``structlog.get_logger``.  The adapter installs one handler whose
``ProcessorFormatter`` renders both the same way, console or JSON.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from dynaquery.config.properties.logging import LoggingProperties

_HANDLER_NAME = "dynaquery"


def _level(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


class StructlogAdapter:
    """Default :class:`~dynaquery.logging.port.LoggingPort` backed by structlog."""

    def __init__(self, stream: Any = None) -> None:
        self._stream = stream or sys.stdout
        self.root_level = logging.INFO
        self.module_levels: dict[str, int] = {}
        self.json = False

    def apply(self, properties: LoggingProperties) -> None:
        levels = dict(properties.level)
        self.root_level = _level(levels.pop("root", "INFO"))
        self.module_levels = {module: _level(level) for module, level in levels.items()}
        self.json = str(properties.format).lower() == "json"

        shared: list[structlog.types.Processor] = [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
        ]
        structlog.configure(
            processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=False,
        )
        renderer = structlog.processors.JSONRenderer() if self.json else structlog.dev.ConsoleRenderer(colors=False)
        formatter = structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
        self._install(formatter)

        for module, level in self.module_levels.items():
            logging.getLogger(module).setLevel(level)

    def _install(self, formatter: logging.Formatter) -> None:
        root = logging.getLogger()
        for handler in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
            root.removeHandler(handler)
        handler = logging.StreamHandler(self._stream)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(formatter)
        root.addHandler(handler)
        root.setLevel(self.root_level)

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)
