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
"""DynaQueryApplication: configuration entry point.

Loads configuration once, applies its logging section and binds the query
properties every request-scoped collaborator shares.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from dynaquery.config.properties.logging import LoggingProperties
from dynaquery.config.properties.query import QueryProperties
from dynaquery.core.config import Config
from dynaquery.data.parser import DirectiveParser
from dynaquery.data.relational.repository import DynamicRepository
from dynaquery.logging.port import LoggingPort
from dynaquery.logging.structlog_adapter import StructlogAdapter
from dynaquery.service.binding import RecordBinding
from dynaquery.service.record_service import RecordService

E = TypeVar("E")
D = TypeVar("D")

_PROFILES_ENV = "DYNAQUERY_PROFILES_ACTIVE"


class DynaQueryApplication:
    """Bootstraps dynaquery from configuration.

    Startup sequence:
    1. Load configuration (packaged defaults, the file, profile overlays)
    2. Configure logging from ``dynaquery.logging``
    3. Bind ``dynaquery.query`` to :class:`QueryProperties`

    Usage::

        app = DynaQueryApplication("dynaquery.yaml")

        async with unit_of_work(session_factory) as session:
            service = app.service(session, MapperBinding(Person, PersonData))
            page = await service.on_filter(request.query_params)

    Args:
        config_path: YAML or TOML file; packaged defaults only when omitted.
        config: Ready-made configuration, used instead of *config_path*.
        active_profiles: Profile overlays to load. Defaults to the
            comma-separated ``DYNAQUERY_PROFILES_ACTIVE`` variable.
        logging_port: Logging backend; a :class:`StructlogAdapter` by default.
    """

    def __init__(
        self,
        config_path: str | Path | None = None,
        *,
        config: Config | None = None,
        active_profiles: list[str] | None = None,
        logging_port: LoggingPort | None = None,
    ) -> None:
        self.active_profiles = active_profiles if active_profiles is not None else self._profiles_from_env()
        if config is not None:
            self.config = config
        elif config_path is not None:
            self.config = Config.from_file(config_path, active_profiles=self.active_profiles)
        else:
            self.config = Config(Config._load_packaged_defaults())

        self._logging = logging_port or StructlogAdapter()
        self._logging.apply(self.config.bind(LoggingProperties))
        self.query_properties = self.config.bind(QueryProperties)

        self._logger = self._logging.get_logger("dynaquery.core")
        self._logger.info(
            "dynaquery_configured",
            sources=self.config.loaded_sources,
            profiles=self.active_profiles,
            default_page_size=self.query_properties.default_page_size,
        )

    @staticmethod
    def _profiles_from_env() -> list[str]:
        raw = os.environ.get(_PROFILES_ENV, "")
        return [p.strip() for p in raw.split(",") if p.strip()]

    def parser(self) -> DirectiveParser:
        return DirectiveParser(self.query_properties)

    def repository(self, session: AsyncSession | None = None) -> DynamicRepository:
        return DynamicRepository(session, self.query_properties)

    def service(self, session: AsyncSession, binding: RecordBinding[E, D]) -> RecordService[E, D]:
        """A record service for *binding* over *session*, sharing the bound properties."""
        return RecordService(self.repository(session), binding, self.parser())

    def get_logger(self, name: str) -> Any:
        return self._logging.get_logger(name)
