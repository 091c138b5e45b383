# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
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

"""Persist configuration loading: locate -> parse."""

from awslabs.cql_dao_generator.core.errors import ConfigurationError
from awslabs.cql_dao_generator.core.file_utils import FileUtils
from awslabs.cql_dao_generator.core.schema_definitions import (
    CONFIG_SUBDIRECTORY,
    DEFAULT_CONFIG_FILE_NAME,
    PersistConfig,
    format_validation_errors,
)
from awslabs.cql_dao_generator.core.utils import to_snake_case
from loguru import logger
from pathlib import Path
from pydantic import ValidationError
from typing import Any


class SchemaLoader:
    """Handles the loading workflow for batch and single-table (legacy) runs.

    Files are looked up in ``search_dir`` first and then in its ``config/``
    subdirectory, the same way for the persist configuration, legacy model
    files and the boilerplate template.
    """

    def __init__(self, config_path: str | Path | None = None, search_dir: str | Path | None = None):
        """Initialize SchemaLoader.

        Args:
            config_path: Explicit persist configuration file; looked up when None
            search_dir: Directory searched for configuration files (default: cwd)
        """
        self.config_path = Path(config_path) if config_path else None
        self.search_dir = Path(search_dir) if search_dir else Path.cwd()

    @property
    def search_dirs(self) -> list[Path]:
        return [self.search_dir, self.search_dir / CONFIG_SUBDIRECTORY]

    def locate(self, file_name: str = DEFAULT_CONFIG_FILE_NAME) -> Path:
        """Find a configuration file.

        Raises:
            ConfigurationError: If the file does not exist in any search directory
        """
        if self.config_path is not None and file_name == DEFAULT_CONFIG_FILE_NAME:
            if not self.config_path.is_file():
                raise ConfigurationError(f'Persist configuration not found: {self.config_path}')
            return self.config_path

        found = FileUtils.find_first_existing(file_name, self.search_dirs)
        if found is None:
            searched = ', '.join(str(d) for d in self.search_dirs)
            raise ConfigurationError(f'{file_name} not found (searched: {searched})')
        return found

    def parse(self) -> PersistConfig:
        """Load and parse the persist configuration without semantic validation.

        Raises:
            ConfigurationError: If the file is missing, empty, not JSON or malformed
        """
        path = self.locate()
        logger.info(f'Loading persist configuration from {path}')
        return parse_persist_config(_load_json(path, 'Persist configuration'), str(path))

    def parse_legacy(
        self,
        model: str,
        dao: str,
        table: str | None = None,
        keyspace: str = '',
        package: str = '',
    ) -> PersistConfig:
        """Build a one-table configuration from ``<model>.json``, an array of columns.

        The table name defaults to the snake_case model name and the generated
        artifact name to the model name.

        Raises:
            ConfigurationError: If the model file is missing or not an array of columns
        """
        path = self.locate(f'{model}.json')
        logger.info(f'Loading columns of {model} from {path}')
        columns = _load_json(path, 'Model')
        if not isinstance(columns, list):
            raise ConfigurationError(f'{path} must contain an array of column definitions')

        return parse_persist_config(
            {
                'keyspace': keyspace,
                'package': package,
                'tables': [
                    {
                        'modelName': model,
                        'tableName': table or to_snake_case(model),
                        'dao': dao,
                        'generatedName': model,
                        'columns': columns,
                    }
                ],
            },
            str(path),
        )

    def load_boilerplate(self, config: PersistConfig) -> str:
        """Read the boilerplate template text named by the configuration, '' if none.

        Relative paths are resolved against the search directories and then
        against the directory of the persist configuration.

        Raises:
            ConfigurationError: If a boilerplate is configured but cannot be read
        """
        if not config.boilerplate:
            return ''

        search_dirs = list(self.search_dirs)
        if self.config_path is not None:
            search_dirs.append(self.config_path.parent)
        found = FileUtils.find_first_existing(config.boilerplate, search_dirs)
        if found is None:
            raise ConfigurationError(f'Boiler plate template did not exist: {config.boilerplate}')
        try:
            return FileUtils.load_text_file(found, 'Boilerplate template')
        except (FileNotFoundError, ValueError) as e:
            raise ConfigurationError(str(e)) from e


def parse_persist_config(data: Any, source: str = '<memory>') -> PersistConfig:
    """Parse a JSON document into a PersistConfig.

    Raises:
        ConfigurationError: If the document is empty or does not match the model
    """
    if not data:
        raise ConfigurationError(f'Persist configuration is empty: {source}')
    if not isinstance(data, dict):
        raise ConfigurationError(f'Persist configuration must be a JSON object: {source}')
    try:
        return PersistConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(
            f'Invalid persist configuration {source}:\n{format_validation_errors(e)}'
        ) from e


def _load_json(path: Path, file_name: str) -> Any:
    try:
        return FileUtils.load_json_file(path, file_name)
    except (FileNotFoundError, ValueError) as e:
        raise ConfigurationError(str(e)) from e
