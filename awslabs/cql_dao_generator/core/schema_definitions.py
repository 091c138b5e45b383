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

"""Schema model for persist configurations.

These pydantic models mirror the JSON document consumed by the generator
(``persist-config.json``). Field aliases keep the document's original key
names; Python attribute names are used everywhere else.
"""

from awslabs.cql_dao_generator.core.utils import dto_module_name
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from typing import Any


DEFAULT_CONFIG_FILE_NAME = 'persist-config.json'
CONFIG_SUBDIRECTORY = 'config'


class KeyRole(Enum):
    """Role a column plays in the primary key."""

    NONE = 'none'
    PARTITION = 'partition'
    CLUSTER = 'cluster'
    CLUSTER_ASC = 'cluster-asc'
    CLUSTER_DESC = 'cluster-desc'

    @property
    def is_clustering(self) -> bool:
        """True for every clustering variant, with or without explicit order."""
        return self in (KeyRole.CLUSTER, KeyRole.CLUSTER_ASC, KeyRole.CLUSTER_DESC)

    @property
    def clustering_direction(self) -> str | None:
        """ASC/DESC for explicitly ordered clustering columns, otherwise None."""
        if self is KeyRole.CLUSTER_ASC:
            return 'ASC'
        if self is KeyRole.CLUSTER_DESC:
            return 'DESC'
        return None


KNOWN_KEY_ROLES = frozenset(role.value for role in KeyRole) | {''}


class _SchemaModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra='ignore')


class ColumnDefinition(_SchemaModel):
    """A single column of a table definition."""

    name: str
    storage_type: str = Field(alias='type')
    key: str = ''
    deserialize_target: str = Field(default='', alias='deserializeTo')

    @field_validator('key', 'deserialize_target', mode='before')
    @classmethod
    def _none_as_empty(cls, v: Any) -> Any:
        return '' if v is None else v

    @property
    def key_role(self) -> KeyRole:
        """Parsed key role; unrecognized values behave as no key role."""
        normalized = self.key.strip().lower()
        if not normalized:
            return KeyRole.NONE
        try:
            return KeyRole(normalized)
        except ValueError:
            return KeyRole.NONE


class TableDefinition(_SchemaModel):
    """One table and the names of the artifacts generated for it."""

    model_name: str = Field(default='', alias='modelName')
    table_name: str = Field(default='', alias='tableName')
    dao_name: str = Field(default='', alias='dao')
    generated_name: str = Field(default='', alias='generatedName')
    columns: list[ColumnDefinition] = Field(default_factory=list)


class ModelGenerationTarget(_SchemaModel):
    """Where and how DTO modules are generated."""

    package: str = Field(default='', alias='Package')
    location: str = Field(default='', alias='Location')
    imports: list[str] = Field(default_factory=list)


class PersistConfig(_SchemaModel):
    """Root configuration shared by every table of a generation run."""

    keyspace: str = ''
    package: str = ''
    boilerplate: str | None = None
    additional_imports: list[str] = Field(default_factory=list, alias='imports')
    model_import: str = Field(default='', alias='modelPackage')
    model_generation: ModelGenerationTarget | None = Field(default=None, alias='ModelGeneration')
    tables: list[TableDefinition] = Field(default_factory=list)

    @field_validator('boilerplate', mode='before')
    @classmethod
    def _empty_boilerplate_as_none(cls, v: Any) -> Any:
        return v or None

    @field_validator('additional_imports', mode='before')
    @classmethod
    def _none_as_no_imports(cls, v: Any) -> Any:
        return [] if v is None else v

    def model_module_for(self, table: TableDefinition) -> str | None:
        """Module the DAO for ``table`` imports its model class from.

        Falls back to the generated DTO module when no explicit model package
        is configured; returns None when the model is expected to come from
        the boilerplate or the additional imports.
        """
        if self.model_import:
            return self.model_import
        if self.model_generation is not None and self.model_generation.package:
            return f'{self.model_generation.package}.{dto_module_name(table.generated_name)}'
        return None


def format_validation_errors(e: ValidationError) -> str:
    """Format pydantic validation errors as ``location: message`` lines.

    Example:
        ``tables[0].columns[1].type: Field required``
    """
    formatted_errors = []
    for error in e.errors():
        location = _format_location(error.get('loc', ()))
        msg = error.get('msg', '')
        formatted_errors.append(f'{location}: {msg}' if location else msg)
    return '\n'.join(formatted_errors)


def _format_location(loc: tuple) -> str:
    parts: list[str] = []
    for item in loc:
        if isinstance(item, int) and parts:
            parts[-1] = f'{parts[-1]}[{item}]'
        else:
            parts.append(str(item))
    return '.'.join(parts)
