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

"""Per-table rendering context.

The emission model holds everything the templates need for one table, fully
resolved: mapped column types, key clauses, import lines and the names used
inside the generated code. Deriving the model and rendering text are separate
stages; templates only lay out what the model already decided.
"""

import json
from awslabs.cql_dao_generator.core.errors import ConfigurationError
from awslabs.cql_dao_generator.core.key_structure import KeyStructure
from awslabs.cql_dao_generator.core.language_type_mapper import ImportFlags
from awslabs.cql_dao_generator.core.schema_definitions import (
    ColumnDefinition,
    PersistConfig,
    TableDefinition,
)
from awslabs.cql_dao_generator.core.type_mappings import TypeMapper, TypeMapping
from awslabs.cql_dao_generator.core.utils import (
    dao_module_name,
    dto_module_name,
    to_lower_camel,
)
from dataclasses import dataclass
from loguru import logger


@dataclass(frozen=True)
class ColumnEmission:
    """One column as seen by the templates."""

    name: str
    storage_type: str
    target_type: str
    json_name: str
    dto_type: str
    zero_value: str = 'None'
    container: str | None = None
    serialized_type: str = ''  # deserialize target as configured
    element_type: str = ''  # name of the deserialize target inside generated code
    element_module: str = ''  # module to import element_type from, '' when already in scope

    @property
    def is_serialized(self) -> bool:
        return bool(self.serialized_type)

    @property
    def adapter_name(self) -> str:
        """Module-level TypeAdapter constant of a serialized column."""
        return f'_{self.name.upper()}_ADAPTER'

    @property
    def serialized_var(self) -> str:
        return f'serialized_{self.name}'

    @property
    def insert_value(self) -> str:
        """Expression bound to this column's placeholder in the insert statement."""
        if self.is_serialized:
            return self.serialized_var
        return f'r.{self.name}'

    @property
    def scan_value(self) -> str:
        """Expression turning the scanned row attribute into the DTO value.

        Null collections come back from the store as None and become empty
        containers; null scalars become the type's zero value. Serialized
        columns start empty and are filled by the deserialize block.
        """
        ref = f'row.{self.name}'
        if self.is_serialized:
            return '{}' if self.container == 'map' else '[]'
        if self.container == 'map':
            return f'dict({ref} or {{}})'
        if self.container == 'list':
            return f'list({ref} or ())'
        if self.zero_value == 'None':
            return ref
        return f'{ref} if {ref} is not None else {self.zero_value}'

    @property
    def dto_default(self) -> str:
        """Default keyword of the DTO field declaration."""
        if self.container == 'map':
            return 'default_factory=dict'
        if self.container == 'list':
            return 'default_factory=list'
        return f'default={self.zero_value}'


@dataclass(frozen=True)
class EmissionModel:
    """Rendering context of the DAO and DTO artifacts of one table."""

    keyspace: str
    package: str
    model: str
    table: str
    dao: str
    generated_name: str
    columns: tuple[ColumnEmission, ...]
    keys: KeyStructure
    flags: ImportFlags
    model_module: str | None
    additional_imports: tuple[str, ...]
    dto_imports: tuple[str, ...]
    model_json: str

    @property
    def qualified_table(self) -> str:
        return f'{self.keyspace}.{self.table}'

    @property
    def stream_class(self) -> str:
        return f'{self.model}Stream'

    @property
    def row_class(self) -> str:
        return f'_{self.model}Row'

    @property
    def dao_module(self) -> str:
        return dao_module_name(self.generated_name)

    @property
    def dto_module(self) -> str:
        return dto_module_name(self.generated_name)

    @property
    def insert_fields(self) -> str:
        """Column list of INSERT and SELECT statements, in column order."""
        return ', '.join(c.name for c in self.columns)

    @property
    def insert_values(self) -> str:
        return ', '.join('?' for _ in self.columns)

    @property
    def insert_resource(self) -> str:
        """Parameter tuple bound to the insert statement."""
        return _tuple_expr([c.insert_value for c in self.columns])

    @property
    def serialized_columns(self) -> list[ColumnEmission]:
        return [c for c in self.columns if c.is_serialized]

    @property
    def key_columns(self) -> list[ColumnEmission]:
        """Columns of every key, partition keys first."""
        return [self._column(name) for name in self.keys.all_keys]

    @property
    def partition_columns(self) -> list[ColumnEmission]:
        return [self._column(name) for name in self.keys.partition_keys]

    @property
    def all_keys_params(self) -> str:
        return _tuple_expr(list(self.keys.all_keys))

    @property
    def partition_keys_params(self) -> str:
        return _tuple_expr(list(self.keys.partition_keys))

    @property
    def delete_params(self) -> str:
        return _tuple_expr([f'r.{k}' for k in self.keys.all_keys])

    @property
    def create_table_cql(self) -> str:
        body = ''.join(f'    {c.name} {c.storage_type},\n' for c in self.columns)
        return (
            f'CREATE TABLE IF NOT EXISTS {self.qualified_table} (\n'
            f'{body}'
            f'    PRIMARY KEY ({self.keys.primary_key_clause})\n'
            f'){self.keys.clustering_order_clause};'
        )

    @property
    def insert_cql(self) -> str:
        return (
            f'INSERT INTO {self.qualified_table} ({self.insert_fields}) '
            f'VALUES ({self.insert_values});'
        )

    @property
    def select_single_cql(self) -> str:
        return (
            f'SELECT {self.insert_fields} FROM {self.qualified_table} '
            f'WHERE {self.keys.all_keys_equality};'
        )

    @property
    def select_list_cql(self) -> str:
        return (
            f'SELECT {self.insert_fields} FROM {self.qualified_table} '
            f'WHERE {self.keys.partition_keys_equality};'
        )

    @property
    def delete_cql(self) -> str:
        return f'DELETE FROM {self.qualified_table} WHERE {self.keys.all_keys_equality};'

    @property
    def dao_imports(self) -> list[str]:
        """Import lines of the DAO module after the fixed runtime imports.

        Additional imports come first, in configured order, followed by the
        modules of qualified deserialize targets and finally the model import,
        which also brings in unqualified deserialize targets.
        """
        lines = list(self.additional_imports)
        names_by_module = _element_imports(self.serialized_columns)
        if self.model_module:
            model_names = names_by_module.setdefault(self.model_module, [])
            model_names.insert(0, self.model)
            for c in self.serialized_columns:
                if not c.element_module and c.element_type not in model_names:
                    model_names.append(c.element_type)
        lines.extend(
            f'from {module} import {", ".join(names)}' for module, names in names_by_module.items()
        )
        return _dedupe(lines)

    @property
    def dto_module_imports(self) -> list[str]:
        """Import lines of the DTO module besides pydantic and the type imports."""
        lines = list(self.dto_imports)
        lines.extend(
            f'from {module} import {", ".join(names)}'
            for module, names in _element_imports(self.serialized_columns).items()
        )
        return _dedupe(lines)

    def _column(self, name: str) -> ColumnEmission:
        for c in self.columns:
            if c.name == name:
                return c
        raise KeyError(name)


class EmissionModelBuilder:
    """Builds an EmissionModel from the persist configuration and one table."""

    def __init__(self, type_mapper: TypeMapper | None = None):
        """Initialize with the type mapper of the target language."""
        self.type_mapper = type_mapper or TypeMapper()

    def build(self, config: PersistConfig, table: TableDefinition) -> EmissionModel:
        """Resolve the rendering context of ``table``.

        Raises:
            ConfigurationError: If the table has no columns or no partition key
        """
        if not table.columns:
            raise ConfigurationError(f'Table {table.table_name!r} had no columns defined')

        keys = KeyStructure.from_columns(table.columns, table.table_name)

        flags = ImportFlags()
        columns = []
        for column in table.columns:
            mapping = self.type_mapper.map(column.storage_type, column.deserialize_target)
            flags |= mapping.flags
            columns.append(self._build_column(column, mapping, config.model_import))

        dto_imports: list[str] = []
        if config.model_generation is not None:
            dto_imports = [import_line(i) for i in config.model_generation.imports]

        model = EmissionModel(
            keyspace=config.keyspace,
            package=config.package,
            model=table.model_name,
            table=table.table_name,
            dao=table.dao_name,
            generated_name=table.generated_name,
            columns=tuple(columns),
            keys=keys,
            flags=flags,
            model_module=config.model_module_for(table),
            additional_imports=tuple(_dedupe(import_line(i) for i in config.additional_imports)),
            dto_imports=tuple(_dedupe(dto_imports)),
            model_json=json.dumps(
                table.model_dump(by_alias=True, mode='json'), indent=2, sort_keys=True
            ),
        )
        logger.debug(
            f'Built emission model for {model.qualified_table}: '
            f'{len(columns)} columns, keys {list(keys.all_keys)}, '
            f'{len(model.serialized_columns)} serialized'
        )
        return model

    def _build_column(
        self, column: ColumnDefinition, mapping: TypeMapping, model_import: str
    ) -> ColumnEmission:
        element_module = ''
        element_type = ''
        dto_type = mapping.target_type
        if mapping.is_serialized:
            element_module, element_type = split_element_type(
                mapping.serialized_type, model_import
            )
            dto_type = self.type_mapper.serialized_field_type(mapping, element_type)

        return ColumnEmission(
            name=column.name,
            storage_type=column.storage_type.strip(),
            target_type=mapping.target_type,
            json_name=to_lower_camel(column.name),
            dto_type=dto_type,
            zero_value=mapping.zero_value,
            container=mapping.container,
            serialized_type=mapping.serialized_type,
            element_type=element_type,
            element_module=element_module,
        )


def split_element_type(serialized_type: str, model_import: str = '') -> tuple[str, str]:
    """Split a deserialize target into (module, name).

    The model package prefix is dropped, since the model module is imported
    anyway. An unqualified name yields an empty module.

    Examples:
        - ('models.Tag', 'models') -> ('', 'Tag')
        - ('app.types.Tag', '') -> ('app.types', 'Tag')
        - ('Tag', '') -> ('', 'Tag')
    """
    name = serialized_type
    if model_import and name.startswith(model_import + '.'):
        name = name[len(model_import) + 1 :]
    if '.' in name:
        module, _, name = name.rpartition('.')
        return module, name
    return '', name


def import_line(entry: str) -> str:
    """Turn an import entry into a statement: 'a.b' -> 'import a.b'; statements pass through."""
    entry = entry.strip()
    if entry.startswith(('import ', 'from ')):
        return entry
    return f'import {entry}'


def _element_imports(columns: list[ColumnEmission]) -> dict[str, list[str]]:
    names_by_module: dict[str, list[str]] = {}
    for c in columns:
        if c.element_module:
            names = names_by_module.setdefault(c.element_module, [])
            if c.element_type not in names:
                names.append(c.element_type)
    return names_by_module


def _tuple_expr(items: list[str]) -> str:
    if len(items) == 1:
        return f'({items[0]},)'
    return f'({", ".join(items)})'


def _dedupe(items) -> list[str]:
    seen: set[str] = set()
    result = []
    for item in items:
        if item and item not in seen:
            seen.add(item)
            result.append(item)
    return result
