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

"""Semantic validation for persist configurations.

Structural parsing is handled by the pydantic models in ``schema_definitions``;
this module checks the invariants the generator depends on and collects every
violation so that one run reports all problems at once.
"""

import keyword
from awslabs.cql_dao_generator.core.schema_definitions import (
    KNOWN_KEY_ROLES,
    KeyRole,
    PersistConfig,
    TableDefinition,
)
from awslabs.cql_dao_generator.core.type_mappings import BLOB_COLLECTION_TYPES, normalize_type
from awslabs.cql_dao_generator.core.validation_utils import ValidationResult
from pathlib import PurePosixPath


# Parameter names of the generated DAO methods, and names the generated DTO
# class body resolves after its fields are bound.
RESERVED_COLUMN_NAMES = frozenset(
    {
        'self',
        'session',
        'model_config',
        'Field',
        'Any',
        'UUID',
        'datetime',
        'bool',
        'bytes',
        'dict',
        'float',
        'int',
        'list',
        'set',
        'str',
    }
)


class SchemaValidator:
    """Validates a parsed PersistConfig."""

    def __init__(self):
        """Initialize validator with an empty result."""
        self.result = ValidationResult(is_valid=True, errors=[], warnings=[])

    def validate(self, config: PersistConfig) -> ValidationResult:
        """Validate the whole configuration.

        Args:
            config: Parsed persist configuration

        Returns:
            ValidationResult with errors and warnings
        """
        self.result = ValidationResult(is_valid=True, errors=[], warnings=[])

        if not config.keyspace.strip():
            self.result.add_error(
                'keyspace', 'keyspace cannot be empty', 'Set "keyspace" to the target keyspace'
            )

        if config.model_generation is not None and not config.model_generation.package:
            if not config.model_import:
                self.result.add_warning(
                    'ModelGeneration.Package',
                    'DTO package is empty and no modelPackage is set',
                    'DAO modules will not import their model class; provide it via "imports"',
                )

        if config.model_generation is not None and config.model_generation.location:
            location = PurePosixPath(config.model_generation.location)
            if location.is_absolute() or '..' in location.parts:
                self.result.add_error(
                    'ModelGeneration.Location',
                    f"'{location}' is not inside the output directory",
                    'Use a relative path such as "app/models"',
                )

        if not config.tables:
            self.result.add_error(
                'tables', 'At least one table must be defined', 'Add at least one table definition'
            )
            return self.result

        seen_generated: dict[str, int] = {}
        for i, table in enumerate(config.tables):
            path = f'tables[{i}]'
            self._validate_table(table, path)

            generated = table.generated_name.lower()
            if generated in seen_generated:
                self.result.add_error(
                    f'{path}.generatedName',
                    f"Duplicate generatedName '{table.generated_name}' "
                    f'(already used by tables[{seen_generated[generated]}])',
                    'Each table must write its own DAO/DTO files',
                )
            elif generated:
                seen_generated[generated] = i

        return self.result

    def format_validation_result(self) -> str:
        """Format validation result for display."""
        return self.result.format(
            'Persist configuration validation passed!',
            'Persist configuration validation failed',
        )

    def _validate_table(self, table: TableDefinition, path: str) -> None:
        for attr, alias in (
            ('model_name', 'modelName'),
            ('table_name', 'tableName'),
            ('dao_name', 'dao'),
            ('generated_name', 'generatedName'),
        ):
            value = getattr(table, attr)
            if not value:
                self.result.add_error(f'{path}.{alias}', f'{alias} cannot be empty')
            elif attr != 'table_name' and not _is_identifier(
                value.replace('-', '_') if attr == 'generated_name' else value
            ):
                self.result.add_error(
                    f'{path}.{alias}',
                    f"'{value}' is not a valid Python identifier",
                    'Use letters, digits and underscores only',
                )

        if not table.columns:
            self.result.add_error(
                f'{path}.columns',
                f'Table {table.table_name or path} had no columns defined',
                'Add at least one column definition',
            )
            return

        seen_names: set[str] = set()
        has_partition_key = False
        for j, column in enumerate(table.columns):
            col_path = f'{path}.columns[{j}]'

            if not _is_identifier(column.name):
                self.result.add_error(
                    f'{col_path}.name',
                    f"'{column.name}' is not a usable column name",
                    'Column names become Python identifiers and must not be keywords',
                )
            elif column.name.startswith('_') or column.name in RESERVED_COLUMN_NAMES:
                self.result.add_error(
                    f'{col_path}.name',
                    f"Column name '{column.name}' clashes with generated code",
                    'Rename the column; leading underscores, DAO parameter names and DTO type names are reserved',
                )
            elif column.name in seen_names:
                self.result.add_error(
                    f'{col_path}.name',
                    f"Duplicate column name '{column.name}'",
                    'Column names must be unique within a table',
                )
            seen_names.add(column.name)

            if not column.storage_type.strip():
                self.result.add_error(f'{col_path}.type', 'type cannot be empty')

            if column.key.strip().lower() not in KNOWN_KEY_ROLES:
                self.result.add_warning(
                    f'{col_path}.key',
                    f"Unknown key role '{column.key}', column is treated as a regular column",
                    'Use partition, cluster, cluster-asc or cluster-desc',
                )

            if (
                column.deserialize_target
                and normalize_type(column.storage_type) not in BLOB_COLLECTION_TYPES
            ):
                self.result.add_warning(
                    f'{col_path}.deserializeTo',
                    f"deserializeTo is ignored for type '{column.storage_type}'",
                    'Only list<blob> and map<text,blob> columns can be deserialized',
                )

            if column.key_role is KeyRole.PARTITION:
                has_partition_key = True

        if not has_partition_key:
            self.result.add_error(
                f'{path}.columns',
                f'Table {table.table_name or path} has no partition key',
                'Mark at least one column with "key": "partition"',
            )


def _is_identifier(name: str) -> bool:
    return name.isidentifier() and not keyword.iskeyword(name)
