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

"""Primary key structure derived from a table's ordered columns."""

from awslabs.cql_dao_generator.core.errors import ConfigurationError
from awslabs.cql_dao_generator.core.schema_definitions import ColumnDefinition, KeyRole
from dataclasses import dataclass


@dataclass(frozen=True)
class KeyStructure:
    """Partition/clustering keys of one table and the CQL fragments built from them.

    All sequences preserve column order. ``all_keys`` is the partition keys
    followed by the clustering keys, which is the order used by full-key
    lookups and deletes.
    """

    partition_keys: tuple[str, ...]
    clustering_keys: tuple[str, ...] = ()
    clustering_order: tuple[str, ...] = ()

    @classmethod
    def from_columns(cls, columns: list[ColumnDefinition], table_name: str = '') -> 'KeyStructure':
        """Partition the columns by key role.

        Raises:
            ConfigurationError: If no column is a partition key
        """
        partition_keys = []
        clustering_keys = []
        clustering_order = []
        for column in columns:
            role = column.key_role
            if role is KeyRole.PARTITION:
                partition_keys.append(column.name)
            elif role.is_clustering:
                clustering_keys.append(column.name)
                if role.clustering_direction:
                    clustering_order.append(f'{column.name} {role.clustering_direction}')

        if not partition_keys:
            raise ConfigurationError(f'Partitioning keys were empty for table {table_name!r}')

        return cls(
            partition_keys=tuple(partition_keys),
            clustering_keys=tuple(clustering_keys),
            clustering_order=tuple(clustering_order),
        )

    @property
    def all_keys(self) -> tuple[str, ...]:
        """Partition keys followed by clustering keys."""
        return self.partition_keys + self.clustering_keys

    @property
    def partition_key_clause(self) -> str:
        """'id' for a single partition key, '(k1, k2)' for a composite one."""
        if len(self.partition_keys) == 1:
            return self.partition_keys[0]
        return f'({", ".join(self.partition_keys)})'

    @property
    def clustering_columns_clause(self) -> str:
        """', ts, seq' appended after the partition clause, or ''."""
        if not self.clustering_keys:
            return ''
        return f', {", ".join(self.clustering_keys)}'

    @property
    def clustering_order_clause(self) -> str:
        """' WITH CLUSTERING ORDER BY (ts DESC)' or '' when no column declares an order."""
        if not self.clustering_order:
            return ''
        return f' WITH CLUSTERING ORDER BY ({", ".join(self.clustering_order)})'

    @property
    def primary_key_clause(self) -> str:
        """Body of the PRIMARY KEY (...) definition."""
        return f'{self.partition_key_clause}{self.clustering_columns_clause}'

    @property
    def all_keys_clause(self) -> str:
        return ', '.join(self.all_keys)

    @property
    def all_keys_equality(self) -> str:
        """'k1=? AND k2=?' over every key column; identifies exactly one row."""
        return _equality(self.all_keys)

    @property
    def partition_keys_clause(self) -> str:
        return ', '.join(self.partition_keys)

    @property
    def partition_keys_equality(self) -> str:
        """'k1=? AND k2=?' over the partition keys; selects one partition."""
        return _equality(self.partition_keys)


def _equality(keys: tuple[str, ...]) -> str:
    return ' AND '.join(f'{k}=?' for k in keys)
