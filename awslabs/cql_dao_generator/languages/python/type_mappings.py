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

"""Python-specific type mappings."""

from awslabs.cql_dao_generator.core.language_type_mapper import (
    CqlType,
    ImportFlags,
    LanguageTypeMappingInterface,
    TypeSpec,
)


_TIME = ImportFlags(time=True)
_UUID = ImportFlags(uuid=True)


class PythonTypeMappings(LanguageTypeMappingInterface):
    """Python-specific type mappings - implements all required abstract properties"""

    @property
    def scalar_type_mappings(self) -> dict[str, TypeSpec]:
        """Column types; uuid and timestamp columns are nullable in the store."""
        return {
            CqlType.TEXT: TypeSpec('str', zero_value="''"),
            CqlType.VARCHAR: TypeSpec('str', zero_value="''"),
            CqlType.ASCII: TypeSpec('str', zero_value="''"),
            CqlType.UUID: TypeSpec('UUID | None', _UUID),
            CqlType.TIMEUUID: TypeSpec('UUID | None', _UUID),
            CqlType.INT: TypeSpec('int', zero_value='0'),
            CqlType.BIGINT: TypeSpec('int', zero_value='0'),
            CqlType.DOUBLE: TypeSpec('float', zero_value='0.0'),
            CqlType.FLOAT: TypeSpec('float', zero_value='0.0'),
            CqlType.BOOLEAN: TypeSpec('bool', zero_value='False'),
            CqlType.BLOB: TypeSpec('bytes', zero_value="b''"),
            CqlType.TIMESTAMP: TypeSpec('datetime | None', _TIME),
        }

    @property
    def element_type_mappings(self) -> dict[str, TypeSpec]:
        """Collection element types; elements are never null."""
        return {
            CqlType.TEXT: TypeSpec('str', zero_value="''"),
            CqlType.VARCHAR: TypeSpec('str', zero_value="''"),
            CqlType.ASCII: TypeSpec('str', zero_value="''"),
            CqlType.UUID: TypeSpec('UUID', _UUID),
            CqlType.TIMEUUID: TypeSpec('UUID', _UUID),
            CqlType.INT: TypeSpec('int', zero_value='0'),
            CqlType.BIGINT: TypeSpec('int', zero_value='0'),
            CqlType.DOUBLE: TypeSpec('float', zero_value='0.0'),
            CqlType.FLOAT: TypeSpec('float', zero_value='0.0'),
            CqlType.BOOLEAN: TypeSpec('bool', zero_value='False'),
            CqlType.BLOB: TypeSpec('bytes', zero_value="b''"),
            CqlType.TIMESTAMP: TypeSpec('datetime', _TIME),
        }

    @property
    def unknown_type(self) -> TypeSpec:
        """typing.Any"""
        return TypeSpec('Any', ImportFlags(any=True))

    def sequence_type(self, item_type: str) -> str:
        """Python-specific sequence type formatting"""
        return f'list[{item_type}]'

    def mapping_type(self, key_type: str, value_type: str) -> str:
        """Python-specific mapping type formatting"""
        return f'dict[{key_type}, {value_type}]'
