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

"""Abstract base class for language-specific storage type mappings."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


class CqlType:
    """Scalar storage types understood by the type mapper."""

    TEXT = 'text'
    VARCHAR = 'varchar'
    ASCII = 'ascii'
    UUID = 'uuid'
    TIMEUUID = 'timeuuid'
    INT = 'int'
    BIGINT = 'bigint'
    DOUBLE = 'double'
    FLOAT = 'float'
    BOOLEAN = 'boolean'
    BLOB = 'blob'
    TIMESTAMP = 'timestamp'

    @classmethod
    def values(cls) -> set[str]:
        """All scalar storage type names."""
        return {v for k, v in vars(cls).items() if k.isupper()}


@dataclass(frozen=True)
class ImportFlags:
    """Imports a generated module needs because of the column types it uses."""

    time: bool = False
    uuid: bool = False
    json: bool = False
    any: bool = False

    def __or__(self, other: 'ImportFlags') -> 'ImportFlags':
        """Union of two flag sets."""
        return ImportFlags(
            time=self.time or other.time,
            uuid=self.uuid or other.uuid,
            json=self.json or other.json,
            any=self.any or other.any,
        )


@dataclass(frozen=True)
class TypeSpec:
    """A target type annotation together with the imports it requires."""

    annotation: str
    flags: ImportFlags = field(default_factory=ImportFlags)
    zero_value: str = 'None'  # literal used when the store returns null


class LanguageTypeMappingInterface(ABC):
    """Abstract base class that enforces required type mappings for each language."""

    @property
    @abstractmethod
    def scalar_type_mappings(self) -> dict[str, TypeSpec]:
        """Must provide mappings for all CqlType values used as a column type."""
        pass

    @property
    @abstractmethod
    def element_type_mappings(self) -> dict[str, TypeSpec]:
        """Must provide mappings for all CqlType values used inside list<>/set<>."""
        pass

    @property
    @abstractmethod
    def unknown_type(self) -> TypeSpec:
        """Sentinel used for storage types no rule recognizes."""
        pass

    @abstractmethod
    def sequence_type(self, item_type: str) -> str:
        """Sequence-of-item annotation."""
        pass

    @abstractmethod
    def mapping_type(self, key_type: str, value_type: str) -> str:
        """Key/value mapping annotation."""
        pass

    @property
    def bytes_type(self) -> str:
        """Annotation of a raw blob value."""
        return self.scalar_type_mappings[CqlType.BLOB].annotation

    @property
    def string_type(self) -> str:
        """Annotation of a text value."""
        return self.scalar_type_mappings[CqlType.TEXT].annotation

    def validate_completeness(self) -> None:
        """Validates that every CqlType is mapped both as a column and as an element."""
        required = CqlType.values()

        missing_scalars = required - set(self.scalar_type_mappings.keys())
        if missing_scalars:
            raise ValueError(
                f'Missing scalar type mappings for {self.__class__.__name__}: {missing_scalars}'
            )

        missing_elements = required - set(self.element_type_mappings.keys())
        if missing_elements:
            raise ValueError(
                f'Missing element type mappings for {self.__class__.__name__}: {missing_elements}'
            )

    def get_language_name(self) -> str:
        """Get the language name from the class name (e.g., PythonTypeMappings -> python)."""
        class_name = self.__class__.__name__
        if class_name.endswith('TypeMappings'):
            return class_name[:-12].lower()
        return class_name.lower()
