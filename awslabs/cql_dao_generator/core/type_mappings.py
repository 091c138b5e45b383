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

"""Storage type to target type mapping.

``TypeMapper.map`` is a pure function of the storage type string and the
optional deserialize target. Import requirements are returned as flags so the
emission model builder can union them per table.
"""

import re
from awslabs.cql_dao_generator.core.language_type_mapper import (
    ImportFlags,
    LanguageTypeMappingInterface,
)
from dataclasses import dataclass
from loguru import logger


LIST_OF_BLOB = 'list<blob>'
MAP_OF_TEXT_TO_BLOB = 'map<text,blob>'

# Blob collections that may carry a deserialize target, and how they are iterated.
BLOB_COLLECTION_TYPES = {LIST_OF_BLOB: 'list', MAP_OF_TEXT_TO_BLOB: 'map'}

# Exactly one level of nesting: list<scalar> or set<scalar>.
COLLECTION_PATTERN = re.compile(r'^(?:list|set)<(\w+)>$')

SUPPORTED_LANGUAGES = ['python']


def normalize_type(storage_type: str) -> str:
    """Lower-case and drop whitespace, so 'MAP<text, blob>' matches 'map<text,blob>'."""
    return re.sub(r'\s+', '', storage_type).lower()


@dataclass(frozen=True)
class TypeMapping:
    """Result of mapping one column's storage type."""

    target_type: str
    serialized_type: str = ''
    container: str | None = None  # 'list' | 'map' for collection columns
    flags: ImportFlags = ImportFlags()
    known: bool = True
    zero_value: str = 'None'

    @property
    def is_serialized(self) -> bool:
        """True when elements are round-tripped through structured serialization."""
        return bool(self.serialized_type)


class TypeMapper:
    """Maps storage types to language-specific types."""

    def __init__(self, language: str = 'python'):
        """Initialize the type mapper for a specific language."""
        self.language = language
        self.language_mappings = self._load_language_mappings(language)

        # Validate completeness at initialization
        self.language_mappings.validate_completeness()

    def _load_language_mappings(self, language: str) -> LanguageTypeMappingInterface:
        """Dynamically load and validate language-specific mappings."""
        if language == 'python':
            from awslabs.cql_dao_generator.languages.python.type_mappings import (
                PythonTypeMappings,
            )

            return PythonTypeMappings()
        raise ValueError(f'Unsupported language: {language}. Supported: {SUPPORTED_LANGUAGES}')

    def map(self, storage_type: str, deserialize_target: str = '') -> TypeMapping:
        """Map a storage type (and optional deserialize target) to a target type.

        Args:
            storage_type: Column type as written in the configuration, e.g. 'list<blob>'
            deserialize_target: Element type for blob collections, '' for none

        Returns:
            TypeMapping with the target type, serialization metadata and import flags
        """
        mappings = self.language_mappings
        normalized = normalize_type(storage_type)
        deserialize_target = (deserialize_target or '').strip()

        scalar = mappings.scalar_type_mappings.get(normalized)
        if scalar is not None:
            return TypeMapping(
                target_type=scalar.annotation, flags=scalar.flags, zero_value=scalar.zero_value
            )

        container = BLOB_COLLECTION_TYPES.get(normalized)
        if container is not None:
            if container == 'list':
                target = mappings.sequence_type(mappings.bytes_type)
            else:
                target = mappings.mapping_type(mappings.string_type, mappings.bytes_type)
            if not deserialize_target:
                return TypeMapping(target_type=target, container=container)
            return TypeMapping(
                target_type=target,
                serialized_type=deserialize_target,
                container=container,
                flags=ImportFlags(json=True),
            )

        match = COLLECTION_PATTERN.match(normalized)
        if match:
            element = mappings.element_type_mappings.get(match.group(1))
            if element is not None:
                return TypeMapping(
                    target_type=mappings.sequence_type(element.annotation),
                    container='list',
                    flags=element.flags,
                )

        logger.warning(f"Unrecognized storage type, mapping to unknown. storage_type: '{storage_type}'")
        unknown = mappings.unknown_type
        return TypeMapping(
            target_type=unknown.annotation,
            flags=unknown.flags,
            known=False,
            zero_value=unknown.zero_value,
        )

    def serialized_field_type(self, mapping: TypeMapping, element_type: str) -> str:
        """Application-level type of a serialized blob collection, e.g. list[Tag]."""
        if mapping.container == 'map':
            return self.language_mappings.mapping_type(
                self.language_mappings.string_type, element_type
            )
        return self.language_mappings.sequence_type(element_type)
