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

"""Base generator abstract class and core interfaces."""

from abc import ABC, abstractmethod
from awslabs.cql_dao_generator.core.language_config import LanguageConfigLoader
from awslabs.cql_dao_generator.core.schema_definitions import PersistConfig
from awslabs.cql_dao_generator.core.type_mappings import TypeMapper
from awslabs.cql_dao_generator.generators.emission_model import (
    EmissionModel,
    EmissionModelBuilder,
)
from awslabs.cql_dao_generator.output.output_manager import GeneratedFile


class BaseGenerator(ABC):
    """Base class for code generators."""

    def __init__(self, language: str = 'python'):
        """Initialize code generator.

        Args:
            language: Target programming language
        """
        self.language = language
        self.language_config = LanguageConfigLoader.load(language)
        self.type_mapper = TypeMapper(language)
        self.model_builder = EmissionModelBuilder(self.type_mapper)

    @abstractmethod
    def render_dao(self, model: EmissionModel, boilerplate_text: str = '') -> str:
        """Render the DAO source of one table."""
        pass

    @abstractmethod
    def render_dto(self, model: EmissionModel) -> str:
        """Render the DTO source of one table."""
        pass

    @abstractmethod
    def generate_all(
        self, config: PersistConfig, boilerplate_text: str = ''
    ) -> list[GeneratedFile]:
        """Render every artifact of the configuration, without writing anything."""
        pass
