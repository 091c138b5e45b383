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

"""Per-language settings: template names, file extension and source formatter.

Each language directory under ``languages/`` carries a ``language_config.json``
validated into the models below.
"""

from awslabs.cql_dao_generator.core.file_utils import FileUtils
from pathlib import Path
from pydantic import BaseModel, ConfigDict, Field, ValidationError


LANGUAGES_DIR = Path(__file__).parent.parent / 'languages'
LANGUAGE_CONFIG_FILE = 'language_config.json'


class FormatterConfig(BaseModel):
    """Formatter run over freshly written files: ``command + format_args + paths``."""

    model_config = ConfigDict(frozen=True)

    command: list[str]
    format_args: list[str] = Field(default_factory=list)
    version_args: list[str] = Field(default_factory=lambda: ['--version'])


class LanguageConfig(BaseModel):
    """Complete language configuration."""

    model_config = ConfigDict(frozen=True)

    name: str
    file_extension: str
    templates: dict[str, str]  # artifact kind ('dao', 'dto') -> template file name
    formatter: FormatterConfig | None = None


class LanguageConfigLoader:
    """Loads language configurations from the bundled language directories."""

    @staticmethod
    def load(language: str) -> LanguageConfig:
        """Load and validate ``languages/<language>/language_config.json``.

        Raises:
            FileNotFoundError: If the language has no configuration
            ValueError: If the name escapes the languages directory or the file is malformed
        """
        try:
            path = FileUtils.resolve_within(
                LANGUAGES_DIR / language / LANGUAGE_CONFIG_FILE,
                LANGUAGES_DIR,
                'Language configuration',
            )
        except FileNotFoundError:
            raise FileNotFoundError(f'Language configuration not found for: {language}')
        except (ValueError, OSError) as e:
            raise ValueError(f'Invalid language: {language}') from e

        data = FileUtils.load_json_file(path, 'Language configuration')
        try:
            return LanguageConfig.model_validate(data)
        except ValidationError as e:
            raise ValueError(f'Malformed language configuration {path}: {e}') from e

    @staticmethod
    def get_available_languages() -> list[str]:
        """Names of the language directories that carry a configuration."""
        return sorted(
            d.name for d in LANGUAGES_DIR.iterdir() if (d / LANGUAGE_CONFIG_FILE).is_file()
        )
