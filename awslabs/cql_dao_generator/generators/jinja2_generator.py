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

from awslabs.cql_dao_generator.core.errors import TemplateError
from awslabs.cql_dao_generator.core.schema_definitions import PersistConfig
from awslabs.cql_dao_generator.core.utils import to_lower_camel
from awslabs.cql_dao_generator.generators.base_generator import BaseGenerator
from awslabs.cql_dao_generator.generators.emission_model import EmissionModel
from awslabs.cql_dao_generator.output.output_manager import GeneratedFile
from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template, TemplateNotFound
from jinja2 import TemplateError as JinjaTemplateError
from loguru import logger
from pathlib import Path, PurePosixPath


def comment_lines(text: str) -> str:
    """Prefix every line with '# ' so arbitrary text can sit in a generated header."""
    return '\n'.join(f'# {line}'.rstrip() for line in str(text).splitlines())


def package_path(package: str) -> PurePosixPath:
    """'app.dao' -> 'app/dao'; an empty package is the output root."""
    return PurePosixPath(*package.split('.')) if package else PurePosixPath()


class Jinja2Generator(BaseGenerator):
    """Generator using Jinja2 templates."""

    def __init__(self, templates_dir: str | Path | None = None, language: str = 'python'):
        """Initialize the Jinja2 generator and load the DAO and DTO templates.

        Raises:
            TemplateError: If a required template is missing or does not parse
        """
        super().__init__(language)

        if templates_dir is None:
            generator_dir = Path(__file__).parent.parent
            templates_dir = generator_dir / 'languages' / language / 'templates'
        self.templates_dir = Path(templates_dir)
        if not self.templates_dir.is_dir():
            raise TemplateError(f'Templates directory not found: {self.templates_dir}')

        # Note: autoescape is explicitly set to False for code generation.
        # Output is Python source written to files, and HTML escaping would
        # corrupt it (<, >, & and quotes are all meaningful in code).
        # StrictUndefined turns any unresolved reference into a render failure.
        self.env = Environment(  # nosec B701 - Content is NOT HTML and NOT served
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.env.filters['lower_camel'] = to_lower_camel
        self.env.filters['comment'] = comment_lines
        self.env.filters['py_str'] = repr

        templates = self.language_config.templates
        self.dao_template = self._load_template(templates['dao'])
        self.dto_template = self._load_template(templates['dto'])

    def _load_template(self, name: str) -> Template:
        try:
            return self.env.get_template(name)
        except TemplateNotFound as e:
            raise TemplateError(
                f"Required template '{name}' not found in {self.templates_dir}"
            ) from e
        except JinjaTemplateError as e:
            raise TemplateError(f"Template '{name}' is not legal: {e}") from e

    def _render(self, template: Template, what: str, **context) -> str:
        try:
            return template.render(**context)
        except JinjaTemplateError as e:
            raise TemplateError(f'Error executing {what}: {e}') from e

    def render_boilerplate(self, model: EmissionModel, boilerplate_text: str) -> str:
        """Render caller-supplied template text against the table's emission model."""
        if not boilerplate_text or not boilerplate_text.strip():
            return ''
        try:
            template = self.env.from_string(boilerplate_text)
        except JinjaTemplateError as e:
            raise TemplateError(f'Boilerplate template is not legal: {e}') from e
        rendered = self._render(template, f'boilerplate for {model.table}', m=model)
        return rendered.strip('\n')

    def render_dao(self, model: EmissionModel, boilerplate_text: str = '') -> str:
        """Render the DAO module of one table, with the boilerplate spliced in."""
        boilerplate = self.render_boilerplate(model, boilerplate_text)
        return self._render(
            self.dao_template, f'template for {model.table}', m=model, boilerplate=boilerplate
        )

    def render_dto(self, model: EmissionModel) -> str:
        """Render the DTO module of one table."""
        return self._render(self.dto_template, f'dto template for {model.model}', m=model)

    def generate_all(
        self, config: PersistConfig, boilerplate_text: str = ''
    ) -> list[GeneratedFile]:
        """Render the DAO (and, if configured, DTO) of every table in configuration order.

        Nothing is written here; any failure aborts the whole batch.
        """
        extension = self.language_config.file_extension
        generated_files = []
        for table in config.tables:
            model = self.model_builder.build(config, table)

            dao_path = package_path(config.package) / f'{model.dao_module}{extension}'
            generated_files.append(
                GeneratedFile(
                    path=str(dao_path),
                    description=f'{model.dao} DAO for {model.qualified_table}',
                    category='dao',
                    content=self.render_dao(model, boilerplate_text),
                )
            )

            if config.model_generation is not None:
                target = config.model_generation
                location = (
                    PurePosixPath(target.location)
                    if target.location
                    else package_path(target.package)
                )
                generated_files.append(
                    GeneratedFile(
                        path=str(location / f'{model.dto_module}{extension}'),
                        description=f'{model.model} DTO',
                        category='dto',
                        content=self.render_dto(model),
                    )
                )

            logger.debug(f'Rendered {model.qualified_table}')
        return generated_files
