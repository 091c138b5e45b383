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

"""Command-line entry point and top-level generation pipeline.

``generate`` is the only place where pipeline errors are caught; every stage
below it raises a ``GeneratorError`` subclass and leaves the decision about
exit status to ``main``.
"""

import argparse
import os
import subprocess  # nosec B404 - used to invoke the allowlisted formatter (see ALLOWED_FORMATTER_COMMANDS)
import sys
from awslabs.cql_dao_generator.core.errors import ConfigurationError, GeneratorError
from awslabs.cql_dao_generator.core.language_config import LanguageConfigLoader
from awslabs.cql_dao_generator.core.schema_definitions import PersistConfig
from awslabs.cql_dao_generator.core.schema_loader import SchemaLoader
from awslabs.cql_dao_generator.core.schema_validator import SchemaValidator
from awslabs.cql_dao_generator.core.validation_utils import ValidationResult
from awslabs.cql_dao_generator.generators import create_generator
from awslabs.cql_dao_generator.output.formatter import SourceFormatter
from awslabs.cql_dao_generator.output.output_manager import GeneratedFile, OutputManager
from dataclasses import dataclass, field
from loguru import logger
from pathlib import Path


# Constants
SUPPORTED_LANGUAGES = ['python']
ALLOWED_FORMATTER_COMMANDS = {'ruff', 'uv'}  # Allowlist for subprocess security

# Subprocess timeout constants (in seconds)
FORMATTER_VERSION_CHECK_TIMEOUT = 10
FORMATTER_EXECUTION_TIMEOUT = 60


@dataclass
class GenerationResult:
    """Result of configuration validation and code generation."""

    success: bool
    validation_passed: bool
    validation_result: ValidationResult
    validate_only: bool = False
    output_dir: Path | None = None
    generated_files: list[GeneratedFile] = field(default_factory=list)
    formatting_passed: bool | None = None
    error_type: str | None = None
    error_message: str | None = None

    def format_for_cli(self, args=None) -> str:
        """Format result for CLI output with next steps."""
        lines = []

        validator = SchemaValidator()
        validator.result = self.validation_result
        if not self.validation_passed:
            if self.validation_result.errors:
                lines.append(validator.format_validation_result())
            if self.error_message:
                lines.append(f'❌ {self.error_type or "Error"}: {self.error_message}')
            return '\n'.join(lines)

        lines.append(validator.format_validation_result())

        if self.validate_only:
            lines.append('🎉 Validation completed successfully!')
            return '\n'.join(lines)

        if not self.success:
            lines.append(f'\n❌ {self.error_type or "Error"}: {self.error_message}')
            lines.append('No files were written.')
            return '\n'.join(lines)

        lines.append(f'\n✅ {len(self.generated_files)} files generated in {self.output_dir}')
        for file in self.generated_files:
            lines.append(f'- {file.path}: {file.description}')
        lines.append('🎉 Generation completed successfully!')

        if self.formatting_passed is False:
            lines.append('⚠️ Formatter reported issues, but generation was successful')

        if args is not None:
            lines.extend(self._format_next_steps(args))
        return '\n'.join(lines)

    def _format_next_steps(self, args) -> list[str]:
        lines = ['\nNext steps:']
        lines.append('1. Review the generated code')
        lines.append('2. Install runtime dependencies: pip install cassandra-driver pydantic')
        lines.append('3. Construct each DAO with a session factory returning a connected Session')
        if getattr(args, 'no_format', False):
            lines.append('4. Run without --no-format to format the generated code with ruff')
        return lines


def _validate_formatter_command(cmd: list) -> None:
    """Validate that command is in allowlist.

    Raises:
        ValueError: If command is not allowed
    """
    if not cmd or not isinstance(cmd, list):
        raise ValueError('Invalid command format')

    base_cmd = os.path.basename(cmd[0])
    if base_cmd.endswith('.exe'):
        base_cmd = base_cmd[:-4]

    if base_cmd not in ALLOWED_FORMATTER_COMMANDS:
        raise ValueError(f'Command not allowed: {base_cmd}')


def run_formatter(paths: list[Path], language: str = 'python') -> bool:
    """Run the language's source formatter over freshly written files.

    Args:
        paths: Files to format
        language: Programming language

    Returns:
        True if formatting succeeded or was skipped, False otherwise
    """
    try:
        language_config = LanguageConfigLoader.load(language)
        formatter = language_config.formatter
        if not formatter:
            logger.warning(f'No formatter configured for {language}')
            return True
        if not paths:
            return True

        version_cmd = formatter.command + formatter.version_args
        _validate_formatter_command(version_cmd)
        result = subprocess.run(  # nosec B603, B607 - user local env, allowlisted cmd, no shell, timeout
            version_cmd, capture_output=True, text=True, timeout=FORMATTER_VERSION_CHECK_TIMEOUT
        )
        if result.returncode != 0:
            logger.warning(f'{" ".join(formatter.command)} not available, skipping formatting')
            return False

        cmd = formatter.command + formatter.format_args + [str(p) for p in paths]
        _validate_formatter_command(cmd)
        result = subprocess.run(cmd, timeout=FORMATTER_EXECUTION_TIMEOUT)  # nosec B603, B607 - user local env, allowlisted cmd, no shell, timeout
        return result.returncode == 0

    except subprocess.TimeoutExpired:
        logger.error('Formatter execution timed out')
        return False
    except FileNotFoundError as e:
        logger.warning(f'Formatter command not found: {e}')
        return False
    except ValueError as e:
        logger.error(f'Error running formatter: {e}')
        return False


def generate_from_config(
    config: PersistConfig,
    boilerplate_text: str = '',
    templates_dir: str | None = None,
    language: str = 'python',
) -> list[GeneratedFile]:
    """Validate, render and syntax-check every artifact of a configuration in memory.

    Nothing is written. Either every table renders into valid source or the
    first failure is raised, so callers never see a partial batch.

    Raises:
        ConfigurationError: If the configuration violates an invariant
        TemplateError: If a template fails to load or execute
        FormattingError: If rendered text is not valid source
    """
    validator = SchemaValidator()
    if not validator.validate(config).is_valid:
        raise ConfigurationError(
            f'Persist configuration validation failed:\n{validator.format_validation_result()}'
        )

    generator = create_generator('jinja2', language=language, templates_dir=templates_dir)
    generated_files = generator.generate_all(config, boilerplate_text)
    for file in generated_files:
        SourceFormatter.check(file.content, file.path)
    return generated_files


def generate(
    config_path: str | None = None,
    output_dir: str = '.',
    templates_dir: str | None = None,
    no_format: bool = False,
    validate_only: bool = False,
    model: str | None = None,
    dao: str | None = None,
    table: str | None = None,
    keyspace: str = '',
    package: str = '',
    search_dir: str | None = None,
    language: str = 'python',
) -> GenerationResult:
    """Generate DAO and DTO modules from a persist configuration.

    Args:
        config_path: Persist configuration file (default: persist-config.json
            in the search directory or its config/ subdirectory)
        output_dir: Root directory for generated files
        templates_dir: Directory containing Jinja2 templates (optional)
        no_format: Skip running the formatter on the written files
        validate_only: Only validate the configuration
        model: Model name; selects single-table mode reading <model>.json
        dao: DAO class name (single-table mode)
        table: Table name (single-table mode, default: snake_case model name)
        keyspace: Keyspace (single-table mode)
        package: DAO package (single-table mode)
        search_dir: Directory configuration files are looked up in (default: cwd)
        language: Target programming language for generated code

    Returns:
        GenerationResult: Object containing validation and generation results

    Raises:
        ValueError: If an unsupported language is specified
    """
    if language not in SUPPORTED_LANGUAGES:
        supported_langs = ', '.join(SUPPORTED_LANGUAGES)
        raise ValueError(
            f"Unsupported language '{language}'. Supported languages are: {supported_langs}"
        )

    loader = SchemaLoader(config_path, search_dir)
    validation_result = ValidationResult(is_valid=False, errors=[], warnings=[])
    try:
        if model:
            config = loader.parse_legacy(model, dao or '', table, keyspace, package)
        else:
            config = loader.parse()

        validation_result = SchemaValidator().validate(config)
        for warning in validation_result.warnings:
            logger.warning(f'{warning.path}: {warning.message}')
        if not validation_result.is_valid:
            return GenerationResult(
                success=False,
                validation_passed=False,
                validation_result=validation_result,
                validate_only=validate_only,
                error_type=ConfigurationError.__name__,
                error_message='Persist configuration validation failed',
            )

        if validate_only:
            return GenerationResult(
                success=True,
                validation_passed=True,
                validation_result=validation_result,
                validate_only=True,
            )

        boilerplate_text = loader.load_boilerplate(config)
        generated_files = generate_from_config(config, boilerplate_text, templates_dir, language)

    except (GeneratorError, ValueError) as e:
        logger.error(f'Error during generation: {e}')
        return GenerationResult(
            success=False,
            validation_passed=validation_result.is_valid,
            validation_result=validation_result,
            validate_only=validate_only,
            error_type=type(e).__name__,
            error_message=str(e),
        )

    try:
        written = OutputManager(output_dir).write_generated_files(generated_files)
    except (OSError, ValueError) as e:
        logger.error(f'Error writing generated files: {e}')
        return GenerationResult(
            success=False,
            validation_passed=validation_result.is_valid,
            validation_result=validation_result,
            validate_only=validate_only,
            error_type='OutputError',
            error_message=str(e),
        )

    formatting_passed = None
    if not no_format:
        formatting_passed = run_formatter(written, language)

    return GenerationResult(
        success=True,
        validation_passed=True,
        validation_result=validation_result,
        output_dir=Path(output_dir),
        generated_files=generated_files,
        formatting_passed=formatting_passed,
    )


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for the code generator."""
    parser = argparse.ArgumentParser(
        prog='cql-dao-gen',
        description='Generate CQL data access objects and models from a persist configuration',
    )
    parser.add_argument(
        '--config',
        default=None,
        help='Path to the persist configuration (default: persist-config.json or config/persist-config.json)',
    )
    parser.add_argument(
        '--output', default='.', help='Root directory for generated code (default: cwd)'
    )
    parser.add_argument(
        '--templates-dir',
        default=None,
        help='Directory containing Jinja2 templates (default: bundled Python templates)',
    )
    parser.add_argument(
        '--no-format',
        action='store_true',
        default=False,
        help='Skip running ruff format on generated code (formatting enabled by default)',
    )
    parser.add_argument(
        '--validate-only',
        action='store_true',
        default=False,
        help='Only validate the configuration without generating code',
    )
    legacy = parser.add_argument_group('single-table mode')
    legacy.add_argument('--model', default=None, help='Model name; reads <model>.json columns')
    legacy.add_argument('--dao', default=None, help='DAO class name')
    legacy.add_argument('--table', default=None, help='Table name (default: snake_case model)')
    legacy.add_argument('--keyspace', default='', help='Keyspace of the table')
    legacy.add_argument('--package', default='', help='Package of the generated DAO module')

    args = parser.parse_args(argv)
    if bool(args.model) != bool(args.dao):
        parser.error('--model and --dao must be given together')

    logger.remove()
    logger.add(sys.stderr, level=os.getenv('CQLGEN_LOG_LEVEL', 'INFO'))

    result = generate(
        config_path=args.config,
        output_dir=args.output,
        templates_dir=args.templates_dir,
        no_format=args.no_format,
        validate_only=args.validate_only,
        model=args.model,
        dao=args.dao,
        table=args.table,
        keyspace=args.keyspace,
        package=args.package,
    )

    print(result.format_for_cli(args))
    return 0 if result.success else 1


if __name__ == '__main__':
    sys.exit(main())
