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

"""Output management for generated code files."""

from dataclasses import dataclass
from loguru import logger
from pathlib import Path


@dataclass
class GeneratedFile:
    """Represents a single generated file."""

    path: str  # Relative to the output root: "app/dao/user_events_dao_gen.py"
    description: str  # Human description: "UserEventsDao DAO"
    category: str  # "dao" | "dto"
    content: str = ''


class OutputManager:
    """Manages all output operations for generated code."""

    def __init__(self, output_dir: str | Path):
        """Initialize the output manager with the target directory."""
        self.output_path = Path(output_dir)

    def write_generated_files(self, generated_files: list[GeneratedFile]) -> list[Path]:
        """Write all generated files in one coordinated operation.

        Every target path is checked before the first file is written.

        Raises:
            ValueError: If a file would be written outside the output directory
        """
        targets = [self._target_path(f.path) for f in generated_files]

        self.output_path.mkdir(parents=True, exist_ok=True)
        for target, file in zip(targets, generated_files):
            self._write_file(target, file.content)

        self._log_summary(generated_files)
        return targets

    def _target_path(self, file_path: str) -> Path:
        root = self.output_path.resolve()
        target = (root / file_path).resolve()
        try:
            target.relative_to(root)
        except ValueError:
            raise ValueError(
                f'Security: generated file {file_path} resolves outside output directory {root}'
            )
        return target

    def _write_file(self, output_file: Path, content: str) -> None:
        """Write a single file with content - language agnostic."""
        output_file.parent.mkdir(parents=True, exist_ok=True)

        with open(output_file, 'w', encoding='utf-8') as f:
            f.write(content)
            if not content.endswith('\n'):
                f.write('\n')

    def _log_summary(self, generated_files: list[GeneratedFile]) -> None:
        logger.info(f'Generated code in {self.output_path}')
        for category in ('dao', 'dto'):
            for file in generated_files:
                if file.category == category:
                    logger.info(f'- {file.path}: {file.description}')
