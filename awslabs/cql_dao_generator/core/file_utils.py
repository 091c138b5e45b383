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

"""File access shared by the configuration loader and the language registry."""

import json
from pathlib import Path
from typing import Any


class FileUtils:
    """Reads configuration resources; failures surface as FileNotFoundError or ValueError."""

    @staticmethod
    def load_text_file(file_path: str | Path, file_name: str = 'File') -> str:
        """Read a UTF-8 text resource such as a boilerplate template.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the path is a directory or cannot be decoded
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f'{file_name} file not found: {file_path}')
        if not path.is_file():
            raise ValueError(f'{file_name} path must be a file, not a directory: {file_path}')
        try:
            return path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise ValueError(f'Error reading {file_name} file: {e}') from e

    @staticmethod
    def load_json_file(file_path: str | Path, file_name: str = 'File') -> Any:
        """Parse a JSON document.

        Args:
            file_path: Path to the JSON file
            file_name: Used in error messages, e.g. "Persist configuration"

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the file cannot be read or is not valid JSON
        """
        text = FileUtils.load_text_file(file_path, file_name)
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f'Invalid JSON in {file_name} file: {e}') from e

    @staticmethod
    def find_first_existing(file_name: str, search_dirs: list[Path]) -> Path | None:
        """Return the first ``search_dir / file_name`` that exists, in search order."""
        for directory in search_dirs:
            candidate = directory / file_name
            if candidate.is_file():
                return candidate
        return None

    @staticmethod
    def resolve_within(file_path: Path, base_dir: Path, file_name: str = 'File') -> Path:
        """Resolve ``file_path`` and require it to stay under ``base_dir``.

        The containment check runs before the existence check, so a path that
        escapes ``base_dir`` is reported as such even when it does not exist.

        Raises:
            ValueError: If the path escapes ``base_dir`` or is not a regular file
            FileNotFoundError: If the file doesn't exist
        """
        resolved = file_path.resolve()
        if not resolved.is_relative_to(base_dir.resolve()):
            raise ValueError(
                f'Path traversal detected: {file_path} resolves outside allowed directory'
            )
        if not resolved.exists():
            raise FileNotFoundError(f'{file_name} file not found: {resolved}')
        if not resolved.is_file():
            raise ValueError(f'{file_name} path must be a file, not a directory: {resolved}')
        return resolved
