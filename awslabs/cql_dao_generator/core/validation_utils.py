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

"""Collected findings of persist configuration validation."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ValidationIssue:
    """One finding, located by its path in the configuration document."""

    path: str  # e.g. "tables[0].columns[2].key"
    message: str
    suggestion: str = ''
    severity: str = 'error'  # "error" | "warning"

    def lines(self) -> list[str]:
        """Display lines: the located message and, if any, its suggestion."""
        rendered = [f'  • {self.path}: {self.message}']
        if self.suggestion:
            rendered.append(f'    💡 {self.suggestion}')
        return rendered


@dataclass
class ValidationResult:
    """Errors make a configuration unusable; warnings are reported and generation goes on."""

    is_valid: bool = True
    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)

    def add_error(self, path: str, message: str, suggestion: str = '') -> None:
        """Record an error; the result becomes invalid."""
        self.errors.append(ValidationIssue(path, message, suggestion))
        self.is_valid = False

    def add_warning(self, path: str, message: str, suggestion: str = '') -> None:
        """Record a warning."""
        self.warnings.append(ValidationIssue(path, message, suggestion, 'warning'))

    def format(self, success_message: str, failure_prefix: str) -> str:
        """Render errors (under ``failure_prefix``) and warnings, or the success line."""
        if self.is_valid and not self.warnings:
            return f'✅ {success_message}'

        output = []
        if self.errors:
            output.append(f'❌ {failure_prefix}:')
            output.extend(line for issue in self.errors for line in issue.lines())
        if self.warnings:
            output.append('⚠️  Warnings:')
            output.extend(line for issue in self.warnings for line in issue.lines())
        return '\n'.join(output)
