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

"""Error taxonomy for the generation pipeline.

Every stage raises one of these and never exits the process; the single
top-level caller (``codegen.generate``) converts them into a failed
``GenerationResult``.
"""


class GeneratorError(Exception):
    """Base class for all fatal generation errors."""

    pass


class ConfigurationError(GeneratorError):
    """The persist configuration is missing, malformed or violates an invariant."""

    pass


class TemplateError(GeneratorError):
    """A template failed to load, parse or execute against an emission model."""

    pass


class FormattingError(GeneratorError):
    """Rendered text is not valid source code.

    The offending text is kept on the exception and embedded (with line
    numbers) in the message so the failure can be debugged from the log alone.
    """

    def __init__(self, message: str, source: str = ''):
        """Initialize with the diagnostic and the generated text that failed."""
        self.source = source
        if source:
            numbered = '\n'.join(
                f'{i:4d} | {line}' for i, line in enumerate(source.splitlines(), start=1)
            )
            message = f'{message}\n{numbered}'
        super().__init__(message)
