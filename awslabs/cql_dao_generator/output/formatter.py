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

"""Syntax check of rendered source text."""

import ast
from awslabs.cql_dao_generator.core.errors import FormattingError


class SourceFormatter:
    """Checks that rendered text is valid source before anything is written."""

    @staticmethod
    def check(source: str, label: str = '<generated>') -> str:
        """Return ``source`` unchanged if it parses.

        Raises:
            FormattingError: With the offending text attached, if it does not parse
        """
        try:
            ast.parse(source, filename=label)
        except SyntaxError as e:
            raise FormattingError(
                f'Error formatting generated source for {label}: {e.msg} (line {e.lineno})',
                source,
            ) from e
        except ValueError as e:
            raise FormattingError(f'Error formatting generated source for {label}: {e}', source) from e
        return source
