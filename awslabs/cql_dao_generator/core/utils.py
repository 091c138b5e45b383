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

"""Naming helpers shared by the emission model builder and the output pipeline."""

import re


DAO_MODULE_SUFFIX = '_dao_gen'
DTO_MODULE_SUFFIX = '_dto_gen'


def to_snake_case(camel_case_str: str) -> str:
    """Convert CamelCase to snake_case.

    Also handles hyphens by replacing them with underscores.

    Examples:
        - 'CamelCase' -> 'camel_case'
        - 'Events-ByDate' -> 'events_by_date'
        - 'UserEvents' -> 'user_events'
    """
    # First, replace hyphens with underscores
    s0 = camel_case_str.replace('-', '_')
    # Insert underscore before uppercase letters (except first)
    s1 = re.sub('(.)([A-Z][a-z]+)', r'\1_\2', s0)
    # Insert underscore before uppercase letters preceded by lowercase
    s2 = re.sub('([a-z0-9])([A-Z])', r'\1_\2', s1).lower()
    # Clean up any double underscores that might result from hyphen replacement
    return re.sub('_+', '_', s2)


def to_lower_camel(name: str) -> str:
    """Lower-case only the first character: 'UserId' -> 'userId', 'id' -> 'id'."""
    if not name:
        return name
    return name[0].lower() + name[1:]


def dao_module_name(generated_name: str) -> str:
    """Module name of the generated DAO for a table, e.g. 'UserEvents' -> 'user_events_dao_gen'."""
    return f'{to_snake_case(generated_name)}{DAO_MODULE_SUFFIX}'


def dto_module_name(generated_name: str) -> str:
    """Module name of the generated DTO for a table, e.g. 'UserEvents' -> 'user_events_dto_gen'."""
    return f'{to_snake_case(generated_name)}{DTO_MODULE_SUFFIX}'
