# Copyright 2025 TIER IV, inc.
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

"""Declarative value validation with chainable, immutable schemas."""

from .config import EngineConfig, engine_config
from .errors import ValidationFailure
from .exceptions import LanguageBundleError, OptionsError, SchemaChainError, SchemaDefinitionError
from .models import ValidationOptions, ValidationState, ValueSet, Violation
from .types import (
    ArraySchema,
    BooleanSchema,
    DateSchema,
    FunctionSchema,
    NumberSchema,
    Schema,
    StringSchema,
    array,
    boolean,
    date,
    function,
    number,
    string,
)
from .utils.common import UNDEFINED

__version__ = '0.1.0'

__all__ = [
    'array',
    'boolean',
    'date',
    'function',
    'number',
    'string',
    'Schema',
    'ArraySchema',
    'BooleanSchema',
    'DateSchema',
    'FunctionSchema',
    'NumberSchema',
    'StringSchema',
    'ValidationOptions',
    'ValidationState',
    'ValidationFailure',
    'Violation',
    'ValueSet',
    'UNDEFINED',
    'EngineConfig',
    'engine_config',
    'SchemaChainError',
    'SchemaDefinitionError',
    'OptionsError',
    'LanguageBundleError',
]
