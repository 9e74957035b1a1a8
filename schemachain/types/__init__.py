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

"""Schema types and their factories."""

from .array import ArraySchema
from .base import Mutator, Rule, Schema
from .boolean import BooleanSchema
from .date import DateSchema
from .function import FunctionSchema
from .number import NumberSchema
from .string import StringSchema

__all__ = [
    'Schema',
    'Rule',
    'Mutator',
    'ArraySchema',
    'BooleanSchema',
    'DateSchema',
    'FunctionSchema',
    'NumberSchema',
    'StringSchema',
    'array',
    'boolean',
    'date',
    'function',
    'number',
    'string',
]


def array() -> ArraySchema:
    return ArraySchema()


def boolean() -> BooleanSchema:
    return BooleanSchema()


def date() -> DateSchema:
    return DateSchema()


def function() -> FunctionSchema:
    return FunctionSchema()


def number() -> NumberSchema:
    return NumberSchema()


def string() -> StringSchema:
    return StringSchema()
