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

"""Custom exceptions for the schemachain validation engine."""


class SchemaChainError(Exception):
    """Base exception for schemachain related errors."""
    pass


class SchemaDefinitionError(SchemaChainError):
    """Exception raised when a schema builder receives malformed arguments."""
    pass


class OptionsError(SchemaChainError):
    """Exception raised for malformed validation options."""
    pass


class LanguageBundleError(SchemaChainError):
    """Exception raised when a message bundle cannot be loaded."""
    pass
