"""Data carried through a validation: options, state, value sets and violations.

This package does not import the schema types so the types can depend on it.
"""

from .options import ValidationOptions, check_options, resolve_options
from .state import ParentWriter, SiblingView, ValidationState
from .values import ValueSet, fingerprint
from .violation import Violation, flatten
