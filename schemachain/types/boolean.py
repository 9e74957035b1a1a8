from typing import Any, Callable, Optional

from ..utils.coercion import coerce_boolean
from .base import Schema, type_rule


class BooleanSchema(Schema):
    type_name = "boolean"

    def __init__(self) -> None:
        super().__init__()
        self._rules = (type_rule("boolean.base", lambda value: isinstance(value, bool)),)

    def _converter(self) -> Optional[Callable[[Any], Any]]:
        return lambda value: coerce_boolean(value).value
