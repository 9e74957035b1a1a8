from .base import Schema, type_rule


class FunctionSchema(Schema):
    type_name = "function"

    def __init__(self) -> None:
        super().__init__()
        self._rules = (type_rule("function.base", callable),)
