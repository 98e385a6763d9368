"""
Snippetbox — Form Validation
=============================

What:  A field-error accumulator plus the predicates the forms check.
How:   Form schemas inherit from `Validator`, so a decoded form carries its
       own `field_errors` mapping into the template that re-displays it.

Rules:
    - The first error recorded for a field wins; later failures on the same
      field are ignored.
    - `max_chars` counts Unicode code points, not bytes.
"""

from typing import Dict

from pydantic import BaseModel, PrivateAttr


class Validator(BaseModel):
    """
    Accumulates field-level validation errors.

    `field_errors` is a private attribute: it is never populated from the
    submitted form data and never included in `model_dump()`.
    """

    _field_errors: Dict[str, str] = PrivateAttr(default_factory=dict)

    @property
    def field_errors(self) -> Dict[str, str]:
        return self._field_errors

    def valid(self) -> bool:
        return not self._field_errors

    def add_field_error(self, key: str, message: str) -> None:
        if key not in self._field_errors:
            self._field_errors[key] = message

    def check_field(self, ok: bool, key: str, message: str) -> None:
        if not ok:
            self.add_field_error(key, message)


def not_blank(value: str) -> bool:
    return value.strip() != ""


def max_chars(value: str, n: int) -> bool:
    # len() of a str is its code-point count
    return len(value) <= n


def permitted_int(value: int, *permitted_values: int) -> bool:
    return value in permitted_values
