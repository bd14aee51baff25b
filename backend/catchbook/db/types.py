from decimal import Decimal

from sqlalchemy import types
from sqlalchemy.types import TypeDecorator


class ExactDecimal(TypeDecorator):
    """Decimal stored as its text form.

    Money read back is the Decimal that was written, digit for digit, on
    every dialect.
    """

    impl = types.String(64)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        return str(value if isinstance(value, Decimal) else Decimal(str(value)))

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        return Decimal(value)
