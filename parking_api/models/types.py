# parking_api/models/types.py
"""Column types shared by the models."""

from sqlalchemy import Text
from sqlalchemy.types import TypeDecorator

from parking_api.utils.json_parser import encode_string_list, decode_string_list


class StringList(TypeDecorator):
    """Ordered list of strings, stored as JSON text."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return encode_string_list(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return decode_string_list(value)
