"""
Booking reference type for pydantic models and FastAPI path parameters.

Booking ids are uuid_utils UUID7 values; anything else (malformed text, other
UUID versions) fails validation, which the API reports as a 400.
"""

from typing import Any

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import core_schema
from uuid_utils import UUID


class UtilsUUID7(UUID):
    @staticmethod
    def parse(value: Any) -> UUID:
        if isinstance(value, UUID):
            parsed = value
        else:
            try:
                parsed = UUID(str(value))
            except ValueError as e:
                raise ValueError(f'Invalid booking reference: {value}') from e

        if parsed.version != 7:
            raise ValueError(f'Invalid booking reference: {value}')
        return parsed

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        # JSON input is always a string; python input may already be a UUID
        from_text = core_schema.no_info_after_validator_function(
            cls.parse, core_schema.str_schema(strip_whitespace=True)
        )
        return core_schema.json_or_python_schema(
            json_schema=from_text,
            python_schema=core_schema.union_schema(
                [
                    core_schema.no_info_after_validator_function(
                        cls.parse, core_schema.is_instance_schema(UUID)
                    ),
                    from_text,
                ]
            ),
            serialization=core_schema.to_string_ser_schema(),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        return {'type': 'string', 'format': 'uuid', 'description': 'UUID7 booking reference'}
