"""
Core package for the Shift Schedule record manager.

Schema discovery, identity resolution, type mapping, field descriptors,
validation and the record store. Every component reads the live schema on
demand and keeps nothing between calls.
"""

from shift_schedule.core.catalog import SchemaCatalog
from shift_schedule.core.fields import (
    BooleanInput,
    DecimalInput,
    FieldDescriptor,
    FieldDescriptorBuilder,
    FieldShape,
    IntegerInput,
    LookupSelector,
    RecordForm,
    TextInput,
    TimeOfDayInput,
    TimestampInput,
    parse_raw,
)
from shift_schedule.core.identity import IdentityResolver
from shift_schedule.core.record_store import QueryResult, RecordStore
from shift_schedule.core.time_of_day import (
    FIXED_DATE,
    decode_time_of_day,
    encode_time_of_day,
    pin_to_fixed_date,
)
from shift_schedule.core.type_mapper import classify_storage_type, to_semantic, to_storage
from shift_schedule.core.validator import Validator, check_required, validate_values

__all__ = [
    # Schema
    "SchemaCatalog",
    "IdentityResolver",
    "classify_storage_type",
    "to_semantic",
    "to_storage",
    # Time of day
    "FIXED_DATE",
    "decode_time_of_day",
    "encode_time_of_day",
    "pin_to_fixed_date",
    # Fields
    "BooleanInput",
    "DecimalInput",
    "FieldDescriptor",
    "FieldDescriptorBuilder",
    "FieldShape",
    "IntegerInput",
    "LookupSelector",
    "RecordForm",
    "TextInput",
    "TimeOfDayInput",
    "TimestampInput",
    "parse_raw",
    # Validation and persistence
    "Validator",
    "check_required",
    "validate_values",
    "QueryResult",
    "RecordStore",
]
