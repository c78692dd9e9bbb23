"""
Field descriptors: how each column of a table is presented and accepted.

A descriptor pairs a column with a `FieldShape`, a closed set of input kinds
independent of any widget toolkit. Shapes come from the table overrides when
one applies (lookup selectors, time-of-day inputs, bounded integers) and from
the column's semantic type otherwise. `parse_raw` turns raw user input into
the semantic value a shape stands for.
"""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, Field

from shift_schedule.core.catalog import SchemaCatalog
from shift_schedule.core.identity import IdentityResolver
from shift_schedule.core.record_store import RecordStore
from shift_schedule.core.time_of_day import decode_time_of_day, encode_time_of_day, pin_to_fixed_date
from shift_schedule.core.validator import is_blank
from shift_schedule.domain.models import (
    ColumnDescriptor,
    LookupEntry,
    LookupWarning,
    SemanticType,
)
from shift_schedule.domain.overrides import LookupBinding, SchemaOverrides
from shift_schedule.errors import FieldValueError, ShiftScheduleError
from shift_schedule.utils.logging import get_logger

log = get_logger(__name__)

# Engine ranges: Access "Long Integer" and "Currency".
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
CURRENCY_MAX = Decimal("922337203685477.5807")
# Numbers with more integer digits than this exceed every engine range.
_MAX_INTEGER_DIGITS = 20

_TRUE_WORDS = frozenset({"1", "true", "yes", "y", "on", "да"})
_FALSE_WORDS = frozenset({"0", "false", "no", "n", "off", "нет"})


class TextInput(BaseModel):
    kind: Literal["text"] = "text"

    model_config = {"frozen": True}


class IntegerInput(BaseModel):
    kind: Literal["integer"] = "integer"
    minimum: int = INT32_MIN
    maximum: int = INT32_MAX

    model_config = {"frozen": True}


class DecimalInput(BaseModel):
    kind: Literal["decimal"] = "decimal"
    minimum: Decimal = -CURRENCY_MAX
    maximum: Decimal = CURRENCY_MAX
    scale: int = 2

    model_config = {"frozen": True}


class BooleanInput(BaseModel):
    kind: Literal["boolean"] = "boolean"

    model_config = {"frozen": True}


class TimestampInput(BaseModel):
    kind: Literal["timestamp"] = "timestamp"
    min_value: datetime = datetime(2000, 1, 1)
    max_value: datetime = datetime(2100, 1, 1)

    model_config = {"frozen": True}


class TimeOfDayInput(BaseModel):
    kind: Literal["time_of_day"] = "time_of_day"
    default: time = time(8, 0)

    model_config = {"frozen": True}


class LookupSelector(BaseModel):
    kind: Literal["lookup"] = "lookup"
    lookup_table: str
    entries: List[LookupEntry] = Field(default_factory=list)
    selected_key: Optional[int] = None

    model_config = {"frozen": True}

    @property
    def default_key(self) -> Optional[int]:
        """The pre-selected key, else the first entry's key, else None."""
        if self.selected_key is not None:
            return self.selected_key
        return self.entries[0].key if self.entries else None

    def label_for(self, key: Any) -> Optional[str]:
        for entry in self.entries:
            if entry.key == key:
                return entry.label
        return None


FieldShape = Annotated[
    Union[
        TextInput,
        IntegerInput,
        DecimalInput,
        BooleanInput,
        TimestampInput,
        TimeOfDayInput,
        LookupSelector,
    ],
    Field(discriminator="kind"),
]


class FieldDescriptor(BaseModel):
    """A column together with the shape used to edit it."""

    name: str
    semantic_type: SemanticType
    required: bool = False
    read_only: bool = False
    shape: FieldShape
    initial: Any = None

    model_config = {"frozen": True}

    @property
    def label(self) -> str:
        return f"{self.name}*" if self.required else self.name


class RecordForm(BaseModel):
    """Editable shape of one record of `table`."""

    table: str
    id_column: str
    fields: List[FieldDescriptor] = Field(default_factory=list)
    warnings: List[LookupWarning] = Field(default_factory=list)

    def field(self, name: str) -> Optional[FieldDescriptor]:
        wanted = name.casefold()
        for descriptor in self.fields:
            if descriptor.name.casefold() == wanted:
                return descriptor
        return None

    def initial_values(self) -> Dict[str, Any]:
        return {descriptor.name: descriptor.initial for descriptor in self.fields}


def generic_shape(column: ColumnDescriptor) -> FieldShape:
    """Shape derived from the column's semantic type alone."""
    semantic = column.semantic_type
    if semantic is SemanticType.INTEGER:
        return IntegerInput()
    if semantic is SemanticType.DECIMAL:
        return DecimalInput()
    if semantic is SemanticType.TIMESTAMP:
        return TimestampInput()
    if semantic is SemanticType.BOOLEAN:
        return BooleanInput()
    return TextInput()


def _to_decimal(column: str, raw: Any) -> Decimal:
    if isinstance(raw, bool):
        raise FieldValueError(column, "expected a number")
    try:
        value = raw if isinstance(raw, Decimal) else Decimal(str(raw).strip().replace(",", "."))
    except InvalidOperation as exc:
        raise FieldValueError(column, f"'{raw}' is not a number") from exc
    if not value.is_finite():
        raise FieldValueError(column, f"'{raw}' is not a number")
    if value and value.adjusted() >= _MAX_INTEGER_DIGITS:
        raise FieldValueError(column, f"'{raw}' is too large")
    return value


def _check_range(column: str, value: Any, minimum: Any, maximum: Any) -> None:
    if value < minimum or value > maximum:
        raise FieldValueError(column, f"{value} is outside {minimum}..{maximum}")


def _parse_integer(shape: IntegerInput, column: str, raw: Any) -> Union[int, Decimal]:
    if isinstance(raw, int) and not isinstance(raw, bool):
        value: Union[int, Decimal] = raw
    else:
        number = _to_decimal(column, raw)
        # Whole numbers become int; fractional values are left for the
        # validator's decimal-to-integer narrowing.
        value = int(number) if number == number.to_integral_value() else number
    _check_range(column, value, shape.minimum, shape.maximum)
    return value


def _parse_decimal(shape: DecimalInput, column: str, raw: Any) -> Decimal:
    value = _to_decimal(column, raw)
    try:
        value = value.quantize(Decimal(1).scaleb(-shape.scale), rounding=ROUND_HALF_EVEN)
    except InvalidOperation as exc:
        raise FieldValueError(
            column, f"'{raw}' is outside {shape.minimum}..{shape.maximum}"
        ) from exc
    _check_range(column, value, shape.minimum, shape.maximum)
    return value


def _parse_boolean(column: str, raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    word = str(raw).strip().casefold()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise FieldValueError(column, f"'{raw}' is not a yes/no value")


def _parse_timestamp(shape: TimestampInput, column: str, raw: Any) -> datetime:
    if isinstance(raw, datetime):
        value = raw
    elif isinstance(raw, date):
        value = datetime.combine(raw, time())
    else:
        try:
            value = datetime.fromisoformat(str(raw).strip())
        except ValueError as exc:
            raise FieldValueError(column, f"'{raw}' is not a date (YYYY-MM-DD[ HH:MM])") from exc
    # The engines store local wall-clock time without an offset.
    if value.tzinfo is not None:
        raise FieldValueError(column, f"'{raw}' has a UTC offset; enter local time")
    _check_range(column, value, shape.min_value, shape.max_value)
    return value


def _parse_time_of_day(column: str, raw: Any) -> datetime:
    if isinstance(raw, datetime):
        return pin_to_fixed_date(raw)
    if isinstance(raw, time):
        return encode_time_of_day(raw.hour, raw.minute)
    try:
        parsed = time.fromisoformat(str(raw).strip())
    except ValueError as exc:
        raise FieldValueError(column, f"'{raw}' is not a time (HH:MM)") from exc
    return encode_time_of_day(parsed.hour, parsed.minute)


def _parse_lookup(shape: LookupSelector, column: str, raw: Any) -> int:
    if isinstance(raw, bool):
        raise FieldValueError(column, "expected a key")
    try:
        key = int(str(raw).strip()) if not isinstance(raw, int) else raw
    except ValueError as exc:
        raise FieldValueError(column, f"'{raw}' is not a key") from exc
    if shape.entries and shape.label_for(key) is None:
        raise FieldValueError(column, f"{key} is not a row of {shape.lookup_table}")
    return key


def parse_raw(shape: FieldShape, raw: Any, column: str = "") -> Any:
    """
    Convert raw input (typically a string) into the value `shape` accepts.

    Blank input yields None. Already-typed values are accepted as-is where
    they fit the shape.

    Raises
    ------
    FieldValueError
        If the input cannot be read or falls outside the shape's bounds.
    """
    if is_blank(raw):
        return None
    if isinstance(shape, TextInput):
        return raw if isinstance(raw, str) else str(raw)
    if isinstance(shape, IntegerInput):
        return _parse_integer(shape, column, raw)
    if isinstance(shape, DecimalInput):
        return _parse_decimal(shape, column, raw)
    if isinstance(shape, BooleanInput):
        return _parse_boolean(column, raw)
    if isinstance(shape, TimestampInput):
        return _parse_timestamp(shape, column, raw)
    if isinstance(shape, TimeOfDayInput):
        return _parse_time_of_day(column, raw)
    if isinstance(shape, LookupSelector):
        return _parse_lookup(shape, column, raw)
    raise TypeError(f"Unhandled field shape: {type(shape).__name__}")


class FieldDescriptorBuilder:
    """
    Builds field descriptors and whole record forms for a table.

    Parameters
    ----------
    catalog : SchemaCatalog
        Source of column metadata.
    store : RecordStore
        Used to read lookup tables.
    identity : IdentityResolver
        Resolves the id column and the next free id for new records.
    overrides : SchemaOverrides, optional
        Table-specific shapes.
    """

    def __init__(
        self,
        catalog: SchemaCatalog,
        store: RecordStore,
        identity: IdentityResolver,
        overrides: Optional[SchemaOverrides] = None,
    ) -> None:
        self.catalog = catalog
        self.store = store
        self.identity = identity
        self.overrides = overrides or SchemaOverrides()

    def lookup_entries(self, binding: LookupBinding, entries: List[LookupEntry]) -> None:
        """
        Append the (key, label) pairs of the bound lookup table to `entries`.

        Rows are read in natural order; duplicate keys are kept. Entries read
        before a failure stay in `entries`.
        """
        result = self.store.read_table(binding.lookup_table)
        for row in result.as_dicts():
            label = row[binding.label_column]
            entries.append(
                LookupEntry(key=int(row[binding.key_column]), label="" if label is None else str(label))
            )

    def _lookup_selector(
        self,
        binding: LookupBinding,
        current: Any,
        warnings: List[LookupWarning],
    ) -> LookupSelector:
        entries: List[LookupEntry] = []
        try:
            self.lookup_entries(binding, entries)
        except (ShiftScheduleError, KeyError, TypeError, ValueError) as exc:
            message = str(exc)
            log.warning(
                "Lookup table unavailable",
                extra={
                    "table": binding.table,
                    "column": binding.column,
                    "lookup_table": binding.lookup_table,
                    "error": message,
                },
            )
            warnings.append(
                LookupWarning(column=binding.column, lookup_table=binding.lookup_table, message=message)
            )

        selected: Optional[int] = None
        if current is not None:
            for entry in entries:
                if str(entry.key) == str(current):
                    selected = entry.key
                    break
        return LookupSelector(lookup_table=binding.lookup_table, entries=entries, selected_key=selected)

    def describe_column(
        self,
        table: str,
        column: ColumnDescriptor,
        current: Any = None,
        warnings: Optional[List[LookupWarning]] = None,
    ) -> FieldDescriptor:
        """
        Descriptor for one column, pre-filled from `current` when editing.

        Lookup failures are appended to `warnings` instead of being raised.
        """
        if warnings is None:
            warnings = []

        binding = self.overrides.lookup_for(table, column.name)
        if binding is not None:
            shape = self._lookup_selector(binding, current, warnings)
            return FieldDescriptor(
                name=column.name,
                semantic_type=column.semantic_type,
                required=column.required,
                shape=shape,
                initial=shape.default_key,
            )

        if self.overrides.is_time_of_day(table, column.name):
            shape = TimeOfDayInput()
            initial = (
                decode_time_of_day(current) if isinstance(current, datetime) else shape.default
            )
            return FieldDescriptor(
                name=column.name,
                semantic_type=column.semantic_type,
                required=column.required,
                shape=shape,
                initial=initial,
            )

        bounds = self.overrides.bounds_for(table, column.name)
        if bounds is not None:
            shape = IntegerInput(minimum=bounds.minimum, maximum=bounds.maximum)
        else:
            shape = generic_shape(column)
        return FieldDescriptor(
            name=column.name,
            semantic_type=column.semantic_type,
            required=column.required,
            shape=shape,
            initial=current,
        )

    def describe_table(self, table: str, record: Optional[Mapping[str, Any]] = None) -> RecordForm:
        """
        Form for a new record (`record` is None) or for editing `record`.

        The id column is read-only: pre-filled with the next free id for a new
        record, or with the record's own id when editing.
        """
        columns = self.catalog.get_schema(table)
        id_column = self.identity.get_id_column(table)
        current = {key.casefold(): value for key, value in (record or {}).items()}
        warnings: List[LookupWarning] = []
        fields: List[FieldDescriptor] = []

        for column in columns:
            if column.name.casefold() == id_column.casefold():
                initial = (
                    current.get(id_column.casefold())
                    if record is not None
                    else self.identity.get_next_id(table, column.name)
                )
                fields.append(
                    FieldDescriptor(
                        name=column.name,
                        semantic_type=column.semantic_type,
                        required=column.required,
                        read_only=True,
                        shape=IntegerInput(minimum=0),
                        initial=initial,
                    )
                )
                continue
            fields.append(
                self.describe_column(table, column, current.get(column.name.casefold()), warnings)
            )

        return RecordForm(table=table, id_column=id_column, fields=fields, warnings=warnings)


__all__ = [
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
    "generic_shape",
    "parse_raw",
]
