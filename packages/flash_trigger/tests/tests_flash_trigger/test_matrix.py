import pytest

from flash_trigger.matrix import (
    allowed_error_kinds,
    allowed_operations,
    allowed_strategies,
    allowed_trigger_styles,
    is_numeric,
)
from flash_trigger.schemas import (
    DataflowErrorKind,
    ErrorStrategy,
    TriggerStyle,
    UpdateOperation,
    ValueType,
    VarOperation,
)

ARITHMETIC = [
    UpdateOperation.SET,
    UpdateOperation.ADD,
    UpdateOperation.SUBTRACT,
    UpdateOperation.MULTIPLY,
    UpdateOperation.DIVIDE,
]


@pytest.mark.parametrize("value_type", [ValueType.NUMBER, ValueType.PERCENTAGE])
def test_numeric_operations(value_type):
    assert list(allowed_operations(value_type)) == ARITHMETIC
    assert list(allowed_operations(value_type, TriggerStyle.CONDITION)) == ARITHMETIC
    assert list(allowed_operations(value_type, TriggerStyle.DATAFLOW)) == ARITHMETIC + [
        UpdateOperation.MAX,
        UpdateOperation.MIN,
    ]


@pytest.mark.parametrize(
    "value_type, expected",
    [
        (ValueType.BOOLEAN, [UpdateOperation.SET, UpdateOperation.TOGGLE]),
        (
            ValueType.ENUM,
            [
                UpdateOperation.SET,
                UpdateOperation.APPEND,
                UpdateOperation.REMOVE,
                UpdateOperation.CLEAR,
            ],
        ),
        (ValueType.STRING, [UpdateOperation.SET]),
        (ValueType.TIME, [UpdateOperation.SET]),
    ],
)
def test_non_numeric_operations_ignore_trigger_style(value_type, expected):
    assert list(allowed_operations(value_type)) == expected
    assert list(allowed_operations(value_type, TriggerStyle.DATAFLOW)) == expected


def test_plain_strings_are_accepted():
    assert allowed_operations("boolean") == (UpdateOperation.SET, UpdateOperation.TOGGLE)
    assert is_numeric("percentage") is True


@pytest.mark.parametrize("value_type", [ValueType.NUMBER, ValueType.PERCENTAGE])
def test_numeric_error_kinds(value_type):
    assert allowed_error_kinds(value_type) == (
        DataflowErrorKind.NULL_VALUE,
        DataflowErrorKind.ZERO_VALUE,
        DataflowErrorKind.EXPIRED,
    )


@pytest.mark.parametrize(
    "value_type",
    [ValueType.STRING, ValueType.BOOLEAN, ValueType.TIME, ValueType.ENUM],
)
def test_non_numeric_error_kinds(value_type):
    assert allowed_error_kinds(value_type) == (
        DataflowErrorKind.NULL_VALUE,
        DataflowErrorKind.EXPIRED,
    )
    assert is_numeric(value_type) is False


def test_still_update_removed_for_zero_divide():
    strategies = allowed_strategies(DataflowErrorKind.ZERO_VALUE, UpdateOperation.DIVIDE)

    assert ErrorStrategy.STILL_UPDATE not in strategies
    assert strategies == (
        ErrorStrategy.SKIP,
        ErrorStrategy.VALUE_REPLACE,
        ErrorStrategy.USE_PREVIOUS_VALUE,
    )


@pytest.mark.parametrize(
    "error_kind, operation",
    [
        (DataflowErrorKind.NULL_VALUE, UpdateOperation.DIVIDE),
        (DataflowErrorKind.EXPIRED, UpdateOperation.DIVIDE),
        (DataflowErrorKind.ZERO_VALUE, UpdateOperation.MULTIPLY),
        (DataflowErrorKind.ZERO_VALUE, None),
    ],
)
def test_all_strategies_otherwise(error_kind, operation):
    assert len(allowed_strategies(error_kind, operation)) == 4


@pytest.mark.parametrize(
    "var_operation, expected",
    [
        (VarOperation.GET, (TriggerStyle.CONDITION, TriggerStyle.TIMER)),
        (VarOperation.RESET, (TriggerStyle.CONDITION, TriggerStyle.TIMER)),
        (VarOperation.UPDATE, (TriggerStyle.CONDITION, TriggerStyle.DATAFLOW)),
    ],
)
def test_allowed_trigger_styles(var_operation, expected):
    assert allowed_trigger_styles(var_operation) == expected
