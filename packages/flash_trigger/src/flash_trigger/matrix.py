"""
Compatibility tables between variable value types, update operations,
dataflow error kinds and error strategies.

All lookups are static; nothing here holds state.
"""

from __future__ import annotations

from typing import Dict, Final, Tuple

from .schemas import (
    DataflowErrorKind,
    ErrorStrategy,
    TriggerStyle,
    UpdateOperation,
    ValueType,
    VarOperation,
)

NUMERIC_VALUE_TYPES: Final[frozenset[ValueType]] = frozenset(
    {ValueType.NUMBER, ValueType.PERCENTAGE}
)

_ARITHMETIC_OPERATIONS: Final[Tuple[UpdateOperation, ...]] = (
    UpdateOperation.SET,
    UpdateOperation.ADD,
    UpdateOperation.SUBTRACT,
    UpdateOperation.MULTIPLY,
    UpdateOperation.DIVIDE,
)

# Only meaningful against a stream of upstream values
_DATAFLOW_ONLY_OPERATIONS: Final[Tuple[UpdateOperation, ...]] = (
    UpdateOperation.MAX,
    UpdateOperation.MIN,
)

_OPERATIONS_BY_VALUE_TYPE: Final[Dict[ValueType, Tuple[UpdateOperation, ...]]] = {
    ValueType.NUMBER: _ARITHMETIC_OPERATIONS,
    ValueType.PERCENTAGE: _ARITHMETIC_OPERATIONS,
    ValueType.BOOLEAN: (UpdateOperation.SET, UpdateOperation.TOGGLE),
    ValueType.ENUM: (
        UpdateOperation.SET,
        UpdateOperation.APPEND,
        UpdateOperation.REMOVE,
        UpdateOperation.CLEAR,
    ),
    ValueType.STRING: (UpdateOperation.SET,),
    ValueType.TIME: (UpdateOperation.SET,),
}

_ALL_ERROR_KINDS: Final[Tuple[DataflowErrorKind, ...]] = (
    DataflowErrorKind.NULL_VALUE,
    DataflowErrorKind.ZERO_VALUE,
    DataflowErrorKind.EXPIRED,
)

_NON_NUMERIC_ERROR_KINDS: Final[Tuple[DataflowErrorKind, ...]] = (
    DataflowErrorKind.NULL_VALUE,
    DataflowErrorKind.EXPIRED,
)

_ALL_STRATEGIES: Final[Tuple[ErrorStrategy, ...]] = (
    ErrorStrategy.SKIP,
    ErrorStrategy.STILL_UPDATE,
    ErrorStrategy.VALUE_REPLACE,
    ErrorStrategy.USE_PREVIOUS_VALUE,
)

# (error kind, operation) pairs for which a strategy is never offered
_EXCLUDED_STRATEGIES: Final[
    Dict[Tuple[DataflowErrorKind, UpdateOperation], frozenset[ErrorStrategy]]
] = {
    (DataflowErrorKind.ZERO_VALUE, UpdateOperation.DIVIDE): frozenset(
        {ErrorStrategy.STILL_UPDATE}
    ),
}

_TRIGGER_STYLES_BY_OPERATION: Final[Dict[VarOperation, Tuple[TriggerStyle, ...]]] = {
    VarOperation.GET: (TriggerStyle.CONDITION, TriggerStyle.TIMER),
    VarOperation.UPDATE: (TriggerStyle.CONDITION, TriggerStyle.DATAFLOW),
    VarOperation.RESET: (TriggerStyle.CONDITION, TriggerStyle.TIMER),
}


def is_numeric(value_type: ValueType) -> bool:
    return ValueType(value_type) in NUMERIC_VALUE_TYPES


def allowed_operations(
    value_type: ValueType,
    trigger_style: TriggerStyle | None = None,
) -> Tuple[UpdateOperation, ...]:
    """
    Update operations applicable to a variable of ``value_type``.

    Examples:
        >>> allowed_operations(ValueType.BOOLEAN)
        (<UpdateOperation.SET: 'set'>, <UpdateOperation.TOGGLE: 'toggle'>)
        >>> UpdateOperation.MAX in allowed_operations(
        ...     ValueType.NUMBER, TriggerStyle.DATAFLOW
        ... )
        True
    """
    operations = _OPERATIONS_BY_VALUE_TYPE[ValueType(value_type)]
    if is_numeric(value_type) and trigger_style == TriggerStyle.DATAFLOW:
        return operations + _DATAFLOW_ONLY_OPERATIONS
    return operations


def allowed_error_kinds(value_type: ValueType) -> Tuple[DataflowErrorKind, ...]:
    """Error kinds a dataflow update into ``value_type`` can surface."""
    if is_numeric(value_type):
        return _ALL_ERROR_KINDS
    return _NON_NUMERIC_ERROR_KINDS


def allowed_strategies(
    error_kind: DataflowErrorKind,
    operation: UpdateOperation | None,
) -> Tuple[ErrorStrategy, ...]:
    """
    Strategies that may handle ``error_kind`` for ``operation``.

    Propagating a zero denominator is never useful, so ``stillUpdate`` is
    dropped for zero values under ``divide``.
    """
    if operation is None:
        return _ALL_STRATEGIES
    excluded = _EXCLUDED_STRATEGIES.get(
        (DataflowErrorKind(error_kind), UpdateOperation(operation)), frozenset()
    )
    return tuple(s for s in _ALL_STRATEGIES if s not in excluded)


def allowed_trigger_styles(var_operation: VarOperation) -> Tuple[TriggerStyle, ...]:
    """Trigger styles a variable operation can be bound to."""
    return _TRIGGER_STYLES_BY_OPERATION[VarOperation(var_operation)]
