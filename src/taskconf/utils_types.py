# src/taskconf/utils_types.py

from typing import Any, Literal, TypeVar, cast, get_args, get_origin, get_type_hints


T = TypeVar("T")


def cast_hint(typ: type[T], value: Any) -> T:  # noqa: ARG001
    """Narrow `value` to `typ` for the type checker; no runtime check."""
    return cast("T", value)


def schema_from_typeddict(td: type[Any]) -> dict[str, Any]:
    """Field names and annotated types of a TypedDict, inherited ones included."""
    return get_type_hints(td, include_extras=True)


def literal_to_set(literal_type: Any) -> set[Any]:
    """Extract values from a Literal type as a set.

    Raises:
        TypeError: If the input is not a Literal type
    """
    if get_origin(literal_type) is not Literal:
        msg = f"Expected Literal type, got {literal_type}"
        raise TypeError(msg)
    return set(get_args(literal_type))


def is_string_list(value: Any) -> bool:
    """True for a list whose items are all strings (an empty list included)."""
    return isinstance(value, list) and all(
        isinstance(item, str) for item in cast_hint(list[Any], value)
    )
