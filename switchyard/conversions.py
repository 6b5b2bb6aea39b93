"""
Switchyard value conversions.

convert(value, type) turns a raw command-line string into the value stored on
a scalar option. It is the only place where option types are interpreted:

- values already of the target type are passed through untouched;
- bool accepts true/false, yes/no, on/off and 1/0 (case-insensitive);
- enum types accept a member name (case-insensitive) or a member value;
- any other type or callable is applied to the raw string.

Unconvertible input raises ValueError (or TypeError when the converter itself
rejects the input type); callers wrap those into InvalidOptionValueError.
"""
import builtins
import enum

_BOOLEANS = {
    "true": True,
    "yes": True,
    "on": True,
    "1": True,
    "false": False,
    "no": False,
    "off": False,
    "0": False,
}


def _boolean(value):
    if not isinstance(value, str):
        raise TypeError("boolean value must be a string, not %r" % builtins.type(value).__name__)
    try:
        return _BOOLEANS[value.strip().casefold()]
    except KeyError:
        raise ValueError("invalid boolean literal %r" % value) from None


def _enumeration(value, type):
    folded = str(value).casefold()
    for member in type:
        if member.name.casefold() == folded:
            return member
    return type(value)


def convert(value, type, /):
    """
    convert a raw value to the given target type.

    parameters
    - value: the raw value (usually a str taken from the command line).
    - type: a type or any callable converter.

    returns
    - the converted value.

    raises
    - TypeError: when type is not callable.
    - ValueError: when the value cannot be converted (arithmetic errors raised by
      converters such as decimal.Decimal are reported as ValueError too).
    """
    if not callable(type):
        raise TypeError("convert() second argument must be callable")

    if isinstance(type, builtins.type):
        if isinstance(value, type) and not (type is int and isinstance(value, bool)):
            return value
        if type is bool:
            return _boolean(value)
        if issubclass(type, enum.Enum):
            return _enumeration(value, type)

    try:
        return type(value)
    except ArithmeticError as error:
        raise ValueError("invalid %s literal %r" % (getattr(type, "__name__", "value"), value)) from error


__all__ = (
    "convert",
)
