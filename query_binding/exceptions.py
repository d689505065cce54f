"""
Typed Exception Hierarchy for query binding.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Binding failures end up in HTTP error responses. Callers need to tell a
malformed integer apart from a record that was never a record without
parsing message text. Every exception here:
  1. Has its own class (catch by type, not message)
  2. Has a CODE class attribute (machine-readable, API-safe)
  3. Carries structured DATA as attributes (raw value, target, field path)

Example:
    try:
        bind("page=abc", params)
    except ParseError as e:
        return {"error": e.code, "field": e.field_path, "value": e.raw}

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    BindingError (base)
    |
    +-- NotARecordError
    +-- ArityError
    +-- ParseError (also a ValueError)
    +-- DocumentDecodeError
    +-- UnsupportedFieldTypeError
    +-- ConfigError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Code                    | When Raised
------------------------|------------------------------------------------------
NOT_A_RECORD            | Target is not a dataclass instance
ARRAY_LENGTH_MISMATCH   | Fixed-size tuple receives more values than slots
PARSE_ERROR             | Raw string is not a valid int/float/bool/timestamp
DOCUMENT_DECODE_ERROR   | Nested record value is not a well-formed JSON object
UNSUPPORTED_FIELD_TYPE  | Input is bound to a field whose type has no rule
CONFIG_ERROR            | Binding configuration file is malformed

Errors raised by a type's own ``decode_params`` and by an external validator
are NOT wrapped into this hierarchy; they reach the caller as raised.

===============================================================================
"""


class BindingError(Exception):
    """
    Base exception for all binding errors.

    ``field_path`` is filled in by the walker with the dotted path of the
    field being converted when the error surfaced.
    """

    code: str = "BINDING_ERROR"
    field_path: str | None = None


class NotARecordError(BindingError):
    """Binding target is not a dataclass instance."""

    code: str = "NOT_A_RECORD"

    def __init__(self, target_type: str):
        self.target_type = target_type
        super().__init__(f"obj is not a struct: {target_type}")


class ArityError(BindingError):
    """A fixed-size sequence received more values than it has slots."""

    code: str = "ARRAY_LENGTH_MISMATCH"

    def __init__(self, capacity: int, received: int):
        self.capacity = capacity
        self.received = received
        super().__init__(
            f"array length mismatch: capacity {capacity}, received {received}"
        )


class ParseError(BindingError, ValueError):
    """
    A raw string could not be parsed into the requested scalar type.

    The message is the parser's own message, unchanged. When the failure came
    from a library parser the original exception is chained as ``__cause__``.
    """

    code: str = "PARSE_ERROR"

    def __init__(self, target: str, raw: str, message: str):
        self.target = target
        self.raw = raw
        super().__init__(message)


class DocumentDecodeError(BindingError):
    """A nested record's raw value is not a decodable JSON document."""

    code: str = "DOCUMENT_DECODE_ERROR"

    def __init__(self, target: str, message: str):
        self.target = target
        super().__init__(message)


class UnsupportedFieldTypeError(BindingError):
    """Values were bound to a field whose annotation has no conversion rule."""

    code: str = "UNSUPPORTED_FIELD_TYPE"

    def __init__(self, annotation: str):
        self.annotation = annotation
        super().__init__(f"unsupported field type: {annotation}")


class ConfigError(BindingError):
    """Binding configuration could not be loaded."""

    code: str = "CONFIG_ERROR"

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")
