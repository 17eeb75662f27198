from typing import Iterator, Optional, Type


class SnowcraftError(Exception):
    pass


class NilOptionsError(SnowcraftError):
    def __init__(self, message: str = "options cannot be nil"):
        super().__init__(message)


ERR_NIL_OPTIONS = NilOptionsError()


class RenderError(SnowcraftError):
    pass


class ObjectNotFoundError(SnowcraftError):
    def __init__(self, message: str = "object does not exist or not authorized"):
        super().__init__(message)


class ValidationError(SnowcraftError):
    """
    Base class for a single input problem found while validating an options struct.
    """

    def __init__(self, struct_name: str, message: str):
        self.struct_name = struct_name
        super().__init__(message)


class InvalidObjectIdentifierError(ValidationError):
    def __init__(self, struct_name: str, field_name: str):
        self.field_name = field_name
        super().__init__(struct_name, f"invalid object identifier of {struct_name} field: {field_name}")


class ExactlyOneOfError(ValidationError):
    def __init__(self, struct_name: str, field_names: tuple[str, ...]):
        self.field_names = tuple(field_names)
        super().__init__(struct_name, f"exactly one of {struct_name} fields {list(self.field_names)} must be set")


class AtLeastOneOfError(ValidationError):
    def __init__(self, struct_name: str, field_names: tuple[str, ...]):
        self.field_names = tuple(field_names)
        super().__init__(struct_name, f"at least one of {struct_name} fields {list(self.field_names)} must be set")


class ConflictingFieldsError(ValidationError):
    def __init__(self, struct_name: str, field_names: tuple[str, ...]):
        self.field_names = tuple(field_names)
        super().__init__(
            struct_name,
            f"{struct_name} fields: {list(self.field_names)} are incompatible and cannot be set at the same time",
        )


class PatternRequiredForLikeError(ValidationError):
    def __init__(self, struct_name: str):
        super().__init__(struct_name, "pattern must be specified for like keyword")


class OutOfRangeError(ValidationError):
    def __init__(self, struct_name: str, field_name: str, lo: int, hi: int):
        self.field_name = field_name
        self.lo = lo
        self.hi = hi
        super().__init__(struct_name, f"{struct_name} field: {field_name} must be between {lo} and {hi}")


class RequiredIfError(ValidationError):
    def __init__(self, struct_name: str, field_name: str, condition: str):
        self.field_name = field_name
        self.condition = condition
        super().__init__(struct_name, f"{struct_name} field: {field_name} required when {condition}")


class InvalidValueError(ValidationError):
    def __init__(self, struct_name: str, field_name: str, value, allowed: tuple[str, ...]):
        self.field_name = field_name
        self.value = value
        self.allowed = tuple(allowed)
        super().__init__(
            struct_name,
            f"{struct_name} field: {field_name} has invalid value {value!r}, expected one of {list(self.allowed)}",
        )


class FieldOrderError(ValidationError):
    def __init__(self, struct_name: str, lower_field: str, upper_field: str):
        self.lower_field = lower_field
        self.upper_field = upper_field
        super().__init__(struct_name, f"{struct_name} field: {lower_field} must be less than or equal to {upper_field}")


class JoinedError(SnowcraftError):
    """
    All violations found by a single validate() call.

    The message is the newline-joined messages of the component errors. The
    components stay reachable through `errors`, iteration or `of_kind`.
    """

    def __init__(self, errors: list[Exception]):
        self.errors = list(errors)
        super().__init__("\n".join(str(err) for err in self.errors))

    def __iter__(self) -> Iterator[Exception]:
        return iter(self.errors)

    def __len__(self) -> int:
        return len(self.errors)

    def of_kind(self, kind: Type[Exception]) -> list[Exception]:
        return [err for err in self.errors if isinstance(err, kind)]

    def has(self, kind: Type[Exception]) -> bool:
        return any(isinstance(err, kind) for err in self.errors)


def join_errors(errors: list[Exception]) -> Optional[JoinedError]:
    if not errors:
        return None
    return JoinedError(errors)
