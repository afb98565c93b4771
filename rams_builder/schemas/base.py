from dataclasses import dataclass, field
from typing import Annotated, Any, Callable, Dict, Generic, List, Mapping, Optional, Sequence, Type, TypeVar, Union

from pydantic import (
    AfterValidator,
    AnyUrl,
    BaseModel,
    Field,
    ConfigDict,
    StringConstraints,
    TypeAdapter,
    ValidationError,
)
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from rams_builder.exceptions import ValidationFailure


class SchemaModel(BaseModel):
    """Base for inbound payloads: camelCase keys, immutable once parsed."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    @classmethod
    def schema_name(cls) -> str:
        return cls.model_config.get("title") or cls.__name__

    def changes(self) -> Dict[str, Any]:
        """Return only the fields the caller supplied, keyed by wire name."""
        return self.model_dump(mode="json", by_alias=True, include=set(self.model_fields_set))


M = TypeVar("M", bound=SchemaModel)


def _min_length(minimum: int) -> Callable[[str], str]:
    def check(value: str) -> str:
        if not value:
            raise PydanticCustomError("blank", "Value must not be blank")
        if len(value) < minimum:
            raise PydanticCustomError(
                "string_too_short",
                "String should have at least {min_length} characters",
                {"min_length": minimum},
            )
        return value

    return check


def Text(max_length: Optional[int] = None, *, min_length: int = 1) -> Any:
    """Trimmed text that must not be blank and must fit ``max_length``."""
    return Annotated[
        str,
        StringConstraints(strip_whitespace=True, max_length=max_length),
        AfterValidator(_min_length(min_length)),
    ]


_URL_ADAPTER = TypeAdapter(AnyUrl)


def _well_formed_url(value: str) -> str:
    try:
        _URL_ADAPTER.validate_python(value)
    except ValidationError:
        raise PydanticCustomError("invalid_url", "Value must be a valid URL") from None
    return value


def Url(max_length: int) -> Any:
    return Annotated[
        str,
        StringConstraints(strip_whitespace=True, max_length=max_length),
        AfterValidator(_min_length(1)),
        AfterValidator(_well_formed_url),
    ]


@dataclass(frozen=True)
class Violation:
    field: str
    rule: str
    message: str


@dataclass(frozen=True)
class ValidationResult(Generic[M]):
    value: Optional[M] = None
    violations: List[Violation] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.violations

    def raise_for_violations(self) -> M:
        if self.violations or self.value is None:
            raise ValidationFailure(self.violations)
        return self.value


def _field_path(prefix: str, loc: Sequence[Union[int, str]]) -> str:
    path = prefix
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}"
    return path


def violations_from_error(schema: Type[SchemaModel], exc: ValidationError) -> List[Violation]:
    prefix = schema.schema_name()
    return [
        Violation(
            field=_field_path(prefix, error["loc"]),
            rule=error["type"],
            message=error["msg"],
        )
        for error in exc.errors()
    ]


def validate(schema: Type[M], payload: Any) -> ValidationResult[M]:
    """Check ``payload`` against ``schema`` and collect every violation."""
    try:
        value = schema.model_validate(payload)
    except ValidationError as exc:
        return ValidationResult(violations=violations_from_error(schema, exc))
    return ValidationResult(value=value)


def merge_patch(current: Mapping[str, Any], patch: SchemaModel) -> Dict[str, Any]:
    """Overwrite supplied fields and retain everything else.

    A field explicitly sent as null counts as supplied and clears the value.
    """
    merged = dict(current)
    merged.update(patch.changes())
    return merged


def Items(item_type: Any, max_items: int) -> Any:
    """A list capped at ``max_items``; exceeding the cap is a violation."""
    return Annotated[List[item_type], Field(max_length=max_items)]
