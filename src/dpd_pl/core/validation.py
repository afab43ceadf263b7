"""Validador de esquemas (respuestas de red e input del llamador).

Por qué pydantic + `TypeAdapter`:
- Un contrato es cualquier tipo que pydantic sepa validar (modelo,
  `list[Modelo]`, `Modelo | None`), así el catálogo declara las formas sin
  clases intermedias.
- pydantic ya recolecta *todas* las violaciones; aquí solo se traducen a
  `Violation` con ruta y razón estables.

Reglas:
- `validate` es pura: no hace I/O, no muta el input y no lanza por datos
  inválidos (devuelve `ValidationResult`).
- No hay coerción silenciosa: los contratos usan tipos `Strict*`.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Annotated, Any, Generic, Iterable, TypeVar, get_args, get_origin

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from dpd_pl.core.errors import ValidationError

T = TypeVar("T")

ROOT_PATH = "$"
_SEQUENCE_ORIGINS = (list, tuple, Sequence)


class ViolationReason(str, Enum):
    MISSING = "missing"
    WRONG_TYPE = "wrong type"
    OUT_OF_ENUM = "out of enum"
    REFINEMENT = "refinement"


_WRONG_TYPE_ERRORS = frozenset(
    {
        "model_type",
        "model_attributes_type",
        "dataclass_type",
        "is_instance_of",
        "none_required",
        "union_tag_invalid",
    }
)
_ENUM_ERRORS = frozenset({"literal_error", "enum"})


@dataclass(frozen=True)
class Violation:
    """Un campo que no cumple el contrato."""

    path: str
    reason: ViolationReason
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "reason": self.reason.value, "message": self.message}


@dataclass(frozen=True)
class ValidationResult(Generic[T]):
    """Valor tipado completo o lista completa de violaciones, nunca ambos."""

    value: T | None = None
    violations: tuple[Violation, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.violations

    def unwrap(self) -> T:
        if self.violations:
            raise ValidationError("Value does not match its contract", self.violations)
        return self.value  # type: ignore[return-value]


def _reason_for(error_type: str) -> ViolationReason:
    if error_type == "missing":
        return ViolationReason.MISSING
    if error_type in _ENUM_ERRORS:
        return ViolationReason.OUT_OF_ENUM
    if error_type.endswith("_type") or error_type in _WRONG_TYPE_ERRORS:
        return ViolationReason.WRONG_TYPE
    return ViolationReason.REFINEMENT


def format_path(loc: Iterable[str | int]) -> str:
    """`("packages", 0, "parcelId")` -> `packages[0].parcelId`."""

    out = ""
    for part in loc:
        if isinstance(part, int):
            out += f"[{part}]"
        elif out:
            out += f".{part}"
        else:
            out = str(part)
    return out or ROOT_PATH


def _strip_union_branches(loc: tuple[str | int, ...], contract: Any) -> tuple[str | int, ...]:
    # Para `Modelo | None` pydantic antepone el nombre de la rama al loc.
    name = getattr(contract, "__name__", None)
    if loc and name and loc[0] == name:
        return loc[1:]
    return loc


def _unwrap_annotation(node: Any) -> Any:
    while get_origin(node) is Annotated:
        node = get_args(node)[0]
    return node


def _model_in(node: Any) -> type[BaseModel] | None:
    node = _unwrap_annotation(node)
    if isinstance(node, type) and issubclass(node, BaseModel):
        return node
    if get_origin(node) is dict:
        return None
    for arg in get_args(node):
        model = _model_in(arg)
        if model is not None:
            return model
    return None


def _item_type(node: Any) -> Any:
    node = _unwrap_annotation(node)
    if get_origin(node) in _SEQUENCE_ORIGINS:
        return get_args(node)[0] if get_args(node) else None
    for arg in get_args(node):
        arg = _unwrap_annotation(arg)
        if get_origin(arg) in _SEQUENCE_ORIGINS:
            return get_args(arg)[0] if get_args(arg) else None
    return None


def _alias_loc(contract: Any, loc: tuple[str | int, ...]) -> tuple[str | int, ...]:
    """Traduce nombres de campo a aliases de red siguiendo el contrato.

    pydantic reporta el `loc` con la clave que llegó en el input; con
    `populate_by_name` eso puede ser el nombre Python. La ruta pública
    siempre usa el alias, venga el dato como venga.
    """

    node = contract
    out: list[str | int] = []
    for part in loc:
        if isinstance(part, int):
            out.append(part)
            node = _item_type(node)
            continue
        model = _model_in(node) if node is not None else None
        field = None
        if model is not None:
            field = model.model_fields.get(part)
            if field is None:
                field = next((f for f in model.model_fields.values() if f.alias == part), None)
        if field is None:
            out.append(part)
            node = None
            continue
        out.append(field.alias or part)
        node = field.annotation
    return tuple(out)


@lru_cache(maxsize=None)
def _adapter(contract: Any) -> TypeAdapter[Any]:
    return TypeAdapter(contract)


def _violations_from(exc: PydanticValidationError, contract: Any) -> tuple[Violation, ...]:
    seen: set[tuple[str, ViolationReason]] = set()
    out: list[Violation] = []
    for err in exc.errors(include_url=False):
        loc = tuple(err.get("loc", ()))
        args = getattr(contract, "__args__", ())
        for arg in args:
            loc = _strip_union_branches(loc, arg)
        path = format_path(_alias_loc(contract, loc))
        reason = _reason_for(str(err.get("type", "")))
        key = (path, reason)
        if key in seen:
            continue
        seen.add(key)
        out.append(Violation(path=path, reason=reason, message=str(err.get("msg", ""))))
    return tuple(out)


def validate(contract: type[T] | Any, raw: Any) -> ValidationResult[T]:
    """Valida `raw` contra `contract` sin efectos laterales."""

    try:
        value = _adapter(contract).validate_python(raw)
    except PydanticValidationError as exc:
        return ValidationResult(violations=_violations_from(exc, contract))
    return ValidationResult(value=value)


def serialize(contract: type[T] | Any, value: T) -> Any:
    """Re-serializa un valor validado con los nombres de red (aliases)."""

    return _adapter(contract).dump_python(value, by_alias=True, exclude_unset=True)


def validate_input(contract: type[T] | Any, data: Any) -> T:
    """Valida input del llamador; lanza `ValidationError` con todas las violaciones."""

    result: ValidationResult[T] = validate(contract, data)
    if not result.ok:
        raise ValidationError("Input validation failed", result.violations)
    return result.value  # type: ignore[return-value]
