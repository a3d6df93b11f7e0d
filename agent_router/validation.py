"""
Manual plan validation.

Callers get a ValidationReport with a flat list of field errors; the
schema library behind it is not part of the contract.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import ValidationError

from agent_router.models import ManualPlan


@dataclass(frozen=True)
class FieldError:
    path: str
    message: str


@dataclass(frozen=True)
class ValidationReport:
    plan: Optional[ManualPlan] = None
    errors: list[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.plan is not None and not self.errors


def _field_errors(exc: ValidationError) -> list[FieldError]:
    errors = []
    for err in exc.errors():
        path = ".".join(str(part) for part in err.get("loc", ())) or "<root>"
        errors.append(FieldError(path=path, message=err.get("msg", "invalid value")))
    return errors


def validate_manual_plan(payload: Any) -> ValidationReport:
    if payload is None:
        return ValidationReport(errors=[FieldError(path="<root>", message="Plan payload is required")])
    try:
        plan = ManualPlan.model_validate(payload)
    except ValidationError as exc:
        return ValidationReport(errors=_field_errors(exc))
    return ValidationReport(plan=plan)
