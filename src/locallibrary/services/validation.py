"""
Field validation and sanitization for catalog forms.

A ``FormPipeline`` evaluates every rule for every field and collects all
violations instead of stopping at the first one. Sanitizers run on every
field whatever the outcome, so a rejected form can be echoed back safely.
When no rule fails, the sanitized data is parsed into a typed pydantic
candidate before anything touches the store.
"""

import datetime
import html
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Type

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

Check = Callable[[Any], bool]
Sanitizer = Callable[[Any], Any]


@dataclass(frozen=True)
class Violation:
    field: str
    message: str
    value: Any = None

    def as_dict(self) -> Dict[str, Any]:
        return {"field": self.field, "message": self.message, "value": self.value}


@dataclass(frozen=True)
class FieldRule:
    """
    One check on one field.

    Attributes:
        field (str): Form field name.
        check (Check): Predicate applied to the trimmed value.
        message (str): Human-readable violation message.
        optional (bool): Skip the check when the trimmed value is falsy.
    """
    field: str
    check: Check
    message: str
    optional: bool = False


@dataclass
class ValidationResult:
    violations: List[Violation] = field(default_factory=list)
    sanitized: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.violations

    def messages_for(self, field_name: str) -> List[str]:
        return [v.message for v in self.violations if v.field == field_name]


# --- Value helpers ---

def parse_iso8601(value: Any) -> Optional[datetime.datetime]:
    """
    Parses an ISO-8601 date or datetime string, returning None when invalid.

    A value with a UTC offset is converted to naive local time, the form
    every stored datetime takes.
    """
    if isinstance(value, datetime.datetime):
        return _naive_local(value)
    if isinstance(value, datetime.date):
        return datetime.datetime.combine(value, datetime.time())
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = datetime.datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    return _naive_local(parsed)


def _naive_local(value: datetime.datetime) -> datetime.datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def normalize_multi(value: Any) -> List[Any]:
    """
    Normalizes a multi-valued form field.

    A missing field becomes an empty list, a scalar a one-element list and
    an existing list or tuple passes through unchanged.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _trimmed(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, list):
        return [_trimmed(v) for v in value]
    return value


# --- Checks ---

def not_empty(value: Any) -> bool:
    return value is not None and len(value) >= 1


def is_alphanumeric(value: Any) -> bool:
    return isinstance(value, str) and value.isascii() and value.isalnum()


def max_length(limit: int) -> Check:
    def check(value: Any) -> bool:
        return value is None or len(value) <= limit
    return check


def is_iso8601(value: Any) -> bool:
    return parse_iso8601(value) is not None


def one_of(allowed: Iterable[str]) -> Check:
    allowed = frozenset(allowed)

    def check(value: Any) -> bool:
        return value in allowed
    return check


# --- Sanitizers ---

def escape(value: Any) -> Any:
    """Trims and HTML-escapes strings, element-wise for lists."""
    if value is None:
        return ""
    if isinstance(value, list):
        return [escape(v) for v in value]
    return html.escape(str(value).strip(), quote=True)


def to_date(value: Any) -> Optional[datetime.date]:
    parsed = parse_iso8601(value)
    return parsed.date() if parsed is not None else None


def to_datetime(value: Any) -> Optional[datetime.datetime]:
    return parse_iso8601(value)


class FormPipeline:
    """
    Ordered validation rules plus per-field sanitizers for one entity form.

    Args:
        rules (Iterable[FieldRule]): Rules evaluated in order, all of them.
        sanitizers (Mapping[str, Sanitizer]): Field sanitizers; fields without
            one are trimmed and escaped.
        schema (Type[BaseModel]): Typed candidate built from valid data.
        multi_fields (Iterable[str]): Fields normalized to lists before validation.
    """

    def __init__(
        self,
        rules: Iterable[FieldRule],
        sanitizers: Mapping[str, Sanitizer],
        schema: Type[BaseModel],
        multi_fields: Iterable[str] = (),
    ):
        self.rules = list(rules)
        self.sanitizers = dict(sanitizers)
        self.schema = schema
        self.multi_fields = frozenset(multi_fields)
        fields: List[str] = []
        for name in [r.field for r in self.rules] + list(self.sanitizers) + list(self.multi_fields):
            if name not in fields:
                fields.append(name)
        self.fields = fields

    def _extract(self, raw: Mapping[str, Any]) -> Dict[str, Any]:
        data = {}
        for name in self.fields:
            value = raw.get(name)
            if name in self.multi_fields:
                value = normalize_multi(value)
            elif isinstance(value, (list, tuple)):
                # Repeated scalar field: the last submitted value wins
                value = value[-1] if value else None
            if value is None:
                value = ""
            data[name] = _trimmed(value)
        return data

    def validate(self, raw: Mapping[str, Any]) -> ValidationResult:
        """
        Applies every rule and every sanitizer to a raw form.

        Args:
            raw (Mapping[str, Any]): Submitted form, values as str or list of str.

        Returns:
            ValidationResult: All violations and the sanitized echo.
        """
        data = self._extract(raw)
        violations = []
        for rule in self.rules:
            value = data.get(rule.field)
            if rule.optional and not value:
                continue
            if not rule.check(value):
                violations.append(Violation(rule.field, rule.message, value))

        sanitized = {name: self.sanitizers.get(name, escape)(value) for name, value in data.items()}
        if violations:
            logger.debug(f"{self.schema.__name__} form rejected: {[v.field for v in violations]}")
        return ValidationResult(violations=violations, sanitized=sanitized)

    def process(self, raw: Mapping[str, Any]) -> Tuple[ValidationResult, Optional[BaseModel]]:
        """
        Validates a raw form and, when it passes, builds the typed candidate.

        Returns:
            Tuple[ValidationResult, Optional[BaseModel]]: The result, and the
            candidate or None if there are violations.
        """
        result = self.validate(raw)
        if not result.is_valid:
            return result, None
        try:
            candidate = self.schema.model_validate(result.sanitized)
        except ValidationError as e:
            for error in e.errors():
                loc = error["loc"][0] if error["loc"] else "__all__"
                result.violations.append(Violation(str(loc), error["msg"], result.sanitized.get(loc)))
            return result, None
        return result, candidate
