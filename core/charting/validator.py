"""Validation for statistic option schemas.

Option schemas are declarative and may grow new override rules over time, so
validation is strict and fails fast. Every key an override patches must exist
in the base options, and only `type` may trigger an override, which keeps
resolution a single pass.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .schema import SUPPORTED_STATISTICS, EnabledOption, StatisticOptionSchema

TRIGGER_KEYS = frozenset({"type"})


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Result of validating an option schema."""

    is_valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


def validate_statistic_options(schema: StatisticOptionSchema) -> ValidationResult:
    """Validate a single StatisticOptionSchema.

    Args:
        schema: Schema to validate.

    Returns:
        ValidationResult containing errors and warnings.
    """

    errors: list[str] = []
    warnings: list[str] = []
    name = f"OptionSchema[{schema.statistic}]"

    if schema.statistic not in SUPPORTED_STATISTICS:
        errors.append(f"{name}.statistic is not a supported value: {schema.statistic!r}.")
    if not str(schema.label).strip():
        errors.append(f"{name}.label must be a non-empty string.")

    if not isinstance(schema.options.get("type"), EnabledOption):
        errors.append(f"{name}.options['type'] must be enabled.")

    for key, setting in schema.options.items():
        _validate_setting(f"{name}.options[{key!r}]", setting, errors=errors)

    for idx, rule in enumerate(schema.overrides):
        rule_name = f"{name}.overrides[{idx}]"
        if rule.trigger_key not in TRIGGER_KEYS:
            errors.append(f"{rule_name} trigger_key={rule.trigger_key!r} is not a supported trigger.")
            continue

        trigger = schema.options.get(rule.trigger_key)
        if isinstance(trigger, EnabledOption) and rule.trigger_value not in trigger.values:
            warnings.append(
                f"{rule_name} trigger_value={rule.trigger_value!r} is never selectable; the rule is inert."
            )

        unknown = sorted(set(rule.patch) - set(schema.options))
        if unknown:
            errors.append(f"{rule_name} patches keys missing from the base options: {unknown}.")
        if rule.trigger_key in rule.patch:
            errors.append(f"{rule_name} must not patch its own trigger key {rule.trigger_key!r}.")
        for key, setting in rule.patch.items():
            _validate_setting(f"{rule_name}.patch[{key!r}]", setting, errors=errors)

    return ValidationResult(is_valid=not errors, errors=tuple(errors), warnings=tuple(warnings))


def validate_statistic_options_many(schemas: Iterable[StatisticOptionSchema]) -> None:
    """Validate schemas and raise on the first invalid entry.

    Raises:
        ValueError: When any schema is invalid.
    """

    for schema in schemas:
        result = validate_statistic_options(schema)
        if not result.is_valid:
            raise ValueError("\n".join(result.errors))


def _validate_setting(name: str, setting: object, *, errors: list[str]) -> None:
    """Validate a single option setting."""

    if not isinstance(setting, EnabledOption):
        return
    if not setting.choices:
        errors.append(f"{name} must offer at least one choice.")
        return
    values = setting.values
    if len(set(values)) != len(values):
        errors.append(f"{name} contains duplicate values: {list(values)}.")
    if setting.default not in values:
        errors.append(f"{name}.default={setting.default!r} is not one of {list(values)}.")
