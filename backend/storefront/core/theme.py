"""Form Theme — immutable presentation configuration for schema-driven forms.

Invariants:
    - FormTheme and every section are frozen: overrides build a new value
    - with_overrides merges per section (keys not given keep the default)
    - Unknown sections or keys raise ValueError (typos never pass silently)

Design Decisions:
    - One theme value per form instance, passed down to the field views; there is no
      module-level mutable default that callers could patch
    - Class strings mirror the storefront's Tailwind markup; the engine only
      concatenates them, it never interprets them
"""

from dataclasses import dataclass, field, fields, replace
from typing import Mapping


@dataclass(frozen=True)
class FormClasses:
    container: str = "space-y-8"
    title_section: str = "mb-8"
    title: str = "text-4xl md:text-6xl font-bold text-white uppercase tracking-tight"
    description: str = "mt-4 text-lg text-white/80"
    fields_container: str = "space-y-6"
    button_section: str = "flex justify-center pt-8"


@dataclass(frozen=True)
class ButtonClasses:
    base: str = (
        "w-full md:w-auto px-12 py-4 bg-white text-black text-lg font-bold uppercase"
    )
    disabled: str = "disabled:opacity-50 disabled:cursor-not-allowed"


@dataclass(frozen=True)
class FieldClasses:
    container: str = "mb-6"
    label: str = "block text-sm font-semibold text-white mb-2 uppercase tracking-wide"
    required_indicator: str = "text-red-400 ml-1"
    description: str = "text-sm text-white/70 mb-2"
    error_message: str = "mt-2 text-sm text-red-400 font-medium"


@dataclass(frozen=True)
class InputClasses:
    base: str = "w-full px-4 py-4 border-2 bg-transparent text-white text-lg"
    normal: str = "border-white/30 hover:border-white/50"
    error: str = "border-white"
    disabled: str = "bg-white/10 cursor-not-allowed opacity-50"

    def compose(self, has_error: bool, disabled: bool) -> str:
        parts = [self.base, self.error if has_error else self.normal]
        if disabled:
            parts.append(self.disabled)
        return " ".join(p for p in parts if p)


@dataclass(frozen=True)
class ChoiceClasses:
    container: str = "space-y-3"
    option: str = "flex items-center space-x-3"
    label: str = "text-white font-medium"
    checkbox: str = "h-5 w-5 border-2 border-white/50 bg-transparent"


@dataclass(frozen=True)
class NoticeClasses:
    container: str = "mb-6 p-4 bg-white/10 border-2 border-white/20"
    message: str = "text-white"


@dataclass(frozen=True)
class FormLabels:
    submit: str = "submit"
    submitting: str = "submitting..."
    reset: str = "reset"
    unsupported: str = "unsupported field type: {type_name}"


@dataclass(frozen=True)
class FormTheme:
    form: FormClasses = field(default_factory=FormClasses)
    submit_button: ButtonClasses = field(default_factory=ButtonClasses)
    reset_button: ButtonClasses = field(
        default_factory=lambda: ButtonClasses(
            base="w-full md:w-auto px-8 py-3 border-2 border-white text-white text-sm uppercase",
            disabled="disabled:opacity-50",
        ),
    )
    field_block: FieldClasses = field(default_factory=FieldClasses)
    input: InputClasses = field(default_factory=InputClasses)
    textarea: InputClasses = field(
        default_factory=lambda: InputClasses(
            base="w-full px-4 py-4 border-2 bg-transparent text-white text-lg resize-vertical",
        ),
    )
    select: InputClasses = field(
        default_factory=lambda: InputClasses(
            base="block w-full px-4 py-4 border-2 bg-transparent text-white text-lg",
        ),
    )
    date_input: InputClasses = field(default_factory=InputClasses)
    choices: ChoiceClasses = field(default_factory=ChoiceClasses)
    unsupported: NoticeClasses = field(default_factory=NoticeClasses)
    labels: FormLabels = field(default_factory=FormLabels)

    def with_overrides(self, overrides: Mapping[str, Mapping[str, str]] | None) -> "FormTheme":
        """New theme with per-section overrides applied."""
        if not overrides:
            return self
        sections = {f.name for f in fields(self)}
        changes = {}
        for section_name, values in overrides.items():
            if section_name not in sections:
                raise ValueError(f"Unknown theme section: {section_name}")
            section = getattr(self, section_name)
            known = {f.name for f in fields(section)}
            unknown = set(values) - known
            if unknown:
                raise ValueError(
                    f"Unknown keys for theme section {section_name}: {sorted(unknown)}",
                )
            changes[section_name] = replace(section, **values)
        return replace(self, **changes)
