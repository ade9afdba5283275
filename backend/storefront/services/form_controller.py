"""Form Controller — lifecycle of one schema-driven form: edit, submit, reset.

Invariants:
    - Edits validate only the edited field; submit validates every field first
    - A blocked submit never calls the handler and surfaces every error at once
    - is_submitting is True exactly while the handler is awaited
    - A handler failure is logged and swallowed; it never becomes a field error
    - on_change always receives copies (callers cannot mutate controller state)

Design Decisions:
    - Async handler, awaited inline: single-threaded asyncio means the busy flag
      alone guards against double submission (no locks)
    - A second submit while one is in flight is BLOCKED rather than queued
"""

import logging
from typing import Any, Awaitable, Callable

from storefront.core.analytics import FORM_SUBMIT, AnalyticsReporter, NullReporter
from storefront.core.domain_types import SubmitOutcome
from storefront.core.form_schema import FormSchema
from storefront.core.form_state import FormState
from storefront.core.form_view import FieldView, FormView, build_form_view
from storefront.core.theme import FormTheme
from storefront.core.validation import is_valid

logger = logging.getLogger(__name__)

SubmitHandler = Callable[[dict[str, Any]], Awaitable[Any]]
ChangeCallback = Callable[[dict[str, Any], dict[str, str]], None]


class FormController:
    """Owns the FormState of one rendered form."""

    def __init__(
        self,
        form_id: str,
        schema: FormSchema,
        on_submit: SubmitHandler,
        *,
        initial_values: dict[str, Any] | None = None,
        on_change: ChangeCallback | None = None,
        theme: FormTheme | None = None,
        reporter: AnalyticsReporter | None = None,
    ):
        self.form_id = form_id
        self.theme = theme or FormTheme()
        self._state = FormState.create(schema, initial_values)
        self._on_submit = on_submit
        self._on_change = on_change
        self._reporter = reporter or NullReporter()
        self._submitting = False

    @property
    def schema(self) -> FormSchema:
        return self._state.schema

    @property
    def values(self) -> dict[str, Any]:
        return dict(self._state.values)

    @property
    def errors(self) -> dict[str, str]:
        return dict(self._state.errors)

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    def change(self, field_name: str, value: Any) -> str | None:
        """Apply one edit. Returns the field's new error, if any."""
        error = self._state.apply_edit(field_name, value)
        self._notify()
        return error

    async def submit(self) -> SubmitOutcome:
        if self._submitting:
            logger.warning(
                "Submit ignored: submission already in flight",
                extra={"form_id": self.form_id},
            )
            return SubmitOutcome.BLOCKED

        errors = self._state.validate_all()
        if not is_valid(errors):
            self._notify()
            return SubmitOutcome.BLOCKED

        self._submitting = True
        try:
            await self._on_submit(dict(self._state.values))
        except Exception as e:
            logger.error(
                f"Form submit handler failed: {e}",
                extra={"form_id": self.form_id},
                exc_info=True,
            )
            return SubmitOutcome.FAILED
        finally:
            self._submitting = False

        self._reporter.track(FORM_SUBMIT, {"form_id": self.form_id})
        return SubmitOutcome.SUBMITTED

    def reset(self) -> None:
        self._state.reset()
        self._notify()

    def view(self) -> FormView:
        return build_form_view(self.form_id, self._state, self.theme, self._submitting)

    def field_views(self) -> tuple[FieldView, ...]:
        return self.view().fields

    def _notify(self) -> None:
        if self._on_change is not None:
            values, errors = self._state.snapshot()
            self._on_change(values, errors)
