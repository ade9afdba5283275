"""Form Controller — edit/submit/reset lifecycle, including end-to-end scenarios A and B.

Invariants:
    - Invalid form: handler never called, every error surfaced at once
    - Valid form: handler called once with exactly the editable values
    - Handler failure: logged, FAILED, controller editable again, no field error
    - A submit during an in-flight submit is BLOCKED
"""

import asyncio
import logging

from storefront.core.analytics import FORM_SUBMIT
from storefront.core.domain_types import SubmitOutcome
from storefront.core.form_schema import FormSchema
from storefront.services.form_controller import FormController

EMAIL_ONLY = FormSchema.from_json({
    "properties": {"email": {"type": "string", "format": "email"}},
    "required": ["email"],
})

WITH_READ_ONLY = FormSchema.from_json({
    "properties": {
        "id": {"type": "integer", "readOnly": True},
        "name": {"type": "string", "default": "Guest"},
        "email": {"type": "string", "format": "email"},
    },
    "required": ["email"],
})


class _Handler:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    async def __call__(self, values):
        self.calls.append(values)
        if self.error:
            raise self.error


class _Recorder:
    def __init__(self):
        self.events = []

    def track(self, event, properties):
        self.events.append((event, properties))


async def test_scenario_a_blank_required_email_blocks_submit():
    handler = _Handler()
    form = FormController("newsletter", EMAIL_ONLY, handler, initial_values={"email": ""})

    outcome = await form.submit()

    assert outcome == SubmitOutcome.BLOCKED
    assert handler.calls == []
    assert form.errors == {"email": "email is required"}


async def test_scenario_b_valid_email_calls_handler_once():
    handler = _Handler()
    form = FormController("newsletter", EMAIL_ONLY, handler)
    form.change("email", "a@b.com")

    outcome = await form.submit()

    assert outcome == SubmitOutcome.SUBMITTED
    assert handler.calls == [{"email": "a@b.com"}]


async def test_read_only_fields_never_reach_the_handler():
    handler = _Handler()
    form = FormController(
        "contact", WITH_READ_ONLY, handler, initial_values={"id": 9, "email": "a@b.com"},
    )
    await form.submit()
    assert handler.calls == [{"name": "Guest", "email": "a@b.com"}]


async def test_change_notifies_with_full_maps():
    seen = []
    form = FormController(
        "contact", WITH_READ_ONLY, _Handler(),
        on_change=lambda values, errors: seen.append((values, errors)),
    )
    form.change("email", "nope")
    assert seen == [(
        {"name": "Guest", "email": "nope"},
        {"email": "email is not a valid email"},
    )]


async def test_handler_failure_is_logged_and_not_a_field_error(caplog):
    form = FormController("newsletter", EMAIL_ONLY, _Handler(RuntimeError("boom")))
    form.change("email", "a@b.com")

    with caplog.at_level(logging.ERROR):
        outcome = await form.submit()

    assert outcome == SubmitOutcome.FAILED
    assert form.errors == {}
    assert not form.is_submitting
    assert "boom" in caplog.text


async def test_fields_disabled_while_submitting_and_second_submit_blocked():
    release = asyncio.Event()
    observed = {}

    async def slow_handler(values):
        observed["view"] = form.view()
        await release.wait()

    form = FormController("newsletter", EMAIL_ONLY, slow_handler)
    form.change("email", "a@b.com")

    first = asyncio.create_task(form.submit())
    await asyncio.sleep(0)
    assert form.is_submitting
    assert await form.submit() == SubmitOutcome.BLOCKED

    release.set()
    assert await first == SubmitOutcome.SUBMITTED
    assert observed["view"].submit_disabled
    assert all(f.disabled for f in observed["view"].fields)
    assert not form.is_submitting


async def test_successful_submit_reports_lead_event():
    recorder = _Recorder()
    form = FormController("newsletter", EMAIL_ONLY, _Handler(), reporter=recorder)
    form.change("email", "a@b.com")
    await form.submit()
    assert recorder.events == [(FORM_SUBMIT, {"form_id": "newsletter"})]


async def test_reset_restores_defaults_not_initial_values():
    form = FormController(
        "contact", WITH_READ_ONLY, _Handler(), initial_values={"name": "Ana"},
    )
    form.change("email", "bad")
    form.reset()
    assert form.values == {"name": "Guest", "email": ""}
    assert form.errors == {}
