"""Form Schemas — submission payloads and per-form email configuration.

Invariants:
    - FormSubmitRequest.form_id is non-empty; every other key is a submitted field
    - FormEmailConfig mirrors one entry of form_configs.json (camelCase on disk)
    - FormSubmitResponse.email_errors is omitted when every email went out

Design Decisions:
    - extra="allow" on the request: field names come from the form's JSON Schema,
      which the gateway validates itself with the shared validator
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FormSubmitRequest(BaseModel):
    """POST /api/forms/submit body: {formId, ...fields}."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    form_id: str = Field(alias="formId", min_length=1)

    @property
    def submitted_fields(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


class FormSubmitResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    email_errors: list[str] | None = Field(None, alias="emailErrors")


class FormEmailConfig(BaseModel):
    """Persistence target, email behavior, and JSON Schema of one form."""
    model_config = ConfigDict(populate_by_name=True)

    db_schema_name: str = Field(alias="dbSchemaName")
    send_notification_email: bool = Field(False, alias="sendNotificationEmail")
    send_feedback_email: bool = Field(False, alias="sendFeedbackEmail")
    email_subject: str = Field("", alias="emailSubject")
    email_template: str = Field("", alias="emailTemplate")
    reply_to_email: str = Field("", alias="replyToEmail")
    json_schema: dict[str, Any] = Field(default_factory=dict, alias="jsonSchema")
