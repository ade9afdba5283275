"""Form Submission Service — validate, persist (deduplicated) and mail a public form.

Invariants:
    - Unknown form id: success without persistence or email
    - Fields are validated against the form's JSON Schema before anything is stored
    - A duplicate uniqueness key raises DuplicateSubmissionError before any email,
      whether the pre-insert lookup or the unique index catches it
    - Persistence failures (other than duplicates) are logged and emails still go out
    - Email failures never fail the submission: success with email_errors

Design Decisions:
    - community_fit_upload rows go to community_fits (image URL list, unapproved);
      every other form shares the uniqueness_check/form_data table shape
    - Email flags on the stored row are updated after sending, best effort
"""

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

import storefront.models  # noqa: F401
from storefront.core.errors import (
    DuplicateSubmissionError, ErrorContext, RecordValidationError,
    ResourceNotFoundError, StorefrontError,
)
from storefront.core.submission import (
    COMMUNITY_FIT_FORM, community_fit_record, extract_unique_identifier, submission_record,
)
from storefront.core.validation import validate_form
from storefront.db.base import Base
from storefront.infrastructure.schema_registry import SchemaRegistry
from storefront.schemas.forms import FormEmailConfig, FormSubmitResponse
from storefront.services.email_notifier import EmailNotifier, EmailReport

logger = logging.getLogger(__name__)


class FormSubmissionService:
    def __init__(self, db: AsyncSession, registry: SchemaRegistry, notifier: EmailNotifier):
        self.db = db
        self.registry = registry
        self.notifier = notifier

    async def submit(self, form_id: str, data: dict[str, Any]) -> FormSubmitResponse:
        config = self.registry.form_config(form_id)
        if config is None:
            logger.warning(
                f"No email configuration found for form: {form_id}",
                extra={"form_id": form_id},
            )
            return FormSubmitResponse(
                success=True, message="Form submitted successfully (no email config)",
            )

        schema = self.registry.form_schema(form_id)
        if schema is not None:
            errors = validate_form(schema.editable(), data)
            if errors:
                raise RecordValidationError(errors, ErrorContext(form_id=form_id))

        now = datetime.now(timezone.utc)
        row_id = await self._persist(form_id, data, config, now)

        report = await self.notifier.send_submission_emails(form_id, data, config, now)
        if row_id is not None and form_id != COMMUNITY_FIT_FORM:
            await self._mark_emails(config, row_id, report)

        if report.errors:
            return FormSubmitResponse(
                success=True,
                message="Form submitted but some emails failed",
                email_errors=report.errors,
            )
        return FormSubmitResponse(
            success=True, message="Form submitted and emails sent successfully",
        )

    async def _persist(
        self, form_id: str, data: dict[str, Any], config: FormEmailConfig, now: datetime,
    ) -> int | None:
        try:
            if form_id == COMMUNITY_FIT_FORM:
                table = self._table("community_fits")
                record = community_fit_record(data, now)
            else:
                table = self._table(config.db_schema_name)
                await self._reject_duplicate(table, form_id, data)
                record = submission_record(data, now)
            result = await self.db.execute(insert(table).values(**record))
            await self.db.commit()
        except DuplicateSubmissionError:
            raise
        except IntegrityError as e:
            # Unique uniqueness_check: a concurrent identical submission won the insert
            await self.db.rollback()
            if form_id == COMMUNITY_FIT_FORM:
                logger.error(
                    f"Database storage error: {e}", extra={"form_id": form_id},
                )
                return None
            raise DuplicateSubmissionError(form_id) from e
        except (StorefrontError, SQLAlchemyError) as e:
            await self.db.rollback()
            logger.error(
                f"Database storage error: {e}", extra={"form_id": form_id},
            )
            return None
        logger.info(f"Form data stored successfully for {form_id}", extra={"form_id": form_id})
        return result.inserted_primary_key[0]

    async def _reject_duplicate(self, table, form_id: str, data: dict[str, Any]) -> None:
        key = extract_unique_identifier(data)
        existing = await self.db.execute(
            select(table.c.id).where(table.c.uniqueness_check == key),
        )
        if existing.first() is not None:
            raise DuplicateSubmissionError(form_id)

    async def _mark_emails(
        self, config: FormEmailConfig, row_id: int, report: EmailReport,
    ) -> None:
        values = {
            "notification_email_sent": report.notification_sent,
            "reply_email_sent": report.reply_sent,
        }
        try:
            table = self._table(config.db_schema_name)
            await self.db.execute(update(table).where(table.c.id == row_id).values(**values))
            await self.db.commit()
        except (StorefrontError, SQLAlchemyError) as e:
            await self.db.rollback()
            logger.warning(f"Could not record email status: {e}")

    def _table(self, table_name: str):
        table = Base.metadata.tables.get(table_name)
        if table is None:
            raise ResourceNotFoundError("Table", table_name)
        return table
