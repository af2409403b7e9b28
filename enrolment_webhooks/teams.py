"""Team updates: authorize a member's update form and merge it onto the team's last record.

An update submission names the record it amends through its "Team ID" answer.
The submitter must be one of that record's team members, identified by the
(email, phone) pair they entered. The merged record is pushed as a new list
entry, so earlier team states stay in the history list.
"""

import json
import logging
from typing import Iterable

from pydantic import ValidationError

from enrolment_webhooks.config import settings
from enrolment_webhooks.errors import MalformedPayload, RecordNotFound, Unauthorized
from enrolment_webhooks.fields import (
    TeamMemberPair,
    extract_team_pairs,
    find_by_label,
    normalize_email,
    normalize_phone,
)
from enrolment_webhooks.models import SubmissionData, SubmissionRecord, decode_entry
from enrolment_webhooks.store import ListStore

logger = logging.getLogger(__name__)

SUBMITTER_EMAIL_LABEL = "Email of person filling this form"
SUBMITTER_PHONE_LABEL = "Phone number of person filling this form"
TEAM_ID_LABEL = "Team ID"


def parse_update(raw_body: bytes) -> SubmissionRecord:
    try:
        payload = json.loads(raw_body.decode("utf-8"))
    except ValueError as e:
        logger.error(f"Invalid JSON in request body: {e}")
        raise MalformedPayload("Invalid JSON")

    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, dict) or not isinstance(data.get("fields"), list) or not data["fields"]:
        logger.error("Invalid payload structure: missing data.fields")
        raise MalformedPayload("Invalid payload structure")

    try:
        return SubmissionRecord.model_validate(payload)
    except ValidationError as e:
        logger.error(f"Invalid payload structure: {e.error_count()} validation error(s)")
        raise MalformedPayload("Invalid payload structure")


def submitter_identity(update: SubmissionRecord) -> TeamMemberPair:
    fields = update.data.fields
    email_field = find_by_label(fields, SUBMITTER_EMAIL_LABEL)
    phone_field = find_by_label(fields, SUBMITTER_PHONE_LABEL)

    if email_field is None or phone_field is None or not email_field.value or not phone_field.value:
        logger.error("Missing submitter email or phone in update payload")
        raise MalformedPayload("Missing required fields: email and phone")

    return TeamMemberPair(normalize_email(email_field.value), normalize_phone(phone_field.value))


def team_id_of(update: SubmissionRecord) -> str:
    """The "Team ID" answer: submissionId (or responseId) of the record being updated."""
    team_id_field = find_by_label(update.data.fields, TEAM_ID_LABEL)
    if team_id_field is None or not team_id_field.value:
        logger.error("Missing Team ID field in update payload")
        raise MalformedPayload("Missing required field: Team ID")
    return str(team_id_field.value)


def find_previous_record(raw_entries: Iterable, team_id: str) -> SubmissionRecord | None:
    """First entry, in list order, whose submissionId or responseId is ``team_id``."""
    for index, raw in enumerate(raw_entries):
        try:
            entry = decode_entry(raw)
        except ValueError as e:
            logger.warning(f"Failed to parse record at index {index}: {e}")
            continue

        data = entry.get("data") if isinstance(entry, dict) else None
        if not isinstance(data, dict) or team_id not in (data.get("submissionId"), data.get("responseId")):
            continue

        try:
            return SubmissionRecord.model_validate(entry)
        except ValidationError as e:
            logger.warning(f"Matching record at index {index} is unreadable: {e.error_count()} validation error(s)")
    return None


def merge_update(previous: SubmissionRecord, update: SubmissionRecord) -> SubmissionRecord:
    """Overlay ``update`` onto a copy of ``previous``, matching fields by label.

    Empty update values never erase existing answers. The result carries the
    update's envelope identity and points back at ``previous``.
    """
    merged = previous.model_copy(deep=True)
    if merged.data is None:
        merged.data = SubmissionData()
    fields = merged.data.fields

    for update_field in update.data.fields:
        if not update_field.label:
            continue

        existing = next((f for f in fields if f.label == update_field.label), None)
        if existing is None:
            fields.append(update_field.model_copy(deep=True))
            continue

        if update_field.value is not None and update_field.value != "":
            existing.value = update_field.value
        if "key" in update_field.model_fields_set:
            existing.key = update_field.key
        if update_field.type:
            existing.type = update_field.type
        if update_field.options is not None:
            existing.options = update_field.options

    merged.data.fields = fields
    merged.previous_team_state = previous.identifier

    merged.event_id = update.event_id
    merged.created_at = update.created_at
    merged.data.response_id = update.data.response_id
    merged.data.submission_id = update.data.submission_id
    merged.data.respondent_id = update.data.respondent_id
    merged.data.form_id = update.data.form_id
    merged.data.form_name = update.data.form_name
    merged.data.created_at = update.data.created_at
    return merged


async def apply_team_update(store: ListStore, raw_body: bytes) -> SubmissionRecord:
    """Validate, authorize and merge a team update, then push the result onto the list head."""
    update = parse_update(raw_body)
    submitter = submitter_identity(update)
    team_id = team_id_of(update)
    logger.info(f"Looking for previous record with submissionId: {team_id}")

    queue_key = settings.teams_queue_key
    previous = find_previous_record(await store.range(queue_key), team_id)
    if previous is None:
        logger.error(f"Previous record not found for submissionId: {team_id}")
        raise RecordNotFound("Previous record not found")
    logger.info(f"Found previous record: {previous.identifier}")

    team_pairs = extract_team_pairs(previous)
    if not team_pairs:
        logger.warning("No team member pairs found in previous record")

    if submitter not in team_pairs:
        logger.warning(f"Authorization failed for email: {submitter.email}, phone: {submitter.phone}")
        raise Unauthorized()
    logger.info("Authorization successful")

    merged = merge_update(previous, update)
    await store.push(queue_key, merged.to_json(), head=True)
    logger.info(
        f"Team update queued. SubmissionId: {merged.data.submission_id}, Previous: {merged.previous_team_state}"
    )
    return merged
