"""Field lookup and contact normalization for Tally submissions."""

import re
from typing import Any, NamedTuple

from enrolment_webhooks.models import FormField, SubmissionRecord

MAX_TEAM_MEMBERS = 9

_WHITESPACE = re.compile(r"\s+")


class TeamMemberPair(NamedTuple):
    email: str
    phone: str


def find_by_label(fields: list[FormField] | None, label: str) -> FormField | None:
    """Return the first field whose label contains ``label``.

    Substring match, not equality: "1: Email" also matches "11: Email".
    """
    if not fields:
        return None
    for field in fields:
        if isinstance(field.label, str) and label in field.label:
            return field
    return None


def normalize_email(email: Any) -> str:
    if not email or not isinstance(email, str):
        return ""
    return email.lower().strip()


def normalize_phone(phone: Any) -> str:
    if not phone or not isinstance(phone, str):
        return ""
    return _WHITESPACE.sub("", phone).strip()


def extract_team_pairs(record: SubmissionRecord) -> list[TeamMemberPair]:
    """Collect the (email, phone) pairs of team members "1".."9" in a record."""
    pairs: list[TeamMemberPair] = []
    if record.data is None or not record.data.fields:
        return pairs

    fields = record.data.fields
    for i in range(1, MAX_TEAM_MEMBERS + 1):
        email_field = find_by_label(fields, f"{i}: Email")
        phone_field = find_by_label(fields, f"{i}: Phone number")
        if email_field is None or phone_field is None:
            continue
        if not email_field.value or not phone_field.value:
            continue

        email = normalize_email(email_field.value)
        phone = normalize_phone(phone_field.value)
        if email and phone:
            pairs.append(TeamMemberPair(email, phone))

    return pairs
