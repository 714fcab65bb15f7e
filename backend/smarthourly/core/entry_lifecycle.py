"""
Production entry lifecycle.

    draft ──submit──> submitted ─┐
      │                          ├─(pending)──approve──> approved
      └────skip─────> skipped ───┘            └─reject──> rejected ──reopen──> pending

A draft only exists client-side. ``submit`` and ``skip`` return the column
values to insert; ``approve``, ``reject``, ``edit`` and ``reopen`` return the
column values to update. Nothing here touches storage: callers persist the
returned dict, so a raised ``ValidationError`` always means "nothing written".

Entries may be mappings or objects with matching attributes.
"""
from __future__ import annotations

from datetime import date
from typing import Any, Dict, Iterable, Mapping, Optional

from smarthourly.core.exceptions import (
    EntryNotPendingError,
    InvalidTransitionError,
    ValidationError,
)
from smarthourly.core.shift_calendar import as_date, normalize_shift, slots_for_shift


STATE_DRAFT = "draft"

OPERATOR_SUBMITTED = "submitted"
OPERATOR_SKIPPED = "skipped"

APPROVER_PENDING = "pending"
APPROVER_APPROVED = "approved"
APPROVER_REJECTED = "rejected"

MO_TYPES = ("Fresh", "Rework")
DOWNTIME_OPTIONS = (0, 5, 10, 15, 20, 30, 45, 60)

OTHER_ISSUE = "Other"
NO_DOWNTIME_DETAIL = "No downtime"
SKIPPED_DETAIL = "Skipped"
DEFAULT_APPROVER = "Supervisor"

EDITABLE_FIELDS = (
    "customer_name",
    "mo_number",
    "mo_type",
    "ok_qty",
    "nok_qty",
    "downtime",
    "downtime_detail",
    "atl",
    "remarks",
)

_CARRIED_FIELDS = ("meter_from", "meter_to", "remarks")

_REQUIRED_ON_SUBMIT = {
    "customer_name": "Customer Name is required.",
    "mo_type": "Please select MO Type.",
    "mo_number": "MO Number is required.",
}


def _get(record: Any, key: str, default: Any = None) -> Any:
    if isinstance(record, Mapping):
        return record.get(key, default)
    return getattr(record, key, default)


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _optional_text(value: Any) -> Optional[str]:
    text = _text(value)
    return text or None


def _quantity(value: Any, field: str) -> int:
    if value is None or value == "":
        return 0
    try:
        qty = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a whole number.", field=field) from None
    if qty != float(value):
        raise ValidationError(f"{field} must be a whole number.", field=field)
    if qty < 0:
        raise ValidationError(f"{field} cannot be negative.", field=field)
    return qty


def _downtime(value: Any) -> int:
    minutes = _quantity(value, "downtime")
    if minutes not in DOWNTIME_OPTIONS:
        allowed = ", ".join(str(m) for m in DOWNTIME_OPTIONS)
        raise ValidationError(f"Downtime must be one of {allowed} minutes.", field="downtime")
    return minutes


def resolve_downtime_detail(
    downtime: int,
    detail: Any = None,
    issue: Any = None,
    other_reason: Any = None,
) -> Optional[str]:
    """Pick the downtime reason: explicit detail, else category, else "Other" text."""
    if downtime == 0:
        return _text(detail) or NO_DOWNTIME_DETAIL
    explicit = _text(detail)
    if explicit:
        return explicit
    category = _text(issue)
    if category and category != OTHER_ISSUE:
        return category
    if category == OTHER_ISSUE:
        return _optional_text(other_reason)
    return None


def entry_state(entry: Any) -> str:
    approver_status = _get(entry, "approver_status")
    if approver_status in (APPROVER_APPROVED, APPROVER_REJECTED):
        return approver_status
    operator_status = _get(entry, "operator_status")
    if operator_status in (OPERATOR_SUBMITTED, OPERATOR_SKIPPED):
        return operator_status
    return STATE_DRAFT


def _header(
    draft: Mapping,
    lines: Optional[Iterable[str]],
) -> Dict[str, Any]:
    raw_date = draft.get("entry_date")
    if raw_date in (None, ""):
        raise ValidationError("Date is required.", field="entry_date")
    entry_date: date = as_date(raw_date)

    if _text(draft.get("shift")) == "":
        raise ValidationError("Shift is required.", field="shift")
    shift = normalize_shift(draft.get("shift"))

    line = _text(draft.get("line"))
    if not line:
        raise ValidationError("Production line is required.", field="line")
    if lines is not None and line not in set(lines):
        raise ValidationError(f"Unknown production line '{line}'.", field="line")

    time_slot = _text(draft.get("time_slot"))
    if not time_slot:
        raise ValidationError("Time slot is required.", field="time_slot")
    if time_slot not in slots_for_shift(shift, entry_date):
        raise ValidationError(
            f"Time slot '{time_slot}' is not part of shift {shift}.", field="time_slot"
        )

    return {"entry_date": entry_date, "shift": shift, "line": line, "time_slot": time_slot}


def _check_atl(atl: Optional[str], atl_roster: Optional[Iterable[str]]) -> None:
    if atl is None or atl_roster is None:
        return
    roster = set(atl_roster)
    if roster and atl not in roster:
        raise ValidationError(f"ATL '{atl}' is not a registered supervisor.", field="atl")


def submit(
    draft: Mapping,
    *,
    lines: Optional[Iterable[str]] = None,
    atl_roster: Optional[Iterable[str]] = None,
) -> Dict[str, Any]:
    values = _header(draft, lines)

    customer_name = _text(draft.get("customer_name"))
    if not customer_name:
        raise ValidationError(_REQUIRED_ON_SUBMIT["customer_name"], field="customer_name")

    mo_type = _text(draft.get("mo_type"))
    if not mo_type:
        raise ValidationError(_REQUIRED_ON_SUBMIT["mo_type"], field="mo_type")
    if mo_type not in MO_TYPES:
        raise ValidationError(f"MO Type must be one of {', '.join(MO_TYPES)}.", field="mo_type")

    mo_number = _text(draft.get("mo_number"))
    if not mo_number:
        raise ValidationError(_REQUIRED_ON_SUBMIT["mo_number"], field="mo_number")

    ok_qty = _quantity(draft.get("ok_qty"), "ok_qty")
    nok_qty = _quantity(draft.get("nok_qty"), "nok_qty")
    downtime = _downtime(draft.get("downtime"))
    downtime_detail = resolve_downtime_detail(
        downtime,
        draft.get("downtime_detail"),
        draft.get("downtime_issue"),
        draft.get("downtime_other"),
    )
    if not downtime_detail:
        raise ValidationError("Enter downtime reason.", field="downtime_detail")

    atl = _optional_text(draft.get("atl"))
    _check_atl(atl, atl_roster)

    values.update(
        customer_name=customer_name,
        mo_type=mo_type,
        mo_number=mo_number,
        ok_qty=ok_qty,
        nok_qty=nok_qty,
        downtime=downtime,
        downtime_detail=downtime_detail,
        atl=atl,
        operator_status=OPERATOR_SUBMITTED,
        approver_status=APPROVER_PENDING,
        approved=False,
        rejected=False,
        skip_reason=None,
    )
    for field in _CARRIED_FIELDS:
        values[field] = _optional_text(draft.get(field))
    return values


def skip(
    draft: Mapping,
    reason: Any,
    *,
    lines: Optional[Iterable[str]] = None,
) -> Dict[str, Any]:
    skip_reason = _text(reason)
    if not skip_reason:
        raise ValidationError("Skip reason is required.", field="skip_reason")
    values = _header(draft, lines)

    mo_type = _optional_text(draft.get("mo_type"))
    if mo_type is not None and mo_type not in MO_TYPES:
        raise ValidationError(f"MO Type must be one of {', '.join(MO_TYPES)}.", field="mo_type")

    values.update(
        customer_name=_optional_text(draft.get("customer_name")),
        mo_type=mo_type,
        mo_number=_optional_text(draft.get("mo_number")),
        atl=_optional_text(draft.get("atl")),
        ok_qty=0,
        nok_qty=0,
        downtime=0,
        downtime_detail=SKIPPED_DETAIL,
        operator_status=OPERATOR_SKIPPED,
        approver_status=APPROVER_PENDING,
        approved=False,
        rejected=False,
        skip_reason=skip_reason,
    )
    for field in _CARRIED_FIELDS:
        values[field] = _optional_text(draft.get(field))
    return values


def _require_pending(entry: Any) -> None:
    status = _get(entry, "approver_status")
    if status != APPROVER_PENDING:
        raise EntryNotPendingError(_get(entry, "id"), status or STATE_DRAFT)


def approve(entry: Any, approver_name: Any) -> Dict[str, Any]:
    _require_pending(entry)
    return {
        "approver_status": APPROVER_APPROVED,
        "approved": True,
        "rejected": False,
        "approved_by": _text(approver_name) or DEFAULT_APPROVER,
    }


def reject(entry: Any, reason: Any) -> Dict[str, Any]:
    note = _text(reason)
    if not note:
        raise ValidationError("Rejection reason is required.", field="rejection_note")
    _require_pending(entry)
    return {
        "approver_status": APPROVER_REJECTED,
        "approved": False,
        "rejected": True,
        "rejection_note": note,
    }


def reopen(entry: Any) -> Dict[str, Any]:
    state = entry_state(entry)
    if state != APPROVER_REJECTED:
        raise InvalidTransitionError(state, "reopen")
    return {
        "approver_status": APPROVER_PENDING,
        "approved": False,
        "rejected": False,
        "rejection_note": None,
    }


def edit(
    entry: Any,
    fields: Mapping,
    *,
    atl_roster: Optional[Iterable[str]] = None,
) -> Dict[str, Any]:
    """Supervisor correction. Leaves approver_status untouched."""
    state = entry_state(entry)
    if state == APPROVER_APPROVED or state == STATE_DRAFT:
        raise InvalidTransitionError(state, "edit")

    unknown = sorted(set(fields) - set(EDITABLE_FIELDS))
    if unknown:
        raise ValidationError(f"Field '{unknown[0]}' cannot be edited.", field=unknown[0])

    # a submitted entry keeps the fields submit demanded
    required = _get(entry, "operator_status") == OPERATOR_SUBMITTED

    changes: Dict[str, Any] = {}
    for key in ("customer_name", "mo_number", "atl", "remarks"):
        if key in fields:
            changes[key] = _optional_text(fields[key])
            if required and key in _REQUIRED_ON_SUBMIT and changes[key] is None:
                raise ValidationError(_REQUIRED_ON_SUBMIT[key], field=key)

    if "mo_type" in fields:
        mo_type = _optional_text(fields["mo_type"])
        if required and mo_type is None:
            raise ValidationError(_REQUIRED_ON_SUBMIT["mo_type"], field="mo_type")
        if mo_type is not None and mo_type not in MO_TYPES:
            raise ValidationError(f"MO Type must be one of {', '.join(MO_TYPES)}.", field="mo_type")
        changes["mo_type"] = mo_type

    for key in ("ok_qty", "nok_qty"):
        if key in fields:
            changes[key] = _quantity(fields[key], key)

    downtime = _downtime(fields["downtime"]) if "downtime" in fields else _get(entry, "downtime") or 0
    if "downtime" in fields:
        changes["downtime"] = downtime

    if "downtime" in fields or "downtime_detail" in fields:
        if "downtime_detail" in fields:
            detail = fields["downtime_detail"]
        elif "downtime" in fields and downtime == 0:
            detail = None
        else:
            detail = _get(entry, "downtime_detail")
        resolved = resolve_downtime_detail(downtime, detail)
        if not resolved:
            raise ValidationError("Enter downtime reason.", field="downtime_detail")
        changes["downtime_detail"] = resolved

    if "atl" in changes:
        _check_atl(changes["atl"], atl_roster)

    return changes
