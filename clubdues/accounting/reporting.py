# ClubDues - monthly dues and attendance ledger
# Copyright (C) 2025 Scanagatta Mauro
#
# This file is part of ClubDues and is dual-licensed:
#
# 1. Under the terms of the GNU Affero General Public License (AGPL) version 3,
#    as published by the Free Software Foundation. You may use, modify, and
#    distribute this file under those terms.
#
# 2. Under a commercial license, allowing use in closed-source or proprietary
#    environments without the obligations of the AGPL.
#
# If you have obtained this file under the AGPL, and you make it available over
# a network, you must also make the complete source code available under the same license.
#
# For more information or to purchase a commercial license, contact:
# commercial@larpmanager.com
#
# SPDX-License-Identifier: AGPL-3.0-or-later OR Proprietary

"""Read-only aggregation of monthly dues.

Nothing in this module writes to the database: it feeds the unpaid lists,
the check-in screen and the payment reminder messages.
"""

from clubdues.accounting.ledger import DuesLedger
from clubdues.accounting.rates import get_unit_fee, resolve_amount_owed
from clubdues.models.member import BillingModel, Member
from clubdues.utils.common import format_month_label, validate_month

NO_SINGLE_DUES_LINE = "(No unpaid single dues this month)"


def get_monthly_summary(member_id: int, month: str, ledger: DuesLedger | None = None) -> dict:
    """Return owed, paid and outstanding dues of a member for a month.

    Args:
        member_id: Primary key of the member
        month: Month in "YYYY-MM" format
        ledger: Ledger store, a default one is built if omitted

    Returns:
        dict: Amounts in minor currency units, plus the flag counts
        and the state of the dues record

    Raises:
        DuesValidationError: On missing or unknown identifiers
    """
    month = validate_month(month)
    ledger = ledger or DuesLedger()
    member = ledger.get_member(member_id)
    return _summarize(ledger, member, month, ledger.count_qualifying_events(month))


def month_summaries(month: str, ledger: DuesLedger | None = None) -> list[dict]:
    """Return the summary of every member for a month, in member creation order."""
    month = validate_month(month)
    ledger = ledger or DuesLedger()
    scheduled = ledger.count_qualifying_events(month)
    return [_summarize(ledger, member, month, scheduled) for member in Member.objects.order_by("created", "id")]


def unpaid_members(month: str, ledger: DuesLedger | None = None) -> list[dict]:
    """Return the summaries with an outstanding balance."""
    return [summary for summary in month_summaries(month, ledger=ledger) if summary["outstanding"] > 0]


def is_month_paid(member: Member, month: str, ledger: DuesLedger | None = None) -> bool:
    """Tell whether the member has any dues payment recorded for the month."""
    ledger = ledger or DuesLedger()
    record = ledger.get_monthly_record(member, month)
    return bool(record and record.paid)


def fixed_reminder_text(month: str, ledger: DuesLedger | None = None) -> str:
    """Build the reminder sent to fixed members.

    The amount depends only on the qualifying events scheduled in the month,
    so the same message fits every fixed member.
    """
    ledger = ledger or DuesLedger()
    scheduled = ledger.count_qualifying_events(month)
    unit_fee = get_unit_fee(BillingModel.FIXED)
    return (
        f"Please pay the dues for month {format_month_label(month)}\n"
        f"{unit_fee} x {scheduled} events = {unit_fee * scheduled}"
    )


def single_reminder_text(month: str, ledger: DuesLedger | None = None) -> str:
    """Build one reminder line per single member with unpaid events in the month."""
    ledger = ledger or DuesLedger()
    unit_fee = get_unit_fee(BillingModel.SINGLE)

    lines = []
    for member in Member.objects.filter(billing=BillingModel.SINGLE).order_by("created", "id"):
        unpaid = ledger.find_qualifying_attendance(member, month, paid=False).count()
        if unpaid > 0:
            lines.append(f"{member.display_name()}  {unit_fee} x {unpaid} events = {unit_fee * unpaid}")

    if not lines:
        return NO_SINGLE_DUES_LINE
    return "\n".join(lines)


def _summarize(ledger: DuesLedger, member: Member, month: str, scheduled: int) -> dict:
    qualifying_count = ledger.find_qualifying_attendance(member, month).count()
    owed = resolve_amount_owed(member.billing, scheduled, qualifying_count)
    record = ledger.get_monthly_record(member, month)
    paid = record.total_paid if record else 0

    return {
        "member_id": member.id,
        "month": month,
        "billing": member.billing,
        "owed": owed,
        "paid": paid,
        "outstanding": max(owed - paid, 0),
        "qualifying_count": qualifying_count,
        # cancelled registrations keep their flag until the dues are reversed
        "paid_flags": ledger.find_paid_attendance(member, month).count(),
        "state": ledger.dues_state(record, owed).value,
    }
