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

import logging

from clubdues.accounting.base import payment_result
from clubdues.accounting.ledger import DuesLedger, LedgerUnitOfWork
from clubdues.accounting.rates import get_unit_fee, resolve_amount_owed
from clubdues.models.member import BillingModel
from clubdues.utils.common import validate_month
from clubdues.utils.exceptions import DuesValidationError

logger = logging.getLogger(__name__)


def mark_paid(member_id: int, month: str, count: int | None = None, ledger: DuesLedger | None = None) -> dict:
    """Mark dues as paid, dispatching on the billing model of the member.

    Args:
        member_id: Primary key of the member
        month: Month in "YYYY-MM" format
        count: Events to pay for; ignored for fixed members, required for single ones
        ledger: Ledger store, a default one is built if omitted

    Returns:
        dict: What was posted, ``changed`` False if nothing was due

    Raises:
        DuesValidationError: On missing identifiers or an invalid count
    """
    ledger = ledger or DuesLedger()
    member = ledger.get_member(member_id)
    if member.is_fixed():
        return mark_paid_fixed(member.id, month, ledger=ledger)
    return mark_paid_single(member.id, month, count, ledger=ledger)


def mark_paid_fixed(member_id: int, month: str, ledger: DuesLedger | None = None) -> dict:
    """Post the flat monthly due of a fixed member.

    The amount is the fixed unit fee times the qualifying events scheduled in
    the month, regardless of how many the member attended. Posting again for
    a month already covered does not create a second transaction, but still
    flags every qualifying registration of the member as paid. If events were
    added after the month was paid, only the difference is posted.

    Args:
        member_id: Primary key of a fixed member
        month: Month in "YYYY-MM" format
        ledger: Ledger store, a default one is built if omitted

    Returns:
        dict: ``changed`` False when nothing was owed and nothing had to be flagged

    Raises:
        DuesValidationError: On missing identifiers or a non fixed member
        InvariantViolationError: If the existing record does not reconcile
    """
    month = validate_month(month)
    ledger = ledger or DuesLedger()

    with LedgerUnitOfWork() as uow:
        member = ledger.lock_member(member_id)
        if not member.is_fixed():
            raise DuesValidationError(f"Member {member.id} is not billed with the fixed model")

        event_count = ledger.count_qualifying_events(month)
        owed = resolve_amount_owed(BillingModel.FIXED, event_count, 0)
        if owed <= 0:
            logger.debug("No qualifying events in %s, nothing to pay for member %s", month, member.id)
            return payment_result(changed=False)

        record = ledger.get_monthly_record(member, month, lock=True)
        if record:
            ledger.check_record(record)

        already_paid = record.total_paid if record else 0
        duplicate = bool(record) and (
            ledger.find_transactions_for(record.id)
            .filter(amount=owed, category=ledger.categories.dues_category())
            .exists()
        )

        ledger_transaction = None
        if duplicate or already_paid >= owed:
            logger.debug("Dues %s already posted for member %s, skipping transaction", month, member.id)
        else:
            covered = max(event_count - (record.paid_count if record else 0), 0)
            record = record or ledger.get_or_create_monthly_record(member, month)
            ledger_transaction = ledger.apply_posting(
                record,
                owed - already_paid,
                covered,
                counterparty=member.display_name(),
                note=f"Fixed dues {month} - {event_count} events",
            )

        unpaid = list(ledger.find_qualifying_attendance(member, month, paid=False))
        flagged = ledger.set_fee_paid(unpaid, paid=True)

        if ledger_transaction is None:
            return payment_result(changed=flagged > 0, new_total=record.total_paid)

        posted_amount = ledger_transaction.amount
        uow.on_commit(
            lambda: logger.info(
                "Posted fixed dues for member %s month %s: %s (%s events, %s registrations)",
                member.id,
                month,
                posted_amount,
                event_count,
                flagged,
            )
        )
        return payment_result(
            changed=True,
            posted_count=ledger_transaction.covered,
            posted_amount=posted_amount,
            new_total=record.total_paid,
            transaction_id=ledger_transaction.id,
        )


def mark_paid_single(
    member_id: int, month: str, requested_count: int | None, ledger: DuesLedger | None = None
) -> dict:
    """Post a payment for some of the qualifying events of a single member.

    The requested count is clamped to the active registrations not yet paid
    this month. The earliest unpaid registrations by event date are flagged
    as paid, so the paid active registrations form a chronological prefix.

    Args:
        member_id: Primary key of a single member
        month: Month in "YYYY-MM" format
        requested_count: Number of additional events to pay for
        ledger: Ledger store, a default one is built if omitted

    Returns:
        dict: Posted count and the new monthly total; ``changed`` False
        when the clamped count is zero

    Raises:
        DuesValidationError: On missing identifiers, an invalid count or a non single member
        InvariantViolationError: If the existing record or flags do not reconcile
    """
    month = validate_month(month)
    count = _validate_count(requested_count)
    ledger = ledger or DuesLedger()

    with LedgerUnitOfWork() as uow:
        member = ledger.lock_member(member_id)
        if member.is_fixed():
            raise DuesValidationError(f"Member {member.id} is not billed with the single model")

        record = ledger.get_monthly_record(member, month, lock=True)
        if record:
            ledger.check_record(record)
        ledger.check_paid_flags(member, month, record)

        # only active registrations can be paid for
        unpaid = ledger.find_qualifying_attendance(member, month, paid=False).count()
        clamped = min(count, unpaid)
        if clamped <= 0:
            logger.debug("Nothing left to pay for member %s month %s", member.id, month)
            return payment_result(changed=False, new_total=record.total_paid if record else 0)

        amount = get_unit_fee(BillingModel.SINGLE) * clamped
        record = record or ledger.get_or_create_monthly_record(member, month)
        ledger_transaction = ledger.apply_posting(
            record,
            amount,
            clamped,
            counterparty=member.display_name(),
            note=f"Single dues {month} - {clamped} events",
        )

        # earliest events first
        to_flag = list(ledger.find_qualifying_attendance(member, month, paid=False)[:clamped])
        ledger.set_fee_paid(to_flag, paid=True)
        ledger.check_paid_flags(member, month, record)

        new_total = record.total_paid
        uow.on_commit(
            lambda: logger.info(
                "Posted single dues for member %s month %s: %s (%s of %s requested), total %s",
                member.id,
                month,
                amount,
                clamped,
                count,
                new_total,
            )
        )
        return payment_result(
            changed=True,
            posted_count=clamped,
            posted_amount=amount,
            new_total=new_total,
            transaction_id=ledger_transaction.id,
        )


def _validate_count(requested_count) -> int:
    """Parse the number of events to pay for.

    Raises:
        DuesValidationError: If the count is missing, not an integer or negative
    """
    if requested_count is None or requested_count == "":
        raise DuesValidationError("Count is required")
    if isinstance(requested_count, bool):
        raise DuesValidationError("Count must be an integer")
    try:
        count = int(requested_count)
    except (TypeError, ValueError) as err:
        raise DuesValidationError(f"Invalid count '{requested_count}'") from err
    if isinstance(requested_count, float) and count != requested_count:
        raise DuesValidationError(f"Invalid count '{requested_count}'")
    if count < 0:
        raise DuesValidationError("Count cannot be negative")
    return count
