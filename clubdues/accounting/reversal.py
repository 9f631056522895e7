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

from clubdues.accounting.base import reversal_result
from clubdues.accounting.ledger import DuesLedger, LedgerUnitOfWork
from clubdues.utils.common import validate_month
from clubdues.utils.exceptions import DuesValidationError

logger = logging.getLogger(__name__)


def cancel_payment(member_id: int, month: str, ledger: DuesLedger | None = None) -> dict:
    """Cancel dues for a month, dispatching on the billing model of the member.

    Fixed members lose the whole month payment, single members only the
    latest payment action.
    """
    ledger = ledger or DuesLedger()
    member = ledger.get_member(member_id)
    if member.is_fixed():
        return cancel_fixed_payment(member.id, month, ledger=ledger)
    return cancel_last_single_payment(member.id, month, ledger=ledger)


def cancel_fixed_payment(member_id: int, month: str, ledger: DuesLedger | None = None) -> dict:
    """Undo the monthly payment of a fixed member.

    Deletes every transaction linked to the month record, then the record
    itself, and reopens all the qualifying registrations of the member in
    that month. A month that was never paid is left untouched.

    Args:
        member_id: Primary key of a fixed member
        month: Month in "YYYY-MM" format
        ledger: Ledger store, a default one is built if omitted

    Returns:
        dict: ``changed`` False if there was nothing to cancel

    Raises:
        DuesValidationError: On missing identifiers or a non fixed member
        InvariantViolationError: If the record does not reconcile with its transactions
    """
    month = validate_month(month)
    ledger = ledger or DuesLedger()

    with LedgerUnitOfWork() as uow:
        member = ledger.lock_member(member_id)
        if not member.is_fixed():
            raise DuesValidationError(f"Member {member.id} is not billed with the fixed model")

        record = ledger.get_monthly_record(member, month, lock=True)
        if not record or not record.paid:
            logger.debug("No fixed dues to cancel for member %s month %s", member.id, month)
            return reversal_result(changed=False)
        ledger.check_record(record)

        reversed_count = record.paid_count
        reversed_amount = record.total_paid

        # newest first, so every intermediate state still reconciles
        for ledger_transaction in reversed(list(ledger.find_transactions_for(record.id))):
            record = ledger.apply_reversal(record, ledger_transaction)

        reopened = ledger.set_fee_paid(list(ledger.find_paid_attendance(member, month)), paid=False)

        uow.on_commit(
            lambda: logger.info(
                "Cancelled fixed dues for member %s month %s: %s, %s registrations reopened",
                member.id,
                month,
                reversed_amount,
                reopened,
            )
        )
        return reversal_result(
            changed=True,
            reversed_count=reversed_count,
            reversed_amount=reversed_amount,
            new_total=0,
            reopened=reopened,
        )


def cancel_last_single_payment(member_id: int, month: str, ledger: DuesLedger | None = None) -> dict:
    """Undo the most recent payment of a single member for a month.

    Only the latest transaction is reversed. The registrations it covered
    are reopened starting from the latest event date, the inverse of the
    order in which payments flag them, so the paid registrations remain a
    chronological prefix. The month record shrinks accordingly and is
    deleted when its total returns to zero.

    Args:
        member_id: Primary key of a single member
        month: Month in "YYYY-MM" format
        ledger: Ledger store, a default one is built if omitted

    Returns:
        dict: Reversed count and the new monthly total; ``changed``
        False if there was no payment to cancel

    Raises:
        DuesValidationError: On missing identifiers or a non single member
        InvariantViolationError: If the record or the flags do not reconcile
    """
    month = validate_month(month)
    ledger = ledger or DuesLedger()

    with LedgerUnitOfWork() as uow:
        member = ledger.lock_member(member_id)
        if member.is_fixed():
            raise DuesValidationError(f"Member {member.id} is not billed with the single model")

        record = ledger.get_monthly_record(member, month, lock=True)
        if not record:
            logger.debug("No single dues to cancel for member %s month %s", member.id, month)
            return reversal_result(changed=False)
        ledger.check_record(record)
        ledger.check_paid_flags(member, month, record)

        latest = ledger.find_latest_transaction(record.id)
        if not latest:
            logger.debug("Dues record %s has no payment to cancel", record.id)
            return reversal_result(changed=False)

        reversed_count = latest.covered
        record = ledger.apply_reversal(record, latest)

        # latest events first, cancelled registrations included
        paid_registrations = ledger.find_paid_attendance(member, month)
        to_reopen = list(paid_registrations.order_by("-event__start", "-event_id", "-id")[:reversed_count])
        reopened = ledger.set_fee_paid(to_reopen, paid=False)
        ledger.check_paid_flags(member, month, record)

        new_total = record.total_paid if record else 0
        reversed_amount = latest.amount
        uow.on_commit(
            lambda: logger.info(
                "Cancelled single dues for member %s month %s: %s (%s events), total %s",
                member.id,
                month,
                reversed_amount,
                reversed_count,
                new_total,
            )
        )
        return reversal_result(
            changed=True,
            reversed_count=reversed_count,
            reversed_amount=reversed_amount,
            new_total=new_total,
            reopened=reopened,
        )
