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
from collections.abc import Callable
from enum import Enum
from typing import Any

from django.conf import settings as conf_settings
from django.db import transaction
from django.db.models import Count, QuerySet, Sum
from django.utils import timezone

from clubdues.accounting.rates import get_qualifying_event_types
from clubdues.models.accounting import FinanceCategory, LedgerTransaction, MonthlyDues, TransactionDirection
from clubdues.models.event import Event
from clubdues.models.member import Member
from clubdues.models.registration import Registration, RegistrationStatus
from clubdues.utils.common import get_month_range, validate_month
from clubdues.utils.exceptions import DuesValidationError, InvariantViolationError, LedgerProtectedError

logger = logging.getLogger(__name__)

DEFAULT_DUES_CATEGORY = "Membership dues"


class DuesState(Enum):
    """Lifecycle of the dues record of one member for one month."""

    NO_RECORD = "no_record"
    PARTIALLY_PAID = "partially_paid"
    FULLY_RECONCILED = "fully_reconciled"


class LedgerUnitOfWork:
    """Single database transaction wrapping a multi-step ledger mutation.

    Entering the context opens an atomic block. Leaving it normally commits,
    leaving it with an exception rolls back; ``rollback()`` marks the block
    for rollback without raising. Nested units of work become savepoints,
    as with ``transaction.atomic``.

    Example:
        with LedgerUnitOfWork() as uow:
            ledger.apply_posting(...)
            uow.on_commit(lambda: logger.info("posted"))
    """

    def __init__(self, using: str | None = None) -> None:
        self.using = using
        self.rolled_back = False
        self._atomic = None

    def __enter__(self) -> "LedgerUnitOfWork":
        self._atomic = transaction.atomic(using=self.using)
        self._atomic.__enter__()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        if exc_type is None and self.rolled_back:
            transaction.set_rollback(True, using=self.using)
        self._atomic.__exit__(exc_type, exc_value, traceback)

    def rollback(self) -> None:
        """Discard every change made inside this unit of work on exit."""
        transaction.set_rollback(True, using=self.using)
        self.rolled_back = True

    def on_commit(self, callback: Callable[[], Any]) -> None:
        """Run callback only once the outermost transaction has committed."""
        transaction.on_commit(callback, using=self.using)


class CategoryRepository:
    """Lookup of finance categories used by the ledger.

    Category management happens elsewhere; the ledger only needs to find
    the dues income category (created on first use) and to validate the
    categories of manual entries against the configured whitelists.
    """

    def get(self, name: str, direction: str) -> FinanceCategory | None:
        return FinanceCategory.objects.filter(name=name, direction=direction).first()

    def dues_category(self) -> FinanceCategory:
        name = getattr(conf_settings, "DUES_INCOME_CATEGORY", DEFAULT_DUES_CATEGORY)
        category, _created = FinanceCategory.objects.get_or_create(name=name, direction=TransactionDirection.INCOME)
        return category

    def allowed_names(self, direction: str) -> list[str]:
        if direction == TransactionDirection.INCOME:
            return list(getattr(conf_settings, "LEDGER_INCOME_CATEGORIES", []))
        return list(getattr(conf_settings, "LEDGER_EXPENSE_CATEGORIES", []))


class DuesLedger:
    """Store of attendance fee flags, monthly dues records and ledger transactions.

    All the mutating helpers expect to run inside a ``LedgerUnitOfWork``; the
    callers in ``payment`` and ``reversal`` take care of that. Reads go through
    the default soft-delete aware managers, so reversed transactions and
    removed dues records are never counted.
    """

    def __init__(self, categories: CategoryRepository | None = None) -> None:
        self.categories = categories or CategoryRepository()

    # Reads

    def get_member(self, member_id: int | None) -> Member:
        """Fetch the member without locking it.

        Raises:
            DuesValidationError: If the identifier is missing or unknown
        """
        return self._fetch_member(Member.objects.all(), member_id)

    def lock_member(self, member_id: int | None) -> Member:
        """Fetch the member with a row lock, serializing operations on its dues."""
        return self._fetch_member(Member.objects.select_for_update(), member_id)

    def _fetch_member(self, queryset: QuerySet, member_id: int | None) -> Member:
        if not member_id:
            raise DuesValidationError("Member is required")
        try:
            return queryset.get(pk=member_id)
        except (Member.DoesNotExist, ValueError, TypeError) as err:
            raise DuesValidationError(f"Member {member_id} not found") from err

    def get_monthly_record(self, member: Member, month: str, *, lock: bool = False) -> MonthlyDues | None:
        queryset = MonthlyDues.objects.filter(member=member, month=validate_month(month))
        if lock:
            queryset = queryset.select_for_update()
        return queryset.first()

    def get_or_create_monthly_record(self, member: Member, month: str) -> MonthlyDues:
        """Return the locked dues record for the month, creating an empty one if needed."""
        record, created = MonthlyDues.objects.select_for_update().get_or_create(
            member=member,
            month=validate_month(month),
            defaults={"total_paid": 0, "paid_count": 0, "paid": False},
        )
        if created:
            logger.debug("Created dues record %s for member %s month %s", record.id, member.id, month)
        return record

    def find_transactions_for(self, monthly_record_id: int) -> QuerySet:
        return LedgerTransaction.objects.filter(dues_id=monthly_record_id).order_by("created", "id")

    def find_latest_transaction(self, monthly_record_id: int) -> LedgerTransaction | None:
        return LedgerTransaction.objects.filter(dues_id=monthly_record_id).order_by("-created", "-id").first()

    def find_qualifying_attendance(self, member: Member, month: str, paid: bool | None = None) -> QuerySet:
        """Return the active qualifying registrations of a member in a month.

        Args:
            member: Member whose registrations are searched
            month: Month in "YYYY-MM" format
            paid: If given, restrict to registrations whose fee flag matches

        Returns:
            QuerySet: Registrations ordered by event date, earliest first
        """
        start, end = get_month_range(month)
        queryset = Registration.objects.filter(
            member=member,
            status=RegistrationStatus.ACTIVE,
            event__typ__in=get_qualifying_event_types(),
            event__start__gte=start,
            event__start__lt=end,
        )
        if paid is not None:
            queryset = queryset.filter(fee_paid=paid)
        return queryset.order_by("event__start", "event_id", "id")

    def find_paid_attendance(self, member: Member, month: str) -> QuerySet:
        """Return the qualifying registrations of a member whose fee is paid in a month.

        Unlike ``find_qualifying_attendance`` the registration status is
        ignored: a registration cancelled after payment keeps its flag until
        the dues covering it are reversed.

        Returns:
            QuerySet: Registrations ordered by event date, earliest first
        """
        start, end = get_month_range(month)
        return Registration.objects.filter(
            member=member,
            fee_paid=True,
            event__typ__in=get_qualifying_event_types(),
            event__start__gte=start,
            event__start__lt=end,
        ).order_by("event__start", "event_id", "id")

    def count_qualifying_events(self, month: str) -> int:
        start, end = get_month_range(month)
        return Event.objects.filter(typ__in=get_qualifying_event_types(), start__gte=start, start__lt=end).count()

    def dues_state(self, record: MonthlyDues | None, owed: int) -> DuesState:
        if record is None:
            return DuesState.NO_RECORD
        if record.total_paid < owed:
            return DuesState.PARTIALLY_PAID
        return DuesState.FULLY_RECONCILED

    # Invariants

    def check_record(self, record: MonthlyDues) -> None:
        """Verify that a dues record reconciles with its linked transactions.

        Raises:
            InvariantViolationError: If the record is paid without transactions,
                or its total or paid count differ from the transaction sums
        """
        sums = self.find_transactions_for(record.id).aggregate(
            total=Sum("amount"), covered=Sum("covered"), number=Count("id")
        )
        total = sums["total"] or 0
        covered = sums["covered"] or 0

        if record.paid and not sums["number"]:
            self._violation(record, "marked paid but has no linked transactions")
        if not record.paid and sums["number"]:
            self._violation(record, f"marked unpaid but has {sums['number']} linked transactions")
        if total != record.total_paid:
            self._violation(record, f"total {record.total_paid} differs from transactions sum {total}")
        if covered != record.paid_count:
            self._violation(record, f"paid count {record.paid_count} differs from covered events {covered}")

    def check_paid_flags(self, member: Member, month: str, record: MonthlyDues | None) -> None:
        """Verify that the paid attendance flags of a single member match its dues.

        Fixed members pay for the scheduled events rather than their own
        registrations, so only single members are checked. Paid registrations
        count whatever their status, since cancelling one does not refund it.

        Raises:
            InvariantViolationError: If the number of paid flags differs from the paid count
        """
        if member.is_fixed():
            return

        expected = record.paid_count if record else 0
        flagged = self.find_paid_attendance(member, month).count()
        if flagged != expected:
            detail = f"member {member.id} month {month} has {flagged} paid flags for {expected} paid events"
            self._violation(record, detail)

    def _violation(self, record: MonthlyDues | None, detail: str) -> None:
        record_id = record.id if record else None
        state = record.as_dict() if record else {}
        logger.critical("Dues invariant violation on record %s: %s %s", record_id, detail, state)
        raise InvariantViolationError(record_id, detail)

    # Mutations

    def apply_posting(
        self,
        record: MonthlyDues,
        amount: int,
        covered: int,
        counterparty: str = "",
        note: str = "",
    ) -> LedgerTransaction:
        """Post a dues payment and fold it into the monthly record.

        Moves the record from NO_RECORD or PARTIALLY_PAID towards
        FULLY_RECONCILED by adding the amount and the covered events.
        """
        now = timezone.now()
        ledger_transaction = LedgerTransaction.objects.create(
            date=now,
            direction=TransactionDirection.INCOME,
            amount=amount,
            category=self.categories.dues_category(),
            dues=record,
            covered=covered,
            counterparty=counterparty,
            note=note,
        )

        record.total_paid += amount
        record.paid_count += covered
        record.paid = True
        record.paid_at = now
        record.save()

        self.check_record(record)
        return ledger_transaction

    def apply_reversal(self, record: MonthlyDues, ledger_transaction: LedgerTransaction) -> MonthlyDues | None:
        """Remove a dues payment and shrink or delete the monthly record.

        Returns:
            MonthlyDues | None: The updated record, or None once it has been
            deleted because nothing is left to account for
        """
        if ledger_transaction.dues_id != record.id:
            self._violation(record, f"transaction {ledger_transaction.id} is not linked to this record")

        ledger_transaction.delete()

        new_total = record.total_paid - ledger_transaction.amount
        if new_total < 0:
            self._violation(record, f"reversal of {ledger_transaction.amount} leaves a negative total {new_total}")

        if new_total == 0:
            remaining = self.find_transactions_for(record.id).count()
            if remaining:
                self._violation(record, f"total is zero but {remaining} transactions are still linked")
            record.delete()
            return None

        record.total_paid = new_total
        record.paid_count -= ledger_transaction.covered
        record.paid = self.find_transactions_for(record.id).exists()
        if not record.paid:
            record.paid_at = None
        record.save()

        self.check_record(record)
        return record

    def set_fee_paid(self, registrations: list[Registration], *, paid: bool) -> int:
        """Flip the attendance fee flag of the given registrations.

        Returns:
            int: Number of registrations updated
        """
        ids = [registration.id for registration in registrations]
        if not ids:
            return 0
        return Registration.objects.filter(id__in=ids).update(fee_paid=paid, updated=timezone.now())


def record_transaction(
    direction: str,
    amount: int,
    category_name: str,
    counterparty: str = "",
    note: str = "",
    date=None,
    event: Event | None = None,
    categories: CategoryRepository | None = None,
) -> LedgerTransaction:
    """Create a manual income or expense entry not linked to any dues record.

    Only the configured categories are accepted, and the category must
    already exist: manual entries never create categories.

    Raises:
        DuesValidationError: On a missing amount, an unknown direction or a
            category outside the whitelist
    """
    categories = categories or CategoryRepository()

    if direction not in TransactionDirection.values:
        raise DuesValidationError(f"Unknown direction '{direction}'")
    if not isinstance(amount, int) or isinstance(amount, bool) or amount <= 0:
        raise DuesValidationError("Amount must be a positive integer")
    if category_name not in categories.allowed_names(direction):
        raise DuesValidationError(f"Category '{category_name}' not allowed")

    category = categories.get(category_name, direction)
    if not category:
        raise DuesValidationError(f"Category '{category_name}' does not exist")

    ledger_transaction = LedgerTransaction.objects.create(
        date=date or timezone.now(),
        direction=direction,
        amount=amount,
        category=category,
        event=event,
        counterparty=counterparty,
        note=note,
    )
    logger.info("Recorded manual transaction %s: %s %s", ledger_transaction.id, direction, amount)
    return ledger_transaction


def delete_transaction(transaction_id: int) -> bool:
    """Delete a manual ledger entry.

    Returns:
        bool: False if the transaction does not exist

    Raises:
        LedgerProtectedError: If the transaction backs a monthly dues record;
            those are removed only by cancelling the payment
    """
    ledger_transaction = LedgerTransaction.objects.filter(pk=transaction_id).first()
    if not ledger_transaction:
        return False

    if ledger_transaction.is_dues_payment():
        msg = f"Transaction {transaction_id} belongs to dues record {ledger_transaction.dues_id}"
        raise LedgerProtectedError(msg)

    ledger_transaction.delete()
    logger.info("Deleted manual transaction %s", transaction_id)
    return True
