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

from django.db import models
from django.db.models import Q
from django.db.models.constraints import CheckConstraint, UniqueConstraint
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from safedelete.models import SOFT_DELETE

from clubdues.models.base import BaseModel
from clubdues.models.event import Event
from clubdues.models.member import Member


class TransactionDirection(models.TextChoices):
    INCOME = "i", _("Income")
    EXPENSE = "e", _("Expense")


class FinanceCategory(BaseModel):
    # categories outlive the ledger rows that reference them
    _safedelete_policy = SOFT_DELETE

    name = models.CharField(max_length=100, verbose_name=_("Name"))

    direction = models.CharField(max_length=1, choices=TransactionDirection.choices)

    class Meta:
        constraints = [
            UniqueConstraint(
                fields=["name", "direction", "deleted"],
                name="unique_category_with_optional",
            ),
            UniqueConstraint(
                fields=["name", "direction"],
                condition=Q(deleted=None),
                name="unique_category_without_optional",
            ),
        ]


class MonthlyDues(BaseModel):
    """Aggregated dues paid by a member for one calendar month.

    The row exists only while at least one ledger transaction is linked to
    it: ``total_paid`` is always the sum of the linked transaction amounts
    and ``paid_count`` the number of events those transactions cover.
    """

    # linked transactions are reversed one by one before the record goes
    _safedelete_policy = SOFT_DELETE

    search = models.CharField(max_length=200, editable=False)

    member = models.ForeignKey(Member, on_delete=models.CASCADE, related_name="monthly_dues")

    month = models.CharField(max_length=7, db_index=True, help_text="YYYY-MM")

    total_paid = models.IntegerField(default=0)

    paid_count = models.IntegerField(default=0)

    paid = models.BooleanField(default=False)

    paid_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        constraints = [
            UniqueConstraint(
                fields=["member", "month", "deleted"],
                name="unique_dues_with_optional",
            ),
            UniqueConstraint(
                fields=["member", "month"],
                condition=Q(deleted=None),
                name="unique_dues_without_optional",
            ),
        ]

    def __str__(self) -> str:
        return f"Dues {self.month} - {self.member} - {self.total_paid}"


class LedgerTransaction(BaseModel):
    search = models.CharField(max_length=200, editable=False)

    date = models.DateTimeField(default=timezone.now, db_index=True)

    direction = models.CharField(max_length=1, choices=TransactionDirection.choices, default=TransactionDirection.INCOME)

    amount = models.IntegerField(help_text=_("Amount in minor currency units"))

    category = models.ForeignKey(FinanceCategory, on_delete=models.PROTECT, related_name="transactions")

    dues = models.ForeignKey(
        MonthlyDues,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="transactions",
    )

    event = models.ForeignKey(Event, on_delete=models.SET_NULL, null=True, blank=True, related_name="transactions")

    # number of events covered by a dues posting
    covered = models.IntegerField(default=0)

    counterparty = models.CharField(max_length=200, blank=True)

    note = models.CharField(max_length=500, blank=True)

    class Meta:
        ordering = ["date", "id"]
        constraints = [
            CheckConstraint(condition=Q(amount__gt=0), name="ledger_transaction_positive_amount"),
        ]

    def __str__(self) -> str:
        s = f"Transaction &{self.id}" if self.id else "Transaction"
        s += f" - {self.get_direction_display()} {self.amount}"
        if self.dues_id:
            s += f" - dues {self.dues_id}"
        return s

    def is_dues_payment(self) -> bool:
        return self.dues_id is not None
