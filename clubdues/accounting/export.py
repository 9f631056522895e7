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

from import_export import fields, resources

from clubdues.models.accounting import LedgerTransaction
from clubdues.utils.common import get_month_range


class LedgerTransactionResource(resources.ModelResource):
    """Import/export resource for the monthly ledger listing."""

    direction = fields.Field(column_name="direction")

    category = fields.Field(attribute="category__name", column_name="category")

    class Meta:
        model = LedgerTransaction
        fields = ("date", "direction", "amount", "category", "counterparty", "note")
        export_order = ("date", "direction", "amount", "category", "counterparty", "note")

    def before_import_row(self, row, **kwargs):
        """Refuse rows that would link a transaction to monthly dues.

        Raises:
            ValueError: If the row sets the dues record or the covered events
        """
        for column in ("dues", "covered"):
            if row.get(column):
                raise ValueError(f"Column {column} cannot be imported, dues are posted by the payment operations")

    def dehydrate_date(self, ledger_transaction: LedgerTransaction) -> str:
        return ledger_transaction.date.strftime("%Y-%m-%d")

    def dehydrate_direction(self, ledger_transaction: LedgerTransaction) -> str:
        return ledger_transaction.get_direction_display()


def get_month_transactions(month: str, direction: str | None = None):
    """Return the live ledger transactions dated within a month, oldest first."""
    start, end = get_month_range(month)
    queryset = LedgerTransaction.objects.filter(date__gte=start, date__lt=end).select_related("category")
    if direction:
        queryset = queryset.filter(direction=direction)
    return queryset.order_by("date", "id")


def export_ledger_csv(month: str, direction: str | None = None) -> str:
    """Export the ledger of a month as CSV text.

    Args:
        month: Month in "YYYY-MM" format
        direction: Optional TransactionDirection filter

    Returns:
        str: CSV with a header row and one row per transaction
    """
    dataset = LedgerTransactionResource().export(get_month_transactions(month, direction))
    return dataset.csv
