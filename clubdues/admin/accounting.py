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

from typing import ClassVar

from django.contrib import admin, messages

from clubdues.accounting.export import LedgerTransactionResource
from clubdues.admin.base import DefModelAdmin, DuesFilter, MemberFilter
from clubdues.models.accounting import FinanceCategory, LedgerTransaction, MonthlyDues


@admin.register(FinanceCategory)
class FinanceCategoryAdmin(DefModelAdmin):
    list_display = ("id", "name", "direction")
    list_filter = ("direction",)
    search_fields = ("name",)


@admin.register(MonthlyDues)
class MonthlyDuesAdmin(DefModelAdmin):
    """Read-only view of the monthly dues records.

    Records change only through the payment and cancellation operations, so
    that their totals keep matching the linked transactions.
    """

    list_display = ("id", "member", "month", "total_paid", "paid_count", "paid", "paid_at")
    list_filter = (MemberFilter, "month", "paid")
    search_fields = ("search",)

    def has_import_permission(self, request):
        return False

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(LedgerTransaction)
class LedgerTransactionAdmin(DefModelAdmin):
    list_display = ("id", "date", "direction", "amount", "category", "dues", "counterparty", "note")
    list_filter = (DuesFilter, "direction", "category")
    search_fields = ("search",)
    autocomplete_fields: ClassVar[list] = ["category", "event"]
    # dues links are set by the payment operations only
    readonly_fields = ("dues", "covered")
    resource_classes: ClassVar[list] = [LedgerTransactionResource]

    def has_import_permission(self, request):
        # manual entries go through record_transaction and its category whitelist
        return False

    def has_change_permission(self, request, obj=None):
        if obj is not None and obj.is_dues_payment():
            return False
        return super().has_change_permission(request, obj)

    def has_delete_permission(self, request, obj=None):
        if obj is not None and obj.is_dues_payment():
            return False
        return super().has_delete_permission(request, obj)

    def delete_queryset(self, request, queryset):
        protected = queryset.filter(dues__isnull=False).count()
        if protected:
            self.message_user(
                request,
                f"{protected} dues transactions skipped, cancel the payment instead",
                level=messages.WARNING,
            )
        queryset.filter(dues__isnull=True).delete()
