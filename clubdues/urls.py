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

from django.urls import path

from clubdues.views import dues as views_dues

urlpatterns = [
    path(
        "dues/pay/fixed/",
        views_dues.dues_pay_fixed,
        name="dues_pay_fixed",
    ),
    path(
        "dues/pay/single/",
        views_dues.dues_pay_single,
        name="dues_pay_single",
    ),
    path(
        "dues/cancel/fixed/",
        views_dues.dues_cancel_fixed,
        name="dues_cancel_fixed",
    ),
    path(
        "dues/cancel/single/",
        views_dues.dues_cancel_single,
        name="dues_cancel_single",
    ),
    path(
        "dues/summary/",
        views_dues.dues_summary,
        name="dues_summary",
    ),
    path(
        "dues/reminders/",
        views_dues.dues_reminders,
        name="dues_reminders",
    ),
    path(
        "ledger/export/",
        views_dues.ledger_export,
        name="ledger_export",
    ),
    path(
        "ledger/add/",
        views_dues.ledger_add,
        name="ledger_add",
    ),
    path(
        "ledger/delete/<int:num>/",
        views_dues.ledger_delete,
        name="ledger_delete",
    ),
]
