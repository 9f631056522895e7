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

from django.contrib import admin

from clubdues.admin.base import DefModelAdmin, EventFilter, MemberFilter
from clubdues.models.event import Event
from clubdues.models.member import Member
from clubdues.models.registration import Registration


@admin.register(Member)
class MemberAdmin(DefModelAdmin):
    """Admin interface for Member model."""

    search_fields = ("search", "name", "surname", "nickname", "email")
    list_display = ("id", "name", "surname", "nickname", "billing", "created")
    list_filter = ("billing",)
    autocomplete_fields: ClassVar[list] = ["user"]


@admin.register(Event)
class EventAdmin(DefModelAdmin):
    list_display = ("id", "name", "typ", "start", "location")
    list_filter = ("typ",)
    search_fields = ("name",)
    ordering: ClassVar[list] = ["-start"]


@admin.register(Registration)
class RegistrationAdmin(DefModelAdmin):
    list_display = ("id", "member", "event", "status", "fee_paid", "created")
    list_filter = (MemberFilter, EventFilter, "status", "fee_paid")
    autocomplete_fields: ClassVar[list] = ["member", "event"]
    # the fee flag follows the dues ledger, change it by paying or cancelling dues
    readonly_fields = ("fee_paid",)
