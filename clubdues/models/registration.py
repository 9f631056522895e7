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
from django.db.models.constraints import UniqueConstraint
from django.utils.translation import gettext_lazy as _

from clubdues.models.base import BaseModel
from clubdues.models.event import Event
from clubdues.models.member import Member


class RegistrationStatus(models.TextChoices):
    ACTIVE = "a", _("Active")
    CANCELLED = "c", _("Cancelled")


class Registration(BaseModel):
    member = models.ForeignKey(Member, on_delete=models.CASCADE, related_name="registrations")

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="registrations")

    status = models.CharField(
        max_length=1,
        choices=RegistrationStatus.choices,
        default=RegistrationStatus.ACTIVE,
        db_index=True,
    )

    # attendance fee flag, only changed by the payment poster and the reversal engine
    fee_paid = models.BooleanField(default=False, verbose_name=_("Fee paid"))

    class Meta:
        constraints = [
            UniqueConstraint(
                fields=["member", "event", "deleted"],
                name="unique_registration_with_optional",
            ),
            UniqueConstraint(
                fields=["member", "event"],
                condition=Q(deleted=None),
                name="unique_registration_without_optional",
            ),
        ]

    def __str__(self) -> str:
        flag = "paid" if self.fee_paid else "unpaid"
        return f"{self.member} @ {self.event} ({flag})"
