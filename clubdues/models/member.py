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

from django.contrib.auth.models import User
from django.db import models
from django.utils.translation import gettext_lazy as _

from clubdues.models.base import BaseModel


class BillingModel(models.TextChoices):
    FIXED = "f", _("Fixed")
    SINGLE = "s", _("Single")


class Member(BaseModel):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="member", null=True, blank=True)

    search = models.CharField(max_length=200, editable=False)

    name = models.CharField(max_length=100, verbose_name=_("Name"))

    surname = models.CharField(max_length=100, verbose_name=_("Surname"), blank=True)

    nickname = models.CharField(
        max_length=100,
        verbose_name=_("Nickname"),
        help_text=_("Optional - Shown instead of name and surname in payment reminders"),
        blank=True,
    )

    email = models.CharField(max_length=200, blank=True)

    billing = models.CharField(
        max_length=1,
        choices=BillingModel.choices,
        default=BillingModel.SINGLE,
        verbose_name=_("Billing"),
        help_text=_("Fixed members pay a flat monthly due, single members pay for each event attended"),
        db_index=True,
    )

    class Meta:
        ordering = ["created"]

    def __str__(self) -> str:
        return self.display_name()

    def display_name(self) -> str:
        """Return the label used in unpaid lists and reminder messages.

        Falls back from nickname to full name, then to the email address.
        """
        if self.nickname:
            return self.nickname

        full_name = f"{self.name} {self.surname}".strip()
        if full_name:
            return full_name

        return self.email

    def is_fixed(self) -> bool:
        return self.billing == BillingModel.FIXED
