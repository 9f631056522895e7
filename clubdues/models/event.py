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
from django.utils.translation import gettext_lazy as _

from clubdues.models.base import BaseModel


class EventType(models.TextChoices):
    GENERAL = "g", _("General meeting")
    CLOSED = "c", _("Closed meeting")
    JOINT = "j", _("Joint meeting")
    BOD = "b", _("Board meeting")
    DINNER = "d", _("Dinner")
    SOFT = "s", _("Soft activity")


class Event(BaseModel):
    name = models.CharField(max_length=150, verbose_name=_("Name"))

    typ = models.CharField(
        max_length=1,
        choices=EventType.choices,
        default=EventType.GENERAL,
        verbose_name=_("Type"),
        db_index=True,
    )

    start = models.DateTimeField(verbose_name=_("Start"), db_index=True)

    location = models.CharField(max_length=300, blank=True, verbose_name=_("Location"))

    class Meta:
        ordering = ["start"]

    def __str__(self) -> str:
        return f"{self.name} ({self.start:%Y-%m-%d})"
