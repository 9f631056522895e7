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

from django.db.models.signals import post_save, pre_save
from django.dispatch import receiver

from clubdues.models.accounting import LedgerTransaction, MonthlyDues
from clubdues.models.member import Member
from clubdues.models.registration import Registration, RegistrationStatus

log = logging.getLogger(__name__)


# Member signals
@receiver(pre_save, sender=Member)
def pre_save_member(sender, instance, **kwargs):
    instance.search = " ".join(filter(None, [instance.name, instance.surname, instance.nickname, instance.email]))


# MonthlyDues signals
@receiver(pre_save, sender=MonthlyDues)
def pre_save_monthly_dues(sender, instance, **kwargs):
    instance.search = f"{instance.month} {instance.member}"


# LedgerTransaction signals
@receiver(pre_save, sender=LedgerTransaction)
def pre_save_ledger_transaction(sender, instance, **kwargs):
    instance.search = " ".join(filter(None, [instance.counterparty, instance.note]))[:200]


# Registration signals
@receiver(post_save, sender=Registration)
def post_save_registration(sender, instance, created, **kwargs):
    # cancelling a registration does not refund its fee, the dues must be cancelled explicitly
    if instance.status == RegistrationStatus.CANCELLED and instance.fee_paid:
        log.warning("Registration %s cancelled with its fee still paid", instance.id)
