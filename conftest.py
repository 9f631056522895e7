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
import os

import pytest
from django.contrib.auth.models import Permission, User
from django.core.cache import cache

from clubdues.models.accounting import FinanceCategory, TransactionDirection

logging.getLogger("django.db.backends").setLevel(logging.ERROR)


@pytest.fixture(autouse=True, scope="session")
def _env_for_tests():
    os.environ.setdefault("PYTHONHASHSEED", "0")
    os.environ.setdefault("DJANGO_ALLOW_ASYNC_UNSAFE", "true")


@pytest.fixture(autouse=True)
def _cache_isolation(settings):
    settings.CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
            "LOCATION": "unique-for-pytest",
        }
    }
    cache.clear()


@pytest.fixture(autouse=True)
def _dues_rates(settings):
    settings.DUES_FIXED_UNIT_FEE = 180
    settings.DUES_SINGLE_UNIT_FEE = 220
    settings.DUES_QUALIFYING_EVENT_TYPES = ["g", "c", "j"]


@pytest.fixture
def ledger_categories(db):
    """Create the categories accepted for manual ledger entries."""
    categories = {}
    for name in ["Meeting income", "Guest income", "Sponsorship", "Other"]:
        categories[(name, TransactionDirection.INCOME)] = FinanceCategory.objects.create(
            name=name, direction=TransactionDirection.INCOME
        )
    for name in ["Event expense", "Venue expense", "Other"]:
        categories[(name, TransactionDirection.EXPENSE)] = FinanceCategory.objects.create(
            name=name, direction=TransactionDirection.EXPENSE
        )
    return categories


@pytest.fixture
def treasurer(db):
    """User allowed to operate on the dues ledger."""
    user = User.objects.create_user(username="treasurer", email="treasurer@example.com", password="treasurer")
    user.user_permissions.add(Permission.objects.get(codename="change_monthlydues", content_type__app_label="clubdues"))
    return user


@pytest.fixture
def treasurer_client(client, treasurer):
    client.force_login(treasurer)
    return client
