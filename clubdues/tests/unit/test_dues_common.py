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

"""Tests for month helpers"""

from datetime import datetime

import pytest

from clubdues.utils.common import current_month, format_month_label, get_month_range, validate_month
from clubdues.utils.exceptions import DuesValidationError


class TestValidateMonth:
    def test_valid_month(self):
        assert validate_month("2025-03") == "2025-03"
        assert validate_month(" 2025-12 ") == "2025-12"

    @pytest.mark.parametrize("month", [None, ""])
    def test_missing_month(self, month):
        with pytest.raises(DuesValidationError, match="Month is required"):
            validate_month(month)

    @pytest.mark.parametrize("month", ["2025-13", "2025-00", "2025-3", "25-03", "2025/03", "march"])
    def test_malformed_month(self, month):
        with pytest.raises(DuesValidationError, match="Invalid month"):
            validate_month(month)


class TestMonthRange:
    def test_range_is_half_open(self):
        start, end = get_month_range("2025-03")

        assert start == datetime(2025, 3, 1)
        assert end == datetime(2025, 4, 1)

    def test_december_rolls_over(self):
        start, end = get_month_range("2024-12")

        assert start == datetime(2024, 12, 1)
        assert end == datetime(2025, 1, 1)


def test_format_month_label():
    assert format_month_label("2025-03") == "03"


def test_current_month_is_valid():
    assert validate_month(current_month()) == current_month()
