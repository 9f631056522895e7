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

from itertools import chain
from typing import ClassVar

from django.db import models
from django.utils import timezone
from safedelete.models import SOFT_DELETE_CASCADE, SafeDeleteModel


class BaseModel(SafeDeleteModel):
    """Represents BaseModel model."""

    created = models.DateTimeField(default=timezone.now, editable=False)

    updated = models.DateTimeField(auto_now=True)

    _safedelete_policy = SOFT_DELETE_CASCADE

    class Meta:
        abstract = True
        ordering: ClassVar[list] = ["-updated"]

    def __str__(self) -> str:
        """Return string representation of the model.

        Returns string representation based on model attributes in order of preference:
        1. 'name' attribute if present
        2. 'search' attribute if present and truthy
        3. Parent class string representation as fallback

        Returns:
            str: Model name, search field, or default string representation.

        """
        if hasattr(self, "name"):
            return self.name

        if hasattr(self, "search") and self.search:
            return self.search

        return super().__str__()

    def as_dict(self) -> dict[str, any]:
        """Convert model instance to dictionary representation.

        Only fields with a truthy value are included, so the resulting dict
        is compact enough to be logged alongside ledger operations.

        Returns:
            A dictionary with field names as keys and field values as data.
        """
        # noinspection PyUnresolvedReferences
        model_options = self._meta
        serialized_data = {}

        for field in chain(model_options.concrete_fields, model_options.private_fields):
            field_value = field.value_from_object(self)
            if field_value:
                serialized_data[field.name] = field_value

        return serialized_data
