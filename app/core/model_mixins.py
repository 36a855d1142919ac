"""
Model mixins providing reusable functionality for Django models.

Available Mixins:
    UUIDPrimaryKeyMixin: Use UUID as primary key

Usage:
    from core.models import BaseModel
    from core.model_mixins import UUIDPrimaryKeyMixin

    class TransferIntent(UUIDPrimaryKeyMixin, BaseModel):
        ...

Note:
    - Always list mixins before BaseModel in inheritance
    - Mixins are abstract and don't create database tables
"""

from __future__ import annotations

import uuid

from django.db import models


class UUIDPrimaryKeyMixin(models.Model):
    """
    Use UUID as primary key instead of auto-increment integer.

    Suits records that are handed to other processes (Celery tasks,
    reconciliation jobs) by id, since the id can travel as a string and
    does not reveal how many records exist.

    Fields:
        id: UUIDField as primary key (auto-generated)

    Note:
        Tables whose enumeration order matters should keep an
        auto-increment key instead; UUIDs carry no insertion order.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for this record",
    )

    class Meta:
        abstract = True
