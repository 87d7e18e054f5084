import uuid
from django.db import models
from django.utils.translation import gettext_lazy as _


class Table(models.Model):
    """A physical café table. Customers order against it by scanning its QR code."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    table_number = models.CharField(max_length=20, unique=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Table")
        verbose_name_plural = _("Tables")
        ordering = ["table_number"]

    def __str__(self):
        return f"Table {self.table_number}"
