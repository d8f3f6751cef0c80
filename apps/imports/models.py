from django.db import models
import uuid


class ImportSetting(models.Model):
    """Tunable parameter of the import-cost calculation (rates, commissions, fees)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    key = models.CharField(max_length=50, unique=True)
    value = models.DecimalField(max_digits=12, decimal_places=4)
    description = models.CharField(max_length=255, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'import_settings'
        ordering = ['key']

    def __str__(self):
        return f"{self.key} = {self.value}"
