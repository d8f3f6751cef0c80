from django.db import models
import uuid


class SettingType(models.TextChoices):
    STRING = 'STRING', 'String'
    NUMBER = 'NUMBER', 'Number'
    BOOLEAN = 'BOOLEAN', 'Boolean'
    JSON = 'JSON', 'JSON'
    DATE = 'DATE', 'Date'


class SettingGroup(models.TextChoices):
    GENERAL = 'general', 'General'
    CONTACT = 'contact', 'Contact'
    APPEARANCE = 'appearance', 'Appearance'
    SYSTEM = 'system', 'System'
    PAYMENT = 'payment', 'Payment'


# Groups never exposed on the public endpoint
PRIVATE_GROUPS = {SettingGroup.SYSTEM, SettingGroup.PAYMENT}


class SiteSetting(models.Model):
    """Key/value site configuration stored as text and read back with its type."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    key = models.CharField(max_length=100, unique=True)
    value = models.TextField(blank=True)
    type = models.CharField(max_length=10, choices=SettingType.choices, default=SettingType.STRING)
    group = models.CharField(max_length=20, choices=SettingGroup.choices, default=SettingGroup.GENERAL)
    description = models.CharField(max_length=255, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'site_settings'
        ordering = ['group', 'key']

    def __str__(self):
        return self.key
