from rest_framework import serializers
from .models import SiteSetting, SettingType, SettingGroup
from .services import typed_value


class SiteSettingSerializer(serializers.ModelSerializer):
    typed_value = serializers.SerializerMethodField()

    class Meta:
        model = SiteSetting
        fields = ['key', 'value', 'typed_value', 'type', 'group', 'description', 'updated_at']
        read_only_fields = fields

    def get_typed_value(self, obj):
        try:
            value = typed_value(obj)
        except ValueError:
            return None
        if obj.type == SettingType.NUMBER:
            return str(value)
        if obj.type == SettingType.DATE:
            return value.isoformat()
        return value


class SiteSettingWriteSerializer(serializers.Serializer):
    key = serializers.CharField(max_length=100)
    value = serializers.JSONField()
    type = serializers.ChoiceField(choices=SettingType.choices, required=False)
    group = serializers.ChoiceField(choices=SettingGroup.choices, required=False)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True)
