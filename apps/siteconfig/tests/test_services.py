import pytest
from datetime import date
from decimal import Decimal
from apps.siteconfig.models import SiteSetting, SettingType
from apps.siteconfig.services import get_setting, set_setting, InvalidSettingValueError


@pytest.mark.django_db
class TestSettingsStore:

    def test_missing_key_returns_default(self):
        assert get_setting('nope', 'fallback') == 'fallback'

    def test_number_round_trip(self):
        set_setting(key='free_shipping_threshold', value=150000, type=SettingType.NUMBER)

        assert get_setting('free_shipping_threshold') == Decimal('150000')

    def test_boolean_from_string(self):
        set_setting(key='maintenance', value='yes', type=SettingType.BOOLEAN)

        assert get_setting('maintenance') is True

    def test_json_value(self):
        set_setting(key='social', value={'facebook': 'boutique'}, type=SettingType.JSON)

        assert get_setting('social') == {'facebook': 'boutique'}

    def test_date_value(self):
        set_setting(key='launch', value=date(2025, 1, 15), type=SettingType.DATE)

        assert get_setting('launch') == date(2025, 1, 15)

    def test_update_keeps_type(self):
        set_setting(key='max_items', value=3, type=SettingType.NUMBER)
        set_setting(key='max_items', value=5)

        setting = SiteSetting.objects.get(key='max_items')
        assert setting.type == SettingType.NUMBER
        assert get_setting('max_items') == Decimal('5')

    def test_invalid_number_rejected(self):
        with pytest.raises(InvalidSettingValueError):
            set_setting(key='bad', value='abc', type=SettingType.NUMBER)

    def test_corrupt_value_falls_back_to_default(self):
        SiteSetting.objects.create(key='broken', value='not-a-number', type=SettingType.NUMBER)

        assert get_setting('broken', 7) == 7
