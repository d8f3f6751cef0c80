import pytest
from decimal import Decimal
from apps.catalog.models import ProductStatus
from apps.imports.models import ImportSetting
from apps.imports.services import (
    calculate_import_cost,
    commission_key,
    get_import_settings,
    update_import_settings,
    init_import_settings,
    create_product_from_simulation,
    ImportValidationError,
    UnknownImportSettingError,
)


class TestCommissionBands:

    @pytest.mark.parametrize('price,key', [
        (Decimal('9.99'), 'commission_0_10'),
        (Decimal('10'), 'commission_10_25'),
        (Decimal('99'), 'commission_25_100'),
        (Decimal('150'), 'commission_100_200'),
        (Decimal('200'), 'commission_200_plus'),
    ])
    def test_band_boundaries(self, price, key):
        assert commission_key(price) == key


@pytest.mark.django_db
class TestCalculateImportCost:

    def test_air_france_breakdown(self, rates):
        result = calculate_import_cost(
            mode='air',
            supplier_price=Decimal('50'),
            supplier_currency='EUR',
            weight=Decimal('2'),
            warehouse='france',
        )

        costs = result['costs']
        assert costs['product']['amount'] == Decimal('50')
        assert costs['transport']['amount'] == Decimal('30')
        assert costs['commission']['amount'] == Decimal('19')
        assert costs['processing_fee']['amount'] == Decimal('2')
        assert costs['tax']['amount'] == Decimal('1.75')
        assert result['total'] == Decimal('102.75')
        assert result['total_mga'] == Decimal('513750')
        assert result['transit_time'] == '2-4 weeks'

    def test_supplier_currency_converted_to_warehouse_currency(self, rates):
        result = calculate_import_cost(
            mode='air',
            supplier_price=Decimal('40'),
            supplier_currency='EUR',
            weight=Decimal('1'),
            warehouse='usa',
        )

        assert result['currency'] == 'USD'
        assert result['costs']['product']['amount'] == Decimal('50')
        assert result['costs']['transport']['amount'] == Decimal('43.75')
        assert result['total'] == Decimal('116.50')
        assert result['total_mga'] == Decimal('466000')

    def test_zero_weight_accepted(self, rates):
        result = calculate_import_cost(
            mode='air', supplier_price=5, supplier_currency='EUR', weight=0, warehouse='france'
        )

        assert result['costs']['transport']['amount'] == Decimal('0')

    def test_sea_requires_volume(self, rates):
        with pytest.raises(ImportValidationError):
            calculate_import_cost(
                mode='sea', supplier_price=100, supplier_currency='USD', weight=10, warehouse='china'
            )

    def test_sea_transit_time(self, rates):
        result = calculate_import_cost(
            mode='sea', supplier_price=100, supplier_currency='USD', weight=10,
            warehouse='china', volume=Decimal('0.2'),
        )

        assert result['transit_time'] == '1-3 months'

    def test_warehouse_must_match_mode(self, rates):
        with pytest.raises(ImportValidationError):
            calculate_import_cost(
                mode='sea', supplier_price=100, supplier_currency='USD', weight=1,
                warehouse='usa', volume=1,
            )

    @pytest.mark.parametrize('price', [0, -5])
    def test_price_must_be_positive(self, rates, price):
        with pytest.raises(ImportValidationError):
            calculate_import_cost(
                mode='air', supplier_price=price, supplier_currency='EUR', weight=1, warehouse='france'
            )

    def test_unknown_mode(self, rates):
        with pytest.raises(ImportValidationError):
            calculate_import_cost(
                mode='rail', supplier_price=10, supplier_currency='EUR', weight=1, warehouse='france'
            )


@pytest.mark.django_db
class TestImportSettings:

    def test_zero_value_falls_back_to_default(self):
        ImportSetting.objects.create(key='tax_rate', value=Decimal('0'))

        assert get_import_settings()['tax_rate'] == Decimal('3.5')

    def test_stored_value_used(self, rates):
        update_import_settings(values={'transport_france_rate': Decimal('20')})

        result = calculate_import_cost(
            mode='air', supplier_price=50, supplier_currency='EUR', weight=1, warehouse='france'
        )
        assert result['costs']['transport']['amount'] == Decimal('20')

    def test_unknown_key_rejected(self):
        with pytest.raises(UnknownImportSettingError):
            update_import_settings(values={'magic': 1})

    def test_init_is_idempotent(self):
        assert init_import_settings() == 11
        assert init_import_settings() == 0


@pytest.mark.django_db
class TestCreateProductFromSimulation:

    def test_product_priced_at_total(self, rates):
        product, calculation = create_product_from_simulation(
            name='Casque audio',
            mode='air',
            supplier_price=Decimal('50'),
            supplier_currency='EUR',
            weight=Decimal('2'),
            warehouse='france',
            supplier_url='https://shop.example.com/casque',
        )

        assert product.price == Decimal('513750')
        assert product.is_imported is True
        assert product.import_mode == 'air'
        assert product.supplier_currency == 'EUR'
        assert product.status == ProductStatus.DRAFT
