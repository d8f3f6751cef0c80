import uuid
import pytest
from decimal import Decimal
from apps.messaging.models import Message, MessageType
from apps.orders.models import OrderStatus
from apps.quotes.models import QuoteStatus
from apps.quotes.services import (
    get_quote,
    request_quote,
    accept_quote,
    reject_quote,
    counter_quote,
    mark_messages_read,
    post_quote_message,
    client_propose_price,
    client_accept_counter,
    convert_quote_to_order,
    QuoteNotFoundError,
    QuoteTargetNotFoundError,
    DuplicateQuoteError,
    InvalidQuoteStateError,
    InvalidQuotePriceError,
)


@pytest.mark.django_db
class TestRequestQuote:

    def test_budget_becomes_proposed_price(self, quote):
        assert quote.status == QuoteStatus.PENDING
        assert quote.proposed_price == Decimal('500000')
        assert quote.item_name == 'Création site vitrine'

    def test_one_pending_quote_per_item(self, quote, user, service):
        with pytest.raises(DuplicateQuoteError):
            request_quote(user=user, service_id=service.id)

    def test_other_user_may_ask(self, quote, other_user, service):
        assert request_quote(user=other_user, service_id=service.id).user == other_user

    def test_unknown_item(self, user):
        with pytest.raises(QuoteTargetNotFoundError):
            request_quote(user=user, product_id=uuid.uuid4())

    def test_needs_exactly_one_target(self, user, service, product):
        with pytest.raises(QuoteTargetNotFoundError):
            request_quote(user=user, service_id=service.id, product_id=product.id)

    def test_negative_budget(self, user, product):
        with pytest.raises(InvalidQuotePriceError):
            request_quote(user=user, product_id=product.id, budget=Decimal('-1'))


@pytest.mark.django_db
class TestBackOfficeActions:

    def test_accept_defaults_to_proposed_price(self, quote, staff_user, user):
        quote = accept_quote(quote_id=quote.id, user=staff_user)

        assert quote.status == QuoteStatus.ACCEPTED
        assert quote.final_price == Decimal('500000')
        assert quote.messages.get().is_system_message
        assert Message.objects.filter(recipient=user, type=MessageType.QUOTE).exists()

    def test_accept_without_any_price(self, user, product, staff_user):
        quote = request_quote(user=user, product_id=product.id)
        with pytest.raises(InvalidQuotePriceError):
            accept_quote(quote_id=quote.id, user=staff_user)

    def test_reject(self, quote, staff_user):
        quote = reject_quote(quote_id=quote.id, user=staff_user, reason='Budget trop bas')
        assert quote.status == QuoteStatus.REJECTED
        assert 'Budget trop bas' in quote.messages.get().message

    def test_cannot_accept_rejected(self, quote, staff_user):
        reject_quote(quote_id=quote.id, user=staff_user)
        with pytest.raises(InvalidQuoteStateError):
            accept_quote(quote_id=quote.id, user=staff_user)

    def test_counter_with_message(self, quote, staff_user):
        quote = counter_quote(
            quote_id=quote.id,
            user=staff_user,
            counter_price=Decimal('750000'),
            message='Il faut compter l\'hébergement',
        )

        assert quote.status == QuoteStatus.NEGOTIATING
        assert quote.proposed_price == Decimal('750000')
        system = quote.messages.get(is_system_message=True)
        personal = quote.messages.get(is_system_message=False)
        assert system.metadata['type'] == 'counter_proposal'
        assert system.metadata['original_price'] == '500000.00'
        assert personal.message == "Il faut compter l'hébergement"

    def test_counter_price_positive(self, quote, staff_user):
        with pytest.raises(InvalidQuotePriceError):
            counter_quote(quote_id=quote.id, user=staff_user, counter_price=Decimal('0'))

    def test_mark_messages_read(self, quote, user, staff_user):
        post_quote_message(quote_id=quote.id, user=user, message='Des nouvelles ?')
        post_quote_message(quote_id=quote.id, user=staff_user, message='Bientôt')

        assert mark_messages_read(quote_id=quote.id, user=staff_user) == 1
        assert mark_messages_read(quote_id=quote.id, user=staff_user) == 0


@pytest.mark.django_db
class TestClientActions:

    def test_only_owner_sees_quote(self, quote, other_user, staff_user):
        with pytest.raises(QuoteNotFoundError):
            get_quote(quote.id, user=other_user)
        assert get_quote(quote.id, user=staff_user) == quote

    def test_empty_message(self, quote, user):
        with pytest.raises(InvalidQuoteStateError):
            post_quote_message(quote_id=quote.id, user=user, message='   ')

    def test_propose_after_rejection_reopens(self, quote, user, staff_user):
        reject_quote(quote_id=quote.id, user=staff_user)
        quote = client_propose_price(quote_id=quote.id, user=user, price=Decimal('600000'))

        assert quote.status == QuoteStatus.PENDING
        assert quote.proposed_price == Decimal('600000')
        assert quote.messages.get(proposed_price__isnull=False).message.startswith('Je propose')

    def test_propose_on_someone_elses_quote(self, quote, other_user):
        with pytest.raises(QuoteNotFoundError):
            client_propose_price(quote_id=quote.id, user=other_user, price=Decimal('1'))

    def test_accept_counter(self, quote, user, staff_user):
        counter_quote(quote_id=quote.id, user=staff_user, counter_price=Decimal('650000'))
        quote = client_accept_counter(quote_id=quote.id, user=user)

        assert quote.status == QuoteStatus.ACCEPTED
        assert quote.final_price == Decimal('650000')

    def test_accept_counter_needs_negotiation(self, quote, user):
        with pytest.raises(InvalidQuoteStateError):
            client_accept_counter(quote_id=quote.id, user=user)


@pytest.mark.django_db
class TestConvertQuote:

    def test_creates_quote_order(self, quote, staff_user):
        accept_quote(quote_id=quote.id, user=staff_user, final_price=Decimal('550000'))
        quote = convert_quote_to_order(quote_id=quote.id, user=staff_user)

        order = quote.order
        assert quote.status == QuoteStatus.CONVERTED
        assert order.status == OrderStatus.QUOTE
        assert order.order_number.startswith('DEV-')
        assert order.total == Decimal('550000')
        assert order.items.get().unit_price == Decimal('550000')

    def test_product_quote_reserves_stock(self, user, product, staff_user):
        quote = request_quote(user=user, product_id=product.id, quantity=2, budget=Decimal('1000000'))
        accept_quote(quote_id=quote.id, user=staff_user)
        quote = convert_quote_to_order(quote_id=quote.id, user=staff_user)

        product.refresh_from_db()
        assert product.stock == 0
        assert quote.order.total == Decimal('2000000')

    def test_only_accepted(self, quote, staff_user):
        with pytest.raises(InvalidQuoteStateError):
            convert_quote_to_order(quote_id=quote.id, user=staff_user)

    def test_converted_quote_is_closed(self, quote, user, staff_user):
        accept_quote(quote_id=quote.id, user=staff_user)
        convert_quote_to_order(quote_id=quote.id, user=staff_user)
        with pytest.raises(InvalidQuoteStateError):
            post_quote_message(quote_id=quote.id, user=user, message='Merci')
