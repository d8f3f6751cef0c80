"""Services for the quote negotiation workflow."""

from .exceptions import (
    QuotesServiceError,
    QuoteNotFoundError,
    QuoteTargetNotFoundError,
    DuplicateQuoteError,
    InvalidQuoteStateError,
    InvalidQuotePriceError,
)
from .quote_workflow import (
    get_quote,
    request_quote,
    accept_quote,
    reject_quote,
    counter_quote,
    mark_messages_read,
    post_quote_message,
    client_propose_price,
    client_accept_counter,
)
from .conversion import convert_quote_to_order

__all__ = [
    # Exceptions
    'QuotesServiceError',
    'QuoteNotFoundError',
    'QuoteTargetNotFoundError',
    'DuplicateQuoteError',
    'InvalidQuoteStateError',
    'InvalidQuotePriceError',
    # Client
    'get_quote',
    'request_quote',
    'post_quote_message',
    'client_propose_price',
    'client_accept_counter',
    # Back office
    'accept_quote',
    'reject_quote',
    'counter_quote',
    'mark_messages_read',
    'convert_quote_to_order',
]
