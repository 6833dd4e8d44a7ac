"""
Infrastructure layer - external system integrations.
Keeps business logic clean from vendor details.
"""

from .http_client import get_http_client, close_http_client
from .mailer import Mailer, SmtpConfig, SmtpMailer
from .payment_gateway import PaymentGateway, StripeGateway
from .sheets_client import SheetsClient

__all__ = [
    'get_http_client', 'close_http_client',
    'SheetsClient',
    'PaymentGateway', 'StripeGateway',
    'Mailer', 'SmtpConfig', 'SmtpMailer',
]
