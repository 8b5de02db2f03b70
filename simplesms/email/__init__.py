"""Mail providers used by the email-to-SMS driver."""

from .base import EmailProvider
from .sendgrid import SendGridProvider
from .smtp2go import Smtp2GoProvider

__all__ = ["EmailProvider", "SendGridProvider", "Smtp2GoProvider"]
