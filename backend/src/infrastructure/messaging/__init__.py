"""AMQP messaging adapters built on kombu"""

from .broker_connection import BrokerConnection, MessagingError
from .consumer import KombuMessageConsumer, outcome_for_error
from .publisher import KombuMessagePublisher

__all__ = [
    "BrokerConnection",
    "MessagingError",
    "KombuMessageConsumer",
    "KombuMessagePublisher",
    "outcome_for_error",
]
