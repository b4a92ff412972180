"""Delivery module."""

from .chunker import split_into_chunks
from .delivery import ChunkedDelivery, IDelivery
from .transport import ITransport, WhatsAppTransport

__all__ = [
    "split_into_chunks",
    "ChunkedDelivery",
    "IDelivery",
    "ITransport",
    "WhatsAppTransport",
]
