"""
Package: bus
Description: Message bus publishing for the bridge backend.
"""

from .publisher import EventPublisher

__all__ = ["EventPublisher"]
