"""
Package: delivery
Description: Delayed, fire-and-forget delivery of notification events.

Provides the DeliveryOrchestrator business flow, the background
DeliveryScheduler it runs on, and ready-made event presets.
"""

from .orchestrator import MAX_DELAY_MS, DeliveryOrchestrator, parse_delay
from .scheduler import DeliveryScheduler

__all__ = ["MAX_DELAY_MS", "DeliveryOrchestrator", "DeliveryScheduler", "parse_delay"]
