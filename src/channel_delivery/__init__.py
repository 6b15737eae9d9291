"""
Package: channel_delivery
Description: Channel credential issuing and delayed notification delivery.

Issues session credentials for a communication channel and delivers
notification events to it after a caller-specified delay, through a
direct HTTP backend or a message-bus bridge backend.
"""

__version__ = "0.1.0"
