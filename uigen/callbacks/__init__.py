"""Callback/hook system for UIGen lifecycle events."""

from uigen.callbacks.base import BaseCallback, UIGenCallback
from uigen.callbacks.logging import LoggingCallback

__all__ = ["BaseCallback", "UIGenCallback", "LoggingCallback"]
