"""
UI feedback utilities for the JSON form builder.
Provides status messages and short-lived feedback flags for user actions.
"""

import streamlit as st
import time
from dataclasses import dataclass
from typing import Callable, Optional
import logging

logger = logging.getLogger(__name__)

DEFAULT_FEEDBACK_SECONDS = 2.0


@dataclass
class TransientFlag:
    """
    Idle -> Active -> Idle flag with a scheduled reset.

    The flag is active from activate() until ``duration`` seconds later; the
    reset is evaluated lazily on read, so no timer thread is needed.
    """

    duration: float = DEFAULT_FEEDBACK_SECONDS
    clock: Callable[[], float] = time.monotonic
    expires_at: Optional[float] = None

    def activate(self, now: Optional[float] = None) -> None:
        now = self.clock() if now is None else now
        self.expires_at = now + self.duration

    def is_active(self, now: Optional[float] = None) -> bool:
        if self.expires_at is None:
            return False

        now = self.clock() if now is None else now
        if now >= self.expires_at:
            self.expires_at = None
            return False
        return True

    def reset(self) -> None:
        self.expires_at = None


class UserFeedback:
    """User feedback and notification utilities."""

    @staticmethod
    def error(message: str, icon: str = "❌"):
        """Show error message."""
        st.error(f"{icon} {message}")

    @staticmethod
    def field_error(message: Optional[str]):
        """Show the error under a form control; nothing when there is none."""
        if message:
            st.caption(f":red[{message}]")

