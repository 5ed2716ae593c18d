"""Transient toast notifications shown on the next dashboard render."""
import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional


class ToastKind(str, enum.Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class Toast:
    kind: ToastKind
    message: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class Notifier:
    """Collects toasts until the view drains them."""

    def __init__(self, max_pending: Optional[int] = 20):
        self.max_pending = max_pending
        self._pending: List[Toast] = []

    def _push(self, toast: Toast) -> Toast:
        self._pending.append(toast)
        if self.max_pending and len(self._pending) > self.max_pending:
            del self._pending[: len(self._pending) - self.max_pending]
        return toast

    def success(self, message: str) -> Toast:
        return self._push(Toast(ToastKind.SUCCESS, message))

    def error(self, message: str) -> Toast:
        return self._push(Toast(ToastKind.ERROR, message))

    @property
    def pending(self) -> List[Toast]:
        return list(self._pending)

    def drain(self) -> List[Toast]:
        """Return and forget all pending toasts."""
        toasts, self._pending = self._pending, []
        return toasts
