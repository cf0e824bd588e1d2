"""Short-lived user notifications ("toasts").

A ``ToastQueue`` holds the pending toasts of one browser session in
insertion order, keyed by id. Every toast carries its own expiry time and
is removed by id, either when that time passes or when the user dismisses
it, so removing one toast never touches the others.

``Notifier`` is the handle the application creates at its root. Views and
helpers raise toasts through it instead of through a module global::

    notifier = Notifier(app)
    notifier.notify("Budget saved")

Code that has no reference to the handle uses ``get_notifier()``.
"""

import logging
import time
import uuid
from dataclasses import asdict, dataclass
from typing import Callable, Iterator, Optional

from flask import current_app, session

log = logging.getLogger(__name__)

VARIANTS = ("default", "destructive")
PRESENTATIONS = ("banner", "modal")
DEFAULT_TIMEOUT = 3.0
SESSION_KEY = "_toasts"


@dataclass
class Toast:
    id: str
    title: str
    description: Optional[str]
    variant: str
    expires_at: float

    def remaining(self, now: float) -> float:
        return max(self.expires_at - now, 0.0)

    def is_expired(self, now: float) -> bool:
        return self.expires_at <= now


class ToastQueue:
    def __init__(self, timeout: float = DEFAULT_TIMEOUT, clock: Callable[[], float] = time.time):
        self.timeout = timeout
        self.clock = clock
        self._toasts: dict[str, Toast] = {}

    def __len__(self) -> int:
        return len(self._toasts)

    def __iter__(self) -> Iterator[Toast]:
        return iter(list(self._toasts.values()))

    def __contains__(self, toast_id: str) -> bool:
        return toast_id in self._toasts

    def push(self, title: str, description: Optional[str] = None,
             variant: str = "default", ttl: Optional[float] = None) -> Toast:
        if variant not in VARIANTS:
            raise ValueError(f"Unknown toast variant: {variant!r}")
        ttl = self.timeout if ttl is None else ttl
        toast = Toast(
            id=uuid.uuid4().hex,
            title=title,
            description=description,
            variant=variant,
            expires_at=self.clock() + ttl,
        )
        self._toasts[toast.id] = toast
        return toast

    def dismiss(self, toast_id: str) -> bool:
        return self._toasts.pop(toast_id, None) is not None

    def expire(self, now: Optional[float] = None) -> list[Toast]:
        """Drop every toast whose own expiry has passed and return them."""
        now = self.clock() if now is None else now
        expired = [t for t in self._toasts.values() if t.is_expired(now)]
        for toast in expired:
            del self._toasts[toast.id]
        return expired

    def pending(self, now: Optional[float] = None) -> list[Toast]:
        self.expire(now)
        return list(self._toasts.values())

    def to_list(self) -> list[dict]:
        return [asdict(t) for t in self._toasts.values()]

    @classmethod
    def from_list(cls, items, timeout: float = DEFAULT_TIMEOUT,
                  clock: Callable[[], float] = time.time) -> "ToastQueue":
        queue = cls(timeout=timeout, clock=clock)
        for item in items or []:
            toast = Toast(**item)
            queue._toasts[toast.id] = toast
        return queue


class Notifier:
    """Application-level handle for raising and rendering toasts.

    The queue lives in the user's session, so toasts raised before a
    redirect show up on the next page. How they are shown is picked by the
    ``TOAST_PRESENTATION`` config value: ``"banner"`` for inline alerts or
    ``"modal"`` for a blocking dialog.
    """

    def __init__(self, app=None, clock: Callable[[], float] = time.time):
        self.clock = clock
        self.app = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        app.config.setdefault("TOAST_TIMEOUT", DEFAULT_TIMEOUT)
        app.config.setdefault("TOAST_PRESENTATION", "banner")
        presentation = app.config["TOAST_PRESENTATION"]
        if presentation not in PRESENTATIONS:
            raise ValueError(
                f"TOAST_PRESENTATION must be one of {PRESENTATIONS}, got {presentation!r}"
            )
        app.extensions["toasts"] = self
        app.context_processor(self._template_context)
        self.app = app

    @property
    def presentation(self) -> str:
        return current_app.config["TOAST_PRESENTATION"]

    def _load(self) -> ToastQueue:
        return ToastQueue.from_list(
            session.get(SESSION_KEY),
            timeout=current_app.config["TOAST_TIMEOUT"],
            clock=self.clock,
        )

    def _store(self, queue: ToastQueue):
        if len(queue):
            session[SESSION_KEY] = queue.to_list()
        else:
            session.pop(SESSION_KEY, None)

    def notify(self, title: str, description: Optional[str] = None,
               variant: str = "default", ttl: Optional[float] = None) -> Toast:
        queue = self._load()
        toast = queue.push(title, description=description, variant=variant, ttl=ttl)
        self._store(queue)
        return toast

    def dismiss(self, toast_id: str) -> bool:
        queue = self._load()
        removed = queue.dismiss(toast_id)
        if removed:
            self._store(queue)
        else:
            log.debug("Toast %s already gone", toast_id)
        return removed

    def current_toasts(self) -> list[Toast]:
        queue = self._load()
        if queue.expire():
            self._store(queue)
        return list(queue)

    def _template_context(self):
        return {
            "current_toasts": self.current_toasts,
            "toast_presentation": self.presentation,
            "now": self.clock,
        }


def get_notifier() -> Notifier:
    return current_app.extensions["toasts"]
