# Damaged Goods Management - Incident Reporting
# Incident form, photo capture and the incident records API
# v1.0.0.0

import logging
from typing import Any, Callable, Iterator, Mapping, Optional

log = logging.getLogger(__name__)

Listener = Callable[[str, Any], None]


class FormState(Mapping[str, Any]):
    """
    Observable mapping from field name to value.

    Every mutation notifies subscribers with (field, value). A full replace
    notifies once per field, in insertion order.
    """

    def __init__(self, initial: Optional[Mapping[str, Any]] = None) -> None:
        self._values: dict[str, Any] = dict(initial or {})
        self._listeners: list[Listener] = []

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set(self, name: str, value: Any) -> None:
        self._values[name] = value
        self._notify(name, value)

    def replace(self, values: Mapping[str, Any]) -> None:
        self._values = dict(values)
        for name, value in self._values.items():
            self._notify(name, value)

    def snapshot(self) -> dict[str, Any]:
        return dict(self._values)

    def _notify(self, name: str, value: Any) -> None:
        for listener in list(self._listeners):
            try:
                listener(name, value)
            except Exception as exc:
                log.error("Form state listener failed for %s: %s", name, exc, exc_info=True)
