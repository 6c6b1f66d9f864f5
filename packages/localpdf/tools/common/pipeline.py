"""Operation registry used by the job engine to dispatch requests."""

from __future__ import annotations

from typing import Dict, Iterable

from ...protocol.messages import OperationKind
from .interfaces import BaseOperation, JobContext


class OperationRegistry:
    """Registry mapping every :class:`OperationKind` to its operation class."""

    def __init__(self) -> None:
        self._operations: Dict[OperationKind, type[BaseOperation]] = {}

    def register(self, kind: OperationKind, operation_class: type[BaseOperation]) -> None:
        kind = OperationKind(kind)
        if kind in self._operations:
            raise ValueError(f"Operation '{kind.value}' is already registered")
        self._operations[kind] = operation_class

    def create(self, kind: OperationKind, context: JobContext) -> BaseOperation:
        try:
            operation_class = self._operations[OperationKind(kind)]
        except KeyError as exc:
            raise KeyError(f"Operation '{kind}' is not registered") from exc
        return operation_class(context)

    def kinds(self) -> Iterable[OperationKind]:
        return sorted(self._operations.keys(), key=lambda kind: kind.value)

    def get(self, kind: OperationKind) -> type[BaseOperation] | None:
        return self._operations.get(kind)

    def check_complete(self) -> None:
        """Raise when an operation kind has no registered implementation."""

        missing = [kind.value for kind in OperationKind if kind not in self._operations]
        if missing:
            raise RuntimeError(f"No operation registered for: {', '.join(missing)}")


registry = OperationRegistry()


def register_operation(kind: OperationKind):
    def decorator(cls: type[BaseOperation]) -> type[BaseOperation]:
        cls.kind = OperationKind(kind)
        registry.register(kind, cls)
        return cls

    return decorator


__all__ = [
    "OperationRegistry",
    "registry",
    "register_operation",
    "JobContext",
    "BaseOperation",
]
