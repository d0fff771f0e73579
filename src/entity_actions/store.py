"""Entity store: which invoker and naming strategy serve each model.

Store implements protocols.EntityStore. Records find their invoker through
record.store and record.model_name (see model_action.py).
"""

from __future__ import annotations

__all__ = ["Store"]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from entity_actions.invoker import OptimisticInvoker
    from entity_actions.protocols import NamingStrategy


class Store:
    """Registry of (invoker, naming strategy) per model name.

    A fallback invoker/naming pair can be registered under "application"; it
    serves every model that has no entry of its own.
    """

    DEFAULT_MODEL = "application"

    def __init__(self) -> None:
        self._adapters: dict[str, "OptimisticInvoker"] = {}
        self._serializers: dict[str, "NamingStrategy"] = {}

    def register(
        self,
        model_name: str,
        invoker: "OptimisticInvoker | None" = None,
        naming: "NamingStrategy | None" = None,
    ) -> None:
        """Register an invoker and/or naming strategy for a model."""
        if invoker is not None:
            self._adapters[model_name] = invoker
        if naming is not None:
            self._serializers[model_name] = naming

    def adapter_for(self, model_name: str) -> "OptimisticInvoker | None":
        return self._adapters.get(model_name) or self._adapters.get(self.DEFAULT_MODEL)

    def serializer_for(self, model_name: str) -> "NamingStrategy | None":
        return self._serializers.get(model_name) or self._serializers.get(self.DEFAULT_MODEL)
