"""Model-level actions: trigger an entity's action through its store.

Declare actions on a Record subclass:

    class Post(Record):
        model_name = "post"

        like = model_action("like", {"liked": True})
        unlike = model_action("unlike", lambda action_name: {"liked": False})
        report = model_action("report")

and call them like methods:

    await post.like()
    await post.report({"reason": "spam"})   # merged into the request payload

Each call resolves the model's invoker and naming strategy from
post.store, sends the request, applies the optional attributes
optimistically, and returns the pending future.
"""

from __future__ import annotations

__all__ = [
    "model_action",
    "trigger_entity_action",
]

import asyncio
from collections.abc import Callable, Mapping
from typing import Any

from entity_actions.exceptions import ConfigurationError, MissingEntityError, MissingSerializerError
from entity_actions.invoker import NewAttributes


def trigger_entity_action(
    entity: Any,
    action_name: str,
    data: Mapping[str, Any] | None = None,
    new_attributes: NewAttributes = None,
) -> asyncio.Future[Any]:
    """Trigger an action using the invoker registered for the entity's model.

    Args:
        entity: A store-aware entity (exposes model_name and store).
        action_name: The action being performed.
        data: Optional payload fields passed to the request.
        new_attributes: Optional optimistic attributes (see invoker.apply_optimistic).

    Returns:
        The pending request future.

    Raises:
        MissingEntityError: If entity is None.
        ConfigurationError: If the entity has no store or the store has no invoker for it.
        MissingSerializerError: If the store has no naming strategy for the model.
    """
    if entity is None:
        raise MissingEntityError(action_name)

    store = getattr(entity, "store", None)
    model_name = getattr(entity, "model_name", "")
    if store is None:
        raise ConfigurationError(f"Entity {entity!r} is not attached to a store")

    invoker = store.adapter_for(model_name)
    if invoker is None:
        raise ConfigurationError(f"No invoker registered for model {model_name!r}")
    naming = store.serializer_for(model_name)
    if naming is None:
        raise MissingSerializerError(action_name, model_name)

    return invoker.perform_optimistic(entity, action_name, data, new_attributes, naming=naming)


def model_action(action_name: str, new_attributes: NewAttributes = None) -> Callable[..., asyncio.Future[Any]]:
    """Build a method that triggers action_name on the entity it is called on.

    Args:
        action_name: The action to invoke.
        new_attributes: Attributes to set optimistically; a mapping, or a callable
            taking the action name and returning one. Reverted if the request fails.

    Returns:
        A function (self, data=None) suitable as a class attribute.
    """

    def action(self: Any, data: Mapping[str, Any] | None = None) -> asyncio.Future[Any]:
        return trigger_entity_action(self, action_name, data, new_attributes)

    action.__name__ = action_name
    action.__doc__ = f"Trigger the {action_name!r} action on this entity."
    return action
