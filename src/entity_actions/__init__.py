"""entity-actions: server-side actions on entities with optimistic updates.

Structure:
    resolver.py      - Action registry entries -> ActionDefinition
    invoker.py       - OptimisticInvoker (perform, apply_optimistic)
    changes.py       - AttributeChangeSet (single-fire rollback)
    entity.py        - Record, a change-tracking entity
    naming.py        - Key naming strategies
    store.py         - Store mapping models to invokers and naming strategies
    model_action.py  - model_action() method factory
    transport.py     - HttpxTransport
    config.py        - AdapterConfig / ActionSpec (pydantic)
"""

__version__ = "0.1.0"

from entity_actions.changes import AttributeChange, AttributeChangeSet, ChangeState
from entity_actions.config import ActionSpec, AdapterConfig
from entity_actions.entity import Record
from entity_actions.exceptions import (
    ActionError,
    ActionRequestError,
    ConfigurationError,
    InvalidActionDefinitionError,
    InvalidAttributesError,
    MissingActionNameError,
    MissingEntityError,
    MissingSerializerError,
    MissingUrlError,
    PreconditionError,
)
from entity_actions.invoker import OptimisticInvoker, apply_optimistic, join_url
from entity_actions.model_action import model_action, trigger_entity_action
from entity_actions.naming import CamelCaseKeys, DasherizedKeys, IdentityKeys, UnderscoredKeys
from entity_actions.protocols import Entity, EntityStore, NamingStrategy, Transport
from entity_actions.resolver import ActionDefinition, ActionKind, classify_entry, resolve_action
from entity_actions.store import Store
from entity_actions.transport import HttpxTransport

__all__ = [
    "__version__",
    # Resolution
    "ActionDefinition",
    "ActionKind",
    "classify_entry",
    "resolve_action",
    # Invocation
    "OptimisticInvoker",
    "apply_optimistic",
    "join_url",
    "AttributeChange",
    "AttributeChangeSet",
    "ChangeState",
    # Entities and stores
    "Record",
    "Store",
    "model_action",
    "trigger_entity_action",
    # Collaborators
    "Entity",
    "EntityStore",
    "NamingStrategy",
    "Transport",
    "HttpxTransport",
    "CamelCaseKeys",
    "DasherizedKeys",
    "IdentityKeys",
    "UnderscoredKeys",
    # Configuration
    "ActionSpec",
    "AdapterConfig",
    # Errors
    "ActionError",
    "ActionRequestError",
    "ConfigurationError",
    "InvalidActionDefinitionError",
    "InvalidAttributesError",
    "MissingActionNameError",
    "MissingEntityError",
    "MissingSerializerError",
    "MissingUrlError",
    "PreconditionError",
]
