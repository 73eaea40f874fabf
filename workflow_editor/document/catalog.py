"""Integration catalog supplied by the host."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

from workflow_editor.exceptions import DocumentError, UnknownIntegrationError


@dataclass
class Action:
    """An action offered by an integration."""
    key: str
    display_name: str = ""
    description: str = ""
    input_ports: Optional[List[str]] = None
    output_ports: Optional[List[str]] = None

    @property
    def label(self) -> str:
        return self.display_name or self.key

    def matches(self, query: str) -> bool:
        """Case-insensitive match on display name or description."""
        query_lower = query.lower()
        return (
            query_lower in self.label.lower() or
            query_lower in self.description.lower()
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {"key": self.key, "display_name": self.display_name}
        if self.description:
            data["description"] = self.description
        if self.input_ports is not None:
            data["input_ports"] = list(self.input_ports)
        if self.output_ports is not None:
            data["output_ports"] = list(self.output_ports)
        return data

    @classmethod
    def from_dict(cls, data: Any, key: Optional[str] = None) -> "Action":
        """Create from a dictionary, or from a bare action key."""
        if isinstance(data, str):
            return cls(key=data, display_name=data)

        if not isinstance(data, Mapping):
            raise DocumentError("action must be an object or a key")

        action_key = data.get("key") or key or data.get("name")
        if not action_key:
            raise DocumentError("action needs a 'key'")

        return cls(
            key=action_key,
            display_name=data.get("display_name") or data.get("name") or "",
            description=data.get("description") or "",
            input_ports=_port_list(data.get("input_ports")),
            output_ports=_port_list(data.get("output_ports")),
        )


def _port_list(value: Any) -> Optional[List[str]]:
    if value is None:
        return None
    if not isinstance(value, list):
        raise DocumentError("ports must be a list of names")
    return [str(port) for port in value]


@dataclass
class Integration:
    """A named group of actions."""
    name: str
    display_name: str = ""
    actions: List[Action] = field(default_factory=list)

    def get_action(self, key: str) -> Optional[Action]:
        """Get action by key."""
        return next((action for action in self.actions if action.key == key), None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "display_name": self.display_name,
            "actions": [action.to_dict() for action in self.actions],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Integration":
        """Create from dictionary.

        ``actions`` may be a list of action objects (or bare keys) or a
        mapping of action key to action object.
        """
        if not isinstance(data, Mapping) or not data.get("name"):
            raise DocumentError("integration needs a 'name'")

        raw_actions = data.get("actions") or []
        if isinstance(raw_actions, Mapping):
            actions = [Action.from_dict(value, key) for key, value in raw_actions.items()]
        elif isinstance(raw_actions, list):
            actions = [Action.from_dict(value) for value in raw_actions]
        else:
            raise DocumentError(f"integration '{data['name']}' has malformed actions")

        return cls(
            name=data["name"],
            display_name=data.get("display_name") or data["name"],
            actions=actions,
        )


class IntegrationCatalog:
    """Read-only catalog of integrations and their actions."""

    def __init__(self, integrations: Optional[Iterable[Integration]] = None):
        self._integrations: List[Integration] = list(integrations or [])

    def __iter__(self) -> Iterator[Integration]:
        return iter(self._integrations)

    def __len__(self) -> int:
        return len(self._integrations)

    def __repr__(self) -> str:
        return f"IntegrationCatalog({[i.name for i in self._integrations]!r})"

    def get_integration(self, name: str) -> Optional[Integration]:
        """Get integration by name."""
        return next((i for i in self._integrations if i.name == name), None)

    def require_integration(self, name: str) -> Integration:
        """Get integration by name, raising ``UnknownIntegrationError`` if absent."""
        integration = self.get_integration(name)
        if integration is None:
            raise UnknownIntegrationError(name)
        return integration

    def get_action(self, integration_name: str, action_key: str) -> Optional[Action]:
        integration = self.get_integration(integration_name)
        if integration is None:
            return None
        return integration.get_action(action_key)

    def search(self, query: str) -> Dict[str, List[Action]]:
        """Search actions, grouped by integration name.

        An empty query returns every action.
        """
        results: Dict[str, List[Action]] = {}

        for integration in self._integrations:
            if query:
                matches = [action for action in integration.actions if action.matches(query)]
            else:
                matches = list(integration.actions)
            if matches:
                results[integration.name] = matches

        return results

    def to_list(self) -> List[Dict[str, Any]]:
        return [integration.to_dict() for integration in self._integrations]

    @classmethod
    def from_list(cls, data: Any) -> "IntegrationCatalog":
        """Create from the host's list of integrations."""
        if data is None:
            return cls()
        if not isinstance(data, list):
            raise DocumentError("integration catalog must be a list")
        return cls(Integration.from_dict(item) for item in data)
