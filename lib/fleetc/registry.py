"""Read-only provider and node registry loaded from YAML files."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import yaml

LOCAL_ENVIRONMENT = 'local'


@dataclass(frozen=True)
class Domain:
    internal: str
    full: str
    full_suffix: str


@dataclass(frozen=True)
class DnsConfig:
    public: bool = False
    aliases: tuple = ()


@dataclass(frozen=True)
class Node:
    """One managed node as described by nodes/<name>.yml."""
    name: str
    domain: Domain
    ip_address: str
    environment: Optional[str] = None
    services: frozenset = frozenset()
    dns: DnsConfig = DnsConfig()
    data: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)


@dataclass(frozen=True)
class Provider:
    """Provider-wide settings from provider.yml."""
    domain: str
    contacts: tuple = ()
    nameservers: tuple = ()
    domain_internal: Optional[str] = None

    @property
    def internal_suffix(self) -> str:
        return self.domain_internal or f"{self.domain.split('.')[0]}.i"

    @classmethod
    def load(cls, provider_file: Path) -> 'Provider':
        """Load provider.yml.

        Args:
            provider_file: Path to provider.yml

        Returns:
            Provider with contacts and nameservers as tuples

        Raises:
            ValueError: If the file is missing, not a mapping, or has no domain
        """
        if not provider_file.exists():
            raise ValueError(f"Provider file not found: {provider_file}")
        data = _load_mapping(provider_file)

        domain = data.get('domain')
        if not domain:
            raise ValueError(f"{provider_file.name} must define a domain")

        contacts = data.get('contacts') or []
        if isinstance(contacts, dict):
            contacts = contacts.get('default') or []
        if isinstance(contacts, str):
            contacts = [contacts]

        dns = data.get('dns') or {}
        return cls(
            domain=domain,
            contacts=tuple(contacts),
            nameservers=tuple(dns.get('nameservers') or ()),
            domain_internal=data.get('domain_internal'),
        )


class NodeRegistry:
    """Nodes keyed by name, iterated in sorted name order."""

    def __init__(self, nodes: Iterable[Node]):
        self.nodes: Dict[str, Node] = {
            node.name: node for node in sorted(nodes, key=lambda n: n.name)
        }

    @classmethod
    def load(cls, nodes_dir: Path, provider: Provider) -> 'NodeRegistry':
        """Load every nodes/<name>.yml below nodes_dir."""
        nodes = []
        if nodes_dir.is_dir():
            for node_file in sorted(nodes_dir.glob('*.yml')):
                nodes.append(_node_from_data(node_file.stem, _load_mapping(node_file), provider))
        return cls(nodes)

    @property
    def environment_names(self) -> List[Optional[str]]:
        """Environments in rendering order: None (unassigned) first, then by name."""
        names = {node.environment for node in self.nodes.values() if node.environment}
        return [None] + sorted(names)

    def in_environment(self, environment: Optional[str]) -> Dict[str, Node]:
        """Nodes whose environment equals `environment` (None = unassigned)."""
        return {name: node for name, node in self.nodes.items()
                if node.environment == environment}

    def excluding_environment(self, environment: str) -> Dict[str, Node]:
        return {name: node for name, node in self.nodes.items()
                if node.environment != environment}

    def filter(self, environments: Optional[List[str]] = None) -> Dict[str, Node]:
        """Nodes in any of the given environments, or all nodes if none given."""
        if not environments:
            return dict(self.nodes)
        return {name: node for name, node in self.nodes.items()
                if node.environment in environments}


def _load_mapping(path: Path) -> Dict[str, Any]:
    with open(path, encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path.name} must contain a mapping")
    return data


def _node_from_data(name: str, data: Dict[str, Any], provider: Provider) -> Node:
    if not data.get('ip_address'):
        raise ValueError(f"Node {name} has no ip_address")

    domain = data.get('domain') or {}
    full_suffix = domain.get('full_suffix') or provider.domain
    dns = data.get('dns') or {}

    return Node(
        name=name,
        domain=Domain(
            internal=domain.get('internal') or f'{name}.{provider.internal_suffix}',
            full=domain.get('full') or f'{name}.{full_suffix}',
            full_suffix=full_suffix,
        ),
        ip_address=str(data['ip_address']),
        environment=data.get('environment'),
        services=frozenset(data.get('services') or ()),
        dns=DnsConfig(
            public=bool(dns.get('public', False)),
            aliases=tuple(dns.get('aliases') or ()),
        ),
        data=data,
    )
