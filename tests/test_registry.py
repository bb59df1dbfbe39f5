import pytest
from fleetc.registry import NodeRegistry, Provider


def test_provider_load(paths):
    """Should read domain, contacts and nameservers."""
    provider = Provider.load(paths.provider_file)
    assert provider.domain == 'example.net'
    assert provider.contacts == ('admin@example.net',)
    assert provider.nameservers == ('ns1.example.net',)


def test_provider_contacts_mapping(tmp_path):
    """contacts may be a mapping with a default list."""
    provider_file = tmp_path / 'provider.yml'
    provider_file.write_text('domain: example.org\ncontacts:\n  default: [ops@example.org]\n')
    provider = Provider.load(provider_file)
    assert provider.contacts == ('ops@example.org',)
    assert provider.nameservers == ()


def test_provider_requires_domain(tmp_path):
    provider_file = tmp_path / 'provider.yml'
    provider_file.write_text('contacts: [ops@example.org]\n')
    with pytest.raises(ValueError, match='domain'):
        Provider.load(provider_file)


def test_provider_missing_file(tmp_path):
    with pytest.raises(ValueError, match='not found'):
        Provider.load(tmp_path / 'provider.yml')


def test_node_domain_defaults(paths):
    """Domains default to <name>.<provider domain> and <name>.<label>.i."""
    registry = NodeRegistry.load(paths.nodes_dir, Provider.load(paths.provider_file))
    beta = registry.nodes['beta']
    assert beta.domain.full == 'beta.example.net'
    assert beta.domain.full_suffix == 'example.net'
    assert beta.domain.internal == 'beta.example.i'
    assert beta.dns.aliases == ()
    assert beta.services == frozenset()


def test_node_explicit_fields(paths):
    registry = NodeRegistry.load(paths.nodes_dir, Provider.load(paths.provider_file))
    alpha = registry.nodes['alpha']
    assert alpha.domain.full == 'alpha.prod.example.net'
    assert alpha.domain.full_suffix == 'prod.example.net'
    assert alpha.services == frozenset({'mx'})
    assert alpha.dns.public is True
    assert alpha.dns.aliases == ('example.net', 'www.example.net')


def test_node_requires_ip_address(tmp_path):
    nodes_dir = tmp_path / 'nodes'
    nodes_dir.mkdir()
    (nodes_dir / 'broken.yml').write_text('environment: prod\n')
    with pytest.raises(ValueError, match='ip_address'):
        NodeRegistry.load(nodes_dir, Provider(domain='example.net'))


def test_environment_names_order(paths):
    """Unassigned environment comes first, then names sorted."""
    registry = NodeRegistry.load(paths.nodes_dir, Provider.load(paths.provider_file))
    assert registry.environment_names == [None, 'local', 'prod', 'staging']


def test_filters(paths):
    registry = NodeRegistry.load(paths.nodes_dir, Provider.load(paths.provider_file))
    assert list(registry.in_environment('prod')) == ['alpha']
    assert list(registry.in_environment(None)) == []
    assert list(registry.excluding_environment('local')) == ['alpha', 'beta']
    assert list(registry.filter(['prod', 'local'])) == ['alpha', 'gamma']
    assert list(registry.filter()) == ['alpha', 'beta', 'gamma']
