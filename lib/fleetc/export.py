"""Per-node hiera export."""

from typing import Dict

import yaml

from fleetc.log import CompileLog
from fleetc.paths import ProviderPaths, write_file
from fleetc.registry import Node


def hiera_data(node: Node) -> dict:
    """Node configuration as written to hiera/<name>.yaml."""
    data = dict(node.data)
    data.update({
        'name': node.name,
        'environment': node.environment,
        'ip_address': node.ip_address,
        'services': sorted(node.services),
        'domain': {
            'internal': node.domain.internal,
            'full': node.domain.full,
            'full_suffix': node.domain.full_suffix,
        },
        'dns': {
            'public': node.dns.public,
            'aliases': list(node.dns.aliases),
        },
    })
    return data


def export_nodes(nodes: Dict[str, Node], paths: ProviderPaths, log: CompileLog,
                 clean: bool = False) -> None:
    """Write one hiera file per node.

    Args:
        nodes: Nodes to export, keyed by name
        paths: Provider layout
        log: Compile log
        clean: Also remove hiera files of nodes not in `nodes`. Only valid
            when `nodes` is the full, unfiltered node set.
    """
    for name in sorted(nodes):
        target = paths.hiera_file(name)
        content = yaml.safe_dump(hiera_data(nodes[name]), default_flow_style=False, sort_keys=True)
        log.event(write_file(target, content), paths.relative_path(target))

    if clean and paths.hiera_dir.is_dir():
        for hiera_file in sorted(paths.hiera_dir.glob('*.yaml')):
            if hiera_file.stem not in nodes:
                hiera_file.unlink()
                log.event('removed', paths.relative_path(hiera_file))
