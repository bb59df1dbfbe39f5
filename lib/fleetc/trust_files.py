"""Compile the SSH authorized_keys and known_hosts files."""

from typing import List

from fleetc.errors import CompileError
from fleetc.log import CompileLog
from fleetc.paths import ProviderPaths, file_exists, read_file, write_file
from fleetc.registry import NodeRegistry
from fleetc.ssh_keys import parse_public_key

KNOWN_HOSTS_BANNER = (
    "#\n"
    "# This file is automatically generated by the command `fleetc`. You should NOT modify this file.\n"
    "# Instead, update the host key of whatever node is causing SSH problems and rerun `fleetc compile`.\n"
    "#\n"
)


def render_authorized_keys(paths: ProviderPaths) -> str:
    """Build authorized_keys from all user keys plus the monitor key.

    Each line is `<type> <material> <source file>`, ordered by source path.

    Raises:
        CompileError: If no user public key is configured
    """
    keyfiles = paths.user_ssh_keys()
    if not keyfiles:
        raise CompileError(
            "You must have at least one public SSH user key configured in order "
            "to proceed. Add one as users/<username>/<username>_ssh.pub."
        )
    if file_exists(paths.monitor_pub_key):
        keyfiles.append(paths.monitor_pub_key)

    lines: List[str] = []
    for keyfile in sorted(keyfiles, key=str):
        key_type, key_material = parse_public_key(keyfile.read_text())
        lines.append(f'{key_type} {key_material} {paths.relative_path(keyfile)}\n')
    return ''.join(lines)


def render_known_hosts(registry: NodeRegistry, paths: ProviderPaths) -> str:
    """Build known_hosts from each node's host key.

    Hostnames and IP are taken from the current node configuration rather
    than from when the key was generated. Nodes without a key are left out.
    """
    lines = [KNOWN_HOSTS_BANNER]
    for node_name in sorted(registry.nodes):
        node = registry.nodes[node_name]
        hostnames = ','.join([node.name, node.domain.internal, node.domain.full, node.ip_address])
        pub_key = read_file(paths.node_ssh_pub_key(node.name))
        if pub_key is not None:
            lines.append(f'{hostnames} {pub_key}\n')
    return ''.join(lines)


def compile_authorized_keys(paths: ProviderPaths, log: CompileLog) -> None:
    content = render_authorized_keys(paths)
    action = write_file(paths.authorized_keys, content)
    log.event(action, paths.relative_path(paths.authorized_keys))


def compile_known_hosts(registry: NodeRegistry, paths: ProviderPaths, log: CompileLog) -> None:
    content = render_known_hosts(registry, paths)
    action = write_file(paths.known_hosts, content)
    log.event(action, paths.relative_path(paths.known_hosts))
