"""Compile orchestration: SSH trust files first, then hiera export."""

from typing import Dict, Optional, Tuple

from fleetc.errors import CompileError
from fleetc.export import export_nodes
from fleetc.log import CompileLog
from fleetc.paths import ProviderPaths
from fleetc.registry import Node, NodeRegistry
from fleetc.ssh_keys import KeypairGenerator, ensure_monitor_keys, generate_keypair
from fleetc.trust_files import compile_authorized_keys, compile_known_hosts


def select_nodes(registry: NodeRegistry, environment: Optional[str],
                 pinned: Optional[str]) -> Tuple[Dict[str, Node], bool]:
    """Pick the nodes to compile and whether a clean export is allowed.

    Args:
        registry: Node registry
        environment: ENVIRONMENT argument, if given
        pinned: Environment pinned in fleet.yml, if any

    Returns:
        Tuple of (nodes, clean_export)

    Raises:
        CompileError: If the argument conflicts with the pin or names an
            environment that does not exist
    """
    if pinned is not None and environment is not None and environment != pinned:
        raise CompileError(
            "You cannot specify an ENVIRONMENT argument while the environment is pinned."
        )
    if environment is not None:
        if environment not in registry.environment_names:
            raise CompileError(f"There is no environment named `{environment}`.")
        return registry.filter([environment]), False
    if pinned is not None:
        return registry.filter([pinned]), False
    return registry.filter(), True


def update_compiled_ssh_configs(registry: NodeRegistry, paths: ProviderPaths, log: CompileLog,
                                generator: KeypairGenerator = generate_keypair) -> None:
    ensure_monitor_keys(paths, log, generator)
    compile_authorized_keys(paths, log)
    compile_known_hosts(registry, paths, log)


def compile_all(registry: NodeRegistry, paths: ProviderPaths, log: CompileLog,
                environment: Optional[str] = None, pinned: Optional[str] = None,
                generator: KeypairGenerator = generate_keypair) -> Dict[str, Node]:
    """Run a full compile pass and return the exported nodes.

    SSH access has to work before later deployment steps rely on it, so the
    trust files are always compiled before the hiera export.
    """
    nodes, clean_export = select_nodes(registry, environment, pinned)
    update_compiled_ssh_configs(registry, paths, log, generator)
    export_nodes(nodes, paths, log, clean=clean_export)
    return nodes
