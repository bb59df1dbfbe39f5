"""Provider directory layout and whole-file helpers."""

import os
import tempfile
from pathlib import Path
from typing import List, Optional


class ProviderPaths:
    """Resolves the conventional file locations under a provider root."""

    def __init__(self, root: Path):
        self.root = root.resolve()

    @property
    def config_file(self) -> Path:
        return self.root / 'fleet.yml'

    @property
    def provider_file(self) -> Path:
        return self.root / 'provider.yml'

    @property
    def nodes_dir(self) -> Path:
        return self.root / 'nodes'

    @property
    def users_dir(self) -> Path:
        return self.root / 'users'

    @property
    def monitor_priv_key(self) -> Path:
        return self.root / 'files' / 'ssh' / 'monitor_ssh'

    @property
    def monitor_pub_key(self) -> Path:
        return self.root / 'files' / 'ssh' / 'monitor_ssh.pub'

    @property
    def authorized_keys(self) -> Path:
        return self.root / 'files' / 'ssh' / 'authorized_keys'

    @property
    def known_hosts(self) -> Path:
        return self.root / 'files' / 'ssh' / 'known_hosts'

    @property
    def hiera_dir(self) -> Path:
        return self.root / 'hiera'

    def user_ssh_keys(self) -> List[Path]:
        """Public keys of every user, e.g. users/alice/alice_ssh.pub."""
        return [p for p in self.users_dir.glob('*/*_ssh.pub') if p.is_file()]

    def node_ssh_pub_key(self, node_name: str) -> Path:
        return self.root / 'files' / 'nodes' / node_name / f'{node_name}_ssh.pub'

    def hiera_file(self, node_name: str) -> Path:
        return self.hiera_dir / f'{node_name}.yaml'

    def relative_path(self, path: Path) -> str:
        """Path relative to the provider root, or unchanged if outside it.

        Symlinks are not followed, so a linked key keeps its in-tree name.
        """
        try:
            return str(Path(os.path.abspath(path)).relative_to(self.root))
        except ValueError:
            return str(path)


def file_exists(*paths: Path) -> bool:
    """True only if every path exists."""
    return all(Path(p).exists() for p in paths)


def ensure_dir(path: Path) -> None:
    Path(path).mkdir(parents=True, exist_ok=True)


def read_file(path: Path) -> Optional[str]:
    """Read and strip a file, returning None if it does not exist."""
    path = Path(path)
    if not path.is_file():
        return None
    return path.read_text().strip()


def write_file(path: Path, content: str) -> str:
    """Replace a file's contents in one step.

    Args:
        path: Target file; parent directories are created as needed
        content: Full new contents

    Returns:
        'created', 'updated' or 'unchanged'
    """
    path = Path(path)
    if path.exists():
        if path.read_text() == content:
            return 'unchanged'
        action = 'updated'
    else:
        action = 'created'

    ensure_dir(path.parent)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f'.{path.name}.')
    try:
        with os.fdopen(fd, 'w') as f:
            f.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return action
