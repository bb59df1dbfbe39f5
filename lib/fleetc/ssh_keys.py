"""SSH key generation and public key parsing."""

import subprocess
from pathlib import Path
from typing import Callable, Tuple

from fleetc.log import CompileLog
from fleetc.paths import ProviderPaths, ensure_dir, file_exists

MONITOR_KEY_BITS = 4096
MONITOR_KEY_COMMENT = 'monitor'

# generator(private_key_path, bits, comment); public key lands at <path>.pub
KeypairGenerator = Callable[[Path, int, str], None]


def generate_keypair(key_path: Path, bits: int, comment: str) -> None:
    """Generate an RSA SSH keypair without a passphrase.

    Args:
        key_path: Path where private key will be saved (public key gets .pub suffix)
        bits: RSA key size
        comment: Key comment

    Raises:
        subprocess.CalledProcessError: If ssh-keygen exits non-zero
    """
    subprocess.run([
        'ssh-keygen',
        '-N', '',  # No passphrase
        '-C', comment,
        '-t', 'rsa',
        '-b', str(bits),
        '-f', str(key_path),
    ], check=True, capture_output=True)


def ensure_monitor_keys(paths: ProviderPaths, log: CompileLog,
                        generator: KeypairGenerator = generate_keypair) -> None:
    """Create the monitor keypair unless both halves already exist.

    Every node trusts the monitor public key and every monitor node gets
    the private key. A keypair that is still missing after generation is
    logged as failed; the run continues without it.
    """
    priv_key = paths.monitor_priv_key
    pub_key = paths.monitor_pub_key
    if file_exists(priv_key, pub_key):
        return

    ensure_dir(priv_key.parent)
    ensure_dir(pub_key.parent)
    generator(priv_key, MONITOR_KEY_BITS, MONITOR_KEY_COMMENT)

    if file_exists(priv_key, pub_key):
        log.event('created', paths.relative_path(priv_key))
        log.event('created', paths.relative_path(pub_key))
    else:
        log.event('failed', 'to create monitor ssh keys')


def parse_public_key(content: str) -> Tuple[str, str]:
    """Split an OpenSSH public key line into (key type, key material).

    Anything after the material (the comment) is dropped. Missing parts
    come back as empty strings.
    """
    parts = content.strip().split()
    key_type = parts[0] if parts else ''
    key_material = parts[1] if len(parts) > 1 else ''
    return key_type, key_material
