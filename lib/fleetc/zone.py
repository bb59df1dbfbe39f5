"""BIND zone file generation for a provider domain."""

import io
import re
from functools import lru_cache
from typing import List, TextIO

from fleetc.errors import CompileError
from fleetc.project_config import STATIC_SERIAL
from fleetc.registry import LOCAL_ENVIRONMENT, Node, NodeRegistry, Provider

# serial is any number less than 2^32 (4294967296)
ZONE_HEADER = """
;;
;; BIND data file for {domain}
;;

$TTL 600
$ORIGIN {domain}.

@ IN SOA {ns}. {contact}. (
  {serial:<14}; serial
  7200          ; refresh (  24 hours)
  3600          ; retry   (   2 hours)
  1209600       ; expire  (1000 hours)
  600 )         ; minimum (   2 days)
;
"""

ORIGIN_HEADER = """
;;
;; ZONE ORIGIN
;;

"""

ENV_HEADER = """
;;
;; ENVIRONMENT {environment}
;;

"""

MX_PRIORITY = 10


@lru_cache(maxsize=None)
def _suffix_pattern(domain: str) -> re.Pattern:
    return re.compile(r'\.?' + re.escape(domain) + r'$')


def relative_hostname(fqdn: str, domain: str) -> str:
    """Strip the provider domain from a hostname.

    Example:
        >>> relative_hostname('mail.example.net', 'example.net')
        'mail'
        >>> relative_hostname('example.net', 'example.net')
        ''
    """
    return _suffix_pattern(domain).sub('', fqdn, count=1)


class ZoneCompiler:
    """Renders the zone file for a provider and its nodes."""

    def __init__(self, provider: Provider, registry: NodeRegistry,
                 serial: str = STATIC_SERIAL):
        self.provider = provider
        self.registry = registry
        self.serial = serial
        self._width = max(
            (len(self.relative_hostname(node.domain.full))
             for node in registry.nodes.values()),
            default=0,
        )

    def relative_hostname(self, fqdn: str) -> str:
        return relative_hostname(fqdn, self.provider.domain)

    @property
    def contact(self) -> str:
        """First provider contact written as an SOA mailbox (user.example.net)."""
        if not self.provider.contacts:
            raise CompileError("provider.yml must list at least one contact to compile a zone.")
        return self.provider.contacts[0].replace('@', '.', 1)

    def render(self) -> str:
        buffer = io.StringIO()
        self.write(buffer)
        return buffer.getvalue()

    def write(self, f: TextIO) -> None:
        """Write the complete zone file to a text stream."""
        domain = self.provider.domain
        f.write(ZONE_HEADER.format(domain=domain, ns=domain, contact=self.contact,
                                   serial=self.serial))

        f.write(ORIGIN_HEADER)
        # 'A' records for the bare provider domain
        for node in self.registry.excluding_environment(LOCAL_ENVIRONMENT).values():
            if domain in node.dns.aliases:
                self._put(f, '', f'IN A      {node.ip_address}')

        for ns in self.provider.nameservers:
            self._put(f, '', f'IN NS {ns}.')

        for environment in self.registry.environment_names:
            if environment == LOCAL_ENVIRONMENT:
                continue
            nodes = self.registry.in_environment(environment)
            if not nodes:
                continue
            f.write(ENV_HEADER.format(environment=environment or 'default'))
            for node in nodes.values():
                for host, record in self._node_records(node):
                    self._put(f, host, record)

    def _node_records(self, node: Node) -> List[tuple]:
        hostname = self.relative_hostname(node.domain.full)
        records = []
        if node.dns.public:
            records.append((hostname, f'IN A      {node.ip_address}'))
        for host_alias in node.dns.aliases:
            if host_alias != node.domain.full and host_alias != self.provider.domain:
                records.append((self.relative_hostname(host_alias), f'IN CNAME  {hostname}'))
        if 'mx' in node.services:
            records.append((self.relative_hostname(node.domain.full_suffix),
                            f'IN MX {MX_PRIORITY}  {hostname}'))
        return records

    def _put(self, f: TextIO, host: str, record: str) -> None:
        host = host or '@'
        f.write(f'{host.ljust(self._width)} {record}\n')
