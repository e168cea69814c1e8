"""Host-to-subnet association and unique pair extraction.

Pure functions working on host and subnet snapshots.  A monitored
point-to-point radio link shows up in HamnetDB as a subnet holding exactly
two monitored hosts – a *unique pair*.  Subnets with fewer or more monitored
hosts are dropped silently.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from ipaddress import IPv4Network, IPv6Network, ip_network

from hamnetdb.access import DirectPairSupport, HamnetDbAccess
from hamnetdb.errors import InvalidArgumentError
from hamnetdb.models import HostAssociation, HostSet, IPNetwork, Subnet, SubnetSet

logger = logging.getLogger(__name__)

_PAIR_SIZE = 2


def parse_network(subnet: IPNetwork | str | None) -> IPNetwork:
    """Return *subnet* as an ``ipaddress`` network.

    Strings are parsed non-strictly (host bits are masked off).  ``None``,
    unparsable strings and anything that is not a network (a bare address,
    an integer) raise :class:`InvalidArgumentError`.
    """
    if subnet is None:
        raise InvalidArgumentError("subnet to search monitored hosts for is None")
    if isinstance(subnet, str):
        try:
            return ip_network(subnet.strip(), strict=False)
        except ValueError as exc:
            raise InvalidArgumentError(f"'{subnet}' is not a valid IP network") from exc
    if not isinstance(subnet, IPv4Network | IPv6Network):
        raise InvalidArgumentError(f"{subnet!r} is not an IP network")
    return subnet


def exclude_parent_subnets(subnets: Iterable[Subnet]) -> SubnetSet:
    """Drop every subnet that strictly contains another listed subnet.

    Only the most specific subnets survive; order is preserved.
    """
    all_subnets = tuple(subnets)
    return tuple(
        s for s in all_subnets if not any(s.is_parent_of(other) for other in all_subnets)
    )


def associate_hosts(subnets: Iterable[Subnet] | None, hosts: HostSet | None) -> HostAssociation:
    """Map each subnet to the hosts whose address it contains.

    Subnets without any matching host are omitted from the result.
    """
    if subnets is None:
        raise InvalidArgumentError("subnet list is None")
    if hosts is None:
        raise InvalidArgumentError("host list is None")

    association: HostAssociation = {}
    for subnet in subnets:
        members = tuple(h for h in hosts if subnet.contains_address(h.address))
        if members:
            association[subnet] = members
    logger.debug("Associated %d hosts with %d subnets", len(hosts), len(association))
    return association


def filter_unique_pairs(association: HostAssociation) -> HostAssociation:
    """Keep only subnets with exactly two associated hosts."""
    return {subnet: hosts for subnet, hosts in association.items() if len(hosts) == _PAIR_SIZE}


def restrict_to_network(association: HostAssociation, network: IPNetwork) -> HostAssociation:
    """Keep only subnets equal to or nested in *network*."""
    scope = Subnet(network)
    return {
        subnet: hosts
        for subnet, hosts in association.items()
        if scope.contains_network(subnet.network)
    }


# ---------------------------------------------------------------------------
# Generic unique-pair queries against any accessor
# ---------------------------------------------------------------------------


def unique_monitored_host_pairs_global(access: HamnetDbAccess) -> HostAssociation:
    """Return all subnets holding exactly two monitored hosts.

    Parent subnets are *not* excluded.  Accessors implementing
    :class:`DirectPairSupport` answer directly.
    """
    if isinstance(access, DirectPairSupport):
        return access.fetch_unique_monitored_host_pairs_global()

    hosts = access.fetch_monitored_hosts()
    subnets = access.fetch_subnets()
    return filter_unique_pairs(associate_hosts(subnets, hosts))


def unique_monitored_host_pairs(
    access: HamnetDbAccess, subnet: IPNetwork | str | None
) -> HostAssociation:
    """Return unique monitored host pairs in subnets nested in *subnet*.

    Parent subnets of other listed subnets are excluded before associating
    hosts.  Accessors implementing :class:`DirectPairSupport` answer directly.
    """
    network = parse_network(subnet)
    if isinstance(access, DirectPairSupport):
        return access.fetch_unique_monitored_host_pairs(network)

    hosts = access.fetch_monitored_hosts()
    subnets = exclude_parent_subnets(access.fetch_subnets())
    association = associate_hosts(subnets, hosts)
    return filter_unique_pairs(restrict_to_network(association, network))
