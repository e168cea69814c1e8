"""Value types for HamnetDB hosts, subnets and sites.

All types are frozen dataclasses so they can be shared between threads and
used as dictionary keys (a :class:`Subnet` keys the host association maps).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from ipaddress import IPv4Address, IPv4Network, IPv6Address, IPv6Network

IPAddress = IPv4Address | IPv6Address
IPNetwork = IPv4Network | IPv6Network


@dataclass(frozen=True)
class Host:
    """A single host entry."""

    address: IPAddress
    callsign: str  # the site the host belongs to
    name: str
    host_type: str


@dataclass(frozen=True)
class Subnet:
    """A single subnet entry."""

    network: IPNetwork

    def contains_address(self, address: IPAddress) -> bool:
        """Return *True* if *address* lies within this subnet."""
        return address.version == self.network.version and address in self.network

    def contains_network(self, other: IPNetwork) -> bool:
        """Return *True* if *other* is equal to or nested in this subnet."""
        return other.version == self.network.version and other.subnet_of(self.network)  # type: ignore[arg-type]

    def is_parent_of(self, other: Subnet) -> bool:
        """Return *True* if this subnet strictly contains *other*."""
        return other.network != self.network and self.contains_network(other.network)


@dataclass(frozen=True)
class Site:
    """A HamnetDB site (a location hosting radio equipment)."""

    callsign: str
    name: str = ""
    latitude: float = math.nan
    longitude: float = math.nan
    ground_above_sea_level: float = math.nan
    elevation: float = math.nan  # antenna height above ground
    comment: str = ""
    inactive: bool = False

    @property
    def altitude(self) -> float:
        """Antenna altitude above sea level, NaN if either part is unknown."""
        if math.isnan(self.ground_above_sea_level) or math.isnan(self.elevation):
            return math.nan
        return self.ground_above_sea_level + self.elevation


HostSet = tuple[Host, ...]
SubnetSet = tuple[Subnet, ...]
SiteSet = tuple[Site, ...]

# Subnet -> the hosts whose address lies within it.
HostAssociation = dict[Subnet, HostSet]
