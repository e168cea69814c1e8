"""HamnetDB accessor using the public REST / JSON interface."""

from __future__ import annotations

import logging
from collections.abc import Callable
from ipaddress import ip_address, ip_network
from typing import TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from hamnetdb.errors import InvalidArgumentError, UpstreamError
from hamnetdb.json_api._http import _get_json_list
from hamnetdb.json_api._records import HostRecord, SiteRecord, SubnetRecord
from hamnetdb.models import Host, HostSet, Site, SiteSet, Subnet, SubnetSet

logger = logging.getLogger(__name__)

_host_records = TypeAdapter(list[HostRecord])
_subnet_records = TypeAdapter(list[SubnetRecord])
_site_records = TypeAdapter(list[SiteRecord])

R = TypeVar("R", bound=BaseModel)


def _validate(adapter: TypeAdapter[list[R]], data: list[dict], url: str) -> list[R]:
    try:
        return adapter.validate_python(data)
    except ValidationError as exc:
        raise UpstreamError(f"Unexpected record layout in response of '{url}': {exc}") from exc


class JsonHamnetDbAccessor:
    """Fetches hosts, subnets and sites from the HamnetDB JSON endpoints.

    Records marked as deleted are dropped; entries whose address cannot be
    parsed are logged and skipped.  Every fetch failure is raised as
    :class:`UpstreamError`.
    """

    def __init__(
        self,
        hosts_url: str,
        subnets_url: str,
        sites_url: str,
        timeout: float = 30,
    ) -> None:
        missing = [
            name
            for name, url in (
                ("hosts_url", hosts_url),
                ("subnets_url", subnets_url),
                ("sites_url", sites_url),
            )
            if not url or not url.strip()
        ]
        if missing:
            raise InvalidArgumentError(f"HamnetDB API URL(s) empty: {', '.join(missing)}")

        self.hosts_url = hosts_url
        self.subnets_url = subnets_url
        self.sites_url = sites_url
        self.timeout = timeout

    def fetch_routing_hosts(self) -> HostSet:
        """Return hosts with the ``routing`` flag set."""
        return self._fetch_hosts(lambda r: r.routing)

    def fetch_monitored_hosts(self) -> HostSet:
        """Return hosts with the ``monitor`` flag set."""
        return self._fetch_hosts(lambda r: r.monitor)

    def fetch_subnets(self) -> SubnetSet:
        records = _validate(
            _subnet_records, _get_json_list(self.subnets_url, self.timeout), self.subnets_url
        )
        subnets: list[Subnet] = []
        for record in records:
            if record.deleted:
                continue
            try:
                network = ip_network(record.ip.strip(), strict=False)
            except ValueError:
                logger.error(
                    "Cannot convert retrieved string '%s' to a valid IP subnet. "
                    "This entry will be skipped.",
                    record.ip,
                )
                continue
            subnets.append(Subnet(network))
        return tuple(subnets)

    def fetch_sites(self) -> SiteSet:
        records = _validate(
            _site_records, _get_json_list(self.sites_url, self.timeout), self.sites_url
        )
        return tuple(
            Site(
                callsign=r.callsign,
                name=r.name or "",
                latitude=r.latitude,
                longitude=r.longitude,
                ground_above_sea_level=r.ground_asl,
                elevation=r.elevation,
                comment=r.comment or "",
                inactive=r.inactive,
            )
            for r in records
        )

    def _fetch_hosts(self, predicate: Callable[[HostRecord], bool]) -> HostSet:
        records = _validate(
            _host_records, _get_json_list(self.hosts_url, self.timeout), self.hosts_url
        )
        hosts: list[Host] = []
        for record in records:
            if record.deleted or not predicate(record):
                continue
            try:
                address = ip_address(record.ip.strip())
            except ValueError:
                logger.error(
                    "Cannot convert retrieved string '%s' to a valid IP address. "
                    "This entry will be skipped.",
                    record.ip,
                )
                continue
            hosts.append(
                Host(
                    address=address,
                    callsign=record.site or "",
                    name=record.name or "",
                    host_type=record.typ or "",
                )
            )
        return tuple(hosts)
