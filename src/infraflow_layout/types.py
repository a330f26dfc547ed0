"""Shared type definitions for infraflow-layout.

Enums used across the spec model, the layout phases, and the converters.
Every enum carries its wire string as its value so specs can round-trip
through JSON.
"""

from __future__ import annotations

from enum import Enum


class Tier(Enum):
    """Ordered network zones, left to right in the fallback layout."""

    External = "external"
    Dmz = "dmz"
    Internal = "internal"
    Data = "data"

    @classmethod
    def default(cls) -> Tier:
        return cls.Internal

    @classmethod
    def parse(cls, value: object) -> Tier | None:
        if isinstance(value, Tier):
            return value
        try:
            return cls(value)
        except (TypeError, ValueError):
            return None

    @property
    def rank(self) -> int:
        return _TIER_RANK[self]


_TIER_RANK: dict[Tier, int] = {
    Tier.External: 0,
    Tier.Dmz: 1,
    Tier.Internal: 2,
    Tier.Data: 3,
}


class NodeCategory(Enum):
    Security = "security"
    Network = "network"
    Compute = "compute"
    Cloud = "cloud"
    Storage = "storage"
    Auth = "auth"
    Telecom = "telecom"
    Wan = "wan"
    External = "external"
    Zone = "zone"


class NodeType(Enum):
    """Closed set of infrastructure element types."""

    # security
    Firewall = "firewall"
    Waf = "waf"
    IdsIps = "ids-ips"
    VpnGateway = "vpn-gateway"
    Nac = "nac"
    Dlp = "dlp"
    # network
    Router = "router"
    SwitchL2 = "switch-l2"
    SwitchL3 = "switch-l3"
    LoadBalancer = "load-balancer"
    SdWan = "sd-wan"
    Dns = "dns"
    Cdn = "cdn"
    # compute
    WebServer = "web-server"
    AppServer = "app-server"
    DbServer = "db-server"
    Container = "container"
    Vm = "vm"
    Kubernetes = "kubernetes"
    # cloud
    AwsVpc = "aws-vpc"
    AzureVnet = "azure-vnet"
    GcpNetwork = "gcp-network"
    PrivateCloud = "private-cloud"
    # storage
    SanNas = "san-nas"
    ObjectStorage = "object-storage"
    Backup = "backup"
    Cache = "cache"
    Storage = "storage"
    # auth
    LdapAd = "ldap-ad"
    Sso = "sso"
    Mfa = "mfa"
    Iam = "iam"
    # telecom
    CentralOffice = "central-office"
    BaseStation = "base-station"
    Olt = "olt"
    CustomerPremise = "customer-premise"
    Idc = "idc"
    # wan
    PeRouter = "pe-router"
    PRouter = "p-router"
    MplsNetwork = "mpls-network"
    DedicatedLine = "dedicated-line"
    MetroEthernet = "metro-ethernet"
    CorporateInternet = "corporate-internet"
    VpnService = "vpn-service"
    SdWanService = "sd-wan-service"
    Private5g = "private-5g"
    CoreNetwork = "core-network"
    Upf = "upf"
    RingNetwork = "ring-network"
    # generic
    User = "user"
    Internet = "internet"
    Zone = "zone"

    @classmethod
    def default(cls) -> NodeType:
        return cls.User

    @classmethod
    def parse(cls, value: object) -> NodeType | None:
        if isinstance(value, NodeType):
            return value
        try:
            return cls(value)
        except (TypeError, ValueError):
            return None


class FlowType(Enum):
    Request = "request"
    Response = "response"
    Sync = "sync"
    Blocked = "blocked"
    Encrypted = "encrypted"
    WanLink = "wan-link"
    Wireless = "wireless"
    Tunnel = "tunnel"

    @classmethod
    def default(cls) -> FlowType:
        return cls.Request

    @classmethod
    def parse(cls, value: object) -> FlowType | None:
        if isinstance(value, FlowType):
            return value
        try:
            return cls(value)
        except (TypeError, ValueError):
            return None
