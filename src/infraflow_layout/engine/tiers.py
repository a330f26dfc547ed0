"""Tier classification — maps a node's type and zone hint to a Tier.

The tier is the fallback layering axis (external, dmz, internal, data from
left to right) and is attached to every positioned node as metadata.
Classification never fails: unknown types and zones resolve to
``Tier.Internal``.
"""

from __future__ import annotations

from infraflow_layout.types import NodeCategory, NodeType, Tier

# ─── Zone keywords ───────────────────────────────────────────────────────────

# Checked in order against the lower-cased zone; first substring hit wins.
# "transport" must precede "ran" since it contains it.
ZONE_KEYWORDS: tuple[tuple[str, Tier], ...] = (
    ("external", Tier.External),
    ("internet", Tier.External),
    ("dmz", Tier.Dmz),
    ("gateway", Tier.Dmz),
    ("security", Tier.Dmz),
    ("access", Tier.Dmz),
    ("edge", Tier.Dmz),
    ("internal", Tier.Internal),
    ("app", Tier.Internal),
    ("web", Tier.Internal),
    ("services", Tier.Internal),
    ("vdi", Tier.Internal),
    ("processing", Tier.Internal),
    ("workload", Tier.Internal),
    ("data", Tier.Data),
    ("db", Tier.Data),
    ("storage", Tier.Data),
    ("aggregation", Tier.Dmz),
    ("backbone", Tier.Internal),
    ("core-dc", Tier.Internal),
    ("transport", Tier.Dmz),
    ("ran", Tier.External),
    ("국사", Tier.Dmz),
    ("백본", Tier.Internal),
    ("기지국", Tier.External),
)

# ─── Type tables ─────────────────────────────────────────────────────────────

TYPE_TIERS: dict[NodeType, Tier] = {
    NodeType.Firewall: Tier.Dmz,
    NodeType.Waf: Tier.Dmz,
    NodeType.IdsIps: Tier.Dmz,
    NodeType.VpnGateway: Tier.Dmz,
    NodeType.Nac: Tier.Dmz,
    NodeType.Dlp: Tier.Internal,
    NodeType.Router: Tier.Dmz,
    NodeType.SwitchL2: Tier.Internal,
    NodeType.SwitchL3: Tier.Internal,
    NodeType.LoadBalancer: Tier.Dmz,
    NodeType.SdWan: Tier.Dmz,
    NodeType.Dns: Tier.Dmz,
    NodeType.Cdn: Tier.External,
    NodeType.WebServer: Tier.Internal,
    NodeType.AppServer: Tier.Internal,
    NodeType.DbServer: Tier.Data,
    NodeType.Container: Tier.Internal,
    NodeType.Vm: Tier.Internal,
    NodeType.Kubernetes: Tier.Internal,
    NodeType.AwsVpc: Tier.Internal,
    NodeType.AzureVnet: Tier.Internal,
    NodeType.GcpNetwork: Tier.Internal,
    NodeType.PrivateCloud: Tier.Internal,
    NodeType.SanNas: Tier.Data,
    NodeType.ObjectStorage: Tier.Data,
    NodeType.Backup: Tier.Data,
    NodeType.Cache: Tier.Data,
    NodeType.Storage: Tier.Data,
    NodeType.LdapAd: Tier.Internal,
    NodeType.Sso: Tier.Internal,
    NodeType.Mfa: Tier.Internal,
    NodeType.Iam: Tier.Internal,
    NodeType.CentralOffice: Tier.Dmz,
    NodeType.BaseStation: Tier.External,
    NodeType.Olt: Tier.Dmz,
    NodeType.CustomerPremise: Tier.External,
    NodeType.Idc: Tier.Internal,
    NodeType.PeRouter: Tier.Dmz,
    NodeType.PRouter: Tier.Internal,
    NodeType.MplsNetwork: Tier.Internal,
    NodeType.DedicatedLine: Tier.Dmz,
    NodeType.MetroEthernet: Tier.Dmz,
    NodeType.CorporateInternet: Tier.Dmz,
    NodeType.VpnService: Tier.Internal,
    NodeType.SdWanService: Tier.Dmz,
    NodeType.Private5g: Tier.Internal,
    NodeType.CoreNetwork: Tier.Internal,
    NodeType.Upf: Tier.Internal,
    NodeType.RingNetwork: Tier.Dmz,
    NodeType.User: Tier.External,
    NodeType.Internet: Tier.External,
}

_CATEGORY_MEMBERS: dict[NodeCategory, tuple[NodeType, ...]] = {
    NodeCategory.Security: (
        NodeType.Firewall,
        NodeType.Waf,
        NodeType.IdsIps,
        NodeType.VpnGateway,
        NodeType.Nac,
        NodeType.Dlp,
    ),
    NodeCategory.Network: (
        NodeType.Router,
        NodeType.SwitchL2,
        NodeType.SwitchL3,
        NodeType.LoadBalancer,
        NodeType.SdWan,
        NodeType.Dns,
        NodeType.Cdn,
    ),
    NodeCategory.Compute: (
        NodeType.WebServer,
        NodeType.AppServer,
        NodeType.DbServer,
        NodeType.Container,
        NodeType.Vm,
        NodeType.Kubernetes,
    ),
    NodeCategory.Cloud: (NodeType.AwsVpc, NodeType.AzureVnet, NodeType.GcpNetwork, NodeType.PrivateCloud),
    NodeCategory.Storage: (
        NodeType.SanNas,
        NodeType.ObjectStorage,
        NodeType.Backup,
        NodeType.Cache,
        NodeType.Storage,
    ),
    NodeCategory.Auth: (NodeType.LdapAd, NodeType.Sso, NodeType.Mfa, NodeType.Iam),
    NodeCategory.Telecom: (
        NodeType.CentralOffice,
        NodeType.BaseStation,
        NodeType.Olt,
        NodeType.CustomerPremise,
        NodeType.Idc,
    ),
    NodeCategory.Wan: (
        NodeType.PeRouter,
        NodeType.PRouter,
        NodeType.MplsNetwork,
        NodeType.DedicatedLine,
        NodeType.MetroEthernet,
        NodeType.CorporateInternet,
        NodeType.VpnService,
        NodeType.SdWanService,
        NodeType.Private5g,
        NodeType.CoreNetwork,
        NodeType.Upf,
        NodeType.RingNetwork,
    ),
    NodeCategory.External: (NodeType.User, NodeType.Internet),
    NodeCategory.Zone: (NodeType.Zone,),
}

TYPE_CATEGORIES: dict[NodeType, NodeCategory] = {
    node_type: category for category, members in _CATEGORY_MEMBERS.items() for node_type in members
}

# Renderer node kinds that differ from the type's own wire string.
RENDER_KINDS: dict[NodeType, str] = {
    NodeType.WebServer: "webServer",
    NodeType.AppServer: "appServer",
    NodeType.DbServer: "dbServer",
    NodeType.SanNas: "storage",
    NodeType.ObjectStorage: "storage",
    NodeType.LdapAd: "ldap",
    NodeType.GcpNetwork: "aws-vpc",
    NodeType.PrivateCloud: "aws-vpc",
}

TIER_LABELS: dict[Tier, str] = {
    Tier.External: "외부 (External)",
    Tier.Dmz: "DMZ",
    Tier.Internal: "내부망 (Internal)",
    Tier.Data: "데이터 (Data)",
}


# ─── Classification ──────────────────────────────────────────────────────────


def tier_of(node_type: NodeType | str, zone: str | None = None) -> Tier:
    """Classify a node into a tier.

    A zone hint wins over the type table; the first keyword contained in the
    lower-cased zone decides. Without a matching zone the type table is used,
    and anything unknown lands in ``Tier.Internal``.
    """
    if zone:
        lowered = zone.lower()
        for keyword, tier in ZONE_KEYWORDS:
            if keyword in lowered:
                return tier
    return tier_for_type(node_type)


def tier_for_type(node_type: NodeType | str) -> Tier:
    known = NodeType.parse(node_type)
    if known is None:
        return Tier.default()
    return TYPE_TIERS.get(known, Tier.default())


def tier_rank(tier: Tier) -> int:
    return tier.rank


def category_of(node_type: NodeType | str) -> NodeCategory:
    known = NodeType.parse(node_type)
    if known is None:
        return NodeCategory.External
    return TYPE_CATEGORIES.get(known, NodeCategory.External)


def render_kind(node_type: NodeType | str) -> str:
    known = NodeType.parse(node_type)
    if known is None:
        return node_type.value if isinstance(node_type, NodeType) else str(node_type)
    return RENDER_KINDS.get(known, known.value)


def tier_label(tier: Tier | str) -> str:
    """Display label for a tier; unknown names are returned unchanged."""
    known = Tier.parse(tier)
    if known is None:
        return str(tier)
    return TIER_LABELS[known]
