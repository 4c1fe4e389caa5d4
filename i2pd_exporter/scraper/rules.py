"""The extraction rule table.

Each :class:`ExtractionRule` locates one field of the i2pd web console main
page with a regular expression.  When the console layout changes, edit the
table; the extractor itself stays untouched.

WARNING: HTML scraping is fragile and may break with i2pd updates.
"""

from __future__ import annotations

import re
from typing import Tuple

from i2pd_exporter.scraper.models import (
    ExtractionRule,
    LabelSpec,
    MetricKind,
    ValueKind,
)

COUNTER = MetricKind.COUNTER
GAUGE = MetricKind.GAUGE


def service_label(text: str) -> str:
    """``"HTTP Proxy"`` → ``"http_proxy"``."""
    return text.strip().lower().replace(" ", "_")


# ---------------------------------------------------------------------------
# Pattern builders
# ---------------------------------------------------------------------------

def _field(title: str, value: str = r"[^<]+") -> re.Pattern:
    """Match ``<b>{title}:</b> {value}`` and capture the value."""
    return re.compile(rf"<b>{re.escape(title)}:</b>\s*(?P<value>{value})")


def _traffic_total(title: str) -> re.Pattern:
    # "<b>Received:</b> 1.23 GiB (12.34 KiB/s)<br>"
    return _field(title, r"[^<(]+")


def _traffic_rate(title: str) -> re.Pattern:
    return re.compile(
        rf"<b>{re.escape(title)}:</b>[^<(]*\((?P<value>[^)<]+)\)"
    )


def _table(css_class: str) -> re.Pattern:
    return re.compile(
        rf"<table class=[\"']{css_class}[\"']>.*?</table>", re.DOTALL
    )


_EXTADDR_SCOPE = re.compile(
    r"<b>Our external address:</b>.*?<table class=[\"']extaddr[\"']>.*?</table>",
    re.DOTALL,
)
_EXTADDR_ROW = re.compile(
    r"<tr>\s*<td>(?P<protocol>[^<]+)</td>\s*<td>(?P<address>[^<]+)</td>\s*</tr>"
)
_SERVICE_ROW = re.compile(
    r"<tr>\s*<td>(?P<service>[^<]+)</td>\s*"
    r"<td class=[\"'](?P<value>enabled|disabled)[\"']>[^<]*</td>\s*</tr>"
)


def _traffic_rules(direction: str, title: str, help_noun: str) -> Tuple[ExtractionRule, ExtractionRule]:
    total = ExtractionRule(
        name=f"data_{direction}_bytes",
        metric=f"i2p_data_{direction}_bytes",
        kind=COUNTER,
        help=f"Total {help_noun} in bytes",
        pattern=_traffic_total(title),
        value=ValueKind.BYTE_SIZE,
    )
    rate = ExtractionRule(
        name=f"data_rate_{direction}",
        metric="i2p_data_rate_bytes_per_second",
        kind=GAUGE,
        help="Data transfer rate in bytes/second",
        pattern=_traffic_rate(title),
        value=ValueKind.BYTE_RATE,
        const_labels=(("direction", direction),),
    )
    return total, rate


_received_total, _received_rate = _traffic_rules("received", "Received", "data received")
_sent_total, _sent_rate = _traffic_rules("sent", "Sent", "data sent")
_transit_total, _transit_rate = _traffic_rules("transit", "Transit", "transit data")


# ---------------------------------------------------------------------------
# The table
# ---------------------------------------------------------------------------

RULES: Tuple[ExtractionRule, ...] = (
    ExtractionRule(
        name="network_status_v4",
        metric="i2p_network_status_v4",
        kind=GAUGE,
        help="IPv4 network status as string",
        pattern=_field("Network status"),
        value=ValueKind.STATUS,
        labels=(LabelSpec("status", "value"),),
    ),
    ExtractionRule(
        name="network_status_v6",
        metric="i2p_network_status_v6",
        kind=GAUGE,
        help="IPv6 network status as string",
        pattern=_field("Network status v6"),
        value=ValueKind.STATUS,
        labels=(LabelSpec("status", "value"),),
    ),
    ExtractionRule(
        name="tunnel_creation_success_rate",
        metric="i2p_tunnel_creation_success_rate",
        kind=GAUGE,
        help="Percentage of successful tunnel creations",
        pattern=_field("Tunnel creation success rate"),
        value=ValueKind.PERCENTAGE,
    ),
    _received_total,
    _sent_total,
    _transit_total,
    _received_rate,
    _sent_rate,
    _transit_rate,
    ExtractionRule(
        name="router_capabilities",
        metric="i2p_router_capabilities",
        kind=GAUGE,
        help="Router capabilities",
        pattern=re.compile(r"<b>Router Caps:</b>\s*(?P<caps>[A-Za-z0-9~]+)\s*<br>"),
        value=ValueKind.CONSTANT,
        value_group=None,
        labels=(LabelSpec("capabilities", "caps"),),
    ),
    ExtractionRule(
        name="external_address",
        metric="i2p_external_address",
        kind=GAUGE,
        help="External addresses the router is reachable at",
        pattern=_EXTADDR_ROW,
        value=ValueKind.CONSTANT,
        value_group=None,
        labels=(LabelSpec("protocol", "protocol"), LabelSpec("address", "address")),
        multi=True,
        scope=_EXTADDR_SCOPE,
    ),
    ExtractionRule(
        name="network_routers",
        metric="i2p_network_routers",
        kind=GAUGE,
        help="Count of routers in the network",
        pattern=_field("Routers", r"[^<\s]+"),
        value=ValueKind.COUNT,
    ),
    ExtractionRule(
        name="network_floodfills",
        metric="i2p_network_floodfills",
        kind=GAUGE,
        help="Count of floodfill routers in the network",
        pattern=_field("Floodfills", r"[^<\s]+"),
        value=ValueKind.COUNT,
    ),
    ExtractionRule(
        name="network_leasesets",
        metric="i2p_network_leasesets",
        kind=GAUGE,
        help="Count of leasesets in the network",
        pattern=_field("LeaseSets", r"[^<\s]+"),
        value=ValueKind.COUNT,
    ),
    ExtractionRule(
        name="client_tunnels",
        metric="i2p_client_tunnels",
        kind=GAUGE,
        help="Count of client tunnels",
        pattern=_field("Client Tunnels", r"[^<\s]+"),
        value=ValueKind.COUNT,
    ),
    ExtractionRule(
        name="transit_tunnels",
        metric="i2p_transit_tunnels",
        kind=GAUGE,
        help="Count of transit tunnels",
        pattern=_field("Transit Tunnels", r"[^<\s]+"),
        value=ValueKind.COUNT,
    ),
    ExtractionRule(
        name="service_status",
        metric="i2p_service_status",
        kind=GAUGE,
        help="Status of i2pd services (1=enabled, 0=disabled)",
        pattern=_SERVICE_ROW,
        value=ValueKind.ENABLED,
        labels=(LabelSpec("service", "service", service_label),),
        multi=True,
        scope=_table("services"),
    ),
)
