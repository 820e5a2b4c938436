"""Planning of the node containers that make up a cluster."""

from __future__ import annotations

import copy
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from kindtool import loadbalancer
from kindtool.config import Cluster, ClusterIPFamily, Node, PortMapping

EXTERNAL_LOAD_BALANCER_ROLE = "external-load-balancer"
EXTERNAL_ETCD_ROLE = "external-etcd"
CONTROL_PLANE_ROLE = "control-plane"
WORKER_ROLE = "worker"

DEFAULT_ROLE_ORDER: tuple[str, ...] = (
    EXTERNAL_LOAD_BALANCER_ROLE,
    EXTERNAL_ETCD_ROLE,
    CONTROL_PLANE_ROLE,
    WORKER_ROLE,
)
"""Provisioning order of nodes by role."""

_UNKNOWN_ROLE_ORDER = 10000


@dataclass
class NodeSpec:
    """A node to create, described purely as a container."""

    name: str
    role: str
    image: str
    extra_mounts: list[Any] = field(default_factory=list)
    extra_port_mappings: list[PortMapping] = field(default_factory=list)
    api_server_port: int = 0
    api_server_address: str = ""
    ipv6: bool = False


def _role_text(role: Any) -> str:
    return role.value if isinstance(role, Enum) else str(role)


def _make_role_to_order(role_order: Iterable[str]) -> Callable[[str], int]:
    order = {role: index for index, role in enumerate(role_order)}
    return lambda role: order.get(role, _UNKNOWN_ROLE_ORDER)


def sort_nodes(nodes: list[Node], role_order: Sequence[str]) -> None:
    """Stably sort nodes in place by the position of their role in role_order.

    Roles not in role_order go last.
    """
    role_to_order = _make_role_to_order(role_order)
    nodes.sort(key=lambda node: role_to_order(_role_text(node.role)))


def make_node_namer(cluster_name: str) -> Callable[[str], str]:
    """Return a function naming nodes by cluster name, role and a counter.

    The first node of a role has no number; later ones are numbered from 2.
    """
    counter: dict[str, int] = {}

    def name_node(role: str) -> str:
        previous = counter.get(role)
        count = 1 if previous is None else previous + 1
        suffix = "" if previous is None else str(count)
        counter[role] = count
        return f"{cluster_name}-{role}{suffix}"

    return name_node


def nodes_to_create(cfg: Cluster, cluster_name: str) -> list[NodeSpec]:
    """Return the node containers needed for cfg, in provisioning order.

    With more than one control plane an external load balancer is added.
    """
    name_node = make_node_namer(cluster_name)
    config_nodes = copy.deepcopy(cfg.nodes)
    sort_nodes(config_nodes, DEFAULT_ROLE_ORDER)

    control_planes = [n for n in config_nodes if _role_text(n.role) == CONTROL_PLANE_ROLE]
    is_ha = len(control_planes) > 1
    net = cfg.networking
    ipv6 = _role_text(net.ip_family) == ClusterIPFamily.IPV6.value

    desired: list[NodeSpec] = []
    for node in config_nodes:
        role = _role_text(node.role)
        port, address = net.api_server_port, net.api_server_address
        # with several control planes only the load balancer is exposed
        if is_ha and role != EXTERNAL_LOAD_BALANCER_ROLE:
            port, address = 0, "127.0.0.1"
        desired.append(
            NodeSpec(
                name=name_node(role),
                role=role,
                image=node.image,
                extra_mounts=node.extra_mounts,
                extra_port_mappings=node.extra_port_mappings,
                api_server_port=port,
                api_server_address=address,
                ipv6=ipv6,
            )
        )

    if is_ha:
        desired.append(
            NodeSpec(
                name=name_node(EXTERNAL_LOAD_BALANCER_ROLE),
                role=EXTERNAL_LOAD_BALANCER_ROLE,
                image=loadbalancer.IMAGE,
                api_server_port=net.api_server_port,
                api_server_address=net.api_server_address,
                ipv6=ipv6,
            )
        )
    return desired


def required_images(cfg: Cluster) -> list[str]:
    """Return the distinct node images named by cfg, sorted."""
    return sorted({node.image for node in cfg.nodes})