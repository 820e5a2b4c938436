"""The in-memory cluster configuration: types, defaulting and validation."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from kindtool.errors import Errors

GROUP_NAME = "kind.sigs.k8s.io"
"""API group of the cluster configuration."""

INTERNAL_VERSION = "__internal"
"""Version name used for the in-memory representation."""

DEFAULT_IMAGE = "kindest/node:latest"
"""Node image used when a node does not name one."""


class NodeRole(str, Enum):
    """Role of a node in the cluster."""

    CONTROL_PLANE = "control-plane"
    WORKER = "worker"

    def __str__(self) -> str:
        return self.value


class ClusterIPFamily(str, Enum):
    """Network model of the cluster."""

    IPV4 = "ipv4"
    IPV6 = "ipv6"

    def __str__(self) -> str:
        return self.value


@dataclass
class PortMapping:
    """A container port published on a host port."""

    container_port: int = 0
    host_port: int = 0
    listen_address: str = ""


@dataclass
class Node:
    """A node of the cluster, provisioned as one container."""

    role: str = ""
    image: str = ""
    extra_mounts: list[Any] = field(default_factory=list)
    extra_port_mappings: list[PortMapping] = field(default_factory=list)

    def validate(self) -> None:
        """Raise Errors with one entry per problem with this node."""
        errs: list[Exception] = []
        if self.role not in (NodeRole.CONTROL_PLANE, NodeRole.WORKER):
            errs.append(ValueError(f'"{_text(self.role)}" is not a valid node role'))
        if not self.image:
            errs.append(ValueError("image is a required field"))
        for mapping in self.extra_port_mappings:
            try:
                _validate_port(mapping.host_port)
            except ValueError as err:
                errs.append(ValueError(f"invalid hostPort: {err}"))
            try:
                _validate_port(mapping.container_port)
            except ValueError as err:
                errs.append(ValueError(f"invalid containerPort: {err}"))
        if errs:
            raise Errors(errs)


@dataclass
class Networking:
    """Cluster wide network settings."""

    ip_family: str = ""
    api_server_port: int = 0
    api_server_address: str = ""
    pod_subnet: str = ""
    service_subnet: str = ""
    disable_default_cni: bool = False


@dataclass
class PatchJSON6902:
    """An inline JSON 6902 patch and the resource it targets."""

    group: str = ""
    version: str = ""
    kind: str = ""
    name: str = ""
    namespace: str = ""
    patch: str = ""


@dataclass
class Cluster:
    """The whole cluster configuration."""

    kind: str = ""
    api_version: str = ""
    nodes: list[Node] = field(default_factory=list)
    networking: Networking = field(default_factory=Networking)
    kubeadm_config_patches: list[str] = field(default_factory=list)
    kubeadm_config_patches_json6902: list[PatchJSON6902] = field(default_factory=list)

    def validate(self) -> None:
        """Raise Errors with one entry per problem with the configuration."""
        errs: list[Exception] = []
        net = self.networking

        # a zero port means a random one is picked at runtime
        if net.api_server_port != 0:
            try:
                _validate_port(net.api_server_port)
            except ValueError as err:
                errs.append(ValueError(f"invalid apiServerPort: {err}"))

        for label, value in (("podSubnet", net.pod_subnet), ("serviceSubnet", net.service_subnet)):
            try:
                _parse_cidr(value)
            except ValueError as err:
                errs.append(ValueError(f"invalid {label}: {err}"))

        control_planes = 0
        for index, node in enumerate(self.nodes):
            try:
                node.validate()
            except Errors as err:
                errs.append(ValueError(f"invalid configuration for node {index}: {err}"))
            if node.role == NodeRole.CONTROL_PLANE:
                control_planes += 1

        if control_planes < 1:
            errs.append(ValueError(f"must have at least one {NodeRole.CONTROL_PLANE.value} node"))

        if errs:
            raise Errors(errs)


def set_defaults_cluster(obj: Cluster) -> None:
    """Fill in unset cluster fields with their defaults, in place."""
    if not obj.nodes:
        obj.nodes = [Node(image=DEFAULT_IMAGE, role=NodeRole.CONTROL_PLANE.value)]
    net = obj.networking
    if not net.ip_family:
        net.ip_family = ClusterIPFamily.IPV4.value
    ipv6 = net.ip_family == ClusterIPFamily.IPV6
    if not net.api_server_address:
        net.api_server_address = "::1" if ipv6 else "127.0.0.1"
    if not net.pod_subnet:
        net.pod_subnet = "fd00:10:244::/64" if ipv6 else "10.244.0.0/16"
    if not net.service_subnet:
        net.service_subnet = "fd00:10:96::/112" if ipv6 else "10.96.0.0/12"


def set_defaults_node(obj: Node) -> None:
    """Fill in unset node fields with their defaults, in place."""
    if not obj.image:
        obj.image = DEFAULT_IMAGE
    if not obj.role:
        obj.role = NodeRole.CONTROL_PLANE.value


def _text(value: Any) -> str:
    return value.value if isinstance(value, Enum) else str(value)


def _validate_port(port: int) -> None:
    if port < 0 or port > 65535:
        raise ValueError(f"invalid port number: {port}")


def _parse_cidr(value: str) -> ipaddress.IPv4Network | ipaddress.IPv6Network:
    address, sep, prefix = value.partition("/")
    if not sep or not prefix.isdigit() or not address:
        raise ValueError(f"invalid CIDR address: {value}")
    try:
        return ipaddress.ip_network(f"{address}/{int(prefix)}", strict=False)
    except ValueError:
        raise ValueError(f"invalid CIDR address: {value}") from None