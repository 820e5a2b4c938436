"""Loading of cluster configuration files."""

from __future__ import annotations

import sys
from typing import Any

import yaml

from kindtool.config import (
    GROUP_NAME,
    Cluster,
    Networking,
    Node,
    PatchJSON6902,
    PortMapping,
    set_defaults_cluster,
    set_defaults_node,
)

_KIND = "Cluster"
_SUPPORTED_VERSIONS = (f"{GROUP_NAME}/v1alpha3",)
_INT32_MIN, _INT32_MAX = -(2**31), 2**31 - 1


def load(path: str = "") -> Cluster:
    """Read a cluster configuration and return it with defaults applied.

    An empty path yields the default configuration; "-" reads standard input.
    A missing file raises OSError; a file that cannot be decoded raises
    ValueError.
    """
    if path:
        if path == "-":
            contents = sys.stdin.read()
        else:
            with open(path, encoding="utf-8") as handle:
                contents = handle.read()
        try:
            cluster = _decode(contents)
        except ValueError as err:
            raise ValueError(f"decoding failure: {err}") from err
    else:
        cluster = Cluster()

    set_defaults_cluster(cluster)
    for node in cluster.nodes:
        set_defaults_node(node)
    return cluster


def _decode(contents: str) -> Cluster:
    try:
        document = yaml.safe_load(contents)
    except yaml.YAMLError as err:
        raise ValueError(f"error converting YAML to JSON: {err}") from None
    if not isinstance(document, dict):
        raise ValueError("Object 'Kind' is missing in configuration")

    kind = document.get("kind")
    if not kind:
        raise ValueError("Object 'Kind' is missing in configuration")
    api_version = document.get("apiVersion") or ""
    if api_version not in _SUPPORTED_VERSIONS:
        raise ValueError(
            f'no kind "{kind}" is registered for version "{api_version}"'
        )
    if kind != _KIND:
        raise ValueError(
            f'no kind "{kind}" is registered for version "{api_version}"'
        )

    networking = _mapping(document, "networking", "")
    return Cluster(
        nodes=[_decode_node(item, f"nodes[{i}].") for i, item in enumerate(_items(document, "nodes", ""))],
        networking=Networking(
            ip_family=_get(networking, "ipFamily", str, "", "networking."),
            api_server_port=_int32(networking, "apiServerPort", "networking."),
            api_server_address=_get(networking, "apiServerAddress", str, "", "networking."),
            pod_subnet=_get(networking, "podSubnet", str, "", "networking."),
            service_subnet=_get(networking, "serviceSubnet", str, "", "networking."),
            disable_default_cni=_get(networking, "disableDefaultCNI", bool, False, "networking."),
        ),
        kubeadm_config_patches=[
            _expect(item, str, f"kubeadmConfigPatches[{i}]")
            for i, item in enumerate(_items(document, "kubeadmConfigPatches", ""))
        ],
        kubeadm_config_patches_json6902=[
            _decode_patch(item, f"kubeadmConfigPatchesJson6902[{i}].")
            for i, item in enumerate(_items(document, "kubeadmConfigPatchesJson6902", ""))
        ],
    )


def _decode_node(data: Any, where: str) -> Node:
    data = _expect(data, dict, where.rstrip("."))
    return Node(
        role=_get(data, "role", str, "", where),
        image=_get(data, "image", str, "", where),
        extra_mounts=[
            _decode_mount(item, f"{where}extraMounts[{i}].")
            for i, item in enumerate(_items(data, "extraMounts", where))
        ],
        extra_port_mappings=[
            _decode_port_mapping(item, f"{where}extraPortMappings[{i}].")
            for i, item in enumerate(_items(data, "extraPortMappings", where))
        ],
    )


def _decode_mount(data: Any, where: str) -> dict[str, Any]:
    data = _expect(data, dict, where.rstrip("."))
    return {
        "container_path": _get(data, "containerPath", str, "", where),
        "host_path": _get(data, "hostPath", str, "", where),
        "read_only": _get(data, "readOnly", bool, False, where),
        "selinux_relabel": _get(data, "selinuxRelabel", bool, False, where),
        "propagation": _get(data, "propagation", str, "", where),
    }


def _decode_port_mapping(data: Any, where: str) -> PortMapping:
    data = _expect(data, dict, where.rstrip("."))
    return PortMapping(
        container_port=_int32(data, "containerPort", where),
        host_port=_int32(data, "hostPort", where),
        listen_address=_get(data, "listenAddress", str, "", where),
    )


def _decode_patch(data: Any, where: str) -> PatchJSON6902:
    data = _expect(data, dict, where.rstrip("."))
    return PatchJSON6902(
        group=_get(data, "group", str, "", where),
        version=_get(data, "version", str, "", where),
        kind=_get(data, "kind", str, "", where),
        name=_get(data, "name", str, "", where),
        namespace=_get(data, "namespace", str, "", where),
        patch=_get(data, "patch", str, "", where),
    )


def _matches(value: Any, expected: type) -> bool:
    if expected is int:
        return isinstance(value, int) and not isinstance(value, bool)
    return isinstance(value, expected)


def _expect(value: Any, expected: type, where: str) -> Any:
    if not _matches(value, expected):
        raise ValueError(
            f"{where}: expected {expected.__name__}, got {type(value).__name__}"
        )
    return value


def _get(data: dict[str, Any], key: str, expected: type, default: Any, where: str) -> Any:
    value = data.get(key)
    if value is None:
        return default
    return _expect(value, expected, f"{where}{key}")


def _int32(data: dict[str, Any], key: str, where: str) -> int:
    value = _get(data, key, int, 0, where)
    if not _INT32_MIN <= value <= _INT32_MAX:
        raise ValueError(f"{where}{key}: value {value} overflows int32")
    return value


def _mapping(data: dict[str, Any], key: str, where: str) -> dict[str, Any]:
    return _get(data, key, dict, {}, where)


def _items(data: dict[str, Any], key: str, where: str) -> list[Any]:
    return _get(data, key, list, [], where)