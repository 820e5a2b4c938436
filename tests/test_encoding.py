import io
import sys

import pytest

from kindtool.config import DEFAULT_IMAGE
from kindtool.encoding import load

VALID_MINIMAL = """\
kind: Cluster
apiVersion: kind.sigs.k8s.io/v1alpha3
"""

VALID_TWO_NODES = """\
kind: Cluster
apiVersion: kind.sigs.k8s.io/v1alpha3
nodes:
- role: control-plane
- role: worker
"""

VALID_FULL_HA = """\
kind: Cluster
apiVersion: kind.sigs.k8s.io/v1alpha3
networking:
  apiServerAddress: 127.0.0.1
  apiServerPort: 6443
nodes:
- role: control-plane
- role: control-plane
- role: control-plane
- role: worker
- role: worker
- role: worker
"""

INVALID_APIVERSION = """\
kind: Cluster
apiVersion: kind.sigs.k8s.io/v1alpha0
"""

INVALID_KIND = """\
kind: NotACluster
apiVersion: kind.sigs.k8s.io/v1alpha3
"""

INVALID_YAML = """\
kind: Cluster
apiVersion: kind.sigs.k8s.io/v1alpha3
nodes:
- role: control-plane
  image: [unterminated
"""


def _write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_no_config_returns_defaults():
    cluster = load("")
    assert len(cluster.nodes) == 1
    assert cluster.nodes[0].role == "control-plane"
    assert cluster.nodes[0].image == DEFAULT_IMAGE
    assert cluster.networking.ip_family == "ipv4"
    assert cluster.networking.api_server_address == "127.0.0.1"
    assert cluster.networking.pod_subnet == "10.244.0.0/16"
    assert cluster.networking.service_subnet == "10.96.0.0/12"


def test_v1alpha3_minimal(tmp_path):
    cluster = load(_write(tmp_path, "valid-minimal.yaml", VALID_MINIMAL))
    assert [n.role for n in cluster.nodes] == ["control-plane"]
    cluster.validate()


def test_v1alpha3_two_nodes(tmp_path):
    cluster = load(_write(tmp_path, "valid-minimal-two-nodes.yaml", VALID_TWO_NODES))
    assert [n.role for n in cluster.nodes] == ["control-plane", "worker"]
    assert all(n.image == DEFAULT_IMAGE for n in cluster.nodes)


def test_v1alpha3_full_ha(tmp_path):
    cluster = load(_write(tmp_path, "valid-full-ha.yaml", VALID_FULL_HA))
    roles = [n.role for n in cluster.nodes]
    assert roles.count("control-plane") == 3
    assert roles.count("worker") == 3
    assert cluster.networking.api_server_port == 6443
    cluster.validate()


def test_invalid_path(tmp_path):
    with pytest.raises(OSError):
        load(str(tmp_path / "not-a-file.bogus"))


@pytest.mark.parametrize(
    "name,text",
    [
        ("invalid-apiversion.yaml", INVALID_APIVERSION),
        ("invalid-kind.yaml", INVALID_KIND),
        ("invalid-yaml.yaml", INVALID_YAML),
    ],
)
def test_invalid_documents(tmp_path, name, text):
    with pytest.raises(ValueError, match="decoding failure"):
        load(_write(tmp_path, name, text))


def test_missing_kind(tmp_path):
    path = _write(tmp_path, "nokind.yaml", "apiVersion: kind.sigs.k8s.io/v1alpha3\n")
    with pytest.raises(ValueError, match="Kind"):
        load(path)


def test_wrong_field_type(tmp_path):
    text = VALID_MINIMAL + "networking:\n  apiServerPort: notaport\n"
    with pytest.raises(ValueError, match="apiServerPort"):
        load(_write(tmp_path, "badtype.yaml", text))


def test_reads_stdin(monkeypatch):
    monkeypatch.setattr(sys, "stdin", io.StringIO(VALID_TWO_NODES))
    cluster = load("-")
    assert [n.role for n in cluster.nodes] == ["control-plane", "worker"]


def test_ipv6_defaults(tmp_path):
    text = VALID_MINIMAL + "networking:\n  ipFamily: ipv6\n"
    cluster = load(_write(tmp_path, "ipv6.yaml", text))
    assert cluster.networking.api_server_address == "::1"
    assert cluster.networking.pod_subnet == "fd00:10:244::/64"
    assert cluster.networking.service_subnet == "fd00:10:96::/112"


def test_node_details_and_patches(tmp_path):
    text = VALID_MINIMAL + (
        "nodes:\n"
        "- role: worker\n"
        "  image: foo:bar\n"
        "  extraPortMappings:\n"
        "  - containerPort: 80\n"
        "    hostPort: 8080\n"
        "  extraMounts:\n"
        "  - containerPath: /data\n"
        "    hostPath: /tmp/data\n"
        "    readOnly: true\n"
        "kubeadmConfigPatches:\n"
        "- |\n"
        "  apiVersion: kubeadm.k8s.io/v1beta2\n"
        "kubeadmConfigPatchesJson6902:\n"
        "- group: kubeadm.k8s.io\n"
        "  version: v1beta2\n"
        "  kind: ClusterConfiguration\n"
        "  patch: '[]'\n"
    )
    cluster = load(_write(tmp_path, "details.yaml", text))
    node = cluster.nodes[0]
    assert node.image == "foo:bar"
    assert node.extra_port_mappings[0].container_port == 80
    assert node.extra_port_mappings[0].host_port == 8080
    assert node.extra_mounts[0]["host_path"] == "/tmp/data"
    assert node.extra_mounts[0]["read_only"] is True
    assert cluster.kubeadm_config_patches == ["apiVersion: kubeadm.k8s.io/v1beta2\n"]
    patch = cluster.kubeadm_config_patches_json6902[0]
    assert (patch.group, patch.version, patch.kind, patch.patch) == (
        "kubeadm.k8s.io",
        "v1beta2",
        "ClusterConfiguration",
        "[]",
    )