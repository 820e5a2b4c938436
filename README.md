# kindtool

A library of building blocks for local Kubernetes clusters whose nodes are
containers. It covers these tasks:

- Describe a cluster and fill in its defaults.
- Validate the cluster description.
- Load the description from YAML.
- Plan the node containers.
- Render the load balancer configuration.
- Some helpers for files, concurrency, terminal progress and log archives.

## Installation

```
pip install kindtool
```

## Cluster configuration

The cluster types live in `kindtool.config`:

- `Cluster`
- `Node`
- `Networking`
- `PortMapping`
- `PatchJSON6902`
- The enums `NodeRole` and `ClusterIPFamily`

Two functions fill in defaults, in place:

- `set_defaults_cluster(cluster)` does the following:
  - It adds one control-plane node when the cluster has none.
  - It sets the IP family to `ipv4`.
  - It sets the API server address to `127.0.0.1`, or `::1` for `ipv6`.
  - It sets the pod subnet to `10.244.0.0/16`, or `fd00:10:244::/64` for `ipv6`.
  - It sets the service subnet to `10.96.0.0/12`, or `fd00:10:96::/112` for `ipv6`.
- `set_defaults_node(node)` fills in the image (`kindest/node:latest`) and the role (`control-plane`).

```python
from kindtool.config import Cluster, Node, NodeRole, set_defaults_cluster, set_defaults_node

cluster = Cluster(nodes=[Node(role=NodeRole.CONTROL_PLANE), Node(role=NodeRole.WORKER)])
set_defaults_cluster(cluster)
for node in cluster.nodes:
    set_defaults_node(node)
cluster.validate()
```

`Cluster.validate()` and `Node.validate()` raise `kindtool.errors.Errors` when
the configuration has problems. `Errors` is an exception with one entry per
problem. It can be iterated and has a length. `kindtool.errors.flatten`
collapses nested `Errors` into one.

Validation checks these things:

- Ports are in the range 0–65535.
- The pod and service subnets are CIDRs.
- Every node has a known role and an image.
- There is at least one control-plane node.

### Loading from YAML

`kindtool.encoding.load(path)` reads a config file with `apiVersion:
kind.sigs.k8s.io/v1alpha3` and `kind: Cluster`, and returns a `Cluster` with
defaults applied.

- An empty path gives the default single-node cluster.
- `"-"` reads from standard input.
- A missing file raises `OSError`.
- Malformed YAML, or an unknown `kind` or `apiVersion`, raises `ValueError`.

## Planning nodes

`kindtool.provisioning.nodes_to_create(cfg, cluster_name)` returns a list of
`NodeSpec` objects in provisioning order:

- Nodes are ordered by role: external load balancer, external etcd, control-plane, worker. Unknown roles come last.
- Each node is named `<cluster>-<role>`. The second and later nodes of a role get a number from 2 upwards, for example `demo-worker`, `demo-worker2`.
- With more than one control-plane node, an external load balancer node is added. Only that node keeps the configured API server address and port.

Related functions:

- `sort_nodes(nodes, role_order)` sorts nodes by role.
- `make_node_namer(cluster_name)` returns the naming function.
- `required_images(cfg)` returns the distinct node images, sorted.

## Load balancer configuration

```python
from kindtool.loadbalancer import ConfigData, render_config

text = render_config(ConfigData(
    control_plane_port=6443,
    backend_servers={"demo-control-plane": "172.17.0.2:6443"},
))
```

The module also defines these constants:

- `CONTROL_PLANE_PORT`
- `IMAGE`
- `CONFIG_PATH`

## Other utilities

| Module | What it provides |
| --- | --- |
| `kindtool.context` | `ClusterContext`: defaults the name to `kind`, validates names against `^[a-zA-Z0-9_.-]+$`, and gives `kubeconfig_path()` (`~/.kube/kind-config-<name>`). |
| `kindtool.concurrent` | `until_error(funcs)` raises the first failure among callables run in threads. `coalesce(*funcs)` waits for all of them, then raises the single failure or an `Errors` when there are several. |
| `kindtool.fs` | `copy` copies recursively, dereferencing symlinks and keeping modes. Also `copy_file` and `temp_dir`. |
| `kindtool.status` | `Status`: progress lines with a spinner on terminals, and `StatusFriendlyWriter` to keep other output from colliding with the spinner. Also `is_terminal` and `levels_string`. |
| `kindtool.spinner` | `Spinner`, the terminal loading spinner. |
| `kindtool.logarchive` | `untar(stream, dir)` unpacks regular files and directories from a tar stream. Other entry types are logged and skipped. |
| `kindtool.env` | `home_dir()` and `get_arch()`. `get_arch()` raises `RuntimeError` on an unsupported architecture. |

## What it does not do

The package has no command-line tool. It does not talk to a container runtime,
so it does not do any of these:

- Create, list or delete node containers.
- Pull images.
- Run kubeadm.
- Install networking or storage.
- Collect logs from nodes.

It plans the nodes and produces configuration. Carrying the plan out is left
to the caller.