"""Configuration of the external control-plane load balancer."""

from __future__ import annotations

from dataclasses import dataclass, field

CONTROL_PLANE_PORT = 6443
"""Port the control plane listens on at the load balancer node."""

IMAGE = "kindest/haproxy:2.0.0-alpine"
"""Load balancer image:tag."""

CONFIG_PATH = "/usr/local/etc/haproxy/haproxy.cfg"
"""Path of the config file inside the image."""

_HEADER = """# generated by kind
global
  log /dev/log local0
  log /dev/log local1 notice
  daemon

defaults
  log global
  mode tcp
  option dontlognull
  # TODO: tune these
  timeout connect 5000
  timeout client 50000
  timeout server 50000

frontend control-plane
"""


@dataclass
class ConfigData:
    """Values supplied to the load balancer configuration."""

    control_plane_port: int = CONTROL_PLANE_PORT
    backend_servers: dict[str, str] = field(default_factory=dict)
    ipv6: bool = False


def render_config(data: ConfigData) -> str:
    """Render the haproxy configuration for data.

    Backend servers are listed in order of their names.
    """
    port = data.control_plane_port
    ipv6_bind = f"bind :::{port};" if data.ipv6 else ""
    servers = "".join(
        f"\n  server {name} {address} check check-ssl verify none"
        for name, address in sorted(data.backend_servers.items())
    )
    return (
        _HEADER
        + f"  bind *:{port}\n"
        + f"  {ipv6_bind}\n"
        + "  default_backend kube-apiservers\n"
        + "\n"
        + "backend kube-apiservers\n"
        + "  option httpchk GET /healthz\n"
        + "  # TODO: we should be verifying (!)\n"
        + f"  {servers}\n"
    )