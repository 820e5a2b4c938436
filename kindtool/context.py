"""The shared cluster context: the cluster name and where its files live."""

from __future__ import annotations

import os
import re

from kindtool.env import home_dir

DEFAULT_CLUSTER_NAME = "kind"
"""Name used when no cluster name is given."""

# like valid container names, but relaxed a little since the name is
# prefixed and suffixed when naming node containers
VALID_NAME_RE = re.compile(r"[a-zA-Z0-9_.-]+")
_VALID_NAME_PATTERN = "^[a-zA-Z0-9_.-]+$"


class ClusterContext:
    """Identifies one cluster by name."""

    def __init__(self, name: str = "") -> None:
        self._name = name or DEFAULT_CLUSTER_NAME

    @property
    def name(self) -> str:
        """The cluster's name."""
        return self._name

    def __repr__(self) -> str:
        return f"ClusterContext(name={self._name!r})"

    def validate(self) -> None:
        """Raise ValueError if the cluster name is not usable for new resources."""
        if VALID_NAME_RE.fullmatch(self._name) is None:
            raise ValueError(
                f"'{self._name}' is not a valid cluster name, "
                f"cluster names must match `{_VALID_NAME_PATTERN}`"
            )

    def kubeconfig_path(self) -> str:
        """Return the path where this cluster's kubeconfig is written."""
        config_dir = os.path.join(home_dir(), ".kube")
        return os.path.join(config_dir, f"kind-config-{self._name}")