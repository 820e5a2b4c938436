"""Cluster configuration, node planning, load balancer config and helpers for container-based Kubernetes clusters."""

__version__ = "0.1.0"