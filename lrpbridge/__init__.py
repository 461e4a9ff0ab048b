"""LRP bridge.

Desired-state bridge between a platform's long-running process (LRP) model
and Kubernetes:
 - desire / update / stop LRPs as Deployments
 - keep a routable and a headless Service per LRP
 - translate observed Deployments back into platform status views

The implementation is intentionally small so it can be audited and explained.
"""
