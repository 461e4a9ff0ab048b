"""Exposure-object names derived from an LRP name.

Both prefixes share "cf-" and differ right after it, so a routable name can
never equal a headless name, and each function is injective in the LRP name.
"""
from __future__ import annotations


ROUTABLE_PREFIX = "cf-svc-"
HEADLESS_PREFIX = "cf-hsvc-"

# Kubernetes Service names are DNS-1035 labels (max 63 chars).
MAX_SERVICE_NAME_LEN = 63
MAX_LRP_NAME_LEN = MAX_SERVICE_NAME_LEN - max(len(ROUTABLE_PREFIX), len(HEADLESS_PREFIX))


def routable_service_name(lrp_name: str) -> str:
    return f"{ROUTABLE_PREFIX}{lrp_name}"


def headless_service_name(lrp_name: str) -> str:
    return f"{HEADLESS_PREFIX}{lrp_name}"
