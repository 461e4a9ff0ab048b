from __future__ import annotations

import json
import re
from typing import Protocol

from .api_models import DesireLRPRequest
from .errors import ConversionError
from .models import APPLICATION_URIS, LAST_UPDATED, LRP, PROCESS_GUID
from .naming import MAX_LRP_NAME_LEN


# The LRP name ends up as a Deployment name, a label value and the tail of
# both Service names.
LRP_NAME_RE = re.compile(r"^[a-z0-9]([a-z0-9\-]*[a-z0-9])?$")


def validate_lrp_name(name: str) -> None:
    if not LRP_NAME_RE.match(name):
        raise ConversionError(
            f"Invalid process guid {name!r}. Use lowercase letters/numbers and hyphen, "
            "starting and ending with a letter or number."
        )
    if len(name) > MAX_LRP_NAME_LEN:
        raise ConversionError(f"Process guid {name!r} is longer than {MAX_LRP_NAME_LEN} chars.")


class Converter(Protocol):
    def convert(self, request: DesireLRPRequest) -> LRP:
        """Build an LRP from a desire request; raise ConversionError on bad input."""


class DesireLRPConverter:
    """Turns a platform desire request into an LRP. Pure; no I/O."""

    def convert(self, request: DesireLRPRequest) -> LRP:
        validate_lrp_name(request.process_guid)
        if not request.docker_image.strip():
            raise ConversionError("docker_image must not be empty.")

        return LRP(
            name=request.process_guid,
            image=request.docker_image,
            command=list(request.start_command),
            env=dict(request.environment),
            target_instances=request.num_instances,
            metadata={
                PROCESS_GUID: request.process_guid,
                LAST_UPDATED: request.last_updated,
                APPLICATION_URIS: json.dumps(request.routes),
            },
        )
