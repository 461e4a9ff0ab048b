from __future__ import annotations

from pydantic import BaseModel, Field


class DesireLRPRequest(BaseModel):
    process_guid: str = Field(..., description="Platform process GUID; becomes the LRP name")
    docker_image: str = Field(..., description="Docker image (name:tag)")
    start_command: list[str] = Field(default_factory=list)
    environment: dict[str, str] = Field(default_factory=dict)
    num_instances: int = Field(1, ge=0)
    last_updated: str = Field("", description="Opaque token, round-tripped verbatim")
    routes: list[str] = Field(default_factory=list, description="Externally routable URIs")


class DesiredLRPUpdate(BaseModel):
    instances: int = Field(..., ge=0)
    annotation: str = Field(..., description="New last-updated token")


class UpdateDesiredLRPRequest(BaseModel):
    process_guid: str
    update: DesiredLRPUpdate


class DesiredLRPSchedulingInfo(BaseModel):
    process_guid: str
    annotation: str


class DesiredLRP(BaseModel):
    process_guid: str
    instances: int


class Instance(BaseModel):
    index: int
    state: str


class DesiredLRPSchedulingInfosResponse(BaseModel):
    desired_lrp_scheduling_infos: list[DesiredLRPSchedulingInfo]


class DesiredLRPResponse(BaseModel):
    desired_lrp: DesiredLRP


class InstancesResponse(BaseModel):
    process_guid: str
    instances: list[Instance]


class LRPNamesResponse(BaseModel):
    namespace: str
    process_guids: list[str]
