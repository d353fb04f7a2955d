from smalltalk.schemas.common import APIModel


class HealthResponse(APIModel):
    status: str
    timestamp: int


class ServiceInfo(APIModel):
    name: str
    version: str
    endpoints: dict[str, str]
