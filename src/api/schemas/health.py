"""Health check schemas."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Service status")
    experiments_registered: int = Field(..., description="Number of registered experiments")
    experiments_active: int = Field(..., description="Number of active experiments")
    version: str = Field(..., description="API version")

    model_config = {"json_schema_extra": {
        "example": {
            "status": "healthy",
            "experiments_registered": 3,
            "experiments_active": 2,
            "version": "0.1.0",
        }
    }}
