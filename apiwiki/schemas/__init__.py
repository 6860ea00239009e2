from apiwiki.schemas.schemas import (
    TemplateResponse,
    ImageResponse,
    HealthResponse,
)

__all__ = [
    "TemplateResponse",
    "ImageResponse",
    "HealthResponse",
]
