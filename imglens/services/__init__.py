"""Services module initialization."""
from .settings import Settings
from .pipeline_serializer import PipelineSerializer

# FilterRunner lives in .runner; it pulls in the OpenImageIO codec
__all__ = ["Settings", "PipelineSerializer"]
