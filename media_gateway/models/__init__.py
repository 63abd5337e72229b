from .resource import GetImagesResponse, Resource

__all__ = [
    "GetImagesResponse",
    "Resource",
]
