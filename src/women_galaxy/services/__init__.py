# ABOUTME: External side-effect services used by the importer
# ABOUTME: Profile photo processing and object storage adapters

from .images import ImagePipeline, build_object_key, reencode_image, slugify_name
from .storage import LocalObjectStore, ObjectStore, SupabaseStorage

__all__ = [
    "ImagePipeline",
    "LocalObjectStore",
    "ObjectStore",
    "SupabaseStorage",
    "build_object_key",
    "reencode_image",
    "slugify_name",
]
