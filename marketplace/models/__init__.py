from .ad import Ad
from .image_asset import ImageAsset
from .user import User

__all__ = ["Ad", "ImageAsset", "User"]
