"""Remote data gateway: canonical records in and out of the document store."""

from .interfaces import RemoteDataGateway
from .pocketbase_gateway import PocketBaseGateway

__all__ = ["PocketBaseGateway", "RemoteDataGateway"]
