from .client import AsyncClient, Client
from .models import RemoteResource, SearchMatch

__all__ = ["Client", "AsyncClient", "RemoteResource", "SearchMatch"]
