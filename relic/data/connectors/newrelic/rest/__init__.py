"""New Relic REST connector and endpoints."""

from .provider import NewRelicRESTConnector

__all__ = ["NewRelicRESTConnector"]
