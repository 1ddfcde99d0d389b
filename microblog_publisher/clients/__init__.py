"""HTTP clients for Micro.blog and the alt text service."""

from microblog_publisher.clients.alt_text import AltTextClient
from microblog_publisher.clients.micropub import MicropubClient
from microblog_publisher.clients.xmlrpc import LegacyRpcClient

__all__ = [
    "AltTextClient",
    "MicropubClient",
    "LegacyRpcClient",
]
