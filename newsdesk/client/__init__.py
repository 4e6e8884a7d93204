"""
Content Backend Client.

Thin async wrapper over the Strapi REST API. Services own the payloads and
the interpretation of status codes; this package only moves bytes and logs.
"""

from newsdesk.client.strapi import (
    StrapiClient,
    bearer_headers,
    close_strapi_client,
    get_strapi_client,
)

__all__ = [
    "StrapiClient",
    "bearer_headers",
    "close_strapi_client",
    "get_strapi_client",
]
