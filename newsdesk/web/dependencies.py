"""
FastAPI Dependencies.

Shared dependencies for request handling.
"""

from typing import Annotated, Any

from fastapi import Depends, Request

from newsdesk.client.strapi import StrapiClient, get_strapi_client


def get_client() -> StrapiClient:
    """Content backend client (module singleton)."""
    return get_strapi_client()


def get_service_options() -> dict[str, Any]:
    """
    Extra keyword arguments for the submission services.

    Empty in production; tests override it to inject a fake sleep.
    """
    return {}


def get_request_id(request: Request) -> str | None:
    """Request id assigned by RequestContextMiddleware."""
    return getattr(request.state, "request_id", None)


Client = Annotated[StrapiClient, Depends(get_client)]
ServiceOptions = Annotated[dict[str, Any], Depends(get_service_options)]
RequestId = Annotated[str | None, Depends(get_request_id)]
