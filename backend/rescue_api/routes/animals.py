"""
Animal Rescue API — Animal Route Handlers
==========================================

What:  Exposes /animals and /animals/{id} over HTTP.
How:   Both paths accept every verb and hand the request to the
       RequestDispatcher as an ApiRequest envelope, so unsupported verbs get
       the dispatcher's 405 rather than the framework's.
Who:   Called by the shelter client application.

Endpoints:
    GET    /animals        list every animal
    GET    /animals/{id}   one animal
    POST   /animals        create; 201 with the new id
    PATCH  /animals/{id}   FULL replace: omitted optional fields become null
    DELETE /animals/{id}   delete; 204
"""

import logging

from fastapi import APIRouter, Depends, Request, Response

from rescue_api.schemas.envelope import ApiRequest, ApiResponse
from rescue_api.services.dispatcher import RequestDispatcher

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Animals"])

# Verbs routed to the dispatcher; it answers 405 for the ones it does not serve
FORWARDED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


def get_dispatcher(request: Request) -> RequestDispatcher:
    """FastAPI dependency: the dispatcher built at startup."""
    return request.app.state.dispatcher


def to_http_response(envelope: ApiResponse) -> Response:
    return Response(
        content=envelope.body,
        status_code=envelope.status_code,
        headers=envelope.headers,
    )


@router.api_route(
    "/animals",
    methods=FORWARDED_METHODS,
    summary="List or create animals",
    description=(
        "GET returns every animal (store order). POST creates an animal from the "
        "JSON body and returns it with its new id."
    ),
)
async def animals_collection(
    request: Request,
    dispatcher: RequestDispatcher = Depends(get_dispatcher),
) -> Response:
    envelope = ApiRequest(method=request.method, body=await request.body())
    return to_http_response(await dispatcher.dispatch(envelope))


@router.api_route(
    "/animals/{animal_id}",
    methods=FORWARDED_METHODS,
    summary="Read, replace or delete one animal",
    description=(
        "PATCH performs a whole-entity replacement, not a merge: every optional "
        "attribute missing from the body is stored as null."
    ),
)
async def animals_item(
    animal_id: str,
    request: Request,
    dispatcher: RequestDispatcher = Depends(get_dispatcher),
) -> Response:
    envelope = ApiRequest(
        method=request.method,
        path_parameters={"id": animal_id},
        body=await request.body(),
    )
    return to_http_response(await dispatcher.dispatch(envelope))
