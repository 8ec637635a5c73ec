from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Request
from fastapi.responses import ORJSONResponse

from liveops.api.v1.schemas.base import ApiOut
from liveops.api.v1.schemas.live_event import DeleteLiveEventOut, LiveEventInfoOut
from liveops.domain.live.teardown.teardown_domain import TeardownService
from liveops.domain.live.teardown.teardown_models import TeardownOutcome
from liveops.services.metadata_store import ChannelMetadataStore
from liveops.shared.api.utils import ApiFailure, make_response

router = APIRouter(prefix="/live-event")


def get_teardown_service(request: Request) -> TeardownService:
    """TeardownService built in the application lifespan."""
    return request.app.state.teardown_service


def get_metadata_store(request: Request) -> ChannelMetadataStore:
    return request.app.state.metadata_store


def teardown_response(outcome: TeardownOutcome) -> ORJSONResponse:
    if outcome.success:
        return make_response(DeleteLiveEventOut.from_outcome(outcome))

    failure = ApiFailure(errcode=outcome.errcode, errmesg=outcome.error_detail)
    if outcome.erresid:
        failure.erresid = outcome.erresid
    return make_response(failure, status_code=outcome.status_code)


@router.post("/delete-live-event-output")
async def delete_live_event_output(
    payload: Any = Body(None),
    service: TeardownService = Depends(get_teardown_service),
) -> ORJSONResponse:
    """Delete a live event, its live outputs and, unless deleteAsset is false,
    their assets and custom streaming policies.

    Body: {"channelName": "...", "deleteAsset": true, "regionSelector": "..."}
    (legacy names liveEventName and azureRegion are accepted).
    """
    outcome = await service.delete_live_event(payload)
    return teardown_response(outcome)


@router.get("/delete-live-event-output")
async def delete_live_event_output_get(
    request: Request,
    service: TeardownService = Depends(get_teardown_service),
) -> ORJSONResponse:
    """Same as the POST variant, with the fields given as query parameters."""
    outcome = await service.delete_live_event(dict(request.query_params))
    return teardown_response(outcome)


@router.get("/info")
async def get_live_event_info(
    channel_name: str = Query(..., alias="channelName", min_length=1, description="Live event name"),
    store: ChannelMetadataStore = Depends(get_metadata_store),
) -> ApiOut[list[LiveEventInfoOut]]:
    """Metadata records for a live event across media accounts."""
    entries = await store.find_by_channel_name(channel_name)
    return ApiOut[list[LiveEventInfoOut]](results=[LiveEventInfoOut.from_entry(e) for e in entries])
