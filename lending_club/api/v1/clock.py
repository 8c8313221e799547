"""/v1/time - Logical clock and daily settlement"""

import logging

from fastapi import APIRouter, Depends, Request

from lending_club.api.dependencies import get_request_id, get_system
from lending_club.api.v1.schemas import AdvanceTimeRequest, ClockResponse
from lending_club.domain.system import System

router = APIRouter()


@router.get("/time", response_model=ClockResponse)
def get_time(system: System = Depends(get_system)):
    return ClockResponse(day=system.now())


@router.post("/time/advance", response_model=ClockResponse)
def advance_time(
    request: Request,
    request_body: AdvanceTimeRequest = AdvanceTimeRequest(),
    system: System = Depends(get_system),
):
    """
    Advance the clock, settling every closed day.

    A failed settlement does not stop the advance: every requested day is
    closed, and the last failure is reported in the response.
    """
    last_error = None
    for _ in range(request_body.days):
        result = system.incr_time()
        if not result.ok:
            last_error = result.error.value

    if last_error is not None:
        logging.warning(
            "Settlement reported failures",
            extra={"request_id": get_request_id(request), "day": system.now(), "error": last_error},
        )

    return ClockResponse(day=system.now(), ok=last_error is None, error=last_error)
