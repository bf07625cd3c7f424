import json
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request
from web3 import Web3

from ..evm import RelayService
from ..exceptions import InvalidRequestError
from ..types import RelayRequest

logger = logging.getLogger(__name__)

router = APIRouter()


def get_service(request: Request) -> RelayService:
    return request.app.state.relay_service


@router.post("/relay")
async def relay(request: Request, service: RelayService = Depends(get_service)) -> Dict[str, Any]:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidRequestError("Request body must be valid JSON") from exc

    relay_request = RelayRequest.from_dict(body)
    receipt = await service.relay(relay_request)
    return receipt.to_response()


@router.get("/status")
async def status(
    paymaster: Optional[str] = None,
    service: RelayService = Depends(get_service),
) -> Dict[str, Any]:
    """Trust wiring and hub deposit for a paymaster (defaults to PAYMASTER_ADDRESS)."""
    target = paymaster or service.config.paymaster_address
    if not target:
        raise InvalidRequestError("paymaster query parameter is required", field="paymaster")
    if not Web3.is_address(target):
        raise InvalidRequestError("paymaster must be an address", field="paymaster")
    return await service.status(target)
