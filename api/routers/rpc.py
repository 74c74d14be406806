# api/routers/rpc.py

from fastapi import APIRouter, Depends, Request, Response
from typing import Any, Optional, Union
import logging

import msgspec

from takoyaki.service import SubqlApiService
from takoyaki.types import BlockRequest, TakoyakiError
from takoyaki.core.logging import log_with_context
from ..dependencies import get_service, get_logger

router = APIRouter()

# Decimal token amounts go out as JSON numbers
encoder = msgspec.json.Encoder(decimal_format="number")

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
SERVER_ERROR = -32000


class RpcError(msgspec.Struct, omit_defaults=True):
    code: int
    message: str
    data: Any = None


class RpcRequest(msgspec.Struct):
    jsonrpc: str
    method: str
    id: Union[int, str, None] = None
    params: Optional[list[Any]] = None


class InvalidParams(Exception):
    pass


def success(request_id, result) -> dict:
    return {"jsonrpc": "2.0", "id": request_id, "result": result}


def failure(request_id, code: int, message: str, data: Any = None) -> dict:
    return {"jsonrpc": "2.0", "id": request_id, "error": RpcError(code, message, data)}


async def filter_blocks(service: SubqlApiService, params: list) -> Any:
    if len(params) != 1:
        raise InvalidParams("subql_filterBlocks expects exactly one block request")
    try:
        block_request = msgspec.convert(params[0], BlockRequest)
        block_request.range()
        block_request.limit_value()
    except (msgspec.ValidationError, ValueError) as e:
        raise InvalidParams(str(e)) from e

    try:
        return await service.filter_blocks(block_request)
    except ValueError as e:
        # filters the archive request cannot express
        raise InvalidParams(str(e)) from e


async def filter_blocks_capabilities(service: SubqlApiService, params: list) -> Any:
    if params:
        raise InvalidParams("subql_filterBlocksCapabilities takes no params")
    return await service.filter_blocks_capabilities()


METHODS = {
    "subql_filterBlocks": filter_blocks,
    "subql_filterBlocksCapabilities": filter_blocks_capabilities,
}


async def dispatch(payload: Any, service: SubqlApiService, logger: logging.Logger) -> dict:
    request_id = payload.get("id") if isinstance(payload, dict) else None

    try:
        rpc_request = msgspec.convert(payload, RpcRequest)
    except msgspec.ValidationError as e:
        return failure(request_id, INVALID_REQUEST, f"Invalid request: {e}")
    if rpc_request.jsonrpc != "2.0":
        return failure(request_id, INVALID_REQUEST, "Invalid request: jsonrpc must be \"2.0\"")

    handler = METHODS.get(rpc_request.method)
    if handler is None:
        return failure(request_id, METHOD_NOT_FOUND, f"Method not found: {rpc_request.method}")

    try:
        result = await handler(service, rpc_request.params or [])
    except InvalidParams as e:
        return failure(request_id, INVALID_PARAMS, f"Invalid params: {e}")
    except TakoyakiError as e:
        processing_error = e.to_processing_error()
        log_with_context(logger, logging.ERROR, "RPC method failed",
                         method=rpc_request.method, error=e.message,
                         error_id=processing_error.error_id)
        return failure(request_id, SERVER_ERROR, e.message, processing_error)
    except Exception as e:
        log_with_context(logger, logging.ERROR, "Unexpected RPC error",
                         method=rpc_request.method, error=str(e), exc_info=True)
        return failure(request_id, INTERNAL_ERROR, "Internal error")

    return success(rpc_request.id, result)


@router.post("/")
async def json_rpc(
    request: Request,
    service: SubqlApiService = Depends(get_service),
    logger = Depends(get_logger)
):
    """JSON-RPC 2.0 endpoint, single and batch requests"""
    body = await request.body()
    try:
        payload = msgspec.json.decode(body)
    except msgspec.DecodeError as e:
        return json_response(failure(None, PARSE_ERROR, f"Parse error: {e}"))

    if isinstance(payload, list):
        if not payload:
            return json_response(failure(None, INVALID_REQUEST, "Invalid request: empty batch"))
        return json_response([await dispatch(item, service, logger) for item in payload])

    return json_response(await dispatch(payload, service, logger))


def json_response(content: Any) -> Response:
    return Response(content=encoder.encode(content), media_type="application/json")
