import os
import re
import traceback
import logging
import asyncio
from datetime import datetime, timezone
from typing import Optional
from starlette.requests import Request
from starlette.responses import JSONResponse
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import httpx

from Repositories.DatabaseErrors import DatabaseError

logger = logging.getLogger(__name__)

# Railway host pattern: webapi{boardId}.up.railway.app
BOARD_ID_PATTERN = re.compile(r'webapi([a-f0-9]{24})', re.IGNORECASE)

# Keep references so fire-and-forget tasks are not garbage collected mid-flight
_pending_reports = set()

def extract_board_id(request: Optional[Request] = None) -> Optional[str]:
    """Extract boardId from request (route params, query string, headers, env, hostname)"""
    if request is not None:
        if 'boardId' in request.path_params:
            return request.path_params['boardId']
        if 'boardId' in request.query_params:
            return request.query_params['boardId']
        if 'X-Board-Id' in request.headers:
            return request.headers['X-Board-Id']

    board_id = os.getenv('BOARD_ID')
    if board_id and board_id.strip():
        return board_id.strip()

    candidates = [os.getenv('RUNTIME_ERROR_ENDPOINT_URL', '')]
    if request is not None:
        candidates.insert(0, request.headers.get('host', ''))
    for candidate in candidates:
        match = BOARD_ID_PATTERN.search(candidate or '')
        if match:
            return match.group(1)

    logger.debug('[EXCEPTION HANDLER] Could not extract boardId from any source')
    return None

def build_error_payload(exception: BaseException, board_id: Optional[str], request: Optional[Request] = None) -> dict:
    """Error report for the runtime error endpoint"""
    tb_lines = traceback.extract_tb(exception.__traceback__)
    exc_message = str(exception)
    return {
        'boardId': board_id or '',
        # ISO 8601, the collector parses it as a non-nullable DateTime
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'file': tb_lines[-1].filename if tb_lines else None,
        'line': tb_lines[-1].lineno if tb_lines else None,
        'stackTrace': ''.join(traceback.format_exception(type(exception), exception, exception.__traceback__)),
        'message': exc_message or 'Unknown error',
        'exceptionType': type(exception).__name__,
        'requestPath': request.url.path if request is not None else 'STARTUP',
        'requestMethod': request.method if request is not None else 'STARTUP',
        'userAgent': request.headers.get('user-agent') if request is not None else 'STARTUP_ERROR',
    }

async def send_error_to_endpoint(endpoint_url: str, payload: dict):
    """Send error details to runtime error endpoint (fire and forget)"""
    try:
        async with httpx.AsyncClient(timeout=5.0) as client:
            response = await client.post(endpoint_url, json=payload)
        if response.status_code != 200:
            logger.error(f'[EXCEPTION HANDLER] Error endpoint response: {response.status_code} - {response.text}')
    except httpx.HTTPError as e:
        logger.error(f'[EXCEPTION HANDLER] Failed to send error to endpoint: {e}')

def report_startup_error(exception: BaseException):
    """Report a failure raised before the server could start serving"""
    endpoint_url = os.getenv('RUNTIME_ERROR_ENDPOINT_URL')
    if not endpoint_url:
        return
    payload = build_error_payload(exception, extract_board_id())
    try:
        with httpx.Client(timeout=5.0) as client:
            client.post(endpoint_url, json=payload)
    except httpx.HTTPError as e:
        logger.error(f'[STARTUP ERROR] Failed to send error to endpoint: {e}')

async def database_error_handler(request: Request, exc: DatabaseError):
    """Any database failure: 500 with the wrapped message echoed back"""
    logger.error(f'[EXCEPTION HANDLER] {request.method} {request.url.path} failed: {exc}')
    return JSONResponse(status_code=500, content={'error': str(exc)})

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors (404 not found, 405, ...) as {"error": detail}"""
    return JSONResponse(
        status_code=exc.status_code,
        content={'error': exc.detail},
        headers=getattr(exc, 'headers', None),
    )

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Bad path parameters (e.g. a non-integer id): 422 with the usual {"error": ...} shape"""
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    )
    return JSONResponse(status_code=422, content={'error': f'Invalid request - {problems}'})

async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for all unhandled exceptions"""
    logger.error(f'[EXCEPTION HANDLER] Unhandled exception occurred: {exc}', exc_info=exc)

    runtime_error_endpoint_url = os.getenv('RUNTIME_ERROR_ENDPOINT_URL')
    if runtime_error_endpoint_url:
        payload = build_error_payload(exc, extract_board_id(request), request)
        task = asyncio.create_task(send_error_to_endpoint(runtime_error_endpoint_url, payload))
        _pending_reports.add(task)
        task.add_done_callback(_pending_reports.discard)

    return JSONResponse(
        status_code=500,
        content={
            'error': 'An error occurred while processing your request',
            'message': str(exc) or 'Unknown error'
        }
    )

def setup_exception_handlers(app: FastAPI):
    """Setup global exception handlers"""
    app.add_exception_handler(DatabaseError, database_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    # Handle all exceptions (most generic handler)
    app.add_exception_handler(Exception, global_exception_handler)
