"""API Gateway proxy responses used by the Lambda handlers.

Error bodies always carry `error` (short title), `message` (client-facing
explanation) and `errorCode` (stable machine-readable code).
"""

import json
from typing import Any

from linkshortener.types import LambdaResponse


CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Content-Type',
    'Access-Control-Allow-Methods': 'OPTIONS,POST,GET',
}


def json_response(status_code: int, body: Any, headers: dict[str, str] | None = None) -> LambdaResponse:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json', **CORS_HEADERS, **(headers or {})},
        'body': json.dumps(body),
    }


def error_response(status_code: int, *, error: str, message: str, error_code: str, **extra: Any) -> LambdaResponse:
    body = {'error': error, 'message': message, 'errorCode': error_code, **extra}
    return json_response(status_code, body)


def response_200(body: Any) -> LambdaResponse:
    return json_response(200, body)


def response_201(body: Any) -> LambdaResponse:
    return json_response(201, body)


def response_302(*, location: str) -> LambdaResponse:
    return {
        'statusCode': 302,
        'headers': {'Location': location, **CORS_HEADERS},
        'body': json.dumps({}),  # no body needed for redirects
    }


def response_400(*, error: str, message: str, error_code: str) -> LambdaResponse:
    return error_response(400, error=error, message=message, error_code=error_code)


def response_404(*, message: str, error_code: str, error: str = 'Short URL not found') -> LambdaResponse:
    return error_response(404, error=error, message=message, error_code=error_code)


def response_409(*, message: str, error_code: str, error: str = 'Shortcode already exists') -> LambdaResponse:
    return error_response(409, error=error, message=message, error_code=error_code)


def response_410(*, expired_at: str, error_code: str) -> LambdaResponse:
    return error_response(
        410,
        error='Short URL expired',
        message='This short URL has expired and is no longer valid',
        error_code=error_code,
        expiredAt=expired_at,
    )


def response_500(*, message: str, error_code: str, error: str = 'Server error') -> LambdaResponse:
    return error_response(500, error=error, message=message, error_code=error_code)
