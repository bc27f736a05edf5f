"""
Response formatting for the attraction HTTP endpoints.

API Gateway proxy responses with plain-text bodies and the shared CORS headers.
"""

from typing import Any, Dict


def text_response(message: str, status_code: int = 200) -> Dict[str, Any]:
    """
    Build a plain-text API Gateway response.

    Args:
        message: Response body
        status_code: HTTP status code

    Returns:
        API Gateway response dict with CORS headers

    Example:
        text_response("No documents to update")
    """
    return {
        "statusCode": status_code,
        "headers": _get_cors_headers(),
        "body": message,
    }


def error_response(error: BaseException, status_code: int = 500) -> Dict[str, Any]:
    """
    Build an error response of the form "Error: <message>".

    Args:
        error: Exception that aborted the request
        status_code: HTTP status code (default 500)

    Returns:
        API Gateway response dict
    """
    return text_response(f"Error: {error_message(error)}", status_code=status_code)


def error_message(error: BaseException) -> str:
    """Get the human-readable message of an exception.

    botocore ClientError renders as "An error occurred (Code) when calling
    the X operation: <message>"; the service message alone is returned
    for those.
    """
    response = getattr(error, "response", None)
    if isinstance(response, dict):
        message = response.get("Error", {}).get("Message")
        if message:
            return message
    return str(error)


def _get_cors_headers() -> Dict[str, str]:
    """
    Get CORS headers for API responses.

    Returns:
        Dict of CORS headers
    """
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type,X-Amz-Date,Authorization,X-Api-Key,X-Amz-Security-Token",
        "Content-Type": "text/plain; charset=utf-8",
    }
