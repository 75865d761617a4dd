from typing import List, Optional
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
import logging

logger = logging.getLogger(__name__)

JSONAPI_CONTENT_TYPE = "application/vnd.api+json"

class JsonApiResponse(JSONResponse):
    media_type = JSONAPI_CONTENT_TYPE

class JsonApiError(Exception):
    """Base error rendered as a JSON:API error document"""
    status_code: int = status.HTTP_400_BAD_REQUEST
    title: str = "Bad request"

    def __init__(self, title: Optional[str] = None, detail: Optional[str] = None):
        self.title = title or self.title
        self.detail = detail
        super().__init__(self.title)

    def to_errors(self) -> List[dict]:
        error = {"code": str(self.status_code), "title": self.title}
        if self.detail is not None:
            error["detail"] = self.detail
        return [error]

class InvalidJson(JsonApiError):
    title = "Invalid JSON"

class MissingData(JsonApiError):
    title = "Missing data key"

class TypeMismatch(JsonApiError):
    title = "Invalid or missing type"

class IdMismatch(JsonApiError):
    title = "ID mismatch"

class ValidationFailed(JsonApiError):
    """Domain rule violations, one message per offending field"""
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    title = "Validation failed"

    def __init__(self, messages: List[str]):
        self.messages = messages
        super().__init__(self.title)

    def to_errors(self) -> List[dict]:
        return [
            {"code": str(self.status_code), "title": message, "detail": message}
            for message in self.messages
        ]

class NotFound(JsonApiError):
    status_code = status.HTTP_404_NOT_FOUND
    title = "Record not found"

class Unauthorized(JsonApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    title = "Unauthorized"

class ConstraintViolation(JsonApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    title = "Database constraint violation"

def error_document(errors: List[dict]) -> dict:
    return {"errors": errors}

async def jsonapi_error_handler(request: Request, exc: JsonApiError):
    if isinstance(exc, Unauthorized):
        return Response(
            status_code=exc.status_code,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return JsonApiResponse(
        status_code=exc.status_code,
        content=error_document(exc.to_errors()),
    )

# Where FastAPI found the bad input -> error title
VALIDATION_TITLES = {
    "query": "Invalid query parameter",
    "path": "Invalid path parameter",
    "header": "Invalid header",
    "body": "Invalid request body",
}

async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        source = str(error["loc"][0]) if error["loc"] else ""
        location = ".".join(str(part) for part in error["loc"])
        errors.append({
            "code": str(status.HTTP_400_BAD_REQUEST),
            "title": VALIDATION_TITLES.get(source, "Invalid request"),
            "detail": f"{location}: {error['msg']}",
        })
    logger.info(f"Rejected request parameters on {request.url.path}: {errors}")
    return JsonApiResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_document(errors),
    )
