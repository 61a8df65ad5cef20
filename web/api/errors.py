"""API errors and validation helpers."""

import functools
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from loguru import logger
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.errors import NotFoundError, StorageError, ValidationError
from web.api.schemas import ApiResult

M = TypeVar("M", bound=BaseModel)

INTERNAL_ERROR = "Internal server error"

MIN_QUERY_LENGTH = 2
MAX_QUERY_LENGTH = 50
MIN_USERNAME_LENGTH = 2


def validate_query(q: str | None, min_length: int = MIN_QUERY_LENGTH) -> str:
    """Validate a search term and return it stripped."""
    if q is None or not isinstance(q, str):
        raise ValidationError("q is required")
    term = q.strip()
    if not min_length <= len(term) <= MAX_QUERY_LENGTH:
        raise ValidationError(f"q must be between {min_length} and {MAX_QUERY_LENGTH} characters")
    return term


def validate_username(username: str | None, field: str = "username") -> str:
    """Validate a username path parameter and return it stripped."""
    if username is None or not isinstance(username, str) or len(username.strip()) < MIN_USERNAME_LENGTH:
        raise ValidationError(f"{field} must be at least {MIN_USERNAME_LENGTH} characters")
    return username.strip()


def validate_int(value: Any, field: str, minimum: int = 0) -> int:
    """Parse a non-negative (or >= minimum) integer from int or digit string."""
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int) or value < minimum:
        raise ValidationError(f"{field} must be a number >= {minimum}")
    return value


def parse_body(model: type[M], payload: Any) -> M:
    """Validate a request body against a pydantic model."""
    try:
        return model.model_validate(payload or {})
    except PydanticValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(p) for p in first["loc"]) or "body"
        raise ValidationError(f"Invalid {location}: {first['msg']}") from e


def guarded(view: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[ApiResult]]:
    """Run a view and map its outcome to the caller-facing envelope."""

    @functools.wraps(view)
    async def wrapper(*args, **kwargs) -> ApiResult:
        try:
            data = await view(*args, **kwargs)
        except ValidationError as e:
            return ApiResult.fail(e.message, 400)
        except NotFoundError as e:
            return ApiResult.fail(e.message, 404)
        except StorageError:
            return ApiResult.fail(INTERNAL_ERROR, 500)
        except Exception:
            logger.exception("Unhandled error in {}", view.__name__)
            return ApiResult.fail(INTERNAL_ERROR, 500)
        return ApiResult.ok(data)

    return wrapper
