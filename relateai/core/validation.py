"""
Request validation.

``validate(schema, source)`` is the one place inbound request shapes are
enforced. Route handlers declare ``Depends(validate(Schema, "query"))`` and
only ever receive the typed, coerced model; they never inspect raw input.

Error contract:
    schema violation  -> RequestValidationFailed -> 400
                         {"success": false, "message": "Validation error",
                          "errors": [{"path": "a.b", "message": "..."}]}
    anything else     -> ValidationFault -> 500 with the exception message
"""
import json
import re
from typing import Annotated, Any, Iterable, List, Literal, Optional, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel, BeforeValidator, Field, HttpUrl, TypeAdapter, ValidationError, create_model
from pydantic_core import PydanticCustomError

from relateai.core.exceptions import RequestValidationFailed, ValidationFault

Source = Literal["body", "query", "params"]
ModelT = TypeVar("ModelT", bound=BaseModel)

URL_PATTERN = re.compile(
    r"^(https?://)?([a-zA-Z0-9]([a-zA-Z0-9-]*[a-zA-Z0-9])?\.)+"
    r"[a-zA-Z0-9]([a-zA-Z0-9-]*[a-zA-Z0-9])?"
    r"(/[a-zA-Z0-9._~:/?#\[\]@!$&'()*+,;=]*)?$"
)
DIGITS_PATTERN = re.compile(r"^\d+$")
# Largest query-string integer; keeps OFFSET inside a 64-bit column
QUERY_INT_MAX = 2 ** 31 - 1
_http_url = TypeAdapter(HttpUrl)

# Locations FastAPI prefixes onto its own errors
_SEGMENT_PREFIXES = {"body", "query", "path", "header", "cookie"}


# ---------------------------------------------------------------------------
# Reusable field types and checks
# ---------------------------------------------------------------------------

def check_url(value: Optional[str], message: str = "Please enter a valid website URL") -> Optional[str]:
    """Field check for URL-shaped strings (scheme optional)."""
    if value is None:
        return value
    if not URL_PATTERN.match(value):
        raise ValueError(message)
    return value


def _digits_to_int(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and DIGITS_PATTERN.match(value):
        return int(value)
    raise ValueError("Must be a whole number")


def _split_csv(value: Any) -> Any:
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return value


def check_link(value: Optional[str]) -> Optional[str]:
    """Absolute http(s) URL, or an empty string to clear the field."""
    if value is None or value == "":
        return value
    try:
        _http_url.validate_python(value)
    except ValidationError:
        raise ValueError("Invalid url")
    return value


# Query-string integer: "10" -> 10, "abc" / "-1" / oversized values rejected
QueryInt = Annotated[int, BeforeValidator(_digits_to_int), Field(le=QUERY_INT_MAX)]

# Query-string list: "a,b" -> ["a", "b"]
CsvList = Annotated[List[str], BeforeValidator(_split_csv)]


def refinement_error(path: str, message: str) -> PydanticCustomError:
    """
    Error for a cross-field rule, reported under a synthetic ``path``.

    Raise it from a ``model_validator(mode="after")`` so it only runs once all
    per-field checks have passed.
    """
    return PydanticCustomError("refinement", message, {"path": path})


def partial(model: Type[ModelT], name: Optional[str] = None) -> Type[ModelT]:
    """
    Derive an update schema from a create schema: same fields and checks,
    every field optional with a ``None`` default.
    """
    fields = {}
    for field_name, field in model.model_fields.items():
        annotation = field.annotation
        if field.metadata:
            annotation = Annotated[(annotation, *field.metadata)]
        fields[field_name] = (Optional[annotation], None)
    return create_model(name or f"{model.__name__}Partial", __base__=model, **fields)


# ---------------------------------------------------------------------------
# Error shaping
# ---------------------------------------------------------------------------

def _error_message(err: dict) -> str:
    ctx = err.get("ctx") or {}
    if err.get("type") == "value_error" and "error" in ctx:
        return str(ctx["error"])
    return err.get("msg", "Invalid value")


def format_error_list(errors: Iterable[dict], strip_segment: bool = False) -> List[dict]:
    """Turn pydantic error dicts into ``[{"path", "message"}]``."""
    formatted = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ())]
        if strip_segment and loc and loc[0] in _SEGMENT_PREFIXES:
            loc = loc[1:]
        ctx = err.get("ctx") or {}
        if not loc and ctx.get("path"):
            loc = [str(ctx["path"])]
        formatted.append({"path": ".".join(loc), "message": _error_message(err)})
    return formatted


def format_validation_errors(exc: ValidationError) -> List[dict]:
    return format_error_list(exc.errors())


# ---------------------------------------------------------------------------
# Dependency
# ---------------------------------------------------------------------------

async def _read_segment(request: Request, source: Source) -> Any:
    if source == "body":
        body = await request.body()
        if not body.strip():
            return {}
        return json.loads(body)
    if source == "query":
        return dict(request.query_params)
    if source == "params":
        return dict(request.path_params)
    raise ValueError(f"Unknown request segment '{source}'")


def validate(schema: Type[ModelT], source: Source = "body"):
    """
    Build a dependency that validates one request segment against ``schema``.

    The parsed model replaces the raw segment on ``request.state.validated``
    and is returned to the handler.
    """
    async def dependency(request: Request) -> ModelT:
        try:
            raw = await _read_segment(request, source)
            parsed = schema.model_validate(raw)
        except ValidationError as exc:
            raise RequestValidationFailed(format_validation_errors(exc))
        except Exception as exc:
            raise ValidationFault(str(exc))

        validated = getattr(request.state, "validated", None) or {}
        validated[source] = parsed
        request.state.validated = validated
        return parsed

    return dependency
