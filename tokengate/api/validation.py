"""Request validation decorator.

``@validate_request`` looks at the view's type hints. A parameter annotated
with a pydantic model is filled from the request body (JSON, or form data
for HTML forms); every other parameter (path parameters) passes through
unchanged.

Validation failures raise ValidationError with details shaped as::

    {
        "model": "UserCreate",
        "received": {...},          # body with password fields masked
        "errors": [{"field": "name", "message": "...", "expected_type": "str"}]
    }
"""

import inspect
from functools import wraps
from typing import get_type_hints

from flask import request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ValidationError

_MASKED_FIELDS = {"password"}


def _request_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        data = request.form.to_dict()
    return data


def _expected_type(model: type[BaseModel], field: str) -> str:
    info = model.model_fields.get(field)
    if info is None or info.annotation is None:
        return "unknown"
    annotation = info.annotation
    return getattr(annotation, "__name__", str(annotation))


def _mask(data) -> object:
    if not isinstance(data, dict):
        return data
    return {k: ("***" if k in _MASKED_FIELDS else v) for k, v in data.items()}


def _format_errors(model: type[BaseModel], exc: PydanticValidationError) -> list[dict]:
    errors = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"])
        top = str(err["loc"][0]) if err["loc"] else ""
        errors.append({
            "field": field,
            "message": err["msg"],
            "expected_type": _expected_type(model, top),
        })
    return errors


def validate_request(f):
    """
    Validate the request body against the view's pydantic model parameter.

    Example:
    ```python
    @auth_bp.post("/register")
    @validate_request
    def register(data: UserCreate):
        ...
    ```
    """
    hints = get_type_hints(f)
    model_params = {
        name: hint
        for name, hint in hints.items()
        if name != "return" and inspect.isclass(hint) and issubclass(hint, BaseModel)
    }

    @wraps(f)
    def wrapper(*args, **kwargs):
        for param, model in model_params.items():
            body = _request_body()
            if not isinstance(body, dict):
                raise ValidationError(
                    "Request body must be a JSON object",
                    {"model": model.__name__, "received": body, "errors": []}
                )
            try:
                kwargs[param] = model.model_validate(body)
            except PydanticValidationError as e:
                raise ValidationError(
                    "Invalid request data",
                    {
                        "model": model.__name__,
                        "received": _mask(body),
                        "errors": _format_errors(model, e),
                    }
                ) from e
        return f(*args, **kwargs)

    return wrapper
