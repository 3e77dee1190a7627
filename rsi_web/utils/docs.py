from typing import Any

from ..exceptions.api_exception import APIException


def responses(default: type, *args: type[APIException]) -> dict[int | str, dict[str, Any]]:
    """Build the `responses` argument of a route from its return type and the exceptions it may raise."""

    exceptions: dict[int, list[type[APIException]]] = {}
    for exc in args:
        exceptions.setdefault(exc.status_code, []).append(exc)

    return {
        200: {"model": default},
        **{
            code: {
                "description": " / ".join(exc.description for exc in excs),
                "content": {
                    "application/json": {
                        "examples": {
                            exc.__name__: {"description": exc.description, "value": {"detail": exc.detail}}
                            for exc in excs
                        }
                    }
                },
            }
            for code, excs in exceptions.items()
        },
    }
