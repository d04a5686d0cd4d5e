"""JSON output mode utilities."""

import base64
import json
from datetime import datetime
from typing import Any

from rich.console import Console

from src.client import Response


class CLIJSONEncoder(json.JSONEncoder):
    """JSON encoder that handles XML-RPC value types."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, (bytes, bytearray)):
            return base64.b64encode(obj).decode("ascii")
        if isinstance(obj, Response):
            return response_to_dict(obj)
        return super().default(obj)


def response_to_dict(response: Response) -> dict[str, Any]:
    data: dict[str, Any] = {"state": response.state.value}
    if response.is_success:
        data["value"] = response.value
    elif response.is_failure:
        data["error"] = str(response.error)
    return data


def json_output(console: Console, data: Any) -> None:
    """Output data as formatted JSON."""
    console.print_json(json.dumps(data, cls=CLIJSONEncoder))
