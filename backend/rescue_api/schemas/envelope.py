"""
Animal Rescue API — Request/Response Envelopes
===============================================

What:  Transport-neutral request and response shapes the dispatcher works with.
How:   Field names follow the API-gateway proxy convention on the wire
       (pathParameters, statusCode) so an event dict validates directly.
Who:   Built by the FastAPI routes from an HTTP request; returned by the
       dispatcher and turned back into an HTTP response by the routes.
"""

from typing import Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ApiRequest(BaseModel):
    """{method, pathParameters: {id?}, body?}"""

    model_config = ConfigDict(populate_by_name=True)

    method: str
    path_parameters: Optional[Dict[str, str]] = Field(default=None, alias="pathParameters")
    body: Optional[Union[bytes, str]] = None

    @property
    def identifier(self) -> Optional[str]:
        """Raw path identifier, or None when the route carried no id."""
        return (self.path_parameters or {}).get("id")


class ApiResponse(BaseModel):
    """{statusCode, body?, headers?}"""

    model_config = ConfigDict(populate_by_name=True)

    status_code: int = Field(alias="statusCode")
    body: str = ""
    headers: Dict[str, str] = Field(default_factory=dict)
