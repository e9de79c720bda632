import re
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

DATA_URI_PATTERN = re.compile(
    r"^data:(?P<mime>[a-zA-Z]+/[a-zA-Z0-9.+-]+)"
    r"(?:;[a-zA-Z0-9.+-]+=[a-zA-Z0-9.+-]+)*"
    r";base64,(?P<data>[A-Za-z0-9+/]+={0,2})$"
)


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire (either accepted on input)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def data_uri_mime_type(value: str) -> Optional[str]:
    match = DATA_URI_PATTERN.match(value.strip())
    return match.group("mime").lower() if match else None


def validate_data_uri(value: str, media: Optional[str] = None) -> str:
    """Check `data:<mimetype>;base64,<encoded_data>`, optionally restricted to one media family."""
    mime = data_uri_mime_type(value)
    if mime is None:
        raise ValueError("must be a data URI of the form 'data:<mimetype>;base64,<encoded_data>'")
    if media and not mime.startswith(f"{media}/"):
        raise ValueError(f"must carry a {media}/* MIME type, got {mime}")
    return value.strip()
