from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, HttpUrl, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

_http_url = TypeAdapter(HttpUrl)


def _check_http_url(value: str) -> str:
    try:
        _http_url.validate_python(value)
    except ValidationError:
        raise ValueError("must be a valid http(s) URL")
    return value

# Validated as a URL, stored exactly as the client sent it
UrlStr = Annotated[str, AfterValidator(_check_http_url)]


class CamelModel(BaseModel):
    """Serializes to camelCase, accepts either camelCase or snake_case."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
