from typing import List

from pydantic import BaseModel, Field, HttpUrl, TypeAdapter, ValidationError, field_validator

PRICE_PATTERN = r"^\d+(\.\d{1,2})?$"

_IMAGE_URL = TypeAdapter(HttpUrl)


class PayloadError(Exception):
    """Raised when a request body does not match its schema.

    ``errors`` lists every failing field as ``{"path": ..., "message": ...}``.
    """

    def __init__(self, errors):
        super().__init__("Invalid input")
        self.errors = errors


def _dedupe(values):
    seen = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


class ProductIn(BaseModel):
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    price: str = Field(pattern=PRICE_PATTERN)
    category: str = Field(min_length=1)
    stock: int = Field(ge=0)
    featured: bool = False
    images: List[str] = Field(min_length=1)
    sizes: List[str] = Field(min_length=1)
    colors: List[str] = Field(min_length=1)

    @field_validator("images")
    @classmethod
    def _urls(cls, images):
        # stored as sent; HttpUrl would normalize them
        for url in images:
            try:
                _IMAGE_URL.validate_python(url)
            except ValidationError:
                raise ValueError(f"Invalid url: {url}") from None
        return images

    @field_validator("sizes", "colors")
    @classmethod
    def _unique(cls, values):
        return _dedupe(values)


class LoginIn(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class ConfigurationIn(BaseModel):
    key: str = Field(min_length=1)
    value: str = Field(min_length=1)


def validate(model, payload):
    if not isinstance(payload, dict):
        raise PayloadError([{"path": "", "message": "Expected a JSON object"}])
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise PayloadError([
            {"path": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ])
