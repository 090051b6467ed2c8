"""Open311 GeoReport v2 record models.

See https://wiki.open311.org/GeoReport_v2/ for the wire schema.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, ClassVar

from open311_loader.common.errors import ParseError
from open311_loader.common.schema import (
    bool_field,
    float_field,
    int_field,
    key_field,
    list_field,
    string_field,
)


def _require_object(obj: Any, ctx: str) -> dict:
    if not isinstance(obj, dict):
        raise ParseError(f"{ctx} must be a JSON object, got {type(obj).__name__}")
    return obj


@dataclass(frozen=True)
class Service:
    """A service type a city accepts requests for."""

    KEY_FIELD: ClassVar[str] = "service_code"

    service_code: str
    service_name: str = ""
    description: str = ""
    metadata: bool = False
    type: str = ""
    keywords: tuple[str, ...] = ()
    group: str = ""

    @classmethod
    def from_dict(cls, obj: Any) -> "Service":
        obj = _require_object(obj, "Service")
        keywords = list_field(obj, "keywords")
        for idx, keyword in enumerate(keywords):
            if not isinstance(keyword, str):
                raise ParseError(f"Field 'keywords[{idx}]' must be a string")
        return cls(
            service_code=key_field(obj, "service_code"),
            service_name=string_field(obj, "service_name"),
            description=string_field(obj, "description"),
            metadata=bool_field(obj, "metadata"),
            type=string_field(obj, "type"),
            keywords=tuple(keywords),
            group=string_field(obj, "group"),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RequestValue:
    key: str = ""
    name: str = ""

    @classmethod
    def from_dict(cls, obj: Any) -> "RequestValue":
        obj = _require_object(obj, "Request value")
        return cls(key=string_field(obj, "key"), name=string_field(obj, "name"))


@dataclass(frozen=True)
class Request:
    """A single service request submitted by a citizen."""

    KEY_FIELD: ClassVar[str] = "service_request_id"

    service_request_id: str
    status: str = ""
    status_notes: str = ""
    service_name: str = ""
    service_code: str = ""
    description: str = ""
    agency_responsible: str = ""
    service_notice: str = ""
    requested_datetime: str = ""
    update_datetime: str = ""
    expected_datetime: str = ""
    address: str = ""
    address_id: str = ""
    zipcode: int = 0
    lat: float = 0.0
    lon: float = 0.0
    media_url: str = ""
    values: tuple[RequestValue, ...] = ()

    @classmethod
    def from_dict(cls, obj: Any) -> "Request":
        obj = _require_object(obj, "Request")
        values = []
        for idx, item in enumerate(list_field(obj, "values")):
            try:
                values.append(RequestValue.from_dict(item))
            except ParseError as exc:
                raise ParseError(f"values[{idx}]: {exc}") from exc
        return cls(
            service_request_id=key_field(obj, "service_request_id"),
            status=string_field(obj, "status"),
            status_notes=string_field(obj, "status_notes"),
            service_name=string_field(obj, "service_name"),
            service_code=string_field(obj, "service_code"),
            description=string_field(obj, "description"),
            agency_responsible=string_field(obj, "agency_responsible"),
            service_notice=string_field(obj, "service_notice"),
            requested_datetime=string_field(obj, "requested_datetime"),
            update_datetime=string_field(obj, "update_datetime"),
            expected_datetime=string_field(obj, "expected_datetime"),
            address=string_field(obj, "address"),
            address_id=string_field(obj, "address_id"),
            zipcode=int_field(obj, "zipcode"),
            lat=float_field(obj, "lat"),
            lon=float_field(obj, "lon"),
            media_url=string_field(obj, "media_url"),
            values=tuple(values),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class City:
    """A jurisdiction and the Open311 endpoint serving it.

    City names must be unique across jurisdictions, e.g. "Troy, NY".
    """

    KEY_FIELD: ClassVar[str] = "city_name"

    city_name: str
    endpoint: str = ""

    @classmethod
    def from_dict(cls, obj: Any) -> "City":
        obj = _require_object(obj, "City")
        return cls(city_name=key_field(obj, "city_name"), endpoint=string_field(obj, "endpoint"))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
