"""Shared facade plumbing."""

from typing import Type, TypeVar

from pydantic import BaseModel, ValidationError

from ...errors import InvalidArgument
from ..dispatch.dispatcher import Dispatcher

M = TypeVar("M", bound=BaseModel)


def build_request(model: Type[M], **fields) -> M:
    """
    Validate caller arguments locally, before any network call.

    Raises:
        InvalidArgument: With the first validation problem
    """
    try:
        return model(**fields)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ())) or model.__name__
        raise InvalidArgument(f"{location}: {first.get('msg')}") from e


class Service:
    """Base class for per-domain facades."""

    def __init__(self, dispatcher: Dispatcher):
        self._dispatcher = dispatcher
