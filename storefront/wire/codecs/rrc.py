from dataclasses import dataclass
from typing import Any, Protocol, TypeVar

from kungfu import Result


DomainT_co = TypeVar("DomainT_co", covariant=True)
DomainT_contra = TypeVar("DomainT_contra", contravariant=True)


class ToDomain(Protocol[DomainT_co]):
    def to_domain(self) -> DomainT_co: ...


class FromDomain(Protocol[DomainT_contra]):
    @classmethod
    def from_domain(cls, dom: DomainT_contra) -> "FromDomain[DomainT_contra]": ...


class HasStatus(Protocol):
    """Responses may pick their own HTTP status (e.g. 402 for a declined card)."""

    @property
    def http_status(self) -> int: ...


@dataclass(frozen=True, slots=True)
class RequestResponseCodec:
    """
    Request model → domain input; handler Result → response model.

    request: class with to_domain()
    response: class with from_domain(result) classmethod
    """

    request: type[ToDomain[Any]]
    response: type[FromDomain[Result[Any, Any]]]
