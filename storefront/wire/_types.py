from collections.abc import Awaitable, Callable
from typing import Any

from kungfu import Result

from storefront.wire.codecs.rrc import RequestResponseCodec


# compiler can support any possible pairs
type Trigger = Any
type Codec = RequestResponseCodec | Any
type Exposure = tuple[Trigger, Codec]

type Handler[D, T, E] = Callable[[D], Awaitable[Result[T, E]]]
"""Async domain operation: domain input in, Result out."""
