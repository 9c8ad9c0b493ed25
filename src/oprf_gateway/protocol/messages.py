"""
Message types for the OPRF exchange.
"""

from dataclasses import dataclass, field
from typing import Tuple

from ..primitives import Suite


@dataclass(frozen=True)
class EvaluationRequest:
    """
    Ordered batch of blinded elements sent from client to server.

    Elements are opaque serialized group elements; their order is
    significant and preserved end-to-end.
    """

    suite: Suite
    elements: Tuple[bytes, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "elements", tuple(bytes(e) for e in self.elements))

    def __len__(self) -> int:
        return len(self.elements)

    @property
    def is_empty(self) -> bool:
        return not self.elements


@dataclass(frozen=True)
class EvaluationResponse:
    """
    Evaluated elements returned by the server.

    Positionally aligned with the EvaluationRequest it answers.
    """

    suite: Suite
    elements: Tuple[bytes, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "elements", tuple(bytes(e) for e in self.elements))

    def __len__(self) -> int:
        return len(self.elements)

    @property
    def is_empty(self) -> bool:
        return not self.elements


@dataclass(eq=False)
class FinalizeData:
    """
    Client-side state for one evaluation round.

    Holds the private inputs and their blinding scalars. Created by
    OPRFClient.blind() and consumed exactly once by OPRFClient.finalize();
    the scalars are wiped on consumption.
    """

    suite: Suite
    inputs: Tuple[bytes, ...]
    blinds: Tuple[int, ...] = field(repr=False)
    blinded_elements: Tuple[bytes, ...] = field(repr=False)
    indices: Tuple[int, ...] = ()
    consumed: bool = False

    def __post_init__(self):
        if not self.indices:
            self.indices = tuple(range(len(self.inputs)))
        if not (len(self.inputs) == len(self.blinds) == len(self.blinded_elements) == len(self.indices)):
            raise ValueError("FinalizeData fields must have equal length")

    def __len__(self) -> int:
        return len(self.inputs)

    def consume(self) -> Tuple[int, ...]:
        """Hand out the blinding scalars once and wipe them."""
        blinds = self.blinds
        self.blinds = ()
        self.consumed = True
        return blinds
