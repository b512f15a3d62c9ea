"""Loading state - what the viewer is doing with the current image."""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from ..percent import Percent
from ..types import DecodedImage

if TYPE_CHECKING:
    from ..loader import CancellationToken
    from ..navigation import Transition


@dataclass(frozen=True)
class NoImages:
    """The list is empty; stays here until new paths are added."""


@dataclass(frozen=True)
class Loading:
    """A load is in flight for the current cursor."""
    token: CancellationToken
    last_direction: Transition


@dataclass(frozen=True)
class Displayed:
    """The current cursor's image is decoded and on screen."""
    image: DecodedImage
    current_scale: Percent


LoadState = Union[NoImages, Loading, Displayed]
