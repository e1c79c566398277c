import itertools
import sys
from pathlib import Path
from typing import List, Optional

import pytest

# Add src to sys.path so we can import template_forge
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from template_forge.core.models import (  # noqa: E402
    Canvas,
    Element,
    ElementType,
    Rect,
    SlotProps,
    Spec,
    SpecKind,
)
from template_forge.engine.library import SpecLibrary, SpecRecord  # noqa: E402


class FakeTextClient:
    """Scripted text client: returns (or raises) queued responses in order."""

    def __init__(self, responses: List, model: str = "fake-model"):
        self.model = model
        self._responses = list(responses)
        self.prompts: List[str] = []

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self._responses:
            raise AssertionError("FakeTextClient ran out of responses")
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def build_layout(slot_keys, *, canvas: Optional[Canvas] = None, extra=()) -> Spec:
    """Layout with one Slot per key, stacked down the page."""
    elements = list(extra)
    for i, key in enumerate(slot_keys):
        elements.append(Element(
            id=f"slot_el_{i + 1}",
            type=ElementType.SLOT,
            rect=Rect(24, 24 + i * 190, 564, 180),
            z_index=len(elements) + 1,
            props=SlotProps(slot_key=key),
        ))
    return Spec(canvas=canvas or Canvas(612, 792), elements=tuple(elements), kind=SpecKind.LAYOUT)


def build_module(*types: ElementType) -> Spec:
    """Module with ids e1, e2, ... stacked 60pt apart, 400pt wide."""
    elements = [
        Element(id=f"e{i + 1}", type=t, rect=Rect(0, i * 60, 400, 50), z_index=i + 1)
        for i, t in enumerate(types)
    ]
    return Spec(canvas=Canvas(640, 640), elements=tuple(elements), kind=SpecKind.MODULE)


# Common test fixtures
@pytest.fixture
def id_factory():
    """Deterministic element ids: el_1, el_2, ..."""
    counter = itertools.count(1)
    return lambda: f"el_{next(counter)}"


@pytest.fixture
def make_layout():
    return build_layout


@pytest.fixture
def make_module():
    return build_module


@pytest.fixture
def fake_client():
    """Factory for scripted text clients."""
    def _make(*responses, model: str = "fake-model") -> FakeTextClient:
        return FakeTextClient(list(responses), model=model)
    return _make


@pytest.fixture
def library() -> SpecLibrary:
    """
    Two layouts and three modules.

    L1 has slots a, b; L2 has slot a. m1 and m2 hold a Header and a
    BodyText; m_empty has no elements.
    """
    header_body = build_module(ElementType.HEADER, ElementType.BODY_TEXT)
    return SpecLibrary([
        SpecRecord("L1", "Two Up", SpecKind.LAYOUT, build_layout(["a", "b"])),
        SpecRecord("L2", "Single", SpecKind.LAYOUT, build_layout(["a"])),
        SpecRecord("m1", "Notes", SpecKind.MODULE, header_body),
        SpecRecord("m2", "Agenda", SpecKind.MODULE, header_body),
        SpecRecord("m_empty", "Blank", SpecKind.MODULE, build_module()),
    ])
