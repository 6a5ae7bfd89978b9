"""Unit tests for ConversionContext (cycle and depth guard)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import pytest

from structbridge import ConverterSettings, CyclicStructureError, StructConverter, describe
from structbridge.conversion import ConversionContext

# -------------------- Fakes / helpers --------------------


@dataclass
class Node:
    name: str
    children: list[Node] = field(default_factory=list)


@dataclass
class NodeView:
    name: str = ""
    children: list[NodeView] = field(default_factory=list)


@dataclass
class Chain:
    name: str
    next: Optional[Chain] = None


@dataclass
class ChainView:
    name: str = ""
    next: Optional[ChainView] = None


def make_chain(length: int) -> Chain:
    head = Chain(f"n{length - 1}")
    for i in range(length - 2, -1, -1):
        head = Chain(f"n{i}", head)
    return head


def chain_length(view: Optional[ChainView]) -> int:
    count = 0
    while view is not None:
        count += 1
        view = view.next
    return count


def make_context(max_depth: int = 64) -> ConversionContext:
    return ConversionContext(settings=ConverterSettings(max_depth=max_depth))


# --------------------------- Tests ---------------------------


class TestEnter:
    def test_depth_tracked_and_restored(self) -> None:
        ctx = make_context()
        target = describe(list[int])
        with ctx.enter([1], target):
            assert ctx.depth == 1
            with ctx.enter([2], target):
                assert ctx.depth == 2
        assert ctx.depth == 0

    def test_reentering_same_source_and_target(self) -> None:
        ctx = make_context()
        source = [1]
        target = describe(list[int])
        with ctx.enter(source, target):
            with pytest.raises(CyclicStructureError, match="refers back to itself"):
                with ctx.enter(source, target):
                    pass

    def test_same_source_into_other_target_allowed(self) -> None:
        ctx = make_context()
        source = [1]
        with ctx.enter(source, describe(list[int])):
            with ctx.enter(source, describe(list[float])):
                assert ctx.depth == 2

    def test_released_after_exit(self) -> None:
        ctx = make_context()
        source = [1]
        target = describe(list[int])
        with ctx.enter(source, target):
            pass
        with ctx.enter(source, target):
            assert ctx.depth == 1

    def test_released_after_error(self) -> None:
        ctx = make_context()
        source = [1]
        target = describe(list[int])
        with pytest.raises(RuntimeError):
            with ctx.enter(source, target):
                raise RuntimeError("boom")
        assert ctx.depth == 0
        with ctx.enter(source, target):
            pass

    def test_max_depth(self) -> None:
        ctx = make_context(max_depth=1)
        target = describe(list[int])
        with ctx.enter([1], target):
            with pytest.raises(CyclicStructureError, match="maximum nesting depth 1"):
                with ctx.enter([2], target):
                    pass


class TestDepthThroughConverter:
    # root record, its children list, a child record, the child's list
    def test_deep_enough(self) -> None:
        converter = StructConverter(ConverterSettings(max_depth=4))
        result = converter.convert_struct(Node("root", [Node("leaf")]), NodeView)
        assert result == NodeView("root", [NodeView("leaf")])

    def test_too_deep(self) -> None:
        converter = StructConverter(ConverterSettings(max_depth=3))
        with pytest.raises(CyclicStructureError, match="maximum nesting depth"):
            converter.convert_struct(Node("root", [Node("leaf")]), NodeView)

    def test_fresh_context_per_call(self) -> None:
        converter = StructConverter(ConverterSettings(max_depth=4))
        tree = Node("root", [Node("leaf")])
        converter.convert_struct(tree, NodeView)
        assert converter.convert_struct(tree, NodeView) == NodeView("root", [NodeView("leaf")])


class TestDefaultDepthLimit:
    def test_long_chain_stopped_by_guard(self) -> None:
        with pytest.raises(CyclicStructureError, match="maximum nesting depth 64"):
            StructConverter().convert_value(make_chain(200), ChainView)

    def test_short_chain_converts(self) -> None:
        result = StructConverter().convert_value(make_chain(30), ChainView)
        assert isinstance(result, ChainView)
        assert result.name == "n0"
        assert chain_length(result) == 30

    def test_interpreter_limit_reported_as_cyclic(self) -> None:
        converter = StructConverter(ConverterSettings(max_depth=100_000))
        with pytest.raises(CyclicStructureError, match="recursion limit"):
            converter.convert_value(make_chain(3000), ChainView)

    def test_interpreter_limit_in_place(self) -> None:
        converter = StructConverter(ConverterSettings(max_depth=100_000))
        target = ChainView()
        with pytest.raises(CyclicStructureError, match="recursion limit"):
            converter.convert_structs(make_chain(3000), target)
        assert target == ChainView()
