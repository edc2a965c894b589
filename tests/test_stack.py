"""Tests for IconStack."""

import pytest

from colmena import Icon, IconStack
from colmena.stack import StackLayer

CIRCLE = Icon("<circle/>", {"viewBox": "0 0 16 16", "width": 16})
CHECK = Icon("<path/>")


class TestIconStack:
    def test_empty(self) -> None:
        stack = IconStack()
        assert len(stack) == 0
        assert stack.to_markup() == "<svg></svg>"

    def test_layers_in_push_order(self) -> None:
        stack = IconStack().push(CIRCLE).push(CHECK, {"fill": "white"})
        assert stack.to_markup() == (
            '<svg viewBox="0 0 16 16"><g><circle/></g><g fill="white"><path/></g></svg>'
        )

    def test_default_view_box(self) -> None:
        assert IconStack().push(CHECK).to_markup().startswith('<svg viewBox="0 0 24 24">')

    def test_layer_attributes_are_not_icon_attributes(self) -> None:
        markup = IconStack().push(CIRCLE).to_markup()
        assert 'width="16"' not in markup

    def test_with_size(self) -> None:
        markup = IconStack().push(CHECK).with_size(32).to_markup()
        assert markup.startswith('<svg viewBox="0 0 24 24" width="32" height="32">')

    def test_with_class_merges(self) -> None:
        stack = IconStack().push(CHECK).with_class("a").with_class(["b", " "])
        assert stack.attributes["class"] == "a b"

    def test_with_class_blank(self) -> None:
        stack = IconStack().push(CHECK)
        assert stack.with_class("  ") is stack

    def test_container_view_box_override(self) -> None:
        markup = IconStack().push(CIRCLE).with_attributes({"viewBox": "0 0 8 8"}).to_markup()
        assert markup.startswith('<svg viewBox="0 0 8 8">')

    def test_immutable(self) -> None:
        stack = IconStack()
        pushed = stack.push(CHECK)
        assert len(stack) == 0
        assert len(pushed) == 1
        with pytest.raises(AttributeError):
            stack.layers = ()  # type: ignore[misc]

    def test_layer_content_escaped_attributes(self) -> None:
        markup = IconStack().push(CHECK, {"data-x": 'a"b'}).to_markup()
        assert '<g data-x="a&quot;b">' in markup

    def test_str(self) -> None:
        stack = IconStack().push(CHECK)
        assert str(stack) == stack.to_markup()

    def test_stack_layer(self) -> None:
        layer = StackLayer(CHECK)
        assert layer.icon is CHECK
        assert len(layer.attributes) == 0
