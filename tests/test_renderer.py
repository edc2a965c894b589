"""Tests for IconRenderer attribute layering and ARIA rules."""

from hypothesis import given, settings
from hypothesis import strategies as st

from colmena import Icon, IconRenderer

PATH = "<path/>"

attribute_values = st.text(
    alphabet="abcdefghijklmnopqrstuvwxyz0123456789 -", min_size=1, max_size=8
)
layer_attributes = st.dictionaries(
    st.sampled_from(
        ["class", "width", "aria-label", "aria-labelledby", "role", "aria-hidden", "fill"]
    ),
    attribute_values,
    max_size=4,
)
caller_attributes = st.dictionaries(
    st.sampled_from(["class", "width", "aria-label", "aria-labelledby", "title"]),
    attribute_values,
    max_size=3,
)


class TestMergeOrder:
    def test_caller_beats_default_beats_icon(self) -> None:
        icon = Icon(PATH, {"width": 16})
        renderer = IconRenderer({"width": 24})

        assert renderer.render(icon, attributes={"width": 32}).get_attribute("width") == "32"
        assert renderer.render(icon).get_attribute("width") == "24"
        assert IconRenderer().render(icon).get_attribute("width") == "16"

    def test_prefix_beats_default(self) -> None:
        renderer = IconRenderer({"fill": "red"}, {"tabler": {"fill": "blue"}})
        assert renderer.render(Icon(PATH), "tabler").get_attribute("fill") == "blue"
        assert renderer.render(Icon(PATH), "mdi").get_attribute("fill") == "red"

    def test_class_concatenates_through_every_layer(self) -> None:
        renderer = IconRenderer({"class": "b"}, {"ui": {"class": "c"}})
        renderer.set_suffix_attributes("ui", "solid", {"class": "d"})
        icon = Icon(PATH, {"class": "a"})

        rendered = renderer.render(icon, "ui", {"class": "e"}, "home-solid")
        assert rendered.get_attribute("class") == "a b c d e"

    def test_none_values_are_skipped(self) -> None:
        renderer = IconRenderer({"width": 24})
        rendered = renderer.render(Icon(PATH), attributes={"width": None})
        assert rendered.get_attribute("width") == "24"

    def test_values_are_normalized(self) -> None:
        rendered = IconRenderer().render(Icon(PATH), attributes={"focusable": False, "width": 24.0})
        assert rendered.get_attribute("focusable") == "false"
        assert rendered.get_attribute("width") == "24"


class TestSuffixRules:
    def make_renderer(self) -> IconRenderer:
        renderer = IconRenderer()
        renderer.set_suffix_attributes("hero", "solid", {"fill": "currentColor"})
        renderer.set_suffix_attributes("hero", "", {"fill": "none"})
        return renderer

    def test_matching_suffix(self) -> None:
        rendered = self.make_renderer().render(Icon(PATH), "hero", None, "home-solid")
        assert rendered.get_attribute("fill") == "currentColor"

    def test_catch_all(self) -> None:
        rendered = self.make_renderer().render(Icon(PATH), "hero", None, "home")
        assert rendered.get_attribute("fill") == "none"

    def test_suffix_needs_dash(self) -> None:
        rendered = self.make_renderer().render(Icon(PATH), "hero", None, "solid")
        assert rendered.get_attribute("fill") == "none"

    def test_other_prefix_unaffected(self) -> None:
        rendered = self.make_renderer().render(Icon(PATH), "tabler", None, "home-solid")
        assert not rendered.has_attribute("fill")

    def test_without_name_no_suffix_rules(self) -> None:
        rendered = self.make_renderer().render(Icon(PATH), "hero")
        assert not rendered.has_attribute("fill")

    def test_no_catch_all(self) -> None:
        renderer = IconRenderer()
        renderer.set_suffix_attributes("hero", "outline", {"stroke": "currentColor"})
        assert not renderer.render(Icon(PATH), "hero", None, "home").has_attribute("stroke")

    def test_get_suffix_attributes(self) -> None:
        assert self.make_renderer().get_suffix_attributes("hero") == {
            "solid": {"fill": "currentColor"},
            "": {"fill": "none"},
        }
        assert IconRenderer().get_suffix_attributes("hero") == {}


class TestAria:
    def test_decorative_by_default(self) -> None:
        rendered = IconRenderer().render(Icon(PATH))
        assert rendered.get_attribute("aria-hidden") == "true"
        assert not rendered.has_attribute("role")

    def test_labeled(self) -> None:
        rendered = IconRenderer().render(Icon(PATH), attributes={"aria-label": "Home"})
        assert rendered.get_attribute("role") == "img"
        assert not rendered.has_attribute("aria-hidden")

    def test_labelledby(self) -> None:
        rendered = IconRenderer().render(Icon(PATH), attributes={"aria-labelledby": "t1"})
        assert rendered.get_attribute("role") == "img"

    def test_label_drops_inherited_aria_hidden(self) -> None:
        renderer = IconRenderer({"aria-hidden": "true"})
        rendered = renderer.render(Icon(PATH), attributes={"aria-label": "Home"})
        assert not rendered.has_attribute("aria-hidden")
        assert rendered.get_attribute("role") == "img"

    def test_explicit_caller_role_kept(self) -> None:
        rendered = IconRenderer().render(
            Icon(PATH), attributes={"aria-label": "Home", "role": "presentation"}
        )
        assert rendered.get_attribute("role") == "presentation"

    def test_explicit_caller_aria_hidden_kept(self) -> None:
        rendered = IconRenderer().render(Icon(PATH), attributes={"aria-hidden": "false"})
        assert rendered.get_attribute("aria-hidden") == "false"

    def test_default_role_overridden_when_labeled(self) -> None:
        renderer = IconRenderer({"role": "presentation"})
        rendered = renderer.render(Icon(PATH), attributes={"aria-label": "Home"})
        assert rendered.get_attribute("role") == "img"

    @given(icon_attrs=layer_attributes, defaults=layer_attributes, caller=caller_attributes)
    @settings(max_examples=200)
    def test_exactly_one_accessibility_mode(
        self, icon_attrs: dict[str, str], defaults: dict[str, str], caller: dict[str, str]
    ) -> None:
        rendered = IconRenderer(defaults).render(Icon(PATH, icon_attrs), "x", caller, "y")
        attrs = rendered.attributes

        hidden = attrs.get("aria-hidden") == "true"
        labeled = attrs.get("role") == "img" and (
            "aria-label" in attrs or "aria-labelledby" in attrs
        )
        assert hidden != labeled


class TestRenderIsPure:
    def test_input_icon_untouched(self) -> None:
        icon = Icon(PATH, {"class": "a"})
        IconRenderer({"class": "b"}).render(icon, attributes={"width": 1})
        assert icon.attributes.to_dict() == {"class": "a"}

    def test_renders_do_not_accumulate(self) -> None:
        icon = Icon(PATH)
        renderer = IconRenderer()
        renderer.render(icon, attributes={"class": "first"})
        second = renderer.render(icon, attributes={"class": "second"})
        assert second.get_attribute("class") == "second"

    def test_content_preserved(self) -> None:
        assert IconRenderer().render(Icon(PATH)).content == PATH


class TestConfiguration:
    def test_default_attributes(self) -> None:
        renderer = IconRenderer()
        renderer.set_default_attributes({"class": "icon"})
        assert renderer.default_attributes == {"class": "icon"}

    def test_prefix_attributes(self) -> None:
        renderer = IconRenderer()
        renderer.set_prefix_attributes("tabler", {"stroke-width": 1.5})
        assert renderer.get_prefix_attributes("tabler") == {"stroke-width": 1.5}
        assert renderer.get_prefix_attributes("mdi") == {}
        assert renderer.prefix_attributes == {"tabler": {"stroke-width": 1.5}}

    def test_getters_return_copies(self) -> None:
        renderer = IconRenderer({"class": "icon"})
        renderer.default_attributes["class"] = "changed"
        assert renderer.default_attributes == {"class": "icon"}
