"""Unit tests for spatial and attribute matching helpers."""

from actionscout.actions.geometry import Box, distance, nearest, rank_by_distance
from actionscout.actions.matching import (
    attribute,
    attribute_contains,
    description_contains,
    has_tag,
    has_type,
    text_contains,
)
from actionscout.crawler.models import Element, Position


def make_element(tag: str, x: float = 0, y: float = 0, text: str = "", **attributes: str):
    return Element.create(
        selector=f"xpath=//{tag}",
        tag_type=tag,
        attributes=attributes,
        text=text,
        position=Position(x=x, y=y),
    )


class TestDistance:
    def test_euclidean(self) -> None:
        assert distance(Position(0, 0), Position(3, 4)) == 5.0

    def test_zero(self) -> None:
        assert distance(Position(7, 7), Position(7, 7)) == 0.0


class TestNearest:
    def test_picks_closest(self) -> None:
        reference = make_element("input")
        far = make_element("button", x=100)
        near = make_element("button", x=10)

        assert nearest(reference, [far, near]) is near

    def test_ties_keep_document_order(self) -> None:
        reference = make_element("input")
        first = make_element("button", x=10)
        second = make_element("button", y=10)

        assert nearest(reference, [first, second]) is first
        assert rank_by_distance(reference, [second, first]) == [second, first]

    def test_reference_is_never_its_own_neighbour(self) -> None:
        reference = make_element("input", type="submit")
        other = make_element("button", x=50)

        assert nearest(reference, [reference, other]) is other
        assert nearest(reference, [reference]) is None

    def test_empty_candidates(self) -> None:
        assert nearest(make_element("input"), []) is None


class TestBox:
    def test_bounds_are_inclusive(self) -> None:
        box = Box.below(Position(10, 10), width=100, height=50)

        assert box.contains(Position(10, 10))
        assert box.contains(Position(110, 60))
        assert not box.contains(Position(111, 60))
        assert not box.contains(Position(50, 9))

    def test_select_keeps_order(self) -> None:
        container = make_element("nav")
        inside_b = make_element("a", x=20, y=5)
        inside_a = make_element("a", x=10, y=5)
        outside = make_element("a", x=10, y=500)

        box = Box.below(container.position, width=1000, height=100)
        selected = box.select([container, inside_b, outside, inside_a])

        assert selected == [container, inside_b, inside_a]


class TestMatching:
    def test_attribute_is_lowercased(self) -> None:
        element = make_element("input", name="UserEmail")
        assert attribute(element, "name") == "useremail"
        assert attribute(element, "id") == ""

    def test_attribute_contains(self) -> None:
        element = make_element("input", placeholder="Your Email")
        assert attribute_contains(element, ("name", "placeholder"), ("email",))
        assert not attribute_contains(element, ("name",), ("email",))

    def test_empty_attribute_never_matches(self) -> None:
        element = make_element("input", name="")
        assert not attribute_contains(element, ("name",), ("",))

    def test_text_and_description(self) -> None:
        element = make_element("button", text="Sign In", id="go")
        assert text_contains(element, ("sign in",))
        assert description_contains(element, ('with id "go"',))
        assert not text_contains(element, ("register",))

    def test_tag_and_type(self) -> None:
        element = make_element("input", type="Password")
        assert has_tag(element, "button", "input")
        assert has_type(element, "password")
        assert not has_type(make_element("input"), "text")
