"""Unit tests for database models."""

from actionscout.db.models import ActionElement, UserAction, Website


class TestWebsite:
    """Tests for Website model."""

    def test_create_website(self) -> None:
        website = Website(id=1, url="https://example.com/", title="Example")

        assert website.url == "https://example.com/"
        assert website.title == "Example"

    def test_website_repr(self) -> None:
        assert repr(Website(url="https://example.com/")) == "<Website https://example.com/>"


class TestUserAction:
    """Tests for UserAction model."""

    def test_create_action(self) -> None:
        action = UserAction(
            id="test-uuid",
            website_id=1,
            type="login",
            name="Login",
            description="Login form",
            confidence=0.9,
        )

        assert action.type == "login"
        assert action.confidence == 0.9

    def test_action_repr(self) -> None:
        action = UserAction(id="test-uuid", type="search", name="Search", confidence=0.7)
        assert repr(action) == "<UserAction test-uuid (search)>"

    def test_elements_relationship(self) -> None:
        element = ActionElement(selector="xpath=/html/body/input", element_type="input")
        action = UserAction(id="test-uuid", type="search", name="Search", elements=[element])

        assert element.action is action


class TestActionElement:
    """Tests for ActionElement model."""

    def test_element_repr(self) -> None:
        element = ActionElement(
            selector="xpath=/html/body/button",
            element_type="button",
            attributes={"type": "submit"},
            position={"x": 1, "y": 2},
        )

        assert repr(element) == "<ActionElement button xpath=/html/body/button>"
        assert element.attributes == {"type": "submit"}
