"""Heuristic action classifier — groups page elements into scored user actions."""

from __future__ import annotations

from dataclasses import dataclass

import logfire

from actionscout.actions.geometry import Box, nearest
from actionscout.actions.matching import (
    FIELD_ATTRIBUTES,
    attribute,
    attribute_contains,
    description_contains,
    has_tag,
    has_type,
    text_contains,
)
from actionscout.actions.models import Action, ActionType
from actionscout.crawler.models import CrawlResult, Element

USERNAME_KEYWORDS = ("user", "email", "login")
USERNAME_DESCRIPTION_KEYWORDS = ("username", "email")
LOGIN_BUTTON_KEYWORDS = ("log in", "login", "sign in", "signin")
LOGIN_BUTTON_DESCRIPTION_KEYWORDS = ("login", "sign in")
FORM_BUTTON_KEYWORDS = ("submit", "send", "register", "sign up")


@dataclass(frozen=True)
class ClassifierThresholds:
    """Layout constants for the spatial heuristics, in CSS pixels."""

    nav_box_width: float = 1000
    nav_box_height: float = 100
    nav_min_links: int = 3
    link_row_tolerance: float = 20
    form_box_width: float = 1000
    form_box_height: float = 500
    form_min_inputs: int = 2


def _unique(elements: list[Element]) -> list[Element]:
    """Drop repeated elements (by identity), keeping first occurrences."""
    seen: set[int] = set()
    unique = []
    for element in elements:
        if id(element) not in seen:
            seen.add(id(element))
            unique.append(element)
    return unique


class HeuristicActionClassifier:
    """Rule-based classifier built from four independent detectors.

    Detector output is concatenated as-is: an element may appear in several
    actions (a submit button shared by a login and a generic form, say).
    Output depends only on the elements passed in.
    """

    def __init__(
        self,
        thresholds: ClassifierThresholds | None = None,
        log: logfire.Logfire | None = None,
    ) -> None:
        self.thresholds = thresholds or ClassifierThresholds()
        self._log = log or logfire.with_tags("action-classifier")

    def classify(self, crawl_result: CrawlResult) -> list[Action]:
        """Identify candidate user actions on a crawled page."""
        self._log.info(
            "Analyzing elements for user actions",
            url=crawl_result.url,
            elements=len(crawl_result.elements),
        )

        actions: list[Action] = []
        actions.extend(self.detect_login(crawl_result))
        actions.extend(self.detect_search(crawl_result))
        actions.extend(self.detect_navigation(crawl_result))
        actions.extend(self.detect_forms(crawl_result))

        self._log.info(
            "Identified potential user actions",
            url=crawl_result.url,
            actions=len(actions),
        )
        return actions

    # --- Login ---

    @staticmethod
    def _is_username_input(el: Element) -> bool:
        return (
            has_tag(el, "input")
            and has_type(el, "text", "email")
            and (
                attribute_contains(el, FIELD_ATTRIBUTES, USERNAME_KEYWORDS)
                or description_contains(el, USERNAME_DESCRIPTION_KEYWORDS)
            )
        )

    @staticmethod
    def _is_password_input(el: Element) -> bool:
        return has_tag(el, "input") and (
            has_type(el, "password")
            or attribute_contains(el, FIELD_ATTRIBUTES, ("pass",))
            or description_contains(el, ("password",))
        )

    @staticmethod
    def _is_login_button(el: Element) -> bool:
        return has_tag(el, "button", "input") and (
            has_type(el, "submit")
            or text_contains(el, LOGIN_BUTTON_KEYWORDS)
            or description_contains(el, LOGIN_BUTTON_DESCRIPTION_KEYWORDS)
        )

    def detect_login(self, crawl_result: CrawlResult) -> list[Action]:
        """Pair username fields with their nearest password field and submit button."""
        elements = crawl_result.elements
        usernames = [el for el in elements if self._is_username_input(el)]
        passwords = [el for el in elements if self._is_password_input(el)]
        buttons = [el for el in elements if self._is_login_button(el)]

        if not usernames or not passwords:
            return []

        actions = []
        for username in usernames:
            password = nearest(username, passwords)
            if password is None:
                continue

            button = nearest(password, (b for b in buttons if b is not username))
            if button is not None:
                actions.append(
                    Action(
                        type=ActionType.LOGIN,
                        name="Login",
                        description="Login form with username/email and password fields",
                        elements=[username, password, button],
                        url=crawl_result.url,
                        confidence=0.9,
                    )
                )
            else:
                actions.append(
                    Action(
                        type=ActionType.LOGIN,
                        name="Login",
                        description="Partial login form with username/email and password fields",
                        elements=[username, password],
                        url=crawl_result.url,
                        confidence=0.7,
                    )
                )

        return actions

    # --- Search ---

    @staticmethod
    def _is_search_input(el: Element) -> bool:
        return has_tag(el, "input") and (
            has_type(el, "search")
            or attribute_contains(el, FIELD_ATTRIBUTES, ("search",))
            or description_contains(el, ("search",))
        )

    @staticmethod
    def _is_search_button(el: Element) -> bool:
        return has_tag(el, "button", "input") and (
            has_type(el, "submit")
            or text_contains(el, ("search",))
            or description_contains(el, ("search",))
            # Icon-only buttons usually carry the intent in their class
            or attribute_contains(el, ("class",), ("search",))
        )

    def detect_search(self, crawl_result: CrawlResult) -> list[Action]:
        """Pair each search field with its nearest search button, if any."""
        elements = crawl_result.elements
        buttons = [el for el in elements if self._is_search_button(el)]

        actions = []
        for search_input in (el for el in elements if self._is_search_input(el)):
            button = nearest(search_input, buttons)
            if button is not None:
                actions.append(
                    Action(
                        type=ActionType.SEARCH,
                        name="Search",
                        description="Search interface with input field and search button",
                        elements=[search_input, button],
                        url=crawl_result.url,
                        confidence=0.9,
                    )
                )
            else:
                actions.append(
                    Action(
                        type=ActionType.SEARCH,
                        name="Search",
                        description="Search input field",
                        elements=[search_input],
                        url=crawl_result.url,
                        confidence=0.7,
                    )
                )

        return actions

    # --- Navigation ---

    @staticmethod
    def _is_nav_container(el: Element) -> bool:
        return (
            has_tag(el, "nav")
            or attribute(el, "role") == "navigation"
            or attribute_contains(el, ("class", "id"), ("nav", "menu"))
        )

    @staticmethod
    def _is_link(el: Element) -> bool:
        return has_tag(el, "a") and bool(el.attributes.get("href"))

    def detect_navigation(self, crawl_result: CrawlResult) -> list[Action]:
        """Find link groups inside nav-like containers, else horizontal link rows."""
        t = self.thresholds
        elements = crawl_result.elements
        links = [el for el in elements if self._is_link(el)]

        actions = []
        for container in (el for el in elements if self._is_nav_container(el)):
            box = Box.below(container.position, t.nav_box_width, t.nav_box_height)
            # An anchor container counts as one of its own links
            nav_links = box.select(links)
            if len(nav_links) >= t.nav_min_links:
                actions.append(
                    Action(
                        type=ActionType.NAVIGATION,
                        name="Navigation Menu",
                        description=f"Navigation menu with {len(nav_links)} links",
                        elements=[container, *(el for el in nav_links if el is not container)],
                        url=crawl_result.url,
                        confidence=0.8,
                    )
                )

        if actions:
            return actions

        for group in self._group_links_by_row(links):
            if len(group) >= t.nav_min_links:
                actions.append(
                    Action(
                        type=ActionType.NAVIGATION,
                        name="Navigation Menu",
                        description=f"Horizontal navigation menu with {len(group)} links",
                        elements=group,
                        url=crawl_result.url,
                        confidence=0.7,
                    )
                )

        return actions

    def _group_links_by_row(self, links: list[Element]) -> list[list[Element]]:
        """Greedy grouping: a link joins the first group whose first link is on its row."""
        tolerance = self.thresholds.link_row_tolerance
        groups: list[list[Element]] = []
        for link in links:
            for group in groups:
                if abs(link.position.y - group[0].position.y) < tolerance:
                    group.append(link)
                    break
            else:
                groups.append([link])
        return groups

    # --- Forms ---

    @staticmethod
    def _is_form_field(el: Element) -> bool:
        return has_tag(el, "input", "textarea", "select")

    @staticmethod
    def _is_form_button(el: Element) -> bool:
        return has_tag(el, "button", "input") and (
            has_type(el, "submit") or text_contains(el, FORM_BUTTON_KEYWORDS)
        )

    def detect_forms(self, crawl_result: CrawlResult) -> list[Action]:
        """Classify forms as registration, contact or generic by their fields."""
        t = self.thresholds
        elements = crawl_result.elements
        fields = [el for el in elements if self._is_form_field(el)]
        buttons = [el for el in elements if self._is_form_button(el)]

        actions = []
        for form in (el for el in elements if has_tag(el, "form")):
            box = Box.below(form.position, t.form_box_width, t.form_box_height)
            form_fields = box.select(fields)
            form_buttons = box.select(buttons)

            if len(form_fields) < t.form_min_inputs or not form_buttons:
                continue

            action_type, name, confidence = self._form_signature(form_fields)
            actions.append(
                Action(
                    type=action_type,
                    name=name,
                    description=f"{name} with {len(form_fields)} input fields",
                    elements=_unique([form, *form_fields, *form_buttons]),
                    url=crawl_result.url,
                    confidence=confidence,
                )
            )

        return actions

    @staticmethod
    def _form_signature(fields: list[Element]) -> tuple[ActionType, str, float]:
        """Map the set of field purposes to a form kind, name and confidence."""

        def present(*keywords: str, field_type: str | None = None, tag: str | None = None) -> bool:
            return any(
                attribute_contains(el, FIELD_ATTRIBUTES, keywords)
                or (field_type is not None and has_type(el, field_type))
                or (tag is not None and has_tag(el, tag))
                for el in fields
            )

        has_name = present("name")
        has_email = present("email", field_type="email")
        has_password = present("password", field_type="password")
        has_message = present("message", tag="textarea")
        has_subject = present("subject")

        if has_name and has_email and has_password:
            return ActionType.REGISTRATION, "Registration Form", 0.9
        if (has_name and has_email and has_message) or (has_email and has_subject and has_message):
            return ActionType.CONTACT, "Contact Form", 0.9
        return ActionType.FORM, "Form", 0.7
