"""
Field targets - the fixed locator priority for each form field.

Each builder returns a fresh list, most specific locator first and
positional / ad-hoc locators last.
"""

from typing import List

from formguard.layers.resolve.strategies import (
    LocatorStrategy,
    by_css,
    by_id,
    by_name,
    by_xpath,
    xpath_literal,
)

GENDER_POSITIONS = {"male": 1, "female": 2}


def first_name_strategies() -> List[LocatorStrategy]:
    return [
        by_id("fname"),
        by_name("First Name"),
        by_xpath("//input[@placeholder='Name']", "input[placeholder=Name]"),
        by_xpath(
            "//label[contains(text(), 'First Name')]/following::input[1]",
            "label-relative first name",
        ),
        by_css("input[placeholder*='Name']", "input[placeholder*=Name]"),
    ]


def last_name_strategies() -> List[LocatorStrategy]:
    return [
        by_id("lname"),
        by_name("Last Name"),
        by_xpath(
            "//label[contains(text(), 'Last Name')]/following::input[1]",
            "label-relative last name",
        ),
    ]


def gender_strategies(gender: str) -> List[LocatorStrategy]:
    """Male is the first radio after the Gender label, Female the second, others the third."""
    position = GENDER_POSITIONS.get(gender.lower(), 3)
    return [
        by_id(gender.lower()),
        by_xpath(
            f"//input[@type='radio'][@value={xpath_literal(gender)}]",
            f"radio[value={gender}]",
        ),
        by_xpath(
            f"//label[contains(text(), 'Gender')]/following::input[@type='radio'][{position}]",
            f"label-following radio #{position}",
        ),
    ]


def state_strategies() -> List[LocatorStrategy]:
    return [
        by_id("state"),
        by_name("State"),
        by_xpath(
            "//label[contains(text(), 'State')]/following::select[1]",
            "label-relative select",
        ),
        by_css("select.form-control"),
    ]


def hobby_strategies(hobby: str) -> List[LocatorStrategy]:
    return [
        by_id(hobby),
        by_xpath(
            f"//input[@type='checkbox'][@value={xpath_literal(hobby)}]",
            f"checkbox[value={hobby}]",
        ),
        by_xpath(
            f"//label[contains(text(), {xpath_literal(hobby)})]/preceding-sibling::input[@type='checkbox'][1]",
            f"label-relative checkbox {hobby}",
        ),
    ]


def gender_shadow_selector(gender: str) -> str:
    """Radio matching the gender by id or (case-insensitive) value."""
    escaped = gender.replace("\\", "\\\\").replace('"', '\\"')
    return (
        f'input[type="radio"][id="{escaped.lower()}"], '
        f'input[type="radio"][value="{escaped}" i]'
    )
