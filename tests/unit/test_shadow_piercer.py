import pytest

from selenium.common.exceptions import JavascriptException
from selenium.webdriver.common.by import By

from formguard.core.exceptions import ShadowPierceFailed
from formguard.layers.shadow import scripts
from formguard.layers.shadow.path import ShadowPath
from formguard.layers.shadow.piercer import (
    ATTRIBUTE_SCAN,
    OPEN_ROOT,
    PierceOutcome,
    ShadowPiercer,
    StrategyOutcome,
)
from tests.fakes import (
    FakeDocument,
    FakeDriver,
    FakeElement,
    FakeShadowRoot,
    install_attribute_scan,
    install_shadow_walk,
    nested_chain,
)


def walking_driver(*body):
    return install_shadow_walk(FakeDriver(FakeDocument(*body)))


def script_calls(driver, script):
    return [args for s, args in driver.executed if s == script]


class TestLookupDepth:
    """A target d roots deep is found iff d <= max_depth."""

    @pytest.mark.parametrize("depth", [1, 2, 3, 4])
    def test_found_at_max_depth(self, depth):
        piercer = ShadowPiercer(walking_driver(nested_chain(depth)), closed_root_heuristic=False)

        lookup = piercer.locate_in_shadow("level-1", "#target", max_depth=depth)

        assert lookup.found
        assert lookup.depth == depth
        assert lookup.route == OPEN_ROOT

    @pytest.mark.parametrize("depth", [1, 2, 3])
    def test_not_found_one_level_deeper(self, depth):
        piercer = ShadowPiercer(walking_driver(nested_chain(depth + 1)), closed_root_heuristic=False)

        assert piercer.find_in_shadow("level-1", "#target", max_depth=depth) is None

    def test_default_depth_comes_from_constructor(self):
        driver = walking_driver(nested_chain(3))

        assert ShadowPiercer(driver, max_depth=2, closed_root_heuristic=False).find_in_shadow(
            "level-1", "#target") is None
        assert ShadowPiercer(driver, max_depth=3).find_in_shadow("level-1", "#target") is not None

    def test_max_depth_must_be_positive(self):
        with pytest.raises(ValueError):
            ShadowPiercer(FakeDriver()).locate_in_shadow(None, "#target", max_depth=0)


def test_depth_first_document_order():
    """The first host's nested root is searched before the second host's root."""
    first_host = FakeElement("a-host", shadow=FakeShadowRoot(nested_chain(1, "x", origin="deep")))
    second_host = FakeElement("b-host", shadow=FakeShadowRoot(FakeElement("input", {"id": "x", "origin": "shallow"})))
    piercer = ShadowPiercer(walking_driver(first_host, second_host))

    deep = piercer.locate_in_shadow(None, "#x")
    assert deep.element.get_attribute("origin") == "deep"
    assert deep.depth == 2

    shallow = piercer.locate_in_shadow(None, "#x", max_depth=1)
    assert shallow.element.get_attribute("origin") == "shallow"


def test_each_host_is_visited_once():
    host = nested_chain(2, "missing-elsewhere")
    driver = walking_driver(host)
    driver.main.register(By.CSS_SELECTOR, "dup-host", host, host)

    lookup = ShadowPiercer(driver, closed_root_heuristic=False).locate_in_shadow("dup-host", "#nope")

    assert not lookup.found
    assert lookup.visited_hosts == 2


def test_element_host_is_used_directly():
    host = nested_chain(1)
    driver = walking_driver()

    assert ShadowPiercer(driver).find_in_shadow(host, "#target") is not None


class TestClosedRoots:

    def closed_page(self, *extra, exposed=True):
        hidden = FakeElement("input", {"id": "fname"})
        host = FakeElement("shadow-form", shadow=FakeShadowRoot(hidden, closed=True))
        driver = install_attribute_scan(walking_driver(*extra, host), exposed=exposed)
        return driver, host, hidden

    def test_heuristic_reaches_id_target(self):
        driver, host, hidden = self.closed_page()

        lookup = ShadowPiercer(driver).locate_in_shadow("shadow-form", "#fname")

        assert lookup.element is hidden
        assert lookup.route == ATTRIBUTE_SCAN
        assert lookup.depth is None
        assert lookup.closed_hosts == 1
        assert script_calls(driver, scripts.ATTRIBUTE_SCAN_SCRIPT) == [("fname", [host])]

    def test_known_host_tags_are_walked_without_a_host(self):
        driver, _, hidden = self.closed_page()

        lookup = ShadowPiercer(driver).locate_in_shadow(None, "#fname")

        assert lookup.element is hidden
        assert lookup.closed_hosts == 1

    def test_light_dom_duplicate_is_never_returned(self):
        regular = FakeElement("input", {"id": "fname", "value": "Regular Only"})
        driver, _, _ = self.closed_page(FakeElement("form", children=(regular,)), exposed=False)

        lookup = ShadowPiercer(driver).locate_in_shadow(None, "#fname")

        assert not lookup.found
        assert lookup.closed_hosts == 1

    def test_heuristic_disabled(self):
        driver, _, _ = self.closed_page()

        lookup = ShadowPiercer(driver, closed_root_heuristic=False).locate_in_shadow("shadow-form", "#fname")

        assert not lookup.found
        assert lookup.closed_hosts == 1
        assert script_calls(driver, scripts.ATTRIBUTE_SCAN_SCRIPT) == []

    @pytest.mark.parametrize("target", ["input", "#fname.wide", "#fname > input", "form #fname"])
    def test_heuristic_only_applies_to_bare_ids(self, target):
        driver, _, _ = self.closed_page()

        assert ShadowPiercer(driver).find_in_shadow("shadow-form", target) is None
        assert script_calls(driver, scripts.ATTRIBUTE_SCAN_SCRIPT) == []

    def test_no_scan_without_closed_hosts(self):
        """A light-DOM duplicate does not hide the depth bound."""
        driver = install_attribute_scan(
            walking_driver(FakeElement("input", {"id": "target"}), nested_chain(3)),
            exposed=True,
        )

        assert ShadowPiercer(driver).find_in_shadow(None, "#target", max_depth=2) is None
        assert script_calls(driver, scripts.ATTRIBUTE_SCAN_SCRIPT) == []


def test_walk_failure_is_reported_not_raised():
    driver = FakeDriver(FakeDocument(nested_chain(2)))

    def broken(*args):
        raise JavascriptException("script crashed")

    driver.on_script(scripts.LIGHT_DOM_SHADOW_HOSTS, broken)

    lookup = ShadowPiercer(driver).locate_in_shadow(None, "#target")

    assert not lookup.found
    assert "script crashed" in lookup.error


def test_read_value_in_shadow():
    driver = walking_driver(nested_chain(1, "fname", value="Jane"))
    piercer = ShadowPiercer(driver, closed_root_heuristic=False)

    assert piercer.read_value_in_shadow("#fname") == "Jane"
    assert piercer.read_value_in_shadow("#lname") is None


def applied(seen=1, depth=1):
    return lambda *args: {"applied": True, "seen": seen, "depth": depth}


def not_applied(seen=0):
    return lambda *args: {"applied": False, "seen": seen, "depth": None}


class TestMutations:

    def test_host_query_wins_and_stops(self):
        driver = FakeDriver().on_script(scripts.HOST_QUERY_SCRIPT, applied())

        outcome = ShadowPiercer(driver).set_value_in_shadow("#fname", "Jane")

        assert outcome.succeeded
        assert outcome.winner == "host_query"
        assert [s.name for s in outcome.strategies] == ["host_query"]
        assert script_calls(driver, scripts.HOST_QUERY_SCRIPT) == [("shadow-form", "#fname", "value", "Jane")]
        assert script_calls(driver, scripts.SHADOW_SCAN_SCRIPT) == []
        assert script_calls(driver, scripts.LIGHT_DOM_SCRIPT) == []

    def test_page_without_shadow_roots_falls_back_to_light_dom(self):
        driver = (
            FakeDriver()
            .on_script(scripts.HOST_QUERY_SCRIPT, not_applied())
            .on_script(scripts.SHADOW_SCAN_SCRIPT, not_applied())
            .on_script(scripts.LIGHT_DOM_SCRIPT, applied(depth=0))
        )

        outcome = ShadowPiercer(driver).set_checked_in_shadow("#male")

        assert outcome.winner == "light_dom"
        assert [s.name for s in outcome.strategies] == ["host_query", "shadow_scan", "light_dom"]
        assert [s.error for s in outcome.strategies[:2]] == ["no match", "no match"]

    def test_failing_strategy_does_not_stop_the_next(self):
        def crash(*args):
            raise JavascriptException("host has no shadowRoot")

        driver = (
            FakeDriver()
            .on_script(scripts.HOST_QUERY_SCRIPT, crash)
            .on_script(scripts.SHADOW_SCAN_SCRIPT, applied(depth=2))
        )

        outcome = ShadowPiercer(driver, max_depth=4).select_option_in_shadow("#state", "India")

        assert outcome.winner == "shadow_scan"
        assert "host has no shadowRoot" in outcome.strategies[0].error
        assert outcome.strategies[1].depth == 2
        assert script_calls(driver, scripts.SHADOW_SCAN_SCRIPT) == [("#state", "option", "India", 4)]

    def test_any_script_error_is_isolated(self):
        def crash(*args):
            raise RuntimeError("driver connection reset")

        driver = (
            FakeDriver()
            .on_script(scripts.HOST_QUERY_SCRIPT, crash)
            .on_script(scripts.SHADOW_SCAN_SCRIPT, crash)
            .on_script(scripts.LIGHT_DOM_SCRIPT, applied(depth=0))
        )

        outcome = ShadowPiercer(driver).set_value_in_shadow("#fname", "Jane")

        assert outcome.winner == "light_dom"
        assert outcome.strategies[0].error == "driver connection reset"

    def test_every_strategy_failing_returns_an_outcome(self):
        driver = (
            FakeDriver()
            .on_script(scripts.HOST_QUERY_SCRIPT, not_applied(seen=1))
            .on_script(scripts.SHADOW_SCAN_SCRIPT, not_applied())
            .on_script(scripts.LIGHT_DOM_SCRIPT, not_applied())
        )

        outcome = ShadowPiercer(driver).select_option_in_shadow("#state", "Atlantis")

        assert not outcome.succeeded
        assert outcome.winner is None
        assert outcome.strategies[0].error == "matched but not mutable"
        with pytest.raises(ShadowPierceFailed) as exc_info:
            outcome.raise_for_status()
        assert exc_info.value.outcome is outcome

    def test_unexpected_script_result(self):
        outcome = ShadowPiercer(FakeDriver()).set_value_in_shadow("#fname", "Jane")

        assert not outcome.succeeded
        assert all("unexpected script result" in s.error for s in outcome.strategies)

    def test_host_tag_override(self):
        driver = FakeDriver().on_script(scripts.HOST_QUERY_SCRIPT, applied())

        ShadowPiercer(driver).set_value_in_shadow("#fname", "Jane", host_tag="nestedshadow-form")

        assert script_calls(driver, scripts.HOST_QUERY_SCRIPT)[0][0] == "nestedshadow-form"

    def test_set_value_at_path(self):
        driver = FakeDriver().on_script(scripts.PATH_DESCENT_SCRIPT, applied(depth=2))
        path = ShadowPath.parse("nestedshadow-form >> shadow-form >> #fname")

        outcome = ShadowPiercer(driver).set_value_at_path(path, "Jane")

        assert outcome.winner == "path_descent"
        assert outcome.target == "#fname"
        assert script_calls(driver, scripts.PATH_DESCENT_SCRIPT) == [
            (["nestedshadow-form", "shadow-form"], "#fname", "value", "Jane")
        ]

    def test_path_deeper_than_max_depth_widens_the_scan(self):
        driver = FakeDriver()
        path = ShadowPath(("a", "b", "c"), "#t")

        ShadowPiercer(driver, max_depth=1).set_value_at_path(path, "x")

        assert script_calls(driver, scripts.SHADOW_SCAN_SCRIPT)[0][-1] == 3


def test_outcome_serialisation():
    outcome = PierceOutcome("set_value_in_shadow", "#fname", [
        StrategyOutcome("host_query", False, error="no match"),
        StrategyOutcome("shadow_scan", True, matched=1, depth=1),
    ])

    data = outcome.to_dict()

    assert data["succeeded"] is True
    assert data["winner"] == "shadow_scan"
    assert [s["name"] for s in data["strategies"]] == ["host_query", "shadow_scan"]
    assert outcome.raise_for_status() is outcome


def test_find_at_path():
    target = FakeElement("input", {"id": "fname"})
    driver = FakeDriver().on_script(
        scripts.FIND_AT_PATH_SCRIPT,
        lambda hosts, selector: target if hosts == ["shadow-form"] else None,
    )
    piercer = ShadowPiercer(driver)

    assert piercer.find_at_path(ShadowPath.parse("shadow-form >> #fname")) is target
    assert piercer.find_at_path(ShadowPath.parse("other-form >> #fname")) is None


def test_census():
    driver = FakeDriver().on_script(
        scripts.CENSUS_SCRIPT,
        lambda tags: {"total": 42, "custom_hosts": 2, "inputs": 7, "open_hosts": ["shadow-form"]},
    )

    census = ShadowPiercer(driver).census()

    assert (census.total_elements, census.custom_hosts, census.inputs) == (42, 2, 7)
    assert census.open_hosts == ["shadow-form"]
    assert script_calls(driver, scripts.CENSUS_SCRIPT) == [("shadow-form, nestedshadow-form",)]


def test_census_failure():
    def crash(*args):
        raise JavascriptException("nope")

    census = ShadowPiercer(FakeDriver().on_script(scripts.CENSUS_SCRIPT, crash)).census()

    assert census.total_elements == 0
    assert census.error
