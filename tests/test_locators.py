# tests/test_locators.py
from selenium.webdriver.common.by import By

from conftest import FakeElement
from models.site_config import Locator, LocatorStrategy
from services.browser.locators import resolve_first, to_by


def test_strategy_maps_to_selenium_by():
    assert to_by(LocatorStrategy.CSS) == By.CSS_SELECTOR
    assert to_by(LocatorStrategy.XPATH) == By.XPATH
    assert to_by(LocatorStrategy.CLASS_NAME) == By.CLASS_NAME


def test_first_resolving_locator_wins_and_rest_are_not_tried(session):
    second = session.add("#second")
    session.add("#third")
    locators = [Locator(value="#first"), Locator(value="#second"), Locator(value="#third")]

    assert resolve_first(session, locators) is second
    assert session.lookups == [(By.CSS_SELECTOR, "#first"), (By.CSS_SELECTOR, "#second")]


def test_nothing_resolves(session):
    assert resolve_first(session, [Locator(value="#a"), Locator(value="#b")]) is None
    assert resolve_first(session, []) is None


def test_xpath_locator(session):
    link = session.add("//a[text()='New']", FakeElement("link"), by=By.XPATH)
    assert resolve_first(session, [Locator(strategy="xpath", value="//a[text()='New']")]) is link
