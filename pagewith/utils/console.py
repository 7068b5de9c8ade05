"""Collect console output of a page."""

from collections import defaultdict

from playwright.async_api import ConsoleMessage, Page

ConsoleMessages = dict[str, list[str]]


def spy_on_console(page: Page) -> ConsoleMessages:
    """Record every console message of a page, grouped by message type.

    The returned mapping fills up as the page logs; keys are Playwright's
    message types (``log``, ``error``, ``warning``, ...).
    """
    messages: ConsoleMessages = defaultdict(list)

    def on_console(message: ConsoleMessage) -> None:
        messages[message.type].append(message.text)

    page.on("console", on_console)
    return messages
