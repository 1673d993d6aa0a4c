from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional

from .conditions import AndCondition, Combinator, Property, PropertyCondition, build_condition
from .config import ChooserSettings
from .connectors.base import Node, TreeAccessor
from .errors import CredentialListTimeout, InteropFailure, NotTargetDialog
from .i18n import I18nKey, PatternProvider
from .keyboard import ModifierKeyOracle, StaticKeyOracle
from .policy import Decision, PolicyResult, decide

logger = logging.getLogger(__name__)

# Shared with the UAC elevation prompt, so content has to be checked as well
WINDOW_CLASS_NAME = "Credential Dialog Xaml Host"
SCROLL_VIEWER_CLASS_NAME = "ScrollViewer"
TEXT_BLOCK_CLASS_NAME = "TextBlock"
CREDENTIALS_LIST_ID = "CredentialsList"
OK_BUTTON_ID = "OkButton"


def is_fido_prompt_window(accessor: TreeAccessor, node: Node) -> bool:
    # Window name and title are localized, so only the class is compared
    try:
        return accessor.get_property(node, Property.CLASS_NAME) == WINDOW_CLASS_NAME
    except InteropFailure:
        return False


class SecurityKeyChooser:
    def __init__(
        self,
        accessor: TreeAccessor,
        patterns: Optional[PatternProvider] = None,
        key_oracle: Optional[ModifierKeyOracle] = None,
        settings: Optional[ChooserSettings] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.accessor = accessor
        self.patterns = patterns or PatternProvider()
        self.key_oracle = key_oracle or StaticKeyOracle(False)
        self.settings = settings or ChooserSettings()
        self._clock = clock
        self._sleep = sleep

    def on_candidate_window_opened(self, window: Node) -> None:
        if not is_fido_prompt_window(self.accessor, window):
            return
        self.choose_usb_security_key(window)

    def choose_usb_security_key(self, window: Node) -> Decision:
        try:
            self.verify_passkey_prompt(window)
            choices = self.retrieve_choices(window)
            result = self.decide(choices)
            self.apply(window, choices, result)
            return result.decision
        except NotTargetDialog as e:
            logger.debug("%s", e)
        except CredentialListTimeout as e:
            logger.error("%s", e, exc_info=True)
        except InteropFailure:
            logger.warning("UI Automation error while selecting security key, skipping this dialog box instance", exc_info=True)
        return Decision.SKIP

    def verify_passkey_prompt(self, window: Node) -> None:
        acc = self.accessor
        scroll = acc.find_first_child(window, PropertyCondition(Property.CLASS_NAME, SCROLL_VIEWER_CLASS_NAME))
        if scroll is None:
            raise NotTargetDialog("Window is not a passkey choice prompt (no scroll viewer)")
        title = acc.find_first_child(scroll, AndCondition(
            PropertyCondition(Property.CLASS_NAME, TEXT_BLOCK_CLASS_NAME),
            build_condition(self.patterns.patterns_for(I18nKey.SIGN_IN_WITH_YOUR_PASSKEY), Property.NAME, Combinator.OR),
        ))
        if title is None:
            raise NotTargetDialog("Window is not a passkey choice prompt")

    def retrieve_choices(self, window: Node, timeout: Optional[float] = None) -> List[Node]:
        """Wait for the credential list to be rendered and return its items in display order.

        The list is populated asynchronously after the window opens, so the
        subtree is searched again on every attempt until ``timeout`` seconds
        have passed, at which point ``CredentialListTimeout`` is raised.
        """
        if timeout is None:
            timeout = self.settings.timeout_seconds
        condition = PropertyCondition(Property.AUTOMATION_ID, CREDENTIALS_LIST_ID)
        start = self._clock()
        while self._clock() - start < timeout:
            credentials = self.accessor.find_first_descendant(window, condition)
            if credentials is not None:
                return self.accessor.get_children(credentials)
            self._sleep(self.settings.poll_interval_seconds)
        raise CredentialListTimeout(timeout)

    def decide(self, choices: List[Node]) -> PolicyResult:
        labels = [self.accessor.get_property(c, Property.NAME) for c in choices]
        return decide(
            labels,
            self.patterns.patterns_for(I18nKey.SECURITY_KEY),
            self.patterns.patterns_for(I18nKey.SMARTPHONE),
            override_held=self.key_oracle.is_override_held,
        )

    def apply(self, window: Node, choices: List[Node], result: PolicyResult) -> None:
        if result.decision is Decision.SKIP or result.index is None:
            logger.debug("%s, skipping", result.reason)
            return

        acc = self.accessor
        acc.select(choices[result.index])
        logger.info("USB security key selected")

        next_button = acc.find_first_child(window, PropertyCondition(Property.AUTOMATION_ID, OK_BUTTON_ID))
        if next_button is None:
            logger.warning("Could not find the dialog's Next button, leaving the dialog box open")
            return

        if result.decision is Decision.SELECT_AND_WAIT:
            acc.focus(next_button)
            logger.info("Not submitting dialog box because %s", result.reason)
            return

        acc.invoke(next_button)
        logger.info("Next button pressed")
