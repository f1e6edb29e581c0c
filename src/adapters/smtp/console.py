"""
Console activation sender adapter - Implements ActivationSender protocol.

This module provides a console-based implementation of the domain's
sender port, logging activation links and codes for demo purposes.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleActivationSender:
    """
    Implements ActivationSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - prints activation credentials to stdout.
    """

    def send_activation(self, email: str, link: str, code: str) -> None:
        """
        Log activation link and code to console (simulates email delivery).

        In production, this would be replaced with an SMTP adapter.

        Args:
            email: Recipient email address
            link: Activation link containing the token
            code: Six-digit activation code
        """
        logger.info("[ACTIVATION] Email: %s Link: %s Code: %s", email, link, code)
