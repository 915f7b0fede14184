"""SMS notifier protocol."""

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class SmsResult:
    """Outcome of an SMS send attempt."""

    success: bool
    message_id: str | None = None
    error: str | None = None


class ISmsNotifier(Protocol):
    """Protocol for outbound SMS delivery.

    Implementations never raise for delivery problems; they report them
    through ``SmsResult.success``.
    """

    async def send(self, phone: str, template: str, args: dict[str, Any]) -> SmsResult:
        """
        Send a templated SMS.

        Args:
            phone: Destination number in E.164 form
            template: ``str.format`` template for the message body
            args: Values substituted into the template

        Returns:
            SmsResult describing whether the message was accepted
        """
        ...
