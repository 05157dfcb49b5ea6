from __future__ import annotations

from dataclasses import dataclass

from passreset.domain.ports.email_port import EmailPort
from passreset.domain.ports.notifier import PasscodeNotifier

PLACEHOLDER = "{code}"


@dataclass(frozen=True)
class MessageTemplates:
    subject: str = "Reset token"
    html_body: str = "Use this token to reset your password: <b>{code}</b>"
    text_body: str = "Use this token to reset your password: {code}"

    def render(self, template: str, code: str) -> str:
        # only the placeholder is substituted; other braces (inline CSS) are kept
        return template.replace(PLACEHOLDER, code)


class EmailPasscodeNotifier(PasscodeNotifier):
    """Renders the reset message and mails it to the identity."""

    def __init__(self, email: EmailPort, templates: MessageTemplates) -> None:
        self._email = email
        self._templates = templates

    async def deliver(self, identity: str, code: str) -> None:
        t = self._templates
        await self._email.send(
            to=identity,
            subject=t.render(t.subject, code),
            body=t.render(t.text_body, code),
            html_body=t.render(t.html_body, code),
        )
