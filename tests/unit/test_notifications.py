"""Unit tests for notification services."""
from __future__ import annotations

import smtplib
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from autorepay.config import EmailConfig, TelegramConfig
from autorepay.models import DepositEvent, SweepEvent, WithdrawalEvent
from autorepay.notifications import (
    EmailNotifier,
    NotificationDispatcher,
    TelegramNotifier,
    format_event,
)

WAD = 10**18


# ---------------------------------------------------------------------------
# TelegramNotifier
# ---------------------------------------------------------------------------


@pytest.fixture()
def telegram_notifier() -> TelegramNotifier:
    return TelegramNotifier(
        TelegramConfig(
            enabled=True,
            alert_bot_token="alert-tok",
            log_bot_token="log-tok",
            chat_id="12345",
        )
    )


def _mock_session(status: int) -> AsyncMock:
    mock_response = AsyncMock()
    mock_response.status = status
    mock_response.__aenter__ = AsyncMock(return_value=mock_response)
    mock_response.__aexit__ = AsyncMock(return_value=None)

    mock_session = AsyncMock()
    mock_session.post = MagicMock(return_value=mock_response)
    mock_session.__aenter__ = AsyncMock(return_value=mock_session)
    mock_session.__aexit__ = AsyncMock(return_value=None)
    return mock_session


class TestTelegramNotifier:
    @pytest.mark.asyncio
    async def test_send_alert_success(self, telegram_notifier: TelegramNotifier) -> None:
        session = _mock_session(200)

        with patch("autorepay.notifications.telegram.aiohttp.ClientSession", return_value=session):
            with patch("autorepay.notifications.telegram.aiohttp.TCPConnector"):
                result = await telegram_notifier.send_alert("sweep failed", subject="Alert")

        assert result is True
        url = session.post.call_args.args[0]
        payload = session.post.call_args.kwargs["json"]
        assert "botalert-tok" in url
        assert payload["text"] == "Alert\n\nsweep failed"
        assert payload["disable_notification"] is False

    @pytest.mark.asyncio
    async def test_send_log_uses_log_bot(self, telegram_notifier: TelegramNotifier) -> None:
        session = _mock_session(200)

        with patch("autorepay.notifications.telegram.aiohttp.ClientSession", return_value=session):
            with patch("autorepay.notifications.telegram.aiohttp.TCPConnector"):
                result = await telegram_notifier.send_log("a < b", silent=True)

        assert result is True
        payload = session.post.call_args.kwargs["json"]
        assert "botlog-tok" in session.post.call_args.args[0]
        assert payload["text"] == "a &lt; b"
        assert payload["disable_notification"] is True

    @pytest.mark.asyncio
    async def test_http_error_returns_false(self, telegram_notifier: TelegramNotifier) -> None:
        session = _mock_session(403)

        with patch("autorepay.notifications.telegram.aiohttp.ClientSession", return_value=session):
            with patch("autorepay.notifications.telegram.aiohttp.TCPConnector"):
                result = await telegram_notifier.send_alert("x")

        assert result is False

    @pytest.mark.asyncio
    async def test_client_error_returns_false(self, telegram_notifier: TelegramNotifier) -> None:
        mock_session = AsyncMock()
        mock_session.post = MagicMock(side_effect=aiohttp.ClientConnectionError("refused"))
        mock_session.__aenter__ = AsyncMock(return_value=mock_session)
        mock_session.__aexit__ = AsyncMock(return_value=None)

        with patch("autorepay.notifications.telegram.aiohttp.ClientSession", return_value=mock_session):
            with patch("autorepay.notifications.telegram.aiohttp.TCPConnector"):
                result = await telegram_notifier.send_alert("x")

        assert result is False

    @pytest.mark.asyncio
    async def test_unconfigured_returns_false(self) -> None:
        notifier = TelegramNotifier(TelegramConfig(enabled=True))
        assert await notifier.send_alert("x") is False
        assert await notifier.send_log("x") is False


# ---------------------------------------------------------------------------
# EmailNotifier
# ---------------------------------------------------------------------------


@pytest.fixture()
def email_config() -> EmailConfig:
    return EmailConfig(
        enabled=True,
        alert_email="ops@example.com",
        smtp_server="smtp.example.com",
        smtp_port=587,
        sender_email="vault@example.com",
        sender_password="pw",
    )


class TestEmailNotifier:
    @pytest.mark.asyncio
    async def test_send_alert_success(self, email_config: EmailConfig) -> None:
        notifier = EmailNotifier(email_config)
        with patch("autorepay.notifications.email.smtplib.SMTP") as mock_smtp:
            server = mock_smtp.return_value.__enter__.return_value
            result = await notifier.send_alert("body", subject="Vault sweep failed")

        assert result is True
        mock_smtp.assert_called_once_with("smtp.example.com", 587)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("vault@example.com", "pw")
        sent = server.send_message.call_args.args[0]
        assert sent["Subject"] == "Vault sweep failed"
        assert sent["To"] == "ops@example.com"

    @pytest.mark.asyncio
    async def test_smtp_error_returns_false(self, email_config: EmailConfig) -> None:
        notifier = EmailNotifier(email_config)
        with patch("autorepay.notifications.email.smtplib.SMTP") as mock_smtp:
            server = mock_smtp.return_value.__enter__.return_value
            server.login.side_effect = smtplib.SMTPAuthenticationError(535, b"bad auth")
            result = await notifier.send_alert("body")

        assert result is False

    @pytest.mark.asyncio
    async def test_missing_credentials_skips(self) -> None:
        notifier = EmailNotifier(EmailConfig(enabled=True, alert_email="ops@example.com"))
        with patch("autorepay.notifications.email.smtplib.SMTP") as mock_smtp:
            assert await notifier.send_alert("body") is False
        mock_smtp.assert_not_called()

    @pytest.mark.asyncio
    async def test_send_log_is_not_emailed(self, email_config: EmailConfig) -> None:
        assert await EmailNotifier(email_config).send_log("x") is False


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------


class TestFormatEvent:
    def test_deposit(self) -> None:
        text = format_event(
            DepositEvent("alice", 100 * WAD, 9997 * 10**16, 3 * 10**16, 13_329_333 * 10**16, 0)
        )
        assert "Deposit · alice" in text
        assert "100.0000 WETH" in text
        assert "fee 0.0300" in text
        assert "$133,293.33" in text

    def test_withdrawal(self) -> None:
        text = format_event(WithdrawalEvent("bob", 5 * WAD, 0, 0), asset="ETH")
        assert "Withdrawal · bob" in text
        assert "5.0000 ETH" in text

    def test_sweep(self) -> None:
        assert "3 accounts" in format_event(SweepEvent(3, 10 * WAD, 0))

    def test_unknown_event_raises(self) -> None:
        with pytest.raises(TypeError):
            format_event("not an event")  # type: ignore[arg-type]


class TestNotificationDispatcher:
    @pytest.mark.asyncio
    async def test_forwards_to_every_notifier(self) -> None:
        first, second = AsyncMock(), AsyncMock()
        dispatcher = NotificationDispatcher([first, second])
        await dispatcher.on_event(SweepEvent(1, 0, 0))
        first.send_log.assert_awaited_once()
        assert second.send_log.call_args.kwargs["silent"] is True

    @pytest.mark.asyncio
    async def test_failing_notifier_does_not_stop_others(self) -> None:
        broken, healthy = AsyncMock(), AsyncMock()
        broken.send_log.side_effect = RuntimeError("down")
        await NotificationDispatcher([broken, healthy]).on_event(SweepEvent(1, 0, 0))
        healthy.send_log.assert_awaited_once()
