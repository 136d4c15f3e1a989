"""Unit tests for NotificationDispatcher and DiscordChannel."""
import json
import logging
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest
import responses
from requests.exceptions import Timeout

from messaging.discord_channel import DiscordChannel
from messaging.dispatcher import NotificationDispatcher
from processor.errors import DispatchError
from processor.models import Event, OutcomeStatus
from reporting.error_reporter import ErrorReporter

MESSAGES_URL = "https://discord.com/api/v10/channels/chan-1/messages"


@pytest.fixture
def sample_event():
    return Event(
        id='111',
        name='Game Night',
        start_time=datetime(2024, 1, 16, 19, 0, tzinfo=timezone.utc)
    )


class TestDiscordChannel:
    """Test cases for DiscordChannel class."""

    @responses.activate
    def test_post_message_success(self):
        """Test message content and auth header are sent."""
        responses.add(responses.POST, MESSAGES_URL, json={'id': 'm1'}, status=200)

        DiscordChannel(timeout=10).post_message('chan-1', 'secret', 'hello')

        request = responses.calls[0].request
        assert json.loads(request.body) == {'content': 'hello'}
        assert request.headers['Authorization'] == 'Bot secret'

    @responses.activate
    def test_post_message_rejected(self):
        """Test a rejected post raises with the channel's payload."""
        responses.add(
            responses.POST,
            MESSAGES_URL,
            json={'message': 'Missing Access', 'code': 50001},
            status=403
        )

        with pytest.raises(DispatchError) as exc_info:
            DiscordChannel().post_message('chan-1', 'secret', 'hello')

        assert 'Missing Access' in str(exc_info.value)

    @responses.activate
    def test_post_message_timeout(self):
        """Test transport errors are wrapped as DispatchError."""
        responses.add(responses.POST, MESSAGES_URL, body=Timeout('timed out'))

        with pytest.raises(DispatchError):
            DiscordChannel().post_message('chan-1', 'secret', 'hello')


class TestNotificationDispatcher:
    """Test cases for NotificationDispatcher class."""

    def test_dispatch_success(self, sample_event):
        """Test accepted posts produce a sent outcome."""
        channel = Mock()
        reporter = ErrorReporter()
        dispatcher = NotificationDispatcher(channel, 'chan-1', 'secret', reporter)

        outcome = dispatcher.dispatch(sample_event, 'hello')

        channel.post_message.assert_called_once_with('chan-1', 'secret', 'hello')
        assert outcome.event_id == '111'
        assert outcome.status == OutcomeStatus.SENT
        assert outcome.error_detail is None
        assert reporter.reports == []

    def test_dispatch_failure(self, sample_event):
        """Test rejected posts produce a failed outcome and a report."""
        channel = Mock()
        channel.post_message.side_effect = DispatchError(
            'Failed to post message: Missing Access'
        )
        reporter = ErrorReporter()
        dispatcher = NotificationDispatcher(channel, 'chan-1', 'secret', reporter)

        outcome = dispatcher.dispatch(sample_event, 'hello')

        assert outcome.status == OutcomeStatus.FAILED
        assert 'Missing Access' in outcome.error_detail
        assert len(reporter.reports) == 1
        assert reporter.reports[0]['context'] == {'event_id': '111'}

    def test_dispatch_unexpected_error_does_not_raise(self, sample_event):
        """Test unexpected client errors are contained in the outcome."""
        channel = Mock()
        channel.post_message.side_effect = RuntimeError('boom')
        dispatcher = NotificationDispatcher(channel, 'chan-1', 'secret', Mock())

        outcome = dispatcher.dispatch(sample_event, 'hello')

        assert outcome.status == OutcomeStatus.FAILED
        assert outcome.error_detail == 'boom'

    @responses.activate
    def test_dispatch_does_not_retry(self, sample_event):
        """Test a failed post is attempted exactly once."""
        responses.add(responses.POST, MESSAGES_URL, body='Server Error', status=500)
        dispatcher = NotificationDispatcher(
            DiscordChannel(), 'chan-1', 'secret', ErrorReporter()
        )

        outcome = dispatcher.dispatch(sample_event, 'hello')

        assert outcome.status == OutcomeStatus.FAILED
        assert len(responses.calls) == 1

    @pytest.mark.parametrize('error', [
        DispatchError('Failed to post message: Missing Access'),
        RuntimeError('boom'),
    ])
    def test_failure_logged_once(self, sample_event, error, caplog):
        """Test a failed post produces exactly one ERROR record and no warnings."""
        channel = Mock()
        channel.post_message.side_effect = error
        dispatcher = NotificationDispatcher(
            channel, 'chan-1', 'secret', ErrorReporter()
        )

        with caplog.at_level(logging.DEBUG):
            dispatcher.dispatch(sample_event, 'hello')

        errors = [r for r in caplog.records if r.levelno >= logging.ERROR]
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(errors) == 1
        assert warnings == []
