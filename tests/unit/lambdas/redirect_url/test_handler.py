import json
from datetime import datetime, timedelta, UTC
from typing import cast
from unittest.mock import MagicMock

import pytest
from pytest import MonkeyPatch
from freezegun import freeze_time

from linkshortener.types import LambdaEvent, LambdaContext, LambdaConfiguration
from linkshortener.lambdas.redirect_url import app
from linkshortener.models import ShortURLModel
from linkshortener.dao.base import ShortURLBaseDAO, ClickBaseDAO
from linkshortener.dao.exceptions import DataStoreError, ShortURLNotFoundError


def _event(path_parameters, headers=None) -> LambdaEvent:
    return cast(LambdaEvent, {
        'resource': '/{shortcode}',
        'pathParameters': path_parameters,
        'headers': headers or {},
        'httpMethod': 'GET',
        'path': '/abc123',
        'requestContext': {
            'resourcePath': '/{shortcode}',
            'httpMethod': 'GET',
            'domainName': 'sho.rt',
            'stage': 'test',
            'identity': {'sourceIp': '10.0.0.1'},
        },
    })


@pytest.fixture
def successful_event_302() -> LambdaEvent:
    return _event(
        {'shortcode': 'abc123'},
        headers={
            'Referer': 'https://ref.example.com',
            'User-Agent': 'pytest/8.0',
            'X-Forwarded-For': '203.0.113.7, 10.0.0.1',
        },
    )


class TestRedirectUrlHandler:

    @pytest.fixture
    def config(self) -> LambdaConfiguration:
        return cast(LambdaConfiguration, {'redis': {'host': 'redis.test', 'port': 6379, 'db': 0}})

    @pytest.fixture
    def short_url_dao(self) -> ShortURLBaseDAO:
        dao = MagicMock(spec=ShortURLBaseDAO)
        dao.get.return_value = ShortURLModel(
            target='https://example.com/blog/chuck-norris-is-awesome',
            shortcode='abc123',
            created_at=datetime(2025, 10, 15, 12, 0, tzinfo=UTC),
            validity_minutes=1,
        )
        return dao

    @pytest.fixture
    def click_dao(self) -> ClickBaseDAO:
        return MagicMock(spec=ClickBaseDAO)

    @pytest.fixture(autouse=True)
    def setup(
        self,
        monkeypatch: MonkeyPatch,
        context: LambdaContext,
        config: LambdaConfiguration,
        short_url_dao: ShortURLBaseDAO,
        click_dao: ClickBaseDAO,
    ) -> None:
        # Patch Lambda dependencies
        monkeypatch.setattr(app, 'load_config', lambda *a, **kw: config)
        monkeypatch.setattr(app, 'ShortURLRedisDAO', lambda *a, **kw: short_url_dao)
        monkeypatch.setattr(app, 'ClickRedisDAO', lambda *a, **kw: click_dao)

        self.context = context
        self.short_url_dao = short_url_dao
        self.click_dao = click_dao

    @freeze_time('2025-10-15 12:00:30')
    def test_lambda_handler(self, successful_event_302: LambdaEvent) -> None:
        response = app.lambda_handler(successful_event_302, self.context)

        # Assert Lambda successfully redirects user to target URL
        assert response['statusCode'] == 302
        assert response['headers']['Location'] == 'https://example.com/blog/chuck-norris-is-awesome'
        self.short_url_dao.get.assert_called_once_with(shortcode='abc123')

        # Assert click was recorded
        self.click_dao.insert.assert_called_once()
        click = self.click_dao.insert.call_args.kwargs['click']
        assert click.shortcode == 'abc123'
        assert click.clicked_at == datetime(2025, 10, 15, 12, 0, 30, tzinfo=UTC)
        assert click.referrer == 'https://ref.example.com'
        assert click.ip_address == '203.0.113.7'
        assert click.user_agent == 'pytest/8.0'

    @freeze_time('2025-10-15 12:00:30')
    def test_lambda_handler_without_headers(self) -> None:
        response = app.lambda_handler(_event({'shortcode': 'abc123'}), self.context)

        assert response['statusCode'] == 302
        click = self.click_dao.insert.call_args.kwargs['click']
        assert click.referrer is None
        assert click.ip_address == '10.0.0.1'
        assert click.user_agent is None

    @freeze_time('2025-10-15 12:00:30')
    def test_lambda_handler_redirects_when_click_recording_fails(self, successful_event_302: LambdaEvent) -> None:
        self.click_dao.insert.side_effect = DataStoreError('down')

        response = app.lambda_handler(successful_event_302, self.context)

        assert response['statusCode'] == 302
        assert response['headers']['Location'] == 'https://example.com/blog/chuck-norris-is-awesome'

    @pytest.mark.parametrize('path_parameters', [{'invalid': 'path'}, None, {'shortcode': ''}])
    def test_lambda_handler_with_invalid_path_parameters(self, path_parameters) -> None:
        response = app.lambda_handler(_event(path_parameters), self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 400
        assert body['errorCode'] == 'MISSING_SHORTCODE'

    @pytest.mark.parametrize('shortcode', ['api', 'shorturls', 'health', 'favicon.ico'])
    def test_lambda_handler_with_reserved_path(self, shortcode) -> None:
        response = app.lambda_handler(_event({'shortcode': shortcode}), self.context)

        assert response['statusCode'] == 404
        self.short_url_dao.get.assert_not_called()

    def test_lambda_handler_with_unknown_shortcode(self, successful_event_302: LambdaEvent) -> None:
        self.short_url_dao.get.side_effect = ShortURLNotFoundError()

        response = app.lambda_handler(successful_event_302, self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 404
        assert body['error'] == 'Short URL not found'
        assert body['message'] == 'The requested shortcode does not exist'
        assert body['errorCode'] == 'SHORT_URL_NOT_FOUND'
        self.click_dao.insert.assert_not_called()

    @freeze_time('2025-10-15 12:01:00')
    def test_lambda_handler_at_expiry(self, successful_event_302: LambdaEvent) -> None:
        response = app.lambda_handler(successful_event_302, self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 410
        assert body['error'] == 'Short URL expired'
        assert body['message'] == 'This short URL has expired and is no longer valid'
        assert body['errorCode'] == 'SHORT_URL_EXPIRED'
        assert body['expiredAt'] == '2025-10-15T12:01:00.000Z'
        self.click_dao.insert.assert_not_called()

    def test_lambda_handler_keeps_reporting_expiry(self, successful_event_302: LambdaEvent) -> None:
        expired_at = []
        with freeze_time('2025-10-15 12:02:00') as frozen:
            for _ in range(3):
                response = app.lambda_handler(successful_event_302, self.context)
                assert response['statusCode'] == 410
                expired_at.append(json.loads(response['body'])['expiredAt'])
                frozen.tick(timedelta(hours=6))

        assert expired_at == ['2025-10-15T12:01:00.000Z'] * 3

    def test_lambda_handler_with_invalid_configuration_file(self, monkeypatch: MonkeyPatch) -> None:
        monkeypatch.setattr(app, 'load_config', MagicMock(side_effect=FileNotFoundError('Something goes wrong')))

        response = app.lambda_handler(_event({'shortcode': 'abc123'}), self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 500
        assert body['errorCode'] == 'CONFIGURATION_ERROR'

    def test_lambda_handler_with_unreachable_data_store(self, successful_event_302: LambdaEvent) -> None:
        self.short_url_dao.get.side_effect = DataStoreError("Can't connect to Redis at redis.test:6379/0.")

        response = app.lambda_handler(successful_event_302, self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 500
        assert body['errorCode'] == 'UNKNOWN_INTERNAL_SERVER_ERROR'
        assert 'Redis' not in response['body']
