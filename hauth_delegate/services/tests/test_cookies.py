"""Tests for :mod:`hauth_delegate.services.cookies`."""

from unittest import TestCase, mock
from typing import Any
import base64
import json

import requests

from hauth_delegate.services import cookies

CAMPUS = 'https://auth.example.edu/token'
AFFILIATE = 'https://sinai.example.edu/token'
COOKIE = 'iiif-access=b64cookie'


def access_token(**claims: Any) -> str:
    return base64.b64encode(json.dumps(claims).encode('utf-8')).decode('ascii')


def token_response(body: Any, status_code: int = 200) -> Any:
    response = mock.MagicMock(status_code=status_code,
                              ok=status_code < 400)
    response.json.return_value = body
    return response


class TestValidateCampusNetwork(TestCase):
    """:meth:`.CookieValidationSession.validate_campus_network`."""

    @mock.patch('hauth_delegate.services.cookies.requests.Session')
    def test_valid_cookie(self, mock_session: Any) -> None:
        """The token service vouches for a campus network client."""
        mock_session_instance = mock.MagicMock()
        mock_session_instance.get.return_value = token_response({
            'accessToken': access_token(**{'version': '0.0.0',
                                           'campus-network': True}),
            'expiresIn': 3600
        })
        mock_session.return_value = mock_session_instance

        session = cookies.CookieValidationSession(CAMPUS, AFFILIATE, 5)
        self.assertTrue(session.validate_campus_network(COOKIE, '10.0.0.1'))
        mock_session_instance.get.assert_called_once_with(
            CAMPUS,
            headers={'Cookie': COOKIE, 'X-Forwarded-For': '10.0.0.1'},
            timeout=5
        )

    @mock.patch('hauth_delegate.services.cookies.requests.Session')
    def test_off_campus(self, mock_session: Any) -> None:
        """The token says the client is not on the campus network."""
        mock_session_instance = mock.MagicMock()
        mock_session_instance.get.return_value = token_response({
            'accessToken': access_token(**{'version': '0.0.0',
                                           'campus-network': False}),
        })
        mock_session.return_value = mock_session_instance

        session = cookies.CookieValidationSession(CAMPUS, AFFILIATE)
        self.assertFalse(session.validate_campus_network(COOKIE))
        mock_session_instance.get.assert_called_once_with(
            CAMPUS, headers={'Cookie': COOKIE}, timeout=10.0
        )

    @mock.patch('hauth_delegate.services.cookies.requests.Session')
    def test_no_cookie(self, mock_session: Any) -> None:
        """Without cookies the token service is not called."""
        mock_session_instance = mock.MagicMock()
        mock_session.return_value = mock_session_instance

        session = cookies.CookieValidationSession(CAMPUS, AFFILIATE)
        self.assertFalse(session.validate_campus_network(None, '10.0.0.1'))
        self.assertFalse(session.validate_campus_network(''))
        mock_session_instance.get.assert_not_called()

    @mock.patch('hauth_delegate.services.cookies.requests.Session')
    def test_wrong_token_shape(self, mock_session: Any) -> None:
        """An affiliate token does not prove campus network access."""
        mock_session_instance = mock.MagicMock()
        mock_session_instance.get.return_value = token_response({
            'accessToken': access_token(version='0.0.0', sinaiAffiliate=True),
        })
        mock_session.return_value = mock_session_instance

        session = cookies.CookieValidationSession(CAMPUS, AFFILIATE)
        self.assertFalse(session.validate_campus_network(COOKIE))


class TestValidateAffiliate(TestCase):
    """:meth:`.CookieValidationSession.validate_affiliate`."""

    @mock.patch('hauth_delegate.services.cookies.requests.Session')
    def test_valid_cookie(self, mock_session: Any) -> None:
        """The affiliate token service vouches for the client."""
        mock_session_instance = mock.MagicMock()
        mock_session_instance.get.return_value = token_response({
            'accessToken': access_token(version='0.0.0', sinaiAffiliate=True),
        })
        mock_session.return_value = mock_session_instance

        session = cookies.CookieValidationSession(CAMPUS, AFFILIATE)
        self.assertTrue(session.validate_affiliate(COOKIE, '192.0.2.7'))
        mock_session_instance.get.assert_called_once_with(
            AFFILIATE,
            headers={'Cookie': COOKIE, 'X-Forwarded-For': '192.0.2.7'},
            timeout=10.0
        )

    @mock.patch('hauth_delegate.services.cookies.requests.Session')
    def test_not_affiliated(self, mock_session: Any) -> None:
        """The affiliate token says the client is not an affiliate."""
        mock_session_instance = mock.MagicMock()
        mock_session_instance.get.return_value = token_response({
            'accessToken': access_token(version='0.0.0', sinaiAffiliate=False),
        })
        mock_session.return_value = mock_session_instance

        session = cookies.CookieValidationSession(CAMPUS, AFFILIATE)
        self.assertFalse(session.validate_affiliate(COOKIE))

    @mock.patch('hauth_delegate.services.cookies.requests.Session')
    def test_error_status(self, mock_session: Any) -> None:
        """A non-2xx response means the cookie is not valid."""
        for status_code in [400, 401, 403, 404, 500, 503]:
            mock_session_instance = mock.MagicMock()
            mock_session_instance.get.return_value = token_response({
                'accessToken': access_token(version='0.0.0',
                                            sinaiAffiliate=True),
            }, status_code)
            mock_session.return_value = mock_session_instance

            session = cookies.CookieValidationSession(CAMPUS, AFFILIATE)
            self.assertFalse(session.validate_affiliate(COOKIE))

    @mock.patch('hauth_delegate.services.cookies.requests.Session')
    def test_unreachable(self, mock_session: Any) -> None:
        """Network failures mean the cookie is not valid."""
        for exc in [requests.exceptions.ConnectionError,
                    requests.exceptions.ReadTimeout]:
            mock_session_instance = mock.MagicMock()
            mock_session_instance.get.side_effect = exc
            mock_session.return_value = mock_session_instance

            session = cookies.CookieValidationSession(CAMPUS, AFFILIATE)
            self.assertFalse(session.validate_affiliate(COOKIE))
            self.assertEqual(mock_session_instance.get.call_count, 1)

    @mock.patch('hauth_delegate.services.cookies.requests.Session')
    def test_malformed_body(self, mock_session: Any) -> None:
        """Responses without a readable access token are not valid."""
        bodies = [
            {},
            {'error': 'missingCredentials'},
            {'accessToken': None},
            {'accessToken': 12},
            {'accessToken': 'not base64!'},
            {'accessToken': base64.b64encode(b'not json').decode('ascii')},
            {'accessToken': base64.b64encode(b'[' * 100000).decode('ascii')},
            {'accessToken': access_token(version='0.0.0')},
            {'accessToken': access_token(version='0.0.0',
                                         sinaiAffiliate='true')},
            ['accessToken'],
        ]
        for body in bodies:
            mock_session_instance = mock.MagicMock()
            mock_session_instance.get.return_value = token_response(body)
            mock_session.return_value = mock_session_instance

            session = cookies.CookieValidationSession(CAMPUS, AFFILIATE)
            self.assertFalse(session.validate_affiliate(COOKIE),
                             f'Body {body!r}')

    @mock.patch('hauth_delegate.services.cookies.requests.Session')
    def test_not_json(self, mock_session: Any) -> None:
        """A body that is not JSON is not a valid token response."""
        response = mock.MagicMock(status_code=200, ok=True)
        response.json.side_effect = ValueError('No JSON object')
        mock_session_instance = mock.MagicMock()
        mock_session_instance.get.return_value = response
        mock_session.return_value = mock_session_instance

        session = cookies.CookieValidationSession(CAMPUS, AFFILIATE)
        self.assertFalse(session.validate_affiliate(COOKIE))
