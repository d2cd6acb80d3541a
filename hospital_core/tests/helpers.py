# hospital_core/tests/helpers.py
import json
from datetime import timedelta
from urllib.parse import urlencode, urlsplit

from django.utils import timezone


def local_noon(days: int = 1):
    """
    Aware datetime at 12:00 local time, `days` from today. Noon keeps the
    calendar date stable whatever the UTC offset.
    """
    today = timezone.localtime(timezone.now())
    return (today + timedelta(days=days)).replace(hour=12, minute=0, second=0, microsecond=0)


class _TestResponse:
    def __init__(self, response):
        self.status_code = response.status_code
        self.content = response.content

    def json(self):
        return json.loads(self.content.decode("utf-8"))


class APIClientTransport:
    """
    Stand-in for requests.Session: same request() signature, answered by DRF's APIClient.
    Records every call so tests can assert nothing was sent.
    """

    def __init__(self, api_client):
        self.api_client = api_client
        self.calls = []

    def request(self, method, url, *, json=None, params=None, headers=None, timeout=None):
        self.calls.append((method, url))

        path = urlsplit(url).path
        if params:
            path = f"{path}?{urlencode(params)}"

        extra = {}
        auth = (headers or {}).get("Authorization")
        if auth:
            extra["HTTP_AUTHORIZATION"] = auth

        body = "" if json is None else _dumps(json)
        response = self.api_client.generic(method, path, body, content_type="application/json", **extra)
        return _TestResponse(response)


def _dumps(payload):
    return json.dumps(payload)
