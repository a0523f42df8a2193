"""Tests for remote-service error classification."""

import httpx
import pytest

from callmetrics.core.errors import ServiceError, service_status_code

pytestmark = [pytest.mark.tier(0)]


class TestServiceStatusCode:
    """Tests for service_status_code()."""

    @pytest.mark.core
    def test_none_is_unclassified(self) -> None:
        """No error has no status."""
        assert service_status_code(None) is None

    @pytest.mark.core
    def test_service_error(self) -> None:
        """ServiceError carries its status."""
        assert service_status_code(ServiceError("throttled", 503)) == 503

    @pytest.mark.core
    def test_plain_exception_unclassified(self) -> None:
        """Errors without a status are unclassified."""
        assert service_status_code(ConnectionError("reset")) is None

    @pytest.mark.core
    def test_duck_typed_status_code(self) -> None:
        """Any error exposing an integer status_code is classified."""

        class ClientError(Exception):
            status_code = 404

        assert service_status_code(ClientError()) == 404

    @pytest.mark.core
    def test_non_integer_status_ignored(self) -> None:
        """A non-integer status_code attribute is not a status."""

        class OddError(Exception):
            status_code = "404"

        assert service_status_code(OddError()) is None

    @pytest.mark.core
    def test_bool_status_ignored(self) -> None:
        """Booleans are not status codes."""

        class FlagError(Exception):
            status_code = True

        assert service_status_code(FlagError()) is None

    def test_httpx_status_error(self) -> None:
        """httpx.HTTPStatusError is classified through its response."""
        request = httpx.Request("GET", "https://example.com/items")
        response = httpx.Response(502, request=request)
        error = httpx.HTTPStatusError("bad gateway", request=request, response=response)
        assert service_status_code(error) == 502

    def test_httpx_transport_error_unclassified(self) -> None:
        """Transport failures carry no status."""
        request = httpx.Request("GET", "https://example.com/items")
        assert service_status_code(httpx.ConnectError("refused", request=request)) is None
