from __future__ import annotations

from collections.abc import Iterator

import pytest

from bpa_backend_starter.security import bound_request_token, get_header_jwt, set_service_token


@pytest.fixture(autouse=True)
def reset_service_token() -> Iterator[None]:
    yield
    set_service_token("")


def test_falls_back_to_service_token() -> None:
    set_service_token("  svc  ")

    assert get_header_jwt() == "svc"


def test_request_token_wins_inside_block_only() -> None:
    set_service_token("svc")

    with bound_request_token("Bearer caller"):
        assert get_header_jwt() == "Bearer caller"

    assert get_header_jwt() == "svc"


def test_blank_request_token_is_ignored() -> None:
    set_service_token("svc")

    with bound_request_token("   "):
        assert get_header_jwt() == "svc"
