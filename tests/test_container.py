"""Tests for container wiring."""

from mess_tracker.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.meal_entry_service.subscription_service is (
        container.subscription_service
    )
    assert container.auth_service.expires_in == settings.token_lifetime
