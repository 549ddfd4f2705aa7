"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from mess_tracker.adapters.bcrypt_hasher import BcryptSecretHasher
from mess_tracker.adapters.jwt_codec import PyJwtTokenCodec
from mess_tracker.adapters.supabase_extra_item_repository import (
    SupabaseExtraItemRepository,
)
from mess_tracker.adapters.supabase_meal_entry_repository import (
    SupabaseMealEntryRepository,
)
from mess_tracker.adapters.supabase_meal_plan_repository import (
    SupabaseMealPlanRepository,
)
from mess_tracker.adapters.supabase_stats_repository import SupabaseStatsRepository
from mess_tracker.adapters.supabase_subscription_repository import (
    SupabaseSubscriptionRepository,
)
from mess_tracker.adapters.supabase_user_repository import SupabaseUserRepository
from mess_tracker.config import Settings
from mess_tracker.services.auth import AuthService
from mess_tracker.services.catalog import ExtraItemService, MealPlanService
from mess_tracker.services.meals import MealEntryService
from mess_tracker.services.stats import StatsService
from mess_tracker.services.subscriptions import SubscriptionService
from mess_tracker.services.users import UserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    user_service: UserService
    auth_service: AuthService
    meal_plan_service: MealPlanService
    extra_item_service: ExtraItemService
    subscription_service: SubscriptionService
    meal_entry_service: MealEntryService
    stats_service: StatsService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    user_service = UserService(
        repository=SupabaseUserRepository(supabase_client),
        hasher=BcryptSecretHasher(rounds=resolved_settings.bcrypt_rounds),
    )
    auth_service = AuthService(
        user_service=user_service,
        codec=PyJwtTokenCodec(
            secret=resolved_settings.jwt_secret,
            algorithm=resolved_settings.jwt_algorithm,
        ),
        expires_in=resolved_settings.token_lifetime,
    )
    meal_plan_service = MealPlanService(SupabaseMealPlanRepository(supabase_client))
    extra_item_service = ExtraItemService(
        SupabaseExtraItemRepository(supabase_client)
    )
    subscription_service = SubscriptionService(
        repository=SupabaseSubscriptionRepository(supabase_client),
        meal_plan_service=meal_plan_service,
        user_service=user_service,
    )
    meal_entry_service = MealEntryService(
        repository=SupabaseMealEntryRepository(supabase_client),
        user_service=user_service,
        extra_item_service=extra_item_service,
        subscription_service=subscription_service,
    )
    stats_service = StatsService(SupabaseStatsRepository(supabase_client))

    return AppContainer(
        settings=resolved_settings,
        user_service=user_service,
        auth_service=auth_service,
        meal_plan_service=meal_plan_service,
        extra_item_service=extra_item_service,
        subscription_service=subscription_service,
        meal_entry_service=meal_entry_service,
        stats_service=stats_service,
    )
