"""Dependency injection singletons for x402 Exchange."""

from x402_exchange.accounts.service import AccountService
from x402_exchange.api_keys.service import ApiKeyService
from x402_exchange.calls.service import CallService
from x402_exchange.common.config import get_settings
from x402_exchange.common.database import DatabaseManager
from x402_exchange.endpoints.service import EndpointService
from x402_exchange.resolver.service import ConfigResolver
from x402_exchange.seeder.service import DemoSeeder
from x402_exchange.wallets.service import WalletService

_db: DatabaseManager | None = None
_accounts: AccountService | None = None
_wallets: WalletService | None = None
_endpoints: EndpointService | None = None
_api_keys: ApiKeyService | None = None
_calls: CallService | None = None
_resolver: ConfigResolver | None = None
_seeder: DemoSeeder | None = None


def get_db() -> DatabaseManager:
    global _db
    if _db is None:
        _db = DatabaseManager(get_settings())
    return _db


def get_account_service() -> AccountService:
    global _accounts
    if _accounts is None:
        _accounts = AccountService()
    return _accounts


def get_wallet_service() -> WalletService:
    global _wallets
    if _wallets is None:
        _wallets = WalletService()
    return _wallets


def get_endpoint_service() -> EndpointService:
    global _endpoints
    if _endpoints is None:
        _endpoints = EndpointService()
    return _endpoints


def get_api_key_service() -> ApiKeyService:
    global _api_keys
    if _api_keys is None:
        _api_keys = ApiKeyService(get_settings())
    return _api_keys


def get_call_service() -> CallService:
    global _calls
    if _calls is None:
        _calls = CallService(get_settings(), get_endpoint_service())
    return _calls


def get_config_resolver() -> ConfigResolver:
    global _resolver
    if _resolver is None:
        _resolver = ConfigResolver(
            get_settings(),
            api_keys=get_api_key_service(),
            wallets=get_wallet_service(),
            endpoints=get_endpoint_service(),
        )
    return _resolver


def get_demo_seeder() -> DemoSeeder:
    global _seeder
    if _seeder is None:
        _seeder = DemoSeeder(get_settings(), get_endpoint_service())
    return _seeder


def reset_singletons() -> None:
    """Reset all singletons (for testing)."""
    global _db, _accounts, _wallets, _endpoints, _api_keys, _calls, _resolver, _seeder
    _db = None
    _accounts = None
    _wallets = None
    _endpoints = None
    _api_keys = None
    _calls = None
    _resolver = None
    _seeder = None
