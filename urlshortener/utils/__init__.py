from urlshortener.utils.config import app_env, app_name, app_prefix, appconfig_enabled, load_appconfig, load_config
from urlshortener.utils.helpers import add_months, require_environment
from urlshortener.utils.expiration import ExpirationDirective, parse_expiration
from urlshortener.utils.logging import initialize_logging


__all__ = [
    'app_env',
    'app_name',
    'app_prefix',
    'appconfig_enabled',
    'load_appconfig',
    'load_config',
    'add_months',
    'require_environment',
    'ExpirationDirective',
    'parse_expiration',
    'initialize_logging',
]
