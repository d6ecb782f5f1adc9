from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from botocore.client import BaseClient


# Type aliases for Python dictionaries
type AppConfig = dict[str, Any]
type QueryParams = Mapping[str, str]

# Type aliases for injected collaborators
type Clock = Callable[[], datetime]
type TokenFactory = Callable[[], str]

# Type aliases for boto3 clients
type AppConfigDataClient = BaseClient
