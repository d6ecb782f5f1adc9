"""Core short URL operations

ShortenerService ties the versioned store, the process-wide reader/writer
guard and the confirmation gate together behind four operations:

    resolve(shortcode)        shared lock   -> target URL
    history(shortcode)        shared lock   -> every version, oldest first
    list_current()            shared lock   -> {shortcode: target}
    create(shortcode, ...)    exclusive lock (only once confirmed)
                                            -> Created | NeedsConfirmation | BadRequest

The service is constructed once at startup (see build_service()) and handed to
the HTTP layer; nothing about it is global.

When a journal DAO is configured, every new version is written to the journal
first and to the in-memory store second, both inside the exclusive section.
The journal therefore holds versions in exactly the in-memory order, and
restore() rebuilds the in-memory store from it.
"""

import logging
from datetime import datetime, UTC

from urlshortener.constants import INVALID_CREATE_REQUEST, CONFIRMATION_REQUIRED, SHORT_URL_CREATED
from urlshortener.concurrency import ConcurrencyGuard
from urlshortener.confirmation import ConfirmationGate
from urlshortener.dao import ShortURLBaseDAO, ShortURLMemoryDAO, ShortURLRedisDAO
from urlshortener.exceptions import InvalidExpirationError
from urlshortener.models import ShortURLModel, Created, NeedsConfirmation, BadRequest, CreateOutcome
from urlshortener.types import AppConfig, Clock, QueryParams
from urlshortener.utils.config import app_prefix
from urlshortener.utils.expiration import parse_expiration


logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(UTC)


class ShortenerService:
    """Versioned short URL store guarded for concurrent use

    Attributes:
        store (ShortURLMemoryDAO):
            Authoritative in-memory histories.
        guard (ConcurrencyGuard):
            Reader/writer coordination around every store access.
        gate (ConfirmationGate):
            Double-submit token check in front of every write.
        journal (ShortURLBaseDAO | None):
            Optional durable copy of every version (write-ahead).
        clock (Clock):
            Source of "now", returning timezone-aware UTC datetimes.

    Example:
        >>> service = ShortenerService()
        >>> service.create('abc', 'https://example.com', {}, None, None)
        NeedsConfirmation(token='...')
        >>> service.create('abc', 'https://example.com', {}, 'tkn', 'tkn')
        Created(short_url=ShortURLModel(shortcode='abc', ...))
        >>> service.resolve('abc')
        'https://example.com'
    """

    def __init__(
        self,
        store: ShortURLMemoryDAO | None = None,
        guard: ConcurrencyGuard | None = None,
        gate: ConfirmationGate | None = None,
        journal: ShortURLBaseDAO | None = None,
        clock: Clock = utcnow,
    ):
        self.store = store if store is not None else ShortURLMemoryDAO()
        self.guard = guard or ConcurrencyGuard()
        self.gate = gate or ConfirmationGate()
        self.journal = journal
        self.clock = clock

    def _now(self, now: datetime | None = None) -> datetime:
        """Return `now` (or the clock's reading), which must be timezone-aware

        Raises:
            ValueError:
                If the instant is naive. Stored expirations are aware and can't
                be compared with it.
        """
        now = now or self.clock()
        if now.tzinfo is None or now.utcoffset() is None:
            raise ValueError(f'Expected a timezone-aware datetime (given value: {now!r}).')
        return now

    def restore(self) -> int:
        """Rebuild the in-memory store from the journal

        Returns:
            int: number of versions replayed (0 without a journal).

        Raises:
            DataStoreError:
                If the journal can't be read.
        """
        if self.journal is None:
            return 0

        with self.guard.exclusive():
            records = list(self.journal.records())
            self.store.load(records)

        logger.info('Restored %s short URL versions from journal.', len(records), extra={'shortcodes': len(self.store)})
        return len(records)

    def resolve(self, shortcode: str, now: datetime | None = None) -> str:
        """Return the current target URL of a shortcode

        Raises:
            ShortURLNotFoundError:
                If the shortcode is unknown or its latest version expired at `now`.
            ValueError:
                If `now` is timezone-naive.
        """
        with self.guard.shared():
            return self.store.get(shortcode, now=self._now(now)).target

    def history(self, shortcode: str) -> list[ShortURLModel]:
        """Return every version of a shortcode, expired ones included

        Raises:
            ShortURLNotFoundError:
                If the shortcode was never created.
        """
        with self.guard.shared():
            return self.store.history(shortcode)

    def list_current(self, now: datetime | None = None) -> dict[str, str]:
        with self.guard.shared():
            return self.store.list_current(now=self._now(now))

    def create(
        self,
        shortcode: str,
        target: str,
        expiration: QueryParams,
        query_token: str | None,
        cookie_token: str | None,
    ) -> CreateOutcome:
        """Create or reassign a shortcode once the request is confirmed

        Procedure:
        - Step 1: Reject empty shortcodes
        - Step 2: Resolve the expiration directive (BadRequest if malformed)
        - Step 3: Challenge unless query and cookie tokens match
        - Step 4: Append the new version under the exclusive lock

        Args:
            shortcode (str):
                The shortcode to (re)assign.
            target (str):
                Target URL, already validated by the caller.
            expiration (QueryParams):
                Request parameters holding the expiration directive, if any.
            query_token (str | None):
                Confirmation token echoed in the request's query string.
            cookie_token (str | None):
                Confirmation token from the request's cookie.

        Returns:
            CreateOutcome:
                Created, NeedsConfirmation or BadRequest.

        Raises:
            DataStoreError:
                If the journal write fails. The in-memory store is left untouched.
        """
        # 1- Reject empty shortcodes
        if not shortcode:
            logger.info('Missing shortcode in create request.', extra={'event': INVALID_CREATE_REQUEST})
            return BadRequest(reason='missing shortcode')

        # 2- Resolve the expiration directive
        try:
            directive = parse_expiration(expiration)
        except InvalidExpirationError as e:
            logger.info(
                'Invalid expiration directive in create request.',
                extra={'shortcode': shortcode, 'event': INVALID_CREATE_REQUEST, 'reason': str(e)},
            )
            return BadRequest(reason=str(e))

        # 3- Challenge unless the double-submitted tokens match
        if not self.gate.confirmed(query_token, cookie_token):
            logger.info(
                'Create request is not confirmed. Issuing a new confirmation token.',
                extra={'shortcode': shortcode, 'event': CONFIRMATION_REQUIRED},
            )
            return NeedsConfirmation(token=self.gate.issue_token())

        # 4- Append the new version (journal first, then memory)
        with self.guard.exclusive():
            created_at = self._now()
            latest = self.store.latest(shortcode)
            if latest is not None and created_at < latest.created_at:
                # clock stepped backwards, keep the history ordered
                created_at = latest.created_at

            short_url = ShortURLModel(
                shortcode=shortcode,
                target=target,
                created_at=created_at,
                expires_at=directive.expires_at(created_at),
            )
            if self.journal is not None:
                self.journal.insert(short_url)
            self.store.insert(short_url)

        logger.info(
            'Short URL version created.',
            extra={
                'shortcode': shortcode,
                'event': SHORT_URL_CREATED,
                'reassigned': latest is not None,
                'expires_at': short_url.expires_at.isoformat() if short_url.expires_at else None,
            },
        )
        return Created(short_url=short_url)


def build_service(config: AppConfig) -> ShortenerService:
    """Construct the process-wide ShortenerService from configuration

    Enables the Redis journal when `config['redis']` is set and restores the
    in-memory store from it.

    Raises:
        DataStoreError:
            If Redis is configured but unreachable.
    """
    journal = None
    if config.get('redis'):
        logger.debug('Using Redis as the short URL history journal.')
        redis_config = {f'redis_{k}': v for k, v in config['redis'].items()}
        journal = ShortURLRedisDAO(**redis_config, prefix=app_prefix())

    service = ShortenerService(journal=journal)
    service.restore()
    return service
