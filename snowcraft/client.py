import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, Generator, Iterable, Optional, Union

from snowflake.connector.connection import SnowflakeConnection
from snowflake.connector.cursor import DictCursor, SnowflakeCursor
from snowflake.connector.errors import ProgrammingError

from .exceptions import ObjectNotFoundError

logger = logging.getLogger("snowcraft")

UNSUPPORTED_FEATURE = 2
SYNTAX_ERROR = 1003
OBJECT_ALREADY_EXISTS_ERR = 2002
DOES_NOT_EXIST_ERR = 2003
INVALID_IDENTIFIER = 2004
OBJECT_DOES_NOT_EXIST_ERR = 2043
ACCESS_CONTROL_ERR = 3001
ALREADY_EXISTS_ERR = 3041
INVALID_GRANT_ERR = 3042
FEATURE_NOT_ENABLED_ERR = 3078

# Snowflake answers "does not exist or not authorized" with either code
NOT_FOUND_CODES = [DOES_NOT_EXIST_ERR, OBJECT_DOES_NOT_EXIST_ERR]

# DictCursor no longer derives from SnowflakeCursor in newer connector releases
_CURSOR_TYPES = (SnowflakeCursor, DictCursor)

_EXECUTION_CACHE: dict[str, dict[str, list]] = {}


def reset_cache():
    global _EXECUTION_CACHE
    _EXECUTION_CACHE = {}


def _session_and_cursor(conn_or_cursor):
    if isinstance(conn_or_cursor, _CURSOR_TYPES):
        cur = conn_or_cursor
        cur._use_dict_result = True
        return conn_or_cursor.connection, cur
    # SnowflakeConnection, or a connection-like object such as snowpark's StoredProcConnection
    return conn_or_cursor, conn_or_cursor.cursor(DictCursor)


def _cache_result(role: str, sql_text: str, result: list):
    if role not in _EXECUTION_CACHE:
        _EXECUTION_CACHE[role] = {}
    _EXECUTION_CACHE[role][sql_text] = result


def execute(
    conn_or_cursor: Union[SnowflakeConnection, SnowflakeCursor],
    sql: str,
    cacheable: bool = False,
    empty_response_codes: Optional[list[int]] = None,
) -> list:
    if not isinstance(sql, str):
        raise TypeError(f"Unknown sql type: {type(sql)}, {sql}")
    sql_text = sql

    session, cur = _session_and_cursor(conn_or_cursor)
    session_header = f"[{session.user}:{session.role}] > {sql_text}"

    if cacheable and session.role in _EXECUTION_CACHE and sql_text in _EXECUTION_CACHE[session.role]:
        return _EXECUTION_CACHE[session.role][sql_text]

    start = time.time()
    try:
        cur.execute(sql_text)
        result = cur.fetchall()
        runtime = time.time() - start
        logger.info(f"{session_header}    ({len(result)} rows, {runtime:.2f}s)")
        if cacheable:
            _cache_result(session.role, sql_text, result)
        return result
    except ProgrammingError as err:
        if empty_response_codes and err.errno in empty_response_codes:
            runtime = time.time() - start
            logger.info(f"{session_header}    (empty, {runtime:.2f}s)")
            if cacheable:
                _cache_result(session.role, sql_text, [])
            return []
        logger.error(f"{session_header}    (err {err.errno}, {time.time() - start:.2f}s)")
        raise ProgrammingError(f"{err} on {sql_text}", errno=err.errno) from err


def execute_in_parallel(
    conn_or_cursor: Union[SnowflakeConnection, SnowflakeCursor],
    sqls: Iterable[tuple[str, Any]],
    error_handler: Optional[Callable[[Exception, str], None]] = None,
    cacheable: bool = False,
    empty_response_codes: Optional[list[int]] = None,
    max_workers: int = 8,
) -> Generator[tuple[Any, list], None, None]:
    """
    Execute SQL statements in parallel and yield results as they complete.

    Args:
        conn_or_cursor: SnowflakeConnection or SnowflakeCursor to use for execution
        sqls: An iterable of (sql, item) pairs, the item is handed back with the result
        error_handler: Optional function taking (Exception, sql), errors are raised when omitted
        cacheable: Whether to cache results (default: False)
        empty_response_codes: Error codes that should produce an empty result (default: None)
        max_workers: Maximum number of worker threads (default: 8)

    Yields:
        Tuples of (item, result) as they complete

    Example:
        >>> statements = [(render(opts), opts) for opts in drops]
        >>> for opts, result in execute_in_parallel(connection, statements):
        ...     print(opts, result)
    """
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_item = {
            executor.submit(execute, conn_or_cursor, sql, cacheable, empty_response_codes): (sql, item)
            for sql, item in sqls
        }

        for future in as_completed(future_to_item):
            sql, item = future_to_item[future]
            try:
                yield item, future.result()
            except Exception as e:
                if error_handler:
                    error_handler(e, sql)
                else:
                    logger.error(f"Error processing SQL {sql}: {e}")
                    raise e


class Client:
    """
    Executor bound to one connection. Object collections hang off it:

        client = Client(connect(default_config()))
        client.warehouses.create(CreateWarehouseRequest(AccountObjectIdentifier("WH")))
        client.warehouses.show_by_id(AccountObjectIdentifier("WH"))
    """

    def __init__(self, connection, dry_run: bool = False, threads: int = 8):
        from .objects import register_collections

        self.connection = connection
        self.dry_run = dry_run
        self.threads = threads
        register_collections(self)

    def _dry_run(self, sql: str):
        logger.info(f"[dry run] > {sql}")

    def exec(self, sql: str) -> int:
        if self.dry_run:
            self._dry_run(sql)
            return 0
        return len(execute(self.connection, sql))

    def query(self, sql: str, empty_response_codes: Optional[list[int]] = None, cacheable: bool = False) -> list[dict]:
        if self.dry_run:
            self._dry_run(sql)
            return []
        return execute(self.connection, sql, cacheable=cacheable, empty_response_codes=empty_response_codes)

    def query_one(self, sql: str) -> dict:
        rows = self.query(sql, empty_response_codes=NOT_FOUND_CODES)
        if len(rows) == 0:
            raise ObjectNotFoundError()
        if len(rows) > 1:
            logger.debug(f"Expected one row, got {len(rows)}, keeping the first: {sql}")
        return rows[0]

    def exec_all(self, sqls: list[str], threads: Optional[int] = None) -> int:
        if self.dry_run:
            for sql in sqls:
                self._dry_run(sql)
            return 0
        total = 0
        pairs = [(sql, sql) for sql in sqls]
        for _, result in execute_in_parallel(self.connection, pairs, max_workers=threads or self.threads):
            total += len(result)
        return total

    def close(self):
        self.connection.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
