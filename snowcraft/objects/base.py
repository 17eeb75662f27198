from typing import Callable, Optional, TypeVar

from ..client import NOT_FOUND_CODES
from ..identifiers import Identifier
from ..sql_builder import render
from ..validations import validate

T = TypeVar("T")


def build_sql(opts) -> str:
    """Validate, then render. Raises the JoinedError instead of rendering invalid options."""
    err = validate(opts)
    if err is not None:
        raise err
    return render(opts)


def find_by_id(records: list, id: Identifier):
    """LIKE patterns treat _ and % as wildcards, so SHOW ... LIKE may return more than the one object."""
    for record in records:
        if record.id() == id:
            return record
    return None


class Collection:
    def __init__(self, client):
        self.client = client

    def _exec(self, request) -> int:
        return self.client.exec(build_sql(request.to_opts()))

    def _query(self, request, decode: Callable[[dict], T]) -> list[T]:
        rows = self.client.query(build_sql(request.to_opts()))
        return [decode(row) for row in rows]

    def _describe(self, request) -> Optional[list[dict]]:
        rows = self.client.query(build_sql(request.to_opts()), empty_response_codes=NOT_FOUND_CODES)
        if len(rows) == 0:
            return None
        return rows
