"""Administrative link operations

The caller decides whether a request is authorized (e.g. from the API Gateway
authorizer result) and passes that decision in an AdminContext. Credentials
are never parsed here.
"""

from dataclasses import dataclass
from datetime import datetime

from shortlinks.models import LinkModel
from shortlinks.dao.base import LinkBaseDAO
from shortlinks.exceptions import UnauthorizedError
from shortlinks.utils.helpers import as_utc


# fmt: off
@dataclass(frozen=True)
class AdminContext:
    authorized: bool                    # Authorization decision made by the caller
    actor: str | None = None            # Identity of the administrator, if known
# fmt: on


class LinkAdministrator:
    """List, re-expire and delete links on behalf of an authorized administrator

    Methods:
        list_all(context) -> list[LinkModel]:
            Every link, newest first.
        update_expiry(context, link_id, expires_at) -> None:
            Overwrite a link's expiry (None clears it). Unknown ids are ignored.
        delete(context, link_id) -> None:
            Remove a link. Idempotent.

    Every method raises UnauthorizedError when `context.authorized` is false,
    before touching the store.
    """

    def __init__(self, dao: LinkBaseDAO):
        self.dao = dao

    def list_all(self, context: AdminContext) -> list[LinkModel]:
        self._authorize(context)
        return self.dao.list_all()

    def update_expiry(self, context: AdminContext, link_id: int, expires_at: datetime | None) -> None:
        self._authorize(context)
        self.dao.update_expiry(link_id=link_id, expires_at=None if expires_at is None else as_utc(expires_at))

    def delete(self, context: AdminContext, link_id: int) -> None:
        self._authorize(context)
        self.dao.delete(link_id=link_id)

    @staticmethod
    def _authorize(context: AdminContext) -> None:
        if not context.authorized:
            raise UnauthorizedError('Administrative operations require an authorized context.')
