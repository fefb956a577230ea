from __future__ import annotations

from typing import Iterable, Mapping, Union

from ..core.exceptions import AuthenticationError
from .model import LeaderAccount, SessionUser


def _as_account(item: Union[LeaderAccount, Mapping]) -> LeaderAccount:
    if isinstance(item, LeaderAccount):
        return item
    return LeaderAccount(username=str(item["username"]), password=str(item["password"]), group_key=str(item["group"]))


class AuthService:
    """Use case: log a group leader in with the group's fixed credential."""

    def __init__(self, accounts: Iterable[Union[LeaderAccount, Mapping]]):
        self._accounts = {a.username: a for a in map(_as_account, accounts)}

    def authenticate(self, username: str, password: str) -> SessionUser:
        account = self._accounts.get((username or "").strip())
        if not account or account.password != (password or "").strip():
            raise AuthenticationError("Invalid username or password")
        return SessionUser(username=account.username, group_key=account.group_key)
