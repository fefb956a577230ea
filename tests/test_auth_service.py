from __future__ import annotations

import pytest

from config.config import DEFAULT_LEADER_ACCOUNTS, parse_leader_accounts
from src.altar_attendance.altar_attendance.core.exceptions import AuthenticationError
from src.altar_attendance.altar_attendance.users.model import LeaderAccount
from src.altar_attendance.altar_attendance.users.service import AuthService


def test_login_maps_account_to_its_group():
    auth = AuthService(DEFAULT_LEADER_ACCOUNTS)

    user = auth.authenticate(" srp_10am ", "srpLeader10AM ")

    assert user.username == "srp_10am"
    assert user.group_key == "10am"


@pytest.mark.parametrize("username,password", [("srp_5am", "wrong"), ("nobody", "srpLeader5AM"), ("", "")])
def test_wrong_credentials_raise(username, password):
    auth = AuthService(DEFAULT_LEADER_ACCOUNTS)

    with pytest.raises(AuthenticationError):
        auth.authenticate(username, password)


def test_accepts_account_objects_and_env_format():
    accounts = parse_leader_accounts("lead_a:pw:a, lead_b:p:w:b ,")
    auth = AuthService([LeaderAccount("admin", "secret", "5am"), *accounts])

    assert auth.authenticate("admin", "secret").group_key == "5am"
    assert auth.authenticate("lead_a", "pw").group_key == "a"
    assert accounts[1] == {"username": "lead_b", "password": "p", "group": "w:b"}
