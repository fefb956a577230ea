import os

# Fixed shared logins, one per Mass group.
DEFAULT_LEADER_ACCOUNTS = [
    {"username": "srp_5am", "password": "srpLeader5AM", "group": "5am"},
    {"username": "srp_8am", "password": "srpLeader8AM", "group": "8am"},
    {"username": "srp_10am", "password": "srpLeader10AM", "group": "10am"},
    {"username": "srp_4pm", "password": "srpLeader4PM", "group": "4pm"},
    {"username": "srp_6pm", "password": "srpLeader6PM", "group": "6pm"},
]


def parse_leader_accounts(raw):
    """`user:password:group,user:password:group` -> list of account dicts."""
    accounts = []
    for item in (raw or "").split(","):
        item = item.strip()
        if not item:
            continue
        username, password, group = item.split(":", 2)
        accounts.append({"username": username, "password": password, "group": group})
    return accounts


def leader_accounts_from_env(default=None):
    raw = os.getenv("LEADER_ACCOUNTS")
    if raw:
        return parse_leader_accounts(raw)
    return list(default or [])


def db_config_from_env(default_password=""):
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", default_password),
        "database": os.getenv("DB_NAME", "altar_attendance"),
    }
