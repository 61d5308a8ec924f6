"""Payload builders shared by the webhook tests."""

import hashlib
import hmac
import json

from webhook_notify.config import RepositorySettings, ServerSettings, Settings, TelegramSettings


def sign(body: bytes, secret: str) -> str:
    """Compute the GitHub-style HMAC-SHA256 signature for a payload."""
    digest = hmac.new(
        secret.encode("utf-8"),
        msg=body,
        digestmod=hashlib.sha256,
    ).hexdigest()
    return f"sha256={digest}"


def make_push_payload(
    *,
    full_name: str = "org/repo",
    ref: str = "refs/heads/main",
    before: str = "6113728f27ae82c7b1a177c8d03f9e96e0adf246",
    after: str = "59b20b8d5c6ff8d09518454d4dd8b7b30f095ab5",
    num_commits: int = 1,
) -> dict:
    """Build a realistic GitHub push webhook payload."""
    commits = [
        {
            "id": f"{i:02d}b20b8d5c6ff8d09518454d4dd8b7b30f095ab5",
            "message": f"Commit {i}\n\nLonger description of change {i}",
            "url": f"https://github.com/{full_name}/commit/{i:02d}b20b8d",
            "timestamp": "2026-10-18T12:00:00Z",
            "author": {"name": "Test User", "email": "test@example.com"},
        }
        for i in range(num_commits)
    ]
    return {
        "ref": ref,
        "before": before,
        "after": after,
        "compare": f"https://github.com/{full_name}/compare/6113728f27ae...59b20b8d5c6f",
        "repository": {
            "id": 12345,
            "name": full_name.split("/")[-1],
            "full_name": full_name,
            "owner": {"login": full_name.split("/")[0]},
        },
        "pusher": {"name": "testuser", "email": "test@example.com"},
        "commits": commits,
        "head_commit": commits[-1] if commits else None,
        "created": False,
        "deleted": False,
        "forced": False,
    }


def make_ping_payload(*, full_name: str = "org/repo", zen: str = "Keep it logically awesome.") -> dict:
    return {
        "zen": zen,
        "hook_id": 42,
        "hook": {"type": "Repository", "events": ["push"]},
        "repository": {"id": 12345, "full_name": full_name},
    }


def encode(payload: dict) -> bytes:
    return json.dumps(payload).encode()


def make_settings(*, token: str = "", bot_token: str = "") -> Settings:
    """Build settings with a few representative repository entries.

    - ``org/repo``: own chats and secret.
    - ``org/open``: empty secret and no chats of its own.
    - ``org/docs``: ignores the ``gh-pages`` branch.
    - anything else: global chat ``999`` and secret ``global-secret``.
    """
    return Settings(
        server=ServerSettings(secrets="global-secret", token=token),
        telegram=TelegramSettings(bot_token=bot_token, send_to=[999]),
        repository=[
            RepositorySettings(full_name="org/repo", send_to=[111, 222], secrets="s3cr3t"),
            RepositorySettings(full_name="org/open"),
            RepositorySettings(
                full_name="org/docs",
                send_to=[333],
                branch_ignore=["gh-pages"],
                secrets="s3cr3t",
            ),
        ],
    )
