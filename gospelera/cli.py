"""Gospel Era CLI -- operator tools for the prayer spam detector and password policy."""

import sys
from dataclasses import asdict

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from gospelera import __version__
from gospelera.logging_config import setup_logger

console = Console()


def _service(data_dir: str | None, policy_path: str | None):
    from pathlib import Path

    from gospelera import config
    from gospelera.auth.store import ProfileStore
    from gospelera.prayer.policy import configured_policy, load_spam_policy
    from gospelera.prayer.service import build_service
    from gospelera.prayer.store import CommitmentStore

    root = Path(data_dir) if data_dir else config.data_dir()
    policy = load_spam_policy(policy_path) if policy_path else configured_policy()
    return build_service(ProfileStore(root / "auth"), CommitmentStore(root / "prayer"), policy=policy)


data_dir_option = click.option("--data-dir", "-d", default=None, help="Data directory (default: $GOSPELERA_DATA_DIR)")
policy_option = click.option("--policy", "-p", "policy_path", default=None, help="Spam policy YAML file")


@click.group()
@click.version_option(version=__version__)
def main():
    """Gospel Era safeguards.

    Check passwords against the signup policy, score prayer commitment
    behaviour, and manage commitments from the command line.
    """
    setup_logger()


# ── Passwords ────────────────────────────────────────────────────────


@main.command(name="check-password")
@click.argument("password")
def check_password(password: str):
    """Check PASSWORD against the account creation policy."""
    from gospelera.auth.password import validate_password

    result = validate_password(password)
    if result.valid:
        console.print("[green]v[/] Password meets the policy")
        return
    console.print(f"[red]x[/] {result.error}")
    sys.exit(1)


# ── Spam ─────────────────────────────────────────────────────────────


@main.command(name="spam-check")
@click.argument("user_id")
@data_dir_option
@policy_option
def spam_check(user_id: str, data_dir: str | None, policy_path: str | None):
    """Score USER_ID's next prayer commitment."""
    service = _service(data_dir, policy_path)
    result = service.check(user_id)

    colour = {"none": "green", "low": "yellow", "high": "red"}[result.warning_level.value]
    verdict = "allowed" if result.allowed else "blocked"
    lines = [
        f"Verdict: [{colour}]{verdict}[/]",
        f"Score: {result.score}",
        f"Warning level: {result.warning_level.value}",
    ]
    if result.risk_factors:
        lines.append("Factors: " + ", ".join(f.value for f in result.risk_factors))
    if result.reason:
        lines.append(f"Reason: {result.reason}")
    console.print(Panel("\n".join(lines), title=f"Spam check: {user_id}"))


@main.command(name="spam-stats")
@data_dir_option
def spam_stats(data_dir: str | None):
    """List warriors who rarely confirm their prayers."""
    stats = _service(data_dir, None).detector.get_spam_statistics()

    console.print(f"\nUsers with commitments: {stats.total_users}")
    if not stats.details:
        console.print("[green]No suspicious users.[/]")
        return

    table = Table(title=f"Suspicious users ({stats.suspicious_users})")
    table.add_column("User", style="cyan")
    table.add_column("Commitments", justify="right")
    table.add_column("Prayed", justify="right")
    table.add_column("Ratio", justify="right", style="red")
    for user in sorted(stats.details, key=lambda u: u.ratio):
        table.add_row(user.user_id, str(user.total), str(user.prayed), f"{user.ratio:.0f}%")
    console.print(table)


# ── Commitments ──────────────────────────────────────────────────────


@main.command()
@click.argument("user_id")
@click.argument("request_id", type=int)
@data_dir_option
@policy_option
def commit(user_id: str, request_id: int, data_dir: str | None, policy_path: str | None):
    """Commit USER_ID to pray for REQUEST_ID."""
    from gospelera.errors import CommitmentRejected

    service = _service(data_dir, policy_path)
    try:
        outcome = service.commit_to_pray(user_id, request_id)
    except CommitmentRejected as e:
        console.print(f"[red]Blocked[/] (score {e.score}): {e.reason}")
        sys.exit(1)

    console.print(f"[green]Committed[/] to request {request_id}")
    if outcome.spam_warning:
        console.print(f"  [yellow]![/] {outcome.spam_warning}")


@main.command()
@click.argument("user_id")
@click.argument("request_id", type=int)
@click.option("--note", "-n", default=None, help="Optional note for the requester")
@data_dir_option
def confirm(user_id: str, request_id: int, note: str | None, data_dir: str | None):
    """Mark USER_ID's commitment to REQUEST_ID as prayed."""
    from gospelera.errors import CommitmentNotFound

    service = _service(data_dir, None)
    try:
        service.confirm_prayed(user_id, request_id, note=note)
    except CommitmentNotFound as e:
        console.print(f"[red]x[/] {e}")
        sys.exit(1)
    console.print(f"[green]Prayed[/] for request {request_id}")


# ── Policy ───────────────────────────────────────────────────────────


@main.group()
def policy():
    """Inspect the spam policy."""


@policy.command(name="show")
@policy_option
def show_policy(policy_path: str | None):
    """Print the thresholds the detector would use."""
    from gospelera.prayer.policy import configured_policy, load_spam_policy

    current = load_spam_policy(policy_path) if policy_path else configured_policy()

    table = Table(title=f"Spam policy: {current.name}")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", justify="right")
    for key, value in asdict(current).items():
        if isinstance(value, dict):
            for sub_key, sub_value in value.items():
                table.add_row(f"{key}.{sub_key}", str(sub_value))
        else:
            table.add_row(key, str(value))
    console.print(table)


if __name__ == "__main__":
    main()
