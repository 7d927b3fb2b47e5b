"""Typer CLI for x402 Exchange."""

import asyncio
import json

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(name="x402x", help="x402 Exchange: pricing configuration for x402 API gateways")
console = Console()


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind host"),
    port: int = typer.Option(8080, help="Bind port"),
):
    """Start the x402 Exchange API server and dashboard."""
    import uvicorn
    from x402_exchange.app import create_app

    console.print(f"[bold green]Starting x402 Exchange on {host}:{port}[/bold green]")
    uvicorn.run(create_app(), host=host, port=port)


async def _create_user(email: str, password: str, display_name: str):
    from x402_exchange.deps import get_account_service, get_api_key_service, get_db

    db = get_db()
    await db.init()
    await db.create_all()
    try:
        async with db.get_session() as session:
            profile = await get_account_service().create_account(
                session, email, password, display_name=display_name,
            )
            key = await get_api_key_service().get_or_create_key(session, profile.id)
            return profile.id, key.api_key
    finally:
        await db.close()


@app.command("create-user")
def create_user(
    email: str = typer.Argument(..., help="Account email"),
    password: str = typer.Option(..., prompt=True, hide_input=True, help="Account password"),
    display_name: str = typer.Option("", help="Display name"),
):
    """Create an account directly in the database and issue its API key."""
    from x402_exchange.common.exceptions import ExchangeError

    try:
        user_id, api_key = asyncio.run(_create_user(email, password, display_name))
    except ExchangeError as e:
        console.print(f"[bold red]{e.code}[/bold red] {e.message}")
        raise typer.Exit(1)

    console.print(f"[bold green]Created[/bold green] {email} ({user_id})")
    console.print(f"  API key: [bold]{api_key}[/bold]")


@app.command()
def seed(
    email: str = typer.Argument(..., help="Account email"),
    password: str = typer.Option(..., prompt=True, hide_input=True, help="Account password"),
    url: str = typer.Option("http://localhost:8080", help="Server URL"),
):
    """Sign in and seed demo API calls through the running server."""
    from x402_exchange.client import ConfigClient

    with ConfigClient(url) as client:
        if not client.login(email, password):
            console.print("[bold red]Error:[/bold red] invalid email or password")
            raise typer.Exit(1)
        result = client.seed()

    if not result.success:
        console.print(f"[bold red]{result.code}[/bold red] {result.message}")
        raise typer.Exit(1)
    console.print(f"[bold green]{result.message}[/bold green]")


@app.command("fetch-config")
def fetch_config(
    api_key: str = typer.Argument(..., help="Exchange API key"),
    url: str = typer.Option("http://localhost:8080", help="Server URL"),
    raw: bool = typer.Option(False, "--json", help="Print the manifest as JSON"),
):
    """Fetch the pricing manifest a gateway would load for API_KEY."""
    from x402_exchange.client import ConfigClient

    with ConfigClient(url, api_key=api_key) as client:
        result = client.fetch()

    if not result.success:
        console.print(f"[bold red]{result.code}[/bold red] {result.error}")
        raise typer.Exit(1)

    manifest = result.manifest
    if raw:
        console.print_json(json.dumps({
            "walletAddress": manifest.wallet_address,
            "endpoints": manifest.as_middleware_config(),
            "network": manifest.network,
            "asset": manifest.asset,
        }))
        return

    console.print(f"Wallet: [bold]{manifest.wallet_address}[/bold] ({manifest.network}, {manifest.asset})")
    table = Table("Route", "Price", "Network")
    for entry in manifest.endpoints:
        table.add_row(entry.route, entry.price, entry.network)
    console.print(table)


@app.command()
def health(
    url: str = typer.Option("http://localhost:8080", help="Server URL"),
):
    """Check x402 Exchange server health."""
    import httpx

    try:
        resp = httpx.get(f"{url}/health", timeout=5)
        data = resp.json()
        console.print(f"[bold green]{data['status']}[/bold green] v{data['version']}")
    except (httpx.HTTPError, ValueError, KeyError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
