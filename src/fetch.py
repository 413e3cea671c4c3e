import json
import logging

import click
import requests
from dotenv import load_dotenv

from ghproxy.cache import create_cache
from ghproxy.clients.proxy_client import ProxyClient
from ghproxy.config import load_client_config

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)

load_dotenv()


@click.command()
@click.argument("url")
@click.option(
    "--no-cache", is_flag=True, default=False, help="Bypass the local response cache."
)
def main(url: str, no_cache: bool):
    """Fetch a GitHub API URL through the deployed proxy and print the JSON."""
    try:
        cfg = load_client_config()
    except RuntimeError as exc:
        raise click.UsageError(str(exc)) from exc

    cache = create_cache("none" if no_cache else cfg.cache_target, cfg.cache_seconds)
    client = ProxyClient(cfg.proxy_url, cache=cache)

    try:
        data = client.get_json(url)
    except requests.exceptions.RequestException as exc:
        raise click.ClickException(f"Request failed: {exc}") from exc

    click.echo(json.dumps(data, indent=2))


if __name__ == "__main__":
    main()
