from typing import Optional, Tuple
import logging
import json

import click
from dotenv import load_dotenv

from ghproxy.models import InboundRequest
from ghproxy.run import handle_request

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)

# Load environment when running via CLI so credentials are available to the proxy.
load_dotenv()


def _parse_params(params: Tuple[str, ...]):
    pairs = []
    for param in params:
        key, sep, value = param.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {param!r}", param_hint="--param")
        pairs.append((key, value))
    return pairs


@click.command()
@click.argument("path", default="")
@click.option("--method", "-X", default="GET", show_default=True, help="Inbound HTTP method")
@click.option(
    "--param",
    "-p",
    "params",
    multiple=True,
    help="Query parameter as KEY=VALUE, may be repeated.",
)
@click.option("--body", default=None, help="Raw request body (GraphQL JSON payload).")
@click.option(
    "--include-headers",
    "-i",
    is_flag=True,
    default=False,
    help="Print status and headers along with the body.",
)
def main(
    path: str,
    method: str,
    params: Tuple[str, ...],
    body: Optional[str],
    include_headers: bool,
):
    """Run one request through the GitHub proxy and print the response."""

    query = _parse_params(params)
    url = f"/api/github/{path}"
    request = InboundRequest(
        method=method.upper(), path=path, query=query, body=body, url=url
    )
    response = handle_request(request)

    if include_headers:
        click.echo(f"HTTP {response.status}")
        for name, value in response.headers.items():
            click.echo(f"{name}: {value}")
        click.echo("")

    if response.is_json:
        click.echo(json.dumps(response.body, indent=2))
    else:
        click.echo(response.render_body())

    if response.status >= 400:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
