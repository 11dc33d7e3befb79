#!/usr/bin/env python3
"""
CLI tool for the Airbrake provider
Drives the provider's lifecycle hooks the way an orchestrating host would
"""

import asyncio
import json
import logging
import sys

import click
import yaml
from tabulate import tabulate

from config import get_config
from errors import AirbrakeError
from plugins.resources.project import project_to_state
from provider import AirbrakeProvider

PROJECT_TYPE = "airbrake_project"
TABLE_HEADERS = ["ID", "Name", "Language", "API Key"]


def _load_file(filename):
    """Read a desired-state document from a YAML/JSON file"""
    with open(filename, "r") as f:
        if filename.endswith(".yaml") or filename.endswith(".yml"):
            return yaml.safe_load(f) or {}
        return json.load(f)


def _mask(state, sensitive, show_secrets):
    if show_secrets:
        return state
    return {k: "(sensitive)" if k in sensitive and v else v for k, v in state.items()}


def _echo_states(ctx, states, output, show_secrets=False, many=False):
    sensitive = ctx.obj.get("sensitive_attributes", [])
    states = [_mask(s, sensitive, show_secrets) for s in states]
    if output == "table":
        rows = [[s["id"], s["name"], s["language"], s["api_key"]] for s in states]
        click.echo(tabulate(rows, headers=TABLE_HEADERS, tablefmt="grid"))
        return

    data = states if many else states[0]
    if output == "yaml":
        click.echo(yaml.safe_dump(data, default_flow_style=False))
    else:
        click.echo(json.dumps(data, indent=2))


def _print_diagnostics(result):
    for diagnostic in result.diagnostics:
        label = diagnostic.severity.value.capitalize()
        click.echo(f"{label}: {diagnostic.summary}", err=True)
        if diagnostic.detail:
            click.echo(f"  {diagnostic.detail}", err=True)


def _report(result):
    """Print diagnostics to stderr and exit non-zero on errors"""
    _print_diagnostics(result)
    if result.has_error:
        sys.exit(1)


async def _provider(ctx):
    provider = AirbrakeProvider()
    result = await provider.configure(ctx.obj["provider_config"])
    if result.has_error:
        _print_diagnostics(result)
        raise click.ClickException("provider configuration failed")
    resource = provider.resource(PROJECT_TYPE)
    ctx.obj["sensitive_attributes"] = resource.sensitive_attributes
    return provider


def output_option(f):
    f = click.option(
        "--output",
        "-o",
        type=click.Choice(["table", "json", "yaml"]),
        default="json",
    )(f)
    return click.option(
        "--show-secrets", is_flag=True, help="Print project API keys in clear"
    )(f)


@click.group()
@click.option("--base-url", envvar="AIRBRAKE_BASE_URL", default=None)
@click.option("--email", envvar="AIRBRAKE_EMAIL", default=None)
@click.option("--password", envvar="AIRBRAKE_PASSWORD", default=None)
@click.option("--api-key", envvar="AIRBRAKE_API_KEY", default=None)
@click.option("--log-level", default=None, help="Override LOG_LEVEL")
@click.pass_context
def cli(ctx, base_url, email, password, api_key, log_level):
    """Airbrake CLI - manage Airbrake projects through the provider hooks"""
    try:
        logging_config = get_config().logging
    except ValueError as e:
        raise click.ClickException(str(e))
    logging.basicConfig(
        level=(log_level or logging_config.log_level).upper(),
        format=logging_config.log_format,
    )
    ctx.ensure_object(dict)
    ctx.obj["provider_config"] = {
        "base_url": base_url,
        "email": email,
        "password": password,
        "api_key": api_key,
    }


@cli.command()
@click.argument("filename", type=click.Path(exists=True))
@output_option
@click.pass_context
def create(ctx, filename, output, show_secrets):
    """Create a project from a YAML/JSON file"""

    async def run():
        provider = await _provider(ctx)
        return await provider.resource(PROJECT_TYPE).create(_load_file(filename))

    result = asyncio.run(run())
    _report(result)
    _echo_states(ctx, [result.state], output, show_secrets)


@cli.command()
@click.argument("project_id")
@output_option
@click.pass_context
def read(ctx, project_id, output, show_secrets):
    """Show a project by id"""

    async def run():
        provider = await _provider(ctx)
        return await provider.resource(PROJECT_TYPE).read({"id": project_id})

    result = asyncio.run(run())
    _report(result)
    if result.state is None:
        sys.exit(1)
    _echo_states(ctx, [result.state], output, show_secrets)


@cli.command()
@click.argument("project_id")
@click.argument("filename", type=click.Path(exists=True))
@output_option
@click.pass_context
def update(ctx, project_id, filename, output, show_secrets):
    """Update a project's language from a file"""

    async def run():
        provider = await _provider(ctx)
        resource = provider.resource(PROJECT_TYPE)
        prior = await resource.read({"id": project_id})
        if prior.state is None:
            return prior
        desired = {**_load_file(filename), "id": project_id}
        return await resource.update(desired, prior.state)

    result = asyncio.run(run())
    _report(result)
    if result.state is None:
        sys.exit(1)
    _echo_states(ctx, [result.state], output, show_secrets)


@cli.command()
@click.argument("project_id")
@click.confirmation_option(prompt="Are you sure you want to delete this project?")
@click.pass_context
def delete(ctx, project_id):
    """Delete a project"""

    async def run():
        provider = await _provider(ctx)
        return await provider.resource(PROJECT_TYPE).delete({"id": project_id})

    _report(asyncio.run(run()))
    click.echo(f"Project {project_id} deleted")


@cli.command(name="import")
@click.argument("identifier")
@output_option
@click.pass_context
def import_(ctx, identifier, output, show_secrets):
    """Import an existing project by id or name"""

    async def run():
        provider = await _provider(ctx)
        return await provider.resource(PROJECT_TYPE).import_state(identifier)

    result = asyncio.run(run())
    _report(result)
    _echo_states(ctx, [result.state], output, show_secrets)


@cli.command()
@click.argument("name")
@output_option
@click.pass_context
def lookup(ctx, name, output, show_secrets):
    """Look up a project by name"""

    async def run():
        provider = await _provider(ctx)
        return await provider.data_source(PROJECT_TYPE).read({"name": name})

    result = asyncio.run(run())
    _report(result)
    _echo_states(ctx, [result.state], output, show_secrets)


@cli.command(name="list")
@output_option
@click.pass_context
def list_(ctx, output, show_secrets):
    """List all projects"""

    async def run():
        provider = await _provider(ctx)
        return await provider.reconciler.list_projects()

    try:
        projects = asyncio.run(run())
    except AirbrakeError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    states = [project_to_state(p) for p in projects]
    _echo_states(ctx, states, output, show_secrets, many=True)


if __name__ == "__main__":
    cli()
