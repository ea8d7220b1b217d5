"""Database setup and the development API server."""

from __future__ import annotations

import secrets

import click

from smartspend.cli.main import SmartSpendContext, pass_context


@click.command("init-db")
@pass_context
def init_db_cmd(ctx: SmartSpendContext) -> None:
    """Create the database, apply pending migrations and save a JWT secret."""
    from smartspend.core.config import update_config
    from smartspend.core.migrations import get_schema_version

    db = ctx.get_db()
    version = get_schema_version(db)

    # Without a stored secret the API signs tokens with a per-process key
    secret_created = not ctx.config["auth"].get("jwt_secret")
    if secret_created:
        update_config(auth={"jwt_secret": secrets.token_hex(32)})

    if ctx.json_mode:
        ctx.formatter.json({
            "db_path": str(db.db_path),
            "schema_version": version,
            "jwt_secret_created": secret_created,
        })
        return
    ctx.formatter.success(f"Database ready at {db.db_path} (schema v{version})")
    if secret_created:
        ctx.formatter.success("JWT secret generated and saved to the config file.")


@click.command("serve")
@click.option("--host", default=None, help="Interface to bind (default from config).")
@click.option("--port", type=int, default=None, help="Port to listen on (default from config).")
@click.option("--debug", is_flag=True, help="Enable the Flask debugger and reloader.")
@pass_context
def serve_cmd(ctx: SmartSpendContext, host: str | None, port: int | None, debug: bool) -> None:
    """Run the JSON API with Flask's development server."""
    from smartspend.api import create_app

    server = ctx.config["server"]
    host = host or server.get("host", "127.0.0.1")
    port = port or int(server.get("port", 5000))

    app = create_app()
    ctx.formatter.info(f"Serving SmartSpend API on http://{host}:{port}")
    app.run(host=host, port=port, debug=debug)
