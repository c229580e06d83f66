"""CLI entry point"""

import logging

from rich.console import Console

import settings
from proxy import ProxyServer, build_context


console = Console()


def setup_logging(level: str = settings.LOG_LEVEL):
    """Configure the root logger for console output"""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    # Clear existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
    root_logger.addHandler(console_handler)


def print_banner(server: ProxyServer):
    console.print("[bold]Codex OAuth Proxy[/bold]\n")
    console.print(f"  Listening on:  [cyan]{server.base_url}[/cyan] (POST /v1/responses)")
    console.print(f"  Credentials:   {settings.TOKEN_FILE}")
    console.print(f"  Error log:     {settings.ERROR_LOG_FILE}")
    console.print(f"  Tool profile:  {settings.TOOL_PROFILE}")
    if settings.FORCE_JSON_RESPONSES:
        console.print("  [yellow]Force JSON enabled: streaming callers receive consolidated responses[/yellow]")
    console.print(f"\nSet [bold]OPENAI_BASE_URL={server.base_url}/v1[/bold] in your client's environment.\n")


def main():
    """Entry point for the CLI"""
    setup_logging()
    try:
        server = ProxyServer(build_context())
        print_banner(server)
        server.run()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        console.print("Goodbye!")
    except Exception as e:
        console.print(f"\n[red]Fatal error:[/red] {e}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
