"""Comistory workflow integration using LangGraph for orchestration."""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from langgraph.graph import END, StateGraph
from loguru import logger

from comistory.config import DEFAULT_OUTPUT, GenerateOptions, verbose_from_env
from comistory.errors import ComistoryError, TokenError
from comistory.models.state import AgentState
from comistory.nodes.local_discovery import discover_local_commits
from comistory.nodes.markdown_renderer import markdown_renderer_node
from comistory.nodes.remote_discovery import discover_remote_commits
from comistory.token_store import TokenStore


def configure_logging(verbose: bool = False) -> None:
    """Send log output to stderr, with debug records only in verbose mode."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")
    if verbose:
        logger.debug("Verbose mode enabled")


def commit_discovery_node(state: AgentState) -> AgentState:
    """Fetch commits from the local working copy or from GitHub."""
    logger.info("Executing Commit Discovery Node")

    source = state.get("source", "local")
    if source == "remote":
        if not state.get("token"):
            raise TokenError(
                "GitHub token is required for remote repository access. "
                "Please configure your GitHub token with: comistory config --set <token>"
            )
        commits = discover_remote_commits(
            state["token"],
            state.get("remote_url") or "",
            per_page=state.get("per_page", 100),
            page=state.get("page", 1),
        )
    else:
        commits = discover_local_commits(state.get("repo_path", "."), since_ref=state.get("since_ref"))

    logger.info(f"Discovered {len(commits)} commits")

    return {**state, "commits": commits, "commit_count": len(commits)}


def create_workflow():
    """Create the Comistory workflow graph."""
    workflow = StateGraph(AgentState)

    workflow.add_node("commit_discovery_node", commit_discovery_node)
    workflow.add_node("markdown_renderer_node", markdown_renderer_node)

    workflow.set_entry_point("commit_discovery_node")

    workflow.add_edge("commit_discovery_node", "markdown_renderer_node")
    workflow.add_edge("markdown_renderer_node", END)

    return workflow.compile()


def run_workflow(options: GenerateOptions, token: Optional[str] = None) -> AgentState:
    """Run discovery and rendering for the given options and return the final state."""
    initial_state: AgentState = {
        "source": options.source,
        "repo_path": str(Path(options.repo_path).resolve()),
        "remote_url": options.remote,
        "token": token,
        "per_page": options.per_page,
        "page": options.page,
        "since_ref": options.since_ref,
    }

    return create_workflow().invoke(initial_state)


def _generate(args: argparse.Namespace, store: TokenStore) -> int:
    options = GenerateOptions.parse(
        local=args.local,
        remote=args.remote,
        output=args.output,
        per_page=args.per_page,
        page=args.page,
        repo_path=args.repo_path,
        since_ref=args.since,
        verbose=args.verbose,
    )

    token = None
    if options.remote:
        token = store.get_token()
        if not token:
            logger.error("GitHub token is required for remote repository access")
            logger.info("Please configure your GitHub token with:")
            logger.info("comistory config --set <token>")
            return 1

    final_state = run_workflow(options, token=token)

    if not final_state.get("commits"):
        logger.info("No commits found.")
        return 0

    Path(options.output).write_text(final_state["markdown"], encoding="utf-8")
    logger.info(f"Commit history has been saved to: {options.output}")
    logger.debug(final_state["markdown"])
    return 0


def _config(args: argparse.Namespace, store: TokenStore) -> int:
    if args.set:
        return 0 if store.save_token(args.set) else 1

    if args.remove:
        return 0 if store.remove_token() else 1

    if args.status:
        status = store.get_token_status()
        if not status.is_configured:
            logger.info("No GitHub token is currently configured")
            logger.info("To set a token: comistory config --set <token>")
            return 0

        logger.info(f"GitHub token is configured: {status.masked_token}")
        if status.username:
            logger.info(f"Token associated with GitHub user: {status.username}")
        if status.scopes:
            logger.info(f"Token scopes: {', '.join(status.scopes)}")
        elif status.scopes is not None:
            logger.warning("Token has no scopes configured, which may limit functionality")
        return 0

    logger.error("No configuration option specified")
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="comistory", description="Every commit tells a story")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate commit history in markdown format")
    generate.add_argument("--local", action="store_true", help="Generate from local git repository")
    generate.add_argument("--remote", type=str, metavar="URL", help="Generate from remote git repository URL")
    generate.add_argument("--output", type=str, default=DEFAULT_OUTPUT, help="Output file path")
    generate.add_argument("--per-page", type=int, default=100, help="Number of commits per page (1-100)")
    generate.add_argument("--page", type=int, default=1, help="Page number to fetch")
    generate.add_argument("--repo-path", type=str, default=".", help="Path to the local git repository")
    generate.add_argument("--since", type=str, help="Only include local commits after this reference")
    generate.add_argument("--verbose", action="store_true", help="Enable verbose output")

    config = subparsers.add_parser("config", help="Configure your GitHub token")
    group = config.add_mutually_exclusive_group()
    group.add_argument("--set", type=str, metavar="TOKEN", help="Set GitHub API token in global config")
    group.add_argument("--remove", action="store_true", help="Remove GitHub API token from global config")
    group.add_argument("--status", action="store_true", help="Display information about the configured GitHub token")

    return parser


def main(argv: Optional[List[str]] = None, store: Optional[TokenStore] = None) -> int:
    args = build_parser().parse_args(argv)

    load_dotenv()
    configure_logging(getattr(args, "verbose", False) or verbose_from_env())

    store = store or TokenStore()

    try:
        if args.command == "generate":
            return _generate(args, store)
        return _config(args, store)
    except (ComistoryError, OSError) as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
