"""
Example program demonstrating Comistory changelog generation.
"""

import argparse
from pathlib import Path

from comistory.nodes.classifier import classify
from comistory.nodes.local_discovery import discover_local_commits
from comistory.nodes.markdown_renderer import format_commits


def main():
    parser = argparse.ArgumentParser(description="Render the changelog of a Git repository")
    parser.add_argument("repo_path", help="Path to the Git repository")
    parser.add_argument("--output", "-o", help="Output file path (default: print to stdout)")
    parser.add_argument("--since", help="Only include commits after this Git reference")
    args = parser.parse_args()

    repo_path = Path(args.repo_path)
    if not (repo_path / ".git").exists():
        print(f"Error: {repo_path} is not a Git repository")
        return 1

    print("Discovering commits...")
    commits = discover_local_commits(str(repo_path), since_ref=args.since)
    print(f"Found {len(commits)} commits")

    counts = {}
    for commit in commits:
        category = classify(commit.message)
        counts[category.heading] = counts.get(category.heading, 0) + 1
    for heading, count in counts.items():
        print(f"  {heading}: {count}")

    output = format_commits(commits)

    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        print(f"\nChangelog written to: {args.output}")
    else:
        print()
        print(output)

    return 0


if __name__ == "__main__":
    exit(main())
