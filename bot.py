#!/usr/bin/env python3
"""Write text into a GitHub contribution graph.

    pixeltext generate "HELLO" --year 2024 --save hello
    pixeltext plan --pattern hello
    pixeltext apply --pattern hello --repo ./art --push --remote-url https://github.com/me/art.git --token ...
"""

import argparse
import datetime as dt
import logging
import random
import sys

import requests
from git.exc import GitError

from pixeltext.applier import ActivityApplier, ApplyError, ProgressListener, PushOptions
from pixeltext.config import settings
from pixeltext.dates import first_sunday
from pixeltext.github import create_private_repo, identity_for_token
from pixeltext.grid import active_cells, random_grid
from pixeltext.planner import plan as make_plan
from pixeltext.preview import render_grid
from pixeltext.storage import PatternStore, SavedPattern
from pixeltext.synth import PatternSynthesizer

logger = logging.getLogger("pixeltext")


# ===== pattern source =====
def build_grid(args):
    """(text, year, grid) from a saved pattern, a random fill, or freshly synthesized."""
    if getattr(args, "pattern", None):
        saved = PatternStore(args.patterns_file).load(args.pattern)
        year = args.year if args.year is not None else saved.year
        return saved.text, year, saved.grid

    year = args.year if args.year is not None else dt.date.today().year
    rng = random.Random(args.seed) if args.seed is not None else None
    if args.random:
        return args.text or "", year, random_grid(rng)
    if not args.text:
        raise SystemExit("error: give TEXT, --pattern NAME or --random")
    synth = PatternSynthesizer(rng=rng)
    if any(v is not None for v in (args.density, args.symmetry, args.continuity)):
        grid = synth.synthesize_custom(
            args.text, year,
            density=1.0 if args.density is None else args.density,
            symmetry=args.symmetry or 0.0,
            continuity=args.continuity or 0.0,
        )
    else:
        grid = synth.synthesize(args.text, year)
    return args.text, year, grid


def today_arg(value):
    try:
        return dt.date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a YYYY-MM-DD date: {value}")


# ===== commands =====
class StatusListener(ProgressListener):
    """Prints one status line per step, like a progress bar that scrolls."""

    def on_progress(self, current, total, message):
        print(f"[{current}/{total}] {message}")

    def on_error(self, error):
        logger.debug("apply failed: %s", error)


def cmd_generate(args):
    text, year, grid = build_grid(args)
    print(render_grid(grid, first_sunday(year)), end="")
    print(f"{active_cells(grid)} active cells")
    if args.save:
        PatternStore(args.patterns_file).save(SavedPattern(args.save, text, year, grid))
        print(f"Saved pattern '{args.save}'.")
    return 0


def cmd_plan(args):
    text, year, grid = build_grid(args)
    p = make_plan(grid, year, today=args.today)
    print(p.render(text), end="")
    if args.script:
        p.write_script(args.script, text)
        print(f"Wrote {args.script}")
    return 0


def cmd_apply(args):
    text, year, grid = build_grid(args)
    p = make_plan(grid, year, today=args.today)
    if p.total == 0:
        print("Nothing to commit.")
        return 0

    name, email = args.name, args.email
    if args.token and not (name and email):
        name, email = identity_for_token(args.token)

    push = None
    if args.push:
        remote_url = args.remote_url
        if args.create_repo:
            remote_url = create_private_repo(args.token, args.create_repo)
        if not remote_url:
            raise SystemExit("error: --push needs --remote-url or --create-repo")
        push = PushOptions(remote_url=remote_url, token=args.token, branch=args.branch,
                           safe_mode=not args.no_safe_mode, batch_weeks=args.batch_weeks,
                           batch_delay=args.batch_delay, force_with_lease=args.force_with_lease)

    applier = ActivityApplier(args.repo, name=name, email=email)
    print(applier.apply(p, text, StatusListener(), push))
    return 0


def cmd_patterns(args):
    store = PatternStore(args.patterns_file)
    if args.action == "list":
        for name in store.names():
            print(name)
    elif args.action == "show":
        saved = store.load(args.name)
        print(f"{saved.name}: {saved.text!r} ({saved.year})")
        print(render_grid(saved.grid, first_sunday(saved.year)), end="")
    elif args.action == "delete":
        if not store.delete(args.name):
            print(f"No pattern named '{args.name}'.")
            return 1
        print(f"Deleted pattern '{args.name}'.")
    return 0


def cmd_log(args):
    commits = ActivityApplier(args.repo).commits_by_year(args.year)
    print(f"Commits for year {args.year}:")
    print("=" * 50)
    for line in commits:
        print(line)
    print(f"\nTotal commits found: {len(commits)}")
    return 0


def cmd_delete(args):
    if not args.yes:
        raise SystemExit("error: deleting history is permanent on push; pass --yes to confirm")
    removed = ActivityApplier(args.repo).delete_commits_by_year(args.year)
    print(f"Removed {removed} commits from {args.year}.")
    return 0


# ===== parser =====
def add_source_args(p):
    p.add_argument("text", nargs="?", help="Text to write")
    p.add_argument("--pattern", help="Use a saved pattern instead of TEXT")
    p.add_argument("--year", type=int, help="Graph year (default: current year, or the pattern's)")
    p.add_argument("--random", action="store_true", help="Scatter random levels instead of drawing TEXT")
    p.add_argument("--seed", type=int, help="Seed the randomness for repeatable output")
    p.add_argument("--density", type=float, help="Scale every active level by this factor")
    p.add_argument("--symmetry", type=float, help="Rerun the symmetry pass when > 0.5")
    p.add_argument("--continuity", type=float, help="Rerun the continuity pass when > 0.5")


def build_parser():
    ap = argparse.ArgumentParser(prog="pixeltext", description=__doc__.splitlines()[0])
    ap.add_argument("-v", "--verbose", action="count", default=0)
    ap.add_argument("--patterns-file", default=settings.patterns_file)
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("generate", help="Synthesize a pattern and preview it")
    add_source_args(p)
    p.add_argument("--save", metavar="NAME", help="Save the pattern under NAME")
    p.set_defaults(func=cmd_generate)

    p = sub.add_parser("plan", help="Dry run: list the commits a pattern needs")
    add_source_args(p)
    p.add_argument("--today", type=today_arg, help="Plan as of this date (YYYY-MM-DD)")
    p.add_argument("--script", help="Also write the commits as a shell script")
    p.set_defaults(func=cmd_plan)

    p = sub.add_parser("apply", help="Create the commits in a local repository")
    add_source_args(p)
    p.add_argument("--repo", default=".", help="Repository path (created if missing)")
    p.add_argument("--today", type=today_arg, help=argparse.SUPPRESS)
    p.add_argument("--name", help="Commit author name")
    p.add_argument("--email", help="Commit author email (prefer the GitHub no-reply address)")
    p.add_argument("--token", help="GitHub token; fills in identity and authenticates the push")
    p.add_argument("--push", action="store_true", help="Push after committing")
    p.add_argument("--remote-url", help="HTTPS URL: https://github.com/OWNER/REPO.git")
    p.add_argument("--create-repo", metavar="NAME", help="Create a PRIVATE repo via the API and push there")
    p.add_argument("--branch", help="Branch to push (default: current, master renamed to main)")
    p.add_argument("--no-safe-mode", action="store_true", help="Push once at the end instead of in batches")
    p.add_argument("--batch-weeks", type=int, default=settings.batch_weeks)
    p.add_argument("--batch-delay", type=int, default=settings.batch_delay)
    p.add_argument("--force-with-lease", action="store_true", help="Retry a rejected push with --force-with-lease")
    p.set_defaults(func=cmd_apply)

    p = sub.add_parser("patterns", help="Manage saved patterns")
    p.add_argument("action", choices=["list", "show", "delete"])
    p.add_argument("name", nargs="?")
    p.set_defaults(func=cmd_patterns)

    p = sub.add_parser("log", help="Show a year's commits")
    p.add_argument("year", type=int)
    p.add_argument("--repo", default=".")
    p.set_defaults(func=cmd_log)

    p = sub.add_parser("delete", help="Remove a year's commits from the branch tip (keeps a backup branch)")
    p.add_argument("year", type=int)
    p.add_argument("--repo", default=".")
    p.add_argument("--yes", action="store_true")
    p.set_defaults(func=cmd_delete)
    return ap


def main(argv=None):
    args = build_parser().parse_args(argv)
    level = logging.DEBUG if args.verbose > 1 else logging.INFO if args.verbose else settings.log_level.upper()
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    if args.command == "patterns" and args.action != "list" and not args.name:
        raise SystemExit(f"error: patterns {args.action} needs NAME")
    try:
        return args.func(args)
    except (ApplyError, KeyError, GitError, requests.RequestException, OSError, OverflowError, ValueError) as e:
        logger.debug("command failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1


# ---- run ----
if __name__ == "__main__":
    sys.exit(main())
