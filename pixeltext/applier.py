"""Realize a commit plan as history in a local git repository.

One commit per discrete event, each backdated to its planned day. Progress is
reported per commit through a listener; any git or file failure ends the run
with a single ``ApplyError``.
"""

import datetime as dt
import logging
import os
import threading
import time
from dataclasses import dataclass

from git import Repo
from git.exc import GitCommandError, GitError

from pixeltext.config import settings
from pixeltext.github import auth_url
from pixeltext.planner import commit_message, commit_timestamp

logger = logging.getLogger(__name__)

DEFAULT_NAME = "author"
DEFAULT_EMAIL = "author@users.noreply.github.com"


class ApplyError(Exception):
    pass


class ProgressListener:
    """Receives ``on_progress`` with a non-decreasing ``current``, then exactly one of success/error."""

    def on_progress(self, current: int, total: int, message: str):
        pass

    def on_success(self, message: str):
        pass

    def on_error(self, error: Exception):
        pass


class LoggingListener(ProgressListener):
    def on_progress(self, current, total, message):
        logger.info("[%d/%d] %s", current, total, message)

    def on_success(self, message):
        logger.info("%s", message)

    def on_error(self, error):
        logger.error("%s", error)


@dataclass
class PushOptions:
    remote_url: str
    token: str = None
    branch: str = None
    remote: str = "origin"
    safe_mode: bool = True
    batch_weeks: int = None
    batch_delay: int = None
    force_with_lease: bool = False

    def __post_init__(self):
        if self.batch_weeks is None:
            self.batch_weeks = settings.batch_weeks
        if self.batch_delay is None:
            self.batch_delay = settings.batch_delay


class ActivityApplier:
    def __init__(self, repo_path, name=None, email=None, commit_file=None, commit_hour=None, sleep=time.sleep):
        self.repo_path = repo_path
        self.name = name
        self.email = email
        self.commit_file = commit_file or settings.commit_file
        self.commit_hour = settings.commit_hour if commit_hour is None else commit_hour
        self.sleep = sleep

    # ---------- repository ----------
    def open_repo(self, create=True) -> Repo:
        if create and not os.path.isdir(os.path.join(self.repo_path, ".git")):
            logger.info("initializing git repository in %s", self.repo_path)
            return Repo.init(self.repo_path)
        return Repo(self.repo_path)

    def configure_identity(self, repo: Repo):
        with repo.config_writer() as cw:
            cw.set_value("user", "name", self.name or DEFAULT_NAME)
            cw.set_value("user", "email", self.email or DEFAULT_EMAIL)

    def commit_env(self, day: dt.date):
        env = os.environ.copy()
        env["GIT_AUTHOR_NAME"] = self.name or DEFAULT_NAME
        env["GIT_AUTHOR_EMAIL"] = self.email or DEFAULT_EMAIL
        env["GIT_COMMITTER_NAME"] = env["GIT_AUTHOR_NAME"]
        env["GIT_COMMITTER_EMAIL"] = env["GIT_AUTHOR_EMAIL"]
        stamp = commit_timestamp(day, self.commit_hour)
        env["GIT_AUTHOR_DATE"] = stamp; env["GIT_COMMITTER_DATE"] = stamp
        return env

    # ---------- apply ----------
    def apply(self, plan, text: str = "", listener: ProgressListener = None, push: PushOptions = None) -> str:
        listener = listener or ProgressListener()
        counter = {"done": 0, "total": plan.total}
        try:
            listener.on_progress(0, plan.total, "Preparing repository…")
            repo = self.open_repo()
            if self.name or self.email:
                self.configure_identity(repo)

            pushed = False
            if push is None:
                self.make_commits(repo, plan.events, text, counter, listener)
            else:
                pushed = self.commit_and_push(repo, plan, text, counter, listener, push)
        except ApplyError as e:
            listener.on_error(e)
            raise
        except (GitError, OSError) as e:
            err = ApplyError(f"Error creating commits: {e}")
            listener.on_error(err)
            raise err from e

        message = f"Created {counter['done']} commits for {plan.year}."
        if pushed:
            message += f" Pushed to {push.remote}."
        listener.on_success(message)
        return message

    def make_commits(self, repo: Repo, events, text, counter, listener):
        path = os.path.join(self.repo_path, self.commit_file)
        for e in events:
            env = self.commit_env(e.day)
            msg = commit_message(text, e)
            for _ in range(e.count):
                n = counter["done"] + 1
                listener.on_progress(n, counter["total"], f"Creating commit {n} of {counter['total']}…")
                with open(path, "w", encoding="utf-8") as f:
                    f.write(f"Contribution pattern\nText: {text}\nDate: {e.iso}\n"
                            f"Week: {e.column}, Day: {e.row}\nIntensity: {e.count}\nCommit #{n}\n")
                repo.git.add(self.commit_file)
                repo.git.commit("--allow-empty", "-m", msg, env=env)
                counter["done"] = n
        return counter["done"]

    # ---------- push pipeline ----------
    def prepare_remote(self, repo: Repo, push: PushOptions) -> str:
        url = auth_url(push.remote_url, push.token)
        if push.remote not in [r.name for r in repo.remotes]:
            repo.create_remote(push.remote, url)
        else:
            repo.remote(push.remote).set_url(url)

        if not repo.head.is_valid():
            # unborn HEAD: name the branch before the first commit
            branch = push.branch or "main"
            repo.git.symbolic_ref("HEAD", f"refs/heads/{branch}")
            return branch
        if push.branch:
            repo.git.checkout("-B", push.branch)
            return push.branch
        if repo.head.is_detached:
            raise ApplyError("detached HEAD: pass --branch")
        branch = repo.active_branch.name
        if branch == "master":
            repo.git.branch("-M", "main"); branch = "main"
        return branch

    def sync_with_remote(self, repo: Repo, remote_name: str, branch: str):
        try:
            repo.git.fetch(remote_name)
        except GitCommandError as e:
            logger.warning("fetch from %s failed, pushing without sync: %s", remote_name, e)
            return
        remote_branches = {line.strip().split("/", 1)[1] for line in repo.git.branch("-r").splitlines()
                           if line.strip().startswith(f"{remote_name}/") and "->" not in line}
        if branch not in remote_branches:
            return
        if not repo.head.is_valid():
            repo.git.checkout("-B", branch, f"{remote_name}/{branch}")
            return
        repo.git.branch("--set-upstream-to", f"{remote_name}/{branch}", branch)
        try:
            repo.git.merge("--ff-only", f"{remote_name}/{branch}")
        except GitCommandError:
            repo.git.merge("--no-edit", "--allow-unrelated-histories", f"{remote_name}/{branch}")

    def push_branch(self, repo: Repo, push: PushOptions, branch: str, first: bool):
        args = ["-u", push.remote, branch] if first else [push.remote, branch]
        try:
            repo.git.push(*args)
        except GitCommandError:
            if not push.force_with_lease:
                raise
            logger.warning("push rejected, retrying with --force-with-lease")
            repo.git.push("--force-with-lease", push.remote, branch)

    def commit_and_push(self, repo: Repo, plan, text, counter, listener, push: PushOptions) -> bool:
        """Commit and push the plan; False when there was nothing to push."""
        if not plan.events:
            logger.info("plan is empty, nothing to push")
            return False
        branch = self.prepare_remote(repo, push)
        self.sync_with_remote(repo, push.remote, branch)

        if not push.safe_mode:
            self.make_commits(repo, plan.events, text, counter, listener)
            listener.on_progress(counter["done"], counter["total"], "Pushing…")
            self.push_branch(repo, push, branch, first=True)
            return True

        n = max(1, int(push.batch_weeks))
        weeks = plan.weeks()
        batches = [weeks[i:i + n] for i in range(0, len(weeks), n)]
        for idx, cols in enumerate(batches, start=1):
            listener.on_progress(counter["done"], counter["total"],
                                 f"Batch {idx}/{len(batches)}: weeks {cols[0]}…{cols[-1]}")
            events = [e for e in plan.events if e.column in cols]
            self.make_commits(repo, events, text, counter, listener)
            self.push_branch(repo, push, branch, first=(idx == 1))
            delay = max(0, int(push.batch_delay))
            if idx < len(batches) and delay > 0:
                listener.on_progress(counter["done"], counter["total"], f"Pushed batch {idx}. Cooling down {delay}s…")
                self.sleep(delay)
        return True

    # ---------- history by year ----------
    def commits_by_year(self, year: int):
        """One-line log entries committed during ``year``."""
        repo = self.open_repo(create=False)
        if not repo.head.is_valid():
            return []
        out = repo.git.log("--oneline", f"--since={year}-01-01 00:00:00", f"--until={year}-12-31 23:59:59")
        return [line for line in out.splitlines() if line.strip()]

    def delete_commits_by_year(self, year: int) -> int:
        """Drop the year's commits off the tip of the branch, keeping a backup branch."""
        count = len(self.commits_by_year(year))
        if count == 0:
            return 0
        repo = self.open_repo(create=False)
        if any(c.committed_datetime.year != year for c in repo.iter_commits(max_count=count)):
            raise ApplyError(f"commits from {year} are not at the branch tip")
        backup = f"backup-before-delete-{int(time.time())}"
        repo.git.branch(backup)
        try:
            repo.git.reset("--hard", f"HEAD~{count}")
        except GitCommandError as e:
            repo.git.reset("--hard", backup)
            raise ApplyError(f"Could not delete {count} commits from {year}: {e}") from e
        logger.info("removed %d commits from %s, backup kept on %s", count, year, backup)
        return count


def apply_in_background(applier: ActivityApplier, plan, text="", listener=None, push=None) -> threading.Thread:
    """Run ``applier.apply`` on a daemon thread; the outcome arrives through ``listener``."""
    listener = listener or LoggingListener()

    def run():
        try:
            applier.apply(plan, text, listener, push)
        except ApplyError:
            # already delivered through listener.on_error
            logger.debug("background apply failed", exc_info=True)

    t = threading.Thread(target=run, daemon=True)
    t.start()
    return t
