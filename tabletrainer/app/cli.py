from __future__ import annotations

"""CLI for TableTrainer using SessionManager and a JSON profile store."""

import argparse
import sys
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from storage.session_log import load_log
from storage.store import JsonProfileStore, current_profile

from .. import __version__
from ..config.config import load_config, validate_config
from ..config.settings import PracticeSettings
from ..errors import InvalidInputError
from ..profile.models import UserProfile
from ..profile.profile import (
    best_and_worst,
    create_user_profile,
    most_and_least_practiced,
    practiced_tables,
    profile_overview,
    sorted_question_stats,
)
from ..questions.model import Question
from ..stats.stats import format_summary
from ..util.randomness import seed_if_needed
from .explain import warn
from .presets import PRACTICE_PRESETS, get_preset
from .session_manager import SessionManager

QUIT_WORDS = {"q", "quit", "exit"}
SORT_CHOICES = {"attempts": "attempts", "success": "success_rate", "time": "average_time"}


def _parse_tables(value: str) -> List[int]:
    tables: List[int] = []
    for token in str(value).split(","):
        token = token.strip()
        if not token:
            continue
        if "-" in token:
            a, b = token.split("-", 1)
            tables.extend(range(int(a), int(b) + 1))
        else:
            tables.append(int(token))
    return tables


def _build_ui() -> Dict[str, Callable[..., Any]]:
    def ask(prompt: str) -> str:
        return input(prompt)

    def inform(msg: str) -> None:
        print(msg)

    def wait_ms(ms: int) -> None:
        time.sleep(ms / 1000.0)

    def now_ms() -> float:
        return time.monotonic() * 1000.0

    return {"ask": ask, "inform": inform, "wait_ms": wait_ms, "now_ms": now_ms}


def run_drill(sm: SessionManager, questions: List[Question], settings: PracticeSettings, ui: Dict[str, Callable[..., Any]], *, feedback: bool = True) -> int:
    """Ask every question through ``ui``; returns how many were answered."""
    ask = ui["ask"]
    inform = ui["inform"]
    wait_ms = ui.get("wait_ms", lambda _ms: None)
    now_ms = ui["now_ms"]

    answered = 0
    n = len(questions)
    for i, q in enumerate(questions, start=1):
        started = now_ms()
        raw = ask(f"Q{i}/{n}: {q.factor1} × {q.factor2} = ").strip()
        elapsed = max(0, int(round(now_ms() - started)))
        if raw.lower() in QUIT_WORDS:
            inform("Stopping early.")
            break
        try:
            user_answer: Optional[int] = int(raw)
        except ValueError:
            user_answer = None
        result = sm.submit(q, user_answer, elapsed)
        answered += 1
        if feedback:
            if result.is_correct:
                inform("Correct!")
            else:
                inform(f"Incorrect. {q.factor1} × {q.factor2} = {q.answer}.")
        if i < n:
            wait_ms(settings.question_delay)
    return answered


def _print_profile(user: UserProfile, sort_key: str, table: Optional[int]) -> None:
    ov = profile_overview(user)
    print(f"{user.name} ({user.id})")
    print(f"Sessions: {ov.total_sessions}, questions: {ov.total_questions}, correct: {ov.total_correct}")
    print(f"Overall accuracy: {ov.overall_accuracy}%, {ov.average_questions_per_session} questions per session")
    tables = practiced_tables(user)
    if not tables:
        print("No practice history yet.")
        return
    print(f"Practiced tables: {', '.join(str(t) for t in tables)}")
    best, worst = best_and_worst(user)
    most, least = most_and_least_practiced(user)
    print("Best: " + ", ".join(f"{s.key} ({s.success_rate}%)" for s in best))
    print("Needs work: " + ", ".join(f"{s.key} ({s.success_rate}%)" for s in worst))
    print("Most practiced: " + ", ".join(f"{s.key} ({s.attempts})" for s in most))
    print("Least practiced: " + ", ".join(f"{s.key} ({s.attempts})" for s in least))
    print("")
    print(f"{'pair':>6} {'tries':>6} {'right':>6} {'rate':>5} {'avg':>7}")
    for s in sorted_question_stats(user, sort_key, table):
        print(f"{s.key:>6} {s.attempts:>6} {s.correct:>6} {s.success_rate:>4}% {s.average_time / 1000:>6.1f}s")


def _resolve_user(store: JsonProfileStore, user_id: Optional[str]) -> Optional[UserProfile]:
    if user_id:
        return store.load(user_id)
    return current_profile(store)


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="tabletrainer")
    p.add_argument("--version", action="version", version=f"tabletrainer {__version__}")
    p.add_argument("--config", default=None, help="Path to YAML config")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("users")
    cu = sub.add_parser("create-user")
    cu.add_argument("name")
    su = sub.add_parser("select-user")
    su.add_argument("user_id")
    du = sub.add_parser("delete-user")
    du.add_argument("user_id")
    sub.add_parser("presets")

    rp = sub.add_parser("run")
    rp.add_argument("--preset", default=None)
    rp.add_argument("--tables", default=None, help="Comma-separated tables or ranges, e.g. 2,3,7-9")
    rp.add_argument("--questions", type=int, default=None)
    rp.add_argument("--adaptive", dest="adaptive", action="store_true", help="Weight questions by past difficulty")
    rp.add_argument("--no-adaptive", dest="adaptive", action="store_false")
    rp.set_defaults(adaptive=None)
    rp.add_argument("--multiplier", type=float, default=None, help="Difficulty multiplier 1.0..3.0")
    rp.add_argument("--delay", type=int, default=None, help="Pause after each answer in ms (500..3000)")
    rp.add_argument("--user", default=None, help="Profile id (defaults to the selected user)")
    rp.add_argument("--explain", action="store_true")
    rp.add_argument("--no-save", action="store_true", help="Do not update the profile or session log")

    st = sub.add_parser("stats")
    st.add_argument("--user", default=None)
    st.add_argument("--sort", choices=sorted(SORT_CHOICES), default="attempts")
    st.add_argument("--table", type=int, default=None)

    rep = sub.add_parser("report")
    rep.add_argument("--user", default=None)
    rep.add_argument("--out", default=None, help="Output directory for plots")

    args = p.parse_args(argv)
    cfg = validate_config(load_config(args.config))
    store = JsonProfileStore(cfg["storage"]["profiles_path"])

    if args.cmd == "users":
        current = store.get_current_user_id()
        users = store.load_all()
        if not users:
            print("No users yet. Create one with: tabletrainer create-user NAME")
        for u in users:
            mark = "*" if u.id == current else " "
            print(f"{mark} {u.id}: {u.name} | sessions: {u.total_sessions}, questions: {u.total_questions}")
        return 0

    if args.cmd == "create-user":
        name = args.name.strip()
        if not name:
            print("User name must not be empty.")
            return 2
        user = create_user_profile(name)
        store.save(user)
        if store.get_current_user_id() is None:
            store.set_current_user_id(user.id)
        print(f"Created {user.name} ({user.id})")
        return 0

    if args.cmd == "select-user":
        if store.load(args.user_id) is None:
            print(f"Unknown user: {args.user_id}")
            return 2
        store.set_current_user_id(args.user_id)
        return 0

    if args.cmd == "delete-user":
        store.delete(args.user_id)
        return 0

    if args.cmd == "presets":
        for name, params in PRACTICE_PRESETS.items():
            print(f"  - {name}: {params}")
        return 0

    if args.cmd == "run":
        seed_if_needed()
        if args.explain:
            from .explain import enable as explain_enable
            explain_enable(True)
        if args.preset:
            try:
                cfg["practice"].update(get_preset(args.preset))
            except KeyError as e:
                print(e.args[0])
                return 2
            cfg = validate_config(cfg)
        try:
            tables = _parse_tables(args.tables) if args.tables else None
        except ValueError:
            print(f"Invalid tables: '{args.tables}'. Use e.g. 2,3,7-9")
            return 2
        settings = PracticeSettings.from_config(cfg).with_overrides(
            selected_tables=tables,
            adaptive_difficulty=args.adaptive,
            difficulty_multiplier=args.multiplier,
            session_length=args.questions,
            question_delay=args.delay,
        )
        profile = _resolve_user(store, args.user)
        if args.user and profile is None:
            print(f"Unknown user: {args.user}")
            return 2
        if settings.adaptive_difficulty and profile is None:
            warn("Adaptive difficulty needs a user profile; using uniform questions.")

        log_dir = Path(cfg["storage"]["session_log_dir"]) if cfg["storage"].get("write_session_log") else None
        sm = SessionManager(store, session_log_dir=log_dir)
        try:
            questions = sm.start_session(settings, profile)
        except InvalidInputError as e:
            print(f"Cannot start: {e}")
            return 2

        if profile is not None:
            print(f"Practising as {profile.name}.")
        print(f"{len(questions)} questions from tables {', '.join(str(t) for t in settings.selected_tables)}. Type 'q' to stop.\n")
        ui = _build_ui()
        try:
            run_drill(sm, questions, settings, ui, feedback=bool(cfg["stats"].get("show_per_question_feedback", True)))
        except (KeyboardInterrupt, EOFError):
            print("\nStopping early.")
        outcome = sm.finish(save=not args.no_save)
        if cfg["stats"].get("show_summary", True):
            print("\nSession Summary:")
            print(format_summary(outcome.report))
        return 0

    if args.cmd == "stats":
        user = _resolve_user(store, args.user)
        if user is None:
            print("No user selected. Use select-user or --user.")
            return 2
        _print_profile(user, SORT_CHOICES[args.sort], args.table)
        return 0

    if args.cmd == "report":
        user = _resolve_user(store, args.user)
        if user is None:
            print("No user selected. Use select-user or --user.")
            return 2
        from analytics import AnalyticsConfig, write_reports

        out = Path(args.out or cfg["analytics"]["reports_dir"])
        log = load_log(Path(cfg["storage"]["session_log_dir"]))
        written = write_reports(user, log, out, AnalyticsConfig())
        for path in written:
            print(f"Wrote {path}")
        return 0

    return 0


if __name__ == "__main__":
    sys.exit(main())
