#!/usr/bin/env python3
"""
FEDIP Pathway Quiz CLI - Recommend a professional body and FEDIP level.

Asks four questions (category, job family, role category, specific role) and
prints the recommended professional bodies and FEDIP level. The role category
question is skipped when a family has only one.

Usage:
    # Interactive quiz with the bundled sample tables
    python run_quiz.py

    # Scripted answers (one per question actually asked)
    python run_quiz.py --answers "Technical or IT professional" "Architecture" "Senior Solution Architect"

    # JSON output (the recommendation when scripted, the final wizard state when interactive)
    python run_quiz.py --answers ... --json

    # Single-source recommendation policy
    python run_quiz.py --policy single_source

    # Show categories, families and their role categories
    python run_quiz.py --list

    # Send the result to the subscription endpoint
    python run_quiz.py --answers ... --email jo@example.org --subscribe-url https://example.org/subscribe
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from api.schemas import RecommendationResponse, WizardStateResponse
from api.subscription import SubscriptionClient
from core import (
    DEFAULT_AGGREGATION_POLICY,
    DEFAULT_DATA_DIR,
    STEP_FAMILY,
    STEP_ROLE,
    STEP_SUB_BUCKET,
    QuizError,
    Recommendation,
    SelectionRequiredError,
    load_quiz_tables,
)
from quiz_wizard import QuizSession
from recommendation_aggregator import AGGREGATION_POLICIES


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="FEDIP Pathway Quiz - professional body and FEDIP level recommendation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Interactive quiz
  python run_quiz.py

  # Scripted answers with JSON output
  python run_quiz.py --answers "Technical or IT professional" "Architecture" "Solution Architect" --json

  # List the taxonomy
  python run_quiz.py --list
        """
    )

    parser.add_argument(
        "--data-dir",
        type=Path,
        default=Path(os.getenv("QUIZ_DATA_DIR", str(DEFAULT_DATA_DIR))),
        help=f"Directory with the JSON tables (default: $QUIZ_DATA_DIR or {DEFAULT_DATA_DIR})",
    )
    parser.add_argument(
        "--policy",
        choices=sorted(AGGREGATION_POLICIES),
        default=os.getenv("QUIZ_AGGREGATION_POLICY", DEFAULT_AGGREGATION_POLICY),
        help=f"Professional body aggregation policy (default: {DEFAULT_AGGREGATION_POLICY})",
    )
    parser.add_argument(
        "--sort-by-fedip",
        action="store_true",
        help="Order roles by FEDIP seniority instead of level prefix",
    )

    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        "--answers",
        nargs="+",
        type=str,
        help="Answer each question in turn instead of prompting",
    )
    mode_group.add_argument(
        "--list",
        action="store_true",
        help="Print categories, families and role categories, then exit",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the recommendation (scripted) or the final wizard state (interactive) as JSON",
    )
    parser.add_argument(
        "--email",
        type=str,
        help="Subscribe this email address with the recommendation",
    )
    parser.add_argument(
        "--subscribe-url",
        type=str,
        default=None,
        help="Subscription endpoint (default: $QUIZ_SUBSCRIBE_URL)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    return parser.parse_args(argv)


def print_taxonomy(session: QuizSession) -> None:
    """Print categories and the canonical structure of every family."""
    print("Categories:")
    for category in session.list_categories():
        print(f"  - {category}")

    print("\nJob families:")
    for family in session.list_families():
        buckets = session.get_canonical_family(family)
        skip_marker = " (role category skipped)" if len(buckets) == 1 else ""
        print(f"  {family}{skip_marker}")
        for bucket, roles in buckets.items():
            print(f"    [{bucket}] {', '.join(roles)}")


def print_recommendation(recommendation: Recommendation) -> None:
    """Print the recommendation block."""
    print("\n" + "=" * 50)
    print("Your Recommendations")
    print("=" * 50)
    print("Professional Body:")
    for body in recommendation.professional_bodies:
        print(f"  - {body}")
    print(f"FEDIP Level: {recommendation.fedip_level}")


def run_scripted(session: QuizSession, answers: List[str]) -> Recommendation:
    """Feed answers to the wizard in order.

    When the role category step is skipped, four answers are still accepted
    as long as the third one names the category the wizard filled in.

    Raises:
        QuizError: If an answer is invalid or the count does not fit
    """
    pending = list(answers)
    while pending:
        answer = pending.pop(0)
        state = session.state
        if state.is_complete:
            raise QuizError(f"Too many answers: '{answer}' given after the result was computed")
        session.select(state.step, answer)

        skipped = state.step == STEP_FAMILY and session.state.step == STEP_ROLE
        if skipped and len(pending) == 2 and pending[0] == session.state.answer(STEP_SUB_BUCKET):
            pending.pop(0)

    result = session.current_result()
    if result is None:
        raise QuizError(f"Not enough answers: still at step {session.state.step} ({session.question()})")
    return result


def run_interactive(session: QuizSession) -> Optional[Recommendation]:
    """Prompt for each question until a result is computed or the user quits."""
    while True:
        result = session.current_result()
        if result is not None:
            print_recommendation(result)
            choice = input("\n[r] start again, [q] quit: ").strip().lower()
            if choice == "r":
                session.restart()
                continue
            return result

        step = session.state.step
        options = session.options()
        print(f"\n{session.question()}")
        for i, option in enumerate(options, 1):
            marker = " *" if session.state.answer(step) == option else ""
            print(f"  {i}. {option}{marker}")

        choice = input("Choose a number, [n]ext, [b]ack, [r]estart or [q]uit: ").strip().lower()

        if choice == "q":
            return None
        if choice == "b":
            session.back()
            continue
        if choice == "r":
            session.restart()
            continue
        if choice == "n":
            try:
                session.advance()
            except SelectionRequiredError:
                print("Please select an option first.")
            continue

        try:
            index = int(choice) - 1
        except ValueError:
            print(f"Unrecognised input: {choice}")
            continue
        if not 0 <= index < len(options):
            print(f"Please choose a number between 1 and {len(options)}.")
            continue

        session.select(step, options[index])


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    load_dotenv()
    args = parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s - %(levelname)s - %(message)s")

    if not args.data_dir.exists():
        print(f"Error: Data directory not found: {args.data_dir}", file=sys.stderr)
        return 1

    try:
        tables = load_quiz_tables(args.data_dir)
    except (FileNotFoundError, QuizError) as e:
        print(f"Error loading tables: {e}", file=sys.stderr)
        return 1

    session = QuizSession(tables, policy=args.policy, sort_by_fedip=args.sort_by_fedip)

    if args.list:
        try:
            print_taxonomy(session)
        except QuizError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        return 0

    try:
        if args.answers:
            result = run_scripted(session, args.answers)
        else:
            result = run_interactive(session)
    except QuizError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (KeyboardInterrupt, EOFError):
        print()
        return 0

    if args.json and not args.answers:
        snapshot = WizardStateResponse.from_state(session.state, session.question(), session.options())
        print(snapshot.model_dump_json(indent=2))

    if result is None:
        return 0

    if args.answers:
        if args.json:
            print(RecommendationResponse.from_recommendation(result).model_dump_json(indent=2))
        else:
            print_recommendation(result)

    if args.email:
        client = SubscriptionClient(endpoint_url=args.subscribe_url)
        if client.subscribe(args.email, result, session.state.answers):
            print(f"Subscribed {args.email}")
        else:
            print(f"Warning: subscription for {args.email} was not sent", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
