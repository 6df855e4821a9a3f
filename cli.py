import argparse
import getpass
import logging
import sys
from pathlib import Path

from api.services.evaluation_service import evaluate_batch
from api.services.evaluator_client import EvaluatorAPIError, EvaluatorClient
from api.utils import json_dump, read_json_dict
from authoring import validate_test_totals
from core.logging_setup import setup_console_logging
from models import ManualQuestion
from serialization import (
    QUESTION_TYPES,
    parse_manual_test,
    serialize_manual_test,
    serialize_question_payload,
)
from weightage import WeightageQuestionModel

log = logging.getLogger("cli")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manual test authoring tools")
    parser.add_argument(
        "--api-url",
        type=str,
        default=None,
        help="Evaluator backend URL (defaults to EVALUATOR_API_URL)",
    )
    parser.add_argument("--verbose", action="store_true", help="Log debug output")
    commands = parser.add_subparsers(dest="command", required=True)

    validate = commands.add_parser("validate", help="Validate a manual test JSON file")
    validate.add_argument("file", type=Path)

    create = commands.add_parser("create", help="Validate and upload a manual test")
    create.add_argument("file", type=Path)

    push = commands.add_parser("push-questions", help="Add a test's questions to a paper")
    push.add_argument("paper_id", type=str)
    push.add_argument("file", type=Path)
    push.add_argument("--page", type=int, default=1, help="Page number for every question")
    push.add_argument(
        "--type",
        dest="question_type",
        choices=QUESTION_TYPES,
        default="traditional",
        help="Question type",
    )

    login = commands.add_parser("login", help="Log in and store the auth token")
    login.add_argument("username", type=str)
    login.add_argument("--password", type=str, default=None)

    commands.add_parser("logout", help="Forget the stored auth token")
    commands.add_parser("whoami", help="Check the stored auth token with the backend")

    papers = commands.add_parser("papers", help="List question papers")
    papers.add_argument("--public", action="store_true", help="Only public papers")
    papers.add_argument("--id", dest="paper_id", type=str, default=None, help="Show one paper")

    upload = commands.add_parser("upload-paper", help="Upload question paper images")
    upload.add_argument("name", type=str)
    upload.add_argument("images", type=Path, nargs="+")

    submit = commands.add_parser("submit", help="Submit a student's answer sheet pages")
    submit.add_argument("paper_id", type=str)
    submit.add_argument("student_name", type=str)
    submit.add_argument("roll_no", type=str)
    submit.add_argument("images", type=Path, nargs="+")

    submissions = commands.add_parser("submissions", help="List submissions of a paper")
    submissions.add_argument("paper_id", type=str)
    submissions.add_argument("--status", type=str, default=None, help="Only this status")

    show = commands.add_parser("show-submission", help="Print one submission")
    show.add_argument("submission_id", type=str)

    evaluate_one = commands.add_parser("evaluate", help="Evaluate one submission now")
    evaluate_one.add_argument("submission_id", type=str)

    evaluate = commands.add_parser(
        "evaluate-pending", help="Evaluate all pending submissions of a paper"
    )
    evaluate.add_argument("paper_id", type=str)
    evaluate.add_argument("--retries", type=int, default=3, help="Attempts per submission")
    evaluate.add_argument(
        "--delay", type=float, default=5, help="Seconds to wait between submissions"
    )
    return parser.parse_args(argv)


def load_manual_test(path: Path) -> tuple[str, float, list[ManualQuestion]]:
    payload = read_json_dict(path)
    if payload is None:
        raise ValueError(f"{path} does not contain a manual test")
    return parse_manual_test(payload)


def check_manual_test(
    test_name: str, total_marks: float, questions: list[ManualQuestion]
) -> list[str]:
    """Return one message per problem found; empty when the test can be created."""
    problems = []
    if not test_name:
        problems.append("Please enter a test name")
    if not questions:
        problems.append("The test has no questions")
    for question in questions:
        result = WeightageQuestionModel(question).validate()
        if not result:
            problems.append(f"Question {question.question_number}: {result.message}")
    totals = validate_test_totals(questions, total_marks)
    if not totals:
        problems.append(totals.message)
    return problems


def _client(args: argparse.Namespace) -> EvaluatorClient:
    if args.api_url:
        return EvaluatorClient(base_url=args.api_url)
    return EvaluatorClient()


def _load_valid(path: Path) -> tuple[str, float, list[ManualQuestion]] | None:
    test_name, total_marks, questions = load_manual_test(path)
    problems = check_manual_test(test_name, total_marks, questions)
    for problem in problems:
        print(problem, file=sys.stderr)
    if problems:
        return None
    return test_name, total_marks, questions


def run(args: argparse.Namespace) -> int:
    if args.command == "validate":
        loaded = _load_valid(args.file)
        if loaded is None:
            return 1
        print(f"{loaded[0]}: {len(loaded[2])} questions, {loaded[1]:g} marks")
        return 0

    if args.command == "create":
        loaded = _load_valid(args.file)
        if loaded is None:
            return 1
        test_name, total_marks, questions = loaded
        _client(args).create_manual_test(
            serialize_manual_test(test_name, total_marks, questions)
        )
        print(f'"{test_name}" has been created with {len(questions)} questions.')
        return 0

    if args.command == "push-questions":
        loaded = _load_valid(args.file)
        if loaded is None:
            return 1
        client = _client(args)
        for question in loaded[2]:
            payload = serialize_question_payload(question, args.page, args.question_type)
            client.create_question(args.paper_id, payload)
            log.info("Added question %s to paper %s", question.question_number, args.paper_id)
        print(f"Added {len(loaded[2])} questions to paper {args.paper_id}")
        return 0

    if args.command == "login":
        password = args.password or getpass.getpass("Password: ")
        _client(args).login(args.username, password)
        print(f"Logged in as {args.username}")
        return 0

    if args.command == "logout":
        _client(args).logout()
        print("Logged out")
        return 0

    if args.command == "whoami":
        print(json_dump(_client(args).verify()))
        return 0

    if args.command == "papers":
        client = _client(args)
        if args.paper_id:
            result = client.get_paper(args.paper_id)
        elif args.public:
            result = client.list_public_papers()
        else:
            result = client.list_papers()
        print(json_dump(result))
        return 0

    if args.command == "upload-paper":
        paper = _client(args).upload_paper(args.name, args.images)
        print(json_dump(paper))
        return 0

    if args.command == "submit":
        result = _client(args).submit_answer_sheets(
            args.paper_id, args.student_name, args.roll_no, args.images
        )
        print(json_dump(result))
        return 0

    if args.command == "submissions":
        client = _client(args)
        if args.status:
            listing = client.list_submissions_by_status(args.paper_id, args.status)
        else:
            listing = client.list_submissions(args.paper_id)
        print(json_dump(listing))
        return 0

    if args.command == "show-submission":
        print(json_dump(_client(args).get_submission(args.submission_id)))
        return 0

    if args.command == "evaluate":
        print(json_dump(_client(args).evaluate_submission(args.submission_id)))
        return 0

    if args.command == "evaluate-pending":
        client = _client(args)
        pending = client.list_pending_files(args.paper_id)
        if not pending:
            print("There are no pending submissions to evaluate.")
            return 0
        results = evaluate_batch(
            client,
            args.paper_id,
            pending,
            max_retries=args.retries,
            delay_seconds=args.delay,
        )
        print(f"Successfully evaluated: {results['success']}")
        print(f"Failed: {results['failed']}")
        for error in results["errors"]:
            print(f"  {error}")
        return 1 if results["failed"] else 0

    return 2


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_console_logging(logging.DEBUG if args.verbose else logging.INFO)
    try:
        return run(args)
    except (EvaluatorAPIError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
