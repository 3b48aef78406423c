"""Command-line entry point for docguard."""

import argparse
import json
import sys
from datetime import date
from pathlib import Path

import pydantic

from docguard.analysis.exceptions import AnalysisFailure, ValidationError
from docguard.analysis.models import Verdict
from docguard.auth.exceptions import AuthenticationError
from docguard.auth.provider import DemoAuthProvider
from docguard.batch.models import StatusChange
from docguard.config.settings import Settings
from docguard.database.connection import close_pool
from docguard.intake.files import describe_file
from docguard.logging.logger import Log
from docguard.reporting.csv_exporter import ReportExporter, ReportLayout
from docguard.reporting.history import SortKey, filter_documents, sort_documents
from docguard.session.serialization import document_to_dict
from docguard.triage.service import TriageService, build_service


def cmd_login(service: TriageService, args: argparse.Namespace) -> int:
    identity = service.sign_in(DemoAuthProvider(), args.email, args.password)
    print(f"Signed in as {identity.name} ({identity.role})")
    return 0


def cmd_logout(service: TriageService, _: argparse.Namespace) -> int:
    service.sign_out()
    print("Signed out")
    return 0


def cmd_classify(service: TriageService, args: argparse.Namespace) -> int:
    document = service.classify(describe_file(Path(args.path)))
    print(json.dumps(document_to_dict(document), indent=2, ensure_ascii=False))
    return 0


def cmd_batch(service: TriageService, args: argparse.Namespace) -> int:
    def show(change: StatusChange) -> None:
        item = change.item
        line = f"[{change.position + 1}] {item.descriptor.name}: {item.status.value}"
        if item.result is not None:
            line += f" -> {item.result.status.value} ({item.result.confidence_score:.1%})"
        if item.error_message:
            line += f" ({item.error_message})"
        print(line)

    report = service.run_batch([describe_file(Path(p)) for p in args.paths], listener=show)
    for rejection in report.rejected:
        print(f"rejected {rejection.descriptor.name}: {rejection.reason}", file=sys.stderr)

    if args.report:
        with open(args.report, "w", encoding="utf-8", newline="") as f:
            ReportExporter().export(report.documents, f, ReportLayout.BATCH)
        print(f"Wrote {args.report}")
    return 0 if not report.rejected else 1


def cmd_trends(service: TriageService, args: argparse.Namespace) -> int:
    documents = service.history(include_all_owners=args.all)
    report = service.compute_trends(documents)
    insights = service.insights(documents)
    output = {
        "direction": report.direction.value,
        "days": [
            {
                "date": r.date.isoformat(),
                "documents": r.document_count,
                "average_confidence": round(r.average_confidence, 4),
                "authentic": r.authentic,
                "suspicious": r.suspicious,
                "fraudulent": r.fraudulent,
            }
            for r in report.rollups
        ],
        "overall_average_confidence": round(insights.overall_average_confidence, 4),
        "authentic_share": round(insights.authentic_share, 4),
        "blockchain_verified": insights.blockchain_verified,
    }
    print(json.dumps(output, indent=2))
    return 0


def cmd_export(service: TriageService, args: argparse.Namespace) -> int:
    layout = ReportLayout(args.layout)
    status = Verdict(args.status) if args.status != "all" else None
    documents = filter_documents(
        service.history(include_all_owners=args.all), search=args.search, status=status
    )
    documents = sort_documents(documents, SortKey(args.sort))
    output = Path(args.output or ReportExporter.default_filename(layout, date.today()))
    with output.open("w", encoding="utf-8", newline="") as f:
        rows = ReportExporter().export(documents, f, layout)
    print(f"Wrote {rows} rows to {output}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="docguard", description="Document fraud triage")
    sub = parser.add_subparsers(dest="command", required=True)

    login_p = sub.add_parser("login", help="Sign in and remember the identity")
    login_p.add_argument("email")
    login_p.add_argument("password")

    sub.add_parser("logout", help="Forget the signed-in identity")

    classify_p = sub.add_parser("classify", help="Analyze a single file")
    classify_p.add_argument("path")

    batch_p = sub.add_parser("batch", help="Analyze several files in order")
    batch_p.add_argument("paths", nargs="+")
    batch_p.add_argument("--report", help="Write a CSV of completed results")

    trends_p = sub.add_parser("trends", help="Daily confidence rollups and trend direction")
    trends_p.add_argument("--all", action="store_true", help="Include every owner")

    export_p = sub.add_parser("export", help="Write the document history as CSV")
    export_p.add_argument(
        "--layout", choices=[layout.value for layout in ReportLayout], default="history"
    )
    export_p.add_argument("--status", choices=["all", *[v.value for v in Verdict]], default="all")
    export_p.add_argument("--search", default="")
    export_p.add_argument("--sort", choices=[k.value for k in SortKey], default="date")
    export_p.add_argument("--output")
    export_p.add_argument("--all", action="store_true", help="Include every owner")

    return parser


COMMANDS = {
    "login": cmd_login,
    "logout": cmd_logout,
    "classify": cmd_classify,
    "batch": cmd_batch,
    "trends": cmd_trends,
    "export": cmd_export,
}


def main(argv: list[str] | None = None) -> int:
    """Entry point: settings -> logging -> service -> command."""
    args = build_parser().parse_args(argv)
    try:
        settings = Settings()
    except pydantic.ValidationError as exc:
        print(f"error: invalid configuration: {exc}", file=sys.stderr)
        return 2
    Log.configure(settings.log_level, stream=sys.stderr)

    try:
        service = build_service(settings)
        return COMMANDS[args.command](service, args)
    except (ValidationError, AuthenticationError, FileNotFoundError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except AnalysisFailure as exc:
        print(f"error: {exc} (retry the upload)", file=sys.stderr)
        return 3
    finally:
        close_pool()


if __name__ == "__main__":
    sys.exit(main())
