"""Agri Advisor CLI — generate advisory reports and render advisory text offline."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from agriadvisor.config import settings
from agriadvisor.core.errors import UpstreamError
from agriadvisor.core.types import FarmProfile
from agriadvisor.observability.logging import TEXT_FORMAT
from agriadvisor.observability.tracing import init_tracing


def _setup_cli_logging() -> None:
    logging.basicConfig(level=logging.INFO, format=TEXT_FORMAT)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agri-advisor",
        description="Generate a farm advisory report PDF for one farm profile.",
    )
    parser.add_argument("--location", required=True, help="District or town, e.g. Guntur")
    parser.add_argument("--land-size", required=True, help="e.g. '5 acres'")
    parser.add_argument("--land-type", required=True, help="Soil type, e.g. 'Black soil'")
    parser.add_argument("--season", required=True, help="e.g. Kharif")
    parser.add_argument("--water", required=True, dest="water_facility", help="e.g. 'Borewell'")
    parser.add_argument("--duration", required=True, help="Crop duration preference, e.g. '3-4 months'")
    parser.add_argument("--land-health", default="", help="Soil health notes")
    parser.add_argument("--language", default="en", help="Target language code (default: en)")
    parser.add_argument("--api-key", default=None, help="Translation API key")
    parser.add_argument(
        "-o", "--output", default="farm_advisory_report.pdf", help="Output PDF path",
    )
    return parser


def main() -> None:
    """Generate a report: agri-advisor --location ... -o report.pdf"""
    _setup_cli_logging()
    args = _build_parser().parse_args()
    init_tracing(settings.mlflow_tracking_uri, settings.mlflow_experiment_name)

    profile = FarmProfile(
        location=args.location,
        land_size=args.land_size,
        land_type=args.land_type,
        season=args.season,
        water_facility=args.water_facility,
        duration=args.duration,
        land_health=args.land_health,
        language=args.language,
        user_id="cli",
    )

    try:
        output = asyncio.run(_generate_report(profile, args.api_key, Path(args.output)))
    except UpstreamError as e:
        print(f"Report generation failed: {e.message}", file=sys.stderr)
        sys.exit(1)

    print(f"Report written to {output}")


async def _generate_report(profile: FarmProfile, api_key: str | None, output: Path) -> Path:
    """Farm profile → Gemini → (translation) → PDF on disk, tracked as an MLflow run."""
    from agriadvisor.observability.prompts import get_prompt_version, log_prompt_to_run
    from agriadvisor.observability.tracing import log_artifact, log_params, start_run
    from agriadvisor.pipeline.advisory import generate_advisory_report
    from agriadvisor.render.pdf import render_report

    print("\nAgri Advisor — Farm Advisory Report")
    print(f"{'=' * 50}")
    print(f"Location: {profile.location}  |  Soil: {profile.land_type}  |  Language: {profile.language}\n")

    with start_run(run_name=f"report-{profile.location}"):
        log_params({
            "location": profile.location,
            "land_type": profile.land_type,
            "language": profile.language,
            "prompt_version": get_prompt_version("farm_advisory"),
        })
        log_prompt_to_run("farm_advisory")

        title, result = await generate_advisory_report(profile, api_key=api_key)
        output.write_bytes(render_report(title, result))
        log_artifact(str(output))

    return output


def render_main() -> None:
    """Render advisory text to PDF offline: agri-advisor-render <input.txt> [output.pdf]"""
    _setup_cli_logging()

    if len(sys.argv) < 2 or sys.argv[1] == "--help":
        print("Usage: agri-advisor-render <input.txt> [output.pdf] [--title TITLE]")
        print("  Example: agri-advisor-render advisory.md")
        print('  Example: agri-advisor-render advisory.md report.pdf --title "Rabi Plan"')
        sys.exit(0 if sys.argv[1:] == ["--help"] else 1)

    from agriadvisor.pipeline.advisory import REPORT_TITLE
    from agriadvisor.render.pdf import render_report

    argv = sys.argv[1:]
    title = REPORT_TITLE
    if "--title" in argv:
        i = argv.index("--title")
        if i + 1 >= len(argv):
            print("--title needs a value")
            sys.exit(1)
        title = argv[i + 1]
        del argv[i:i + 2]

    source = Path(argv[0])
    output = Path(argv[1]) if len(argv) > 1 else source.with_suffix(".pdf")
    output.write_bytes(render_report(title, source.read_text(encoding="utf-8")))
    print(f"Rendered {source} → {output}")
